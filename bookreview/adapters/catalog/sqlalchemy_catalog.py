"""SQLAlchemy-backed catalog adapter."""

import logging
from collections.abc import Awaitable, Callable
from typing import Optional, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bookreview.domain.entities import CandidateBook, Genre, UserProfile
from bookreview.domain.errors import CollaboratorError
from bookreview.domain.models import Book, BookGenre, Review, User
from bookreview.ports.catalog import CatalogPort

logger = logging.getLogger(__name__)

T = TypeVar("T")


def to_candidate(book: Book) -> CandidateBook:
    """Project an ORM book onto the read-only candidate view."""
    return CandidateBook(
        id=book.id,
        title=book.title,
        author=book.author,
        genres=frozenset(g.genre for g in book.genres),
        average_rating=float(book.average_rating or 0.0),
        total_reviews=book.total_reviews or 0,
        description=book.description,
        published_year=book.published_year,
    )


class SqlAlchemyCatalogAdapter(CatalogPort):
    """Read books, users and reviews through short-lived async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _run(self, operation: str, query: Callable[[AsyncSession], Awaitable[T]]) -> T:
        try:
            async with self._session_factory() as session:
                return await query(session)
        except SQLAlchemyError as exc:
            logger.error("Catalog %s failed: %s", operation, exc)
            raise CollaboratorError(f"Catalog lookup '{operation}' failed") from exc

    async def find_user_profile(self, user_id: UUID) -> Optional[UserProfile]:
        async def query(session: AsyncSession) -> Optional[UserProfile]:
            user = await session.get(User, user_id)
            if user is None:
                return None
            return UserProfile(
                id=user.id,
                preferred_genres=frozenset(p.genre for p in user.preferred_genres),
                favorite_genres=frozenset(
                    g.genre for book in user.favorite_books for g in book.genres
                ),
                bio=user.bio,
            )

        return await self._run("find_user_profile", query)

    async def find_reviewed_book_ids(self, user_id: UUID) -> set[UUID]:
        async def query(session: AsyncSession) -> set[UUID]:
            result = await session.execute(
                select(Review.book_id).where(Review.user_id == user_id)
            )
            return set(result.scalars().all())

        return await self._run("find_reviewed_book_ids", query)

    async def find_reviewed_books(
        self, user_id: UUID, max_count: int
    ) -> list[CandidateBook]:
        async def query(session: AsyncSession) -> list[CandidateBook]:
            result = await session.execute(
                select(Book)
                .join(Review, Review.book_id == Book.id)
                .where(Review.user_id == user_id)
                .order_by(Review.created_at.desc(), Book.id)
                .limit(max_count)
            )
            return [to_candidate(b) for b in result.scalars().all()]

        return await self._run("find_reviewed_books", query)

    async def find_top_rated_books(
        self, min_rating: float, min_review_count: int, max_results: int
    ) -> list[CandidateBook]:
        async def query(session: AsyncSession) -> list[CandidateBook]:
            result = await session.execute(
                select(Book)
                .where(
                    Book.average_rating >= min_rating,
                    Book.total_reviews >= min_review_count,
                )
                .order_by(Book.average_rating.desc(), Book.total_reviews.desc(), Book.id)
                .limit(max_results)
            )
            return [to_candidate(b) for b in result.scalars().all()]

        return await self._run("find_top_rated_books", query)

    async def find_books_by_genre(
        self, genre: Genre, max_results: int
    ) -> list[CandidateBook]:
        async def query(session: AsyncSession) -> list[CandidateBook]:
            result = await session.execute(
                select(Book)
                .join(BookGenre, BookGenre.book_id == Book.id)
                .where(BookGenre.genre == genre)
                .order_by(Book.average_rating.desc(), Book.total_reviews.desc(), Book.id)
                .limit(max_results)
            )
            return [to_candidate(b) for b in result.scalars().all()]

        return await self._run("find_books_by_genre", query)

    async def find_books_by_titles(self, titles: list[str]) -> list[CandidateBook]:
        wanted = [t.strip().lower() for t in titles if t and t.strip()]
        if not wanted:
            return []

        async def query(session: AsyncSession) -> list[CandidateBook]:
            result = await session.execute(
                select(Book).where(func.lower(Book.title).in_(wanted)).order_by(Book.id)
            )
            by_title: dict[str, Book] = {}
            for book in result.scalars().all():
                by_title.setdefault(book.title.lower(), book)
            ordered: list[CandidateBook] = []
            for title in dict.fromkeys(wanted):
                if title in by_title:
                    ordered.append(to_candidate(by_title[title]))
            return ordered

        return await self._run("find_books_by_titles", query)
