import asyncio
from collections.abc import AsyncGenerator
from typing import Optional
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from bookreview.domain.entities import CandidateBook, Genre, UserProfile
from bookreview.domain.models import Base
from bookreview.ports.catalog import CatalogPort
from bookreview.ports.recommender import AIRecommenderPort


def make_book(
    title: str,
    rating: float = 4.0,
    reviews: int = 50,
    genres: tuple[Genre, ...] = (Genre.FICTION,),
    author: str = "Some Author",
) -> CandidateBook:
    return CandidateBook(
        id=uuid4(),
        title=title,
        author=author,
        genres=frozenset(genres),
        average_rating=rating,
        total_reviews=reviews,
    )


class FakeCatalog(CatalogPort):
    """In-memory catalog. Orders results best rated first, like the real adapter."""

    def __init__(
        self,
        books: Optional[list[CandidateBook]] = None,
        profiles: Optional[list[UserProfile]] = None,
        reviewed: Optional[dict[UUID, list[UUID]]] = None,
    ) -> None:
        self.books = list(books or [])
        self.profiles = {p.id: p for p in profiles or []}
        self.reviewed = reviewed or {}
        self.top_rated_override: Optional[list[CandidateBook]] = None
        self.calls: list[tuple] = []

    def _ranked(self, books: list[CandidateBook]) -> list[CandidateBook]:
        return sorted(books, key=lambda b: (-b.average_rating, -b.total_reviews))

    async def find_user_profile(self, user_id):
        self.calls.append(("find_user_profile", user_id))
        return self.profiles.get(user_id)

    async def find_reviewed_book_ids(self, user_id):
        self.calls.append(("find_reviewed_book_ids", user_id))
        return set(self.reviewed.get(user_id, []))

    async def find_reviewed_books(self, user_id, max_count):
        self.calls.append(("find_reviewed_books", user_id, max_count))
        ids = self.reviewed.get(user_id, [])
        by_id = {b.id: b for b in self.books}
        return [by_id[i] for i in ids if i in by_id][:max_count]

    async def find_top_rated_books(self, min_rating, min_review_count, max_results):
        self.calls.append(("find_top_rated_books", min_rating, min_review_count, max_results))
        if self.top_rated_override is not None:
            return self.top_rated_override[:max_results]
        matching = [
            b
            for b in self.books
            if b.average_rating >= min_rating and b.total_reviews >= min_review_count
        ]
        return self._ranked(matching)[:max_results]

    async def find_books_by_genre(self, genre, max_results):
        self.calls.append(("find_books_by_genre", genre, max_results))
        return self._ranked([b for b in self.books if genre in b.genres])[:max_results]

    async def find_books_by_titles(self, titles):
        self.calls.append(("find_books_by_titles", tuple(titles)))
        by_title = {b.title.lower(): b for b in self.books}
        return [by_title[t.lower()] for t in titles if t.lower() in by_title]

    def calls_to(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


class FakeAIRecommender(AIRecommenderPort):
    def __init__(
        self,
        books: Optional[list[CandidateBook]] = None,
        available: bool = True,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ) -> None:
        self.books = list(books or [])
        self.available = available
        self.error = error
        self.delay = delay
        self.calls: list[tuple] = []

    def is_available(self) -> bool:
        return self.available

    async def get_recommendations(self, profile, context_books, max_results):
        self.calls.append((profile.id, len(context_books), max_results))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.books[:max_results]


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """A fresh SQLite database per test with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()
