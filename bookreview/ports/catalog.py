"""Catalog port — read access to users, books and reviews."""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from bookreview.domain.entities import CandidateBook, Genre, UserProfile


class CatalogPort(ABC):
    """Abstraction over the book/user/review stores the recommender reads."""

    @abstractmethod
    async def find_user_profile(self, user_id: UUID) -> Optional[UserProfile]:
        """Return the user's profile, or None if the user does not exist."""
        ...

    @abstractmethod
    async def find_reviewed_book_ids(self, user_id: UUID) -> set[UUID]:
        """Return the ids of every book the user has reviewed (unbounded)."""
        ...

    @abstractmethod
    async def find_reviewed_books(
        self, user_id: UUID, max_count: int
    ) -> list[CandidateBook]:
        """Return up to ``max_count`` books the user has reviewed, newest first."""
        ...

    @abstractmethod
    async def find_top_rated_books(
        self, min_rating: float, min_review_count: int, max_results: int
    ) -> list[CandidateBook]:
        """Return books meeting both floors, best rated first."""
        ...

    @abstractmethod
    async def find_books_by_genre(
        self, genre: Genre, max_results: int
    ) -> list[CandidateBook]:
        """Return books tagged with ``genre``, best rated first."""
        ...

    @abstractmethod
    async def find_books_by_titles(self, titles: list[str]) -> list[CandidateBook]:
        """Resolve titles (case-insensitive) to books, in the order given."""
        ...
