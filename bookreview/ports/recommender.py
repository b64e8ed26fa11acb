"""Recommender ports — the engine's upward contract and the AI provider seam."""

from abc import ABC, abstractmethod
from uuid import UUID

from bookreview.domain.entities import (
    CandidateBook,
    Recommendation,
    RecommendationRequest,
    UserProfile,
)


class RecommenderPort(ABC):
    """Abstraction for the book recommendation engine."""

    @abstractmethod
    async def recommend(
        self,
        user_id: UUID,
        request: RecommendationRequest,
    ) -> list[Recommendation]:
        """Return at most ``request.limit`` recommendations for a user."""
        ...


class AIRecommenderPort(ABC):
    """Abstraction for an external AI book recommender."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider is configured and may be called."""
        ...

    @abstractmethod
    async def get_recommendations(
        self,
        profile: UserProfile,
        context_books: list[CandidateBook],
        max_results: int,
    ) -> list[CandidateBook]:
        """Return candidate books for the user. May legitimately be empty."""
        ...
