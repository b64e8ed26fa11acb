"""Recommendation orchestrator: runs strategies in priority order and merges results."""

import logging
from collections.abc import Sequence
from uuid import UUID

from bookreview.domain.entities import Recommendation, RecommendationRequest
from bookreview.domain.errors import NotFoundError
from bookreview.ports.catalog import CatalogPort
from bookreview.ports.recommender import AIRecommenderPort, RecommenderPort
from bookreview.services.strategies import (
    AIPoweredStrategy,
    GenreBasedStrategy,
    RecommendationState,
    Strategy,
    StrategyContext,
    TopRatedStrategy,
)

logger = logging.getLogger(__name__)


class RecommendationService(RecommenderPort):
    """
    Multi-strategy recommender.

    Strategies run strictly in sequence because each one must exclude the
    books emitted before it. The result never contains a book the user has
    reviewed, never repeats a book, and never exceeds ``request.limit``.
    """

    def __init__(self, catalog: CatalogPort, strategies: Sequence[Strategy]) -> None:
        self._catalog = catalog
        self._strategies = tuple(strategies)

    @classmethod
    def default(
        cls,
        catalog: CatalogPort,
        ai_provider: AIRecommenderPort,
        ai_timeout: float = 10.0,
        ai_context_books: int = 50,
    ) -> "RecommendationService":
        """Build the service with TOP_RATED -> GENRE_SIMILARITY -> AI_POWERED."""
        return cls(
            catalog,
            [
                TopRatedStrategy(catalog),
                GenreBasedStrategy(catalog),
                AIPoweredStrategy(
                    catalog, ai_provider, timeout=ai_timeout, context_size=ai_context_books
                ),
            ],
        )

    async def recommend(
        self, user_id: UUID, request: RecommendationRequest
    ) -> list[Recommendation]:
        logger.info("Getting recommendations for user %s with %s", user_id, request)

        profile = await self._catalog.find_user_profile(user_id)
        if profile is None:
            raise NotFoundError(f"User not found: {user_id}")

        if request.limit <= 0:
            return []

        excluded = await self._catalog.find_reviewed_book_ids(user_id)
        context = StrategyContext(user_id=user_id, profile=profile, request=request)
        state = await self._run(
            context, RecommendationState(excluded=frozenset(excluded)), self._strategies
        )
        return list(state.collected[: request.limit])

    async def top_rated(self, request: RecommendationRequest) -> list[Recommendation]:
        """Anonymous top-rated listing: no profile, no exclusions, no user id."""
        if request.limit <= 0:
            return []
        top_rated = [s for s in self._strategies if isinstance(s, TopRatedStrategy)]
        context = StrategyContext(user_id=None, profile=None, request=request)
        state = await self._run(context, RecommendationState(), top_rated)
        return list(state.collected[: request.limit])

    @staticmethod
    async def _run(
        context: StrategyContext,
        state: RecommendationState,
        strategies: Sequence[Strategy],
    ) -> RecommendationState:
        for strategy in strategies:
            if not strategy.is_enabled(context.request):
                logger.debug("%s disabled by request", strategy.kind.value)
                continue
            if state.remaining(context.request.limit) == 0:
                break
            state = await strategy.step(context, state)
        return state
