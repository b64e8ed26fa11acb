"""
Recommendation strategies.

Each strategy is one step of a fold over ``RecommendationState``: it receives
the recommendations collected so far together with the ids that must not be
emitted, and returns a new state with its own picks appended. Strategies never
mutate the state they are given.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from bookreview.domain.entities import (
    CandidateBook,
    Genre,
    Recommendation,
    RecommendationRequest,
    RecommendationStrategy,
    UserProfile,
)
from bookreview.domain.errors import CollaboratorError
from bookreview.ports.catalog import CatalogPort
from bookreview.ports.recommender import AIRecommenderPort
from bookreview.services.scoring import (
    AI_REASON,
    AI_SCORE,
    genre_reason,
    genre_score,
    top_rated_reason,
    top_rated_score,
)

logger = logging.getLogger(__name__)

TOP_RATED_CAP = 5
FETCH_MULTIPLIER = 2
FALLBACK_GENRES = frozenset({Genre.FICTION, Genre.MYSTERY, Genre.ROMANCE})


@dataclass(frozen=True)
class StrategyContext:
    """Per-request inputs shared by every strategy step."""

    user_id: Optional[UUID]
    profile: Optional[UserProfile]
    request: RecommendationRequest
    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class RecommendationState:
    """Immutable accumulator threaded through the strategy fold."""

    collected: tuple[Recommendation, ...] = ()
    emitted_ids: frozenset[UUID] = frozenset()
    excluded: frozenset[UUID] = frozenset()

    def remaining(self, limit: int) -> int:
        return max(limit - len(self.collected), 0)

    def is_blocked(self, book_id: UUID) -> bool:
        return book_id in self.excluded or book_id in self.emitted_ids

    def extend(self, recommendations: Iterable[Recommendation]) -> "RecommendationState":
        recommendations = tuple(recommendations)
        return replace(
            self,
            collected=self.collected + recommendations,
            emitted_ids=self.emitted_ids | {r.book.id for r in recommendations},
        )


class Strategy(ABC):
    """A single recommendation algorithm, run in fixed priority order."""

    kind: RecommendationStrategy

    @abstractmethod
    def is_enabled(self, request: RecommendationRequest) -> bool:
        """Whether the request asks for this strategy."""
        ...

    @abstractmethod
    async def collect(
        self, context: StrategyContext, state: RecommendationState, budget: int
    ) -> list[Recommendation]:
        """Return at most ``budget`` new recommendations, none of them blocked."""
        ...

    async def step(
        self, context: StrategyContext, state: RecommendationState
    ) -> RecommendationState:
        budget = state.remaining(context.request.limit)
        if budget == 0:
            logger.debug("%s skipped: budget exhausted", self.kind.value)
            return state
        picks = await self.collect(context, state, budget)
        logger.info(
            "%s contributed %d recommendation(s) for user %s",
            self.kind.value,
            len(picks),
            context.user_id,
        )
        return state.extend(picks)

    def _recommend(
        self,
        context: StrategyContext,
        book: CandidateBook,
        reason: str,
        score: float,
    ) -> Recommendation:
        return Recommendation(
            user_id=context.user_id,
            book=book,
            strategy=self.kind,
            reason=reason,
            score=score,
            created_at=context.now,
        )


class TopRatedStrategy(Strategy):
    """Books above the request's rating and review-count floors."""

    kind = RecommendationStrategy.TOP_RATED

    def __init__(self, catalog: CatalogPort) -> None:
        self._catalog = catalog

    def is_enabled(self, request: RecommendationRequest) -> bool:
        return request.include_top_rated

    async def collect(
        self, context: StrategyContext, state: RecommendationState, budget: int
    ) -> list[Recommendation]:
        request = context.request
        candidates = await self._catalog.find_top_rated_books(
            request.min_rating,
            request.min_review_count,
            FETCH_MULTIPLIER * budget,
        )
        take = min(TOP_RATED_CAP, budget)
        picks: list[Recommendation] = []
        seen: set[UUID] = set()
        for book in candidates:
            if len(picks) >= take:
                break
            if state.is_blocked(book.id) or book.id in seen:
                continue
            seen.add(book.id)
            picks.append(
                self._recommend(context, book, top_rated_reason(book), top_rated_score(book))
            )
        return picks


class GenreBasedStrategy(Strategy):
    """
    Books from genres the user prefers or has favorited.

    Genres are visited in ``Genre`` declaration order. Only the review-count
    floor applies here; the rating floor belongs to the top-rated strategy.
    """

    kind = RecommendationStrategy.GENRE_SIMILARITY

    def __init__(self, catalog: CatalogPort) -> None:
        self._catalog = catalog

    def is_enabled(self, request: RecommendationRequest) -> bool:
        return request.include_genre_based

    @staticmethod
    def candidate_genres(profile: UserProfile) -> list[Genre]:
        genres = profile.preferred_genres | profile.favorite_genres
        if not genres:
            logger.debug("No genre signal for user %s, using fallback genres", profile.id)
            genres = FALLBACK_GENRES
        return [genre for genre in Genre if genre in genres]

    async def collect(
        self, context: StrategyContext, state: RecommendationState, budget: int
    ) -> list[Recommendation]:
        profile = context.profile
        min_reviews = context.request.min_review_count
        picks: list[Recommendation] = []
        seen: set[UUID] = set()

        for genre in self.candidate_genres(profile):
            remaining = budget - len(picks)
            if remaining <= 0:
                break
            # Over-fetch by the blocked count so exclusions cannot starve the genre
            blocked = len(state.excluded) + len(state.emitted_ids) + len(seen)
            candidates = await self._catalog.find_books_by_genre(
                genre, FETCH_MULTIPLIER * remaining + blocked
            )
            for book in candidates:
                if len(picks) >= budget:
                    break
                if state.is_blocked(book.id) or book.id in seen:
                    continue
                if book.total_reviews < min_reviews:
                    continue
                seen.add(book.id)
                picks.append(
                    self._recommend(
                        context,
                        book,
                        genre_reason(genre),
                        genre_score(book, genre, profile),
                    )
                )
        return picks


class AIPoweredStrategy(Strategy):
    """
    Pass-through to an external AI recommender.

    An unavailable provider or a provider call that exceeds ``timeout``
    contributes nothing; any other provider failure surfaces as a
    CollaboratorError.
    """

    kind = RecommendationStrategy.AI_POWERED

    def __init__(
        self,
        catalog: CatalogPort,
        provider: AIRecommenderPort,
        timeout: float = 10.0,
        context_size: int = 50,
    ) -> None:
        self._catalog = catalog
        self._provider = provider
        self._timeout = timeout
        self._context_size = context_size

    def is_enabled(self, request: RecommendationRequest) -> bool:
        return request.include_ai_powered

    async def collect(
        self, context: StrategyContext, state: RecommendationState, budget: int
    ) -> list[Recommendation]:
        if not self._provider.is_available():
            logger.warning("AI recommender unavailable, skipping AI strategy")
            return []

        read_books = await self._catalog.find_reviewed_books(
            context.profile.id, self._context_size
        )
        try:
            candidates = await asyncio.wait_for(
                self._provider.get_recommendations(
                    context.profile, read_books, FETCH_MULTIPLIER * budget
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "AI recommender timed out after %.1fs, treating as unavailable",
                self._timeout,
            )
            return []
        except CollaboratorError:
            raise
        except Exception as exc:
            raise CollaboratorError(f"AI recommender failed: {exc}") from exc

        picks: list[Recommendation] = []
        seen: set[UUID] = set()
        for book in candidates:
            if len(picks) >= budget:
                break
            if state.is_blocked(book.id) or book.id in seen:
                continue
            seen.add(book.id)
            picks.append(self._recommend(context, book, AI_REASON, AI_SCORE))
        return picks
