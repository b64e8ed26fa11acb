import asyncio
import logging

from bookreview.domain.entities import CandidateBook, Genre, UserProfile
from bookreview.ports.catalog import CatalogPort
from bookreview.ports.recommender import AIRecommenderPort

logger = logging.getLogger(__name__)


class MockAIRecommender(AIRecommenderPort):
    """
    Mock AI recommender for development and tests without API access.

    Deterministically suggests the catalog's best-rated books in the reader's
    genres (or, lacking any, in the genres of the books they have read),
    skipping the books given as context. Simulates provider latency and is
    available unless disabled by configuration.
    """

    def __init__(
        self, catalog: CatalogPort, latency: float = 0.3, enabled: bool = True
    ) -> None:
        self._catalog = catalog
        self._latency = latency
        self._enabled = enabled

    def is_available(self) -> bool:
        return self._enabled

    async def get_recommendations(
        self,
        profile: UserProfile,
        context_books: list[CandidateBook],
        max_results: int,
    ) -> list[CandidateBook]:
        if self._latency:
            await asyncio.sleep(self._latency)  # simulate provider latency
        logger.info(
            "MockAI: get_recommendations called (%d context books, max=%d)",
            len(context_books),
            max_results,
        )
        if max_results <= 0:
            return []

        genres = profile.preferred_genres | profile.favorite_genres
        if not genres:
            genres = frozenset(g for book in context_books for g in book.genres)
        read_ids = {book.id for book in context_books}

        picks: list[CandidateBook] = []
        seen: set = set()
        for genre in Genre:
            if genre not in genres:
                continue
            for book in await self._catalog.find_books_by_genre(
                genre, max_results + len(read_ids)
            ):
                if book.id in read_ids or book.id in seen:
                    continue
                seen.add(book.id)
                picks.append(book)

        picks.sort(key=lambda b: (-b.average_rating, -b.total_reviews, b.title))
        return picks[:max_results]


class DisabledAIRecommender(AIRecommenderPort):
    """Stand-in used when no AI provider is configured."""

    def is_available(self) -> bool:
        return False

    async def get_recommendations(
        self,
        profile: UserProfile,
        context_books: list[CandidateBook],
        max_results: int,
    ) -> list[CandidateBook]:
        return []
