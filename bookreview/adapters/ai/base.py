"""Shared flow for LLM-backed recommenders: prompt, generate, parse, resolve."""

import logging
from abc import abstractmethod

from bookreview.domain.entities import CandidateBook, UserProfile
from bookreview.domain.errors import CollaboratorError
from bookreview.ports.catalog import CatalogPort
from bookreview.ports.recommender import AIRecommenderPort
from bookreview.prompts.templates import (
    RECOMMEND_BOOKS,
    parse_recommended_titles,
    render_recommendation_prompt,
)

logger = logging.getLogger(__name__)


class LLMRecommender(AIRecommenderPort):
    """
    Base class for recommenders that ask a language model for titles.

    Suggested titles are resolved against the catalog; titles the catalog does
    not carry are dropped, so every returned book is recommendable.
    """

    def __init__(self, catalog: CatalogPort, enabled: bool) -> None:
        self._catalog = catalog
        self._enabled = enabled

    def is_available(self) -> bool:
        return self._enabled

    @abstractmethod
    async def _generate(self, system: str, user: str, max_tokens: int) -> str:
        """Send one chat completion and return the raw text."""
        ...

    async def get_recommendations(
        self,
        profile: UserProfile,
        context_books: list[CandidateBook],
        max_results: int,
    ) -> list[CandidateBook]:
        if not self.is_available() or max_results <= 0:
            return []

        prompt = render_recommendation_prompt(profile, context_books, max_results)
        raw = await self._generate(
            prompt["system"], prompt["user"], RECOMMEND_BOOKS.max_tokens
        )
        try:
            titles = parse_recommended_titles(raw)
        except ValueError as exc:
            raise CollaboratorError(f"Unparseable AI recommendation response: {exc}") from exc

        books = await self._catalog.find_books_by_titles(titles)
        logger.info(
            "AI suggested %d title(s), %d found in catalog", len(titles), len(books)
        )
        return books[:max_results]
