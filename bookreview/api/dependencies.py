"""Composition root: wires adapters into the recommendation service."""

from functools import lru_cache

from bookreview.adapters.ai.factory import build_ai_recommender
from bookreview.adapters.catalog.sqlalchemy_catalog import SqlAlchemyCatalogAdapter
from bookreview.config import settings
from bookreview.database import async_session_factory
from bookreview.services.recommendation import RecommendationService


@lru_cache
def get_recommendation_service() -> RecommendationService:
    """Build the process-wide service. It holds no per-request state."""
    catalog = SqlAlchemyCatalogAdapter(async_session_factory)
    return RecommendationService.default(
        catalog,
        build_ai_recommender(settings, catalog),
        ai_timeout=settings.ai_timeout_seconds,
        ai_context_books=settings.ai_context_books,
    )
