"""Select the AI recommender adapter from configuration."""

import logging

from bookreview.adapters.ai.mock import DisabledAIRecommender, MockAIRecommender
from bookreview.config import AIProvider, Settings
from bookreview.ports.catalog import CatalogPort
from bookreview.ports.recommender import AIRecommenderPort

logger = logging.getLogger(__name__)


def build_ai_recommender(settings: Settings, catalog: CatalogPort) -> AIRecommenderPort:
    provider = settings.ai_provider

    if provider == AIProvider.MOCK:
        return MockAIRecommender(catalog, enabled=settings.ai_enabled)

    if provider == AIProvider.OPENAI:
        from bookreview.adapters.ai.openai_adapter import OpenAIRecommender

        recommender = OpenAIRecommender(
            catalog,
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            enabled=settings.ai_enabled,
        )
        if not recommender.is_available():
            logger.warning("OpenAI integration is not enabled or API key is missing")
        return recommender

    if provider == AIProvider.OLLAMA:
        from bookreview.adapters.ai.ollama import OllamaRecommender

        return OllamaRecommender(
            catalog,
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            enabled=settings.ai_enabled,
        )

    return DisabledAIRecommender()
