import logging

import httpx

from bookreview.adapters.ai.base import LLMRecommender
from bookreview.domain.errors import CollaboratorError
from bookreview.ports.catalog import CatalogPort

logger = logging.getLogger(__name__)


class OllamaRecommender(LLMRecommender):
    """AI recommender using a local Ollama instance."""

    def __init__(
        self,
        catalog: CatalogPort,
        base_url: str,
        model: str,
        enabled: bool = True,
        timeout: float = 180.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(catalog, enabled=enabled)
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._timeout = timeout
        self._transport = transport

    async def _generate(self, system: str, user: str, max_tokens: int) -> str:
        """Send a chat completion request to Ollama."""
        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "stream": False,
            "format": "json",
            "options": {"num_predict": max_tokens},
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                logger.info("Ollama request: model=%s, max_tokens=%d", self._model, max_tokens)
                resp = await client.post(f"{self._base_url}/api/chat", json=payload)
                resp.raise_for_status()
                result = resp.json()["message"]["content"]
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            raise CollaboratorError(f"Ollama request failed: {exc}") from exc
        logger.info("Ollama response: %d chars", len(result))
        return result
