import logging

from openai import AsyncOpenAI, OpenAIError

from bookreview.adapters.ai.base import LLMRecommender
from bookreview.domain.errors import CollaboratorError
from bookreview.ports.catalog import CatalogPort

logger = logging.getLogger(__name__)


class OpenAIRecommender(LLMRecommender):
    """AI recommender using the OpenAI API (GPT-4o, GPT-4o-mini, etc.)."""

    def __init__(
        self,
        catalog: CatalogPort,
        api_key: str,
        model: str,
        enabled: bool = True,
        client: AsyncOpenAI | None = None,
    ) -> None:
        super().__init__(catalog, enabled=enabled and bool(api_key))
        self._model = model
        self._client = client
        if self._client is None and self.is_available():
            self._client = AsyncOpenAI(api_key=api_key)

    async def _generate(self, system: str, user: str, max_tokens: int) -> str:
        """Send a chat completion request to OpenAI."""
        logger.info("OpenAI request: model=%s, max_tokens=%d", self._model, max_tokens)
        try:
            resp = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                max_tokens=max_tokens,
                temperature=0.7,
            )
        except OpenAIError as exc:
            raise CollaboratorError(f"OpenAI request failed: {exc}") from exc
        result = resp.choices[0].message.content or ""
        logger.info("OpenAI response: %d chars", len(result))
        return result
