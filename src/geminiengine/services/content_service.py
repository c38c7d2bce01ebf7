"""Content service: thin helpers over the execute() contract.

Covers the utility endpoints (generateContent, countTokens, embedContent and
model metadata). Payload assembly beyond a single text part is the caller's
job: pass a prebuilt GenerateContentRequest to generate_content().
"""

import asyncio
import logging

from geminiengine.exceptions import ArgumentError, GeminiError
from geminiengine.interfaces import IApiExecutor
from geminiengine.models.requests import (
    Content,
    CountTokensRequest,
    EmbedContentRequest,
    Endpoint,
    GenerateContentRequest,
)
from geminiengine.models.responses import (
    CountTokensResponse,
    EmbeddingResponse,
    GenerateContentResponse,
    ModelInfo,
)

logger = logging.getLogger(__name__)

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_EMBEDDING_MODEL = "text-embedding-004"


def _require_text(value: str | None, name: str) -> str:
    if value is None or not value.strip():
        raise ArgumentError(f"{name} cannot be empty")
    return value


class ContentService:
    """Generation and utility calls routed through an IApiExecutor."""

    def __init__(self, api_client: IApiExecutor, default_model: str | None = None):
        """
        Args:
            api_client: Executor implementing the execute()/get() contract
            default_model: Model used when a call passes none
        """
        if api_client is None:
            raise ArgumentError("api_client is required")
        self.api_client = api_client
        self.default_model = default_model or DEFAULT_TEXT_MODEL

    async def generate_content(
        self,
        request: GenerateContentRequest,
        model: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> GenerateContentResponse:
        """Send a caller-built generateContent request."""
        model = model or self.default_model
        try:
            response = await self.api_client.execute(
                model,
                Endpoint.GENERATE_CONTENT.value,
                request,
                GenerateContentResponse,
                cancel_event=cancel_event,
            )
        except GeminiError as e:
            logger.error(f"❌ [ContentService] generateContent failed for {model}: {e}")
            raise

        usage = response.usage_metadata
        logger.info(
            f"✅ [ContentService] generateContent for {model}: {len(response.candidates)} candidate(s), "
            f"{usage.total_token_count if usage else 0} tokens"
        )
        return response

    async def generate_text(
        self,
        prompt: str,
        model: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> GenerateContentResponse:
        """Generate from a single text prompt."""
        _require_text(prompt, "prompt")
        request = GenerateContentRequest(contents=[Content.from_text(prompt, role="user")])
        return await self.generate_content(request, model=model, cancel_event=cancel_event)

    async def count_tokens(self, text: str, model: str | None = None) -> CountTokensResponse:
        """Count the tokens ``text`` costs on ``model``."""
        _require_text(text, "text")
        model = model or self.default_model
        request = CountTokensRequest(contents=[Content.from_text(text)])
        response = await self.api_client.execute(
            model, Endpoint.COUNT_TOKENS.value, request, CountTokensResponse
        )
        logger.debug(f"📊 [ContentService] {model} counted {response.total_tokens} tokens")
        return response

    async def embed_content(self, text: str, model: str | None = None) -> EmbeddingResponse:
        """Embed ``text`` (defaults to the embedding model, not the text model)."""
        _require_text(text, "text")
        model = model or DEFAULT_EMBEDDING_MODEL
        request = EmbedContentRequest(content=Content.from_text(text))
        return await self.api_client.execute(
            model, Endpoint.EMBED_CONTENT.value, request, EmbeddingResponse
        )

    async def get_model_info(self, model: str) -> ModelInfo:
        """Look up model metadata."""
        _require_text(model, "model")
        return await self.api_client.get(model, ModelInfo)
