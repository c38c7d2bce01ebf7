"""Response models for GeminiEngine."""

from typing import Optional

from pydantic import Field

from geminiengine.models.requests import Content, WireModel


class TokenDetail(WireModel):
    """Token count for one modality."""

    modality: Optional[str] = None
    token_count: Optional[int] = None


class UsageMetadata(WireModel):
    """Token accounting for a generation call."""

    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0
    prompt_tokens_details: Optional[list[TokenDetail]] = None
    candidates_tokens_details: Optional[list[TokenDetail]] = None


class Candidate(WireModel):
    """A single generated candidate."""

    content: Optional[Content] = None
    finish_reason: Optional[str] = None
    avg_logprobs: Optional[float] = None


class GenerateContentResponse(WireModel):
    """Response of the ``generateContent`` endpoint."""

    candidates: list[Candidate] = Field(default_factory=list)
    usage_metadata: Optional[UsageMetadata] = None
    model_version: Optional[str] = None

    @property
    def text(self) -> Optional[str]:
        """Concatenated text parts of the first candidate, if any."""
        if not self.candidates or self.candidates[0].content is None:
            return None
        texts = [part.text for part in self.candidates[0].content.parts if part.text]
        return "".join(texts) if texts else None


class CountTokensResponse(WireModel):
    """Response of the ``countTokens`` endpoint."""

    total_tokens: int = Field(..., ge=0)


class ContentEmbedding(WireModel):
    """A single embedding vector."""

    values: list[float] = Field(default_factory=list)


class EmbeddingResponse(WireModel):
    """Response of the ``embedContent`` endpoint."""

    embedding: ContentEmbedding


class ModelInfo(WireModel):
    """Model metadata returned by ``GET {base_url}{model}``."""

    name: str
    version: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None
    input_token_limit: Optional[int] = None
    output_token_limit: Optional[int] = None
    supported_generation_methods: list[str] = Field(default_factory=list)
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
