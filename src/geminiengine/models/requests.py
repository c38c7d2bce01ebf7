"""Request models for GeminiEngine."""

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for payloads exchanged with the API (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ApiRequest(BaseModel):
    """A single logical call into the execution core."""

    model_config = ConfigDict(frozen=True)

    target_model: str = Field(..., description="Model name, e.g. gemini-2.5-flash")
    endpoint: Optional[str] = Field(None, description="Endpoint segment, e.g. generateContent")
    body: Any = Field(None, description="Serializable payload (pydantic model, dict or list)")
    method: Literal["POST", "GET"] = Field("POST", description="HTTP method")

    @model_validator(mode="after")
    def validate_target(self):
        """Ensure the request addresses a model and, for POST, an endpoint."""
        if not self.target_model or not self.target_model.strip():
            raise ValueError("target_model cannot be empty")
        if self.method == "POST":
            if not self.endpoint or not self.endpoint.strip():
                raise ValueError("endpoint cannot be empty for POST requests")
            if self.body is None:
                raise ValueError("body cannot be None for POST requests")
        elif self.body is not None:
            raise ValueError("GET requests cannot carry a body")
        return self


class Part(WireModel):
    """One part of a content block."""

    text: Optional[str] = None


class Content(WireModel):
    """A content block: a role and its parts."""

    role: Optional[str] = None
    parts: list[Part] = Field(default_factory=list)

    @classmethod
    def from_text(cls, text: str, role: str | None = None) -> "Content":
        """Wrap a single text string in a content block."""
        return cls(role=role, parts=[Part(text=text)])


class GenerationConfig(WireModel):
    """Sampling parameters forwarded verbatim to the API."""

    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(None, ge=0.0, le=1.0)
    top_k: Optional[int] = Field(None, ge=1)
    max_output_tokens: Optional[int] = Field(None, ge=1)
    candidate_count: Optional[int] = Field(None, ge=1)
    stop_sequences: Optional[list[str]] = None
    response_mime_type: Optional[str] = None


class GenerateContentRequest(WireModel):
    """Payload for the ``generateContent`` endpoint."""

    contents: list[Content] = Field(..., min_length=1)
    system_instruction: Optional[Content] = None
    generation_config: Optional[GenerationConfig] = None
    tools: Optional[list[dict[str, Any]]] = None


class CountTokensRequest(WireModel):
    """Payload for the ``countTokens`` endpoint."""

    contents: list[Content] = Field(..., min_length=1)


class EmbedContentRequest(WireModel):
    """Payload for the ``embedContent`` endpoint."""

    content: Content


class Endpoint(str, Enum):
    """Endpoint segments used by ContentService."""

    GENERATE_CONTENT = "generateContent"
    COUNT_TOKENS = "countTokens"
    EMBED_CONTENT = "embedContent"
