"""Models package for GeminiEngine."""

from geminiengine.models.config import AuthMode, BackoffMode, ClientOptions, RetryConfig
from geminiengine.models.dispatch import DispatchResult, TransportFailure
from geminiengine.models.errors import (
    ApiError,
    ApiErrorDetailItem,
    ApiErrorResponse,
    ErrorCode,
    ErrorDetail,
    error_code_for_status,
    is_retryable,
)
from geminiengine.models.events import CallOutcome, RetryEvent, RetryEventKind
from geminiengine.models.metrics import CallMetrics
from geminiengine.models.requests import (
    ApiRequest,
    Content,
    CountTokensRequest,
    EmbedContentRequest,
    Endpoint,
    GenerateContentRequest,
    GenerationConfig,
    Part,
)
from geminiengine.models.responses import (
    Candidate,
    ContentEmbedding,
    CountTokensResponse,
    EmbeddingResponse,
    GenerateContentResponse,
    ModelInfo,
    UsageMetadata,
)

__all__ = [
    "ApiError",
    "ApiErrorDetailItem",
    "ApiErrorResponse",
    "ApiRequest",
    "AuthMode",
    "BackoffMode",
    "CallMetrics",
    "CallOutcome",
    "Candidate",
    "ClientOptions",
    "Content",
    "ContentEmbedding",
    "CountTokensRequest",
    "CountTokensResponse",
    "DispatchResult",
    "EmbedContentRequest",
    "EmbeddingResponse",
    "Endpoint",
    "ErrorCode",
    "ErrorDetail",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "GenerationConfig",
    "ModelInfo",
    "Part",
    "RetryConfig",
    "RetryEvent",
    "RetryEventKind",
    "TransportFailure",
    "UsageMetadata",
    "error_code_for_status",
    "is_retryable",
]
