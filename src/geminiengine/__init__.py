"""GeminiEngine - Resilient client for the Gemini generative-AI REST API."""

from geminiengine.exceptions import (
    ApiError,
    ArgumentError,
    ExhaustedRetriesError,
    GeminiError,
    PermanentApiError,
    RequestCancelledError,
    SerializationError,
    TransientApiError,
)
from geminiengine.interfaces import IApiExecutor, RetryObserver
from geminiengine.models.config import AuthMode, BackoffMode, ClientOptions, RetryConfig
from geminiengine.models.errors import ErrorCode, ErrorDetail, is_retryable
from geminiengine.models.events import CallOutcome, RetryEvent, RetryEventKind
from geminiengine.models.metrics import CallMetrics
from geminiengine.models.requests import ApiRequest, Content, GenerateContentRequest, Part
from geminiengine.models.responses import (
    CountTokensResponse,
    EmbeddingResponse,
    GenerateContentResponse,
    ModelInfo,
)
from geminiengine.services.api_client import GeminiApiClient
from geminiengine.services.backoff import BackoffPolicy
from geminiengine.services.classifier import Classification, ResponseClassifier
from geminiengine.services.codec import Codec
from geminiengine.services.content_service import ContentService
from geminiengine.services.dispatcher import RequestDispatcher
from geminiengine.services.error_decoder import ErrorDecoder
from geminiengine.services.metrics_service import MetricsService
from geminiengine.services.retry_service import LoggingObserver, RetryExecutor

__version__ = "0.1.0"

__all__ = [
    # Interfaces
    "IApiExecutor",
    "RetryObserver",
    # Errors
    "GeminiError",
    "ArgumentError",
    "SerializationError",
    "ApiError",
    "TransientApiError",
    "PermanentApiError",
    "ExhaustedRetriesError",
    "RequestCancelledError",
    "ErrorCode",
    "ErrorDetail",
    "is_retryable",
    # Configuration
    "AuthMode",
    "BackoffMode",
    "ClientOptions",
    "RetryConfig",
    # Request/Response types
    "ApiRequest",
    "Content",
    "Part",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "CountTokensResponse",
    "EmbeddingResponse",
    "ModelInfo",
    # Events & metrics
    "CallMetrics",
    "CallOutcome",
    "RetryEvent",
    "RetryEventKind",
    # Core
    "BackoffPolicy",
    "Classification",
    "Codec",
    "ErrorDecoder",
    "RequestDispatcher",
    "ResponseClassifier",
    "RetryExecutor",
    "LoggingObserver",
    # Services
    "GeminiApiClient",
    "ContentService",
    "MetricsService",
]
