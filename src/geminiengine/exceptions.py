"""
Exception hierarchy for GeminiEngine.

Every failure surfaced by the client derives from GeminiError and carries an
ErrorCode, so callers can tell "fix my input" (INVALID_INPUT,
SERIALIZATION_FAILED, PROVIDER_REJECTED, ...) from "retry later"
(RETRIES_EXHAUSTED) from "the service is broken" (PROVIDER_OVERLOADED).
"""

from geminiengine.models.errors import ErrorCode, ErrorDetail, is_retryable


class GeminiError(Exception):
    """Base exception for all GeminiEngine errors."""

    def __init__(self, error_code: ErrorCode, message: str, original_exception: Exception | None = None):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.original_exception = original_exception

    @property
    def retryable(self) -> bool:
        """Whether retrying the same call later may succeed."""
        return is_retryable(self.error_code)


class ArgumentError(GeminiError, ValueError):
    """The caller supplied an empty or invalid model, endpoint or payload."""

    def __init__(self, message: str, original_exception: Exception | None = None):
        super().__init__(ErrorCode.INVALID_INPUT, message, original_exception)


class SerializationError(GeminiError):
    """The request body could not be encoded to the wire format."""

    def __init__(self, message: str, original_exception: Exception | None = None):
        super().__init__(ErrorCode.SERIALIZATION_FAILED, message, original_exception)


class ApiError(GeminiError):
    """The API call failed; carries the HTTP status and an ErrorDetail."""

    def __init__(
        self,
        detail: ErrorDetail,
        error_code: ErrorCode | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(error_code or detail.code, detail.message, original_exception)
        self.detail = detail

    @property
    def status_code(self) -> int:
        """HTTP status of the failed response (0 for transport failures)."""
        return self.detail.http_status

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.message}"


class TransientApiError(ApiError):
    """A retryable failure; only ever observed inside the retry loop."""

    def __init__(
        self,
        detail: ErrorDetail,
        attempt: int = 0,
        error_code: ErrorCode | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(detail, error_code, original_exception)
        self.attempt = attempt


class PermanentApiError(ApiError):
    """
    A non-retryable status, or a success body that did not decode.

    The error code is never a retryable one: a 5xx left out of the retryable
    set reports SERVER_ERROR, any other status PROVIDER_REJECTED.
    """

    def __init__(
        self,
        detail: ErrorDetail,
        error_code: ErrorCode | None = None,
        original_exception: Exception | None = None,
    ):
        code = error_code or detail.code
        if is_retryable(code):
            code = ErrorCode.SERVER_ERROR if detail.http_status >= 500 else ErrorCode.PROVIDER_REJECTED
        super().__init__(detail, code, original_exception)


class ExhaustedRetriesError(ApiError):
    """Every allowed attempt ended in a transient failure."""

    def __init__(self, detail: ErrorDetail, attempts: int, original_exception: Exception | None = None):
        super().__init__(detail, ErrorCode.RETRIES_EXHAUSTED, original_exception)
        self.attempts = attempts

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.message} (gave up after {self.attempts} attempts)"


class RequestCancelledError(GeminiError):
    """The caller cancelled the call during an attempt or a backoff sleep."""

    def __init__(self, message: str = "Request was cancelled", attempts: int = 0):
        super().__init__(ErrorCode.CANCELLED, message)
        self.attempts = attempts
