"""Error codes and error envelope models for GeminiEngine."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ErrorCode(str, Enum):
    """Error category codes for API operations."""

    # Retryable errors (retryable=True)
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"  # connection refused, DNS, reset
    PROVIDER_OVERLOADED = "PROVIDER_OVERLOADED"
    RATE_LIMITED = "RATE_LIMITED"
    RETRIES_EXHAUSTED = "RETRIES_EXHAUSTED"

    # Not retryable errors (retryable=False)
    INVALID_INPUT = "INVALID_INPUT"
    SERIALIZATION_FAILED = "SERIALIZATION_FAILED"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    NOT_FOUND = "NOT_FOUND"
    PROVIDER_REJECTED = "PROVIDER_REJECTED"
    SERVER_ERROR = "SERVER_ERROR"  # 5xx outside the retryable set
    RESPONSE_DECODE_FAILED = "RESPONSE_DECODE_FAILED"
    CANCELLED = "CANCELLED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Set of retryable error codes
RETRYABLE_ERRORS = {
    ErrorCode.PROVIDER_TIMEOUT,
    ErrorCode.PROVIDER_UNAVAILABLE,
    ErrorCode.PROVIDER_OVERLOADED,
    ErrorCode.RATE_LIMITED,
    ErrorCode.RETRIES_EXHAUSTED,
}


def is_retryable(code: ErrorCode) -> bool:
    """Check if an error code indicates a retryable error."""
    return code in RETRYABLE_ERRORS


def error_code_for_status(status_code: int) -> ErrorCode:
    """Map an HTTP status code to an error category (0 = no response received)."""
    if status_code == 0:
        return ErrorCode.PROVIDER_UNAVAILABLE
    if status_code == 429:
        return ErrorCode.RATE_LIMITED
    if status_code in (401, 403):
        return ErrorCode.AUTHENTICATION_REQUIRED
    if status_code == 404:
        return ErrorCode.NOT_FOUND
    if status_code >= 500:
        return ErrorCode.PROVIDER_OVERLOADED
    return ErrorCode.PROVIDER_REJECTED


class ApiErrorDetailItem(BaseModel):
    """A single entry of the envelope's ``details`` list."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Optional[str] = Field(None, alias="@type", description="Type URL of the detail entry")
    reason: Optional[str] = Field(None, description="Machine-readable reason (e.g. API_KEY_INVALID)")
    domain: Optional[str] = Field(None, description="Logical grouping of the reason")
    metadata: Optional[dict[str, str]] = Field(None, description="Additional key/value context")


class ApiError(BaseModel):
    """The ``error`` object of the API's error envelope."""

    model_config = ConfigDict(extra="ignore")

    code: Optional[int] = Field(None, description="HTTP status code echoed by the API")
    message: Optional[str] = Field(None, description="Human-readable error message")
    status: Optional[str] = Field(None, description="Canonical status (e.g. INVALID_ARGUMENT)")
    details: list[ApiErrorDetailItem] = Field(default_factory=list, description="Additional error details")


class ApiErrorResponse(BaseModel):
    """Top-level error envelope: ``{"error": {...}}``."""

    model_config = ConfigDict(extra="ignore")

    error: Optional[ApiError] = None


class ErrorDetail(BaseModel):
    """Structured description of a failed API call."""

    http_status: int = Field(..., ge=0, description="HTTP status (0 for transport-level failures)")
    message: str = Field(..., description="Human-readable error message")
    structured: Optional[ApiError] = Field(None, description="Parsed error envelope, when the body was one")
    raw_body: Optional[str] = Field(None, description="Unparsed failure body, when it was not an envelope")

    @model_validator(mode="after")
    def validate_body_state(self):
        """Ensure structured and raw forms are mutually exclusive."""
        if self.structured is not None and self.raw_body is not None:
            raise ValueError("structured and raw_body cannot both be present")
        return self

    @property
    def code(self) -> ErrorCode:
        """Error category derived from the HTTP status."""
        return error_code_for_status(self.http_status)
