"""Configuration models for GeminiEngine."""

import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models/"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class BackoffMode(str, Enum):
    """Delay growth between retries."""

    FIXED = "fixed"
    EXPONENTIAL = "exponential"


class AuthMode(str, Enum):
    """Where the API key is placed on outgoing requests."""

    QUERY = "query"  # ?key=<api_key>
    HEADER = "header"  # x-goog-api-key: <api_key>


class RetryConfig(BaseModel):
    """Retry policy for transient failures."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(3, ge=0, description="Retries after the first attempt (0 = single attempt)")
    initial_delay: float = Field(2.0, ge=0.0, description="Base delay in seconds")
    backoff_mode: BackoffMode = Field(BackoffMode.EXPONENTIAL, description="Fixed or exponential delay growth")
    jitter_enabled: bool = Field(True, description="Randomize each delay within [0, computed delay]")
    retryable_status_codes: frozenset[int] = Field(
        DEFAULT_RETRYABLE_STATUS_CODES,
        description="HTTP statuses treated as transient",
    )
    max_delay: Optional[float] = Field(None, gt=0.0, description="Ceiling applied to computed delays (None = no ceiling)")

    @model_validator(mode="after")
    def validate_exponential_delay(self):
        """Exponential backoff needs a positive base or every delay collapses to zero."""
        if self.backoff_mode == BackoffMode.EXPONENTIAL and self.initial_delay <= 0:
            raise ValueError("initial_delay must be positive when backoff_mode is exponential")
        return self


class ClientOptions(BaseModel):
    """Static client configuration, fixed for the lifetime of a client."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1, description="API key used to authenticate requests")
    base_url: str = Field(DEFAULT_BASE_URL, description="Models collection URL, ending with a slash")
    default_model: str = Field(DEFAULT_MODEL, min_length=1, description="Model used when callers pass none")
    auth_mode: AuthMode = Field(AuthMode.QUERY, description="How the API key is sent")
    timeout_seconds: float = Field(60.0, gt=0.0, description="Per-attempt HTTP timeout")
    retry: RetryConfig = Field(default_factory=RetryConfig, description="Default retry policy")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("api_key cannot be blank")
        return value

    @field_validator("base_url")
    @classmethod
    def ensure_trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else f"{value}/"

    @classmethod
    def from_env(cls, api_key: str | None = None, **overrides) -> "ClientOptions":
        """
        Build options from environment variables.

        Reads GEMINI_API_KEY, GEMINI_BASE_URL, GEMINI_DEFAULT_MODEL,
        GEMINI_TIMEOUT_SECONDS, GEMINI_MAX_RETRIES and GEMINI_RETRY_DELAY_SECONDS.
        Explicit arguments win over the environment.

        Raises:
            ValueError: If no API key is available
        """
        key = api_key or os.getenv("GEMINI_API_KEY")
        if not key:
            raise ValueError("GEMINI_API_KEY environment variable or api_key parameter is required")

        values: dict = {"api_key": key}
        base_url = os.getenv("GEMINI_BASE_URL")
        if base_url:
            values["base_url"] = base_url
        default_model = os.getenv("GEMINI_DEFAULT_MODEL")
        if default_model:
            values["default_model"] = default_model
        timeout = os.getenv("GEMINI_TIMEOUT_SECONDS")
        if timeout:
            values["timeout_seconds"] = float(timeout)

        retry_values: dict = {}
        max_retries = os.getenv("GEMINI_MAX_RETRIES")
        if max_retries:
            retry_values["max_attempts"] = int(max_retries)
        retry_delay = os.getenv("GEMINI_RETRY_DELAY_SECONDS")
        if retry_delay:
            retry_values["initial_delay"] = float(retry_delay)
        if retry_values:
            values["retry"] = RetryConfig(**retry_values)

        values.update(overrides)
        return cls(**values)
