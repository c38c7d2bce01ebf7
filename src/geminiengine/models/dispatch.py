"""Result of a single HTTP round-trip."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from geminiengine.models.errors import ErrorCode


class TransportFailure(BaseModel):
    """A round-trip that never produced an HTTP status (refused, timed out, DNS, reset)."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    kind: str = Field(..., description="Transport exception class name, e.g. ConnectTimeout")
    message: str = Field(..., description="Transport error message")
    exception: Optional[BaseException] = Field(None, exclude=True, repr=False)

    @property
    def is_timeout(self) -> bool:
        return "Timeout" in self.kind

    @property
    def error_code(self) -> ErrorCode:
        """PROVIDER_TIMEOUT for timeouts, PROVIDER_UNAVAILABLE for every other transport error."""
        return ErrorCode.PROVIDER_TIMEOUT if self.is_timeout else ErrorCode.PROVIDER_UNAVAILABLE


class DispatchResult(BaseModel):
    """Either an HTTP status with its body, or a transport failure."""

    model_config = ConfigDict(frozen=True)

    status_code: Optional[int] = None
    body: str = ""
    transport_failure: Optional[TransportFailure] = None

    @model_validator(mode="after")
    def validate_variant(self):
        """Exactly one of status_code and transport_failure is set."""
        if (self.status_code is None) == (self.transport_failure is None):
            raise ValueError("exactly one of status_code and transport_failure must be set")
        return self

    @property
    def outcome(self) -> int | TransportFailure:
        """The value handed to the classifier."""
        if self.transport_failure is not None:
            return self.transport_failure
        return self.status_code
