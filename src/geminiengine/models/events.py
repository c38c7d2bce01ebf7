"""Structured events emitted by the retry executor."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class RetryEventKind(str, Enum):
    """Points of interest in a call's life."""

    ATTEMPT_STARTED = "attempt_started"
    TRANSIENT_FAILURE = "transient_failure"
    RETRY_SCHEDULED = "retry_scheduled"
    COMPLETED = "completed"


class CallOutcome(str, Enum):
    """Terminal outcome carried by COMPLETED events."""

    SUCCESS = "success"
    PERMANENT_FAILURE = "permanent_failure"
    EXHAUSTED_RETRIES = "exhausted_retries"
    CANCELLED = "cancelled"
    ERROR = "error"  # argument or serialization errors, raised before any response


class RetryEvent(BaseModel):
    """A single observation reported to RetryObserver implementations."""

    kind: RetryEventKind
    model: str
    endpoint: Optional[str] = None
    attempt: int = Field(..., ge=0, description="Zero-based attempt index")
    http_status: Optional[int] = Field(None, description="Observed status (0 = transport failure)")
    delay_seconds: Optional[float] = Field(None, ge=0.0, description="Scheduled backoff (RETRY_SCHEDULED only)")
    outcome: Optional[CallOutcome] = Field(None, description="Terminal outcome (COMPLETED only)")
    message: Optional[str] = None
    elapsed_ms: Optional[int] = Field(None, ge=0, description="Time since the call started")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
