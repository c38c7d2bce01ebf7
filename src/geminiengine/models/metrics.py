"""Metrics models for GeminiEngine."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CallMetrics(BaseModel):
    """Tracking data for one logical API call."""

    model: str = Field(..., description="Target model identifier")
    endpoint: Optional[str] = Field(None, description="Endpoint segment (None for metadata lookups)")
    outcome: str = Field(..., description="Terminal outcome (success, permanent_failure, ...)")
    attempts: int = Field(..., ge=1, description="Attempts performed, first one included")
    duration_ms: int = Field(..., ge=0, description="Total call time in milliseconds, backoff included")
    http_status: Optional[int] = Field(None, description="Last observed HTTP status (0 = transport failure)")
    timestamp: Optional[datetime] = Field(None, description="When the call completed (UTC)")

    @property
    def retry_count(self) -> int:
        """Number of retries performed (0 = first attempt was terminal)."""
        return self.attempts - 1
