"""Outcome classification by HTTP status."""

from enum import Enum
from typing import Iterable

from geminiengine.models.config import DEFAULT_RETRYABLE_STATUS_CODES
from geminiengine.models.dispatch import TransportFailure


class Classification(str, Enum):
    """What the executor should do with an attempt's outcome."""

    SUCCESS = "success"
    TRANSIENT = "transient"
    PERMANENT = "permanent"


class ResponseClassifier:
    """
    Maps a status code, or a transport failure, to a Classification.

    Only the status value is consulted; response bodies never influence the
    decision.
    """

    def __init__(self, retryable_status_codes: Iterable[int] = DEFAULT_RETRYABLE_STATUS_CODES):
        self.retryable_status_codes = frozenset(retryable_status_codes)

    def classify(self, outcome: int | TransportFailure) -> Classification:
        if isinstance(outcome, TransportFailure):
            return Classification.TRANSIENT
        if 200 <= outcome < 300:
            return Classification.SUCCESS
        if outcome in self.retryable_status_codes:
            return Classification.TRANSIENT
        return Classification.PERMANENT
