"""Decoding of failure bodies into ErrorDetail."""

import logging

from geminiengine.models.dispatch import TransportFailure
from geminiengine.models.errors import ErrorDetail
from geminiengine.services.codec import Codec

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


class ErrorDecoder:
    """Turns a failure response into an ErrorDetail; never raises."""

    def __init__(self, codec: Codec | None = None):
        self.codec = codec or Codec()

    def decode(self, raw_body: str, http_status: int) -> ErrorDetail:
        """
        Parse ``raw_body`` as the API's error envelope.

        Args:
            raw_body: Failure body as text (may be empty)
            http_status: HTTP status of the failed response

        Returns:
            ErrorDetail with ``structured`` set when the body is an envelope,
            ``raw_body`` set when it is not, and neither when it is empty
        """
        if not raw_body or not raw_body.strip():
            return ErrorDetail(
                http_status=http_status,
                message=f"API request failed with status code {http_status}.",
            )

        try:
            envelope = self.codec.decode_error_envelope(raw_body)
        except ValueError as e:
            logger.debug(f"⚠️ [ErrorDecoder] Failure body is not an error envelope (status {http_status}): {e}")
            envelope = None

        if envelope is None or envelope.error is None:
            return ErrorDetail(
                http_status=http_status,
                message=f"API request failed with status code {http_status} and an undecodable error body.",
                raw_body=raw_body,
            )

        return ErrorDetail(
            http_status=http_status,
            message=envelope.error.message or UNKNOWN_ERROR_MESSAGE,
            structured=envelope.error,
        )

    def from_transport_failure(self, failure: TransportFailure) -> ErrorDetail:
        """ErrorDetail for a round-trip that produced no status."""
        return ErrorDetail(
            http_status=0,
            message=f"Transport error ({failure.kind}): {failure.message}",
        )
