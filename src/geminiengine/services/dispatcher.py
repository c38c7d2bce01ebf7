"""Single-attempt HTTP dispatch for API requests."""

import logging

import httpx

from geminiengine.models.config import AuthMode, ClientOptions
from geminiengine.models.dispatch import DispatchResult, TransportFailure
from geminiengine.models.requests import ApiRequest
from geminiengine.services.codec import Codec

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-goog-api-key"


class RequestDispatcher:
    """
    Performs exactly one HTTP round-trip per call; never retries.

    URLs are ``{base_url}{model}:{endpoint}`` for POST and ``{base_url}{model}``
    for GET. The credential is attached according to ``options.auth_mode``,
    computed once here rather than per call.
    """

    def __init__(self, options: ClientOptions, http_client: httpx.AsyncClient, codec: Codec | None = None):
        """
        Args:
            options: Static client configuration
            http_client: Shared, pooled transport (owned by the caller)
            codec: Request body encoder (defaults to a new Codec)
        """
        self.options = options
        self.http_client = http_client
        self.codec = codec or Codec()

        if options.auth_mode == AuthMode.HEADER:
            self._auth_headers = {API_KEY_HEADER: options.api_key}
            self._auth_params: dict[str, str] = {}
        else:
            self._auth_headers = {}
            self._auth_params = {"key": options.api_key}

    def build_url(self, request: ApiRequest) -> str:
        """Target URL for a request, without credentials."""
        if request.method == "GET":
            return f"{self.options.base_url}{request.target_model}"
        return f"{self.options.base_url}{request.target_model}:{request.endpoint}"

    async def dispatch(self, request: ApiRequest) -> DispatchResult:
        """
        Send one request and capture its status and body.

        Returns:
            DispatchResult with a status code and body, or with a TransportFailure
            when no HTTP response was received

        Raises:
            SerializationError: If the request body cannot be encoded
        """
        url = self.build_url(request)
        headers = {"Accept": "application/json", **self._auth_headers}
        content: bytes | None = None
        if request.method == "POST":
            content = self.codec.encode(request.body)
            headers["Content-Type"] = "application/json"

        logger.debug(f"📤 [Dispatcher] {request.method} {url} ({len(content) if content else 0} bytes)")

        try:
            response = await self.http_client.request(
                request.method,
                url,
                params=self._auth_params,
                headers=headers,
                content=content,
                timeout=self.options.timeout_seconds,
            )
        except httpx.TransportError as e:
            logger.debug(f"🔌 [Dispatcher] {request.method} {url} failed: {type(e).__name__}: {e}")
            return DispatchResult(
                transport_failure=TransportFailure(kind=type(e).__name__, message=str(e), exception=e),
            )

        logger.debug(f"📥 [Dispatcher] {request.method} {url} -> {response.status_code}")
        return DispatchResult(status_code=response.status_code, body=response.text)
