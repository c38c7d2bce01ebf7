"""Canonical API client: the ``execute`` contract collaborators depend on."""

import asyncio
import logging
import random
from typing import Any, Sequence, TypeVar

import httpx
from pydantic import ValidationError

from geminiengine.exceptions import ArgumentError
from geminiengine.interfaces import RetryObserver
from geminiengine.models.config import ClientOptions, RetryConfig
from geminiengine.models.requests import ApiRequest
from geminiengine.services.codec import Codec
from geminiengine.services.dispatcher import RequestDispatcher
from geminiengine.services.error_decoder import ErrorDecoder
from geminiengine.services.retry_service import RetryExecutor

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GeminiApiClient:
    """
    Resilient client for the Gemini REST API.

    Wires a RequestDispatcher and a RetryExecutor around one pooled
    ``httpx.AsyncClient``. Configuration is fixed at construction; concurrent
    calls share nothing but the connection pool.

    Example::

        async with GeminiApiClient(ClientOptions.from_env()) as client:
            info = await client.get("gemini-2.5-flash", ModelInfo)
    """

    def __init__(
        self,
        options: ClientOptions | None = None,
        http_client: httpx.AsyncClient | None = None,
        observers: Sequence[RetryObserver] | None = None,
        rng: random.Random | None = None,
    ):
        """
        Initialize the client.

        Args:
            options: Client configuration (defaults to ClientOptions.from_env())
            http_client: Transport to use; when omitted one is created lazily and
                closed by close()
            observers: Retry event sinks (defaults to logging)
            rng: Random source for backoff jitter
        """
        self.options = options or ClientOptions.from_env()
        self._owns_http_client = http_client is None
        self._http_client = http_client
        self._observers = observers
        self._rng = rng
        self.codec = Codec()
        self._executor: RetryExecutor | None = None

        logger.info(
            f"🔧 [GeminiApiClient] Initialized for {self.options.base_url} "
            f"(auth={self.options.auth_mode.value}, max_attempts={self.options.retry.max_attempts})"
        )

    def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create the pooled HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.options.timeout_seconds),
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10, keepalive_expiry=30.0),
                follow_redirects=True,
            )
            self._owns_http_client = True
            self._executor = None
            logger.debug("Created new httpx AsyncClient")
        return self._http_client

    @property
    def executor(self) -> RetryExecutor:
        """RetryExecutor bound to the current HTTP client."""
        http_client = self._get_http_client()
        if self._executor is None or self._executor.dispatcher.http_client is not http_client:
            dispatcher = RequestDispatcher(self.options, http_client, self.codec)
            self._executor = RetryExecutor(
                dispatcher,
                config=self.options.retry,
                codec=self.codec,
                error_decoder=ErrorDecoder(self.codec),
                observers=self._observers,
                rng=self._rng,
            )
        return self._executor

    async def execute(
        self,
        model: str,
        endpoint: str,
        body: Any,
        response_type: type[T] = dict,
        *,
        cancel_event: asyncio.Event | None = None,
        retry_config: RetryConfig | None = None,
    ) -> T:
        """
        POST ``body`` to ``{base_url}{model}:{endpoint}`` and decode the reply.

        Args:
            model: Target model (e.g. "gemini-2.5-flash")
            endpoint: Endpoint segment (e.g. "generateContent")
            body: Serializable payload (pydantic model, dict or list)
            response_type: Type the success body is decoded into
            cancel_event: Setting this event aborts the call
            retry_config: Per-call retry policy override

        Returns:
            Instance of ``response_type``

        Raises:
            ArgumentError: Empty model or endpoint, or missing body
            SerializationError: Body cannot be encoded
            PermanentApiError: Non-retryable failure
            ExhaustedRetriesError: Transient failures outlasted the retry policy
            RequestCancelledError: ``cancel_event`` was set
        """
        request = self._build_request(target_model=model, endpoint=endpoint, body=body, method="POST")
        return await self.executor.execute(
            request, response_type, cancel_event=cancel_event, retry_config=retry_config
        )

    async def get(
        self,
        model: str,
        response_type: type[T] = dict,
        *,
        cancel_event: asyncio.Event | None = None,
        retry_config: RetryConfig | None = None,
    ) -> T:
        """GET ``{base_url}{model}`` (model metadata). Raises as execute()."""
        request = self._build_request(target_model=model, method="GET")
        return await self.executor.execute(
            request, response_type, cancel_event=cancel_event, retry_config=retry_config
        )

    def _build_request(self, **fields: Any) -> ApiRequest:
        try:
            return ApiRequest(**fields)
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            logger.error(f"❌ [GeminiApiClient] Invalid request: {messages}")
            raise ArgumentError(f"Invalid request: {messages}", original_exception=e) from e

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client and self._http_client is not None and not self._http_client.is_closed:
            await self._http_client.aclose()
            logger.debug("Closed httpx AsyncClient")

    async def __aenter__(self) -> "GeminiApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
