"""Retry executor with backoff for API requests.

Each call runs as a small state machine::

    Attempting(n) -> Classifying -> Done(Success)
                                 -> Done(PermanentFailure)
                                 -> Backoff(n) -> Attempting(n + 1)
                                 -> Done(ExhaustedRetries)

Attempts and backoff are driven by tenacity; the BackoffPolicy decides both
the delay and when to stop, and the ResponseClassifier decides which
failures are transient. Only TransientApiError re-enters the loop.
"""

import asyncio
import logging
import random
import time
from typing import Any, Awaitable, Sequence, TypeVar

from tenacity import AsyncRetrying, RetryCallState, RetryError, retry_if_exception_type

from geminiengine.exceptions import (
    ExhaustedRetriesError,
    GeminiError,
    PermanentApiError,
    RequestCancelledError,
    TransientApiError,
)
from geminiengine.interfaces import RetryObserver
from geminiengine.models.config import RetryConfig
from geminiengine.models.errors import ErrorCode, ErrorDetail
from geminiengine.models.events import CallOutcome, RetryEvent, RetryEventKind
from geminiengine.models.requests import ApiRequest
from geminiengine.services.backoff import BackoffPolicy
from geminiengine.services.classifier import Classification, ResponseClassifier
from geminiengine.services.codec import Codec
from geminiengine.services.dispatcher import RequestDispatcher
from geminiengine.services.error_decoder import ErrorDecoder

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoggingObserver:
    """Default observer: writes retry events to this module's logger."""

    def on_event(self, event: RetryEvent) -> None:
        target = f"{event.model}:{event.endpoint}" if event.endpoint else event.model
        attempt_no = event.attempt + 1

        if event.kind == RetryEventKind.ATTEMPT_STARTED:
            logger.debug(f"🚀 [RetryExecutor] {target} attempt {attempt_no}")
        elif event.kind == RetryEventKind.TRANSIENT_FAILURE:
            logger.warning(
                f"⚠️ [RetryExecutor] {target} attempt {attempt_no} failed "
                f"with status {event.http_status}: {event.message}"
            )
        elif event.kind == RetryEventKind.RETRY_SCHEDULED:
            logger.warning(f"🔁 [RetryExecutor] {target} retrying in {event.delay_seconds:.2f}s (retry {attempt_no})")
        elif event.outcome == CallOutcome.SUCCESS:
            logger.info(f"✅ [RetryExecutor] {target} succeeded after {attempt_no} attempt(s) in {event.elapsed_ms}ms")
        elif event.outcome == CallOutcome.CANCELLED:
            logger.info(f"🛑 [RetryExecutor] {target} cancelled after {event.elapsed_ms}ms")
        else:
            logger.error(
                f"❌ [RetryExecutor] {target} ended in {event.outcome.value if event.outcome else 'unknown'} "
                f"(status {event.http_status}): {event.message}"
            )


class _CallProgress:
    """Mutable bookkeeping for one logical call."""

    def __init__(self, request: ApiRequest):
        self.request = request
        self.attempts = 0
        self.started = time.monotonic()

    @property
    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started) * 1000)


class RetryExecutor:
    """
    Top-level driver: dispatch, classify, back off, resolve.

    The executor holds no per-call state, so one instance can serve any
    number of concurrent calls.
    """

    def __init__(
        self,
        dispatcher: RequestDispatcher,
        config: RetryConfig | None = None,
        codec: Codec | None = None,
        error_decoder: ErrorDecoder | None = None,
        observers: Sequence[RetryObserver] | None = None,
        rng: random.Random | None = None,
    ):
        """
        Args:
            dispatcher: Performs single HTTP round-trips
            config: Default retry policy (per-call overrides allowed)
            codec: Decodes success bodies (defaults to the dispatcher's codec)
            error_decoder: Decodes failure bodies
            observers: Event sinks (defaults to a LoggingObserver)
            rng: Random source for jitter
        """
        self.dispatcher = dispatcher
        self.config = config or RetryConfig()
        self.codec = codec or dispatcher.codec
        self.error_decoder = error_decoder or ErrorDecoder(self.codec)
        self.observers: list[RetryObserver] = list(observers) if observers is not None else [LoggingObserver()]
        self._rng = rng

    async def execute(
        self,
        request: ApiRequest,
        response_type: type[T],
        *,
        cancel_event: asyncio.Event | None = None,
        retry_config: RetryConfig | None = None,
    ) -> T:
        """
        Run a request to completion.

        Args:
            request: The request to send
            response_type: Type the success body is decoded into
            cancel_event: Setting this event aborts the call immediately
            retry_config: Overrides the executor's default policy for this call

        Returns:
            The decoded success body

        Raises:
            PermanentApiError: Non-retryable status, or undecodable success body
            ExhaustedRetriesError: Only transient failures were observed
            RequestCancelledError: ``cancel_event`` was set
            SerializationError: The request body could not be encoded
        """
        config = retry_config or self.config
        policy = BackoffPolicy(config, rng=self._rng)
        classifier = ResponseClassifier(config.retryable_status_codes)
        progress = _CallProgress(request)

        async def cancellable_sleep(seconds: float) -> None:
            await self._await_cancellable(asyncio.sleep(seconds), cancel_event, progress)

        def schedule_retry(retry_state: RetryCallState) -> None:
            self._emit(
                RetryEventKind.RETRY_SCHEDULED,
                progress,
                attempt=retry_state.attempt_number - 1,
                delay_seconds=retry_state.next_action.sleep if retry_state.next_action else 0.0,
            )

        retrying = AsyncRetrying(
            retry=retry_if_exception_type(TransientApiError),
            stop=lambda retry_state: not policy.should_continue(retry_state.attempt_number - 1),
            wait=lambda retry_state: policy.delay_for(retry_state.attempt_number - 1),
            before_sleep=schedule_retry,
            sleep=cancellable_sleep,
            reraise=False,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    return await self._attempt(request, response_type, classifier, cancel_event, progress)
        except RetryError as e:
            # Only TransientApiError is retried, so the last attempt always holds one
            last_error: TransientApiError = e.last_attempt.exception()
            detail = last_error.detail
            self._complete(progress, CallOutcome.EXHAUSTED_RETRIES, detail.http_status, detail.message)
            raise ExhaustedRetriesError(detail, attempts=progress.attempts, original_exception=last_error) from last_error
        except PermanentApiError as e:
            self._complete(progress, CallOutcome.PERMANENT_FAILURE, e.status_code, e.message)
            raise
        except RequestCancelledError:
            self._complete(progress, CallOutcome.CANCELLED, None, "cancelled")
            raise
        except GeminiError as e:
            self._complete(progress, CallOutcome.ERROR, None, e.message)
            raise

        # AsyncRetrying either yields an attempt or raises
        raise RuntimeError("Retry loop exited without an outcome")  # pragma: no cover

    async def _attempt(
        self,
        request: ApiRequest,
        response_type: type[T],
        classifier: ResponseClassifier,
        cancel_event: asyncio.Event | None,
        progress: _CallProgress,
    ) -> T:
        """One pass of Attempting(n) -> Classifying."""
        if cancel_event is not None and cancel_event.is_set():
            raise RequestCancelledError(attempts=progress.attempts)

        index = progress.attempts
        progress.attempts += 1
        self._emit(RetryEventKind.ATTEMPT_STARTED, progress, attempt=index)

        result = await self._await_cancellable(self.dispatcher.dispatch(request), cancel_event, progress)
        classification = classifier.classify(result.outcome)

        if classification == Classification.SUCCESS:
            try:
                payload = self.codec.decode(result.body, response_type)
            except ValueError as e:
                detail = ErrorDetail(
                    http_status=result.status_code,
                    message=f"Failed to deserialize response into {getattr(response_type, '__name__', response_type)}: {e}",
                    raw_body=result.body,
                )
                raise PermanentApiError(detail, ErrorCode.RESPONSE_DECODE_FAILED, original_exception=e) from e
            self._complete(progress, CallOutcome.SUCCESS, result.status_code, None)
            return payload

        original_exception: Exception | None = None
        error_code: ErrorCode | None = None
        if result.transport_failure is not None:
            detail = self.error_decoder.from_transport_failure(result.transport_failure)
            error_code = result.transport_failure.error_code
            exc = result.transport_failure.exception
            original_exception = exc if isinstance(exc, Exception) else None
        else:
            detail = self.error_decoder.decode(result.body, result.status_code)

        if classification == Classification.TRANSIENT:
            self._emit(
                RetryEventKind.TRANSIENT_FAILURE,
                progress,
                attempt=index,
                http_status=detail.http_status,
                message=detail.message,
            )
            raise TransientApiError(
                detail, attempt=index, error_code=error_code, original_exception=original_exception
            )

        raise PermanentApiError(detail, error_code, original_exception=original_exception)

    async def _await_cancellable(
        self,
        awaitable: Awaitable[T],
        cancel_event: asyncio.Event | None,
        progress: _CallProgress,
    ) -> T:
        """Await ``awaitable`` unless ``cancel_event`` fires first."""
        if cancel_event is None:
            return await awaitable

        task = asyncio.ensure_future(awaitable)
        if cancel_event.is_set():
            task.cancel()
            await asyncio.wait({task})
            raise RequestCancelledError(attempts=progress.attempts)

        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()

        if task in done:
            return task.result()

        # Let the aborted request unwind before reporting the cancellation
        await asyncio.wait({task})
        raise RequestCancelledError(attempts=progress.attempts)

    def _complete(
        self,
        progress: _CallProgress,
        outcome: CallOutcome,
        http_status: int | None,
        message: str | None,
    ) -> None:
        self._emit(
            RetryEventKind.COMPLETED,
            progress,
            attempt=max(progress.attempts - 1, 0),
            http_status=http_status,
            outcome=outcome,
            message=message,
        )

    def _emit(self, kind: RetryEventKind, progress: _CallProgress, **fields: Any) -> None:
        if not self.observers:
            return
        event = RetryEvent(
            kind=kind,
            model=progress.request.target_model,
            endpoint=progress.request.endpoint,
            elapsed_ms=progress.elapsed_ms,
            **fields,
        )
        for observer in self.observers:
            observer.on_event(event)
