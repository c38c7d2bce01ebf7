"""Protocol interfaces for GeminiEngine."""

import asyncio
from typing import Any, Protocol, TypeVar

from typing_extensions import runtime_checkable

from geminiengine.models.events import RetryEvent

TResponse = TypeVar("TResponse")


@runtime_checkable
class IApiExecutor(Protocol):
    """Narrow contract collaborators (ContentService, modality helpers) call into."""

    async def execute(
        self,
        model: str,
        endpoint: str,
        body: Any,
        response_type: type[TResponse] = ...,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> TResponse:
        """Run one logical call. Raises GeminiError subclasses on failure."""
        ...

    async def get(
        self,
        model: str,
        response_type: type[TResponse] = ...,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> TResponse:
        """Metadata lookup at ``{base_url}{model}``."""
        ...


@runtime_checkable
class RetryObserver(Protocol):
    """Receives structured events from the retry executor."""

    def on_event(self, event: RetryEvent) -> None:
        ...
