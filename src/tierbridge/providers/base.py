"""
Stream provider base class — the boundary between tierbridge and a model API.

A provider opens one streaming session per call and hands back an async
iterator of StreamEvents. It owns transport, credentials and the mapping
from its wire format to events. It never aggregates.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator

from tierbridge.models.descriptor import ModelDescriptor
from tierbridge.providers.events import StreamEvent


class StreamProvider(ABC):
    """Streaming text-generation provider interface."""

    #: Provider name used in logs and metrics
    name: str = "unknown"

    @abstractmethod
    async def open_stream(
        self,
        model: ModelDescriptor,
        prompt: str,
        params: dict[str, Any],
    ) -> AsyncIterator[StreamEvent]:
        """Open a session and return its event sequence.

        Raising here means the session could not be opened. The returned
        iterator is finite, forward-only and consumed exactly once.
        """
        ...

    async def health_check(self) -> dict:
        return {"provider": self.name, "status": "unknown"}
