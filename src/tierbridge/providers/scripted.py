"""
Scripted Stream Provider — replays a fixed event list.

For tests and offline runs. Raw events go through parse_event, so scripts
can be written as plain dicts in the provider wire shape:

    provider = ScriptedStreamProvider([
        {"type": "text_delta", "delta": "Hello"},
        {"type": "done", "reason": "stop"},
    ])

An Exception instance placed in the script is raised at that point of the
sequence; ``open_error`` makes opening the session fail instead.
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Iterable

from tierbridge.models.descriptor import ModelDescriptor
from tierbridge.providers.base import StreamProvider
from tierbridge.providers.events import StreamEvent, parse_event, raise_on_error_events


class ScriptedStreamProvider(StreamProvider):
    name = "scripted"

    def __init__(
        self,
        events: Iterable[Any] = (),
        open_error: Exception | None = None,
        delay: float = 0.0,
    ):
        self.events = list(events)
        self.open_error = open_error
        self.delay = delay
        self.calls: list[tuple[ModelDescriptor, str, dict[str, Any]]] = []

    async def open_stream(
        self,
        model: ModelDescriptor,
        prompt: str,
        params: dict[str, Any],
    ) -> AsyncIterator[StreamEvent]:
        self.calls.append((model, prompt, params))
        if self.open_error is not None:
            raise self.open_error
        return raise_on_error_events(self._replay())

    async def _replay(self) -> AsyncIterator[StreamEvent]:
        for item in self.events:
            # Yield to the loop per event so cancellation lands between events
            await asyncio.sleep(self.delay)
            if isinstance(item, Exception):
                raise item
            yield parse_event(item)

    async def health_check(self) -> dict:
        return {"provider": self.name, "events": len(self.events), "status": "ready"}
