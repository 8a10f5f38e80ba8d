"""
Stream events — the discriminated values a provider session yields.

Only TextDelta carries text the aggregator consumes. Everything else is
observed and discarded by it. Provider event kinds this module does not
know about become UnknownEvent, so new kinds are inert by default.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Mapping

logger = logging.getLogger(__name__)


class StreamEventKind(str, Enum):
    TEXT_DELTA = "text_delta"
    THINKING_DELTA = "thinking_delta"
    DONE = "done"
    ERROR = "error"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TokenUsage:
    input: int = 0
    output: int = 0
    total: int = 0


@dataclass(frozen=True)
class TextDelta:
    """An incremental fragment of generated text."""

    delta: str
    kind: str = field(default=StreamEventKind.TEXT_DELTA.value, init=False)


@dataclass(frozen=True)
class ThinkingDelta:
    delta: str
    kind: str = field(default=StreamEventKind.THINKING_DELTA.value, init=False)


@dataclass(frozen=True)
class StreamDone:
    reason: str = "stop"
    usage: TokenUsage | None = None
    kind: str = field(default=StreamEventKind.DONE.value, init=False)


@dataclass(frozen=True)
class StreamErrorEvent:
    """A provider-reported error. reason "aborted" means user cancellation."""

    reason: str = "error"
    message: str = ""
    kind: str = field(default=StreamEventKind.ERROR.value, init=False)


@dataclass(frozen=True)
class UnknownEvent:
    """Catch-all for event kinds this version does not interpret."""

    type: str = ""
    raw: Any = None
    kind: str = field(default=StreamEventKind.UNKNOWN.value, init=False)


StreamEvent = TextDelta | ThinkingDelta | StreamDone | StreamErrorEvent | UnknownEvent


def _count(value: Any) -> int | None:
    if value is None:
        return 0
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_usage(raw: Any) -> TokenUsage | None:
    """Usage counts, or None when the payload is missing or not numeric."""
    if not isinstance(raw, Mapping):
        return None
    inp = _count(raw.get("input", raw.get("prompt_tokens")))
    out = _count(raw.get("output", raw.get("completion_tokens")))
    if inp is None or out is None:
        return None
    total = _count(raw.get("totalTokens", raw.get("total_tokens", inp + out)))
    if total is None:
        return None
    return TokenUsage(input=inp, output=out, total=total)


def _delta(raw: Mapping) -> str:
    delta = raw.get("delta")
    return "" if delta is None else str(delta)


def parse_event(raw: Any) -> StreamEvent:
    """Turn a provider's raw event into a typed variant.

    Already-typed events pass through. Dicts are keyed on "type". Unknown
    types, and anything that is not a dict, become UnknownEvent.
    """
    if isinstance(raw, (TextDelta, ThinkingDelta, StreamDone, StreamErrorEvent, UnknownEvent)):
        return raw
    if not isinstance(raw, Mapping):
        return UnknownEvent(type=type(raw).__name__, raw=raw)

    event_type = raw.get("type", "")
    if event_type == StreamEventKind.TEXT_DELTA.value:
        return TextDelta(delta=_delta(raw))
    try:
        return _parse_other(event_type, raw)
    except (TypeError, ValueError):
        logger.debug(f"Unparseable {event_type!r} event treated as unknown")
        return UnknownEvent(type=str(event_type), raw=raw)


def _parse_other(event_type: Any, raw: Mapping) -> StreamEvent:
    if event_type == StreamEventKind.THINKING_DELTA.value:
        return ThinkingDelta(delta=_delta(raw))
    if event_type == StreamEventKind.DONE.value:
        message = raw.get("message")
        usage = raw.get("usage")
        if usage is None and isinstance(message, Mapping):
            usage = message.get("usage")
        return StreamDone(reason=str(raw.get("reason", "stop")), usage=_parse_usage(usage))
    if event_type == StreamEventKind.ERROR.value:
        error = raw.get("error")
        if isinstance(error, Mapping):
            message = str(error.get("errorMessage") or error.get("message") or "")
        else:
            message = str(error or "")
        return StreamErrorEvent(reason=str(raw.get("reason", "error")), message=message)
    return UnknownEvent(type=str(event_type), raw=raw)


class ProviderStreamError(Exception):
    """Raised inside an event sequence when the provider reports an error event."""

    def __init__(self, message: str, reason: str = "error"):
        super().__init__(message or "Model stream error")
        self.reason = reason


async def raise_on_error_events(
    events: AsyncIterator[StreamEvent],
) -> AsyncIterator[StreamEvent]:
    """Re-yield events, turning provider error events into stream termination.

    An error event with reason "aborted" ends the sequence normally; any other
    error event raises ProviderStreamError so the consumer sees a failed stream.
    """
    try:
        async for event in events:
            if isinstance(event, StreamErrorEvent):
                if event.reason == "aborted":
                    logger.debug("Stream aborted by provider")
                    return
                raise ProviderStreamError(event.message, reason=event.reason)
            yield event
    finally:
        aclose = getattr(events, "aclose", None)
        if aclose is not None:
            await aclose()
