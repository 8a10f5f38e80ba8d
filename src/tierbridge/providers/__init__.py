"""
TierBridge Providers — the streaming boundary to model APIs.

StreamProvider defines the contract; concrete implementations live
alongside. Events are normalized into the variants in providers.events.
"""

from tierbridge.providers.base import StreamProvider
from tierbridge.providers.events import (
    ProviderStreamError,
    StreamDone,
    StreamErrorEvent,
    StreamEvent,
    StreamEventKind,
    TextDelta,
    ThinkingDelta,
    TokenUsage,
    UnknownEvent,
    parse_event,
    raise_on_error_events,
)
from tierbridge.providers.registry import get_stream_provider

__all__ = [
    "StreamProvider",
    "get_stream_provider",
    # Events
    "StreamEvent",
    "StreamEventKind",
    "TextDelta",
    "ThinkingDelta",
    "StreamDone",
    "StreamErrorEvent",
    "UnknownEvent",
    "TokenUsage",
    "ProviderStreamError",
    "parse_event",
    "raise_on_error_events",
]
