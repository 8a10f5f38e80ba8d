"""Tests for stream event parsing and error-event handling."""

from __future__ import annotations

import pytest

from tierbridge.providers.events import (
    ProviderStreamError,
    StreamDone,
    StreamErrorEvent,
    StreamEventKind,
    TextDelta,
    ThinkingDelta,
    TokenUsage,
    UnknownEvent,
    parse_event,
    raise_on_error_events,
)


def test_parse_text_delta():
    event = parse_event({"type": "text_delta", "delta": "hi", "contentIndex": 0})
    assert event == TextDelta("hi")
    assert event.kind == StreamEventKind.TEXT_DELTA.value


def test_parse_thinking_delta():
    assert parse_event({"type": "thinking_delta", "delta": "hmm"}) == ThinkingDelta("hmm")


def test_parse_done_with_message_usage():
    event = parse_event(
        {
            "type": "done",
            "reason": "length",
            "message": {"usage": {"input": 10, "output": 5, "totalTokens": 15}},
        }
    )
    assert isinstance(event, StreamDone)
    assert event.reason == "length"
    assert event.usage == TokenUsage(input=10, output=5, total=15)


def test_parse_done_with_openai_usage_names():
    event = parse_event({"type": "done", "usage": {"prompt_tokens": 2, "completion_tokens": 3}})
    assert event.usage == TokenUsage(input=2, output=3, total=5)


@pytest.mark.parametrize(
    "usage",
    [{"input": "n/a"}, {"input": [1]}, {"output": {}}, {"input": 1, "output": 2, "totalTokens": "many"}],
)
def test_done_with_unreadable_usage_keeps_reason(usage):
    event = parse_event({"type": "done", "reason": "stop", "usage": usage})
    assert event == StreamDone(reason="stop", usage=None)


def test_missing_delta_is_empty_text():
    assert parse_event({"type": "text_delta", "delta": None}) == TextDelta("")
    assert parse_event({"type": "text_delta"}) == TextDelta("")
    assert parse_event({"type": "thinking_delta", "delta": None}) == ThinkingDelta("")


def test_parse_error_event():
    event = parse_event(
        {"type": "error", "reason": "error", "error": {"errorMessage": "rate limited"}}
    )
    assert event == StreamErrorEvent(reason="error", message="rate limited")


@pytest.mark.parametrize(
    "raw",
    [
        {"type": "toolcall_delta", "delta": "{}"},
        {"type": "start", "partial": {}},
        {"no_type": True},
    ],
)
def test_unknown_kinds_are_inert(raw):
    event = parse_event(raw)
    assert isinstance(event, UnknownEvent)
    assert event.kind == "unknown"
    assert event.raw is raw


def test_non_mapping_becomes_unknown():
    event = parse_event(42)
    assert isinstance(event, UnknownEvent)
    assert event.type == "int"


def test_typed_events_pass_through():
    delta = TextDelta("x")
    assert parse_event(delta) is delta


async def _aiter(items):
    for item in items:
        yield item


@pytest.mark.asyncio
async def test_raise_on_error_events_passes_normal_events():
    items = [TextDelta("a"), StreamDone()]
    out = [e async for e in raise_on_error_events(_aiter(items))]
    assert out == items


@pytest.mark.asyncio
async def test_raise_on_error_events_raises():
    stream = raise_on_error_events(_aiter([TextDelta("a"), StreamErrorEvent("error", "bad")]))
    seen = []
    with pytest.raises(ProviderStreamError, match="bad") as exc_info:
        async for event in stream:
            seen.append(event)
    assert seen == [TextDelta("a")]
    assert exc_info.value.reason == "error"


@pytest.mark.asyncio
async def test_raise_on_error_events_stops_on_abort():
    stream = raise_on_error_events(
        _aiter([TextDelta("a"), StreamErrorEvent("aborted", "stop"), TextDelta("b")])
    )
    assert [e async for e in stream] == [TextDelta("a")]


def test_provider_stream_error_default_message():
    assert str(ProviderStreamError("")) == "Model stream error"
