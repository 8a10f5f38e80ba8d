"""Tests for the OpenAI-compatible stream provider (SDK mocked)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

import tierbridge.core.config as config_module
from tierbridge.core.config import OpenAIConfig, TierBridgeConfig
from tierbridge.core.errors import ChunkSinkError, SessionOpenError, StreamFailure
from tierbridge.handlers.aggregator import aggregate_stream
from tierbridge.handlers.contracts import InvocationRequest
from tierbridge.models.catalog import get_model
from tierbridge.providers.events import StreamDone, TextDelta, ThinkingDelta, TokenUsage
from tierbridge.providers.openai_stream import OpenAIStreamProvider, build_messages, default_api_key


# ─── Helpers ─────────────────────────────────────────────────────


def _chunk(content=None, reasoning=None, finish_reason=None, usage=None, choices=True):
    delta = SimpleNamespace(content=content, reasoning=reasoning)
    return SimpleNamespace(
        choices=[SimpleNamespace(delta=delta, finish_reason=finish_reason)] if choices else [],
        usage=usage,
    )


class _FakeStream:
    def __init__(self, chunks, error: Exception | None = None):
        self._chunks = list(chunks)
        self._error = error
        self.closed = False

    def __aiter__(self):
        return self._gen()

    async def _gen(self):
        for chunk in self._chunks:
            yield chunk
        if self._error is not None:
            raise self._error

    async def close(self):
        self.closed = True


def _patched_client(create: AsyncMock):
    client = MagicMock()
    client.chat.completions.create = create
    return patch("tierbridge.providers.openai_stream.AsyncOpenAI", return_value=client)


@pytest.fixture
def openai_config(monkeypatch):
    cfg = TierBridgeConfig(openai=OpenAIConfig(api_key="sk-test", openrouter_api_key="sk-or"))
    monkeypatch.setattr(config_module, "config", cfg)
    return cfg


# ─── Tests ───────────────────────────────────────────────────────


def test_build_messages():
    assert build_messages("hi", {}) == [{"role": "user", "content": "hi"}]
    assert build_messages("hi", {"system": "be brief"})[0] == {
        "role": "system",
        "content": "be brief",
    }


def test_default_api_key_by_provider(openai_config):
    assert default_api_key("openai") == "sk-test"
    assert default_api_key("openrouter") == "sk-or"


@pytest.mark.asyncio
async def test_maps_chunks_to_events(openai_config):
    usage = SimpleNamespace(prompt_tokens=4, completion_tokens=2, total_tokens=6)
    create = AsyncMock(
        return_value=_FakeStream(
            [
                _chunk(reasoning="thinking"),
                _chunk(content="Hel"),
                _chunk(content="lo", finish_reason="stop"),
                _chunk(usage=usage, choices=False),
            ]
        )
    )
    provider = OpenAIStreamProvider()
    with _patched_client(create):
        stream = await provider.open_stream(get_model("openai/gpt-4o"), "hi", {})
        out = [e async for e in stream]

    assert out == [
        ThinkingDelta("thinking"),
        TextDelta("Hel"),
        TextDelta("lo"),
        StreamDone(reason="stop", usage=TokenUsage(input=4, output=2, total=6)),
    ]


@pytest.mark.asyncio
async def test_request_kwargs(openai_config):
    create = AsyncMock(return_value=_FakeStream([]))
    provider = OpenAIStreamProvider()
    model = get_model("openai/gpt-4o-mini")
    with _patched_client(create) as client_cls:
        await provider.open_stream(
            model, "hello", {"temperature": 0.1, "max_tokens": 10_000_000, "unknown": 1}
        )

    client_cls.assert_called_once_with(base_url=model.base_url, api_key="sk-test")
    kwargs = create.await_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["stream"] is True
    assert kwargs["temperature"] == 0.1
    assert kwargs["max_tokens"] == model.max_tokens
    assert "unknown" not in kwargs
    assert kwargs["messages"] == [{"role": "user", "content": "hello"}]


@pytest.mark.asyncio
async def test_client_reused_per_endpoint(openai_config):
    create = AsyncMock(side_effect=lambda **_: _FakeStream([]))
    provider = OpenAIStreamProvider()
    with _patched_client(create) as client_cls:
        await provider.open_stream(get_model("openai/gpt-4o"), "a", {})
        await provider.open_stream(get_model("openai/gpt-4o-mini"), "b", {})
        await provider.open_stream(get_model("openrouter/openai/gpt-4o"), "c", {})

    assert client_cls.call_count == 2
    assert (await provider.health_check())["clients"] == 2


@pytest.mark.asyncio
async def test_base_url_override(monkeypatch):
    monkeypatch.setattr(
        config_module,
        "config",
        TierBridgeConfig(openai=OpenAIConfig(api_key="k", base_url="http://localhost:11434/v1")),
    )
    create = AsyncMock(return_value=_FakeStream([]))
    with _patched_client(create) as client_cls:
        await OpenAIStreamProvider().open_stream(get_model("openai/gpt-4o"), "x", {})
    client_cls.assert_called_once_with(base_url="http://localhost:11434/v1", api_key="k")


@pytest.mark.asyncio
async def test_aggregates_through_openai_provider(openai_config):
    create = AsyncMock(
        return_value=_FakeStream([_chunk(content="<response>"), _chunk(content="ok"), _chunk(content="</response>")])
    )
    chunks: list[str] = []
    with _patched_client(create):
        out = await aggregate_stream(
            OpenAIStreamProvider(),
            get_model("openai/gpt-4o"),
            InvocationRequest(prompt="hello", chunk_sink=chunks.append),
        )
    assert out == "<response>ok</response>"
    assert chunks == ["<response>", "ok", "</response>"]


@pytest.mark.asyncio
async def test_create_failure_is_session_open_error(openai_config):
    create = AsyncMock(side_effect=ConnectionError("unreachable"))
    with _patched_client(create):
        with pytest.raises(SessionOpenError, match="unreachable"):
            await aggregate_stream(
                OpenAIStreamProvider(), get_model("openai/gpt-4o"), InvocationRequest(prompt="x")
            )


@pytest.mark.asyncio
async def test_midstream_sdk_error_is_stream_failure(openai_config):
    create = AsyncMock(
        return_value=_FakeStream([_chunk(content="par")], error=RuntimeError("server closed"))
    )
    with _patched_client(create):
        with pytest.raises(StreamFailure, match="server closed"):
            await aggregate_stream(
                OpenAIStreamProvider(), get_model("openai/gpt-4o"), InvocationRequest(prompt="x")
            )


@pytest.mark.asyncio
async def test_sink_failure_closes_sdk_stream(openai_config):
    stream = _FakeStream([_chunk(content="a"), _chunk(content="b"), _chunk(content="c")])
    create = AsyncMock(return_value=stream)

    def sink(chunk):
        if chunk == "b":
            raise RuntimeError("terminal detached")

    with _patched_client(create):
        with pytest.raises(ChunkSinkError, match="terminal detached"):
            await aggregate_stream(
                OpenAIStreamProvider(),
                get_model("openai/gpt-4o"),
                InvocationRequest(prompt="x", chunk_sink=sink),
            )
    assert stream.closed


@pytest.mark.asyncio
async def test_sdk_stream_closed_after_failure_and_success(openai_config):
    failing = _FakeStream([_chunk(content="par")], error=RuntimeError("server closed"))
    finished = _FakeStream([_chunk(content="done", finish_reason="stop")])
    create = AsyncMock(side_effect=[failing, finished])
    model = get_model("openai/gpt-4o")

    with _patched_client(create):
        provider = OpenAIStreamProvider()
        with pytest.raises(StreamFailure):
            await aggregate_stream(provider, model, InvocationRequest(prompt="x"))
        assert await aggregate_stream(provider, model, InvocationRequest(prompt="y")) == "done"

    assert failing.closed
    assert finished.closed


@pytest.mark.asyncio
async def test_custom_key_resolver(openai_config):
    create = AsyncMock(return_value=_FakeStream([]))
    provider = OpenAIStreamProvider(api_key_resolver=lambda p: f"key-for-{p}")
    with _patched_client(create) as client_cls:
        await provider.open_stream(get_model("openrouter/deepseek/deepseek-chat"), "x", {})
    assert client_cls.call_args.kwargs["api_key"] == "key-for-openrouter"
