"""
OpenAI Stream Provider — chat-completions streaming over any OpenAI-compatible API.

Works against api.openai.com and OpenAI-compatible gateways (e.g. OpenRouter)
by pointing the client at the descriptor's base_url. Content deltas become
TextDelta events, reasoning deltas (OpenRouter/DeepSeek "reasoning" fields)
become ThinkingDelta, and the stream closes with a StreamDone carrying usage.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Callable

from openai import AsyncOpenAI

import tierbridge.core.config as config_module
from tierbridge.models.descriptor import ModelDescriptor
from tierbridge.providers.base import StreamProvider
from tierbridge.providers.events import (
    StreamDone,
    StreamEvent,
    TextDelta,
    ThinkingDelta,
    TokenUsage,
)

logger = logging.getLogger(__name__)

# Request params forwarded to chat.completions.create when present
_FORWARDED_PARAMS = (
    "temperature",
    "top_p",
    "stop",
    "presence_penalty",
    "frequency_penalty",
    "seed",
)


def default_api_key(provider: str) -> str | None:
    """Resolve an API key for a descriptor's provider from config."""
    cfg = config_module.config.openai
    if provider == "openrouter":
        return cfg.openrouter_api_key or None
    return cfg.api_key or None


def build_messages(prompt: str, params: dict[str, Any]) -> list[dict]:
    """The runtime pre-composes the full prompt, so it goes out as one user message."""
    messages: list[dict] = []
    system = params.get("system")
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    return messages


class OpenAIStreamProvider(StreamProvider):
    name = "openai"

    def __init__(self, api_key_resolver: Callable[[str], str | None] | None = None):
        self._resolve_key = api_key_resolver or default_api_key
        self._clients: dict[tuple[str, str | None], AsyncOpenAI] = {}

    def _client_for(self, model: ModelDescriptor) -> AsyncOpenAI:
        base_url = config_module.config.openai.base_url or model.base_url
        api_key = self._resolve_key(model.provider)
        key = (base_url, api_key)
        client = self._clients.get(key)
        if client is None:
            client = AsyncOpenAI(base_url=base_url, api_key=api_key)
            self._clients[key] = client
            logger.info(
                f"OpenAI-compatible client ready (base_url={base_url}, "
                f"api_key={'set' if api_key else 'missing'})"
            )
        return client

    async def open_stream(
        self,
        model: ModelDescriptor,
        prompt: str,
        params: dict[str, Any],
    ) -> AsyncIterator[StreamEvent]:
        kwargs: dict[str, Any] = {
            "model": model.id,
            "messages": build_messages(prompt, params),
            "stream": True,
            "stream_options": {"include_usage": True},
        }
        max_tokens = params.get("max_tokens")
        if max_tokens is not None:
            kwargs["max_tokens"] = min(int(max_tokens), model.max_tokens)
        for name in _FORWARDED_PARAMS:
            if params.get(name) is not None:
                kwargs[name] = params[name]

        stream = await self._client_for(model).chat.completions.create(**kwargs)
        return self._events(stream)

    async def _events(self, stream) -> AsyncIterator[StreamEvent]:
        finish_reason = "stop"
        usage: TokenUsage | None = None

        try:
            async for chunk in stream:
                if getattr(chunk, "usage", None):
                    usage = TokenUsage(
                        input=chunk.usage.prompt_tokens or 0,
                        output=chunk.usage.completion_tokens or 0,
                        total=chunk.usage.total_tokens or 0,
                    )
                if not chunk.choices:
                    continue

                choice = chunk.choices[0]
                delta = choice.delta

                # OpenAI-compatible gateways disagree on the reasoning field name
                reasoning = getattr(delta, "reasoning", None) or getattr(
                    delta, "reasoning_content", None
                )
                if reasoning:
                    yield ThinkingDelta(delta=reasoning)
                if delta.content:
                    yield TextDelta(delta=delta.content)
                if choice.finish_reason:
                    finish_reason = choice.finish_reason
        finally:
            await stream.close()

        yield StreamDone(reason=finish_reason, usage=usage)

    async def health_check(self) -> dict:
        return {
            "provider": self.name,
            "clients": len(self._clients),
            "status": "ready",
        }
