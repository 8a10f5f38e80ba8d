"""
Handler contracts — what the runtime passes in and gets back.

The runtime hands a handler either an InvocationRequest or the loose
param dict it already has; both resolve to the same request shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Protocol, Union, runtime_checkable

from tierbridge.models.tiers import ModelTier

# Receives each text delta as it arrives. May be sync or async.
ChunkSink = Callable[[str], Union[None, Awaitable[None]]]

# Receives every stream event (all kinds), e.g. for a live terminal display.
StreamObserver = Callable[[Any], Union[None, Awaitable[None]]]

# Param names the host runtime uses for the chunk sink
SINK_PARAM_NAMES = ("chunk_sink", "on_stream_chunk", "onStreamChunk")


@dataclass
class InvocationRequest:
    """
    Per-call input to a tier handler.

    prompt: the fully composed prompt text
    chunk_sink: optional callback for live deltas
    params: opaque provider params (temperature, max_tokens, ...), forwarded untouched
    """

    prompt: str
    chunk_sink: ChunkSink | None = None
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> InvocationRequest:
        """Build a request from the runtime's param dict.

        "prompt" is required. The first sink-named key found becomes the
        chunk sink; everything else is passed through as opaque params.
        """
        if "prompt" not in params:
            raise ValueError("Invocation params must include a prompt")
        sink = None
        rest: dict[str, Any] = {}
        for key, value in params.items():
            if key == "prompt":
                continue
            if key in SINK_PARAM_NAMES:
                if sink is None and value is not None:
                    sink = value
                continue
            rest[key] = value
        if sink is not None and not callable(sink):
            raise TypeError(f"chunk sink must be callable, got {type(sink).__name__}")
        return cls(prompt=str(params["prompt"]), chunk_sink=sink, params=rest)

    @classmethod
    def coerce(cls, request: InvocationRequest | Mapping[str, Any] | str) -> InvocationRequest:
        if isinstance(request, InvocationRequest):
            return request
        if isinstance(request, str):
            return cls(prompt=request)
        return cls.from_params(request)


ModelHandler = Callable[..., Awaitable[str]]


@runtime_checkable
class ModelRegistry(Protocol):
    """The host runtime's model registry, injected at registration time."""

    def register(self, tier: ModelTier, provider_id: str, handler: ModelHandler, *args: Any) -> None:
        ...
