"""
Streaming Aggregator — one model invocation, end to end.

Opens a provider stream, walks the events once in arrival order, and
resolves to the concatenation of every text delta. A chunk sink, when
given, sees each delta before the next event is read; it never changes
the resolved value.

Failure rules:
- opening the session fails        -> SessionOpenError
- the event sequence raises        -> StreamFailure
- the chunk sink/observer raises   -> ChunkSinkError
In every case the partial text is dropped. Task cancellation is not
wrapped; it propagates from the next suspension point.
"""

from __future__ import annotations

import inspect
import logging
import time
from typing import Any, Mapping

from tierbridge.core.errors import (
    ChunkSinkError,
    ModelInvocationError,
    SessionOpenError,
    StreamFailure,
)
from tierbridge.core.metrics import metrics
from tierbridge.handlers.contracts import InvocationRequest, StreamObserver
from tierbridge.models.descriptor import ModelDescriptor
from tierbridge.providers.base import StreamProvider
from tierbridge.providers.events import TextDelta, parse_event

logger = logging.getLogger(__name__)


async def _call(callback, value) -> None:
    """Invoke a sync or async callback and wait for it."""
    result = callback(value)
    if inspect.isawaitable(result):
        await result


async def _close(iterator) -> None:
    aclose = getattr(iterator, "aclose", None)
    if aclose is not None:
        await aclose()


def _failed(exc: ModelInvocationError, labels: dict, started: float) -> ModelInvocationError:
    metrics.inc("model.failures", labels={**labels, "error": type(exc).__name__})
    logger.warning(
        f"Model invocation failed: {exc}",
        extra={
            **labels,
            "status": "failed",
            "duration_ms": round((time.monotonic() - started) * 1000, 1),
        },
    )
    return exc


async def aggregate_stream(
    provider: StreamProvider,
    model: ModelDescriptor,
    request: InvocationRequest,
    *,
    observer: StreamObserver | None = None,
) -> str:
    """Run one invocation and return the full generated text."""
    labels = {"provider": model.provider, "model": model.id}
    metrics.inc("model.invocations", labels=labels)
    started = time.monotonic()

    try:
        events = await provider.open_stream(model, request.prompt, request.params)
        iterator = events.__aiter__()
    except Exception as e:
        raise _failed(SessionOpenError(model.provider, model.id, str(e)), labels, started) from e

    parts: list[str] = []
    try:
        while True:
            try:
                raw = await iterator.__anext__()
            except StopAsyncIteration:
                break
            except Exception as e:
                raise _failed(StreamFailure(model.provider, model.id, str(e)), labels, started) from e

            try:
                event = parse_event(raw)
            except Exception as e:
                raise _failed(StreamFailure(model.provider, model.id, str(e)), labels, started) from e

            if observer is not None:
                try:
                    await _call(observer, event)
                except Exception as e:
                    raise _failed(
                        ChunkSinkError(model.provider, model.id, f"stream observer failed: {e}"),
                        labels,
                        started,
                    ) from e

            if not isinstance(event, TextDelta):
                continue

            if not parts:
                metrics.observe(
                    "model.ttft_ms", (time.monotonic() - started) * 1000, labels=labels
                )

            if request.chunk_sink is not None:
                try:
                    await _call(request.chunk_sink, event.delta)
                except Exception as e:
                    raise _failed(
                        ChunkSinkError(model.provider, model.id, f"chunk sink failed: {e}"),
                        labels,
                        started,
                    ) from e

            parts.append(event.delta)
    except BaseException:
        try:
            await _close(iterator)
        except Exception:
            logger.warning("Closing the model stream failed after an error", exc_info=True)
        raise

    try:
        await _close(iterator)
    except Exception as e:
        raise _failed(StreamFailure(model.provider, model.id, str(e)), labels, started) from e

    duration_ms = (time.monotonic() - started) * 1000
    metrics.observe("model.duration_ms", duration_ms, labels=labels)
    logger.debug(
        f"Model invocation complete ({len(parts)} chunks, {duration_ms:.0f}ms)",
        extra={**labels, "status": "ok", "chunks": len(parts), "duration_ms": round(duration_ms, 1)},
    )
    return "".join(parts)


class StreamingAggregator:
    """Invocation handler body bound to one descriptor.

    Instances hold no per-call state, so one aggregator can serve any number
    of concurrent invocations.
    """

    def __init__(
        self,
        provider: StreamProvider,
        model: ModelDescriptor,
        observer: StreamObserver | None = None,
    ):
        self.provider = provider
        self.model = model
        self.observer = observer

    async def __call__(self, request: InvocationRequest | Mapping[str, Any] | str) -> str:
        return await aggregate_stream(
            self.provider,
            self.model,
            InvocationRequest.coerce(request),
            observer=self.observer,
        )

    def __repr__(self) -> str:
        return f"StreamingAggregator(model={self.model.spec!r}, provider={self.provider.name!r})"
