"""
Handlers — the registration and aggregation layer.

- register_model_handlers: bind LARGE/SMALL descriptors into a runtime registry
- StreamingAggregator / aggregate_stream: the handler body
- InvocationRequest: per-call input
"""

from tierbridge.handlers.aggregator import StreamingAggregator, aggregate_stream
from tierbridge.handlers.contracts import (
    ChunkSink,
    InvocationRequest,
    ModelHandler,
    ModelRegistry,
    StreamObserver,
)
from tierbridge.handlers.registrar import (
    TierConfig,
    TierHandlers,
    make_handler,
    register_model_handlers,
)

__all__ = [
    # Contracts
    "InvocationRequest",
    "ChunkSink",
    "StreamObserver",
    "ModelHandler",
    "ModelRegistry",
    # Aggregation
    "StreamingAggregator",
    "aggregate_stream",
    # Registration
    "TierConfig",
    "TierHandlers",
    "make_handler",
    "register_model_handlers",
]
