"""
tierbridge — tiered model handlers over streaming providers.

Registers LARGE and SMALL text-generation handlers with a host runtime's
model registry and turns a provider's event stream into one resolved
string, optionally forwarding each text delta to a chunk sink on the way.
"""

from tierbridge.core.errors import (
    ChunkSinkError,
    ConfigurationError,
    ModelInvocationError,
    SessionOpenError,
    StreamFailure,
    TierBridgeError,
    UnknownProviderError,
)
from tierbridge.handlers import (
    InvocationRequest,
    StreamingAggregator,
    TierConfig,
    TierHandlers,
    aggregate_stream,
    register_model_handlers,
)
from tierbridge.models import ModelCost, ModelDescriptor, ModelTier

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Models
    "ModelTier",
    "ModelCost",
    "ModelDescriptor",
    # Handlers
    "InvocationRequest",
    "StreamingAggregator",
    "aggregate_stream",
    "TierConfig",
    "TierHandlers",
    "register_model_handlers",
    # Errors
    "TierBridgeError",
    "ConfigurationError",
    "UnknownProviderError",
    "ModelInvocationError",
    "SessionOpenError",
    "StreamFailure",
    "ChunkSinkError",
]
