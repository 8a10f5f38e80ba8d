"""
Error taxonomy.

Configuration problems surface synchronously at registration time.
Invocation problems surface from the awaited handler and always carry
the provider and model that failed. Nothing here is ever swallowed.
"""

from __future__ import annotations


class TierBridgeError(Exception):
    """Base class for every error raised by tierbridge."""


class ConfigurationError(TierBridgeError):
    """A model descriptor or model spec is malformed."""


class UnknownProviderError(ConfigurationError):
    """No stream provider is available for a descriptor's api family."""


class ModelInvocationError(TierBridgeError):
    """A handler invocation failed; no partial text is returned."""

    def __init__(self, provider: str, model: str, message: str):
        self.provider = provider
        self.model = model
        self.reason = message
        super().__init__(f"stream failed (provider={provider}, model={model}): {message}")


class SessionOpenError(ModelInvocationError):
    """The provider rejected opening the stream."""


class StreamFailure(ModelInvocationError):
    """The event sequence terminated abnormally mid-consumption."""


class ChunkSinkError(ModelInvocationError):
    """The caller-supplied chunk sink raised while receiving a delta."""
