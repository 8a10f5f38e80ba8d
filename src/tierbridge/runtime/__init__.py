"""
Runtime — host-side pieces: an in-memory model registry and the env bootstrap.
"""

from tierbridge.runtime.bootstrap import Registration, is_enabled_from_env, register_from_config
from tierbridge.runtime.registry import InMemoryModelRegistry, NoHandlerError, RegistryEntry

__all__ = [
    "InMemoryModelRegistry",
    "NoHandlerError",
    "RegistryEntry",
    "Registration",
    "is_enabled_from_env",
    "register_from_config",
]
