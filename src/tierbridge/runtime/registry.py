"""
In-memory model registry — a host-runtime registry you can hold in one hand.

Stores one handler per (tier, provider id). Registering the same pair again
overwrites it. Lookup without a provider id picks the highest priority
handler for the tier; ties go to whichever registered first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from tierbridge.handlers.contracts import InvocationRequest, ModelHandler
from tierbridge.models.tiers import ModelTier

logger = logging.getLogger(__name__)


class NoHandlerError(LookupError):
    """No handler is registered for the requested tier/provider."""


@dataclass(frozen=True)
class RegistryEntry:
    tier: ModelTier
    provider_id: str
    handler: ModelHandler
    priority: int = 0


class InMemoryModelRegistry:
    """Model registry keyed by (tier, provider id)."""

    def __init__(self):
        self._entries: dict[tuple[ModelTier, str], RegistryEntry] = {}

    def register(
        self,
        tier: ModelTier,
        provider_id: str,
        handler: ModelHandler,
        priority: int = 0,
    ) -> None:
        """Register a handler. Overwrites if the (tier, provider id) pair exists."""
        if not callable(handler):
            raise TypeError(f"Handler for {tier} must be callable: {handler!r}")
        key = (ModelTier(tier), provider_id)
        self._entries[key] = RegistryEntry(ModelTier(tier), provider_id, handler, priority)
        logger.debug(f"Registered model handler: {key[0].value} -> {provider_id}")

    def get(self, tier: ModelTier, provider_id: str | None = None) -> ModelHandler | None:
        """Handler for a tier, from a specific provider or the best-ranked one."""
        tier = ModelTier(tier)
        if provider_id is not None:
            entry = self._entries.get((tier, provider_id))
            return entry.handler if entry else None
        candidates = [e for e in self._entries.values() if e.tier == tier]
        if not candidates:
            return None
        return max(candidates, key=lambda e: e.priority).handler

    def entries(self) -> list[RegistryEntry]:
        """All registrations, in registration order."""
        return list(self._entries.values())

    def providers_for(self, tier: ModelTier) -> list[str]:
        return [e.provider_id for e in self._entries.values() if e.tier == ModelTier(tier)]

    async def use_model(
        self,
        tier: ModelTier,
        request: InvocationRequest | Mapping[str, Any] | str,
        provider_id: str | None = None,
    ) -> str:
        """Dispatch by model type, the way the host runtime calls handlers."""
        handler = self.get(tier, provider_id)
        if handler is None:
            raise NoHandlerError(
                f"No handler registered for {ModelTier(tier).value}"
                + (f" (provider={provider_id})" if provider_id else "")
            )
        return await handler(request)

    def __len__(self) -> int:
        return len(self._entries)
