"""
Model Tier Registrar — bind LARGE and SMALL descriptors into a runtime registry.

Usage:
    handlers = register_model_handlers(
        runtime.models,
        TierConfig(large=large_model, small=small_model, provider=OpenAIStreamProvider()),
    )
    text = await handlers.large({"prompt": "Hello"})

Both descriptors are validated before the registry is touched, so a bad
descriptor leaves the registry exactly as it was. With the default config
the registry receives exactly two calls: LARGE then SMALL, both under the
same provider id, each with its own handler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from tierbridge.core.config import DEFAULT_PROVIDER_ID
from tierbridge.core.errors import ConfigurationError
from tierbridge.handlers.aggregator import StreamingAggregator
from tierbridge.handlers.contracts import (
    InvocationRequest,
    ModelHandler,
    ModelRegistry,
    StreamObserver,
)
from tierbridge.models.descriptor import ModelDescriptor
from tierbridge.models.tiers import REASONING_TIERS, ModelTier
from tierbridge.providers.base import StreamProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierConfig:
    """Everything one registration pass needs."""

    large: ModelDescriptor
    small: ModelDescriptor
    provider: StreamProvider
    provider_id: str = DEFAULT_PROVIDER_ID
    provider_aliases: tuple[str, ...] = ()
    priority: int | None = None
    include_reasoning_tiers: bool = False
    observer: StreamObserver | None = None


@dataclass(frozen=True)
class TierHandlers:
    """The handlers a registration pass produced."""

    large: ModelHandler
    small: ModelHandler
    provider_id: str
    provider_ids: tuple[str, ...]
    large_model: ModelDescriptor
    small_model: ModelDescriptor

    def for_tier(self, tier: ModelTier) -> ModelHandler:
        if tier in (ModelTier.LARGE, ModelTier.REASONING_LARGE):
            return self.large
        return self.small


def make_handler(aggregator: StreamingAggregator) -> ModelHandler:
    """Wrap an aggregator in the async function the registry stores."""

    async def handler(request: InvocationRequest | Mapping[str, Any] | str) -> str:
        return await aggregator(request)

    handler.__qualname__ = f"tier_handler[{aggregator.model.spec}]"
    return handler


def _validate(config: TierConfig) -> None:
    for tier, model in ((ModelTier.LARGE, config.large), (ModelTier.SMALL, config.small)):
        if not isinstance(model, ModelDescriptor):
            raise ConfigurationError(
                f"{tier.value} needs a ModelDescriptor, got {type(model).__name__}"
            )
        try:
            model.validate()
        except ConfigurationError as e:
            raise ConfigurationError(f"{tier.value}: {e}") from e
    if not config.provider_id:
        raise ConfigurationError("provider_id must be a non-empty string")
    if config.provider is None:
        raise ConfigurationError("a stream provider is required")


def register_model_handlers(registry: ModelRegistry, config: TierConfig) -> TierHandlers:
    """Register one handler per tier with ``registry``.

    Raises ConfigurationError before any registry call if either descriptor
    is malformed. Re-registering replaces the previous handlers; merging is
    the registry's business, not ours.
    """
    _validate(config)

    large = make_handler(StreamingAggregator(config.provider, config.large, config.observer))
    small = make_handler(StreamingAggregator(config.provider, config.small, config.observer))

    # Primary id first, aliases de-duplicated in order
    provider_ids = tuple(dict.fromkeys((config.provider_id, *config.provider_aliases)))

    bindings: list[tuple[ModelTier, ModelHandler]] = [
        (ModelTier.LARGE, large),
        (ModelTier.SMALL, small),
    ]
    if config.include_reasoning_tiers:
        bindings += [
            (REASONING_TIERS[ModelTier.LARGE], large),
            (REASONING_TIERS[ModelTier.SMALL], small),
        ]

    for provider_id in provider_ids:
        for tier, handler in bindings:
            if config.priority is None:
                registry.register(tier, provider_id, handler)
            else:
                registry.register(tier, provider_id, handler, config.priority)

    logger.info(
        f"Registered model handlers (large={config.large.spec}, small={config.small.spec}, "
        f"providers={list(provider_ids)})",
        extra={"provider": config.provider_id},
    )

    return TierHandlers(
        large=large,
        small=small,
        provider_id=config.provider_id,
        provider_ids=provider_ids,
        large_model=config.large,
        small_model=config.small,
    )
