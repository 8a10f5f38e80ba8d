"""
Runtime bootstrap — register tier handlers straight from environment config.

    from tierbridge.runtime import InMemoryModelRegistry, is_enabled_from_env, register_from_config

    if is_enabled_from_env():
        selected = register_from_config(registry)

Model specs are "provider/model-id" strings resolved against the built-in
catalog. The handlers are also registered under the full model specs, so
callers that pass a spec where a provider id is expected still land here.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import tierbridge.core.config as config_module
from tierbridge.core.config import TierBridgeConfig
from tierbridge.core.errors import ConfigurationError
from tierbridge.handlers.contracts import ModelRegistry, StreamObserver
from tierbridge.handlers.registrar import TierConfig, TierHandlers, register_model_handlers
from tierbridge.models.catalog import get_model
from tierbridge.providers.base import StreamProvider
from tierbridge.providers.registry import get_stream_provider

logger = logging.getLogger(__name__)


def is_enabled_from_env(env: dict | None = None) -> bool:
    """True when TIERBRIDGE_ENABLED is 1/true/yes (case-insensitive)."""
    env = os.environ if env is None else env
    raw = env.get("TIERBRIDGE_ENABLED")
    if not raw:
        return False
    return str(raw).strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Registration:
    """What register_from_config selected."""

    model_spec: str
    provider: str
    id: str
    handlers: TierHandlers


def register_from_config(
    registry: ModelRegistry,
    cfg: TierBridgeConfig | None = None,
    provider: StreamProvider | None = None,
    observer: StreamObserver | None = None,
) -> Registration:
    """Resolve both tiers from config and register them.

    Returns the LARGE selection as the primary reference.
    """
    cfg = cfg or config_module.config
    large = get_model(cfg.models.large_model)
    small = get_model(cfg.models.small_model)

    if provider is None:
        provider = get_stream_provider(large.api)
        small_provider = get_stream_provider(small.api)
        if type(small_provider) is not type(provider):
            raise ConfigurationError(
                f"LARGE ({large.api}) and SMALL ({small.api}) need the same stream provider"
            )

    reg = cfg.registration
    aliases = tuple(dict.fromkeys((*reg.aliases, large.spec, small.spec)))

    handlers = register_model_handlers(
        registry,
        TierConfig(
            large=large,
            small=small,
            provider=provider,
            provider_id=reg.provider_id,
            provider_aliases=aliases,
            priority=reg.priority or None,
            include_reasoning_tiers=reg.include_reasoning_tiers,
            observer=observer,
        ),
    )
    logger.info(f"Tier handlers active (large={large.spec}, small={small.spec})")
    return Registration(model_spec=large.spec, provider=large.provider, id=large.id, handlers=handlers)
