"""
TierBridge Configuration — single source of truth for all settings.

Reads from environment variables with sensible defaults.
No config files, no YAML. Just env vars (optionally from a .env file).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

DEFAULT_MODEL_SPEC = "openai/gpt-4o"
DEFAULT_PROVIDER_ID = "tierbridge"

_TRUTHY = ("1", "true", "yes")


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _env_list(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class ModelsConfig:
    """Which concrete model backs each tier, as provider/model-id specs."""

    large_model: str = DEFAULT_MODEL_SPEC
    small_model: str = DEFAULT_MODEL_SPEC

    @classmethod
    def from_env(cls) -> ModelsConfig:
        # TIERBRIDGE_MODEL is the legacy single-model override for both tiers.
        legacy = os.getenv("TIERBRIDGE_MODEL", "")
        large = os.getenv("TIERBRIDGE_LARGE_MODEL", "") or legacy or DEFAULT_MODEL_SPEC
        small = os.getenv("TIERBRIDGE_SMALL_MODEL", "") or legacy or large
        return cls(large_model=large, small_model=small)


@dataclass(frozen=True)
class RegistrationConfig:
    """How handlers are registered with the host runtime's model registry."""

    enabled: bool = False
    provider_id: str = DEFAULT_PROVIDER_ID
    aliases: tuple[str, ...] = ()
    priority: int = 0  # 0 = registry default, not forwarded
    include_reasoning_tiers: bool = False

    @classmethod
    def from_env(cls) -> RegistrationConfig:
        return cls(
            enabled=_env_flag("TIERBRIDGE_ENABLED"),
            provider_id=os.getenv("TIERBRIDGE_PROVIDER_ID", DEFAULT_PROVIDER_ID),
            aliases=_env_list("TIERBRIDGE_PROVIDER_ALIASES"),
            priority=int(os.getenv("TIERBRIDGE_PRIORITY", "0")),
            include_reasoning_tiers=_env_flag("TIERBRIDGE_REASONING_TIERS"),
        )


@dataclass(frozen=True)
class OpenAIConfig:
    """Credentials for OpenAI-compatible streaming endpoints."""

    api_key: str = ""
    openrouter_api_key: str = ""
    base_url: str = ""  # overrides the descriptor's base_url when set

    @classmethod
    def from_env(cls) -> OpenAIConfig:
        return cls(
            api_key=os.getenv("OPENAI_API_KEY", ""),
            openrouter_api_key=os.getenv("OPENROUTER_API_KEY", ""),
            base_url=os.getenv("TIERBRIDGE_OPENAI_BASE_URL", ""),
        )


@dataclass(frozen=True)
class TierBridgeConfig:
    """Root configuration."""

    models: ModelsConfig = field(default_factory=ModelsConfig)
    registration: RegistrationConfig = field(default_factory=RegistrationConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)

    @classmethod
    def from_env(cls) -> TierBridgeConfig:
        return cls(
            models=ModelsConfig.from_env(),
            registration=RegistrationConfig.from_env(),
            openai=OpenAIConfig.from_env(),
        )


# Singleton: import the module and read ``config_module.config`` so reloads are visible
config = TierBridgeConfig.from_env()


def reload_config() -> TierBridgeConfig:
    """Re-read the environment and replace the module-level singleton."""
    global config
    config = TierBridgeConfig.from_env()
    return config
