"""
Model descriptors — immutable metadata for one concrete backing model.

A descriptor is created once when the runtime is configured, validated at
registration, and then captured by the tier's handler for the rest of the
process lifetime.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from tierbridge.core.errors import ConfigurationError


@dataclass(frozen=True)
class ModelCost:
    """Per-token pricing (USD per million tokens)."""

    input: float = 0.0
    output: float = 0.0
    cache_read: float = 0.0
    cache_write: float = 0.0


@dataclass(frozen=True)
class ModelDescriptor:
    """
    One concrete model.

    Fields:
      id: provider-side model id (e.g. "gpt-4o")
      name: display name
      api: protocol family tag (e.g. "openai-completions")
      provider: owning provider (e.g. "openai")
      base_url: endpoint root for the api family
      reasoning: model emits reasoning/thinking output
      input: accepted input modalities
      cost: pricing metadata
      context_window / max_tokens: numeric limits
    """

    id: str
    name: str
    api: str
    provider: str
    base_url: str
    context_window: int
    max_tokens: int
    reasoning: bool = False
    input: tuple[str, ...] = ("text",)
    cost: ModelCost = field(default_factory=ModelCost)

    @property
    def spec(self) -> str:
        """The provider/model-id spec this descriptor answers to."""
        return f"{self.provider}/{self.id}"

    def validate(self) -> None:
        """Raise ConfigurationError if identity, endpoint, or limits are missing."""
        missing = [
            name
            for name in ("id", "name", "api", "provider", "base_url")
            if not isinstance(getattr(self, name), str) or not getattr(self, name).strip()
        ]
        if missing:
            raise ConfigurationError(
                f"Model descriptor {self.id or '<unnamed>'!r} is missing: {', '.join(missing)}"
            )
        for limit in ("context_window", "max_tokens"):
            value = getattr(self, limit)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(
                    f"Model descriptor {self.id!r} has invalid {limit}: {value!r}"
                )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ModelDescriptor:
        """Build a descriptor from a catalog record.

        Accepts both snake_case and the camelCase keys provider catalogs use
        (baseUrl, contextWindow, maxTokens, cacheRead, cacheWrite). Missing
        fields are left empty and caught by validate().
        """

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data:
                    return data[key]
            return default

        raw_cost = pick("cost", default={}) or {}
        cost = ModelCost(
            input=float(raw_cost.get("input", 0.0)),
            output=float(raw_cost.get("output", 0.0)),
            cache_read=float(raw_cost.get("cache_read", raw_cost.get("cacheRead", 0.0))),
            cache_write=float(raw_cost.get("cache_write", raw_cost.get("cacheWrite", 0.0))),
        )
        return cls(
            id=pick("id", default=""),
            name=pick("name", default=""),
            api=pick("api", default=""),
            provider=pick("provider", default=""),
            base_url=pick("base_url", "baseUrl", default=""),
            context_window=pick("context_window", "contextWindow", default=0),
            max_tokens=pick("max_tokens", "maxTokens", default=0),
            reasoning=bool(pick("reasoning", default=False)),
            input=tuple(pick("input", default=("text",))),
            cost=cost,
        )
