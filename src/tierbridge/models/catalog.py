"""
Built-in model catalog — provider/model-id specs to descriptors.

Only models reachable through an OpenAI-compatible chat-completions
endpoint are listed, since that is the stream provider we ship.
OpenRouter entries are keyed with the "openrouter" provider and keep
the upstream vendor prefix in the model id.
"""

from __future__ import annotations

from tierbridge.core.errors import ConfigurationError
from tierbridge.models.descriptor import ModelCost, ModelDescriptor

OPENAI_BASE_URL = "https://api.openai.com/v1"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


def _openai(model_id: str, name: str, context_window: int, max_tokens: int, cost: ModelCost) -> ModelDescriptor:
    return ModelDescriptor(
        id=model_id,
        name=name,
        api="openai-completions",
        provider="openai",
        base_url=OPENAI_BASE_URL,
        context_window=context_window,
        max_tokens=max_tokens,
        input=("text", "image"),
        cost=cost,
    )


def _openrouter(
    model_id: str,
    name: str,
    context_window: int,
    max_tokens: int,
    cost: ModelCost,
    reasoning: bool = False,
) -> ModelDescriptor:
    return ModelDescriptor(
        id=model_id,
        name=name,
        api="openai-completions",
        provider="openrouter",
        base_url=OPENROUTER_BASE_URL,
        context_window=context_window,
        max_tokens=max_tokens,
        reasoning=reasoning,
        input=("text", "image"),
        cost=cost,
    )


_MODELS: tuple[ModelDescriptor, ...] = (
    _openai("gpt-4o", "GPT-4o", 128_000, 16_384, ModelCost(2.5, 10.0, 1.25, 0.0)),
    _openai("gpt-4o-mini", "GPT-4o mini", 128_000, 16_384, ModelCost(0.15, 0.6, 0.075, 0.0)),
    _openai("gpt-4.1", "GPT-4.1", 1_047_576, 32_768, ModelCost(2.0, 8.0, 0.5, 0.0)),
    _openai("gpt-4.1-mini", "GPT-4.1 mini", 1_047_576, 32_768, ModelCost(0.4, 1.6, 0.1, 0.0)),
    _openrouter("openai/gpt-4o", "OpenAI: GPT-4o", 128_000, 16_384, ModelCost(2.5, 10.0, 1.25, 0.0)),
    _openrouter(
        "anthropic/claude-sonnet-4",
        "Anthropic: Claude Sonnet 4",
        200_000,
        64_000,
        ModelCost(3.0, 15.0, 0.3, 3.75),
        reasoning=True,
    ),
    _openrouter(
        "deepseek/deepseek-chat",
        "DeepSeek: DeepSeek V3",
        163_840,
        8_192,
        ModelCost(0.27, 1.1, 0.07, 0.0),
    ),
)

CATALOG: dict[str, ModelDescriptor] = {model.spec: model for model in _MODELS}


def parse_model_spec(spec: str) -> tuple[str, str]:
    """Split "provider/model-id" into its parts.

    Only the first slash separates the provider, so OpenRouter specs like
    "openrouter/anthropic/claude-sonnet-4" keep the vendor in the id.
    """
    provider, _, model_id = (spec or "").strip().partition("/")
    if not provider or not model_id:
        raise ConfigurationError(
            f"Invalid model spec: {spec!r}. Expected format: provider/modelId"
        )
    return provider, model_id


def get_model(spec: str) -> ModelDescriptor:
    """Look up a catalog descriptor by provider/model-id spec."""
    provider, model_id = parse_model_spec(spec)
    try:
        return CATALOG[f"{provider}/{model_id}"]
    except KeyError:
        raise ConfigurationError(f"Unknown model: {spec!r}") from None


def list_models(provider: str | None = None) -> list[ModelDescriptor]:
    """Catalog entries, optionally filtered by provider."""
    return [m for m in _MODELS if provider is None or m.provider == provider]


def list_providers() -> list[str]:
    """Distinct provider names in catalog order."""
    return list(dict.fromkeys(m.provider for m in _MODELS))
