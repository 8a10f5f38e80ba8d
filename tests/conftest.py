"""
Shared fixtures for tierbridge tests.

Provides a dummy model descriptor, a registry that records every
register() call, and a metrics reset so counters start at zero per test.
"""

from __future__ import annotations

from typing import Any

import pytest

from tierbridge.core.metrics import metrics
from tierbridge.models.descriptor import ModelCost, ModelDescriptor
from tierbridge.providers.scripted import ScriptedStreamProvider


def make_model(model_id: str = "dummy-model", **overrides: Any) -> ModelDescriptor:
    fields: dict[str, Any] = dict(
        id=model_id,
        name="Dummy",
        api="openai-responses",
        provider="openai",
        base_url="http://localhost",
        reasoning=False,
        input=("text",),
        cost=ModelCost(),
        context_window=1,
        max_tokens=1,
    )
    fields.update(overrides)
    return ModelDescriptor(**fields)


def events(*deltas: str) -> list[dict]:
    """Raw text_delta events in provider wire shape."""
    return [{"type": "text_delta", "delta": d} for d in deltas]


class RecordingRegistry:
    """Substitute runtime registry that records every register() call."""

    def __init__(self):
        self.calls: list[dict] = []

    def register(self, tier, provider_id, handler, *args):
        self.calls.append(
            {
                "tier": tier,
                "provider": provider_id,
                "handler": handler,
                "priority": args[0] if args else None,
            }
        )

    def handler_for(self, tier, provider_id="tierbridge"):
        for call in self.calls:
            if call["tier"] == tier and call["provider"] == provider_id:
                return call["handler"]
        return None


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def registry() -> RecordingRegistry:
    return RecordingRegistry()


@pytest.fixture
def provider() -> ScriptedStreamProvider:
    return ScriptedStreamProvider()
