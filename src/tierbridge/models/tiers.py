"""Abstract model tiers the host runtime addresses models by."""

from __future__ import annotations

from enum import Enum


class ModelTier(str, Enum):
    """Model types a handler can be registered under.

    LARGE and SMALL are the addressing unit. The reasoning variants are
    only ever used as extra registration keys for the LARGE/SMALL handlers.
    """

    LARGE = "TEXT_LARGE"
    SMALL = "TEXT_SMALL"
    REASONING_LARGE = "TEXT_REASONING_LARGE"
    REASONING_SMALL = "TEXT_REASONING_SMALL"


# Which primary tier serves each reasoning model type
REASONING_TIERS: dict[ModelTier, ModelTier] = {
    ModelTier.LARGE: ModelTier.REASONING_LARGE,
    ModelTier.SMALL: ModelTier.REASONING_SMALL,
}
