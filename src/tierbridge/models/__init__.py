"""
Models — tiers, descriptors, and the built-in catalog.

A tier is what the runtime asks for; a descriptor is what actually serves it.
"""

from tierbridge.models.catalog import CATALOG, get_model, list_models, list_providers, parse_model_spec
from tierbridge.models.descriptor import ModelCost, ModelDescriptor
from tierbridge.models.tiers import REASONING_TIERS, ModelTier

__all__ = [
    "ModelTier",
    "REASONING_TIERS",
    "ModelCost",
    "ModelDescriptor",
    # Catalog
    "CATALOG",
    "get_model",
    "list_models",
    "list_providers",
    "parse_model_spec",
]
