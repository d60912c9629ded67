"""Provider capability layer (git tags, npm registry)."""

from unrelease.providers.base import (
    PROVIDER_NAMES,
    Existence,
    ExistenceStatus,
    Provider,
    ProviderName,
    Requirements,
    Scope,
    label,
)
from unrelease.providers.git import TagProvider
from unrelease.providers.npm import RegistryProvider

__all__ = [
    "PROVIDER_NAMES",
    "Existence",
    "ExistenceStatus",
    "Provider",
    "ProviderName",
    "RegistryProvider",
    "Requirements",
    "Scope",
    "TagProvider",
    "label",
]
