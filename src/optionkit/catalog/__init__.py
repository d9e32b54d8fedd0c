"""Ready-made option definitions."""

from __future__ import annotations

from optionkit.foundation.registry import DefinitionRegistry

from . import common, geography


def default_registry() -> DefinitionRegistry:
    """Registry of every catalog module, common lists first."""
    return DefinitionRegistry.from_modules(common, geography)


__all__ = ["common", "geography", "default_registry"]
