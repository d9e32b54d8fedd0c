"""Definition registry: option items, definition shapes, reactive refs."""

from .definitions import (
    AsyncFunction,
    Definition,
    OptionItem,
    OptionValue,
    PureFunction,
    ReactiveSource,
    StaticList,
    coerce_items,
    live,
    sampled,
    shape_name,
)
from .reactive import Computed, Reactive, ReactiveMode, Ref, computed
from .registry import DefinitionRegistry, classify_definition

__all__ = [
    "OptionItem", "OptionValue", "coerce_items",
    "Definition", "StaticList", "PureFunction", "AsyncFunction", "ReactiveSource",
    "live", "sampled", "shape_name",
    "Reactive", "ReactiveMode", "Ref", "Computed", "computed",
    "DefinitionRegistry", "classify_definition",
]
