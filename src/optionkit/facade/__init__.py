"""Multi-shape option facade: sequence, callable and extension views."""

from .extensions import (
    ExtensionContext,
    ExtensionHandler,
    extension_names,
    get_extension,
    same_value,
    unregister_extension,
)
from .facade import OptionArray, register_extension

__all__ = [
    "OptionArray",
    "ExtensionContext",
    "ExtensionHandler",
    "register_extension",
    "unregister_extension",
    "get_extension",
    "extension_names",
    "same_value",
]
