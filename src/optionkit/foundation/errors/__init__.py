"""Unified error handling for optionkit.

- ErrorCode: Standard error codes for registry and resolution failures
- OptionError/OptionException: Structured errors and their raisable wrapper
- classify_exception: Map arbitrary exceptions to a cause code
"""

from .errors import ErrorCode, OptionError, OptionException, classify_exception
from .types import JsonDict, JsonPrimitive, JsonValue

__all__ = [
    "ErrorCode", "OptionError", "OptionException", "classify_exception",
    "JsonDict", "JsonPrimitive", "JsonValue",
]
