"""Standardized error handling for option resolution.

Provides error codes and structured error records. Passive reads never raise:
failures are recorded on the resolution state as an OptionError and logged.
Only explicit reloads surface them, wrapped in OptionException.
"""

from __future__ import annotations

import traceback
from enum import StrEnum
from functools import lru_cache
from typing import Annotated, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)


class ErrorCode(StrEnum):
    """Standard error codes for option failures.

    The first group describes registry and resolution problems; the second
    classifies the underlying cause of a failed definition call.
    """
    DEFINITION_NOT_FOUND = "DEFINITION_NOT_FOUND"
    MALFORMED_DEFINITION = "MALFORMED_DEFINITION"
    RESOLUTION_FAILED = "RESOLUTION_FAILED"
    INVALID_ITEMS = "INVALID_ITEMS"
    REGISTRY_FROZEN = "REGISTRY_FROZEN"
    # Causes
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    PARSE_ERROR = "PARSE_ERROR"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    UNKNOWN = "UNKNOWN"


_PATTERN_CODES: dict[str, ErrorCode] = {
    "timeout": ErrorCode.TIMEOUT,
    "connection": ErrorCode.NETWORK_ERROR,
    "network": ErrorCode.NETWORK_ERROR,
    "permission": ErrorCode.PERMISSION_DENIED,
    "forbidden": ErrorCode.PERMISSION_DENIED,
    "validation": ErrorCode.INVALID_ITEMS,
    "parse": ErrorCode.PARSE_ERROR,
    "json": ErrorCode.PARSE_ERROR,
    "decode": ErrorCode.PARSE_ERROR,
}
_PATTERN_KEYS = tuple(_PATTERN_CODES.keys())  # Ordered for priority


@lru_cache(maxsize=256)
def _classify_cached(exc_key: str) -> ErrorCode:
    """Cached classification by exception signature."""
    haystack = exc_key.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_CODES[pattern]
    return ErrorCode.EXTERNAL_SERVICE_ERROR


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map exception to error code via pattern matching on name/message."""
    if isinstance(exc, OptionException):
        return exc.error.code
    return _classify_cached(f"{type(exc).__name__} {exc}")


_RETRYABLE_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.TIMEOUT,
    ErrorCode.NETWORK_ERROR,
    ErrorCode.EXTERNAL_SERVICE_ERROR,
})


class OptionError(BaseModel):
    """Structured error for a failed option lookup or resolution.

    Attributes:
        key: Registry key of the option list
        message: Human-readable error message
        code: Machine-readable error code
        cause: Classified cause of the underlying failure, if any
        recoverable: Whether a later reload might succeed
        details: Optional traceback text
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        json_schema_extra={
            "title": "Option Error",
            "examples": [{
                "key": "countries",
                "message": "Connection refused",
                "code": "RESOLUTION_FAILED",
                "cause": "NETWORK_ERROR",
            }],
        },
    )

    key: Annotated[str, Field(min_length=1, description="Option key that produced the error")]
    message: Annotated[str, Field(min_length=1, description="Human-readable error message")]
    code: ErrorCode = Field(default=ErrorCode.UNKNOWN)
    cause: ErrorCode | None = Field(default=None, description="Classified underlying cause")
    recoverable: bool = True
    details: str | None = Field(default=None, repr=False)

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        if isinstance(v, Exception):
            return str(v) or type(v).__name__
        return v

    @computed_field
    @property
    def is_retryable(self) -> bool:
        """Whether the underlying cause is typically transient."""
        return self.recoverable and (self.cause or self.code) in _RETRYABLE_CODES

    @classmethod
    def create(
        cls,
        key: str,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        *,
        recoverable: bool = True,
        details: str | None = None,
    ) -> Self:
        return cls(key=key, message=message, code=code, recoverable=recoverable, details=details)

    @classmethod
    def from_exception(
        cls,
        key: str,
        exc: BaseException,
        code: ErrorCode = ErrorCode.RESOLUTION_FAILED,
        *,
        include_trace: bool = True,
    ) -> Self:
        """Create from exception; the exception class picks the cause."""
        details = "".join(traceback.format_exception(exc)) if include_trace else None
        return cls(
            key=key,
            message=str(exc) or type(exc).__name__,
            code=code,
            cause=classify_exception(exc),
            details=details,
        )

    def render(self) -> str:
        cause = f" ({self.cause})" if self.cause and self.cause != self.code else ""
        return f"[{self.code}{cause}] option '{self.key}': {self.message}"

    __str__ = render


class OptionException(Exception):
    """Exception wrapping an OptionError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: OptionError) -> None:
        self.error = error
        super().__init__(error.render())

    @classmethod
    def create(cls, key: str, message: str, code: ErrorCode = ErrorCode.UNKNOWN, *, recoverable: bool = True) -> Self:
        return cls(OptionError.create(key, message, code, recoverable=recoverable))

    @classmethod
    def from_exc(cls, key: str, exc: BaseException, code: ErrorCode = ErrorCode.RESOLUTION_FAILED) -> Self:
        """Fast path: create from exception without trace."""
        return cls(OptionError.from_exception(key, exc, code, include_trace=False))
