"""Immutable mapping from option key to definition.

Raw values are classified into definitions once, at construction:

- list/tuple of items      -> StaticList
- coroutine function       -> AsyncFunction
- other callable           -> PureFunction
- object with ``.value``   -> ReactiveSource (mode from settings)
- explicit definitions     -> kept as-is
- anything else            -> empty StaticList, logged as malformed
"""

from __future__ import annotations

import inspect
from collections.abc import Iterator, Mapping
from types import MappingProxyType, ModuleType
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from optionkit.foundation.errors import ErrorCode
from optionkit.runtime.observability.logging import get_logger

from .definitions import (
    DEFINITION_TYPES,
    AsyncFunction,
    Definition,
    PureFunction,
    ReactiveSource,
    StaticList,
)
from .reactive import Reactive, ReactiveMode

if TYPE_CHECKING:
    from optionkit.runtime.observability.logging import BoundLogger


def classify_definition(
    key: str,
    raw: object,
    *,
    reactive_mode: ReactiveMode = ReactiveMode.SAMPLED_ONCE,
    log: BoundLogger | None = None,
) -> Definition:
    """Turn a raw registry value into a tagged definition."""
    if isinstance(raw, DEFINITION_TYPES):
        return raw  # type: ignore[return-value]
    if isinstance(raw, (list, tuple)):
        try:
            return StaticList.of(raw)
        except ValidationError as e:
            return _malformed(key, raw, log, reason=f"invalid items: {e.error_count()} error(s)")
    if inspect.iscoroutinefunction(raw):
        return AsyncFunction(raw)  # type: ignore[arg-type]
    if callable(raw):
        return PureFunction(raw)  # type: ignore[arg-type]
    if isinstance(raw, Reactive) and not isinstance(raw, (BaseModel, Mapping, str)):
        return ReactiveSource(raw, reactive_mode)
    return _malformed(key, raw, log, reason=f"unsupported type {type(raw).__name__}")


def _malformed(key: str, raw: object, log: BoundLogger | None, *, reason: str) -> StaticList:
    (log or get_logger("optionkit.registry")).warning(
        "malformed definition", option=key, code=ErrorCode.MALFORMED_DEFINITION.value, reason=reason,
    )
    return StaticList()


class DefinitionRegistry(Mapping[str, Definition]):
    """Read-only registry of option definitions.

    Example:
        >>> registry = DefinitionRegistry.from_mapping({
        ...     "status": [{"label": "啟用", "value": "ACTIVE"}],
        ...     "countries": fetch_countries,
        ... })
        >>> type(registry["status"]).__name__
        'StaticList'
    """

    __slots__ = ("_definitions",)

    def __init__(self, definitions: Mapping[str, Definition] | None = None) -> None:
        self._definitions: Mapping[str, Definition] = MappingProxyType(dict(definitions or {}))

    @classmethod
    def from_mapping(
        cls,
        raw: Mapping[str, object],
        *,
        reactive_mode: ReactiveMode | str | None = None,
    ) -> DefinitionRegistry:
        """Classify every raw value of ``raw``."""
        mode = ReactiveMode(reactive_mode) if reactive_mode else _default_reactive_mode()
        log = get_logger("optionkit.registry")
        return cls({key: classify_definition(key, value, reactive_mode=mode, log=log) for key, value in raw.items()})

    @classmethod
    def from_modules(cls, *modules: ModuleType, reactive_mode: ReactiveMode | str | None = None) -> DefinitionRegistry:
        """Merge the public names of definition modules, later modules win."""
        raw: dict[str, object] = {}
        for module in modules:
            names = getattr(module, "__all__", None) or [n for n in vars(module) if not n.startswith("_")]
            raw.update({name: getattr(module, name) for name in names})
        return cls.from_mapping(raw, reactive_mode=reactive_mode)

    def merge(self, other: Mapping[str, object]) -> DefinitionRegistry:
        """New registry with ``other`` layered on top."""
        extra = other if isinstance(other, DefinitionRegistry) else DefinitionRegistry.from_mapping(other)
        return DefinitionRegistry({**self._definitions, **extra})

    def __or__(self, other: Mapping[str, object]) -> DefinitionRegistry:
        return self.merge(other)

    def __getitem__(self, key: str) -> Definition:
        return self._definitions[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        shapes = ", ".join(f"{k}={type(v).__name__}" for k, v in self._definitions.items())
        return f"DefinitionRegistry({shapes})"


def _default_reactive_mode() -> ReactiveMode:
    from optionkit.foundation.config import get_settings
    return ReactiveMode(get_settings().resolution.reactive_mode)
