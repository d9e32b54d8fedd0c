"""Reactive references usable as option definitions.

A reactive reference is any object exposing a ``value`` attribute holding
the current option list. The host owns change notification; the resolver only
reads ``value``, once (SAMPLED_ONCE) or on every access (LIVE).
"""

from __future__ import annotations

from enum import StrEnum
from typing import Callable, Generic, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


class ReactiveMode(StrEnum):
    """When a reactive source is re-read."""
    SAMPLED_ONCE = "sampled_once"
    LIVE = "live"


@runtime_checkable
class Reactive(Protocol[T]):
    """Protocol for reactive references."""

    @property
    def value(self) -> T: ...


class Ref(Generic[T]):
    """Mutable holder of a value.

    Example:
        >>> langs = Ref([{"label": "中文", "value": "zh"}])
        >>> langs.value = [{"label": "English", "value": "en"}]
    """

    __slots__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"


class Computed(Generic[T]):
    """Read-only reference whose value is recomputed on every read."""

    __slots__ = ("_getter",)

    def __init__(self, getter: Callable[[], T]) -> None:
        self._getter = getter

    @property
    def value(self) -> T:
        return self._getter()

    def __repr__(self) -> str:
        return f"Computed({getattr(self._getter, '__qualname__', self._getter)!r})"


def computed(getter: Callable[[], T]) -> Computed[T]:
    """Decorator form of Computed."""
    return Computed(getter)
