"""Option items and the four definition shapes.

A definition tells the resolver where an option list comes from:

- StaticList: fixed items, never change
- PureFunction: ``fn(*args, **kwargs) -> items``, no I/O
- AsyncFunction: ``async fn(*args, **kwargs) -> items``, may do I/O
- ReactiveSource: a reference whose ``value`` holds the items
"""

from __future__ import annotations

from collections.abc import Awaitable, Iterable
from dataclasses import dataclass, field
from typing import Any, Callable, TypeAlias, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter

from .reactive import Reactive, ReactiveMode

OptionValue: TypeAlias = Union[str, int, float, bool, None]


class OptionItem(BaseModel):
    """Single selectable option. Equality for lookups is by ``value``.

    Extra fields are kept so definitions can carry UI hints.

    Example:
        >>> OptionItem(label="啟用", value="ACTIVE", color="green")
        OptionItem(label='啟用', value='ACTIVE', color='green', disabled=None)
    """

    model_config = ConfigDict(frozen=True, extra="allow", str_strip_whitespace=False)

    label: str
    value: OptionValue
    color: str | None = None
    disabled: bool | None = None

    def to_json(self) -> dict[str, Any]:
        """Plain data without unset hints; a ``None`` value is kept."""
        data = self.model_dump(mode="json")
        return {k: v for k, v in data.items() if v is not None or k == "value"}


RawItems: TypeAlias = Iterable[OptionItem | dict[str, Any]]

_ITEMS: TypeAdapter[list[OptionItem]] = TypeAdapter(list[OptionItem])


def coerce_items(data: object) -> list[OptionItem]:
    """Validate a definition result into a fresh list of OptionItem.

    Accepts OptionItem instances and plain dicts. Raises pydantic's
    ValidationError for anything else.
    """
    if isinstance(data, (list, tuple)):
        return _ITEMS.validate_python(list(data))
    return _ITEMS.validate_python(data)


@dataclass(frozen=True, slots=True)
class StaticList:
    items: tuple[OptionItem, ...] = ()

    @classmethod
    def of(cls, items: RawItems) -> StaticList:
        return cls(tuple(coerce_items(list(items))))


@dataclass(frozen=True, slots=True)
class PureFunction:
    fn: Callable[..., RawItems]


@dataclass(frozen=True, slots=True)
class AsyncFunction:
    fn: Callable[..., Awaitable[RawItems]]


@dataclass(frozen=True, slots=True)
class ReactiveSource:
    ref: Reactive[RawItems]
    mode: ReactiveMode = field(default=ReactiveMode.SAMPLED_ONCE)

    def snapshot(self) -> list[OptionItem]:
        return coerce_items(self.ref.value)


Definition: TypeAlias = Union[StaticList, PureFunction, AsyncFunction, ReactiveSource]
DEFINITION_TYPES: tuple[type, ...] = (StaticList, PureFunction, AsyncFunction, ReactiveSource)


def live(ref: Reactive[RawItems]) -> ReactiveSource:
    """Reactive definition re-read on every access."""
    return ReactiveSource(ref, ReactiveMode.LIVE)


def sampled(ref: Reactive[RawItems]) -> ReactiveSource:
    """Reactive definition read once per resolution."""
    return ReactiveSource(ref, ReactiveMode.SAMPLED_ONCE)


def shape_name(definition: Definition) -> str:
    return type(definition).__name__
