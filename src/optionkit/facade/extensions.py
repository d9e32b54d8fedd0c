"""Named extension views available on every OptionArray.

Each handler receives an ExtensionContext built from a fresh read and returns
the attribute value: a plain value (``with_all``), or a callable for views that
take arguments (``label(value)``). Handlers never mutate ``ctx.items``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from optionkit.foundation.registry import Definition, OptionItem

if TYPE_CHECKING:
    from optionkit.foundation.config import SentinelSettings
    from optionkit.runtime.resolution import ResolutionState


@dataclass(frozen=True, slots=True)
class ExtensionContext:
    items: list[OptionItem]
    state: ResolutionState
    args: tuple[object, ...]
    kwargs: Mapping[str, object]
    definition: Definition
    key: str
    refresh: Callable[[], Awaitable[list[OptionItem]]]
    sentinels: SentinelSettings


ExtensionHandler = Callable[[ExtensionContext], Any]

_HANDLERS: dict[str, ExtensionHandler] = {}


def extension(name: str) -> Callable[[ExtensionHandler], ExtensionHandler]:
    """Register a handler under ``name``; later registrations replace earlier ones."""
    if not name.isidentifier() or name.startswith("_"):
        raise ValueError(f"Extension name must be a public identifier, got {name!r}")

    def decorator(handler: ExtensionHandler) -> ExtensionHandler:
        _HANDLERS[name] = handler
        return handler

    return decorator


def get_extension(name: str) -> ExtensionHandler | None:
    return _HANDLERS.get(name)


def unregister_extension(name: str) -> bool:
    return _HANDLERS.pop(name, None) is not None


def extension_names() -> tuple[str, ...]:
    return tuple(_HANDLERS)


def same_value(a: object, b: object) -> bool:
    """Strict value equality: ``1`` does not match ``True`` or ``"1"``."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    return a == b


def _find(items: Iterable[OptionItem], value: object) -> OptionItem | None:
    return next((o for o in items if same_value(o.value, value)), None)


def _matches(item: OptionItem, values: Iterable[object]) -> bool:
    return any(same_value(item.value, v) for v in values)


def _value_list(values: Iterable[object] | str) -> list[object]:
    # A bare string is one value, not a sequence of characters
    return [values] if isinstance(values, str) else list(values)


# ═══════════════════════════════════════════════════════════════════════════════
# Standard extensions
# ═══════════════════════════════════════════════════════════════════════════════


@extension("is_loading")
def _is_loading(ctx: ExtensionContext) -> bool:
    return ctx.state.is_loading


@extension("is_loaded")
def _is_loaded(ctx: ExtensionContext) -> bool:
    return ctx.state.is_loaded


@extension("error")
def _error(ctx: ExtensionContext) -> object:
    return ctx.state.last_error


@extension("with_all")
def _with_all(ctx: ExtensionContext) -> list[OptionItem]:
    """Items prefixed with the "all" sentinel."""
    s = ctx.sentinels
    return [OptionItem(label=s.all_label, value=s.all_value), *ctx.items]


@extension("other")
def _other(ctx: ExtensionContext) -> list[OptionItem]:
    """Items suffixed with the "other" sentinel."""
    s = ctx.sentinels
    return [*ctx.items, OptionItem(label=s.other_label, value=s.other_value)]


@extension("values")
def _values(ctx: ExtensionContext) -> list[object]:
    return [o.value for o in ctx.items]


@extension("label")
def _label(ctx: ExtensionContext) -> Callable[[object], str]:
    """``label(value)``: matching label, else ``str(value)``."""
    def label(value: object) -> str:
        found = _find(ctx.items, value)
        return found.label if found is not None and found.label else str(value)
    return label


@extension("find_by_value")
def _find_by_value(ctx: ExtensionContext) -> Callable[[object], OptionItem | None]:
    return lambda value: _find(ctx.items, value)


@extension("exclude")
def _exclude(ctx: ExtensionContext) -> Callable[[Iterable[object] | str], list[OptionItem]]:
    def exclude(values: Iterable[object] | str) -> list[OptionItem]:
        wanted = _value_list(values)
        return [o for o in ctx.items if not _matches(o, wanted)]
    return exclude


@extension("only")
def _only(ctx: ExtensionContext) -> Callable[[Iterable[object] | str], list[OptionItem]]:
    def only(values: Iterable[object] | str) -> list[OptionItem]:
        wanted = _value_list(values)
        return [o for o in ctx.items if _matches(o, wanted)]
    return only


@extension("reload")
def _reload(ctx: ExtensionContext) -> Callable[[], Awaitable[list[OptionItem]]]:
    """``await facade.reload()`` forces re-resolution."""
    return ctx.refresh
