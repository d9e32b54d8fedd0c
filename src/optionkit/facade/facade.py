"""OptionArray: one option list that is a sequence, a callable and a view provider.

Attribute and protocol dispatch, highest priority first:

1. ``facade(*args)``      -> new OptionArray bound to those arguments
2. ``iter(facade)``       -> iterator over a snapshot of the current items
3. ``to_json()``/``str``  -> plain data / JSON text
4. registered extensions  -> ``with_all``, ``label(v)``, ``reload()``, ...
5. anything else          -> forwarded to the backing list

Construction never reads data; every access re-reads through the resolver, so
an async load that settles between two reads is visible on the second one.

Example:
    >>> options.status.label("ACTIVE")
    '啟用'
    >>> [o.value for o in options.status]
    ['ACTIVE', 'INACTIVE']
    >>> tpe = options.townships("TPE")
    >>> await tpe.reload()
"""

from __future__ import annotations

from collections.abc import Generator, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, overload

import orjson

from optionkit.foundation.registry import Definition, OptionItem

from .extensions import ExtensionContext, ExtensionHandler, extension, get_extension

if TYPE_CHECKING:
    from optionkit.foundation.config import SentinelSettings
    from optionkit.runtime.resolution import OptionResolver, ResolutionState

_NO_KWARGS: Mapping[str, object] = MappingProxyType({})


class OptionArray:
    """Lazy, memoized option list for one (key, arguments) pair.

    Args:
        resolver: Engine owning the key's resolution states
        args: Positional arguments passed to the definition
        kwargs: Keyword arguments passed to the definition
        sentinels: Labels/values for the ``with_all`` and ``other`` views
    """

    __slots__ = ("_resolver", "_args", "_kwargs", "_sentinels")

    def __init__(
        self,
        resolver: OptionResolver,
        args: tuple[object, ...] = (),
        kwargs: Mapping[str, object] | None = None,
        *,
        sentinels: SentinelSettings | None = None,
    ) -> None:
        if sentinels is None:
            from optionkit.foundation.config import get_settings
            sentinels = get_settings().sentinel
        self._resolver = resolver
        self._args = tuple(args)
        self._kwargs: Mapping[str, object] = MappingProxyType(dict(kwargs)) if kwargs else _NO_KWARGS
        self._sentinels = sentinels

    # ─────────────────────────────────────────────────────────────────
    # Invocation
    # ─────────────────────────────────────────────────────────────────

    def __call__(self, *args: object, **kwargs: object) -> OptionArray:
        return self.bind(*args, **kwargs)

    def bind(self, *args: object, **kwargs: object) -> OptionArray:
        """New facade for the same key bound to these arguments."""
        return OptionArray(self._resolver, args, kwargs, sentinels=self._sentinels)

    # ─────────────────────────────────────────────────────────────────
    # Identity & state
    # ─────────────────────────────────────────────────────────────────

    @property
    def key(self) -> str:
        return self._resolver.key

    @property
    def args(self) -> tuple[object, ...]:
        return self._args

    @property
    def kwargs(self) -> Mapping[str, object]:
        return self._kwargs

    @property
    def definition(self) -> Definition:
        return self._resolver.definition

    @property
    def state(self) -> ResolutionState:
        return self._resolver.get_state(self._args, self._kwargs)

    @property
    def items(self) -> list[OptionItem]:
        """The backing list (same object across reads until reloaded)."""
        return self._resolver.load_data(self._args, self._kwargs)

    def _context(self) -> ExtensionContext:
        resolver, args, kwargs = self._resolver, self._args, self._kwargs
        return ExtensionContext(
            items=resolver.load_data(args, kwargs),
            state=resolver.get_state(args, kwargs),
            args=args,
            kwargs=kwargs,
            definition=resolver.definition,
            key=resolver.key,
            refresh=lambda: resolver.refresh_data(args, kwargs),
            sentinels=self._sentinels,
        )

    # ─────────────────────────────────────────────────────────────────
    # Sequence protocol
    # ─────────────────────────────────────────────────────────────────

    def __iter__(self) -> Iterator[OptionItem]:
        return iter(tuple(self.items))

    def __reversed__(self) -> Iterator[OptionItem]:
        return reversed(tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    @overload
    def __getitem__(self, index: int) -> OptionItem: ...
    @overload
    def __getitem__(self, index: slice) -> list[OptionItem]: ...
    def __getitem__(self, index: int | slice) -> OptionItem | list[OptionItem]:
        return self.items[index]

    def __contains__(self, item: object) -> bool:
        return item in self.items

    def __bool__(self) -> bool:
        return bool(self.items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OptionArray):
            return self.items == other.items
        if isinstance(other, Sequence) and not isinstance(other, (str, bytes)):
            return self.items == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __await__(self) -> Generator[Any, None, list[OptionItem]]:
        """``await facade`` returns the items once any async load has settled."""
        return self._resolver.ensure_loaded(self._args, self._kwargs).__await__()

    # ─────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────

    def to_json(self) -> list[dict[str, Any]]:
        return [o.to_json() for o in self.items]

    def __str__(self) -> str:
        return orjson.dumps(self.to_json(), option=orjson.OPT_INDENT_2, default=str).decode()

    def __repr__(self) -> str:
        bound = f", args={self._args!r}" if self._args else ""
        bound += f", kwargs={dict(self._kwargs)!r}" if self._kwargs else ""
        return f"OptionArray(key={self.key!r}{bound}, items={self.to_json()!r})"

    # ─────────────────────────────────────────────────────────────────
    # Extensions, then list members
    # ─────────────────────────────────────────────────────────────────

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if (handler := get_extension(name)) is not None:
            return handler(self._context())
        try:
            return getattr(self.items, name)
        except AttributeError:
            raise AttributeError(f"OptionArray {self.key!r} has no attribute {name!r}") from None

    def __dir__(self) -> list[str]:
        from .extensions import extension_names
        return sorted({*super().__dir__(), *extension_names()})


# Generic sequence checks treat facades as ordered sequences
Sequence.register(OptionArray)


_RESERVED = frozenset(n for n in dir(OptionArray) if not n.startswith("_"))


def register_extension(name: str, handler: ExtensionHandler) -> ExtensionHandler:
    """Add a custom view to every OptionArray.

    Example:
        >>> register_extension("labels", lambda ctx: [o.label for o in ctx.items])
        >>> options.status.labels
        ['啟用', '停用']
    """
    if name in _RESERVED:
        raise ValueError(f"Extension {name!r} would be shadowed by OptionArray.{name}")
    return extension(name)(handler)
