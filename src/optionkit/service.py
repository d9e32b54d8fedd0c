"""Option service: registry assembly and the public query helpers.

The service owns everything mutable (resolvers, cache handle, settings); the
``Options`` namespace it assembles is a fixed set of zero-argument facades.

Example:
    >>> service = OptionService({
    ...     "status": [{"label": "啟用", "value": "ACTIVE"}, {"label": "停用", "value": "INACTIVE"}],
    ...     "countries": fetch_countries,
    ... })
    >>> options = service.options
    >>> options.status.label("ACTIVE")
    '啟用'
    >>> countries = await options.countries

A process-wide default service backs the module-level helpers:

    >>> register_definitions({"yes_no": [{"label": "是", "value": "Y"}]})
    >>> get_options().yes_no.values
    ['Y']
"""

from __future__ import annotations

import inspect
import time
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any, Callable

from pydantic import ValidationError

from optionkit.foundation.config import OptionkitSettings, get_settings
from optionkit.foundation.errors import ErrorCode, OptionException
from optionkit.foundation.registry import (
    AsyncFunction,
    DefinitionRegistry,
    OptionItem,
    PureFunction,
    ReactiveSource,
    StaticList,
    coerce_items,
)
from optionkit.facade import OptionArray, same_value
from optionkit.io.cache import OptionCache, get_cache
from optionkit.runtime.observability.logging import get_logger
from optionkit.runtime.resolution import OptionResolver

if TYPE_CHECKING:
    from optionkit.runtime.observability.logging import BoundLogger


class Options:
    """Namespace of default (zero-argument) facades, one per registry key.

    Supports ``options.key``, ``options["key"]``, ``in``, iteration over keys
    and ``len``. Unknown keys yield an empty inert facade. Keys named like a
    namespace method (``keys``, ``to_json``) are reached with ``options["keys"]``.
    """

    __slots__ = ("_facades", "_service")

    def __init__(self, facades: Mapping[str, OptionArray], service: OptionService) -> None:
        self._facades = dict(facades)
        self._service = service

    def __getattr__(self, name: str) -> OptionArray:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, key: str) -> OptionArray:
        facade = self._facades.get(key)
        return facade if facade is not None else self._service.missing(key)

    def __contains__(self, key: object) -> bool:
        return key in self._facades

    def __iter__(self) -> Iterator[str]:
        return iter(self._facades)

    def __len__(self) -> int:
        return len(self._facades)

    def keys(self) -> list[str]:
        return list(self._facades)

    def to_json(self) -> dict[str, list[dict[str, Any]]]:
        """Plain-data dump of every option list (triggers loads)."""
        return {key: facade.to_json() for key, facade in self._facades.items()}

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self._facades})

    def __repr__(self) -> str:
        return f"Options({', '.join(self._facades)})"


class OptionService:
    """Owns the definition registry, per-key resolvers and the assembled namespace.

    Args:
        registry: A DefinitionRegistry, or a raw mapping to classify
        settings: Configuration (defaults to ``get_settings()``)
        cache: Global cache (defaults to ``get_cache()``)
        logger: Structured logger shared by all resolvers
        clock: Time source for resolution timestamps
    """

    __slots__ = ("_registry", "_settings", "_cache", "_log", "_clock", "_resolvers", "_options", "_missing")

    def __init__(
        self,
        registry: DefinitionRegistry | Mapping[str, object] | None = None,
        *,
        settings: OptionkitSettings | None = None,
        cache: OptionCache | None = None,
        logger: BoundLogger | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings or get_settings()
        self._registry = self._classify(registry or {})
        self._cache = cache if cache is not None else get_cache()
        self._log = logger or get_logger("optionkit")
        self._clock = clock
        self._resolvers: dict[str, OptionResolver] = {}
        self._options: Options | None = None
        self._missing: dict[str, OptionArray] = {}

    def _classify(self, raw: DefinitionRegistry | Mapping[str, object]) -> DefinitionRegistry:
        if isinstance(raw, DefinitionRegistry):
            return raw
        return DefinitionRegistry.from_mapping(raw, reactive_mode=self._settings.resolution.reactive_mode)

    # ─────────────────────────────────────────────────────────────────
    # Registry & assembly
    # ─────────────────────────────────────────────────────────────────

    @property
    def registry(self) -> DefinitionRegistry:
        return self._registry

    @property
    def settings(self) -> OptionkitSettings:
        return self._settings

    @property
    def assembled(self) -> bool:
        return self._options is not None

    def register(self, definitions: DefinitionRegistry | Mapping[str, object]) -> None:
        """Add definitions. Only allowed before the namespace is assembled."""
        if self._options is not None:
            raise OptionException.create(
                ",".join(definitions) or "<empty>",
                "Option registry is frozen once options have been assembled",
                ErrorCode.REGISTRY_FROZEN,
                recoverable=False,
            )
        self._registry = self._registry | self._classify(definitions)

    @property
    def options(self) -> Options:
        """The assembled namespace, built once on first access."""
        if self._options is None:
            self._options = Options({key: self._facade(key) for key in self._registry}, self)
            self._log.debug("options assembled", keys=len(self._registry))
        return self._options

    def resolver(self, key: str) -> OptionResolver:
        """Resolver for a registered key (KeyError for unknown keys)."""
        if (resolver := self._resolvers.get(key)) is None:
            resolver = self._resolvers[key] = OptionResolver(
                key, self._registry[key],
                cache=self._cache, settings=self._settings, logger=self._log, clock=self._clock,
            )
        return resolver

    def _facade(self, key: str) -> OptionArray:
        return OptionArray(self.resolver(key), sentinels=self._settings.sentinel)

    def missing(self, key: str) -> OptionArray:
        """Empty inert facade for an unregistered key; logged once per key."""
        if (facade := self._missing.get(key)) is None:
            self._log.warning("unknown option key", option=key, code=ErrorCode.DEFINITION_NOT_FOUND.value)
            resolver = OptionResolver(key, StaticList(), cache=self._cache, settings=self._settings,
                                      logger=self._log, clock=self._clock)
            facade = self._missing[key] = OptionArray(resolver, sentinels=self._settings.sentinel)
        return facade

    # ─────────────────────────────────────────────────────────────────
    # Uncached helpers
    # ─────────────────────────────────────────────────────────────────

    async def fetch_option(self, key: str, *args: object, **kwargs: object) -> list[OptionItem]:
        """Resolve ``key`` once, bypassing resolvers and cache.

        Unknown keys give ``[]``; definition failures raise OptionException.
        """
        definition = self._registry.get(key)
        try:
            match definition:
                case None:
                    return []
                case StaticList(items=items):
                    return list(items)
                case ReactiveSource() as source:
                    return source.snapshot()
                case AsyncFunction(fn=fn):
                    return coerce_items(await fn(*args, **kwargs))
                case PureFunction(fn=fn):
                    result = fn(*args, **kwargs)
                    return coerce_items(await result if inspect.isawaitable(result) else result)
        except ValidationError as e:
            raise OptionException.from_exc(key, e, ErrorCode.INVALID_ITEMS) from e
        except Exception as e:
            raise OptionException.from_exc(key, e) from e
        return []

    def get_option_sync(self, key: str) -> list[OptionItem]:
        """Items of a static definition; ``[]`` for every other shape."""
        definition = self._registry.get(key)
        return list(definition.items) if isinstance(definition, StaticList) else []

    def get_option_label(self, key: str, value: object) -> str:
        found = next((o for o in self.get_option_sync(key) if same_value(o.value, value)), None)
        return found.label if found is not None and found.label else str(value)

    def __repr__(self) -> str:
        return f"OptionService(keys={len(self._registry)}, assembled={self.assembled})"


# ═══════════════════════════════════════════════════════════════════════════════
# Default service
# ═══════════════════════════════════════════════════════════════════════════════

_service: OptionService | None = None


def get_service() -> OptionService:
    """Get the default service (created empty if unset)."""
    global _service
    if _service is None:
        _service = OptionService()
    return _service


def set_service(service: OptionService) -> None:
    global _service
    _service = service


def reset_service() -> None:
    """Drop the default service (useful for testing)."""
    global _service
    _service = None


def register_definitions(definitions: DefinitionRegistry | Mapping[str, object]) -> None:
    """Add definitions to the default service before its options are assembled."""
    get_service().register(definitions)


def get_options() -> Options:
    """The default service's option namespace."""
    return get_service().options


async def fetch_option(key: str, *args: object, **kwargs: object) -> list[OptionItem]:
    return await get_service().fetch_option(key, *args, **kwargs)


def get_option_sync(key: str) -> list[OptionItem]:
    return get_service().get_option_sync(key)


def get_option_label(key: str, value: object) -> str:
    return get_service().get_option_label(key, value)
