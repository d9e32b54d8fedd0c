"""Resolution & cache engine for one option key.

Read path (``load_data``), in order:
    1. LIVE reactive sources re-snapshot on every read
    2. Non-empty items are returned as-is
    3. Default signature, not yet loaded: seed from the global cache
    4. Loaded (even to an empty list) or loading: return items unchanged
    5. Dispatch on the definition shape

Reads never raise. Async definitions run as a task on the running loop, or
are driven to completion by ``run_sync`` when there is none; that blocking run
happens after the resolver lock is released and is published on the state as
a thread future, so reloads from other threads join it. The definition is
never invoked twice concurrently for the same signature: the ``is_loading``
check-then-set happens under the resolver lock and the in-flight task is kept
on the state so forced reloads await it instead of starting another call.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
import time
from collections.abc import Awaitable, Coroutine, Mapping
from concurrent.futures import Future
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable

from pydantic import ValidationError

from optionkit.foundation.errors import ErrorCode, OptionError, OptionException
from optionkit.foundation.registry import (
    AsyncFunction,
    Definition,
    OptionItem,
    PureFunction,
    ReactiveMode,
    ReactiveSource,
    StaticList,
    coerce_items,
    shape_name,
)
from optionkit.io.cache import OptionCache, get_cache
from optionkit.runtime.concurrency import current_loop, run_sync
from optionkit.runtime.observability.logging import get_logger, log_context, timed

from .state import DEFAULT_SIGNATURE, ResolutionState, make_signature

if TYPE_CHECKING:
    from optionkit.foundation.config import OptionkitSettings
    from optionkit.runtime.observability.logging import BoundLogger

Kwargs = Mapping[str, object]
_NO_KWARGS: Kwargs = MappingProxyType({})


def _retrieve(task: asyncio.Task[object]) -> None:
    """Mark a finished load's exception as retrieved; it was already logged."""
    if not task.cancelled():
        task.exception()


@dataclass(slots=True)
class _BlockingLoad:
    """Async load driven by ``run_sync`` from a thread with no running loop."""

    coro: Coroutine[object, object, list[OptionItem]]
    done: Future[list[OptionItem]] = field(default_factory=Future)

    def __post_init__(self) -> None:
        # Joiners may give up waiting; the load itself is never cancelled
        self.done.set_running_or_notify_cancel()

    def run(self) -> None:
        try:
            self.done.set_result(run_sync(self.coro))
        except OptionException as exc:
            self.done.set_exception(exc)


def _join(pending: asyncio.Future[list[OptionItem]] | Future[list[OptionItem]]) -> Awaitable[list[OptionItem]]:
    if isinstance(pending, asyncio.Future):
        return asyncio.shield(pending)
    return asyncio.wrap_future(pending)


_Pending = asyncio.Task[list[OptionItem]] | _BlockingLoad | None


class OptionResolver:
    """Resolves one option key for any number of argument signatures.

    Args:
        key: Registry key
        definition: Where the items come from
        cache: Global cache for default-signature async results
        settings: Resolution settings (defaults to ``get_settings()``)
        logger: Structured logger; ``option=<key>`` is bound to it
        clock: Time source for ``loaded_at``

    Example:
        >>> resolver = OptionResolver("status", StaticList.of([{"label": "啟用", "value": "ACTIVE"}]))
        >>> resolver.load_data()[0].label
        '啟用'
    """

    __slots__ = ("key", "definition", "_cache", "_settings", "_log", "_clock", "_states", "_lock")

    def __init__(
        self,
        key: str,
        definition: Definition,
        *,
        cache: OptionCache | None = None,
        settings: OptionkitSettings | None = None,
        logger: BoundLogger | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if settings is None:
            from optionkit.foundation.config import get_settings
            settings = get_settings()
        self.key = key
        self.definition = definition
        self._cache = cache if cache is not None else get_cache()
        self._settings = settings
        self._log = (logger or get_logger("optionkit.resolver")).bind_option(key, shape=shape_name(definition))
        self._clock = clock
        self._states: dict[str, ResolutionState] = {}
        self._lock = threading.RLock()

    # ─────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────

    def get_state(self, args: tuple[object, ...] = (), kwargs: Kwargs | None = None) -> ResolutionState:
        """Get or create the state for these arguments. No I/O."""
        return self._state_for(args, kwargs)[0]

    def _state_for(self, args: tuple[object, ...], kwargs: Kwargs | None) -> tuple[ResolutionState, str]:
        sig = make_signature(args, kwargs)
        state = self._states.get(sig)
        if state is None:
            with self._lock:
                state = self._states.setdefault(sig, ResolutionState())
        return state, sig

    @property
    def states(self) -> Mapping[str, ResolutionState]:
        return MappingProxyType(self._states)

    # ─────────────────────────────────────────────────────────────────
    # Read path
    # ─────────────────────────────────────────────────────────────────

    def load_data(self, args: tuple[object, ...] = (), kwargs: Kwargs | None = None) -> list[OptionItem]:
        """Current items for these arguments, triggering a load when unresolved."""
        state, sig = self._state_for(args, kwargs)
        d = self.definition
        if isinstance(d, ReactiveSource) and d.mode is ReactiveMode.LIVE:
            self._resync(state, sig, d)
            return state.items
        if state.items:
            return state.items
        with self._lock:
            if state.items or state.is_loaded or state.is_loading:
                return state.items
            if sig == DEFAULT_SIGNATURE and self._seed_from_cache(state):
                return state.items
            pending = self._start(state, sig, args, kwargs or _NO_KWARGS, passive=True)
        if isinstance(pending, _BlockingLoad):
            pending.run()
        return state.items

    async def ensure_loaded(self, args: tuple[object, ...] = (), kwargs: Kwargs | None = None) -> list[OptionItem]:
        """Like load_data, but waits for an in-flight async load to settle. Never raises."""
        items = self.load_data(args, kwargs)
        pending = self.get_state(args, kwargs).pending
        if pending is not None and not pending.done():
            try:
                await _join(pending)
            except OptionException:
                pass
        return items

    @timed(lambda self, *_, **__: self._log, level="debug", event="option reload")
    async def refresh_data(self, args: tuple[object, ...] = (), kwargs: Kwargs | None = None) -> list[OptionItem]:
        """Force re-resolution and return the fresh items.

        Joins a load already in flight instead of starting a second one,
        including a blocking read running on another thread.
        Raises OptionException when the definition fails.
        """
        state, sig = self._state_for(args, kwargs)
        with log_context(trigger="reload"):
            with self._lock:
                if state.is_loading:
                    pending = state.pending
                else:
                    state.is_loaded = False
                    self._start(state, sig, args, kwargs or _NO_KWARGS, passive=False)
                    pending = state.pending
            if pending is not None:
                await _join(pending)
        return state.items

    # ─────────────────────────────────────────────────────────────────
    # Dispatch
    # ─────────────────────────────────────────────────────────────────

    def _start(
        self,
        state: ResolutionState,
        sig: str,
        args: tuple[object, ...],
        kwargs: Kwargs,
        *,
        passive: bool,
    ) -> _Pending:
        """Dispatch on the definition shape. Caller holds the lock and has checked is_loading.

        A returned _BlockingLoad must be run by the caller once the lock is released.
        """
        match self.definition:
            case StaticList(items=items):
                self._succeed(state, sig, list(items))
                return None
            case ReactiveSource() as source:
                return self._run_sync_shape(state, sig, source.snapshot, passive=passive)
            case PureFunction(fn=fn):
                return self._run_sync_shape(state, sig, lambda: fn(*args, **kwargs), passive=passive)
            case AsyncFunction(fn=fn):
                return self._schedule(state, sig, lambda: fn(*args, **kwargs))
        raise TypeError(f"unsupported definition {self.definition!r}")

    def _run_sync_shape(
        self,
        state: ResolutionState,
        sig: str,
        produce: Callable[[], object],
        *,
        passive: bool,
    ) -> _Pending:
        try:
            result = produce()
            if inspect.isawaitable(result):
                # Plain function handing back an awaitable: resolve it like an async definition
                return self._schedule(state, sig, lambda: result)
            items = coerce_items(result)
        except Exception as exc:
            error = self._fail(state, sig, exc)
            if passive:
                return None
            raise OptionException(error) from exc
        self._succeed(state, sig, items)
        return None

    def _schedule(
        self,
        state: ResolutionState,
        sig: str,
        produce: Callable[[], Awaitable[object]],
    ) -> _Pending:
        loop = current_loop()
        if loop is None and not self._settings.resolution.block_without_loop:
            self._log.debug("async option read outside event loop", signature=sig)
            return None

        state.is_loading = True
        coro = self._settle(state, sig, produce)
        if loop is not None:
            task = loop.create_task(coro, name=f"optionkit:{self.key}:{sig}")
            task.add_done_callback(_retrieve)
            state.pending = task
            return task

        load = _BlockingLoad(coro)
        state.pending = load.done
        return load

    async def _settle(
        self,
        state: ResolutionState,
        sig: str,
        produce: Callable[[], Awaitable[object]],
    ) -> list[OptionItem]:
        try:
            items = coerce_items(await produce())
        except Exception as exc:
            raise OptionException(self._fail(state, sig, exc)) from exc
        else:
            self._succeed(state, sig, items, write_cache=sig == DEFAULT_SIGNATURE)
            return state.items
        finally:
            with self._lock:
                state.is_loading = False
                state.pending = None

    # ─────────────────────────────────────────────────────────────────
    # State transitions
    # ─────────────────────────────────────────────────────────────────

    def _succeed(self, state: ResolutionState, sig: str, items: list[OptionItem], *, write_cache: bool = False) -> None:
        with self._lock:
            state.items[:] = items
            state.is_loaded = True
            state.last_error = None
            state.loaded_at = self._clock()
        if write_cache:
            self._cache.set(self.key, items)
        self._log.debug("option loaded", signature=sig, items=len(items))

    def _fail(self, state: ResolutionState, sig: str, exc: Exception) -> OptionError:
        code = ErrorCode.INVALID_ITEMS if isinstance(exc, ValidationError) else ErrorCode.RESOLUTION_FAILED
        error = OptionError.from_exception(self.key, exc, code)
        with self._lock:
            state.is_loaded = False
            state.is_loading = False
            state.last_error = error
        self._log.error("option load failed", signature=sig, code=error.code.value,
                        cause=error.cause.value if error.cause else None, error=error.message)
        return error

    def _seed_from_cache(self, state: ResolutionState) -> bool:
        if (cached := self._cache.get(self.key)) is None:
            return False
        state.items[:] = cached
        state.is_loaded = True
        state.loaded_at = self._clock()
        self._log.debug("option served from cache", items=len(cached))
        return True

    def _resync(self, state: ResolutionState, sig: str, source: ReactiveSource) -> None:
        try:
            items = source.snapshot()
        except Exception as exc:
            self._fail(state, sig, exc)
            return
        with self._lock:
            if items != state.items:
                state.items[:] = items
                state.loaded_at = self._clock()
            state.is_loaded = True

    def __repr__(self) -> str:
        return f"OptionResolver(key={self.key!r}, shape={shape_name(self.definition)}, states={len(self._states)})"
