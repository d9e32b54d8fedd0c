"""Per-signature resolution state and argument canonicalization."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from concurrent.futures import Future
from dataclasses import dataclass, field
from enum import StrEnum

import orjson

from optionkit.foundation.errors import OptionError
from optionkit.foundation.registry import OptionItem

DEFAULT_SIGNATURE = "default"


class ResolutionPhase(StrEnum):
    UNRESOLVED = "unresolved"
    LOADING = "loading"
    LOADED = "loaded"


def _encode_fallback(obj: object) -> object:
    # Tagged so a converted object never matches a plain argument
    if hasattr(obj, "model_dump"):
        return {"__model__": obj.model_dump(mode="json")}  # type: ignore[union-attr]
    if isinstance(obj, (set, frozenset)):
        return {"__set__": sorted(obj, key=repr)}
    return {"__repr__": repr(obj)}


def make_signature(args: tuple[object, ...] = (), kwargs: Mapping[str, object] | None = None) -> str:
    """Canonical string for a call's arguments; no arguments -> ``"default"``.

    Example:
        >>> make_signature(("TPE",))
        '{"args":["TPE"],"kwargs":{}}'
        >>> make_signature((), {"b": 2, "a": 1})
        '{"args":[],"kwargs":{"a":1,"b":2}}'
    """
    if not args and not kwargs:
        return DEFAULT_SIGNATURE
    payload = {"args": list(args), "kwargs": dict(kwargs or {})}
    return orjson.dumps(payload, option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS,
                        default=_encode_fallback).decode()


@dataclass(slots=True, eq=False)
class ResolutionState:
    """Mutable state for one (key, signature) pair.

    ``items`` is the backing list handed to every reader; its contents are
    replaced in place so the list identity never changes.
    ``pending`` is the in-flight load: an asyncio task, or a thread future for
    a blocking read made outside an event loop.
    """

    items: list[OptionItem] = field(default_factory=list)
    is_loading: bool = False
    is_loaded: bool = False
    pending: asyncio.Task[list[OptionItem]] | Future[list[OptionItem]] | None = field(default=None, repr=False)
    last_error: OptionError | None = None
    loaded_at: float | None = None

    @property
    def phase(self) -> ResolutionPhase:
        if self.is_loading:
            return ResolutionPhase.LOADING
        return ResolutionPhase.LOADED if self.is_loaded else ResolutionPhase.UNRESOLVED
