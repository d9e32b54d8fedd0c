"""Sync/async interoperability utilities.

Option lists are read from synchronous code (attribute access, iteration)
while async definitions need an event loop. These helpers bridge the two:

    - current_loop: The running event loop, or None outside one
    - run_sync: Run a coroutine to completion from synchronous code

Example:
    >>> loop = current_loop()
    >>> if loop is None:
    ...     items = run_sync(fetch_countries())
"""

from __future__ import annotations

import asyncio
from typing import Coroutine, TypeVar

T = TypeVar("T")


def current_loop() -> asyncio.AbstractEventLoop | None:
    """Return the running event loop of this thread, if any."""
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def run_sync(coro: Coroutine[object, object, T]) -> T:
    """Run async coroutine from a thread with no running event loop.

    Inside a running loop, schedule the coroutine as a task instead; blocking
    that loop's thread would deadlock it.

    Raises:
        RuntimeError: If called while this thread's event loop is running
    """
    if current_loop() is not None:
        coro.close()
        raise RuntimeError("run_sync() cannot be called from a running event loop")
    return asyncio.run(coro)
