"""Concurrency helpers bridging sync reads and async definitions."""

from .interop import current_loop, run_sync

__all__ = ["current_loop", "run_sync"]
