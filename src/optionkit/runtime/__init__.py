"""Runtime - Resolution, concurrency, and monitoring.

Contains: resolution engine, sync/async interop, observability.
"""
