"""Persistent findings store."""

from leakwatch.storage.store import FindingsStore, Stats

__all__ = ["FindingsStore", "Stats"]
