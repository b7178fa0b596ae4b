"""Lazily-built, resettable process-wide default instances."""

from __future__ import annotations

from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class DefaultInstance(Generic[T]):
    """Holds one lazily-constructed default object.

    Construction is cheap and idempotent, so no lock: if two callers race,
    both build one and the last assignment is the one reused afterwards.
    """

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._instance: Optional[T] = None

    def get(self) -> T:
        if self._instance is None:
            self._instance = self._factory()
        return self._instance

    def set(self, instance: T) -> None:
        """Substitute a specific instance (e.g. one wired to a fake transport)."""
        self._instance = instance

    def reset(self) -> None:
        """Forget the current instance; the next get() builds a fresh one."""
        self._instance = None
