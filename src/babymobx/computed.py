"""Computed values — derived state with automatic dependency tracking.

A Computed wraps a getter. It runs the getter once on construction, under
tracking, and caches the result. Whenever an observable the getter read
changes, the getter is re-run eagerly and the cache overwritten.

get() never runs the getter. The cache is refreshed only by notification.
"""

from __future__ import annotations

import logging
from typing import TypeVar, Generic, Callable

from babymobx._tracking import run_tracked
from babymobx import _anchor

T = TypeVar("T")

logger = logging.getLogger("babymobx.computed")


class Computed(Generic[T]):
    """A derived value that auto-tracks dependencies and caches the result."""

    __slots__ = ("_id", "_fn", "_value")

    def __init__(self, fn: Callable[[], T]) -> None:
        self._id = _anchor.new_id()
        self._fn = fn
        _anchor.dependencies[self._id] = {}
        _anchor.derivations[self._id] = self
        try:
            self._value: T = run_tracked(self, fn)
        except BaseException:
            # A getter that fails on first run leaves nothing subscribed.
            _anchor.release(self._id)
            raise

    def get(self) -> T:
        """Return the cached value. No computation, no tracking."""
        return self._value

    def notify(self) -> None:
        """Called when a dependency changed: recompute and overwrite the cache."""
        self._value = run_tracked(self, self._fn)

    @property
    def disposed(self) -> bool:
        return self._id not in _anchor.derivations

    def dispose(self) -> None:
        """Disconnect from all dependencies. The last cached value stays readable."""
        if self.disposed:
            return
        _anchor.release(self._id)
        logger.debug("disposed %r", self)

    def __repr__(self) -> str:
        name = getattr(self._fn, "__name__", "<getter>")
        state = "disposed" if self.disposed else f"cached={self._value!r}"
        return f"Computed({name}, {state})"


def computed(fn: Callable[[], T]) -> Computed[T]:
    """Decorator/factory to create a Computed from a function.

    Usage:
        a = observable(True)
        b = observable(True)

        @computed
        def both():
            return a.get() and b.get()

        both.get()  # True
        a.set(False)
        both.get()  # False
    """
    return Computed(fn)
