"""Observable values — state that tracks its readers.

When an Observable is read inside a Computed or Reaction evaluation, the
reading computation's id is added to the Observable's subscribers. When the
Observable changes, every subscriber is notified synchronously, in the order
it first subscribed.

All state lives in _anchor — instances are thin handles holding an _id.
"""

from __future__ import annotations

import logging
from typing import TypeVar, Generic

from babymobx._tracking import currently_tracking
from babymobx import _anchor

T = TypeVar("T")

logger = logging.getLogger("babymobx.observable")

# Values of the same kind compare by value. Everything else compares by
# identity. bool is checked first: True is not the number 1 here.
_PRIMITIVE_KINDS = (bool, (int, float, complex), str, bytes, type(None))


def _primitive_kind(value: object):
    for kind in _PRIMITIVE_KINDS:
        if isinstance(value, kind):
            return kind
    return None


def _changed(old: object, new: object) -> bool:
    if old is new:
        return False
    kind = _primitive_kind(old)
    if kind is not None and kind == _primitive_kind(new):
        return old != new
    return True


class Observable(Generic[T]):
    """A single observable value with automatic dependency tracking."""

    __slots__ = ("_id",)

    def __init__(self, value: T) -> None:
        self._id = _anchor.new_id()
        _anchor.values[self._id] = value
        _anchor.subscribers[self._id] = {}

    def get(self) -> T:
        """Read the value. If inside a tracked computation, registers the dependency."""
        derivation = currently_tracking()
        if derivation is not None:
            _anchor.subscribe(self._id, derivation._id)
        else:
            logger.warning("get() was called outside of a reaction or computed (%r)", self)
        return _anchor.values[self._id]

    def peek(self) -> T:
        """Read the value without tracking it."""
        return _anchor.values[self._id]

    def set(self, value: T) -> None:
        """Write a new value. Notifies subscribers only if the value changed."""
        if _changed(_anchor.values[self._id], value):
            _anchor.values[self._id] = value
            self._notify()

    def _notify(self) -> None:
        """Re-run every subscriber, in subscription order."""
        subscribers = _anchor.subscribers[self._id]
        wave = list(subscribers)
        logger.debug("%r changed, notifying %d subscriber(s)", self, len(wave))
        for deriv_id in wave:
            # An earlier subscriber in this wave may have disposed or re-tracked this one.
            if deriv_id not in subscribers:
                continue
            derivation = _anchor.derivations.get(deriv_id)
            if derivation is not None:
                derivation.notify()

    @property
    def subscriber_count(self) -> int:
        return len(_anchor.subscribers[self._id])

    def __repr__(self) -> str:
        return f"Observable({_anchor.values[self._id]!r})"


def observable(value: T) -> Observable[T]:
    """Factory for an Observable holding value.

    Usage:
        flag = observable(False)
        flag.set(True)
    """
    return Observable(value)
