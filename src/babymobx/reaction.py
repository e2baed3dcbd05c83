"""Reactions — side effects gated by a tracked predicate.

reaction(predicate_fn, effect_fn) evaluates predicate_fn under tracking
right away and again whenever an observable it read changes. Each time the
predicate comes out true, effect_fn fires.

The effect runs after tracking is released, so observables it reads do not
become dependencies. It is not re-entrancy protected: an effect that sets an
observable runs that observable's whole fan-out before returning.
"""

from __future__ import annotations

import logging
from typing import Callable

from babymobx._tracking import run_tracked
from babymobx import _anchor

logger = logging.getLogger("babymobx.reaction")


class Reaction:
    """A predicate/effect pair that re-evaluates when its dependencies change."""

    __slots__ = ("_id", "_predicate_fn", "_effect_fn")

    def __init__(self, predicate_fn: Callable[[], bool], effect_fn: Callable[[], None]) -> None:
        self._id = _anchor.new_id()
        self._predicate_fn = predicate_fn
        self._effect_fn = effect_fn
        _anchor.dependencies[self._id] = {}
        _anchor.derivations[self._id] = self

    def schedule(self) -> None:
        """Re-evaluate the predicate, re-tracking dependencies; fire the effect if true."""
        if self.disposed:
            return
        if run_tracked(self, self._predicate_fn):
            self._effect_fn()

    notify = schedule

    @property
    def disposed(self) -> bool:
        return self._id not in _anchor.derivations

    def dispose(self) -> None:
        """Stop this reaction. Disconnects from all dependencies."""
        if self.disposed:
            return
        _anchor.release(self._id)
        logger.debug("disposed %r", self)

    def __repr__(self) -> str:
        name = getattr(self._predicate_fn, "__name__", "<predicate>")
        state = "disposed" if self.disposed else "active"
        return f"Reaction({name}, {state})"


def reaction(predicate_fn: Callable[[], bool], effect_fn: Callable[[], None]) -> Reaction:
    """Run effect_fn whenever predicate_fn, re-evaluated on change, is true.

    The predicate is evaluated once before this returns, so a predicate that
    is already true fires the effect immediately.

    Returns the Reaction (call .dispose() to stop).

    Usage:
        ready = observable(False)
        log = []

        reaction(lambda: ready.get(), lambda: log.append("go"))
        # log == []

        ready.set(True)
        # log == ["go"]
    """
    r = Reaction(predicate_fn, effect_fn)
    try:
        r.schedule()
    except BaseException:
        r.dispose()
        raise
    return r
