"""Dependency tracking engine — the heart of babymobx.

Uses a contextvar to track which tracked computation is currently executing,
so every Observable.get() can attribute the read to it. Each tracked
execution keeps the token returned by ContextVar.set() and resets to it on
exit, which makes the slot behave as a stack: a computation that runs
another tracked computation inline gets its own attribution back afterwards.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, TypeVar

from babymobx import _anchor

if TYPE_CHECKING:
    from babymobx.computed import Computed
    from babymobx.reaction import Reaction

    Derivation = Computed | Reaction

T = TypeVar("T")

# The currently-executing tracked computation (computed or reaction).
# When set, any Observable.get() call registers itself as a dependency.
current_derivation: contextvars.ContextVar[Derivation | None] = contextvars.ContextVar(
    "current_derivation", default=None
)


def begin_tracking(derivation: Derivation) -> contextvars.Token:
    """Make derivation the current computation. Pass the token to end_tracking()."""
    return current_derivation.set(derivation)


def end_tracking(token: contextvars.Token) -> None:
    """Restore whatever computation was current before the matching begin."""
    current_derivation.reset(token)


def currently_tracking() -> Derivation | None:
    return current_derivation.get()


@contextmanager
def tracked(derivation: Derivation) -> Iterator[None]:
    """Attribute observable reads inside the block to derivation.

    Always releases the slot, even if the block raises.
    """
    token = begin_tracking(derivation)
    try:
        yield
    finally:
        end_tracking(token)


def run_tracked(derivation: Derivation, fn: Callable[[], T]) -> T:
    """Run fn under fresh tracking for derivation.

    After a successful run, links the run no longer read are dropped, so the
    dependency set matches what this run actually read. If fn raises, the
    previous links stay, so the next change still reaches the computation.
    """
    previous = _anchor.begin_run(derivation._id)
    try:
        with tracked(derivation):
            result = fn()
    except BaseException:
        _anchor.abort_run(derivation._id, previous)
        raise
    _anchor.commit_run(derivation._id, previous)
    return result
