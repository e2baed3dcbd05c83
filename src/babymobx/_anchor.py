"""Data anchor — plain Python structures that hold all reactive state.

Observables and tracked computations are thin handles holding an _id.
Observables only ever store computation ids; the single owning reference
to a live computation is its entry in `derivations`.
"""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from babymobx._tracking import Derivation

# Observable state
values: dict[int, object] = {}
subscribers: dict[int, dict[int, None]] = {}  # obs_id -> ordered set of derivation ids

# Tracked computation state (Computed + Reaction)
derivations: dict[int, Derivation] = {}  # deriv_id -> live computation
dependencies: dict[int, dict[int, None]] = {}  # deriv_id -> ordered set of obs ids

# ID generation — itertools.count is thread-safe (C-level GIL atomic)
_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)


def subscribe(obs_id: int, deriv_id: int) -> None:
    """Link a computation to an observable it just read. Idempotent."""
    deps = dependencies.get(deriv_id)
    if deps is None:  # disposed while running
        return
    subscribers[obs_id].setdefault(deriv_id, None)
    deps.setdefault(obs_id, None)


def begin_run(deriv_id: int) -> dict[int, None]:
    """Start collecting a fresh dependency set. Returns the previous one.

    Existing subscriber entries are left in place, so a computation keeps
    its position in each observable's notification order across re-runs.
    """
    previous = dependencies.get(deriv_id, {})
    if deriv_id in dependencies:
        dependencies[deriv_id] = {}
    return previous


def commit_run(deriv_id: int, previous: dict[int, None]) -> None:
    """Finish a successful run: unlink observables this run no longer read."""
    current = dependencies.get(deriv_id)
    for obs_id in previous:
        if current is None or obs_id not in current:
            subscribers[obs_id].pop(deriv_id, None)


def abort_run(deriv_id: int, previous: dict[int, None]) -> None:
    """Finish a failed run: keep the old links plus whatever was read before the error."""
    current = dependencies.get(deriv_id)
    if current is None:
        # Disposed mid-run; release() only saw the partial set.
        commit_run(deriv_id, previous)
        return
    previous.update(current)
    dependencies[deriv_id] = previous


def untrack_all(deriv_id: int) -> None:
    """Remove deriv_id from every observable it currently depends on."""
    deps = dependencies.get(deriv_id)
    if not deps:
        return
    for obs_id in deps:
        subscribers[obs_id].pop(deriv_id, None)
    deps.clear()


def release(deriv_id: int) -> None:
    """Forget a computation entirely. Used by dispose()."""
    untrack_all(deriv_id)
    dependencies.pop(deriv_id, None)
    derivations.pop(deriv_id, None)
