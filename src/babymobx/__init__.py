"""babymobx: minimal MobX-style dependency tracking for Python."""

from importlib.metadata import version as _version

__version__ = _version("babymobx")

from babymobx._tracking import currently_tracking
from babymobx.observable import Observable, observable
from babymobx.computed import Computed, computed
from babymobx.reaction import Reaction, reaction

__all__ = [
    "Observable",
    "observable",
    "Computed",
    "computed",
    "Reaction",
    "reaction",
    "currently_tracking",
]
