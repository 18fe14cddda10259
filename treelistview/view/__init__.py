"""Per-view state controllers and the ``TreeViewState`` owner."""

from __future__ import annotations

from .expansion import DEFAULT_EXPANSION_POLICIES, ExpansionSet
from .filtering import NO_FILTER, FilterConfig, FilterEngine, fuzzy_score
from .marks import MarkSet
from .scroll import ScrollController, ScrollPolicy
from .selection import SelectionController
from .state import TreeViewState, ViewOptions, ViewSnapshot

__all__ = [
    "DEFAULT_EXPANSION_POLICIES",
    "ExpansionSet",
    "FilterConfig",
    "FilterEngine",
    "NO_FILTER",
    "fuzzy_score",
    "MarkSet",
    "ScrollController",
    "ScrollPolicy",
    "SelectionController",
    "TreeViewState",
    "ViewOptions",
    "ViewSnapshot",
]
