"""Tree capability protocols, the in-memory tree, and the flattener.

Defines ``VisibleNode`` and the helpers that turn a host tree plus view
state into the ordered visible list, and navigate inside that list.
"""

from __future__ import annotations

from .flatten import checked_children, compute_effective_marks, compute_subtree_matches, flatten
from .memory import MemoryTree
from .navigation import (
    ancestor_chain,
    next_expandable_child_index,
    next_expandable_index,
    next_index_after_subtree,
    parent_entry_index,
)
from .types import LabelProvider, NodeId, TreeEdit, TreeModel, VisibleNode

__all__ = [
    "NodeId",
    "TreeModel",
    "TreeEdit",
    "LabelProvider",
    "VisibleNode",
    "MemoryTree",
    "flatten",
    "checked_children",
    "compute_subtree_matches",
    "compute_effective_marks",
    "parent_entry_index",
    "next_index_after_subtree",
    "next_expandable_child_index",
    "next_expandable_index",
    "ancestor_chain",
]
