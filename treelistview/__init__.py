"""Public package surface for treelistview.

A host supplies a tree (``TreeModel``, or ``TreeEdit`` for editing), wraps it
in a ``TreeViewState`` and feeds key tokens to an ``ActionDispatcher``. The
renderer reads ``TreeViewState.visible_rows()`` each frame.
"""

from __future__ import annotations

from .columns import ColumnSpec, ColumnWidth, distribute_widths
from .edit import EditActionProcessor
from .errors import (
    CycleDetectedError,
    EditOutcome,
    ErrorKind,
    InvalidOperationError,
    NotFoundError,
    StructuralInconsistencyError,
    TreeViewError,
)
from .input import Action, ActionDispatcher, CustomAction, DispatchResult, Keymap
from .tree_model import LabelProvider, MemoryTree, NodeId, TreeEdit, TreeModel, VisibleNode, flatten
from .view import FilterConfig, ScrollPolicy, TreeViewState, ViewOptions, ViewSnapshot

__all__ = [
    "Action",
    "ActionDispatcher",
    "ColumnSpec",
    "ColumnWidth",
    "CustomAction",
    "CycleDetectedError",
    "DispatchResult",
    "EditActionProcessor",
    "EditOutcome",
    "ErrorKind",
    "FilterConfig",
    "InvalidOperationError",
    "Keymap",
    "LabelProvider",
    "MemoryTree",
    "NodeId",
    "NotFoundError",
    "ScrollPolicy",
    "StructuralInconsistencyError",
    "TreeEdit",
    "TreeModel",
    "TreeViewError",
    "TreeViewState",
    "ViewOptions",
    "ViewSnapshot",
    "VisibleNode",
    "distribute_widths",
    "flatten",
]
