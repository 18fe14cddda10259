"""In-memory editable tree implementing ``TreeEdit`` and ``LabelProvider``.

Hosts with their own storage implement the protocols directly; this class is
the reference implementation used by tests and small applications.
"""

from __future__ import annotations

import itertools
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from .types import NodeId


@dataclass
class _Node:
    label: str
    parent: NodeId | None = None
    children: list[NodeId] = field(default_factory=list)
    values: dict[str, str] = field(default_factory=dict)


class MemoryTree:
    """Dictionary-backed single-parent tree keyed by stable node ids."""

    def __init__(self, root_label: str = "root", root_id: NodeId | None = None) -> None:
        self._ids = itertools.count(1)
        self._nodes: dict[NodeId, _Node] = {}
        self._root: NodeId | None = root_id if root_id is not None else self._next_id()
        self._nodes[self._root] = _Node(root_label)

    @classmethod
    def from_mapping(
        cls,
        layout: Mapping[str, object],
        root_label: str = "root",
        root_id: NodeId = "root",
    ) -> MemoryTree:
        """Build a tree from nested ``{label: {child_label: ...}}`` mappings.

        Labels double as node ids, so they must be unique across the tree.
        """
        tree = cls(root_label=root_label, root_id=root_id)

        def walk(parent: NodeId, children: Mapping[str, object]) -> None:
            for label, nested in children.items():
                tree.add(label, parent=parent, node_id=label)
                if isinstance(nested, Mapping):
                    walk(label, nested)

        walk(root_id, layout)
        return tree

    def _next_id(self) -> int:
        node_id = next(self._ids)
        while node_id in self._nodes:
            node_id = next(self._ids)
        return node_id

    # -- TreeModel -------------------------------------------------------

    def root(self) -> NodeId | None:
        return self._root

    def children(self, node_id: NodeId) -> Sequence[NodeId]:
        node = self._nodes.get(node_id)
        if node is None:
            return ()
        return tuple(node.children)

    def contains(self, node_id: NodeId) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    # -- LabelProvider ---------------------------------------------------

    def label(self, node_id: NodeId) -> str:
        node = self._nodes.get(node_id)
        return node.label if node is not None else ""

    def value(self, node_id: NodeId, column_key: str) -> str:
        node = self._nodes.get(node_id)
        if node is None:
            return ""
        return node.values.get(column_key, "")

    def set_value(self, node_id: NodeId, column_key: str, value: str) -> None:
        self._nodes[node_id].values[column_key] = value

    # -- TreeEdit --------------------------------------------------------

    def parent(self, node_id: NodeId) -> NodeId | None:
        node = self._nodes.get(node_id)
        return node.parent if node is not None else None

    def create_node(self, label: str, node_id: NodeId | None = None) -> NodeId:
        """Create a detached node and return its id."""
        if node_id is None:
            node_id = self._next_id()
        elif node_id in self._nodes:
            raise ValueError(f"duplicate node id: {node_id!r}")
        self._nodes[node_id] = _Node(label)
        return node_id

    def insert_child(self, parent: NodeId, child: NodeId, index: int | None = None) -> None:
        """Attach a detached ``child`` under ``parent`` at ``index`` (append when None)."""
        parent_node = self._nodes[parent]
        child_node = self._nodes[child]
        if child_node.parent is not None:
            raise ValueError(f"node {child!r} is already attached")
        if index is None or index > len(parent_node.children):
            index = len(parent_node.children)
        parent_node.children.insert(max(0, index), child)
        child_node.parent = parent

    def remove_child(self, parent: NodeId, child: NodeId) -> None:
        """Detach ``child`` from ``parent``; the node keeps its own subtree."""
        self._nodes[parent].children.remove(child)
        self._nodes[child].parent = None

    def delete_subtree(self, node_id: NodeId) -> list[NodeId]:
        """Remove ``node_id`` and all descendants from storage; return removed ids."""
        node = self._nodes[node_id]
        if node.parent is not None:
            self._nodes[node.parent].children.remove(node_id)
        if node_id == self._root:
            self._root = None
        removed: list[NodeId] = []
        stack = [node_id]
        while stack:
            current = stack.pop()
            current_node = self._nodes.pop(current, None)
            if current_node is None:
                continue
            removed.append(current)
            stack.extend(current_node.children)
        return removed

    def set_label(self, node_id: NodeId, label: str) -> None:
        self._nodes[node_id].label = label

    # -- helpers ---------------------------------------------------------

    def add(self, label: str, parent: NodeId | None = None, node_id: NodeId | None = None) -> NodeId:
        """Create a node and attach it under ``parent`` (root when omitted)."""
        new_id = self.create_node(label, node_id=node_id)
        target = parent if parent is not None else self._root
        if target is not None:
            self.insert_child(target, new_id)
        return new_id
