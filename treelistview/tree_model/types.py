"""Node-id alias, host capability protocols, and the visible-row record."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Hashable, Protocol, runtime_checkable

NodeId = Hashable


class TreeModel(Protocol):
    """Read-only tree capability supplied by the host.

    Contract: acyclic, single parent per node, ids stable across frames.
    """

    def root(self) -> NodeId | None: ...

    def children(self, node_id: NodeId) -> Sequence[NodeId]: ...

    def contains(self, node_id: NodeId) -> bool: ...


@runtime_checkable
class TreeEdit(TreeModel, Protocol):
    """Mutation capability used by the edit processor."""

    def parent(self, node_id: NodeId) -> NodeId | None: ...

    def create_node(self, label: str) -> NodeId: ...

    def insert_child(self, parent: NodeId, child: NodeId, index: int | None = None) -> None: ...

    def remove_child(self, parent: NodeId, child: NodeId) -> None: ...

    def delete_subtree(self, node_id: NodeId) -> list[NodeId]: ...

    def set_label(self, node_id: NodeId, label: str) -> None: ...


class LabelProvider(Protocol):
    """Text accessor used by filter matching and external row builders."""

    def label(self, node_id: NodeId) -> str: ...


@dataclass(frozen=True)
class VisibleNode:
    """One row of the flattened projection."""

    id: NodeId
    depth: int
    parent: NodeId | None = None
    has_children: bool = False
    is_expanded: bool = False
    matched: bool = False
    marked: bool = False
    effectively_marked: bool = False
    tail_stack: tuple[bool, ...] = ()
