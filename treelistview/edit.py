"""Structural edit operations over an editable host tree.

Every operation validates completely before touching the tree, so a failed
call leaves tree, visible list, selection and scroll exactly as they were.
Failures come back as ``EditOutcome`` values, never as raised exceptions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .errors import (
    CycleDetectedError,
    EditOutcome,
    InvalidOperationError,
    NotFoundError,
    StructuralInconsistencyError,
    TreeViewError,
)
from .tree_model.types import NodeId, TreeEdit
from .view.state import TreeViewState

logger = logging.getLogger(__name__)


class EditActionProcessor:
    """Applies add/rename/delete/detach/move/reorder/paste to ``state.tree``."""

    def __init__(self, state: TreeViewState) -> None:
        if not isinstance(state.tree, TreeEdit):
            raise TypeError("EditActionProcessor requires a tree implementing TreeEdit")
        self.state = state
        self.tree: TreeEdit = state.tree

    # -- plumbing --------------------------------------------------------

    def _run(self, name: str, operation: Callable[..., EditOutcome], *args: object) -> EditOutcome:
        try:
            outcome = operation(*args)
        except TreeViewError as exc:
            logger.warning("Edit FAIL: %s %s", name, exc)
            return EditOutcome.failure(exc)
        if outcome.ok:
            logger.info("Edit OK: %s %s", name, outcome.message)
        else:
            logger.warning("Edit applied but view refresh failed: %s %s", name, outcome.message)
        return outcome

    def _settle(self, message: str, node_id: NodeId | None = None, select: NodeId | None = None) -> EditOutcome:
        """Prune stale view state, recompute, and optionally select ``select``."""
        self.state.prune()
        self.state.invalidate()
        refreshed = self.state.refresh()
        if not refreshed.ok:
            return refreshed
        if select is not None:
            self.state.select(select)
        return EditOutcome.success(message, node_id)

    def _require(self, node_id: NodeId) -> None:
        if node_id is None or not self.tree.contains(node_id):
            raise NotFoundError(node_id)

    def _require_not_root(self, node_id: NodeId, verb: str) -> None:
        if node_id == self.tree.root():
            raise InvalidOperationError(f"cannot {verb} the root node")

    def _ancestors(self, node_id: NodeId) -> list[NodeId]:
        """Walk parent links of ``node_id``, nearest first."""
        chain: list[NodeId] = []
        seen = {node_id}
        current = self.tree.parent(node_id)
        while current is not None:
            if current in seen:
                raise StructuralInconsistencyError(f"parent cycle above {node_id!r}")
            seen.add(current)
            chain.append(current)
            current = self.tree.parent(current)
        return chain

    def _check_cycle(self, node_id: NodeId, target: NodeId) -> None:
        if target == node_id or node_id in self._ancestors(target):
            raise CycleDetectedError(node_id, target)

    @staticmethod
    def _require_label(label: str) -> str:
        if not isinstance(label, str) or not label.strip():
            raise InvalidOperationError("label must not be empty")
        return label

    # -- operations ------------------------------------------------------

    def add(self, parent_id: NodeId, label: str) -> EditOutcome:
        """Create a node labelled ``label`` as the last child of ``parent_id``."""
        return self._run("add", self._add, parent_id, label)

    def _add(self, parent_id: NodeId, label: str) -> EditOutcome:
        self._require(parent_id)
        label = self._require_label(label)
        node_id = self.tree.create_node(label)
        self.tree.insert_child(parent_id, node_id)
        self.state.expansion.expand(parent_id)
        return self._settle(f"added {node_id!r} under {parent_id!r}", node_id=node_id, select=node_id)

    def rename(self, node_id: NodeId, label: str) -> EditOutcome:
        return self._run("rename", self._rename, node_id, label)

    def _rename(self, node_id: NodeId, label: str) -> EditOutcome:
        self._require(node_id)
        label = self._require_label(label)
        self.tree.set_label(node_id, label)
        return self._settle(f"renamed {node_id!r}", node_id=node_id)

    def delete(self, node_id: NodeId) -> EditOutcome:
        """Remove ``node_id`` and its whole subtree from the tree."""
        return self._run("delete", self._delete, node_id)

    def _delete(self, node_id: NodeId) -> EditOutcome:
        self._require(node_id)
        self._require_not_root(node_id, "delete")
        removed = self.tree.delete_subtree(node_id)
        self.state.marks.discard_many(removed)
        return self._settle(f"deleted {node_id!r} ({len(removed)} nodes)", node_id=node_id)

    def detach(self, node_id: NodeId) -> EditOutcome:
        """Cut ``node_id`` out of its parent and stage it in the mark set."""
        return self._run("detach", self._detach, node_id)

    def _detach(self, node_id: NodeId) -> EditOutcome:
        self._require(node_id)
        self._require_not_root(node_id, "detach")
        parent_id = self.tree.parent(node_id)
        if parent_id is None:
            raise InvalidOperationError(f"node {node_id!r} is already detached")
        self.tree.remove_child(parent_id, node_id)
        self.state.marks.stage(node_id)
        return self._settle(f"detached {node_id!r} from {parent_id!r}", node_id=node_id)

    def move(self, node_id: NodeId, target_parent: NodeId, target_index: int) -> EditOutcome:
        """Reattach ``node_id`` under ``target_parent`` at ``target_index``."""
        return self._run("move", self._move, node_id, target_parent, target_index)

    def _move(self, node_id: NodeId, target_parent: NodeId, target_index: int) -> EditOutcome:
        self._require(node_id)
        self._require(target_parent)
        self._require_not_root(node_id, "move")
        self._check_cycle(node_id, target_parent)
        siblings = [child for child in self.tree.children(target_parent) if child != node_id]
        if not 0 <= target_index <= len(siblings):
            raise InvalidOperationError(
                f"index {target_index} outside 0..{len(siblings)} for children of {target_parent!r}"
            )
        was_selected = self.state.selected_id == node_id
        parent_id = self.tree.parent(node_id)
        if parent_id is not None:
            self.tree.remove_child(parent_id, node_id)
        self.tree.insert_child(target_parent, node_id, target_index)
        return self._settle(
            f"moved {node_id!r} to {target_parent!r}[{target_index}]",
            node_id=node_id,
            select=node_id if was_selected else None,
        )

    def reorder(self, node_id: NodeId, delta: int) -> EditOutcome:
        """Shift ``node_id`` by ``delta`` positions among its siblings."""
        return self._run("reorder", self._reorder, node_id, delta)

    def _reorder(self, node_id: NodeId, delta: int) -> EditOutcome:
        self._require(node_id)
        self._require_not_root(node_id, "reorder")
        parent_id = self.tree.parent(node_id)
        if parent_id is None:
            raise InvalidOperationError(f"node {node_id!r} is detached")
        siblings = list(self.tree.children(parent_id))
        new_index = siblings.index(node_id) + delta
        if not 0 <= new_index < len(siblings):
            raise InvalidOperationError(f"cannot move {node_id!r} beyond its sibling bounds")
        was_selected = self.state.selected_id == node_id
        self.tree.remove_child(parent_id, node_id)
        self.tree.insert_child(parent_id, node_id, new_index)
        return self._settle(
            f"reordered {node_id!r} to position {new_index}",
            node_id=node_id,
            select=node_id if was_selected else None,
        )

    def reorder_up(self, node_id: NodeId) -> EditOutcome:
        return self.reorder(node_id, -1)

    def reorder_down(self, node_id: NodeId) -> EditOutcome:
        return self.reorder(node_id, 1)

    def paste(self, target_id: NodeId) -> EditOutcome:
        """Move every marked node under ``target_id`` and clear the consumed marks."""
        return self._run("paste", self._paste, target_id)

    def _paste(self, target_id: NodeId) -> EditOutcome:
        self._require(target_id)
        marked = [node_id for node_id in self.state.marks if self.tree.contains(node_id)]
        if not marked:
            raise InvalidOperationError("nothing marked to paste")
        marked_set = set(marked)
        target_ancestors = set(self._ancestors(target_id))
        movers: list[NodeId] = []
        for node_id in marked:
            self._require_not_root(node_id, "paste")
            if node_id == target_id or node_id in target_ancestors:
                raise CycleDetectedError(node_id, target_id)
            if marked_set.intersection(self._ancestors(node_id)):
                continue
            movers.append(node_id)

        for node_id in movers:
            parent_id = self.tree.parent(node_id)
            if parent_id is not None:
                self.tree.remove_child(parent_id, node_id)
            self.tree.insert_child(target_id, node_id)
        self.state.marks.discard_many(marked)
        self.state.expansion.expand(target_id)
        return self._settle(
            f"pasted {len(movers)} node(s) under {target_id!r}",
            node_id=target_id,
            select=movers[0],
        )
