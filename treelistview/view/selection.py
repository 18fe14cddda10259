"""Selection tracking against the current visible list."""

from __future__ import annotations

from collections.abc import Sequence

from ..tree_model.navigation import (
    ancestor_chain,
    next_expandable_child_index,
    next_expandable_index,
    parent_entry_index,
)
from ..tree_model.types import NodeId, VisibleNode


class SelectionController:
    """Index-based selection that saturates at the list bounds.

    Re-anchoring on a new list keeps the same id when it is still visible,
    else the nearest still-visible ancestor, else the previous index clamped
    to the new length, else nothing when the list is empty.
    """

    def __init__(self, entries: Sequence[VisibleNode] = ()) -> None:
        self._entries: Sequence[VisibleNode] = entries
        self._positions: dict[NodeId, int] = {entry.id: idx for idx, entry in enumerate(entries)}
        self._index: int | None = None

    @property
    def entries(self) -> Sequence[VisibleNode]:
        return self._entries

    @property
    def index(self) -> int | None:
        return self._index

    @property
    def selected_id(self) -> NodeId | None:
        if self._index is None:
            return None
        return self._entries[self._index].id

    @property
    def selected_entry(self) -> VisibleNode | None:
        if self._index is None:
            return None
        return self._entries[self._index]

    def position(self, node_id: NodeId) -> int | None:
        return self._positions.get(node_id)

    def rebase(self, entries: Sequence[VisibleNode]) -> None:
        """Swap in a freshly built list and re-anchor the selection."""
        previous_entries = self._entries
        previous_index = self._index
        previous_id = self.selected_id
        self._entries = entries
        self._positions = {entry.id: idx for idx, entry in enumerate(entries)}
        if not entries:
            self._index = None
            return
        if previous_index is None:
            return
        idx = self._positions.get(previous_id)
        if idx is None:
            for ancestor in ancestor_chain(previous_entries, previous_id):
                idx = self._positions.get(ancestor)
                if idx is not None:
                    break
        if idx is None:
            idx = min(previous_index, len(entries) - 1)
        self._index = idx

    def _set_index(self, idx: int) -> bool:
        if not self._entries:
            changed = self._index is not None
            self._index = None
            return changed
        idx = max(0, min(idx, len(self._entries) - 1))
        changed = idx != self._index
        self._index = idx
        return changed

    def move_next(self) -> bool:
        if self._index is None:
            return self._set_index(0)
        return self._set_index(self._index + 1)

    def move_prev(self) -> bool:
        if self._index is None:
            return self._set_index(0)
        return self._set_index(self._index - 1)

    def move_first(self) -> bool:
        return self._set_index(0)

    def move_last(self) -> bool:
        return self._set_index(len(self._entries) - 1)

    def move_page(self, delta: int) -> bool:
        """Move by ``delta`` rows (negative moves up), saturating at the bounds."""
        start = self._index if self._index is not None else 0
        return self._set_index(start + delta)

    def select(self, node_id: NodeId) -> bool:
        """Select ``node_id`` if it is visible; return ``False`` otherwise."""
        idx = self._positions.get(node_id)
        if idx is None:
            return False
        self._index = idx
        return True

    def clear(self) -> None:
        self._index = None

    def select_parent(self) -> bool:
        if self._index is None:
            return False
        parent_idx = parent_entry_index(self._entries, self._index)
        if parent_idx is None:
            return False
        return self._set_index(parent_idx)

    def select_expandable_child(self) -> bool:
        """Move to the first child with children, else the next expandable row below."""
        if self._index is None:
            return False
        target = next_expandable_child_index(self._entries, self._index)
        if target is None:
            target = next_expandable_index(self._entries, self._index)
        if target is None:
            return False
        return self._set_index(target)
