"""Visible-list index navigation helpers."""

from __future__ import annotations

from collections.abc import Sequence

from .types import NodeId, VisibleNode


def parent_entry_index(entries: Sequence[VisibleNode], selected_idx: int) -> int | None:
    """Return the index of the visible parent row of ``selected_idx``."""
    if not 0 <= selected_idx < len(entries):
        return None
    entry = entries[selected_idx]
    idx = selected_idx - 1
    while idx >= 0:
        candidate = entries[idx]
        if candidate.depth < entry.depth:
            return idx if candidate.id == entry.parent else None
        idx -= 1
    return None


def next_index_after_subtree(entries: Sequence[VisibleNode], node_idx: int) -> int:
    """Return the first index after the subtree rooted at ``node_idx``."""
    depth = entries[node_idx].depth
    idx = node_idx + 1
    while idx < len(entries) and entries[idx].depth > depth:
        idx += 1
    return idx


def next_expandable_child_index(entries: Sequence[VisibleNode], node_idx: int) -> int | None:
    """Return the first direct child of ``node_idx`` that itself has children."""
    end = next_index_after_subtree(entries, node_idx)
    idx = node_idx + 1
    while idx < end:
        if entries[idx].has_children:
            return idx
        idx = next_index_after_subtree(entries, idx)
    return None


def next_expandable_index(entries: Sequence[VisibleNode], node_idx: int) -> int | None:
    """Return the next row with children that is not outside the current level."""
    depth = entries[node_idx].depth
    for idx in range(node_idx + 1, len(entries)):
        candidate = entries[idx]
        if candidate.depth < depth:
            break
        if candidate.has_children:
            return idx
    return None


def ancestor_chain(entries: Sequence[VisibleNode], node_id: NodeId) -> list[NodeId]:
    """Return parent links for ``node_id`` as recorded in ``entries``, nearest first."""
    parents = {entry.id: entry.parent for entry in entries}
    chain: list[NodeId] = []
    seen = {node_id}
    current = parents.get(node_id)
    while current is not None and current not in seen:
        chain.append(current)
        seen.add(current)
        current = parents.get(current)
    return chain
