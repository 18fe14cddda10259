"""Mark set: nodes staged for move/paste."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

from ..tree_model.types import NodeId, TreeModel


class MarkSet:
    """Insertion-ordered set of marked node ids.

    Marked ids may still be attached (``toggle``) or already detached from
    their parent (``stage``, used by detach). Paste handles both.
    """

    def __init__(self, on_change: Callable[[], None] | None = None) -> None:
        self._marked: dict[NodeId, None] = {}
        self._on_change = on_change

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._marked

    def __iter__(self) -> Iterator[NodeId]:
        return iter(list(self._marked))

    def __len__(self) -> int:
        return len(self._marked)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def toggle(self, node_id: NodeId) -> bool:
        """Flip the mark on ``node_id`` and return the new marked flag."""
        if node_id in self._marked:
            del self._marked[node_id]
            self._changed()
            return False
        self._marked[node_id] = None
        self._changed()
        return True

    def stage(self, node_id: NodeId) -> None:
        if node_id not in self._marked:
            self._marked[node_id] = None
            self._changed()

    def discard_many(self, node_ids: Iterable[NodeId]) -> None:
        removed = False
        for node_id in node_ids:
            if self._marked.pop(node_id, False) is None:
                removed = True
        if removed:
            self._changed()

    def clear(self) -> None:
        if self._marked:
            self._marked.clear()
            self._changed()

    def prune(self, tree: TreeModel) -> None:
        """Drop marks whose ids are no longer in ``tree``."""
        self.discard_many([node_id for node_id in self._marked if not tree.contains(node_id)])

    def replace(self, node_ids: Iterable[NodeId]) -> None:
        self._marked = dict.fromkeys(node_ids)
        self._changed()

    def snapshot(self) -> tuple[NodeId, ...]:
        return tuple(self._marked)
