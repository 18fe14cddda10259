"""Expanded-node bookkeeping."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

from ..tree_model.types import NodeId, TreeEdit, TreeModel

DEFAULT_EXPANSION_POLICIES = ("none", "root", "all")


class ExpansionSet:
    """Set of expanded node ids with change notification.

    ``on_change`` fires after every mutation that actually changed membership;
    the view state uses it to invalidate its cached visible list.
    """

    def __init__(
        self,
        expanded: Iterable[NodeId] = (),
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._expanded: set[NodeId] = set(expanded)
        self._on_change = on_change

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._expanded

    def __iter__(self) -> Iterator[NodeId]:
        return iter(self._expanded)

    def __len__(self) -> int:
        return len(self._expanded)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def is_expanded(self, node_id: NodeId) -> bool:
        return node_id in self._expanded

    def expand(self, node_id: NodeId) -> bool:
        """Expand ``node_id``; return ``True`` when it was collapsed before."""
        if node_id in self._expanded:
            return False
        self._expanded.add(node_id)
        self._changed()
        return True

    def collapse(self, node_id: NodeId) -> bool:
        """Collapse ``node_id``; return ``True`` when it was expanded before."""
        if node_id not in self._expanded:
            return False
        self._expanded.discard(node_id)
        self._changed()
        return True

    def toggle(self, node_id: NodeId) -> bool:
        """Flip expansion of ``node_id`` and return the new expanded flag."""
        if node_id in self._expanded:
            self.collapse(node_id)
            return False
        self.expand(node_id)
        return True

    def set_expanded(self, node_id: NodeId, expand: bool) -> bool:
        return self.expand(node_id) if expand else self.collapse(node_id)

    def expand_all(self, tree: TreeModel) -> None:
        """Expand every reachable node that has children."""
        root = tree.root()
        expanded: set[NodeId] = set()
        if root is not None:
            seen: set[NodeId] = set()
            stack = [root]
            while stack:
                node_id = stack.pop()
                if node_id in seen:
                    continue
                seen.add(node_id)
                children = tree.children(node_id)
                if children:
                    expanded.add(node_id)
                    stack.extend(children)
        if expanded != self._expanded:
            self._expanded = expanded
            self._changed()

    def collapse_all(self) -> None:
        if self._expanded:
            self._expanded.clear()
            self._changed()

    def set_expanded_recursive(self, tree: TreeModel, node_id: NodeId, expand: bool) -> None:
        """Expand or collapse ``node_id`` and its whole subtree."""
        before = set(self._expanded)
        seen: set[NodeId] = set()
        stack = [node_id]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            children = tree.children(current)
            if expand and children:
                self._expanded.add(current)
            elif not expand:
                self._expanded.discard(current)
            stack.extend(children)
        if before != self._expanded:
            self._changed()

    def expand_to(self, tree: TreeEdit, node_id: NodeId) -> bool:
        """Expand every ancestor of ``node_id``; return ``False`` if unreachable."""
        ancestors: list[NodeId] = []
        seen = {node_id}
        current = tree.parent(node_id)
        while current is not None:
            if current in seen:
                return False
            seen.add(current)
            ancestors.append(current)
            current = tree.parent(current)
        if not ancestors and node_id != tree.root():
            return False
        if ancestors and ancestors[-1] != tree.root():
            return False
        added = [ancestor for ancestor in ancestors if ancestor not in self._expanded]
        if added:
            self._expanded.update(added)
            self._changed()
        return True

    def prune(self, tree: TreeModel) -> None:
        """Drop ids that no longer exist in ``tree``."""
        stale = {node_id for node_id in self._expanded if not tree.contains(node_id)}
        if stale:
            self._expanded -= stale
            self._changed()

    def replace(self, expanded: Iterable[NodeId]) -> None:
        self._expanded = set(expanded)
        self._changed()

    def snapshot(self) -> frozenset[NodeId]:
        return frozenset(self._expanded)

    @classmethod
    def with_policy(
        cls,
        tree: TreeModel,
        policy: str,
        on_change: Callable[[], None] | None = None,
    ) -> ExpansionSet:
        """Create an expansion set seeded by ``"none"``, ``"root"`` or ``"all"``."""
        if policy not in DEFAULT_EXPANSION_POLICIES:
            raise ValueError(f"unknown expansion policy: {policy!r}")
        expansion = cls(on_change=on_change)
        root = tree.root()
        if policy == "root" and root is not None:
            expansion._expanded.add(root)
        elif policy == "all":
            expansion.expand_all(tree)
        return expansion
