"""Tree flattening: expansion and filter state to an ordered visible list."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import TYPE_CHECKING

from ..errors import StructuralInconsistencyError
from .types import NodeId, TreeModel, VisibleNode

if TYPE_CHECKING:
    from ..view.expansion import ExpansionSet
    from ..view.filtering import FilterEngine


def checked_children(tree: TreeModel, node_id: NodeId) -> Sequence[NodeId]:
    """Return children of ``node_id`` after rejecting dangling child ids."""
    children = tree.children(node_id)
    for child in children:
        if not tree.contains(child):
            raise StructuralInconsistencyError(f"dangling child {child!r} under {node_id!r}")
    return children


def compute_subtree_matches(
    tree: TreeModel,
    root: NodeId,
    filter_engine: FilterEngine,
) -> tuple[dict[NodeId, bool], dict[NodeId, bool]]:
    """Bottom-up pass over every reachable node.

    Returns ``(self_matches, subtree_matches)``. A node's subtree matches when
    the node itself or any descendant matches, collapsed or not.
    """
    self_matches: dict[NodeId, bool] = {}
    subtree_matches: dict[NodeId, bool] = {}
    on_path: set[NodeId] = set()
    stack: list[tuple[NodeId, bool]] = [(root, False)]
    while stack:
        node_id, children_done = stack.pop()
        if children_done:
            on_path.discard(node_id)
            matched = filter_engine.matches(node_id)
            self_matches[node_id] = matched
            subtree_matches[node_id] = matched or any(
                subtree_matches[child] for child in tree.children(node_id)
            )
            continue
        if node_id in on_path:
            raise StructuralInconsistencyError(f"cycle through node {node_id!r}")
        if node_id in subtree_matches:
            raise StructuralInconsistencyError(f"node {node_id!r} has more than one parent")
        on_path.add(node_id)
        stack.append((node_id, True))
        for child in reversed(checked_children(tree, node_id)):
            stack.append((child, False))
    return self_matches, subtree_matches


def compute_effective_marks(
    tree: TreeModel,
    root: NodeId,
    marks: Collection[NodeId],
) -> set[NodeId]:
    """Return ids shown as marked: marked directly, or every child is.

    A childless node counts only when it is marked itself.
    """
    effective: set[NodeId] = set()
    if not marks:
        return effective
    done: set[NodeId] = set()
    on_path: set[NodeId] = set()
    stack: list[tuple[NodeId, bool]] = [(root, False)]
    while stack:
        node_id, children_done = stack.pop()
        if children_done:
            on_path.discard(node_id)
            done.add(node_id)
            children = tree.children(node_id)
            if node_id in marks or (children and all(child in effective for child in children)):
                effective.add(node_id)
            continue
        if node_id in on_path:
            raise StructuralInconsistencyError(f"cycle through node {node_id!r}")
        if node_id in done:
            raise StructuralInconsistencyError(f"node {node_id!r} has more than one parent")
        on_path.add(node_id)
        stack.append((node_id, True))
        for child in reversed(checked_children(tree, node_id)):
            stack.append((child, False))
    return effective


def flatten(
    tree: TreeModel,
    expansion: ExpansionSet,
    filter_engine: FilterEngine | None = None,
    *,
    show_root: bool = False,
    marks: Collection[NodeId] = (),
) -> list[VisibleNode]:
    """Build the preorder visible list for ``tree``.

    Unfiltered, a node's children are emitted only while it is expanded. With
    an active filter a node is emitted when it or a descendant matches, and it
    emits only children whose subtree matches. ``auto_expand`` on the filter
    config forces those ancestors open.

    A hidden root is treated as expanded and its children sit at depth 0.
    ``VisibleNode.parent`` always names the real tree parent, so top-level
    rows under a hidden root carry the root id.

    ``marked`` reflects direct marks. ``effectively_marked`` is also set on a
    node whose children are all effectively marked.

    Raises ``StructuralInconsistencyError`` when a node is reached twice or a
    child id is unknown to the tree.
    """
    root = tree.root()
    if root is None:
        return []
    if not tree.contains(root):
        raise StructuralInconsistencyError(f"root {root!r} is not in the tree")

    active = filter_engine is not None and filter_engine.active
    self_matches: dict[NodeId, bool] = {}
    subtree_matches: dict[NodeId, bool] | None = None
    if active:
        self_matches, subtree_matches = compute_subtree_matches(tree, root, filter_engine)
        if not subtree_matches.get(root, False):
            return []
    auto_expand = active and filter_engine.config.auto_expand
    effective_marks = compute_effective_marks(tree, root, marks)

    entries: list[VisibleNode] = []
    seen: set[NodeId] = set()

    def visible_children_of(node_id: NodeId) -> tuple[Sequence[NodeId], Sequence[NodeId]]:
        children = checked_children(tree, node_id)
        if subtree_matches is None:
            return children, children
        return children, [child for child in children if subtree_matches[child]]

    # Preorder on an explicit stack, children pushed last-first.
    stack: list[tuple[NodeId, NodeId | None, int, tuple[bool, ...]]] = []
    if show_root:
        stack.append((root, None, 0, ()))
    else:
        seen.add(root)
        for child in reversed(visible_children_of(root)[1]):
            stack.append((child, root, 0, ()))

    while stack:
        node_id, parent, depth, tail_stack = stack.pop()
        if node_id in seen:
            raise StructuralInconsistencyError(f"node {node_id!r} reached twice")
        seen.add(node_id)
        children, visible_children = visible_children_of(node_id)
        expanded = expansion.is_expanded(node_id) or (auto_expand and bool(visible_children))
        open_children = expanded and bool(visible_children)
        entries.append(
            VisibleNode(
                id=node_id,
                depth=depth,
                parent=parent,
                has_children=bool(children),
                is_expanded=open_children,
                matched=self_matches.get(node_id, False),
                marked=node_id in marks,
                effectively_marked=node_id in effective_marks,
                tail_stack=tail_stack,
            )
        )
        if not open_children:
            continue
        last = len(visible_children) - 1
        for idx in range(last, -1, -1):
            stack.append((visible_children[idx], node_id, depth + 1, tail_stack + (idx == last,)))
    return entries
