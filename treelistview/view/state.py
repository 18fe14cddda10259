"""View state: expansion, filter, selection, scroll, and the cached visible list.

``TreeViewState`` owns every piece of per-view state and runs the single
recompute cycle: mutate, invalidate, flatten, re-anchor selection, follow
with the scroll offset. The visible list is a derived cache and is never
handed out for mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from ..errors import EditOutcome, StructuralInconsistencyError
from ..tree_model.flatten import compute_effective_marks, flatten
from ..tree_model.types import LabelProvider, NodeId, TreeEdit, TreeModel, VisibleNode
from .expansion import ExpansionSet
from .filtering import NO_FILTER, FilterConfig, FilterEngine
from .marks import MarkSet
from .scroll import ScrollController, ScrollPolicy
from .selection import SelectionController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewOptions:
    """Host-level switches for one view."""

    show_root: bool = False
    default_expansion: str = "root"
    scroll_policy: ScrollPolicy = ScrollPolicy.KEEP_IN_VIEW
    viewport_height: int = 20


@dataclass(frozen=True)
class ViewSnapshot:
    """Serializable copy of the restorable view state."""

    expanded: tuple[NodeId, ...] = ()
    marked: tuple[NodeId, ...] = ()
    selected: NodeId | None = None
    offset: int = 0
    filter_pattern: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "expanded": list(self.expanded),
            "marked": list(self.marked),
            "selected": self.selected,
            "offset": self.offset,
            "filter_pattern": self.filter_pattern,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ViewSnapshot:
        """Rebuild a snapshot, dropping malformed fields instead of failing."""
        expanded = data.get("expanded")
        marked = data.get("marked")
        offset = data.get("offset")
        pattern = data.get("filter_pattern")
        selected = data.get("selected")
        return cls(
            expanded=tuple(_hashable_items(expanded)),
            marked=tuple(_hashable_items(marked)),
            selected=selected if _is_hashable(selected) else None,
            offset=offset if isinstance(offset, int) and not isinstance(offset, bool) and offset >= 0 else 0,
            filter_pattern=pattern if isinstance(pattern, str) else "",
        )


def _is_hashable(value: object) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _hashable_items(value: object) -> list[NodeId]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if item is not None and _is_hashable(item)]


class TreeViewState:
    """Single-owner view state over a host tree."""

    def __init__(
        self,
        tree: TreeModel,
        labels: LabelProvider | None = None,
        options: ViewOptions | None = None,
        filter_config: FilterConfig = NO_FILTER,
    ) -> None:
        self.tree = tree
        self.options = options if options is not None else ViewOptions()
        self.labels: LabelProvider = labels if labels is not None else tree
        self._dirty = True
        self.expansion = ExpansionSet.with_policy(tree, self.options.default_expansion, on_change=self.invalidate)
        self.filter = FilterEngine(self.labels, filter_config)
        self.marks = MarkSet(on_change=self.invalidate)
        self.selection = SelectionController()
        self.scroll = ScrollController(self.options.viewport_height, self.options.scroll_policy)
        self.refresh()

    # -- cache -----------------------------------------------------------

    @property
    def dirty(self) -> bool:
        return self._dirty

    def invalidate(self) -> None:
        self._dirty = True

    def refresh(self) -> EditOutcome:
        """Recompute the visible list and re-anchor selection and scroll.

        A host contract violation keeps the last good list in place and is
        reported as a ``STRUCTURAL_INCONSISTENCY`` outcome.
        """
        try:
            entries = flatten(
                self.tree,
                self.expansion,
                self.filter,
                show_root=self.options.show_root,
                marks=self.marks,
            )
        except StructuralInconsistencyError as exc:
            logger.warning("Flatten aborted, keeping last visible list: %s", exc)
            self._dirty = False
            return EditOutcome.failure(exc)
        self.selection.rebase(entries)
        self.scroll.follow(self.selection.index, len(entries))
        self._dirty = False
        return EditOutcome.success()

    def ensure_fresh(self) -> EditOutcome:
        if not self._dirty:
            return EditOutcome.success()
        return self.refresh()

    def _follow(self) -> None:
        self.scroll.follow(self.selection.index, len(self.selection.entries))

    # -- produced output -------------------------------------------------

    @property
    def visible(self) -> Sequence[VisibleNode]:
        self.ensure_fresh()
        return tuple(self.selection.entries)

    @property
    def selected_index(self) -> int | None:
        self.ensure_fresh()
        return self.selection.index

    @property
    def selected_id(self) -> NodeId | None:
        self.ensure_fresh()
        return self.selection.selected_id

    @property
    def selected_entry(self) -> VisibleNode | None:
        self.ensure_fresh()
        return self.selection.selected_entry

    @property
    def offset(self) -> int:
        self.ensure_fresh()
        return self.scroll.offset

    def visible_rows(self) -> Sequence[VisibleNode]:
        """Return the slice of the visible list inside the viewport."""
        entries = self.visible
        window = self.scroll.visible_range(len(entries))
        return entries[window.start:window.stop]

    # -- selection / scroll ----------------------------------------------

    def _move(self, moved: bool) -> bool:
        self._follow()
        return moved

    def move_next(self) -> bool:
        self.ensure_fresh()
        return self._move(self.selection.move_next())

    def move_prev(self) -> bool:
        self.ensure_fresh()
        return self._move(self.selection.move_prev())

    def move_first(self) -> bool:
        self.ensure_fresh()
        return self._move(self.selection.move_first())

    def move_last(self) -> bool:
        self.ensure_fresh()
        return self._move(self.selection.move_last())

    def move_page(self, delta: int) -> bool:
        self.ensure_fresh()
        return self._move(self.selection.move_page(delta))

    def page_down(self) -> bool:
        return self.move_page(self.scroll.height)

    def page_up(self) -> bool:
        return self.move_page(-self.scroll.height)

    def select(self, node_id: NodeId) -> bool:
        """Select ``node_id``, expanding its ancestors when it is hidden."""
        self.ensure_fresh()
        if self.selection.position(node_id) is None:
            if not self.tree.contains(node_id) or not isinstance(self.tree, TreeEdit):
                return False
            if not self.expansion.expand_to(self.tree, node_id):
                return False
            self.refresh()
        return self._move(self.selection.select(node_id))

    def clear_selection(self) -> None:
        self.selection.clear()

    def select_parent(self) -> bool:
        self.ensure_fresh()
        return self._move(self.selection.select_parent())

    def select_child(self) -> bool:
        """Open the selected node if needed, then step to an expandable descendant."""
        self.ensure_fresh()
        entry = self.selection.selected_entry
        if entry is None:
            return False
        moved = False
        if entry.has_children and not entry.is_expanded:
            moved = self.expansion.expand(entry.id)
            self.ensure_fresh()
        return self._move(self.selection.select_expandable_child() or moved)

    def scroll_by(self, delta: int) -> bool:
        """Shift the viewport by ``delta`` rows without moving a still-visible selection.

        A selection pushed out of the window is pulled to its nearest edge.
        """
        self.ensure_fresh()
        total = len(self.selection.entries)
        moved = self.scroll.scroll_by(delta, total)
        index = self.selection.index
        if index is not None:
            window = self.scroll.visible_range(total)
            if index < window.start:
                self.selection.move_page(window.start - index)
            elif index >= window.stop:
                self.selection.move_page(window.stop - 1 - index)
        return moved

    def scroll_down_by(self, amount: int = 1) -> bool:
        return self.scroll_by(amount)

    def scroll_up_by(self, amount: int = 1) -> bool:
        return self.scroll_by(-amount)

    def resize(self, height: int) -> bool:
        self.ensure_fresh()
        return self.scroll.resize(height, self.selection.index, len(self.selection.entries))

    # -- expansion -------------------------------------------------------

    def _target(self, node_id: NodeId | None) -> NodeId | None:
        if node_id is not None:
            return node_id
        return self.selected_id

    def toggle(self, node_id: NodeId | None = None) -> bool:
        """Toggle expansion of ``node_id`` (default: selection) if it has children."""
        target = self._target(node_id)
        if target is None or not self.tree.contains(target) or not self.tree.children(target):
            return False
        self.expansion.toggle(target)
        self.ensure_fresh()
        return True

    def toggle_recursive(self, node_id: NodeId | None = None) -> bool:
        target = self._target(node_id)
        if target is None or not self.tree.contains(target) or not self.tree.children(target):
            return False
        self.expansion.set_expanded_recursive(self.tree, target, not self.expansion.is_expanded(target))
        self.ensure_fresh()
        return True

    def expand(self, node_id: NodeId) -> bool:
        changed = self.expansion.expand(node_id)
        self.ensure_fresh()
        return changed

    def collapse(self, node_id: NodeId) -> bool:
        changed = self.expansion.collapse(node_id)
        self.ensure_fresh()
        return changed

    def expand_all(self) -> None:
        self.expansion.expand_all(self.tree)
        self.ensure_fresh()

    def collapse_all(self) -> None:
        self.expansion.collapse_all()
        self.ensure_fresh()

    # -- filter / marks --------------------------------------------------

    def set_filter(self, config: FilterConfig) -> EditOutcome:
        self.filter.config = config
        self.invalidate()
        return self.refresh()

    def set_filter_pattern(self, pattern: str) -> EditOutcome:
        return self.set_filter(self.filter.config.with_pattern(pattern))

    def toggle_mark(self, node_id: NodeId | None = None) -> bool | None:
        """Toggle the mark on ``node_id`` (default: selection); ``None`` if not allowed."""
        target = self._target(node_id)
        if target is None or target == self.tree.root() or not self.tree.contains(target):
            return None
        marked = self.marks.toggle(target)
        self.ensure_fresh()
        return marked

    def effective_marks(self) -> frozenset[NodeId]:
        """Return marked ids plus every node whose children are all marked."""
        root = self.tree.root()
        if root is None or not self.tree.contains(root):
            return frozenset(self.marks)
        try:
            return frozenset(compute_effective_marks(self.tree, root, self.marks))
        except StructuralInconsistencyError as exc:
            logger.warning("Effective marks unavailable, using direct marks: %s", exc)
            return frozenset(self.marks)

    def is_marked(self, node_id: NodeId) -> bool:
        return node_id in self.effective_marks()

    def prune(self) -> None:
        """Forget expansion and marks for ids the tree no longer contains."""
        self.expansion.prune(self.tree)
        self.marks.prune(self.tree)

    # -- snapshots -------------------------------------------------------

    def snapshot(self) -> ViewSnapshot:
        self.ensure_fresh()
        return ViewSnapshot(
            expanded=tuple(self.expansion.snapshot()),
            marked=self.marks.snapshot(),
            selected=self.selection.selected_id,
            offset=self.scroll.offset,
            filter_pattern=self.filter.config.pattern,
        )

    def restore(self, snapshot: ViewSnapshot) -> None:
        """Apply a snapshot; ids unknown to the current tree are dropped."""
        self.expansion.replace(node_id for node_id in snapshot.expanded if self.tree.contains(node_id))
        self.marks.replace(node_id for node_id in snapshot.marked if self.tree.contains(node_id))
        self.filter.config = self.filter.config.with_pattern(snapshot.filter_pattern)
        self.selection.clear()
        self.scroll.offset = max(0, snapshot.offset)
        self.refresh()
        if snapshot.selected is not None:
            self.selection.select(snapshot.selected)
        self._follow()
