"""Viewport offset bookkeeping."""

from __future__ import annotations

from enum import Enum


class ScrollPolicy(str, Enum):
    """How the viewport follows the selection."""

    KEEP_IN_VIEW = "keep_in_view"
    CENTER = "center"


class ScrollController:
    """Keeps the selected row inside ``[offset, offset + height)``."""

    def __init__(self, height: int = 1, policy: ScrollPolicy = ScrollPolicy.KEEP_IN_VIEW) -> None:
        self.offset = 0
        self.height = max(1, height)
        self.policy = ScrollPolicy(policy)

    def resize(self, height: int, selected: int | None, total: int) -> bool:
        """Apply a new viewport height and re-check the selection invariant."""
        self.height = max(1, height)
        return self.follow(selected, total)

    def follow(self, selected: int | None, total: int) -> bool:
        """Adjust ``offset`` for the current selection; return ``True`` if it moved."""
        before = self.offset
        if total <= 0:
            self.offset = 0
        elif selected is not None:
            if self.policy is ScrollPolicy.CENTER:
                self._center(selected, total)
            else:
                self._keep_in_view(selected)
        return self.offset != before

    def scroll_by(self, delta: int, total: int) -> bool:
        """Shift ``offset`` by ``delta``, clamped so the last page stays full."""
        before = self.offset
        max_offset = max(0, total - self.height)
        self.offset = max(0, min(self.offset + delta, max_offset))
        return self.offset != before

    def _keep_in_view(self, selected: int) -> None:
        if selected < self.offset:
            self.offset = selected
        elif selected >= self.offset + self.height:
            self.offset = selected + 1 - self.height

    def _center(self, selected: int, total: int) -> None:
        if total <= self.height:
            self.offset = 0
            return
        max_offset = total - self.height
        self.offset = min(max(0, selected - self.height // 2), max_offset)

    def visible_range(self, total: int) -> range:
        """Return row indices currently inside the viewport."""
        return range(self.offset, min(total, self.offset + self.height))
