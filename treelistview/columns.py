"""Column descriptions and width distribution for multi-column rows.

The view core never reads these; row builders use them to lay out label and
value cells.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class ColumnWidth:
    """Width bounds: grow from ``min`` toward ``ideal`` first, then toward ``max``."""

    min: int
    ideal: int
    max: int

    @classmethod
    def fixed(cls, width: int) -> ColumnWidth:
        return cls(width, width, width)

    @property
    def policy(self) -> str:
        return "fixed" if self.min == self.max else "flexible"


@dataclass(frozen=True)
class ColumnSpec:
    """One value column: ``key`` is passed to ``LabelProvider.value``."""

    key: str
    width: ColumnWidth
    header: str = ""


def distribute_widths(total: int, columns: Sequence[ColumnWidth]) -> list[int]:
    """Split ``total`` cells across ``columns``.

    Columns start at ``min``, then grow left to right toward ``ideal``, then
    toward ``max``. When ``total`` is outside ``sum(min)..sum(max)`` the widths
    stay clamped at those bounds, so their sum may differ from ``total``.
    """
    widths = [max(0, column.min) for column in columns]
    remaining = max(0, total - sum(widths))
    for targets in (
        [max(column.ideal, column.min) for column in columns],
        [max(column.max, column.min) for column in columns],
    ):
        for idx, target in enumerate(targets):
            if remaining <= 0:
                return widths
            add = min(max(0, target - widths[idx]), remaining)
            widths[idx] += add
            remaining -= add
    return widths
