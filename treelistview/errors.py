"""Error taxonomy and structured edit outcomes.

Validation code raises the ``TreeViewError`` subclasses below. Public entry
points (edit processor, view refresh) catch them and hand back an
``EditOutcome`` instead, so callers branch on ``outcome.ok`` rather than on
exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Hashable


class ErrorKind(str, Enum):
    """Failure categories reported through ``EditOutcome.kind``."""

    NOT_FOUND = "not_found"
    CYCLE_DETECTED = "cycle_detected"
    INVALID_OPERATION = "invalid_operation"
    STRUCTURAL_INCONSISTENCY = "structural_inconsistency"


class TreeViewError(Exception):
    """Base class for expected tree-view failures."""

    kind: ErrorKind = ErrorKind.INVALID_OPERATION


class NotFoundError(TreeViewError):
    """Referenced node id is absent from the tree."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, node_id: Hashable) -> None:
        super().__init__(f"node not found: {node_id!r}")
        self.node_id = node_id


class CycleDetectedError(TreeViewError):
    """A move would make a node its own ancestor."""

    kind = ErrorKind.CYCLE_DETECTED

    def __init__(self, node_id: Hashable, target: Hashable) -> None:
        super().__init__(f"cannot move {node_id!r} under {target!r}: target is inside its subtree")
        self.node_id = node_id
        self.target = target


class InvalidOperationError(TreeViewError):
    """Operation is well-formed but not applicable in the current state."""

    kind = ErrorKind.INVALID_OPERATION

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class StructuralInconsistencyError(TreeViewError):
    """Host tree broke the acyclic / single-parent contract."""

    kind = ErrorKind.STRUCTURAL_INCONSISTENCY

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class EditOutcome:
    """Result of one state-changing operation."""

    ok: bool
    kind: ErrorKind | None = None
    message: str = ""
    node_id: Hashable | None = None

    @classmethod
    def success(cls, message: str = "", node_id: Hashable | None = None) -> EditOutcome:
        return cls(True, None, message, node_id)

    @classmethod
    def failure(cls, error: TreeViewError) -> EditOutcome:
        return cls(False, error.kind, str(error), getattr(error, "node_id", None))

    def __bool__(self) -> bool:
        return self.ok
