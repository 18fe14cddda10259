"""Input modes of the dispatcher.

Exactly one mode is active. Only the prompt modes carry a text buffer.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

from ..tree_model.types import NodeId
from ..view.filtering import FilterConfig

EDIT_KINDS = ("add", "rename")


@dataclass(frozen=True)
class Browsing:
    """Default mode: actions go straight to the view controllers."""


@dataclass(frozen=True)
class Editing:
    """Text prompt for ``add`` (``target`` is the parent) or ``rename``."""

    kind: str
    target: NodeId
    buffer: str = ""

    def __post_init__(self) -> None:
        if self.kind not in EDIT_KINDS:
            raise ValueError(f"unknown edit kind: {self.kind!r}")

    def with_buffer(self, buffer: str) -> Editing:
        return replace(self, buffer=buffer)


@dataclass(frozen=True)
class Filtering:
    """Live filter prompt; ``previous`` is restored on cancel."""

    previous: FilterConfig
    buffer: str = ""

    def with_buffer(self, buffer: str) -> Filtering:
        return replace(self, buffer=buffer)


Mode = Union[Browsing, Editing, Filtering]

BROWSING = Browsing()


def is_prompt_text(key: str) -> bool:
    """Return ``True`` for keys that are typed into a prompt buffer."""
    return len(key) == 1 and key.isprintable()
