"""Semantic actions produced by key resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Action(str, Enum):
    """Closed set of view actions; values are the names used in keymap config."""

    NAVIGATE_UP = "navigate_up"
    NAVIGATE_DOWN = "navigate_down"
    NAVIGATE_PAGE_UP = "navigate_page_up"
    NAVIGATE_PAGE_DOWN = "navigate_page_down"
    SELECT_FIRST = "select_first"
    SELECT_LAST = "select_last"
    SELECT_PARENT = "select_parent"
    SELECT_CHILD = "select_child"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    TOGGLE = "toggle"
    TOGGLE_RECURSIVE = "toggle_recursive"
    EXPAND_ALL = "expand_all"
    COLLAPSE_ALL = "collapse_all"
    ADD = "add"
    RENAME = "rename"
    DELETE = "delete"
    DETACH = "detach"
    MARK = "mark"
    PASTE = "paste"
    REORDER_UP = "reorder_up"
    REORDER_DOWN = "reorder_down"
    START_FILTER = "start_filter"
    CONFIRM_FILTER = "confirm_filter"
    CANCEL_FILTER = "cancel_filter"
    CONFIRM_EDIT = "confirm_edit"
    CANCEL_EDIT = "cancel_edit"
    QUIT = "quit"


class PromptCommand(str, Enum):
    """Keys with a fixed meaning while a text prompt is open."""

    CONFIRM = "confirm"
    CANCEL = "cancel"
    BACKSPACE = "backspace"
    CLEAR = "clear"
    SELECT_PREV = "select_prev"
    SELECT_NEXT = "select_next"


def parse_action(name: object) -> Action | None:
    """Return the ``Action`` named ``name`` or ``None`` for unknown names."""
    if isinstance(name, Action):
        return name
    if not isinstance(name, str):
        return None
    try:
        return Action(name.strip().lower())
    except ValueError:
        return None


@dataclass(frozen=True)
class CustomAction:
    """Host-defined action; the dispatcher hands it back without acting on it."""

    payload: object
