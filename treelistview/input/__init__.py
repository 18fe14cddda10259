"""Key resolution and the modal action dispatcher."""

from __future__ import annotations

from .actions import Action, CustomAction, PromptCommand, parse_action
from .dispatcher import ActionDispatcher, DispatchResult
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keymap import KEYMAP_PROFILES, Keymap
from .modes import BROWSING, Browsing, Editing, Filtering, Mode

__all__ = [
    "Action",
    "CustomAction",
    "PromptCommand",
    "parse_action",
    "ActionDispatcher",
    "DispatchResult",
    "KeyComboBinding",
    "KeyComboRegistry",
    "KEYMAP_PROFILES",
    "Keymap",
    "BROWSING",
    "Browsing",
    "Editing",
    "Filtering",
    "Mode",
]
