"""Host-side helpers: persisted config and keymap/view bootstrap."""

from __future__ import annotations

from .config import (
    load_config,
    load_key_overrides,
    load_keymap_profile,
    load_view_options,
    load_view_snapshot,
    save_config,
    save_view_options,
    save_view_snapshot,
)

__all__ = [
    "load_config",
    "save_config",
    "load_keymap_profile",
    "load_key_overrides",
    "load_view_options",
    "save_view_options",
    "load_view_snapshot",
    "save_view_snapshot",
]
