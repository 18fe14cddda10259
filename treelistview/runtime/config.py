"""Persistent JSON config helpers.

Stores the keymap profile and key overrides, default view options, and named
view snapshots. All access is defensive: malformed or missing config falls
back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from ..input.actions import Action, parse_action
from ..input.keymap import KEYMAP_PROFILES
from ..view.expansion import DEFAULT_EXPANSION_POLICIES
from ..view.scroll import ScrollPolicy
from ..view.state import ViewOptions, ViewSnapshot

logger = logging.getLogger(__name__)

APP_NAME = "treelistview"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception as exc:
        logger.debug("Config not loaded from %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem and serialization errors are logged at debug level and
    otherwise ignored; a config that cannot be written is never fatal.
    """
    try:
        payload = json.dumps(data, indent=2) + "\n"
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(payload, encoding="utf-8")
    except Exception as exc:
        logger.debug("Config not saved to %s: %s", CONFIG_PATH, exc)


def _keymap_section() -> dict[str, object]:
    value = load_config().get("keymap")
    return value if isinstance(value, dict) else {}


def load_keymap_profile() -> str:
    """Return the persisted keymap profile, ``"default"`` when unset or unknown."""
    value = _keymap_section().get("profile")
    if isinstance(value, str) and value.strip() in KEYMAP_PROFILES:
        return value.strip()
    return "default"


def save_keymap_profile(profile: str) -> None:
    if profile not in KEYMAP_PROFILES:
        return
    config = load_config()
    section = _keymap_section()
    section["profile"] = profile
    config["keymap"] = section
    save_config(config)


def load_key_overrides() -> dict[str, Action | None]:
    """Load key overrides with strict validation.

    Each entry maps a key token to an action name or ``null`` (unbind).
    Empty keys and unknown action names are dropped.
    """
    value = _keymap_section().get("bindings")
    if not isinstance(value, dict):
        return {}

    overrides: dict[str, Action | None] = {}
    for key, name in value.items():
        if not isinstance(key, str) or not key:
            continue
        if name is None:
            overrides[key] = None
            continue
        action = parse_action(name)
        if action is None:
            continue
        overrides[key] = action
    return overrides


def save_key_overrides(overrides: dict[str, Action | str | None]) -> None:
    """Persist key overrides; entries with unknown action names are skipped."""
    serialized: dict[str, str | None] = {}
    for key, name in overrides.items():
        if not isinstance(key, str) or not key:
            continue
        if name is None:
            serialized[key] = None
            continue
        action = parse_action(name)
        if action is not None:
            serialized[key] = action.value

    config = load_config()
    section = _keymap_section()
    section["bindings"] = serialized
    config["keymap"] = section
    save_config(config)


def load_view_options() -> ViewOptions:
    """Load default view options; each invalid field falls back to its default."""
    defaults = ViewOptions()
    value = load_config().get("view")
    if not isinstance(value, dict):
        return defaults

    show_root = value.get("show_root")
    if not isinstance(show_root, bool):
        show_root = defaults.show_root

    expansion = value.get("default_expansion")
    if expansion not in DEFAULT_EXPANSION_POLICIES:
        expansion = defaults.default_expansion

    try:
        policy = ScrollPolicy(value.get("scroll_policy"))
    except ValueError:
        policy = defaults.scroll_policy

    height = value.get("viewport_height")
    if isinstance(height, bool) or not isinstance(height, int) or height < 1:
        height = defaults.viewport_height

    return ViewOptions(
        show_root=show_root,
        default_expansion=expansion,
        scroll_policy=policy,
        viewport_height=height,
    )


def save_view_options(options: ViewOptions) -> None:
    config = load_config()
    config["view"] = {
        "show_root": bool(options.show_root),
        "default_expansion": options.default_expansion,
        "scroll_policy": ScrollPolicy(options.scroll_policy).value,
        "viewport_height": max(1, int(options.viewport_height)),
    }
    save_config(config)


def _snapshots_section() -> dict[str, object]:
    value = load_config().get("snapshots")
    return value if isinstance(value, dict) else {}


def load_view_snapshot(name: str) -> ViewSnapshot | None:
    """Load the named view snapshot, or ``None`` when missing or malformed."""
    raw = _snapshots_section().get(name)
    if not isinstance(raw, dict):
        return None
    return ViewSnapshot.from_dict(raw)


def save_view_snapshot(name: str, snapshot: ViewSnapshot) -> None:
    """Persist ``snapshot`` under ``name``.

    Node ids must be JSON scalars to survive the round trip; lists are stored
    as JSON arrays.
    """
    stripped = str(name).strip()
    if not stripped:
        return
    config = load_config()
    section = _snapshots_section()
    section[stripped] = snapshot.to_dict()
    config["snapshots"] = section
    save_config(config)


def delete_view_snapshot(name: str) -> bool:
    config = load_config()
    section = _snapshots_section()
    if name not in section:
        return False
    del section[name]
    config["snapshots"] = section
    save_config(config)
    return True
