"""Key token to action tables with selectable navigation profiles.

Key tokens use the terminal reader's names (``UP``, ``SHIFT_UP``,
``PAGE_DOWN``, ``ENTER``, ``ESC``, ``DELETE``, ``CTRL_U``, ...) or a single
printable character.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from .actions import Action, CustomAction, PromptCommand, parse_action
from .key_registry import KeyComboBinding, KeyComboRegistry

KEYMAP_PROFILES = ("default", "vim", "arrows")

_VIM_NAVIGATION = (
    KeyComboBinding(("k",), Action.NAVIGATE_UP),
    KeyComboBinding(("j",), Action.NAVIGATE_DOWN),
    KeyComboBinding(("h",), Action.SELECT_PARENT),
    KeyComboBinding(("l",), Action.SELECT_CHILD),
)

_ARROW_NAVIGATION = (
    KeyComboBinding(("UP",), Action.NAVIGATE_UP),
    KeyComboBinding(("DOWN",), Action.NAVIGATE_DOWN),
    KeyComboBinding(("LEFT",), Action.SELECT_PARENT),
    KeyComboBinding(("RIGHT",), Action.SELECT_CHILD),
)

NAVIGATION_BINDINGS: dict[str, tuple[KeyComboBinding[Action], ...]] = {
    "default": _ARROW_NAVIGATION + _VIM_NAVIGATION,
    "vim": _VIM_NAVIGATION,
    "arrows": _ARROW_NAVIGATION,
}

COMMON_BINDINGS: tuple[KeyComboBinding[Action], ...] = (
    KeyComboBinding(("PAGE_UP",), Action.NAVIGATE_PAGE_UP),
    KeyComboBinding(("PAGE_DOWN",), Action.NAVIGATE_PAGE_DOWN),
    KeyComboBinding(("HOME",), Action.SELECT_FIRST),
    KeyComboBinding(("END",), Action.SELECT_LAST),
    KeyComboBinding(("CTRL_Y",), Action.SCROLL_UP),
    KeyComboBinding(("CTRL_E",), Action.SCROLL_DOWN),
    KeyComboBinding(("ENTER",), Action.TOGGLE),
    KeyComboBinding((" ",), Action.TOGGLE_RECURSIVE),
    KeyComboBinding(("*",), Action.EXPAND_ALL),
    KeyComboBinding(("-",), Action.COLLAPSE_ALL),
    KeyComboBinding(("SHIFT_UP",), Action.REORDER_UP),
    KeyComboBinding(("SHIFT_DOWN",), Action.REORDER_DOWN),
    KeyComboBinding(("DELETE", "d"), Action.DETACH),
    KeyComboBinding(("SHIFT_DELETE", "S"), Action.DELETE),
    KeyComboBinding(("y",), Action.MARK),
    KeyComboBinding(("p",), Action.PASTE),
    KeyComboBinding(("a", "+"), Action.ADD),
    KeyComboBinding(("e",), Action.RENAME),
    KeyComboBinding(("/",), Action.START_FILTER),
    KeyComboBinding(("q", "ESC"), Action.QUIT),
)

PROMPT_BINDINGS: tuple[KeyComboBinding[PromptCommand], ...] = (
    KeyComboBinding(("ENTER",), PromptCommand.CONFIRM),
    KeyComboBinding(("ESC",), PromptCommand.CANCEL),
    KeyComboBinding(("BACKSPACE",), PromptCommand.BACKSPACE),
    KeyComboBinding(("CTRL_U",), PromptCommand.CLEAR),
    KeyComboBinding(("UP", "CTRL_K"), PromptCommand.SELECT_PREV),
    KeyComboBinding(("DOWN", "CTRL_J"), PromptCommand.SELECT_NEXT),
)


class Keymap:
    """Browsing-mode and prompt-mode key tables.

    ``overrides`` maps key tokens to an ``Action`` (or its config name) to
    rebind, or to ``None`` to unbind. Unknown action names raise ``ValueError``.
    """

    def __init__(
        self,
        profile: str = "default",
        overrides: Mapping[str, Action | str | None] | None = None,
    ) -> None:
        if profile not in NAVIGATION_BINDINGS:
            raise ValueError(f"unknown keymap profile: {profile!r}")
        self.profile = profile
        self._browsing: KeyComboRegistry[Action] = KeyComboRegistry()
        self._browsing.register_bindings(*NAVIGATION_BINDINGS[profile], *COMMON_BINDINGS)
        self._prompt: KeyComboRegistry[PromptCommand] = KeyComboRegistry()
        self._prompt.register_bindings(*PROMPT_BINDINGS)
        for key, action in (overrides or {}).items():
            if action is None:
                self.unbind(key)
            else:
                self.bind(key, action)

    def bind(self, key: str, action: Action | str) -> None:
        parsed = parse_action(action)
        if parsed is None:
            raise ValueError(f"unknown action: {action!r}")
        self._browsing.register_binding(KeyComboBinding((key,), parsed))

    def unbind(self, key: str) -> bool:
        return self._browsing.unregister(key)

    def resolve(self, key: str) -> Action | None:
        """Return the browsing-mode action bound to ``key``."""
        return self._browsing.resolve(key)

    def resolve_with(
        self,
        key: str,
        custom: Callable[[str], object | None],
    ) -> Action | CustomAction | None:
        """Ask ``custom`` first; a non-``None`` answer wins over the built-in table."""
        payload = custom(key)
        if payload is not None:
            return CustomAction(payload)
        return self.resolve(key)

    def resolve_prompt(self, key: str) -> PromptCommand | None:
        """Return the prompt command bound to ``key`` while a prompt is open."""
        return self._prompt.resolve(key)

    def bindings(self) -> dict[str, Action]:
        """Return a copy of the browsing-mode table."""
        return dict(self._browsing.items())

    def keys_for(self, action: Action) -> list[str]:
        return sorted(key for key, bound in self._browsing.items() if bound is action)
