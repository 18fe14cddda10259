"""Modal key dispatch: raw key tokens to semantic actions to view updates."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..edit import EditActionProcessor
from ..errors import EditOutcome
from ..tree_model.types import TreeEdit
from ..view.state import TreeViewState
from .actions import Action, CustomAction, PromptCommand
from .keymap import Keymap
from .modes import BROWSING, Browsing, Editing, Filtering, Mode, is_prompt_text


@dataclass(frozen=True)
class DispatchResult:
    """What one key or action did."""

    action: Action | CustomAction | None = None
    handled: bool = False
    quit: bool = False
    outcome: EditOutcome | None = None

    @property
    def custom(self) -> object | None:
        """Payload of a forwarded host action, if that is what the key resolved to."""
        if isinstance(self.action, CustomAction):
            return self.action.payload
        return None


class ActionDispatcher:
    """Owns the input mode and routes actions to state and edit processor.

    Each mode has its own action table; an action missing from the current
    mode's table is reported as unhandled and changes nothing.
    ``custom`` is consulted before the keymap while browsing. Whatever it
    returns comes back unhandled as ``DispatchResult.custom``.
    """

    def __init__(
        self,
        state: TreeViewState,
        keymap: Keymap | None = None,
        editor: EditActionProcessor | None = None,
        custom: Callable[[str], object | None] | None = None,
    ) -> None:
        self.state = state
        self.custom = custom
        self.keymap = keymap if keymap is not None else Keymap()
        if editor is None and isinstance(state.tree, TreeEdit):
            editor = EditActionProcessor(state)
        self.editor = editor
        self.mode: Mode = BROWSING
        self._browsing: dict[Action, Callable[[], DispatchResult]] = {
            Action.NAVIGATE_UP: lambda: self._moved(Action.NAVIGATE_UP, self.state.move_prev),
            Action.NAVIGATE_DOWN: lambda: self._moved(Action.NAVIGATE_DOWN, self.state.move_next),
            Action.NAVIGATE_PAGE_UP: lambda: self._moved(Action.NAVIGATE_PAGE_UP, self.state.page_up),
            Action.NAVIGATE_PAGE_DOWN: lambda: self._moved(Action.NAVIGATE_PAGE_DOWN, self.state.page_down),
            Action.SELECT_FIRST: lambda: self._moved(Action.SELECT_FIRST, self.state.move_first),
            Action.SELECT_LAST: lambda: self._moved(Action.SELECT_LAST, self.state.move_last),
            Action.SELECT_PARENT: lambda: self._moved(Action.SELECT_PARENT, self.state.select_parent),
            Action.SELECT_CHILD: lambda: self._moved(Action.SELECT_CHILD, self.state.select_child),
            Action.SCROLL_UP: lambda: self._moved(Action.SCROLL_UP, self.state.scroll_up_by),
            Action.SCROLL_DOWN: lambda: self._moved(Action.SCROLL_DOWN, self.state.scroll_down_by),
            Action.TOGGLE: lambda: DispatchResult(Action.TOGGLE, self.state.toggle()),
            Action.TOGGLE_RECURSIVE: lambda: DispatchResult(Action.TOGGLE_RECURSIVE, self.state.toggle_recursive()),
            Action.EXPAND_ALL: self._expand_all,
            Action.COLLAPSE_ALL: self._collapse_all,
            Action.MARK: lambda: DispatchResult(Action.MARK, self.state.toggle_mark() is not None),
            Action.ADD: self._start_add,
            Action.RENAME: self._start_rename,
            Action.DELETE: lambda: self._edit_selected(Action.DELETE, "delete"),
            Action.DETACH: lambda: self._edit_selected(Action.DETACH, "detach"),
            Action.REORDER_UP: lambda: self._edit_selected(Action.REORDER_UP, "reorder_up"),
            Action.REORDER_DOWN: lambda: self._edit_selected(Action.REORDER_DOWN, "reorder_down"),
            Action.PASTE: self._paste,
            Action.START_FILTER: self._start_filter,
            Action.QUIT: lambda: DispatchResult(Action.QUIT, True, quit=True),
        }
        self._editing: dict[Action, Callable[[], DispatchResult]] = {
            Action.CONFIRM_EDIT: self._confirm_edit,
            Action.CANCEL_EDIT: self._cancel_edit,
        }
        self._filtering: dict[Action, Callable[[], DispatchResult]] = {
            Action.CONFIRM_FILTER: self._confirm_filter,
            Action.CANCEL_FILTER: self._cancel_filter,
        }

    # -- entry points ----------------------------------------------------

    def handle_key(self, key: str) -> DispatchResult:
        """Handle one raw key token in the current mode."""
        if isinstance(self.mode, Editing):
            return self._handle_prompt_key(key, Action.CONFIRM_EDIT, Action.CANCEL_EDIT)
        if isinstance(self.mode, Filtering):
            return self._handle_prompt_key(key, Action.CONFIRM_FILTER, Action.CANCEL_FILTER)
        if self.custom is not None:
            action = self.keymap.resolve_with(key, self.custom)
        else:
            action = self.keymap.resolve(key)
        if action is None:
            return DispatchResult()
        return self.apply(action)

    def apply(self, action: Action | CustomAction) -> DispatchResult:
        """Apply ``action`` through the current mode's transition table."""
        if isinstance(action, CustomAction):
            return DispatchResult(action)
        if isinstance(self.mode, Editing):
            table = self._editing
        elif isinstance(self.mode, Filtering):
            table = self._filtering
        else:
            table = self._browsing
        handler = table.get(action)
        if handler is None:
            return DispatchResult(action)
        return handler()

    @property
    def prompt_text(self) -> str | None:
        """Current prompt buffer, or ``None`` while browsing."""
        if isinstance(self.mode, (Editing, Filtering)):
            return self.mode.buffer
        return None

    # -- browsing helpers ------------------------------------------------

    def _moved(self, action: Action, move: Callable[[], bool]) -> DispatchResult:
        if not self.state.visible:
            return DispatchResult(action)
        move()
        return DispatchResult(action, True)

    def _expand_all(self) -> DispatchResult:
        self.state.expand_all()
        return DispatchResult(Action.EXPAND_ALL, True)

    def _collapse_all(self) -> DispatchResult:
        self.state.collapse_all()
        return DispatchResult(Action.COLLAPSE_ALL, True)

    def _edit_selected(self, action: Action, operation: str) -> DispatchResult:
        selected = self.state.selected_id
        if self.editor is None or selected is None:
            return DispatchResult(action)
        outcome: EditOutcome = getattr(self.editor, operation)(selected)
        return DispatchResult(action, outcome.ok, outcome=outcome)

    def _paste(self) -> DispatchResult:
        if self.editor is None:
            return DispatchResult(Action.PASTE)
        target = self.state.selected_id
        if target is None:
            target = self.state.tree.root()
        outcome = self.editor.paste(target)
        return DispatchResult(Action.PASTE, outcome.ok, outcome=outcome)

    def _start_add(self) -> DispatchResult:
        if self.editor is None:
            return DispatchResult(Action.ADD)
        parent = self.state.selected_id
        if parent is None:
            parent = self.state.tree.root()
        if parent is None:
            return DispatchResult(Action.ADD)
        self.mode = Editing("add", parent)
        return DispatchResult(Action.ADD, True)

    def _start_rename(self) -> DispatchResult:
        selected = self.state.selected_id
        if self.editor is None or selected is None:
            return DispatchResult(Action.RENAME)
        self.mode = Editing("rename", selected, self.state.labels.label(selected))
        return DispatchResult(Action.RENAME, True)

    def _start_filter(self) -> DispatchResult:
        config = self.state.filter.config
        self.mode = Filtering(previous=config, buffer=config.pattern)
        return DispatchResult(Action.START_FILTER, True)

    # -- prompt modes ----------------------------------------------------

    def _handle_prompt_key(self, key: str, confirm: Action, cancel: Action) -> DispatchResult:
        """Feed the prompt buffer; every key is consumed while a prompt is open."""
        command = self.keymap.resolve_prompt(key)
        if command is PromptCommand.CONFIRM:
            return self.apply(confirm)
        if command is PromptCommand.CANCEL:
            return self.apply(cancel)
        buffer = self.prompt_text or ""
        if command is PromptCommand.BACKSPACE:
            return self._set_buffer(buffer[:-1])
        if command is PromptCommand.CLEAR:
            return self._set_buffer("")
        if command in (PromptCommand.SELECT_PREV, PromptCommand.SELECT_NEXT):
            if isinstance(self.mode, Filtering):
                if command is PromptCommand.SELECT_PREV:
                    self.state.move_prev()
                else:
                    self.state.move_next()
            return DispatchResult(handled=True)
        if is_prompt_text(key):
            return self._set_buffer(buffer + key)
        return DispatchResult(handled=True)

    def _set_buffer(self, buffer: str) -> DispatchResult:
        mode = self.mode
        if isinstance(mode, Filtering):
            if buffer == mode.buffer:
                return DispatchResult(handled=True)
            self.mode = mode.with_buffer(buffer)
            outcome = self.state.set_filter(mode.previous.with_pattern(buffer))
            return DispatchResult(handled=True, outcome=outcome)
        if isinstance(mode, Editing):
            self.mode = mode.with_buffer(buffer)
        return DispatchResult(handled=True)

    def _confirm_edit(self) -> DispatchResult:
        mode = self.mode
        assert isinstance(mode, Editing) and self.editor is not None
        if mode.kind == "add":
            outcome = self.editor.add(mode.target, mode.buffer)
        else:
            outcome = self.editor.rename(mode.target, mode.buffer)
        if outcome.ok:
            self.mode = BROWSING
        return DispatchResult(Action.CONFIRM_EDIT, outcome.ok, outcome=outcome)

    def _cancel_edit(self) -> DispatchResult:
        self.mode = BROWSING
        return DispatchResult(Action.CANCEL_EDIT, True)

    def _confirm_filter(self) -> DispatchResult:
        self.mode = BROWSING
        return DispatchResult(Action.CONFIRM_FILTER, True)

    def _cancel_filter(self) -> DispatchResult:
        mode = self.mode
        assert isinstance(mode, Filtering)
        self.mode = BROWSING
        outcome = self.state.set_filter(mode.previous)
        return DispatchResult(Action.CANCEL_FILTER, True, outcome=outcome)

    @property
    def browsing(self) -> bool:
        return isinstance(self.mode, Browsing)
