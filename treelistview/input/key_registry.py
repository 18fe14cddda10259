"""Key token lookup tables shared by the browsing and prompt keymaps."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class KeyComboBinding(Generic[T]):
    """Mapping from one or more key tokens to a single bound value."""

    combos: tuple[str, ...]
    target: T


class KeyComboRegistry(Generic[T]):
    """Small key lookup table with optional key normalization strategy."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        """Start empty; ``normalize`` folds tokens before storing and lookup."""
        self._normalize = normalize if normalize is not None else self._identity
        self._targets: dict[str, T] = {}

    @staticmethod
    def _identity(key: str) -> str:
        """Exact-match tokens."""
        return key

    def register_binding(self, binding: KeyComboBinding[T]) -> KeyComboRegistry[T]:
        """Register one binding, overwriting existing targets for same combos."""
        for combo in binding.combos:
            self._targets[self._normalize(combo)] = binding.target
        return self

    def register_bindings(self, *bindings: KeyComboBinding[T]) -> KeyComboRegistry[T]:
        """Register ``bindings`` in order; later ones win on shared tokens."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def unregister(self, key: str) -> bool:
        """Drop ``key``; return ``True`` when it was bound."""
        return self._targets.pop(self._normalize(key), None) is not None

    def resolve(self, key: str) -> T | None:
        """Return the value bound to ``key`` or ``None``."""
        return self._targets.get(self._normalize(key))

    def items(self) -> Iterator[tuple[str, T]]:
        return iter(list(self._targets.items()))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._normalize(key) in self._targets

    def __len__(self) -> int:
        return len(self._targets)
