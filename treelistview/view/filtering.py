"""Live text filter over node labels."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from ..tree_model.types import LabelProvider, NodeId

MATCH_MODES = ("substring", "fuzzy")

MatchPredicate = Callable[[NodeId, str], bool]


@dataclass(frozen=True)
class FilterConfig:
    """Filter pattern plus matching options.

    An empty ``pattern`` with no ``predicate`` means "no filter".
    ``predicate`` receives ``(node_id, label)`` and overrides ``match_mode``.
    """

    pattern: str = ""
    case_sensitive: bool = False
    match_mode: str = "substring"
    auto_expand: bool = True
    predicate: MatchPredicate | None = None

    @property
    def active(self) -> bool:
        return bool(self.pattern) or self.predicate is not None

    def with_pattern(self, pattern: str) -> FilterConfig:
        return replace(self, pattern=pattern)


NO_FILTER = FilterConfig()


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score an ordered-subsequence match; ``None`` when ``query`` does not fit."""
    if not query:
        return 0
    score = 0
    prev_idx = -1
    run = 0
    for needle in query:
        idx = candidate.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if idx == 0 or candidate[idx - 1] in "/_- .":
            score += 35
        prev_idx = idx
    score -= len(candidate) // 5
    return score


class FilterEngine:
    """Evaluates the current ``FilterConfig`` against host labels."""

    def __init__(self, labels: LabelProvider, config: FilterConfig = NO_FILTER) -> None:
        self.labels = labels
        self._config = NO_FILTER
        self._needle = ""
        self.config = config

    @property
    def config(self) -> FilterConfig:
        return self._config

    @config.setter
    def config(self, config: FilterConfig) -> None:
        if config.match_mode not in MATCH_MODES:
            raise ValueError(f"unknown match mode: {config.match_mode!r}")
        self._config = config
        self._needle = self._fold(config.pattern)

    @property
    def active(self) -> bool:
        return self._config.active

    def _fold(self, text: str) -> str:
        return text if self._config.case_sensitive else text.casefold()

    def matches(self, node_id: NodeId) -> bool:
        """Return ``True`` when the node's own label satisfies the filter."""
        config = self._config
        if not config.active:
            return True
        label = self.labels.label(node_id)
        if config.predicate is not None:
            return bool(config.predicate(node_id, label))
        haystack = self._fold(label)
        if config.match_mode == "fuzzy":
            return fuzzy_score(self._needle, haystack) is not None
        return self._needle in haystack
