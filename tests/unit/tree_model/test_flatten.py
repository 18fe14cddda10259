"""Unit tests for tree flattening.

Covers preorder layout, depth and parent links, hidden vs shown root, the
ancestor-inclusion filter rule, and contract-violation detection.
"""

from __future__ import annotations

import unittest

from treelistview.errors import StructuralInconsistencyError
from treelistview.tree_model import MemoryTree, flatten
from treelistview.view.expansion import ExpansionSet
from treelistview.view.filtering import FilterConfig, FilterEngine


def _sample_tree() -> MemoryTree:
    return MemoryTree.from_mapping({"A": {"A1": {}, "A2": {}}, "B": {}})


class _DictTree:
    """Bare read-only tree over a child mapping; may violate the tree contract."""

    def __init__(self, children: dict[str, list[str]], root: str = "r") -> None:
        self._children = children
        self._root = root

    def root(self):
        return self._root

    def children(self, node_id):
        return self._children.get(node_id, [])

    def contains(self, node_id):
        return node_id in self._children

    def label(self, node_id):
        return str(node_id)


def _layout(entries) -> list[tuple[str, int]]:
    return [(entry.id, entry.depth) for entry in entries]


def _chain(length: int) -> tuple[MemoryTree, object]:
    tree = MemoryTree()
    parent = tree.root()
    for idx in range(length):
        parent = tree.add(f"n{idx}", parent=parent)
    return tree, parent


class FlattenLayoutTests(unittest.TestCase):
    def test_fully_expanded_tree_is_preorder(self) -> None:
        tree = _sample_tree()
        entries = flatten(tree, ExpansionSet({"root", "A"}))

        self.assertEqual(_layout(entries), [("A", 0), ("A1", 1), ("A2", 1), ("B", 0)])
        self.assertEqual([entry.parent for entry in entries], ["root", "A", "A", "root"])
        self.assertTrue(entries[0].has_children)
        self.assertTrue(entries[0].is_expanded)
        self.assertFalse(entries[3].has_children)

    def test_collapsed_node_hides_children(self) -> None:
        tree = _sample_tree()
        entries = flatten(tree, ExpansionSet({"root"}))

        self.assertEqual(_layout(entries), [("A", 0), ("B", 0)])
        self.assertTrue(entries[0].has_children)
        self.assertFalse(entries[0].is_expanded)

    def test_hidden_root_counts_as_expanded(self) -> None:
        entries = flatten(_sample_tree(), ExpansionSet())
        self.assertEqual(_layout(entries), [("A", 0), ("B", 0)])

    def test_show_root_emits_root_at_depth_zero(self) -> None:
        entries = flatten(_sample_tree(), ExpansionSet({"root", "A"}), show_root=True)

        self.assertEqual(
            _layout(entries),
            [("root", 0), ("A", 1), ("A1", 2), ("A2", 2), ("B", 1)],
        )
        self.assertIsNone(entries[0].parent)

    def test_shown_root_collapsed_emits_only_root(self) -> None:
        entries = flatten(_sample_tree(), ExpansionSet(), show_root=True)
        self.assertEqual(_layout(entries), [("root", 0)])

    def test_no_duplicates_and_child_depth_follows_parent(self) -> None:
        tree = MemoryTree.from_mapping({"A": {"A1": {"A1a": {}, "A1b": {}}, "A2": {}}, "B": {"B1": {}}})
        expansion = ExpansionSet()
        expansion.expand_all(tree)
        entries = flatten(tree, expansion)

        ids = [entry.id for entry in entries]
        self.assertEqual(len(ids), len(set(ids)))
        depth_by_id = {entry.id: entry.depth for entry in entries}
        for entry in entries:
            if entry.parent in depth_by_id:
                self.assertEqual(entry.depth, depth_by_id[entry.parent] + 1)

    def test_tail_stack_flags_last_sibling_per_level(self) -> None:
        entries = flatten(_sample_tree(), ExpansionSet({"root", "A"}))
        by_id = {entry.id: entry for entry in entries}

        self.assertEqual(by_id["A"].tail_stack, ())
        self.assertEqual(by_id["A1"].tail_stack, (False,))
        self.assertEqual(by_id["A2"].tail_stack, (True,))

    def test_marks_are_flagged_on_rows(self) -> None:
        entries = flatten(_sample_tree(), ExpansionSet({"root"}), marks={"B"})
        self.assertEqual([entry.marked for entry in entries], [False, True])

    def test_parent_with_all_children_marked_is_effectively_marked(self) -> None:
        entries = flatten(_sample_tree(), ExpansionSet({"root", "A"}), marks={"A1", "A2"})
        by_id = {entry.id: entry for entry in entries}

        self.assertFalse(by_id["A"].marked)
        self.assertTrue(by_id["A"].effectively_marked)
        self.assertTrue(by_id["A1"].effectively_marked)
        self.assertFalse(by_id["B"].effectively_marked)

    def test_partially_marked_children_do_not_mark_parent(self) -> None:
        entries = flatten(_sample_tree(), ExpansionSet({"root", "A"}), marks={"A1"})
        self.assertEqual(
            [entry.id for entry in entries if entry.effectively_marked],
            ["A1"],
        )

    def test_empty_tree_flattens_to_empty_list(self) -> None:
        tree = _sample_tree()
        tree.delete_subtree("root")
        self.assertEqual(flatten(tree, ExpansionSet()), [])

    def test_collapse_then_expand_is_identity(self) -> None:
        tree = _sample_tree()
        expansion = ExpansionSet({"root", "A"})
        before = flatten(tree, expansion)

        expansion.collapse("A")
        expansion.expand("A")

        self.assertEqual(flatten(tree, expansion), before)


class FlattenFilterTests(unittest.TestCase):
    def test_ancestor_of_match_is_kept_even_when_collapsed(self) -> None:
        tree = _sample_tree()
        engine = FilterEngine(tree, FilterConfig(pattern="A1"))
        entries = flatten(tree, ExpansionSet({"root"}), engine)

        self.assertEqual(_layout(entries), [("A", 0), ("A1", 1)])
        self.assertFalse(entries[0].matched)
        self.assertTrue(entries[0].is_expanded)
        self.assertTrue(entries[1].matched)

    def test_strict_mode_keeps_collapsed_ancestor_closed(self) -> None:
        tree = _sample_tree()
        engine = FilterEngine(tree, FilterConfig(pattern="A1", auto_expand=False))
        entries = flatten(tree, ExpansionSet({"root"}), engine)

        self.assertEqual(_layout(entries), [("A", 0)])
        self.assertTrue(entries[0].has_children)
        self.assertFalse(entries[0].is_expanded)

    def test_strict_mode_descends_into_expanded_ancestor(self) -> None:
        tree = _sample_tree()
        engine = FilterEngine(tree, FilterConfig(pattern="A1", auto_expand=False))
        entries = flatten(tree, ExpansionSet({"root", "A"}), engine)
        self.assertEqual(_layout(entries), [("A", 0), ("A1", 1)])

    def test_empty_pattern_reproduces_unfiltered_list(self) -> None:
        tree = _sample_tree()
        expansion = ExpansionSet({"root", "A"})
        engine = FilterEngine(tree, FilterConfig(pattern=""))
        self.assertEqual(flatten(tree, expansion, engine), flatten(tree, expansion))

    def test_no_match_yields_empty_list(self) -> None:
        tree = _sample_tree()
        engine = FilterEngine(tree, FilterConfig(pattern="zzz"))
        self.assertEqual(flatten(tree, ExpansionSet({"root", "A"}), engine), [])

    def test_matching_parent_shows_only_matching_children(self) -> None:
        tree = MemoryTree.from_mapping({"docs": {"docs-api": {}, "guide": {}}, "src": {}})
        engine = FilterEngine(tree, FilterConfig(pattern="docs"))
        entries = flatten(tree, ExpansionSet({"root", "docs"}), engine)
        self.assertEqual(_layout(entries), [("docs", 0), ("docs-api", 1)])


class FlattenDepthTests(unittest.TestCase):
    def test_deep_expanded_chain_is_flattened(self) -> None:
        tree, _ = _chain(2000)
        expansion = ExpansionSet()
        expansion.expand_all(tree)

        entries = flatten(tree, expansion)

        self.assertEqual(len(entries), 2000)
        self.assertEqual(entries[-1].depth, 1999)
        self.assertEqual(entries[-1].tail_stack, (True,) * 1999)

    def test_deep_chain_with_filter_and_marks(self) -> None:
        tree, deepest = _chain(2000)
        engine = FilterEngine(tree, FilterConfig(pattern="n1999"))

        entries = flatten(tree, ExpansionSet(), engine, marks={deepest})

        self.assertEqual(len(entries), 2000)
        self.assertTrue(entries[-1].matched)
        self.assertTrue(all(entry.effectively_marked for entry in entries))


class FlattenContractViolationTests(unittest.TestCase):
    def test_cycle_raises_structural_inconsistency(self) -> None:
        tree = _DictTree({"r": ["a"], "a": ["b"], "b": ["a"]})
        with self.assertRaises(StructuralInconsistencyError):
            flatten(tree, ExpansionSet({"r", "a", "b"}))

    def test_cycle_is_detected_by_filter_pass_even_when_collapsed(self) -> None:
        tree = _DictTree({"r": ["a"], "a": ["b"], "b": ["a"]})
        engine = FilterEngine(tree, FilterConfig(pattern="b"))
        with self.assertRaises(StructuralInconsistencyError):
            flatten(tree, ExpansionSet(), engine)

    def test_shared_child_raises_structural_inconsistency(self) -> None:
        tree = _DictTree({"r": ["a", "b"], "a": ["c"], "b": ["c"], "c": []})
        with self.assertRaises(StructuralInconsistencyError):
            flatten(tree, ExpansionSet({"a", "b"}))

    def test_dangling_child_raises_structural_inconsistency(self) -> None:
        tree = _DictTree({"r": ["a"], "a": ["ghost"]})
        with self.assertRaises(StructuralInconsistencyError):
            flatten(tree, ExpansionSet())


if __name__ == "__main__":
    unittest.main()
