from __future__ import annotations

import unittest

from treelistview.tree_model.types import VisibleNode
from treelistview.view.scroll import ScrollController, ScrollPolicy
from treelistview.view.selection import SelectionController


def _rows(*ids: str) -> list[VisibleNode]:
    return [VisibleNode(node_id, 0, "root") for node_id in ids]


class SelectionControllerTests(unittest.TestCase):
    def test_starts_empty_and_first_move_selects_top(self) -> None:
        selection = SelectionController(_rows("a", "b"))
        self.assertIsNone(selection.selected_id)
        self.assertTrue(selection.move_next())
        self.assertEqual(selection.selected_id, "a")

    def test_moves_saturate_at_bounds(self) -> None:
        selection = SelectionController(_rows("a", "b", "c"))
        selection.move_last()
        self.assertFalse(selection.move_next())
        self.assertEqual(selection.selected_id, "c")

        selection.move_first()
        self.assertFalse(selection.move_prev())
        self.assertEqual(selection.selected_id, "a")

    def test_page_moves_clamp(self) -> None:
        selection = SelectionController(_rows("a", "b", "c", "d"))
        selection.move_page(10)
        self.assertEqual(selection.index, 3)
        selection.move_page(-2)
        self.assertEqual(selection.index, 1)
        selection.move_page(-10)
        self.assertEqual(selection.index, 0)

    def test_select_unknown_id_keeps_selection(self) -> None:
        selection = SelectionController(_rows("a", "b"))
        selection.select("b")
        self.assertFalse(selection.select("zzz"))
        self.assertEqual(selection.selected_id, "b")

    def test_rebase_keeps_same_id_at_new_index(self) -> None:
        selection = SelectionController(_rows("a", "b", "c"))
        selection.select("c")
        selection.rebase(_rows("c", "a"))
        self.assertEqual(selection.index, 0)
        self.assertEqual(selection.selected_id, "c")

    def test_rebase_falls_back_to_nearest_ancestor(self) -> None:
        entries = [
            VisibleNode("A", 0, "root", True, True),
            VisibleNode("A1", 1, "A", True, True),
            VisibleNode("A1a", 2, "A1"),
            VisibleNode("B", 0, "root"),
        ]
        selection = SelectionController(entries)
        selection.select("A1a")

        selection.rebase([VisibleNode("A", 0, "root", True, False), VisibleNode("B", 0, "root")])

        self.assertEqual(selection.selected_id, "A")

    def test_rebase_falls_back_to_clamped_index(self) -> None:
        selection = SelectionController(_rows("a", "b", "c"))
        selection.select("c")
        selection.rebase(_rows("x", "y"))
        self.assertEqual(selection.selected_id, "y")

    def test_rebase_to_empty_list_clears_selection(self) -> None:
        selection = SelectionController(_rows("a"))
        selection.move_first()
        selection.rebase([])
        self.assertIsNone(selection.index)
        self.assertIsNone(selection.selected_entry)

    def test_rebase_without_selection_stays_empty(self) -> None:
        selection = SelectionController(_rows("a"))
        selection.rebase(_rows("a", "b"))
        self.assertIsNone(selection.selected_id)


class ScrollControllerTests(unittest.TestCase):
    def test_keep_in_view_moves_by_minimal_amount(self) -> None:
        scroll = ScrollController(height=3)

        self.assertTrue(scroll.follow(5, 10))
        self.assertEqual(scroll.offset, 3)
        self.assertFalse(scroll.follow(4, 10))
        self.assertEqual(scroll.offset, 3)
        self.assertTrue(scroll.follow(1, 10))
        self.assertEqual(scroll.offset, 1)

    def test_resize_rechecks_selection(self) -> None:
        scroll = ScrollController(height=4)
        scroll.follow(3, 10)
        self.assertEqual(scroll.offset, 0)

        self.assertTrue(scroll.resize(2, 3, 10))
        self.assertEqual(scroll.offset, 2)

    def test_height_below_one_is_treated_as_one(self) -> None:
        scroll = ScrollController(height=0)
        self.assertEqual(scroll.height, 1)
        scroll.follow(4, 10)
        self.assertEqual(scroll.offset, 4)

    def test_empty_list_resets_offset(self) -> None:
        scroll = ScrollController(height=2)
        scroll.follow(7, 10)
        scroll.follow(None, 0)
        self.assertEqual(scroll.offset, 0)

    def test_center_policy_clamps_to_list_bounds(self) -> None:
        scroll = ScrollController(height=5, policy=ScrollPolicy.CENTER)

        scroll.follow(7, 20)
        self.assertEqual(scroll.offset, 5)
        scroll.follow(19, 20)
        self.assertEqual(scroll.offset, 15)
        scroll.follow(1, 20)
        self.assertEqual(scroll.offset, 0)
        scroll.follow(3, 4)
        self.assertEqual(scroll.offset, 0)

    def test_visible_range_is_cut_at_list_end(self) -> None:
        scroll = ScrollController(height=5)
        scroll.offset = 3
        self.assertEqual(list(scroll.visible_range(6)), [3, 4, 5])


if __name__ == "__main__":
    unittest.main()
