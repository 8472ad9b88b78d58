from __future__ import annotations

import unittest

from makepdf.pipeline.geometry import Align, Bounds, Point, Space, inner_bounds, outer_bounds


class SpaceTests(unittest.TestCase):
    def test_single_value_applies_to_all_sides(self) -> None:
        self.assertEqual(Space.from_value(2), Space(2, 2, 2, 2))
        self.assertEqual(Space.from_value([2]), Space(2, 2, 2, 2))

    def test_two_values_are_vertical_then_horizontal(self) -> None:
        self.assertEqual(Space.from_value([1, 2]), Space(top=1, right=2, bottom=1, left=2))

    def test_three_values_share_horizontal(self) -> None:
        self.assertEqual(Space.from_value([1, 2, 3]), Space(top=1, right=2, bottom=3, left=2))

    def test_four_values_go_clockwise_from_top(self) -> None:
        self.assertEqual(Space.from_value([1, 2, 3, 4]), Space(top=1, right=2, bottom=3, left=4))

    def test_named_sides_default_to_zero(self) -> None:
        self.assertEqual(Space.from_value({"left": 3}), Space(left=3))
        self.assertEqual(Space.from_value(None), Space())

    def test_rejects_bool_and_long_lists(self) -> None:
        with self.assertRaises(TypeError):
            Space.from_value(True)
        with self.assertRaises(TypeError):
            Space.from_value([1, 2, 3, 4, 5])


class BoundsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.rect = Bounds.from_coords(0, 0, 100, 50)

    def test_inner_width_subtracts_margin_and_padding(self) -> None:
        margin = Space(top=1, right=2, bottom=3, left=4)
        padding = Space(top=5, right=6, bottom=7, left=8)
        inner = inner_bounds(outer_bounds(self.rect, margin), padding)
        self.assertAlmostEqual(inner.width(), 100 - 4 - 2 - 8 - 6)
        self.assertAlmostEqual(inner.height(), 50 - 1 - 3 - 5 - 7)

    def test_measurement_clamps_but_raw_does_not(self) -> None:
        inverted = self.rect.with_padding(60)
        self.assertEqual(inverted.width(), 0.0)
        self.assertEqual(inverted.height(), 0.0)
        self.assertLess(inverted.raw_width, 0)

    def test_align_to_corners_and_centre(self) -> None:
        small = Bounds.from_coords(0, 0, 10, 10)
        top_right = small.align_to(self.rect, {"v": "top", "h": "right"})
        self.assertEqual(top_right.to_coords(), (90, 40, 100, 50))

        centred = small.align_to(self.rect, Align())
        self.assertEqual(centred.center(), self.rect.center())
        self.assertEqual(centred.raw_width, 10)

    def test_transforms_return_new_values(self) -> None:
        moved = self.rect.move_to(x=5, y=6)
        self.assertEqual(moved.ll, Point(5, 6))
        self.assertEqual(self.rect.ll, Point(0, 0))
        self.assertEqual(self.rect.shift_by(y=2).to_coords(), (0, 2, 100, 52))
        self.assertEqual(self.rect.scale_by_factor(width=0.5).to_coords(), (0, 0, 50, 50))
        self.assertEqual(self.rect.scale_to(height=10).to_coords(), (0, 0, 100, 10))

    def test_union_and_enclosing(self) -> None:
        other = Bounds.from_coords(-5, 10, 20, 80)
        self.assertEqual(self.rect.union(other).to_coords(), (-5, 0, 100, 80))
        points = [Point(3, 4), Point(-1, 9), Point(2, -2)]
        self.assertEqual(Bounds.enclosing(points).to_coords(), (-1, -2, 3, 9))

    def test_from_value_forms(self) -> None:
        expected = Bounds.from_coords(1, 2, 3, 4)
        self.assertEqual(Bounds.from_value([1, 2, 3, 4]), expected)
        self.assertEqual(Bounds.from_value([[1, 2], [3, 4]]), expected)
        self.assertEqual(Bounds.from_value({"llx": 1, "lly": 2, "urx": 3, "ury": 4}), expected)
        self.assertEqual(Bounds.from_value({"ll": {"x": 1, "y": 2}, "ur": [3, 4]}), expected)


if __name__ == "__main__":
    unittest.main()
