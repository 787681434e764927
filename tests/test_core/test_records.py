"""
Tests for shape records, their grouping, and conversion to canvas items.
"""

import unittest

from burnpath.core.geometry import Point
from burnpath.core.items import Drawing, GroupObject, items_from_records, world_polylines
from burnpath.core.records import Group, Polyline, group_records


def line(*coords, width=2.0):
    return Polyline(points=tuple(Point(x, y) for x, y in coords), stroke_width=width)


class TestGroupRecords(unittest.TestCase):
    """Test import normalization."""

    def test_single_record_is_unwrapped(self):
        """Test one record is returned without a group."""
        record = line((0, 0), (10, 0))
        self.assertEqual(group_records([record]), [record])

    def test_two_records_make_one_group(self):
        """Test two records merge into a group centred on their padded union."""
        result = group_records([line((0, 0), (10, 0)), line((0, 10), (10, 10))])
        self.assertEqual(len(result), 1)
        group = result[0]
        self.assertIsInstance(group, Group)
        self.assertEqual(len(group.children), 2)
        self.assertAlmostEqual(group.origin_x, 5)
        self.assertAlmostEqual(group.origin_y, 5)
        # Padded by half the stroke width on every side
        self.assertAlmostEqual(group.width, 12)
        self.assertAlmostEqual(group.height, 12)
        self.assertEqual(group.children[0].points, (Point(-5, -5), Point(5, -5)))

    def test_point_records_are_dropped(self):
        """Test records collapsing to a single point are skipped."""
        result = group_records([line((3, 3), (3, 3)), line((0, 0), (1, 1))])
        self.assertEqual(len(result), 1)
        self.assertIsInstance(result[0], Polyline)

    def test_nothing_usable(self):
        """Test only degenerate records give an empty result."""
        self.assertEqual(group_records([line((3, 3), (3, 3))]), [])


class TestItemsFromRecords(unittest.TestCase):
    """Test record to item conversion."""

    def test_polyline_becomes_centred_drawing(self):
        """Test a polyline becomes a drawing anchored at its box centre."""
        [item] = items_from_records([line((0, 0), (10, 0), (10, 10))])
        self.assertIsInstance(item, Drawing)
        self.assertEqual((item.x, item.y), (5, 5))
        self.assertEqual(item.points[0], Point(-5, -5))
        self.assertEqual(world_polylines(item),
                         [[Point(0, 0), Point(10, 0), Point(10, 10)]])

    def test_closed_polyline_is_closed_in_drawing(self):
        """Test closed records repeat their first point."""
        record = Polyline(points=(Point(0, 0), Point(4, 0), Point(4, 4)), closed=True)
        [item] = items_from_records([record])
        self.assertEqual(item.points[0], item.points[-1])

    def test_group_world_coordinates(self):
        """Test group children map back to their original positions."""
        records = group_records([line((0, 0), (10, 0)), line((0, 10), (10, 10))])
        [item] = items_from_records(records)
        self.assertIsInstance(item, GroupObject)
        paths = world_polylines(item)
        self.assertEqual(len(paths), 2)
        self.assertAlmostEqual(paths[1][0].x, 0)
        self.assertAlmostEqual(paths[1][0].y, 10)
        self.assertAlmostEqual(paths[1][1].x, 10)

    def test_items_get_fresh_identities(self):
        """Test converting the same records twice gives new ids."""
        records = [line((0, 0), (10, 0))]
        first = items_from_records(records)[0]
        second = items_from_records(records)[0]
        self.assertNotEqual(first.id, second.id)


if __name__ == '__main__':
    unittest.main()
