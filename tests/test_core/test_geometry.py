"""
Tests for the geometry kernel.

Covers affine transform composition, bounding boxes and the
point/segment/circle helpers used by the eraser.
"""

import unittest
import math
import random

from burnpath.core.geometry import (
    IDENTITY, BoundingBox, Point, Transform, bounding_box,
    circle_segment_intersection, compose, placement, point_segment_distance,
    rotation, scaling, translation
)


class TestTransform(unittest.TestCase):
    """Test Transform composition and application."""

    def assertPointAlmostEqual(self, actual, expected, places=7):
        self.assertAlmostEqual(actual.x, expected.x, places=places)
        self.assertAlmostEqual(actual.y, expected.y, places=places)

    def test_identity(self):
        """Test the identity leaves points unchanged."""
        self.assertEqual(IDENTITY.apply(Point(3, -4)), Point(3, -4))

    def test_compose_applies_right_operand_first(self):
        """Test compose(a, b) scales before translating when b is the scale."""
        t = compose(translation(10, 0), scaling(2))
        self.assertPointAlmostEqual(t.apply(Point(1, 1)), Point(12, 2))

    def test_compose_with_identity(self):
        """Test composing with the identity returns an equal transform."""
        t = Transform(1, 2, 3, 4, 5, 6)
        self.assertEqual(compose(IDENTITY, t), t)
        self.assertEqual(compose(t, IDENTITY), t)

    def test_rotation_quarter_turn(self):
        """Test a 90 degree rotation maps +X onto +Y."""
        self.assertPointAlmostEqual(rotation(90).apply(Point(1, 0)), Point(0, 1))

    def test_rotation_about_center(self):
        """Test rotation about a point other than the origin."""
        t = rotation(90, 10, 10)
        self.assertPointAlmostEqual(t.apply(Point(11, 10)), Point(10, 11))
        self.assertPointAlmostEqual(t.apply(Point(10, 10)), Point(10, 10))

    def test_placement(self):
        """Test placement rotates about the local origin, then translates."""
        t = placement(100, 50, 90)
        self.assertPointAlmostEqual(t.apply(Point(10, 0)), Point(100, 60))

    def test_scale_factors(self):
        """Test scale factors of a rotated non-uniform scale."""
        sx, sy = compose(rotation(30), scaling(2, 3)).scale_factors
        self.assertAlmostEqual(sx, 2)
        self.assertAlmostEqual(sy, 3)


class TestBoundingBox(unittest.TestCase):
    """Test bounding box computation."""

    def test_contains_every_point(self):
        """Test every contributing point lies inside its box."""
        rng = random.Random(42)
        for _ in range(50):
            points = [Point(rng.uniform(-100, 100), rng.uniform(-100, 100))
                      for _ in range(rng.randint(1, 30))]
            box = bounding_box(points)
            for p in points:
                self.assertTrue(box.min_x <= p.x <= box.max_x)
                self.assertTrue(box.min_y <= p.y <= box.max_y)
                self.assertTrue(box.contains(p))

    def test_empty_raises(self):
        """Test the box of no points is an error."""
        with self.assertRaises(ValueError):
            bounding_box([])

    def test_single_point_box(self):
        """Test a single point gives a point box."""
        box = bounding_box([Point(2, 3)])
        self.assertTrue(box.is_point)
        self.assertEqual(box.width, 0)

    def test_union_and_center(self):
        """Test union and centre of two boxes."""
        box = BoundingBox(0, 0, 10, 10).union(BoundingBox(20, -10, 30, 0))
        self.assertEqual(box, BoundingBox(0, -10, 30, 10))
        self.assertEqual(box.center, Point(15, 0))


class TestSegmentHelpers(unittest.TestCase):
    """Test distance and intersection helpers."""

    def test_distance_to_segment_interior(self):
        """Test distance to the interior of a segment."""
        self.assertAlmostEqual(
            point_segment_distance(Point(5, 5), Point(0, 0), Point(10, 0)), 5)

    def test_distance_beyond_segment_end(self):
        """Test distance is measured to the nearest end point."""
        self.assertAlmostEqual(
            point_segment_distance(Point(15, 0), Point(0, 0), Point(10, 0)), 5)

    def test_distance_to_degenerate_segment(self):
        """Test a zero-length segment falls back to point distance."""
        self.assertAlmostEqual(
            point_segment_distance(Point(3, 4), Point(0, 0), Point(0, 0)), 5)

    def test_intersection_is_never_inside(self):
        """Test the crossing lies on or just outside the circle."""
        hit = circle_segment_intersection(Point(0, 0), 10, Point(0, 0), Point(20, 0))
        self.assertIsNotNone(hit)
        self.assertGreaterEqual(hit.x, 10)
        self.assertLess(hit.x, 10.5)
        self.assertEqual(hit.y, 0)

    def test_intersection_from_outside(self):
        """Test a segment entering the circle from outside."""
        hit = circle_segment_intersection(Point(0, 0), 10, Point(-20, 3), Point(0, 3))
        self.assertIsNotNone(hit)
        distance = math.hypot(hit.x, hit.y)
        self.assertGreaterEqual(distance, 10)
        self.assertLess(distance, 10.5)

    def test_no_intersection_when_same_side(self):
        """Test None when both ends are on the same side of the circle."""
        self.assertIsNone(circle_segment_intersection(
            Point(0, 0), 10, Point(20, 0), Point(30, 0)))
        self.assertIsNone(circle_segment_intersection(
            Point(0, 0), 10, Point(1, 0), Point(2, 0)))


if __name__ == '__main__':
    unittest.main()
