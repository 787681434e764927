"""
Tests for parametric part outlines.
"""

import unittest

from burnpath.core.geometry import Point, bounding_box
from burnpath.core.parts import DEFAULT_PARAMETERS, PartType, part_outlines


class TestPartOutlines(unittest.TestCase):
    """Test outline generation."""

    def test_rectangle(self):
        """Test a rectangle is one closed outline of five points."""
        [outline] = part_outlines(PartType.RECTANGLE, {"width": 20, "height": 10})
        self.assertEqual(len(outline), 5)
        self.assertEqual(outline[0], outline[-1])
        self.assertEqual(outline[0], Point(-10, -5))

    def test_defaults_fill_missing_parameters(self):
        """Test unset parameters take their defaults."""
        [outline] = part_outlines(PartType.RECTANGLE, {"width": 20})
        box = bounding_box(outline)
        self.assertEqual(box.height, DEFAULT_PARAMETERS[PartType.RECTANGLE]["height"])

    def test_every_type_has_outlines(self):
        """Test every part type produces at least one outline centred near the origin."""
        for part_type in PartType:
            outlines = part_outlines(part_type, {})
            self.assertGreater(len(outlines), 0, part_type)
            for outline in outlines:
                self.assertGreaterEqual(len(outline), 2, part_type)

    def test_flange_holes(self):
        """Test a flange has the inner bore, the bolt holes and the rim."""
        outlines = part_outlines(PartType.FLANGE, {"boltHoleCount": 6})
        self.assertEqual(len(outlines), 8)
        rim = bounding_box(outlines[-1])
        self.assertAlmostEqual(rim.width, 120)

    def test_line_is_centred(self):
        """Test a line part is centred on the origin."""
        [outline] = part_outlines(PartType.LINE, {"length": 30})
        self.assertEqual(outline, [Point(-15, 0), Point(15, 0)])


if __name__ == '__main__':
    unittest.main()
