"""
Tests for the command line front end.
"""

import os
import tempfile
import unittest

from burnpath.main import build_parser, main

SQUARE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="20" height="20">'
    '<rect x="0" y="0" width="10" height="10"/></svg>'
)


class TestCommandLine(unittest.TestCase):
    """Test running the converter end to end."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def path(self, name):
        return os.path.join(self.tmpdir.name, name)

    def test_defaults(self):
        """Test the default document and flip settings."""
        args = build_parser().parse_args(["a.svg"])
        self.assertEqual((args.width, args.height), (400.0, 400.0))
        self.assertTrue(args.flip_y)

    def test_svg_to_gcode(self):
        """Test converting an SVG writes a program."""
        source = self.path("square.svg")
        with open(source, "w", encoding="utf-8") as f:
            f.write(SQUARE_SVG)
        output = self.path("square.gcode")

        self.assertEqual(main([source, "-o", output, "--width", "20", "--height", "20"]), 0)
        with open(output, encoding="utf-8") as f:
            gcode = f.read()
        self.assertIn("M3 ; Enable laser", gcode)
        # Y-down drawing coordinates are flipped about the document height
        self.assertIn("G0 Y20.000", gcode)

    def test_missing_file(self):
        """Test a missing input fails with exit code 1."""
        self.assertEqual(main([self.path("missing.svg"), "-o", self.path("out.gcode")]), 1)

    def test_nothing_to_burn(self):
        """Test an input with nothing to emit fails with exit code 1."""
        source = self.path("empty.svg")
        with open(source, "w", encoding="utf-8") as f:
            f.write('<svg xmlns="http://www.w3.org/2000/svg"></svg>')
        self.assertEqual(main([source, "-o", self.path("out.gcode")]), 1)


if __name__ == '__main__':
    unittest.main()
