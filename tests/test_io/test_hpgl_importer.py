"""
Tests for HPGL import.
"""

import unittest

from burnpath.core.geometry import Point
from burnpath.core.records import Group, Polyline
from burnpath.errors import EmptyResultError, ParseError
from burnpath.io.hpgl_importer import import_plotter_commands, parse_commands, trace_pen


class TestParseCommands(unittest.TestCase):
    """Test extracting pen commands."""

    def test_commands_and_pairs(self):
        """Test commands are upper-cased and coordinates paired."""
        commands = parse_commands("in;sp1;pu0,0;pd10,0,10,10;")
        self.assertEqual(commands, [
            ('PU', [Point(0, 0)]),
            ('PD', [Point(10, 0), Point(10, 10)]),
        ])

    def test_bad_coordinate(self):
        """Test non-numeric coordinates raise ParseError."""
        with self.assertRaises(ParseError):
            parse_commands("PU0,0;PDa,b;")


class TestPlotterImport(unittest.TestCase):
    """Test replaying pen commands into polylines."""

    def test_single_stroke(self):
        """Test a pen-down run becomes one polyline starting at the pen position."""
        records = import_plotter_commands("PU0,0;PD10,0,10,10;PU;")
        self.assertEqual(len(records), 1)
        self.assertIsInstance(records[0], Polyline)
        self.assertEqual(records[0].points, (Point(0, 0), Point(10, 0), Point(10, 10)))

    def test_absolute_moves_while_down(self):
        """Test PA extends the stroke only while the pen is down."""
        strokes = trace_pen(parse_commands("PA5,5;PD;PA6,5,6,6;PU;PA9,9;"))
        self.assertEqual(strokes, [[Point(5, 5), Point(6, 5), Point(6, 6)]])

    def test_two_strokes_make_a_group(self):
        """Test separate strokes are grouped."""
        records = import_plotter_commands("PU0,0;PD10,0;PU0,10;PD10,10;PU;")
        self.assertIsInstance(records[0], Group)
        self.assertEqual(len(records[0].children), 2)

    def test_no_pen_down(self):
        """Test files without strokes are an empty result."""
        with self.assertRaises(EmptyResultError):
            import_plotter_commands("IN;PU10,10;PU20,20;")


if __name__ == '__main__':
    unittest.main()
