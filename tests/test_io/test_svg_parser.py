"""
Tests for SVG import.
"""

import unittest

from burnpath.core.geometry import Point
from burnpath.core.records import Group, Polyline
from burnpath.errors import EmptyResultError, ParseError
from burnpath.io.svg_parser import SVGParser, import_vector_markup


def svg(body, attrs=''):
    return f'<svg xmlns="http://www.w3.org/2000/svg" {attrs}>{body}</svg>'


class TestSVGImport(unittest.TestCase):
    """Test importing SVG documents as shape records."""

    def test_single_filled_path(self):
        """Test one filled path gives one polyline and no group."""
        records = import_vector_markup(svg('<path d="M0 0 L10 0 L10 10 Z" fill="black"/>'))
        self.assertEqual(len(records), 1)
        record = records[0]
        self.assertIsInstance(record, Polyline)
        self.assertTrue(record.closed)
        self.assertEqual(record.points[0], record.points[-1])
        self.assertGreaterEqual(len(record.points), 129)
        self.assertEqual(record.fill_color, "black")

    def test_two_shapes_make_a_group(self):
        """Test two top-level shapes give one group with two children."""
        records = import_vector_markup(svg(
            '<rect x="0" y="0" width="10" height="10"/>'
            '<circle cx="50" cy="50" r="5"/>'))
        self.assertEqual(len(records), 1)
        self.assertIsInstance(records[0], Group)
        self.assertEqual(len(records[0].children), 2)

    def test_unfilled_path_is_dropped(self):
        """Test paths without a fill are treated as construction lines."""
        with self.assertRaises(EmptyResultError):
            import_vector_markup(svg('<path d="M0 0 L10 0" stroke="red"/>'))
        with self.assertRaises(EmptyResultError):
            import_vector_markup(svg('<path d="M0 0 L10 0" fill="none"/>'))

    def test_fill_inherited_from_group(self):
        """Test a path inside a filled group is imported."""
        records = import_vector_markup(svg('<g fill="#000"><path d="M0 0 L10 0 L5 5 Z"/></g>'))
        self.assertEqual(len(records), 1)

    def test_subpaths_become_separate_polylines(self):
        """Test each M starts a new polyline."""
        records = import_vector_markup(svg(
            '<path d="M0 0 L10 0 M0 20 L10 20" fill="black"/>'))
        self.assertIsInstance(records[0], Group)
        self.assertEqual(len(records[0].children), 2)

    def test_group_transform(self):
        """Test group transforms are applied to their children."""
        records = import_vector_markup(svg(
            '<g transform="translate(10,20)"><rect x="0" y="0" width="5" height="5"/></g>'))
        self.assertEqual(records[0].points[0], Point(10, 20))
        self.assertEqual(records[0].points[2], Point(15, 25))

    def test_nested_transforms_compose(self):
        """Test nested transforms apply the innermost first."""
        records = import_vector_markup(svg(
            '<g transform="translate(100,0)"><g transform="scale(2)">'
            '<line x1="1" y1="1" x2="2" y2="1"/></g></g>'))
        self.assertEqual(records[0].points, (Point(102, 2), Point(104, 2)))

    def test_viewbox_scale(self):
        """Test the document scale follows width / viewBox width."""
        records = import_vector_markup(svg(
            '<line x1="0" y1="0" x2="10" y2="5"/>',
            'width="200mm" height="100mm" viewBox="0 0 100 50"'))
        self.assertEqual(records[0].points[-1], Point(20, 10))

    def test_definitions_are_skipped(self):
        """Test shapes inside defs are not imported."""
        records = import_vector_markup(svg(
            '<defs><rect width="5" height="5"/></defs><line x1="0" y1="0" x2="1" y2="1"/>'))
        self.assertIsInstance(records[0], Polyline)
        self.assertFalse(records[0].closed)

    def test_default_stroke(self):
        """Test shapes without colours get the default stroke."""
        records = import_vector_markup(svg('<polyline points="0,0 10,0 10,10"/>'))
        self.assertEqual(records[0].stroke_color, "#2563eb")
        self.assertEqual(records[0].stroke_width, 2.0)

    def test_arc_path(self):
        """Test elliptical arc commands are flattened."""
        records = import_vector_markup(svg('<path d="M0 0 A 5 5 0 0 1 10 0 Z" fill="red"/>'))
        points = records[0].points
        self.assertTrue(any(abs(p.y) > 4 for p in points))
        self.assertAlmostEqual(points[0].x, 0)

    def test_compact_arc_flags(self):
        """Test arc flags written without separators match the spaced form."""
        compact = import_vector_markup(svg('<path d="M0 0 a5 5 0 0110 0" fill="red"/>'))
        spaced = import_vector_markup(svg('<path d="M0 0 a 5 5 0 0 1 10 0" fill="red"/>'))
        self.assertEqual(compact[0].points, spaced[0].points)
        self.assertTrue(any(abs(p.y) > 4 for p in compact[0].points))

    def test_invalid_arc_flag(self):
        """Test an arc flag other than 0 or 1 raises ParseError."""
        with self.assertRaises(ParseError):
            import_vector_markup(svg('<path d="M0 0 A 5 5 0 2 1 10 0" fill="red"/>'))

    def test_malformed_xml(self):
        """Test broken markup raises ParseError."""
        with self.assertRaises(ParseError):
            import_vector_markup('<svg><rect></svg>')

    def test_bad_number(self):
        """Test unparseable numeric attributes raise ParseError."""
        with self.assertRaises(ParseError):
            import_vector_markup(svg('<rect x="abc" width="5" height="5"/>'))

    def test_truncated_path_data(self):
        """Test a command with missing arguments raises ParseError."""
        with self.assertRaises(ParseError):
            import_vector_markup(svg('<path d="M 10" fill="black"/>'))

    def test_empty_document(self):
        """Test a document with nothing drawable is distinct from a parse error."""
        with self.assertRaises(EmptyResultError):
            import_vector_markup(svg(''))


class TestSVGParserHelpers(unittest.TestCase):
    """Test the parser's attribute helpers."""

    def setUp(self):
        self.parser = SVGParser()

    def test_parse_length_units(self):
        """Test units are stripped from lengths."""
        self.assertEqual(self.parser._parse_length("12.5mm"), 12.5)
        self.assertEqual(self.parser._parse_length("3px"), 3.0)

    def test_parse_points(self):
        """Test the points attribute parser."""
        self.assertEqual(self.parser._parse_points("0,0 1.5,-2"),
                         [Point(0, 0), Point(1.5, -2)])

    def test_parse_transform_list(self):
        """Test a transform list applies right to left."""
        t = self.parser._parse_transform("translate(10) rotate(90)")
        p = t.apply(Point(1, 0))
        self.assertAlmostEqual(p.x, 10)
        self.assertAlmostEqual(p.y, 1)

    def test_tokenize_compact_numbers(self):
        """Test tokens without separators."""
        self.assertEqual(self.parser._tokenize_path("M10-5L.5.5"),
                         ["M", "10", "-5", "L", ".5", ".5"])


if __name__ == '__main__':
    unittest.main()
