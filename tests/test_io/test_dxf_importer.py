"""
Tests for DXF import.
"""

import io
import unittest
import warnings

import ezdxf

from burnpath.core.geometry import Point
from burnpath.core.records import Group, Polyline
from burnpath.errors import EmptyResultError, ParseError, UnsupportedEntityWarning
from burnpath.io.dxf_importer import (
    DXFImporter, aci_to_css, import_cad_interchange, section_names
)


def dxf_text(build):
    """Build a DXF document with ezdxf and return it as text."""
    doc = ezdxf.new()
    build(doc.modelspace())
    stream = io.StringIO()
    doc.write(stream)
    return stream.getvalue()


class TestDXFImport(unittest.TestCase):
    """Test converting DXF entities to shape records."""

    def test_line(self):
        """Test a LINE becomes a two point polyline, mirrored to Y-down."""
        text = dxf_text(lambda msp: msp.add_line((0, 0), (5, 5)))
        records = import_cad_interchange(text)
        self.assertEqual(len(records), 1)
        self.assertIsInstance(records[0], Polyline)
        self.assertEqual(records[0].points, (Point(0, 5), Point(5, 0)))
        self.assertFalse(records[0].closed)

    def test_circle(self):
        """Test circles are sampled as closed 64 segment polylines."""
        text = dxf_text(lambda msp: msp.add_circle((10, 10), 5))
        [record] = import_cad_interchange(text)
        self.assertEqual(len(record.points), 65)
        self.assertTrue(record.closed)

    def test_closed_lwpolyline(self):
        """Test a closed lightweight polyline repeats its first vertex."""
        text = dxf_text(lambda msp: msp.add_lwpolyline([(0, 0), (10, 0), (10, 10)], close=True))
        [record] = import_cad_interchange(text)
        self.assertEqual(len(record.points), 4)
        self.assertEqual(record.points[0], record.points[-1])
        self.assertTrue(record.closed)

    def test_arc(self):
        """Test arcs run counter-clockwise from start to end angle."""
        text = dxf_text(lambda msp: msp.add_arc((0, 0), 10, 0, 90))
        [record] = import_cad_interchange(text)
        self.assertEqual(len(record.points), 17)
        ys = [p.y for p in record.points]
        self.assertAlmostEqual(max(ys) - min(ys), 10)

    def test_spline_fit_points(self):
        """Test splines defined only by fit points are still sampled."""
        text = dxf_text(lambda msp: msp.add_spline([(0, 0), (5, 5), (10, 0)]))
        [record] = import_cad_interchange(text)
        self.assertGreater(len(record.points), 2)

    def test_color_index(self):
        """Test ACI colours map to CSS colours."""
        text = dxf_text(lambda msp: msp.add_line((0, 0), (5, 0), dxfattribs={"color": 1}))
        [record] = import_cad_interchange(text)
        self.assertEqual(record.stroke_color, "#ff0000")

    def test_several_entities_make_a_group(self):
        """Test several entities are merged into one group."""
        def build(msp):
            msp.add_line((0, 0), (5, 0))
            msp.add_circle((20, 20), 2)
        records = import_cad_interchange(dxf_text(build))
        self.assertIsInstance(records[0], Group)
        self.assertEqual(len(records[0].children), 2)

    def test_unsupported_entity_warns(self):
        """Test unsupported entities are skipped with a warning."""
        def build(msp):
            msp.add_line((0, 0), (5, 0))
            msp.add_point((1, 1))
        importer = DXFImporter()
        with self.assertWarns(UnsupportedEntityWarning):
            records = importer.import_string(dxf_text(build))
        self.assertEqual(len(records), 1)
        self.assertEqual(importer.skipped, ['POINT'])

    def test_only_unsupported_entities(self):
        """Test a document with nothing importable is an empty result."""
        text = dxf_text(lambda msp: msp.add_point((1, 1)))
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UnsupportedEntityWarning)
            with self.assertRaises(EmptyResultError):
                import_cad_interchange(text)

    def test_malformed_document(self):
        """Test text that is not DXF raises ParseError."""
        with self.assertRaises(ParseError):
            import_cad_interchange("hello\nworld\n")

    def test_missing_entities_section(self):
        """Test a document without an entity table raises ParseError."""
        text = "0\nSECTION\n2\nHEADER\n0\nENDSEC\n0\nEOF\n"
        self.assertEqual(section_names(text), ['HEADER'])
        with self.assertRaises(ParseError):
            import_cad_interchange(text)


class TestColors(unittest.TestCase):
    """Test the ACI palette."""

    def test_unknown_index_is_white(self):
        """Test unknown and missing colours fall back to white."""
        self.assertEqual(aci_to_css(None), "#ffffff")
        self.assertEqual(aci_to_css(256), "#ffffff")
        self.assertEqual(aci_to_css(5), "#0000ff")


if __name__ == '__main__':
    unittest.main()
