"""
Tests for bitmap import.
"""

import io
import os
import tempfile
import unittest

from PIL import Image

from burnpath.core.items import ImageObject
from burnpath.errors import ParseError
from burnpath.io import import_file
from burnpath.io.image_importer import MAX_IMAGE_DIMENSION, ImageImporter


def encoded(image, fmt='PNG'):
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


class TestImageImporter(unittest.TestCase):
    """Test image loading and sizing."""

    def test_size_from_dpi(self):
        """Test physical size follows the configured DPI."""
        data = encoded(Image.new('RGB', (100, 50), (0, 0, 0)))
        item = ImageImporter(dpi=254.0).import_image(data, x=20, y=30)
        self.assertIsInstance(item, ImageObject)
        self.assertAlmostEqual(item.width, 10.0)
        self.assertAlmostEqual(item.height, 5.0)
        self.assertEqual((item.x, item.y), (20, 30))

    def test_max_size_limits(self):
        """Test max_size_mm shrinks but never enlarges."""
        data = encoded(Image.new('RGB', (100, 50)))
        item = ImageImporter(dpi=254.0, max_size_mm=(5, 5)).import_image(data)
        self.assertAlmostEqual(item.width, 5.0)
        self.assertAlmostEqual(item.height, 2.5)
        item = ImageImporter(dpi=254.0, max_size_mm=(500, 500)).import_image(data)
        self.assertAlmostEqual(item.width, 10.0)

    def test_transparency_is_white(self):
        """Test transparent pixels are flattened onto white."""
        data = encoded(Image.new('RGBA', (4, 4), (0, 0, 0, 0)))
        img = ImageImporter().load(data)
        self.assertEqual(img.mode, 'RGB')
        self.assertEqual(img.getpixel((0, 0)), (255, 255, 255))

    def test_large_images_downscaled(self):
        """Test bitmaps larger than the limit are downscaled."""
        data = encoded(Image.new('L', (MAX_IMAGE_DIMENSION * 2, 10)))
        img = ImageImporter().load(data)
        self.assertEqual(img.size[0], MAX_IMAGE_DIMENSION)

    def test_unreadable_data(self):
        """Test undecodable bytes raise ParseError."""
        with self.assertRaises(ParseError):
            ImageImporter().load(b"definitely not an image")


class TestImportFile(unittest.TestCase):
    """Test dispatch by file extension."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, name, data):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, 'wb') as f:
            f.write(data)
        return path

    def test_bitmap(self):
        """Test bitmaps import as a single ImageObject."""
        path = self.write('photo.png', encoded(Image.new('RGB', (10, 10))))
        result = import_file(path)
        self.assertEqual(len(result), 1)
        self.assertIsInstance(result[0], ImageObject)

    def test_plotter_file(self):
        """Test .plt files go through the HPGL importer."""
        path = self.write('job.plt', b"PU0,0;PD10,0;")
        self.assertEqual(len(import_file(path)), 1)

    def test_unknown_extension(self):
        """Test unknown extensions raise ParseError."""
        path = self.write('notes.txt', b"hello")
        with self.assertRaises(ParseError):
            import_file(path)


if __name__ == '__main__':
    unittest.main()
