"""
BurnPath I/O Module

Importers turning SVG, DXF, HPGL and bitmap files into scene content.
"""

from pathlib import Path
from typing import Union
import logging

from .svg_parser import SVGParser, import_vector_markup
from .dxf_importer import DXFImporter, import_cad_interchange
from .hpgl_importer import import_plotter_commands
from .image_importer import ImageImporter
from ..errors import ParseError

logger = logging.getLogger(__name__)

VECTOR_IMPORTERS = {
    '.svg': import_vector_markup,
    '.dxf': import_cad_interchange,
    '.plt': import_plotter_commands,
    '.hpgl': import_plotter_commands,
}

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.bmp', '.gif', '.tif', '.tiff', '.webp')


def import_file(path: Union[str, Path]) -> list:
    """
    Import a file by extension.

    Vector formats return shape records; bitmaps return a one-element
    list holding an ImageObject.

    Raises:
        ParseError: for unknown extensions or undecodable content.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    data = path.read_bytes()
    logger.info(f"Importing {path.name}")

    if suffix in IMAGE_EXTENSIONS:
        return [ImageImporter().import_image(data)]

    importer = VECTOR_IMPORTERS.get(suffix)
    if importer is None:
        raise ParseError(f"Unsupported file type: {suffix or path.name}")
    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError:
        # Older DXF and PLT exports are often Latin-1
        text = data.decode('latin-1')
    return importer(text)


__all__ = [
    'SVGParser', 'import_vector_markup',
    'DXFImporter', 'import_cad_interchange',
    'import_plotter_commands',
    'ImageImporter',
    'import_file',
]
