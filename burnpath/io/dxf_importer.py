"""
DXF Importer for BurnPath

Reads CAD interchange files with ezdxf and converts the modelspace
entities into polyline shape records.

DXF drawings are Y-up; records use the editor's Y-down convention, so
every point is mirrored about the vertical centre of the drawing extents.
"""

import io
import warnings
from typing import List, Optional, Tuple
import logging

import ezdxf
from ezdxf.lldxf.const import DXFError, DXFStructureError

from ..core.geometry import Point
from ..core.records import DEFAULT_STROKE_WIDTH, Polyline, group_records
from ..core.sampling import FULL_CIRCLE_SEGMENTS, sample_arc, sample_bspline, sample_circle
from ..errors import (
    DegenerateGeometryError, EmptyResultError, ParseError, UnsupportedEntityWarning
)

logger = logging.getLogger(__name__)

# AutoCAD Color Index -> CSS colour for the standard colours
ACI_COLORS = {
    1: "#ff0000",
    2: "#ffff00",
    3: "#00ff00",
    4: "#00ffff",
    5: "#0000ff",
    6: "#ff00ff",
    7: "#ffffff",
}
DEFAULT_DXF_COLOR = "#ffffff"


def aci_to_css(color_index: Optional[int]) -> str:
    """Map an ACI colour number to a CSS colour (white when unknown)."""
    return ACI_COLORS.get(color_index, DEFAULT_DXF_COLOR)


def section_names(text: str) -> List[str]:
    """Names of the top-level sections in raw DXF text, in file order."""
    lines = [line.strip() for line in text.splitlines()]
    names = []
    for i in range(len(lines) - 3):
        if lines[i] == '0' and lines[i + 1] == 'SECTION' and lines[i + 2] == '2':
            names.append(lines[i + 3].upper())
    return names


class DXFImporter:
    """Convert DXF modelspace entities to shape records."""

    def __init__(self, circle_segments: int = FULL_CIRCLE_SEGMENTS):
        self.circle_segments = circle_segments
        self.skipped: List[str] = []

    def import_string(self, text: str) -> list:
        """
        Parse DXF text.

        Raises:
            ParseError: if ezdxf cannot read the document or it has no
                entity table.
            EmptyResultError: if no supported entity produced a shape.
        """
        try:
            doc = ezdxf.read(io.StringIO(text))
        except (DXFStructureError, DXFError, ValueError) as e:
            raise ParseError(f"Malformed DXF: {e}") from e
        # ezdxf quietly supplies an empty modelspace when the table is absent
        if 'ENTITIES' not in section_names(text):
            raise ParseError("DXF document has no ENTITIES section")

        self.skipped = []
        shapes: List[Tuple[List[Point], bool, str]] = []
        for entity in doc.modelspace():
            try:
                converted = self._convert_entity(entity)
            except DegenerateGeometryError as e:
                logger.debug(f"Skipping degenerate {entity.dxftype()}: {e}")
                continue
            if converted is None:
                continue
            points, closed = converted
            if len(points) >= 2:
                shapes.append((points, closed, aci_to_css(entity.dxf.get('color'))))

        if self.skipped:
            logger.info(f"Skipped unsupported DXF entities: {', '.join(sorted(set(self.skipped)))}")

        if not shapes:
            raise EmptyResultError("DXF document contains no supported entities")

        min_y = min(p.y for points, _, _ in shapes for p in points)
        max_y = max(p.y for points, _, _ in shapes for p in points)
        flip = min_y + max_y

        records = [
            Polyline(
                points=tuple(Point(p.x, flip - p.y) for p in points),
                closed=closed,
                stroke_color=color,
                stroke_width=DEFAULT_STROKE_WIDTH,
            )
            for points, closed, color in shapes
        ]
        records = group_records(records)
        if not records:
            raise EmptyResultError("DXF document contains only degenerate entities")
        logger.info(f"Imported {len(shapes)} entities from DXF")
        return records

    def _convert_entity(self, entity) -> Optional[Tuple[List[Point], bool]]:
        """Sample one entity in DXF coordinates; None for unsupported kinds."""
        kind = entity.dxftype()

        if kind == 'LINE':
            start, end = entity.dxf.start, entity.dxf.end
            return [Point(start.x, start.y), Point(end.x, end.y)], False

        if kind == 'LWPOLYLINE':
            points = [Point(x, y) for x, y in entity.get_points('xy')]
            if entity.closed and points and points[0] != points[-1]:
                points.append(points[0])
            return points, bool(entity.closed)

        if kind == 'POLYLINE' and not (entity.is_3d_polyline or entity.is_poly_face_mesh
                                       or entity.is_polygon_mesh):
            points = [Point(v[0], v[1]) for v in entity.points()]
            if entity.is_closed and points and points[0] != points[-1]:
                points.append(points[0])
            return points, bool(entity.is_closed)

        if kind == 'CIRCLE':
            center = entity.dxf.center
            return sample_circle(Point(center.x, center.y), entity.dxf.radius,
                                 self.circle_segments), True

        if kind == 'ARC':
            center = entity.dxf.center
            # DXF arcs always run counter-clockwise from start to end
            sweep = (entity.dxf.end_angle - entity.dxf.start_angle) % 360.0
            if sweep == 0:
                sweep = 360.0
            return sample_arc(Point(center.x, center.y), entity.dxf.radius,
                              entity.dxf.start_angle, sweep), False

        if kind == 'SPLINE':
            control = list(entity.control_points)
            if len(control) < 2:
                control = list(entity.fit_points)
            points = sample_bspline([Point(p[0], p[1]) for p in control])
            return points, bool(entity.closed)

        self.skipped.append(kind)
        warnings.warn(f"DXF entity {kind} is not supported and was skipped",
                      UnsupportedEntityWarning, stacklevel=3)
        logger.warning(f"Skipping unsupported DXF entity {kind}")
        return None


def import_cad_interchange(text: str) -> list:
    """Import DXF text as shape records."""
    return DXFImporter().import_string(text)
