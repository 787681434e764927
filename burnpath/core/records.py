"""
BurnPath Shape Records

Canonical output of the format importers, and the normalization step that
merges multi-shape imports into a single group.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union
import logging

from .geometry import BoundingBox, Point, bounding_box

logger = logging.getLogger(__name__)

DEFAULT_STROKE_COLOR = "#2563eb"
DEFAULT_STROKE_WIDTH = 2.0


@dataclass(frozen=True)
class Polyline:
    """An imported open or closed polyline."""
    points: Tuple[Point, ...]
    closed: bool = False
    stroke_color: str = DEFAULT_STROKE_COLOR
    stroke_width: float = DEFAULT_STROKE_WIDTH
    fill_color: Optional[str] = None

    def bounds(self) -> BoundingBox:
        return bounding_box(self.points)


@dataclass(frozen=True)
class Group:
    """
    Several imported shapes kept together.

    Children are expressed relative to (origin_x, origin_y), the centre of
    the union bounding box of all children.
    """
    children: Tuple['ShapeRecord', ...]
    origin_x: float
    origin_y: float
    width: float
    height: float
    rotation: float = 0.0

    def bounds(self) -> BoundingBox:
        return BoundingBox(self.origin_x - self.width / 2,
                           self.origin_y - self.height / 2,
                           self.origin_x + self.width / 2,
                           self.origin_y + self.height / 2)


ShapeRecord = Union[Polyline, Group]


def _padded_bounds(record: ShapeRecord) -> BoundingBox:
    if isinstance(record, Polyline):
        return record.bounds().expanded(record.stroke_width / 2)
    return record.bounds()


def _shifted(record: ShapeRecord, dx: float, dy: float) -> ShapeRecord:
    """Translate a record by (dx, dy)."""
    if isinstance(record, Polyline):
        return Polyline(
            points=tuple(Point(p.x + dx, p.y + dy) for p in record.points),
            closed=record.closed,
            stroke_color=record.stroke_color,
            stroke_width=record.stroke_width,
            fill_color=record.fill_color,
        )
    return Group(
        children=record.children,
        origin_x=record.origin_x + dx,
        origin_y=record.origin_y + dy,
        width=record.width,
        height=record.height,
        rotation=record.rotation,
    )


def group_records(records: Sequence[ShapeRecord]) -> list:
    """
    Normalize an import result.

    Records whose box collapses to a single point are dropped. A single
    surviving record is returned unwrapped; two or more are merged into one
    Group whose origin is the centre of their union bounding box.
    """
    usable = []
    for record in records:
        if isinstance(record, Polyline) and (
                len(record.points) < 2 or record.bounds().is_point):
            logger.debug(f"Skipping degenerate polyline with {len(record.points)} points")
            continue
        usable.append(record)

    if len(usable) <= 1:
        return usable

    union = _padded_bounds(usable[0])
    for record in usable[1:]:
        union = union.union(_padded_bounds(record))
    origin = union.center

    # Group origins are already box centres, so every child is anchored by
    # its centre once shifted into the group frame.
    children = [_shifted(record, -origin.x, -origin.y) for record in usable]

    logger.debug(f"Grouped {len(children)} records around "
                 f"({origin.x:.3f}, {origin.y:.3f})")
    return [Group(
        children=tuple(children),
        origin_x=origin.x,
        origin_y=origin.y,
        width=union.width,
        height=union.height,
        rotation=0.0,
    )]
