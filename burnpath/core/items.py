"""
BurnPath Canvas Items

The closed set of items a scene can hold, the routing table that assigns
each item kind its printing method, and conversion of imported shape
records into items.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from uuid import UUID, uuid4

from .geometry import (
    IDENTITY, Point, Transform, bounding_box, compose, placement
)
from .layer import PrintingMethod
from .parts import PartType, part_outlines
from .records import DEFAULT_STROKE_COLOR, DEFAULT_STROKE_WIDTH, Group, Polyline


@dataclass(frozen=True)
class _ItemBase:
    id: UUID = field(default_factory=uuid4)
    layer_id: Optional[UUID] = None

    @property
    def transform(self) -> Transform:
        """Local-to-parent placement: translate to (x, y), rotate about it."""
        return placement(self.x, self.y, self.rotation)


@dataclass(frozen=True)
class Part(_ItemBase):
    """A parametric part centred on (x, y)."""
    parametric_type: PartType = PartType.RECTANGLE
    parameters: Mapping[str, float] = field(default_factory=dict)
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0  # degrees


@dataclass(frozen=True)
class Drawing(_ItemBase):
    """A free-hand or imported polyline; points are relative to (x, y)."""
    points: Tuple[Point, ...] = ()
    x: float = 0.0
    y: float = 0.0
    color: str = DEFAULT_STROKE_COLOR
    stroke_width: float = DEFAULT_STROKE_WIDTH
    fill_color: Optional[str] = None
    rotation: float = 0.0


@dataclass(frozen=True)
class TextObject(_ItemBase):
    text: str = ""
    font_size: float = 24.0
    color: str = "#000000"
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0


@dataclass(frozen=True)
class ImageObject(_ItemBase):
    """
    A bitmap centred on (x, y) with a size in canvas units.

    ``pixel_source`` is a Pillow image. ``vector_source`` keeps the markup
    of images created from vector files.
    """
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    pixel_source: Any = field(default=None, compare=False, repr=False)
    rotation: float = 0.0
    vector_source: Optional[str] = field(default=None, repr=False)


@dataclass(frozen=True)
class GroupObject(_ItemBase):
    """Items kept together; children are positioned relative to (x, y)."""
    children: Tuple['CanvasItem', ...] = ()
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0


CanvasItem = Union[Part, Drawing, TextObject, ImageObject, GroupObject]

# Printing method of every item kind. Bitmaps are raster-only.
PRINTING_METHODS: Dict[type, PrintingMethod] = {
    Part: PrintingMethod.ENGRAVE,
    Drawing: PrintingMethod.ENGRAVE,
    TextObject: PrintingMethod.ENGRAVE,
    ImageObject: PrintingMethod.SCAN,
    GroupObject: PrintingMethod.ENGRAVE,
}


def printing_method_for(item: CanvasItem) -> PrintingMethod:
    """Look up the printing method an item is routed to."""
    try:
        return PRINTING_METHODS[type(item)]
    except KeyError:
        raise TypeError(f"Not a canvas item: {type(item).__name__}") from None


def world_polylines(item: CanvasItem, parent: Transform = IDENTITY) -> List[List[Point]]:
    """
    Cuttable polylines of an item in canvas coordinates.

    Text and images have no vector outline and yield nothing. Groups
    compose each child's placement with their own.
    """
    transform = compose(parent, item.transform)
    if isinstance(item, Drawing):
        if len(item.points) < 2:
            return []
        return [transform.apply_all(item.points)]
    if isinstance(item, Part):
        return [transform.apply_all(outline)
                for outline in part_outlines(item.parametric_type, item.parameters)]
    if isinstance(item, GroupObject):
        paths = []
        for child in item.children:
            paths.extend(world_polylines(child, transform))
        return paths
    return []


def drawing_from_points(points: Sequence[Point], **attributes) -> Drawing:
    """
    Build a drawing anchored at the centre of the points' bounding box.

    Args:
        points: Points in the parent frame (at least two)
        **attributes: Other Drawing fields (color, stroke_width, ...)
    """
    centre = bounding_box(points).center
    return Drawing(
        points=tuple(Point(p.x - centre.x, p.y - centre.y) for p in points),
        x=centre.x,
        y=centre.y,
        **attributes
    )


def _item_from_record(record) -> CanvasItem:
    if isinstance(record, Polyline):
        points = list(record.points)
        if record.closed and points[0] != points[-1]:
            points.append(points[0])
        return drawing_from_points(
            points,
            color=record.stroke_color,
            stroke_width=record.stroke_width,
            fill_color=record.fill_color,
        )
    if isinstance(record, Group):
        return GroupObject(
            children=tuple(_item_from_record(child) for child in record.children),
            x=record.origin_x,
            y=record.origin_y,
            width=record.width,
            height=record.height,
            rotation=record.rotation,
        )
    raise TypeError(f"Not a shape record: {type(record).__name__}")


def items_from_records(records: Sequence) -> List[CanvasItem]:
    """Convert shape records into fresh canvas items (no layer assigned)."""
    return [_item_from_record(record) for record in records]
