"""
BurnPath Core Module

Contains the core data structures:
- Geometry: points, bounding boxes, affine transforms
- Sampling: arc, path and spline flattening
- Records: shapes produced by the importers
- Items: parts, drawings, text, images and groups
- Layer / Scene: the immutable scene model
- Eraser: polyline trimming against a circular tool
"""

from .geometry import (
    Point, BoundingBox, Transform, IDENTITY,
    compose, apply, bounding_box,
    point_segment_distance, circle_segment_intersection
)
from .records import Polyline, Group, ShapeRecord, group_records
from .parts import PartType, part_outlines
from .layer import Layer, PrintingMethod
from .items import (
    Part, Drawing, TextObject, ImageObject, GroupObject, CanvasItem,
    printing_method_for, items_from_records, world_polylines
)
from .scene import Scene
from .eraser import split_polyline, erase_drawing, erase

__all__ = [
    'Point', 'BoundingBox', 'Transform', 'IDENTITY',
    'compose', 'apply', 'bounding_box',
    'point_segment_distance', 'circle_segment_intersection',
    'Polyline', 'Group', 'ShapeRecord', 'group_records',
    'PartType', 'part_outlines',
    'Layer', 'PrintingMethod',
    'Part', 'Drawing', 'TextObject', 'ImageObject', 'GroupObject', 'CanvasItem',
    'printing_method_for', 'items_from_records', 'world_polylines',
    'Scene',
    'split_polyline', 'erase_drawing', 'erase',
]
