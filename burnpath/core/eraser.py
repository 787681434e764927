"""
BurnPath Eraser

Trims drawing polylines against a circular eraser. Everything here is a
pure function from (polyline or scene, eraser position) to a new result;
the caller owns the pointer events and applies the returned scene.
"""

from typing import List, Optional, Sequence
import logging

from .geometry import (
    Point, circle_segment_intersection, closest_parameter, point_segment_distance
)
from .items import Drawing, drawing_from_points

logger = logging.getLogger(__name__)


def split_polyline(points: Sequence[Point], center: Point, radius: float,
                   tolerance: float = 0.5) -> List[List[Point]]:
    """
    Cut the parts of a polyline that lie inside the eraser circle.

    Each segment closer than ``radius`` to ``center`` is clipped at its
    crossings with the circle; the inside part is discarded and the
    polyline is split there.

    Args:
        points: Absolute polyline points
        center: Eraser position
        radius: Eraser radius
        tolerance: Crossing search tolerance

    Returns:
        The surviving sub-polylines, each with at least two points.
    """
    pieces: List[List[Point]] = []
    current: List[Point] = []

    def inside(p: Point) -> bool:
        return center.distance_to(p) < radius

    def finish() -> None:
        if len(current) >= 2:
            pieces.append(list(current))
        current.clear()

    for i, point in enumerate(points):
        if i == 0:
            if not inside(point):
                current.append(point)
            continue

        prev = points[i - 1]
        if point_segment_distance(center, prev, point) >= radius:
            current.append(point)
            continue

        prev_in = inside(prev)
        point_in = inside(point)
        if prev_in and point_in:
            continue

        if not prev_in and not point_in:
            # The segment passes through the circle: split at the closest
            # point, which is inside, and clip both halves.
            nearest = prev.lerp(point, closest_parameter(center, prev, point))
            entry = circle_segment_intersection(center, radius, prev, nearest, tolerance)
            exit_ = circle_segment_intersection(center, radius, nearest, point, tolerance)
            if entry is not None:
                current.append(entry)
            finish()
            if exit_ is not None:
                current.append(exit_)
            current.append(point)
        elif not prev_in:
            entry = circle_segment_intersection(center, radius, prev, point, tolerance)
            if entry is not None:
                current.append(entry)
            finish()
        else:
            exit_ = circle_segment_intersection(center, radius, prev, point, tolerance)
            if exit_ is not None:
                current.append(exit_)
            current.append(point)

    finish()
    return pieces


def erase_drawing(drawing: Drawing, center: Point, radius: float,
                  tolerance: float = 0.5) -> Optional[List[Drawing]]:
    """
    Erase around ``center`` from one drawing.

    Returns:
        None when the eraser does not touch the drawing, otherwise the
        replacement drawings (possibly empty). Each replacement is re-centred
        on its own bounding box and takes the style and layer of the original.
    """
    world = drawing.transform.apply_all(drawing.points)
    if len(world) < 2:
        return None
    touched = any(point_segment_distance(center, world[i], world[i + 1]) < radius
                  for i in range(len(world) - 1))
    if not touched:
        return None

    pieces = split_polyline(world, center, radius, tolerance)
    return [
        drawing_from_points(
            piece,
            layer_id=drawing.layer_id,
            color=drawing.color,
            stroke_width=drawing.stroke_width,
            fill_color=drawing.fill_color,
        )
        for piece in pieces
    ]


def erase(scene, center: Point, radius: float, tolerance: float = 0.5):
    """
    Apply one eraser step to every visible drawing of a scene.

    Returns:
        A new Scene; the input scene is returned unchanged when nothing
        was touched.
    """
    visible_layers = {layer.id for layer in scene.layers if layer.is_visible}
    result = scene
    for item in scene.items:
        if not isinstance(item, Drawing) or item.layer_id not in visible_layers:
            continue
        replacements = erase_drawing(item, center, radius, tolerance)
        if replacements is None:
            continue
        logger.debug(f"Eraser split drawing {item.id} into {len(replacements)} pieces")
        result = result.replace_item(item.id, replacements)
    return result
