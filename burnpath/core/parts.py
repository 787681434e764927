"""
BurnPath Parametric Parts

Outline generation for the built-in parametric parts. Outlines are
returned in part-local coordinates: the part centre is (0, 0) and no
rotation is applied. Callers place them with the part's transform.
"""

from enum import Enum
from typing import Dict, List, Mapping
import math

from .geometry import Point
from .sampling import sample_arc, sample_circle


class PartType(Enum):
    """Built-in parametric part kinds."""
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    LINE = "line"
    POLYLINE = "polyline"
    ARC = "arc"
    SECTOR = "sector"
    EQUILATERAL_TRIANGLE = "equilateral_triangle"
    ISOSCELES_RIGHT_TRIANGLE = "isosceles_right_triangle"
    L_BRACKET = "l_bracket"
    U_CHANNEL = "u_channel"
    FLANGE = "flange"
    TORUS = "torus"
    CIRCLE_WITH_HOLES = "circle_with_holes"
    RECTANGLE_WITH_HOLES = "rectangle_with_holes"


DEFAULT_PARAMETERS: Dict[PartType, Dict[str, float]] = {
    PartType.RECTANGLE: {"width": 100, "height": 60},
    PartType.CIRCLE: {"radius": 40},
    PartType.LINE: {"length": 100},
    PartType.POLYLINE: {"seg1": 40, "seg2": 50, "angle": 135, "seg3": 40},
    PartType.ARC: {"radius": 50, "startAngle": 0, "sweepAngle": 120},
    PartType.SECTOR: {"radius": 50, "startAngle": -90, "sweepAngle": 90},
    PartType.EQUILATERAL_TRIANGLE: {"sideLength": 80},
    PartType.ISOSCELES_RIGHT_TRIANGLE: {"cathetus": 50},
    PartType.L_BRACKET: {"width": 80, "height": 80, "thickness": 15},
    PartType.U_CHANNEL: {"width": 80, "height": 100, "thickness": 10},
    PartType.FLANGE: {
        "outerDiameter": 120,
        "innerDiameter": 60,
        "boltCircleDiameter": 90,
        "boltHoleCount": 4,
        "boltHoleDiameter": 8,
    },
    PartType.TORUS: {"outerRadius": 60, "innerRadius": 30},
    PartType.CIRCLE_WITH_HOLES: {"radius": 80, "holeRadius": 8, "holeCount": 4},
    PartType.RECTANGLE_WITH_HOLES: {
        "width": 120,
        "height": 80,
        "holeRadius": 8,
        "horizontalMargin": 20,
        "verticalMargin": 20,
    },
}

# Bolt/hole circle of CIRCLE_WITH_HOLES as a fraction of the radius
HOLE_CIRCLE_RATIO = 0.7


def resolve_parameters(part_type: PartType,
                       parameters: Mapping[str, float]) -> Dict[str, float]:
    """Fill in defaults for any parameter the part does not set."""
    resolved = dict(DEFAULT_PARAMETERS[part_type])
    resolved.update(parameters)
    return resolved


def _closed(points: List[Point]) -> List[Point]:
    return points + [points[0]]


def _rectangle(width: float, height: float) -> List[Point]:
    w2 = width / 2
    h2 = height / 2
    return _closed([Point(-w2, -h2), Point(w2, -h2), Point(w2, h2), Point(-w2, h2)])


def part_outlines(part_type: PartType,
                  parameters: Mapping[str, float]) -> List[List[Point]]:
    """
    Generate the cut outlines of a parametric part.

    Args:
        part_type: Kind of part
        parameters: Part parameters; missing values use the defaults

    Returns:
        List of polylines in part-local coordinates. Closed outlines repeat
        their first point at the end.
    """
    p = resolve_parameters(part_type, parameters)
    origin = Point(0, 0)

    if part_type == PartType.RECTANGLE:
        return [_rectangle(p["width"], p["height"])]

    if part_type == PartType.CIRCLE:
        return [sample_circle(origin, p["radius"])]

    if part_type == PartType.LINE:
        l2 = p["length"] / 2
        return [[Point(-l2, 0), Point(l2, 0)]]

    if part_type == PartType.POLYLINE:
        # Middle segment is centred on the origin and tilted by `angle`
        bend = math.radians(p["angle"] + 180)
        hx = p["seg2"] * math.cos(bend) / 2
        hy = p["seg2"] * math.sin(bend) / 2
        return [[
            Point(-p["seg1"] - hx, -hy),
            Point(-hx, -hy),
            origin,
            Point(hx, hy),
            Point(p["seg3"] + hx, hy),
        ]]

    if part_type == PartType.ARC:
        return [sample_arc(origin, p["radius"], p["startAngle"], p["sweepAngle"])]

    if part_type == PartType.SECTOR:
        arc = sample_arc(origin, p["radius"], p["startAngle"], p["sweepAngle"])
        return [[origin] + arc + [origin]]

    if part_type == PartType.EQUILATERAL_TRIANGLE:
        side = p["sideLength"]
        h = side * math.sqrt(3) / 2
        return [_closed([Point(-side / 2, -h / 3), Point(side / 2, -h / 3),
                         Point(0, 2 * h / 3)])]

    if part_type == PartType.ISOSCELES_RIGHT_TRIANGLE:
        c2 = p["cathetus"] / 2
        return [_closed([Point(-c2, c2), Point(c2, c2), Point(-c2, -c2)])]

    if part_type == PartType.L_BRACKET:
        w2, h2, t = p["width"] / 2, p["height"] / 2, p["thickness"]
        return [_closed([
            Point(-w2, -h2), Point(w2, -h2), Point(w2, -h2 + t),
            Point(-w2 + t, -h2 + t), Point(-w2 + t, h2), Point(-w2, h2),
        ])]

    if part_type == PartType.U_CHANNEL:
        w2, h2, t = p["width"] / 2, p["height"] / 2, p["thickness"]
        return [_closed([
            Point(-w2, -h2), Point(w2, -h2), Point(w2, h2),
            Point(w2 - t, h2), Point(w2 - t, -h2 + t),
            Point(-w2 + t, -h2 + t), Point(-w2 + t, h2), Point(-w2, h2),
        ])]

    if part_type == PartType.FLANGE:
        outlines = [sample_circle(origin, p["innerDiameter"] / 2)]
        count = int(p["boltHoleCount"])
        bolt_radius = p["boltCircleDiameter"] / 2
        for i in range(count):
            # First hole at the top
            angle = i / count * 2 * math.pi - math.pi / 2
            centre = Point(bolt_radius * math.cos(angle), bolt_radius * math.sin(angle))
            outlines.append(sample_circle(centre, p["boltHoleDiameter"] / 2))
        outlines.append(sample_circle(origin, p["outerDiameter"] / 2))
        return outlines

    if part_type == PartType.TORUS:
        return [sample_circle(origin, p["innerRadius"]),
                sample_circle(origin, p["outerRadius"])]

    if part_type == PartType.CIRCLE_WITH_HOLES:
        outlines = [sample_circle(origin, p["radius"])]
        count = int(p["holeCount"])
        hole_circle = p["radius"] * HOLE_CIRCLE_RATIO
        for i in range(count):
            angle = i / count * 2 * math.pi
            centre = Point(hole_circle * math.cos(angle), hole_circle * math.sin(angle))
            outlines.append(sample_circle(centre, p["holeRadius"]))
        return outlines

    if part_type == PartType.RECTANGLE_WITH_HOLES:
        w2, h2 = p["width"] / 2, p["height"] / 2
        mx, my = p["horizontalMargin"], p["verticalMargin"]
        outlines = [_rectangle(p["width"], p["height"])]
        for cx, cy in ((-w2 + mx, h2 - my), (w2 - mx, h2 - my),
                       (w2 - mx, -h2 + my), (-w2 + mx, -h2 + my)):
            outlines.append(sample_circle(Point(cx, cy), p["holeRadius"]))
        return outlines

    raise ValueError(f"Unknown part type: {part_type}")
