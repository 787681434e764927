"""
BurnPath Geometry Kernel

Points, bounding boxes, 2x3 affine transforms and the distance and
intersection helpers used by the importers, the emitter and the eraser.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence
import math


@dataclass(frozen=True)
class Point:
    """A 2D point in millimetres."""
    x: float
    y: float

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def scaled(self, factor: float) -> 'Point':
        return Point(self.x * factor, self.y * factor)

    def distance_to(self, other: 'Point') -> float:
        """Calculate Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def lerp(self, other: 'Point', t: float) -> 'Point':
        """Linear interpolation towards ``other`` (t=0 is self, t=1 is other)."""
        return Point(self.x + (other.x - self.x) * t,
                     self.y + (other.y - self.y) * t)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point(
            (self.min_x + self.max_x) / 2,
            (self.min_y + self.max_y) / 2
        )

    @property
    def is_point(self) -> bool:
        """True when the box has neither width nor height."""
        return self.width == 0 and self.height == 0

    def contains(self, point: Point) -> bool:
        """Check if point is inside bounding box."""
        return (self.min_x <= point.x <= self.max_x and
                self.min_y <= point.y <= self.max_y)

    def expanded(self, margin: float) -> 'BoundingBox':
        """Grow the box by ``margin`` on every side."""
        return BoundingBox(self.min_x - margin, self.min_y - margin,
                           self.max_x + margin, self.max_y + margin)

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        return BoundingBox(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y)
        )


@dataclass(frozen=True)
class Transform:
    """
    2x3 affine matrix.

    Stored as (a, b, c, d, e, f) representing::

        [[a, c, e],
         [b, d, f],
         [0, 0, 1]]
    """
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    def apply(self, point: Point) -> Point:
        return apply(self, point)

    def apply_all(self, points: Iterable[Point]) -> list:
        return [apply(self, p) for p in points]

    @property
    def scale_factors(self) -> tuple:
        """Length scale along the transformed x and y axes."""
        return (math.hypot(self.a, self.b), math.hypot(self.c, self.d))


IDENTITY = Transform()


def compose(a: Transform, b: Transform) -> Transform:
    """
    Matrix product ``a * b``.

    The result applies ``b`` first and then ``a``, so a child element's
    transform composes as ``compose(parent, child)``.
    """
    return Transform(
        a.a * b.a + a.c * b.b,
        a.b * b.a + a.d * b.b,
        a.a * b.c + a.c * b.d,
        a.b * b.c + a.d * b.d,
        a.a * b.e + a.c * b.f + a.e,
        a.b * b.e + a.d * b.f + a.f
    )


def apply(t: Transform, p: Point) -> Point:
    """Transform a point: [[a, c, e], [b, d, f]] * [x, y, 1]."""
    return Point(t.a * p.x + t.c * p.y + t.e,
                 t.b * p.x + t.d * p.y + t.f)


def translation(tx: float, ty: float = 0.0) -> Transform:
    return Transform(1.0, 0.0, 0.0, 1.0, tx, ty)


def scaling(sx: float, sy: Optional[float] = None) -> Transform:
    if sy is None:
        sy = sx
    return Transform(sx, 0.0, 0.0, sy, 0.0, 0.0)


def rotation(degrees: float, cx: float = 0.0, cy: float = 0.0) -> Transform:
    """Rotation by ``degrees`` about (cx, cy). Positive is clockwise on a Y-down canvas."""
    angle = math.radians(degrees)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    rot = Transform(cos_a, sin_a, -sin_a, cos_a, 0.0, 0.0)
    if cx == 0 and cy == 0:
        return rot
    return compose(translation(cx, cy), compose(rot, translation(-cx, -cy)))


def skew_x(degrees: float) -> Transform:
    return Transform(1.0, 0.0, math.tan(math.radians(degrees)), 1.0, 0.0, 0.0)


def skew_y(degrees: float) -> Transform:
    return Transform(1.0, math.tan(math.radians(degrees)), 0.0, 1.0, 0.0, 0.0)


def placement(x: float, y: float, degrees: float = 0.0) -> Transform:
    """Local-to-parent transform of an item anchored at (x, y) and rotated about it."""
    if degrees == 0:
        return translation(x, y)
    return compose(translation(x, y), rotation(degrees))


def bounding_box(points: Sequence[Point]) -> BoundingBox:
    """
    Axis-aligned box around ``points``.

    Raises:
        ValueError: if ``points`` is empty.
    """
    if not points:
        raise ValueError("bounding box of an empty point sequence")
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


def closest_parameter(p: Point, a: Point, b: Point) -> float:
    """Projection parameter of ``p`` on segment ``ab``, clamped to [0, 1]."""
    dx = b.x - a.x
    dy = b.y - a.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return 0.0
    t = ((p.x - a.x) * dx + (p.y - a.y) * dy) / length_sq
    return max(0.0, min(1.0, t))


def point_segment_distance(p: Point, a: Point, b: Point) -> float:
    """
    Distance from ``p`` to the closest point of segment ``ab``.

    A zero-length segment falls back to the distance between ``p`` and ``a``.
    """
    if a == b:
        return p.distance_to(a)
    return p.distance_to(a.lerp(b, closest_parameter(p, a, b)))


def circle_segment_intersection(center: Point, radius: float,
                                a: Point, b: Point,
                                tolerance: float = 0.5,
                                max_iterations: int = 20) -> Optional[Point]:
    """
    Locate where segment ``ab`` crosses the circle (center, radius).

    Bisection over the segment parameter: the bracket always keeps one end
    inside the circle and the other outside. Stops when the midpoint lies
    within ``tolerance`` of the circle (on the outside) or after
    ``max_iterations`` halvings, returning the outside end of the bracket so
    the result never lies strictly inside the circle.

    Returns:
        The crossing point, or None when both ends are on the same side.
    """
    a_inside = center.distance_to(a) < radius
    b_inside = center.distance_to(b) < radius
    if a_inside == b_inside:
        return None

    # t_in always maps inside the circle, t_out outside
    t_in, t_out = (0.0, 1.0) if a_inside else (1.0, 0.0)
    for _ in range(max_iterations):
        mid = (t_in + t_out) / 2
        point = a.lerp(b, mid)
        d = center.distance_to(point)
        if d < radius:
            t_in = mid
        else:
            t_out = mid
            if d - radius < tolerance:
                return point
    return a.lerp(b, t_out)
