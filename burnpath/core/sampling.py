"""
BurnPath Curve Sampler

Flattens arcs, ellipses, bezier paths and spline control polygons into
ordered point lists. Sampling is deterministic for a given input and step
count.
"""

from typing import List, Optional, Sequence
import math

from .geometry import Point, Transform
from ..errors import DegenerateGeometryError

# Segments used for a full circle; partial arcs keep the same angular step.
FULL_CIRCLE_SEGMENTS = 64

# Minimum number of arc-length steps for a sampled path.
MIN_PATH_SAMPLES = 128

# Minimum number of de Casteljau steps for a spline.
MIN_SPLINE_STEPS = 64
SPLINE_STEPS_PER_CONTROL_POINT = 8


def sample_arc(center: Point, radius: float, start_angle: float,
               sweep_angle: float, segments: Optional[int] = None) -> List[Point]:
    """
    Sample a circular arc.

    Args:
        center: Arc centre
        radius: Arc radius (must be > 0)
        start_angle: Start angle in degrees, measured from +X towards +Y
        sweep_angle: Signed sweep in degrees
        segments: Number of chords; defaults to the 360/64 degree step

    Returns:
        ``segments + 1`` points, both ends included.
    """
    if radius <= 0 or sweep_angle == 0:
        raise DegenerateGeometryError(
            f"arc with radius {radius} and sweep {sweep_angle}")
    if segments is None:
        step = 360.0 / FULL_CIRCLE_SEGMENTS
        segments = max(1, math.ceil(abs(sweep_angle) / step - 1e-9))

    start = math.radians(start_angle)
    sweep = math.radians(sweep_angle)
    points = []
    for i in range(segments + 1):
        angle = start + sweep * i / segments
        points.append(Point(center.x + radius * math.cos(angle),
                            center.y + radius * math.sin(angle)))
    return points


def sample_circle(center: Point, radius: float,
                  segments: int = FULL_CIRCLE_SEGMENTS) -> List[Point]:
    """Closed ring starting at the 3 o'clock position."""
    return sample_arc(center, radius, 0.0, 360.0, segments)


def sample_ellipse(center: Point, rx: float, ry: float,
                   segments: int = FULL_CIRCLE_SEGMENTS) -> List[Point]:
    """Closed ring of ``segments + 1`` points (last equals first)."""
    if rx <= 0 or ry <= 0:
        raise DegenerateGeometryError(f"ellipse with radii {rx}, {ry}")
    points = []
    for i in range(segments + 1):
        angle = 2 * math.pi * (i % segments) / segments
        points.append(Point(center.x + rx * math.cos(angle),
                            center.y + ry * math.sin(angle)))
    return points


def polyline_length(points: Sequence[Point]) -> float:
    return sum(points[i].distance_to(points[i + 1])
               for i in range(len(points) - 1))


def resample_by_length(points: Sequence[Point],
                       transform: Optional[Transform] = None) -> List[Point]:
    """
    Resample a densely flattened path at equal arc-length steps.

    The step count is ``max(floor(length), 128)`` so every millimetre of
    path gets at least one sample. Each sample is mapped through
    ``transform`` when one is given.
    """
    length = polyline_length(points)
    if length == 0:
        raise DegenerateGeometryError("path has zero length")

    steps = max(math.floor(length), MIN_PATH_SAMPLES)
    result = []
    segment = 0
    walked = 0.0  # length of the path before points[segment]
    seg_len = points[0].distance_to(points[1])
    for i in range(steps + 1):
        target = length * i / steps
        while (segment < len(points) - 2 and walked + seg_len < target):
            walked += seg_len
            segment += 1
            seg_len = points[segment].distance_to(points[segment + 1])
        if seg_len == 0:
            sample = points[segment]
        else:
            t = min(1.0, max(0.0, (target - walked) / seg_len))
            sample = points[segment].lerp(points[segment + 1], t)
        if transform is not None:
            sample = transform.apply(sample)
        result.append(sample)
    return result


def flatten_cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point,
                         tolerance: float = 0.01) -> List[Point]:
    """
    Flatten a cubic bezier curve to line segments using recursive subdivision.

    Uses the de Casteljau algorithm with flatness test.
    """
    def is_flat(p0: Point, p1: Point, p2: Point, p3: Point, tol: float) -> bool:
        # Distance from control points to line p0-p3
        ux = 3*p1.x - 2*p0.x - p3.x
        uy = 3*p1.y - 2*p0.y - p3.y
        vx = 3*p2.x - 2*p3.x - p0.x
        vy = 3*p2.y - 2*p3.y - p0.y
        return max(ux*ux, vx*vx) + max(uy*uy, vy*vy) <= 16 * tol * tol

    def subdivide(p0: Point, p1: Point, p2: Point, p3: Point,
                  tol: float, points: List[Point], depth: int) -> None:
        if depth >= 16 or is_flat(p0, p1, p2, p3, tol):
            points.append(p3)
        else:
            q0 = p0.lerp(p1, 0.5)
            q1 = p1.lerp(p2, 0.5)
            q2 = p2.lerp(p3, 0.5)
            r0 = q0.lerp(q1, 0.5)
            r1 = q1.lerp(q2, 0.5)
            s = r0.lerp(r1, 0.5)

            subdivide(p0, q0, r0, s, tol, points, depth + 1)
            subdivide(s, r1, q2, p3, tol, points, depth + 1)

    points = [p0]
    subdivide(p0, p1, p2, p3, tolerance, points, 0)
    return points


def flatten_quadratic_bezier(p0: Point, p1: Point, p2: Point,
                             tolerance: float = 0.01) -> List[Point]:
    """Flatten a quadratic bezier curve to line segments."""
    # Degree elevation to the equivalent cubic
    cp1 = Point(p0.x + 2/3 * (p1.x - p0.x), p0.y + 2/3 * (p1.y - p0.y))
    cp2 = Point(p2.x + 2/3 * (p1.x - p2.x), p2.y + 2/3 * (p1.y - p2.y))
    return flatten_cubic_bezier(p0, cp1, cp2, p2, tolerance)


def de_casteljau(control_points: Sequence[Point], t: float) -> Point:
    """Evaluate the curve defined by ``control_points`` at parameter ``t``."""
    work = list(control_points)
    while len(work) > 1:
        work = [work[i].lerp(work[i + 1], t) for i in range(len(work) - 1)]
    return work[0]


def sample_bspline(control_points: Sequence[Point],
                   steps: Optional[int] = None) -> List[Point]:
    """
    Flatten a spline control polygon by repeated linear interpolation.

    Uses ``max(len(control_points) * 8, 64)`` steps unless ``steps`` is
    given, and returns ``steps + 1`` points.
    """
    if len(control_points) < 2:
        raise DegenerateGeometryError(
            f"spline with {len(control_points)} control points")
    if polyline_length(control_points) == 0:
        raise DegenerateGeometryError("spline control polygon has zero length")
    if steps is None:
        steps = max(len(control_points) * SPLINE_STEPS_PER_CONTROL_POINT,
                    MIN_SPLINE_STEPS)
    return [de_casteljau(control_points, i / steps) for i in range(steps + 1)]
