"""
Path Optimization for Laser Engraving

Reorders engrave paths to shorten laser-off travel, and measures
instruction lists for job time estimates.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.geometry import Point
from .instructions import Instruction


def optimize_paths(paths: Sequence[Sequence[Point]],
                   start_point: Optional[Point] = None) -> List[List[Point]]:
    """
    Optimize path order to minimize travel distance.

    Nearest-neighbour ordering; a path may also be walked backwards when
    its end is closer than its start.

    Args:
        paths: Paths to order
        start_point: Starting position (default: origin)

    Returns:
        Reordered paths (new lists; the input is untouched)
    """
    if start_point is None:
        start_point = Point(0, 0)

    remaining = [list(p) for p in paths if p]
    ordered = []
    current_pos = start_point

    while remaining:
        best_idx = 0
        best_dist = float('inf')
        best_reversed = False

        for idx, path in enumerate(remaining):
            dist_to_start = current_pos.distance_to(path[0])
            dist_to_end = current_pos.distance_to(path[-1])

            if dist_to_start < best_dist:
                best_dist = dist_to_start
                best_idx = idx
                best_reversed = False

            if dist_to_end < best_dist:
                best_dist = dist_to_end
                best_idx = idx
                best_reversed = True

        path = remaining.pop(best_idx)
        if best_reversed:
            path.reverse()
        ordered.append(path)
        current_pos = path[-1]

    return ordered


def calculate_total_distance(instructions: Iterable[Instruction],
                             start_point: Optional[Point] = None) -> Tuple[float, float]:
    """
    Calculate total burning and travel distances of an instruction list.

    Returns:
        Tuple of (cutting_distance, travel_distance) in mm
    """
    if start_point is None:
        start_point = Point(0, 0)

    cutting_dist = 0.0
    travel_dist = 0.0
    x, y = start_point.x, start_point.y

    for instruction in instructions:
        nx = x if instruction.x is None else instruction.x
        ny = y if instruction.y is None else instruction.y
        dist = Point(x, y).distance_to(Point(nx, ny))
        if instruction.effective_power > 0:
            cutting_dist += dist
        else:
            travel_dist += dist
        x, y = nx, ny

    return cutting_dist, travel_dist


def estimate_job_time(instructions: Iterable[Instruction],
                      default_feed: float = 1000.0,
                      start_point: Optional[Point] = None) -> float:
    """
    Estimate total job time in seconds.

    Each move runs at its own feed rate (mm/min); moves without one keep
    the previous feed, starting from ``default_feed``.
    """
    if start_point is None:
        start_point = Point(0, 0)

    total = 0.0
    feed = default_feed
    x, y = start_point.x, start_point.y

    for instruction in instructions:
        if instruction.feed_rate is not None:
            feed = instruction.feed_rate
        nx = x if instruction.x is None else instruction.x
        ny = y if instruction.y is None else instruction.y
        if feed > 0:
            total += Point(x, y).distance_to(Point(nx, ny)) / feed * 60.0
        x, y = nx, ny

    return total
