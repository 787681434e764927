"""
HPGL Importer for BurnPath

Plotter files (.plt/.hpgl) are reduced to the pen commands PU, PD and PA.
Every pen-down run becomes one polyline.
"""

import re
from typing import List, Tuple
import logging

from ..core.geometry import Point
from ..core.records import Polyline, group_records
from ..errors import EmptyResultError, ParseError

logger = logging.getLogger(__name__)

COMMAND_PATTERN = re.compile(r'(PU|PD|PA)([^;]*);', re.IGNORECASE)


def parse_commands(text: str) -> List[Tuple[str, List[Point]]]:
    """
    Extract pen commands and their coordinate pairs.

    A trailing unpaired coordinate is ignored.

    Raises:
        ParseError: if a coordinate is not a number.
    """
    commands = []
    for match in COMMAND_PATTERN.finditer(text):
        values = [v.strip() for v in match.group(2).split(',') if v.strip()]
        try:
            numbers = [float(v) for v in values]
        except ValueError as e:
            raise ParseError(f"Invalid HPGL coordinate in {match.group(0)!r}") from e
        points = [Point(numbers[i], numbers[i + 1])
                  for i in range(0, len(numbers) - 1, 2)]
        commands.append((match.group(1).upper(), points))
    return commands


def trace_pen(commands: List[Tuple[str, List[Point]]]) -> List[List[Point]]:
    """Replay pen commands and collect the pen-down runs."""
    polylines: List[List[Point]] = []
    current: List[Point] = []
    position = Point(0.0, 0.0)
    pen_down = False

    def finish():
        nonlocal current
        if len(current) > 1:
            polylines.append(current)
        current = []

    for command, points in commands:
        if command == 'PU':
            finish()
            pen_down = False
            if points:
                position = points[-1]
        elif command == 'PD':
            finish()
            pen_down = True
            current.append(position)
            for point in points:
                position = point
                current.append(position)
        else:  # PA
            for point in points:
                position = point
                if pen_down:
                    current.append(position)

    finish()
    return polylines


def import_plotter_commands(text: str) -> list:
    """
    Import HPGL text as shape records.

    Raises:
        ParseError: on non-numeric coordinates.
        EmptyResultError: when no pen-down run has two or more points.
    """
    polylines = trace_pen(parse_commands(text))
    records = group_records([Polyline(points=tuple(points)) for points in polylines])
    if not records:
        raise EmptyResultError("HPGL data contains no pen-down strokes")
    logger.info(f"Imported {len(polylines)} strokes from HPGL")
    return records
