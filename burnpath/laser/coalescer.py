"""
Instruction Coalescer

Removes redundant motion from a lowered instruction list and serializes
what is left as G-code move lines.

Rules:
- power 0 moves become ``G0`` without an S word
- any other power becomes ``G1`` with its S word
- axes that did not change are omitted, F only when the feed changes
- moves to the current position are dropped
- consecutive moves with the same power and feed that continue in the
  same straight line are merged into one
"""

from typing import Iterable, List, Optional, Tuple
import math

from ..core.geometry import Point
from .instructions import Instruction, Op, PowerScale

# Cross product tolerance for collinear moves (mm^2)
COLLINEAR_TOLERANCE = 1e-9


def _collinear(a: Point, b: Point, c: Point) -> bool:
    """True if a -> b -> c continues in one direction without turning back."""
    abx, aby = b.x - a.x, b.y - a.y
    bcx, bcy = c.x - b.x, c.y - b.y
    cross = abx * bcy - aby * bcx
    scale = math.hypot(abx, aby) * math.hypot(bcx, bcy)
    if abs(cross) > COLLINEAR_TOLERANCE * max(1.0, scale):
        return False
    return abx * bcx + aby * bcy > 0


class InstructionCoalescer:
    """Coalesce and serialize instruction lists."""

    def __init__(self, power_scale: PowerScale = PowerScale.PERCENT,
                 precision: int = 3, start: Point = Point(0.0, 0.0)):
        self.power_scale = power_scale
        self.precision = precision
        self.start = start
        self._current_x: float = start.x
        self._current_y: float = start.y
        self._current_feed: Optional[float] = None

    def _round(self, value: float) -> float:
        return round(value, self.precision)

    def coalesce(self, instructions: Iterable[Instruction]) -> List[Instruction]:
        """
        Resolve missing axes, drop no-op moves and merge straight runs.

        Returns:
            New instructions, each with both axes set. Zero-power cuts are
            turned into rapids so the op always matches the power.
        """
        result: List[Instruction] = []
        starts: List[Point] = []  # where each kept move begins
        x, y = self._round(self.start.x), self._round(self.start.y)

        for instruction in instructions:
            nx = x if instruction.x is None else self._round(instruction.x)
            ny = y if instruction.y is None else self._round(instruction.y)
            if nx == x and ny == y:
                continue

            power = self.power_scale.clamp(instruction.effective_power)
            if power == 0:
                move = Instruction.rapid(nx, ny, instruction.feed_rate)
            else:
                move = Instruction.cut(nx, ny, power, instruction.feed_rate)

            if result:
                prev = result[-1]
                if (prev.op is move.op and prev.power == move.power
                        and prev.feed_rate == move.feed_rate
                        and _collinear(starts[-1], Point(x, y), Point(nx, ny))):
                    result[-1] = move
                    x, y = nx, ny
                    continue

            starts.append(Point(x, y))
            result.append(move)
            x, y = nx, ny

        return result

    def serialize(self, instructions: Iterable[Instruction]) -> List[str]:
        """
        Turn coalesced instructions into G-code lines.

        Tracks the machine position and feed across calls, so one
        coalescer can serialize consecutive layers of a program.
        """
        lines = []
        for instruction in instructions:
            power = self.power_scale.clamp(instruction.effective_power)
            cmd = "G0" if power == 0 else "G1"

            moved = False
            if instruction.x is not None and self._round(instruction.x) != self._round(self._current_x):
                cmd += f" X{instruction.x:.{self.precision}f}"
                self._current_x = instruction.x
                moved = True
            if instruction.y is not None and self._round(instruction.y) != self._round(self._current_y):
                cmd += f" Y{instruction.y:.{self.precision}f}"
                self._current_y = instruction.y
                moved = True
            if not moved:
                continue

            if power > 0:
                cmd += f" S{power}"
            if instruction.feed_rate is not None and instruction.feed_rate != self._current_feed:
                cmd += f" F{instruction.feed_rate:.0f}"
                self._current_feed = instruction.feed_rate
            lines.append(cmd)
        return lines

    def process(self, instructions: Iterable[Instruction]) -> List[str]:
        """Coalesce then serialize, continuing from the current position."""
        self.start = Point(self._current_x, self._current_y)
        return self.serialize(self.coalesce(instructions))

    def reset(self, x: float = 0.0, y: float = 0.0,
              feed: Optional[float] = None) -> None:
        """Set the tracked machine state, e.g. after a return-to-origin move."""
        self._current_x = x
        self._current_y = y
        self._current_feed = feed

    @property
    def position(self) -> Tuple[float, float]:
        return (self._current_x, self._current_y)
