"""
Laser Instructions

The abstract moves produced by scan and engrave lowering, before they are
coalesced and serialized as G-code.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple
from uuid import UUID

from ..core.layer import PrintingMethod


class Op(Enum):
    """Motion kind."""
    RAPID = "rapid"  # Laser off travel
    CUT = "cut"      # Move with the laser firing at a power


class PowerScale(Enum):
    """Range of the S word. Value is the full-power S value."""
    PERCENT = 100
    BYTE = 255

    def clamp(self, power: float) -> int:
        return int(max(0, min(self.value, round(power))))


@dataclass(frozen=True)
class Instruction:
    """
    One motion.

    ``x`` or ``y`` may be None to keep that axis where it is. A RAPID never
    carries a power; a CUT always does (zero-power cuts serialize as rapids).
    """
    op: Op
    x: Optional[float] = None
    y: Optional[float] = None
    power: Optional[int] = None
    feed_rate: Optional[float] = None

    def __post_init__(self):
        if self.op is Op.RAPID and self.power is not None:
            raise ValueError("Rapid moves carry no power")
        if self.op is Op.CUT and self.power is None:
            raise ValueError("Cutting moves need a power value")

    @classmethod
    def rapid(cls, x: Optional[float], y: Optional[float],
              feed_rate: Optional[float] = None) -> 'Instruction':
        return cls(Op.RAPID, x, y, None, feed_rate)

    @classmethod
    def cut(cls, x: Optional[float], y: Optional[float], power: int,
            feed_rate: Optional[float] = None) -> 'Instruction':
        return cls(Op.CUT, x, y, power, feed_rate)

    @property
    def effective_power(self) -> int:
        """Power the laser fires at during this move (0 for rapids)."""
        return self.power or 0


@dataclass(frozen=True)
class InstructionStream:
    """The lowered moves of one layer."""
    layer_id: UUID
    layer_name: str
    printing_method: PrintingMethod
    instructions: Tuple[Instruction, ...]
    comments: Tuple[str, ...] = field(default=())

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __bool__(self) -> bool:
        return True

    @property
    def cut_count(self) -> int:
        return sum(1 for i in self.instructions if i.effective_power > 0)


@dataclass(frozen=True)
class NothingToEmit:
    """
    Result of lowering a layer that holds nothing the printing method can burn.

    Falsy, so ``if not result`` distinguishes it from a real stream.
    """
    layer_id: UUID
    reason: str

    def __bool__(self) -> bool:
        return False
