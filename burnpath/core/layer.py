"""
BurnPath Layer System

A layer groups canvas items that share one printing method and its
parameters.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class PrintingMethod(Enum):
    """How the items of a layer are lowered to instructions."""
    SCAN = "scan"        # Raster sweep with power modulation
    ENGRAVE = "engrave"  # Vector path following at fixed power


# Parameters given to a SCAN layer created without explicit settings
SCAN_LAYER_DEFAULTS = {
    "line_density": 10.0,      # Lines per mm
    "halftone": False,
    "overscan_distance": 0.0,  # mm
    "power": 50.0,             # Percentage (0-100)
}

ENGRAVE_LAYER_DEFAULTS = {
    "power": 50.0,
}


@dataclass(frozen=True)
class Layer:
    """
    A named layer of the scene.

    Layers are immutable; the scene replaces them through
    ``dataclasses.replace`` when settings change.
    """
    id: UUID = field(default_factory=uuid4)
    name: str = "Layer"
    is_visible: bool = True
    printing_method: PrintingMethod = PrintingMethod.ENGRAVE

    # Scan parameters (None means "use the emitter default")
    line_density: Optional[float] = None
    halftone: Optional[bool] = None
    overscan_distance: Optional[float] = None
    power: Optional[float] = None

    @classmethod
    def create(cls, name: str, printing_method: PrintingMethod, **settings) -> 'Layer':
        """Create a layer with the defaults of its printing method."""
        if printing_method == PrintingMethod.SCAN:
            values = dict(SCAN_LAYER_DEFAULTS)
        else:
            values = dict(ENGRAVE_LAYER_DEFAULTS)
        values.update(settings)
        return cls(name=name, printing_method=printing_method, **values)
