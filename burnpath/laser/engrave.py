"""
Engrave Lowering

Follows the vector outlines of an ENGRAVE layer at a fixed power.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union
import logging

from ..core.geometry import Point
from ..core.items import ImageObject, TextObject, world_polylines
from ..core.layer import Layer, PrintingMethod
from .instructions import Instruction, InstructionStream, NothingToEmit, PowerScale
from .path_optimizer import optimize_paths

logger = logging.getLogger(__name__)


@dataclass
class EngraveSettings:
    """Settings for engrave (vector) lowering."""
    feed_rate: float = 1000.0         # mm/min while cutting
    travel_speed: float = 6000.0      # mm/min between paths
    power: float = 50.0               # In power_scale units
    power_scale: PowerScale = PowerScale.PERCENT
    passes: int = 1

    # Editor coordinates are Y-down; machines are Y-up
    flip_y: bool = False
    canvas_height: Optional[float] = None

    # Reorder paths to shorten travel
    optimize_order: bool = False

    def __post_init__(self):
        if self.flip_y and self.canvas_height is None:
            raise ValueError("flip_y needs canvas_height")

    @classmethod
    def for_layer(cls, layer: Layer, **overrides) -> 'EngraveSettings':
        values = {}
        if layer.power is not None:
            values['power'] = layer.power
        values.update(overrides)
        return cls(**values)

    def to_machine(self, point: Point) -> Point:
        """Map a canvas point to machine coordinates."""
        if self.flip_y:
            return Point(point.x, self.canvas_height - point.y)
        return point


def engrave_paths(items: Sequence, settings: EngraveSettings) -> List[List[Point]]:
    """Machine-coordinate paths of the items, in item order."""
    paths = []
    for item in items:
        for path in world_polylines(item):
            if len(path) >= 2:
                paths.append([settings.to_machine(p) for p in path])
    return paths


def emit_engrave_instructions(layer: Layer, items: Sequence,
                              settings: Optional[EngraveSettings] = None
                              ) -> Union[InstructionStream, NothingToEmit]:
    """
    Lower an ENGRAVE layer.

    Each path gets one rapid to its first point, then a cut to every
    following point; the whole path is repeated ``passes`` times. Text
    and images have no cuttable outline and are skipped.

    Returns:
        The instruction stream, or NothingToEmit when the layer holds no
        cuttable paths.
    """
    if layer.printing_method != PrintingMethod.ENGRAVE:
        raise ValueError(f"Layer '{layer.name}' is not an engrave layer")
    settings = settings or EngraveSettings.for_layer(layer)

    layer_items = [item for item in items if item.layer_id == layer.id]
    if not layer_items:
        return NothingToEmit(layer.id, f"Engrave layer '{layer.name}' has no items")

    skipped = sum(1 for item in layer_items if isinstance(item, (TextObject, ImageObject)))
    if skipped:
        logger.info(f"Engrave layer '{layer.name}': skipped {skipped} text/image items")

    paths = engrave_paths(layer_items, settings)
    if not paths:
        return NothingToEmit(layer.id, f"Engrave layer '{layer.name}' has no cuttable paths")
    if settings.optimize_order:
        paths = optimize_paths(paths)

    power = settings.power_scale.clamp(settings.power)
    instructions: List[Instruction] = []
    for path in paths:
        for _ in range(max(1, settings.passes)):
            first = path[0]
            instructions.append(Instruction.rapid(first.x, first.y, settings.travel_speed))
            for point in path[1:]:
                instructions.append(Instruction.cut(point.x, point.y, power, settings.feed_rate))

    logger.info(f"Engrave layer '{layer.name}': {len(paths)} paths, {settings.passes} passes")
    comments = (
        f"Layer: {layer.name}",
        f"Paths: {len(paths)}",
        f"Power: {power} (0-{settings.power_scale.value} scale), Passes: {settings.passes}",
        f"Speed: Cut={settings.feed_rate} mm/min, Travel={settings.travel_speed} mm/min",
    )
    return InstructionStream(
        layer_id=layer.id,
        layer_name=layer.name,
        printing_method=PrintingMethod.ENGRAVE,
        instructions=tuple(instructions),
        comments=comments,
    )
