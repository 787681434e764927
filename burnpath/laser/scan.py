"""
Scan Lowering

Turns the bitmaps of a SCAN layer into a boustrophedon raster sweep:
one pass per pixel row, laser power modulated per pixel.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union
import logging

import numpy as np

from ..core.items import ImageObject
from ..core.layer import Layer, PrintingMethod
from ..image.dithering import DitheringMethod, ImageDitherer, WHITE_THRESHOLD
from ..image.raster import platform_luma
from .instructions import Instruction, InstructionStream, NothingToEmit, PowerScale

logger = logging.getLogger(__name__)

# Halftone pixels darker than this burn at full power
HALFTONE_THRESHOLD = 128
# Single-power mode (min == max) burns pixels darker than this
SINGLE_POWER_THRESHOLD = 127
# Blank runs longer than this many pixels are crossed at travel speed
MAX_BURN_SPEED_GAP = 3


@dataclass
class ScanSettings:
    """Settings for scan (raster) lowering."""

    # Raster
    line_density: float = 10.0        # Lines per mm
    halftone: bool = False
    dithering: DitheringMethod = DitheringMethod.JARVIS_JUDICE_NINKE
    negative_image: bool = False
    h_flipped: bool = False
    v_flipped: bool = False

    # Power, in power_scale units
    min_power: float = 0.0
    max_power: float = 100.0
    power_scale: PowerScale = PowerScale.PERCENT

    # Motion
    feed_rate: float = 1000.0         # mm/min while burning
    travel_speed: float = 6000.0      # mm/min for overscan and blank gaps
    overscan_distance: float = 3.0    # mm beyond content at each row end

    @classmethod
    def for_layer(cls, layer: Layer, **overrides) -> 'ScanSettings':
        """Settings taken from a layer's stored parameters."""
        values = {}
        if layer.line_density is not None:
            values['line_density'] = layer.line_density
        if layer.halftone is not None:
            values['halftone'] = layer.halftone
        if layer.overscan_distance is not None:
            values['overscan_distance'] = layer.overscan_distance
        if layer.power is not None:
            values['max_power'] = layer.power
        values.update(overrides)
        return cls(**values)

    @property
    def spacing(self) -> float:
        """Distance between rows and between pixels, in mm."""
        return 1.0 / self.line_density


def luma_to_power(luma: float, settings: ScanSettings) -> int:
    """
    Laser power for one pixel.

    Halftone burns full power below 128. When min and max power are
    equal, pixels below 127 burn at that power. Otherwise power falls
    linearly from max (black) to min (white).
    """
    if settings.halftone:
        return round(settings.max_power) if luma < HALFTONE_THRESHOLD else 0
    if settings.max_power == settings.min_power:
        return round(settings.max_power) if luma < SINGLE_POWER_THRESHOLD else 0
    return round(settings.min_power + (1.0 - luma / 255.0) *
                 (settings.max_power - settings.min_power))


def row_powers(luma_row: np.ndarray, settings: ScanSettings) -> List[int]:
    """Power per pixel of one row; near-white pixels never burn."""
    return [0 if luma >= WHITE_THRESHOLD else luma_to_power(int(luma), settings)
            for luma in luma_row]


def prepare_luma(images: Sequence[ImageObject], doc_width: float, doc_height: float,
                 settings: ScanSettings,
                 canvas_size: Optional[Tuple[float, float]] = None) -> np.ndarray:
    """Rasterize the layer and apply halftone dithering when enabled."""
    luma = platform_luma(images, doc_width, doc_height, settings.line_density,
                         negative=settings.negative_image,
                         h_flipped=settings.h_flipped,
                         v_flipped=settings.v_flipped,
                         canvas_size=canvas_size)
    if settings.halftone:
        luma = ImageDitherer(settings.dithering).dither(luma, HALFTONE_THRESHOLD).astype(np.int16)
    return luma


def _lower_row(powers: List[int], y: float, reverse: bool,
               settings: ScanSettings) -> List[Instruction]:
    """
    Instructions for one row holding at least one burning pixel.

    Pixel ``c`` covers ``[c * spacing, (c + 1) * spacing]``; every move
    ends at the far edge of the pixel it crosses, so each burning pixel
    gets a cut of its own width.
    """
    spacing = settings.spacing
    burning = [i for i, p in enumerate(powers) if p > 0]
    first, last = burning[0], burning[-1]
    content_start = first * spacing
    content_end = (last + 1) * spacing
    overscan = settings.overscan_distance
    travel = settings.travel_speed

    def far_edge(column: int) -> float:
        return column * spacing if reverse else (column + 1) * spacing

    moves = []
    start_x = content_end + overscan if reverse else content_start - overscan
    moves.append(Instruction.rapid(start_x, y, travel))
    moves.append(Instruction.rapid(content_end if reverse else content_start, None, travel))

    columns = list(range(last, first - 1, -1)) if reverse else list(range(first, last + 1))
    i = 0
    while i < len(columns):
        column = columns[i]
        power = powers[column]
        if power > 0:
            moves.append(Instruction.cut(far_edge(column), None, power, settings.feed_rate))
            i += 1
            continue

        blank_end = i
        while blank_end < len(columns) and powers[columns[blank_end]] == 0:
            blank_end += 1
        if blank_end - i > MAX_BURN_SPEED_GAP:
            moves.append(Instruction.rapid(far_edge(columns[blank_end - 1]), None, travel))
            i = blank_end
        else:
            moves.append(Instruction.rapid(far_edge(column), None, settings.feed_rate))
            i += 1

    end_x = content_start - overscan if reverse else content_end + overscan
    moves.append(Instruction.rapid(end_x, None, travel))
    return moves


def iter_scan_rows(luma: np.ndarray, settings: ScanSettings) -> Iterator[List[Instruction]]:
    """
    Yield the instructions of each burning row, top row first.

    Rows are placed in Y-up machine coordinates, so the top row of the
    grid has the largest Y. Odd rows run right to left. Callers may stop
    iterating at any row.
    """
    height = luma.shape[0]
    spacing = settings.spacing
    for row in range(height):
        powers = row_powers(luma[row], settings)
        if not any(powers):
            continue
        y = (height - 1 - row) * spacing
        yield _lower_row(powers, y, row % 2 == 1, settings)


def emit_scan_instructions(layer: Layer, items: Sequence, doc_width: float, doc_height: float,
                           settings: Optional[ScanSettings] = None,
                           canvas_size: Optional[Tuple[float, float]] = None
                           ) -> Union[InstructionStream, NothingToEmit]:
    """
    Lower a SCAN layer.

    Args:
        layer: The layer to lower
        items: Scene items; only this layer's ImageObjects are used
        doc_width, doc_height: Document size in mm
        settings: Scan settings (defaults to ScanSettings.for_layer(layer))
        canvas_size: Size of the editing canvas the items are placed on

    Returns:
        The instruction stream, or NothingToEmit when the layer has no
        images or nothing dark enough to burn.
    """
    if layer.printing_method != PrintingMethod.SCAN:
        raise ValueError(f"Layer '{layer.name}' is not a scan layer")
    settings = settings or ScanSettings.for_layer(layer)

    images = [item for item in items
              if isinstance(item, ImageObject) and item.layer_id == layer.id]
    if not images:
        return NothingToEmit(layer.id, f"Scan layer '{layer.name}' has no images")

    luma = prepare_luma(images, doc_width, doc_height, settings, canvas_size)
    instructions: List[Instruction] = []
    rows = 0
    for row in iter_scan_rows(luma, settings):
        instructions.extend(row)
        rows += 1

    if not instructions:
        return NothingToEmit(layer.id, f"Scan layer '{layer.name}' has nothing to burn")

    height, width = luma.shape
    logger.info(f"Scan layer '{layer.name}': {rows} of {height} rows burned")
    comments = (
        f"Layer: {layer.name}",
        f"Image Count: {len(images)}",
        f"Platform Size: {doc_width}x{doc_height} mm",
        f"Resolution: {settings.line_density} lines/mm ({width}x{height} pixels)",
        f"Mode: {'Halftone' if settings.halftone else 'Greyscale'}",
        f"Power Range: [{settings.min_power}, {settings.max_power}] "
        f"(0-{settings.power_scale.value} scale)",
        f"Speed: Burn={settings.feed_rate} mm/min, Travel={settings.travel_speed} mm/min",
    )
    return InstructionStream(
        layer_id=layer.id,
        layer_name=layer.name,
        printing_method=PrintingMethod.SCAN,
        instructions=tuple(instructions),
        comments=comments,
    )
