"""
G-Code Generator for BurnPath

Lowers the layers of a scene and assembles the instruction streams into
a G-code program for GRBL and compatible controllers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union
import logging

from ..core.layer import Layer, PrintingMethod
from ..core.scene import Scene
from .coalescer import InstructionCoalescer
from .engrave import EngraveSettings, emit_engrave_instructions
from .instructions import InstructionStream, NothingToEmit, PowerScale
from .path_optimizer import calculate_total_distance, estimate_job_time
from .scan import ScanSettings, emit_scan_instructions

logger = logging.getLogger(__name__)


class LaserMode(Enum):
    """Laser control mode."""
    CONSTANT = "M3"  # Constant power, used for vector engraving
    DYNAMIC = "M4"   # Power scales with speed, used for raster scans


@dataclass
class GCodeSettings:
    """Settings for G-code program assembly."""

    # Laser settings
    power_scale: PowerScale = PowerScale.PERCENT  # Must match the controller's max S ($30)
    scan_laser_mode: LaserMode = LaserMode.DYNAMIC
    engrave_laser_mode: LaserMode = LaserMode.CONSTANT

    # Speed settings
    travel_speed: float = 6000.0     # mm/min for the initial and final moves

    # Output
    include_comments: bool = True    # Header and per-layer comment lines
    precision: int = 3               # Decimals for X/Y words

    def laser_mode_for(self, printing_method: PrintingMethod) -> LaserMode:
        if printing_method == PrintingMethod.SCAN:
            return self.scan_laser_mode
        return self.engrave_laser_mode


class GCodeGenerator:
    """Generate G-code programs from instruction streams and scenes."""

    def __init__(self, settings: GCodeSettings = None):
        self.settings = settings or GCodeSettings()
        self._gcode_lines: List[str] = []
        self._coalescer: Optional[InstructionCoalescer] = None

    def _emit(self, line: str):
        """Add a line to the output."""
        self._gcode_lines.append(line)

    def _comment(self, text: str):
        if self.settings.include_comments:
            self._emit(f"; {text}" if text else ";")

    def _add_header(self, title: str):
        """Add G-code header/preamble."""
        self._comment("BurnPath G-Code Output")
        self._comment(title)
        self._comment("")
        self._emit("G90 ; Absolute positioning")
        self._emit("G21 ; Units in millimeters")
        self._emit(f"G0 X0 Y0 F{self.settings.travel_speed:.0f}")
        self._coalescer.reset(0.0, 0.0, self.settings.travel_speed)

    def _add_layer(self, stream: InstructionStream):
        """Add the moves of one layer between laser enable and disable."""
        for comment in stream.comments:
            self._comment(comment)
        mode = self.settings.laser_mode_for(stream.printing_method)
        self._emit(f"{mode.value} ; Enable laser")
        for line in self._coalescer.process(stream.instructions):
            self._emit(line)
        self._emit("M5 ; Disable laser")

    def _add_footer(self):
        """Add G-code footer/cleanup."""
        self._emit("G0 X0 Y0 ; Return to origin")
        self._coalescer.reset(0.0, 0.0)
        self._emit("M2 ; End program")

    def generate_program(self, streams: Sequence[InstructionStream],
                         title: str = "") -> str:
        """
        Assemble one program from lowered layers, in the given order.

        Raises:
            ValueError: if ``streams`` is empty.
        """
        if not streams:
            raise ValueError("A program needs at least one instruction stream")

        self._gcode_lines = []
        self._coalescer = InstructionCoalescer(self.settings.power_scale,
                                               self.settings.precision)
        self._add_header(title or f"Layers: {', '.join(s.layer_name for s in streams)}")
        for stream in streams:
            self._add_layer(stream)
        self._add_footer()
        return '\n'.join(self._gcode_lines) + '\n'

    def generate_layer(self, stream: Union[InstructionStream, NothingToEmit]) -> Optional[str]:
        """Program for a single layer; None when the layer had nothing to emit."""
        if not stream:
            return None
        return self.generate_program([stream])

    def lower_layer(self, scene: Scene, layer: Layer, doc_width: float, doc_height: float,
                    scan_settings: Optional[ScanSettings] = None,
                    engrave_settings: Optional[EngraveSettings] = None,
                    canvas_size: Optional[Tuple[float, float]] = None
                    ) -> Union[InstructionStream, NothingToEmit]:
        """Run the lowering pass matching the layer's printing method."""
        items = scene.items_on(layer.id)
        power_scale = self.settings.power_scale
        if layer.printing_method == PrintingMethod.SCAN:
            settings = scan_settings or ScanSettings.for_layer(layer, power_scale=power_scale)
            return emit_scan_instructions(layer, items, doc_width, doc_height,
                                          settings, canvas_size)
        settings = engrave_settings or EngraveSettings.for_layer(layer, power_scale=power_scale)
        return emit_engrave_instructions(layer, items, settings)

    def generate(self, scene: Scene, doc_width: float, doc_height: float,
                 scan_settings: Optional[ScanSettings] = None,
                 engrave_settings: Optional[EngraveSettings] = None,
                 canvas_size: Optional[Tuple[float, float]] = None
                 ) -> Tuple[Optional[str], List[str]]:
        """
        Generate G-code for every visible layer of a scene.

        Returns:
            (gcode_string, warnings_list); the G-code is None when no layer
            had anything to emit.
        """
        warnings = []
        streams = []
        for layer in scene.layers:
            if not layer.is_visible:
                continue
            result = self.lower_layer(scene, layer, doc_width, doc_height,
                                      scan_settings, engrave_settings, canvas_size)
            if not result:
                warnings.append(result.reason)
                logger.warning(result.reason)
                continue
            streams.append(result)

        if not streams:
            return None, warnings

        instructions = [i for stream in streams for i in stream.instructions]
        cutting, travel = calculate_total_distance(instructions)
        seconds = estimate_job_time(instructions)
        logger.info(f"Job: {cutting:.1f} mm burning, {travel:.1f} mm travel, "
                    f"about {seconds / 60:.1f} min")

        title = f"Size: {doc_width}mm x {doc_height}mm, {len(streams)} layers"
        return self.generate_program(streams, title), warnings
