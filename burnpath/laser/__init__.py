"""
BurnPath Laser Module

Lowering passes, instruction coalescing and G-code program assembly.
"""

from .instructions import Op, Instruction, InstructionStream, NothingToEmit, PowerScale
from .coalescer import InstructionCoalescer
from .scan import ScanSettings, emit_scan_instructions, iter_scan_rows, luma_to_power
from .engrave import EngraveSettings, emit_engrave_instructions
from .gcode_generator import GCodeGenerator, GCodeSettings, LaserMode
from .path_optimizer import optimize_paths, calculate_total_distance, estimate_job_time

__all__ = [
    'Op', 'Instruction', 'InstructionStream', 'NothingToEmit', 'PowerScale',
    'InstructionCoalescer',
    'ScanSettings', 'emit_scan_instructions', 'iter_scan_rows', 'luma_to_power',
    'EngraveSettings', 'emit_engrave_instructions',
    'GCodeGenerator', 'GCodeSettings', 'LaserMode',
    'optimize_paths', 'calculate_total_distance', 'estimate_job_time',
]
