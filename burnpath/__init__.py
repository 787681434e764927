"""
BurnPath - Laser toolpath generation

Imports SVG, DXF and HPGL drawings and bitmaps into a layered scene and
lowers it to G-code for laser engravers.
"""

__version__ = "0.1.0"
__author__ = "BurnPath Team"
