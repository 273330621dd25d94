"""
ROI Annotation Engine

Interactive 2D region-of-interest editing over a static raster image:
drawing, vertex editing, pan/zoom and longest-diameter measurement.
"""

__version__ = "1.0.0"
