"""
Package initializer for contours.
Re-exports the marching squares API: classification, segments, chaining.
"""
from __future__ import annotations

from .builder import build_polygons_by_level as build_polygons_by_level
from .builder import build_segments_by_level as build_segments_by_level
from .builder import extract_polygons_from_field as extract_polygons_from_field
from .builder import extract_segments_from_field as extract_segments_from_field
from .builder import run_extraction as run_extraction
from .cells import Cell as Cell
from .cells import Grid as Grid
from .cells import classify_field as classify_field
from .chains import Polygon as Polygon
from .chains import trace_polygons as trace_polygons
from .segments import LineSegment as LineSegment
from .segments import extract_segments as extract_segments
