"""
Field -> contours pipeline.

Wraps classification, segment extraction and chaining into single calls and
runs several thresholds over one field. Independent levels may run in a
ThreadPoolExecutor; each level builds its own Grid and walk state, a single
level is never split across threads.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

import numpy as np

from contours.cells import FIELD_NDIM, classify_field
from contours.chains import Polygon, trace_polygons
from contours.segments import LineSegment, extract_segments, validate_cell_size
from shared.constants import (
    CONTOUR_PARALLEL_WORKERS,
    DEFAULT_BOUNDARY_MODE,
    DEFAULT_CELL_SIZE,
    BoundaryMode,
    HoleNesting,
    OutputKind,
)
from shared.diagnostics import stage_timer

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from numpy.typing import ArrayLike

    from domain.models import ContourSettings

logger = logging.getLogger(__name__)

T = TypeVar('T')


def cell_size_for_scale(scale: float, grid_width: int) -> float:
    """Cell size that makes a grid of ``grid_width`` cells span ``scale`` world units."""
    if grid_width <= 0:
        msg = f'grid_width must be positive, got {grid_width}'
        raise ValueError(msg)
    return validate_cell_size(scale / grid_width)


def extract_segments_from_field(
    values: ArrayLike,
    threshold: float,
    *,
    cell_size: float = DEFAULT_CELL_SIZE,
    boundary_mode: BoundaryMode = DEFAULT_BOUNDARY_MODE,
) -> list[LineSegment]:
    """Classify a field and return one world-space segment per contour cell."""
    grid = classify_field(values, threshold, boundary_mode=boundary_mode)
    return extract_segments(grid, cell_size)


def extract_polygons_from_field(
    values: ArrayLike,
    threshold: float,
    *,
    cell_size: float = DEFAULT_CELL_SIZE,
    boundary_mode: BoundaryMode = DEFAULT_BOUNDARY_MODE,
    hole_nesting: HoleNesting = HoleNesting.LAST_OUTER,
) -> list[Polygon]:
    """Classify a field and chain its contours into polygons with holes."""
    grid = classify_field(values, threshold, boundary_mode=boundary_mode)
    return trace_polygons(grid, cell_size, hole_nesting=hole_nesting)


def _run_levels(
    levels: Sequence[float],
    process: Callable[[float], T],
    workers: int,
) -> dict[int, T]:
    num_workers = min(workers, max(1, os.cpu_count() or 1), len(levels))
    if num_workers > 1 and len(levels) > 1:

        def process_level(li_level: tuple[int, float]) -> tuple[int, T]:
            li, level = li_level
            return li, process(level)

        with ThreadPoolExecutor(max_workers=num_workers) as executor:
            return dict(executor.map(process_level, enumerate(levels)))

    return {li: process(level) for li, level in enumerate(levels)}


def build_segments_by_level(
    values: ArrayLike,
    levels: Sequence[float],
    *,
    cell_size: float = DEFAULT_CELL_SIZE,
    boundary_mode: BoundaryMode = DEFAULT_BOUNDARY_MODE,
    workers: int = CONTOUR_PARALLEL_WORKERS,
) -> dict[int, list[LineSegment]]:
    """
    Segments for several thresholds of one field.

    Returns:
        Mapping level_index -> segments, in the order of ``levels``.

    """
    field_array = np.asarray(values, dtype=np.float64)

    def process(level: float) -> list[LineSegment]:
        return extract_segments_from_field(
            field_array,
            level,
            cell_size=cell_size,
            boundary_mode=boundary_mode,
        )

    return _run_levels(levels, process, workers)


def build_polygons_by_level(
    values: ArrayLike,
    levels: Sequence[float],
    *,
    cell_size: float = DEFAULT_CELL_SIZE,
    boundary_mode: BoundaryMode = DEFAULT_BOUNDARY_MODE,
    hole_nesting: HoleNesting = HoleNesting.LAST_OUTER,
    workers: int = CONTOUR_PARALLEL_WORKERS,
) -> dict[int, list[Polygon]]:
    """
    Polygons for several thresholds of one field.

    Returns:
        Mapping level_index -> polygons, in the order of ``levels``.

    """
    field_array = np.asarray(values, dtype=np.float64)

    def process(level: float) -> list[Polygon]:
        return extract_polygons_from_field(
            field_array,
            level,
            cell_size=cell_size,
            boundary_mode=boundary_mode,
            hole_nesting=hole_nesting,
        )

    return _run_levels(levels, process, workers)


@dataclass
class ExtractionResult:
    """Output of one settings-driven run."""

    kind: OutputKind
    levels: list[float]
    cell_size: float
    width: int
    height: int
    segments: dict[int, list[LineSegment]] = field(default_factory=dict)
    polygons: dict[int, list[Polygon]] = field(default_factory=dict)

    def count(self, level_index: int) -> int:
        if self.kind == OutputKind.SEGMENTS:
            return len(self.segments.get(level_index, []))
        return len(self.polygons.get(level_index, []))


def run_extraction(values: ArrayLike, settings: ContourSettings) -> ExtractionResult:
    """Run the pipeline described by ``settings`` over one field."""
    field_array = np.asarray(values, dtype=np.float64)
    if field_array.ndim != FIELD_NDIM:
        msg = f'scalar field must be 2-D, got {field_array.ndim}-D'
        raise ValueError(msg)
    height, width = field_array.shape
    cell_size = settings.effective_cell_size(width)
    levels = list(settings.thresholds)

    logger.info(
        'Extracting %s for %d level(s) from %dx%d field '
        '(cell_size=%.6g, boundary=%s)',
        settings.output_kind.value,
        len(levels),
        width,
        height,
        cell_size,
        settings.boundary_mode.value,
    )

    result = ExtractionResult(
        kind=settings.output_kind,
        levels=levels,
        cell_size=cell_size,
        width=width,
        height=height,
    )
    with stage_timer(f'{settings.output_kind.value} extraction'):
        if settings.output_kind == OutputKind.SEGMENTS:
            result.segments = build_segments_by_level(
                field_array,
                levels,
                cell_size=cell_size,
                boundary_mode=settings.boundary_mode,
                workers=settings.parallel_workers,
            )
        else:
            result.polygons = build_polygons_by_level(
                field_array,
                levels,
                cell_size=cell_size,
                boundary_mode=settings.boundary_mode,
                hole_nesting=settings.hole_nesting,
                workers=settings.parallel_workers,
            )

    for li, level in enumerate(levels):
        logger.info('Level %d (%.6g): %d %s', li, level, result.count(li), result.kind.value)
    return result
