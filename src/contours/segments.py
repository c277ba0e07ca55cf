from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from geometry import cell_to_world

if TYPE_CHECKING:
    from contours.cells import Grid
    from geometry import Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineSegment:
    """Line segment in world space defined by two endpoints."""

    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def start(self) -> Point:
        return self.x1, self.y1

    @property
    def end(self) -> Point:
        return self.x2, self.y2

    @property
    def length(self) -> float:
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)


def validate_cell_size(cell_size: float) -> float:
    cell_size = float(cell_size)
    if not math.isfinite(cell_size) or cell_size <= 0.0:
        msg = f'cell_size must be a positive finite number, got {cell_size}'
        raise ValueError(msg)
    return cell_size


def extract_segments(grid: Grid, cell_size: float) -> list[LineSegment]:
    """
    Convert a classified grid to world-space line segments.

    Exactly one segment is produced per non-trivial cell; the order of the
    result is not part of the contract. Coincident crossing points yield a
    zero-length segment, which is kept.
    """
    cell_size = validate_cell_size(cell_size)
    segments: list[LineSegment] = []
    for i, j, cell in grid.iter_cells():
        if cell.is_trivial or cell.p1 is None or cell.p2 is None:
            continue
        x1, y1 = cell_to_world(i, j, cell.p1, cell_size)
        x2, y2 = cell_to_world(i, j, cell.p2, cell_size)
        segments.append(LineSegment(x1, y1, x2, y2))
    logger.debug('Extracted %d segments from %s', len(segments), grid)
    return segments
