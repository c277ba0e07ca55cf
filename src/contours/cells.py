"""
Cell classification for marching squares.

Every cell (i, j) of a width x height scalar field is described by its four
corner samples: top-left (row j, col i), top-right (row j, col i+1),
bottom-right (row j+1, col i+1) and bottom-left (row j+1, col i). Each corner
contributes one bit to the case number (TL = bit 0, TR = bit 1, BR = bit 2,
BL = bit 3) when its sample is strictly greater than the threshold.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from shared.constants import (
    DEFAULT_BOUNDARY_MODE,
    MS_MASK_BL,
    MS_MASK_BOTTOM,
    MS_MASK_BR,
    MS_MASK_EMPTY,
    MS_MASK_FULL,
    MS_MASK_LEFT,
    MS_MASK_NOT_BL,
    MS_MASK_NOT_BR,
    MS_MASK_NOT_TL,
    MS_MASK_NOT_TR,
    MS_MASK_RIGHT,
    MS_MASK_TL,
    MS_MASK_TL_BR,
    MS_MASK_TOP,
    MS_MASK_TR,
    MS_MASK_TR_BL,
    MS_NO_CONTOUR_CASES,
    MS_SADDLE_CASES,
    BoundaryMode,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from numpy.typing import ArrayLike, NDArray

    from geometry import Point

logger = logging.getLogger(__name__)

FIELD_NDIM = 2

# Edge ids: l (x = 0), t (y = 0), r (x = 1), b (y = 1)
EDGE_LEFT = 'l'
EDGE_TOP = 't'
EDGE_RIGHT = 'r'
EDGE_BOTTOM = 'b'

# Case number -> edges carrying the two crossing points.
# Saddles (5, 10) get a fixed pair here; their routing is resolved by the walker.
CASE_EDGES: dict[int, tuple[str, ...]] = {
    MS_MASK_EMPTY: (),
    MS_MASK_TL: (EDGE_LEFT, EDGE_TOP),
    MS_MASK_TR: (EDGE_TOP, EDGE_RIGHT),
    MS_MASK_TOP: (EDGE_LEFT, EDGE_RIGHT),
    MS_MASK_BR: (EDGE_RIGHT, EDGE_BOTTOM),
    MS_MASK_TL_BR: (EDGE_BOTTOM, EDGE_LEFT),
    MS_MASK_RIGHT: (EDGE_BOTTOM, EDGE_TOP),
    MS_MASK_NOT_BL: (EDGE_BOTTOM, EDGE_LEFT),
    MS_MASK_BL: (EDGE_BOTTOM, EDGE_LEFT),
    MS_MASK_LEFT: (EDGE_BOTTOM, EDGE_TOP),
    MS_MASK_TR_BL: (EDGE_BOTTOM, EDGE_RIGHT),
    MS_MASK_NOT_BR: (EDGE_BOTTOM, EDGE_RIGHT),
    MS_MASK_BOTTOM: (EDGE_LEFT, EDGE_RIGHT),
    MS_MASK_NOT_TR: (EDGE_TOP, EDGE_RIGHT),
    MS_MASK_NOT_TL: (EDGE_TOP, EDGE_LEFT),
    MS_MASK_FULL: (),
}


@dataclass(frozen=True)
class Cell:
    """Classified cell: case number and, for non-trivial cases, two local points."""

    case: int
    p1: Point | None = None
    p2: Point | None = None

    @property
    def is_trivial(self) -> bool:
        return self.case in MS_NO_CONTOUR_CASES

    @property
    def is_saddle(self) -> bool:
        return self.case in MS_SADDLE_CASES


_EMPTY_CELL = Cell(MS_MASK_EMPTY)
_FULL_CELL = Cell(MS_MASK_FULL)


def _fraction(threshold: float, start: float, end: float) -> float:
    return (threshold - start) / (end - start)


def edge_point(
    edge: str,
    threshold: float,
    lt: float,
    tr: float,
    br: float,
    bl: float,
) -> Point:
    """
    Linearly interpolated crossing on one cell edge, in cell-local coordinates.

    Only call for edges whose corners classify differently; such corners never
    hold equal samples, so the fraction is well defined and lies in [0, 1].
    """
    if edge == EDGE_LEFT:
        return 0.0, _fraction(threshold, lt, bl)
    if edge == EDGE_TOP:
        return _fraction(threshold, lt, tr), 0.0
    if edge == EDGE_RIGHT:
        return 1.0, _fraction(threshold, tr, br)
    if edge == EDGE_BOTTOM:
        return _fraction(threshold, bl, br), 1.0
    msg = f'invalid edge id: {edge!r}'
    raise ValueError(msg)


def crossing_points(
    case: int,
    threshold: float,
    lt: float,
    tr: float,
    br: float,
    bl: float,
) -> tuple[Point, ...]:
    """Crossing points of one cell as selected by CASE_EDGES (empty for 0/15)."""
    try:
        edges = CASE_EDGES[case]
    except KeyError:
        msg = f'case number out of range: {case}'
        raise ValueError(msg) from None
    return tuple(edge_point(e, threshold, lt, tr, br, bl) for e in edges)


def corner_planes(
    field: NDArray[np.float64],
    threshold: float,
    boundary_mode: BoundaryMode,
) -> tuple[NDArray[np.float64], ...]:
    """
    Corner samples of every cell as four (height, width) arrays: TL, TR, BR, BL.

    This is the only place where neighbours past the right/bottom border are
    resolved: wrapped grids take them modulo width/height, clamped grids
    substitute the threshold value.
    """
    if boundary_mode == BoundaryMode.WRAPPED:
        right = np.roll(field, -1, axis=1)
        below = np.roll(field, -1, axis=0)
        below_right = np.roll(right, -1, axis=0)
    elif boundary_mode == BoundaryMode.CLAMPED:
        padded = np.pad(field, ((0, 1), (0, 1)), constant_values=threshold)
        right = padded[:-1, 1:]
        below = padded[1:, :-1]
        below_right = padded[1:, 1:]
    else:
        msg = f'unsupported boundary mode: {boundary_mode!r}'
        raise ValueError(msg)
    return field, right, below_right, below


def case_numbers(
    lt: NDArray[np.float64],
    tr: NDArray[np.float64],
    br: NDArray[np.float64],
    bl: NDArray[np.float64],
    threshold: float,
) -> NDArray[np.int8]:
    """4-bit case per cell; equality with the threshold classifies as below."""
    cases = (
        (lt > threshold).astype(np.int8)
        | ((tr > threshold).astype(np.int8) << 1)
        | ((br > threshold).astype(np.int8) << 2)
        | ((bl > threshold).astype(np.int8) << 3)
    )
    return cases.astype(np.int8)


class Grid:
    """
    Immutable width x height array of classified cells.

    Rebuilt on every extraction call; nothing is shared between calls.
    """

    def __init__(
        self,
        cells: tuple[tuple[Cell, ...], ...],
        cases: NDArray[np.int8],
        threshold: float,
        boundary_mode: BoundaryMode,
    ) -> None:
        if cases.ndim != FIELD_NDIM or len(cells) != cases.shape[0]:
            msg = f'cells rows ({len(cells)}) do not match cases shape {cases.shape}'
            raise ValueError(msg)
        if any(len(row) != cases.shape[1] for row in cells):
            msg = f'cells columns do not match cases shape {cases.shape}'
            raise ValueError(msg)
        cell_cases = np.array([[c.case for c in row] for row in cells], dtype=np.int64)
        if not np.array_equal(cell_cases.reshape(cases.shape), cases):
            msg = 'cell case numbers disagree with the cases array'
            raise ValueError(msg)
        self._cells = cells
        self._cases = cases
        self._cases.flags.writeable = False
        self.threshold = threshold
        self.boundary_mode = boundary_mode
        self.height, self.width = cases.shape

    def __repr__(self) -> str:
        return (
            f'Grid(width={self.width}, height={self.height}, '
            f'threshold={self.threshold}, boundary_mode={self.boundary_mode.value})'
        )

    @property
    def cases(self) -> NDArray[np.int8]:
        return self._cases

    def cell(self, i: int, j: int) -> Cell:
        return self._cells[j][i]

    def case_at(self, i: int, j: int) -> int:
        return int(self._cases[j, i])

    def iter_cells(self) -> Iterator[tuple[int, int, Cell]]:
        """Yield (i, j, cell) in row-major order."""
        for j, row in enumerate(self._cells):
            for i, cell in enumerate(row):
                yield i, j, cell

    def wrap(self, x: int, y: int) -> tuple[int, int] | None:
        """
        Resolve a possibly out-of-range cell index.

        Wrapped grids fold it back modulo width/height; clamped grids have no
        cells past the border and return None.
        """
        if self.boundary_mode == BoundaryMode.WRAPPED:
            return x % self.width, y % self.height
        if 0 <= x < self.width and 0 <= y < self.height:
            return x, y
        return None

    def nontrivial_count(self) -> int:
        trivial = np.isin(self._cases, tuple(MS_NO_CONTOUR_CASES))
        return int(self._cases.size - np.count_nonzero(trivial))

    def saddle_count(self) -> int:
        return int(np.count_nonzero(np.isin(self._cases, MS_SADDLE_CASES)))


def _as_field(
    values: ArrayLike,
    width: int | None,
    height: int | None,
) -> NDArray[np.float64]:
    field = np.asarray(values, dtype=np.float64)
    if field.ndim != FIELD_NDIM:
        msg = f'scalar field must be 2-D, got {field.ndim}-D'
        raise ValueError(msg)
    rows, cols = field.shape
    if rows == 0 or cols == 0:
        msg = 'scalar field must contain at least one sample'
        raise ValueError(msg)
    if width is not None and width != cols:
        msg = f'field width mismatch: declared {width}, got {cols}'
        raise ValueError(msg)
    if height is not None and height != rows:
        msg = f'field height mismatch: declared {height}, got {rows}'
        raise ValueError(msg)
    if not np.isfinite(field).all():
        msg = 'scalar field contains non-finite samples'
        raise ValueError(msg)
    return field


def classify_field(
    values: ArrayLike,
    threshold: float,
    *,
    boundary_mode: BoundaryMode = DEFAULT_BOUNDARY_MODE,
    width: int | None = None,
    height: int | None = None,
) -> Grid:
    """
    Classify every cell of a row-major scalar field against a threshold.

    Args:
        values: 2D grid of samples, values[row][col].
        threshold: Iso-level; corners strictly above it set their case bit.
        boundary_mode: Neighbour handling past the right/bottom border.
        width: Optional declared width, checked against the field.
        height: Optional declared height, checked against the field.

    Returns:
        Grid with one Cell per sample.

    """
    threshold = float(threshold)
    if not math.isfinite(threshold):
        msg = f'threshold must be finite, got {threshold}'
        raise ValueError(msg)
    boundary_mode = BoundaryMode(boundary_mode)
    field = _as_field(values, width, height)

    lt, tr, br, bl = corner_planes(field, threshold, boundary_mode)
    cases = case_numbers(lt, tr, br, bl, threshold)

    rows: list[tuple[Cell, ...]] = []
    for j in range(cases.shape[0]):
        row: list[Cell] = []
        for i in range(cases.shape[1]):
            case = int(cases[j, i])
            if case == MS_MASK_EMPTY:
                row.append(_EMPTY_CELL)
                continue
            if case == MS_MASK_FULL:
                row.append(_FULL_CELL)
                continue
            p1, p2 = crossing_points(
                case,
                threshold,
                float(lt[j, i]),
                float(tr[j, i]),
                float(br[j, i]),
                float(bl[j, i]),
            )
            row.append(Cell(case, p1, p2))
        rows.append(tuple(row))

    grid = Grid(tuple(rows), cases, threshold, boundary_mode)
    logger.debug(
        'Classified %s: non-trivial=%d saddles=%d',
        grid,
        grid.nontrivial_count(),
        grid.saddle_count(),
    )
    return grid
