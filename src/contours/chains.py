"""
Contour chaining: walk classified cells into closed point sequences.

The walker follows a contour from cell to cell using a direction derived from
each cell's case number. Saddle cells (cases 5 and 10) carry two strands of
contour; the strand taken depends on the case of the cell the walker came
from. A saddle cell is therefore consumed only after its second pass (or on its
first pass when it was entered from the same saddle case, which also covers a
chain that starts on a saddle), while every other cell is consumed on its first
pass. A chain closes when the next cell is already consumed. New chains never
start on a saddle that has already been passed once.

Adjacent saddles of opposite cases can hand the walker over to a strand that
belongs to an earlier chain; the walk then stops on a cell other than its
start. That, and a walk leaving a clamped grid, is logged as a warning and the
open sequence is emitted unchanged.

Closed sequences are nested into polygons: a sequence lying completely inside
the most recently emitted outer contour becomes a hole of that polygon;
otherwise it starts a new polygon. This is only correct when outer contours
are met before their holes in row-major scan order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from contours.segments import validate_cell_size
from geometry import bbox_contains, cell_to_world, point_in_polygon, polygon_bbox
from shared.constants import (
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
    MS_SADDLE_MAX_PASSES,
    MS_SADDLE_TL_BR_RIGHT_AFTER,
    MS_SADDLE_TR_BL_UP_AFTER,
    HoleNesting,
)

if TYPE_CHECKING:
    from contours.cells import Grid
    from geometry import Point

logger = logging.getLogger(__name__)


class Direction(Enum):
    # (dx, dy) in cell steps; y grows downwards
    RIGHT = (1, 0)
    LEFT = (-1, 0)
    UP = (0, -1)
    DOWN = (0, 1)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]


# None marks a case without a fixed direction (trivial or saddle)
_CASE_DIRECTIONS: dict[int, Direction | None] = {
    MS_MASK_EMPTY: None,
    MS_MASK_TL: Direction.LEFT,
    MS_MASK_TR: Direction.UP,
    MS_MASK_TOP: Direction.LEFT,
    MS_MASK_BR: Direction.RIGHT,
    MS_MASK_TL_BR: None,
    MS_MASK_RIGHT: Direction.UP,
    MS_MASK_NOT_BL: Direction.LEFT,
    MS_MASK_BL: Direction.DOWN,
    MS_MASK_LEFT: Direction.DOWN,
    MS_MASK_TR_BL: None,
    MS_MASK_NOT_BR: Direction.DOWN,
    MS_MASK_BOTTOM: Direction.RIGHT,
    MS_MASK_NOT_TR: Direction.RIGHT,
    MS_MASK_NOT_TL: Direction.UP,
    MS_MASK_FULL: None,
}


def step_direction(case: int, previous_case: int) -> Direction:
    """
    Movement direction out of a cell with the given case.

    Saddle cells depend on the case of the cell the walker came from:
    case 5 goes right after 2, 6 or 14 and left otherwise; case 10 goes up
    after 1, 3 or 7 and down otherwise.
    """
    if case not in _CASE_DIRECTIONS:
        msg = f'case number out of range: {case}'
        raise ValueError(msg)
    if case in MS_NO_CONTOUR_CASES:
        msg = f'no contour passes through a cell with case {case}'
        raise ValueError(msg)
    if case == MS_MASK_TL_BR:
        if previous_case in MS_SADDLE_TL_BR_RIGHT_AFTER:
            return Direction.RIGHT
        return Direction.LEFT
    if case == MS_MASK_TR_BL:
        if previous_case in MS_SADDLE_TR_BL_UP_AFTER:
            return Direction.UP
        return Direction.DOWN
    direction = _CASE_DIRECTIONS[case]
    if direction is None:
        msg = f'no direction rule for case {case}'
        raise ValueError(msg)
    return direction


def exit_point(direction: Direction, p1: Point, p2: Point) -> Point:
    """Crossing point that lies furthest along the direction of travel."""
    if direction is Direction.RIGHT:
        return p2 if p1[0] < p2[0] else p1
    if direction is Direction.LEFT:
        return p2 if p2[0] < p1[0] else p1
    if direction is Direction.UP:
        return p2 if p2[1] < p1[1] else p1
    return p2 if p1[1] < p2[1] else p1


@dataclass
class Polygon:
    """Outer contour with optional holes nested inside it."""

    outer: list[Point]
    holes: list[list[Point]] = field(default_factory=list)

    @property
    def rings(self) -> list[list[Point]]:
        return [self.outer, *self.holes]


class _ChainWalker:
    """Call-scoped walk state: consumed-cell matrix and saddle pass counters."""

    def __init__(self, grid: Grid, cell_size: float) -> None:
        self.grid = grid
        self.cell_size = cell_size
        self.visited = np.zeros((grid.height, grid.width), dtype=bool)
        self.passes = np.zeros((grid.height, grid.width), dtype=np.uint8)
        self.step_budget = grid.width * grid.height + grid.saddle_count()

    def _consume(self, x: int, y: int, case: int, previous_case: int) -> None:
        self.passes[y, x] += 1
        if (
            case not in MS_SADDLE_CASES
            or previous_case == case
            or self.passes[y, x] >= MS_SADDLE_MAX_PASSES
        ):
            self.visited[y, x] = True

    def walk(self, i: int, j: int) -> list[Point]:
        grid = self.grid
        step_x = 0
        step_y = 0
        cur_x, cur_y = i, j
        case = grid.case_at(i, j)
        points: list[Point] = []
        steps = 0

        while True:
            previous_case = case
            cell = grid.cell(cur_x, cur_y)
            case = cell.case
            if cell.is_trivial or cell.p1 is None or cell.p2 is None:
                logger.warning(
                    'Chain from cell (%d, %d) ran into trivial cell (%d, %d); '
                    'emitting %d points',
                    i,
                    j,
                    cur_x,
                    cur_y,
                    len(points),
                )
                break

            # Unwrapped offset keeps a chain continuous across a wrapped border
            p1 = cell_to_world(i + step_x, j + step_y, cell.p1, self.cell_size)
            p2 = cell_to_world(i + step_x, j + step_y, cell.p2, self.cell_size)

            self._consume(cur_x, cur_y, case, previous_case)
            if not points:
                points.append(p1)

            direction = step_direction(case, previous_case)
            points.append(exit_point(direction, p1, p2))

            step_x += direction.dx
            step_y += direction.dy
            steps += 1

            nxt = grid.wrap(i + step_x, j + step_y)
            if nxt is None:
                logger.warning(
                    'Chain from cell (%d, %d) left the clamped grid after %d steps; '
                    'emitting open sequence of %d points',
                    i,
                    j,
                    steps,
                    len(points),
                )
                break
            cur_x, cur_y = nxt
            if self.visited[cur_y, cur_x]:
                if (cur_x, cur_y) != (i, j):
                    logger.warning(
                        'Chain from cell (%d, %d) stopped at consumed cell (%d, %d) '
                        'after %d steps; emitting open sequence of %d points',
                        i,
                        j,
                        cur_x,
                        cur_y,
                        steps,
                        len(points),
                    )
                break
            if steps >= self.step_budget:
                msg = (
                    f'contour chain from cell ({i}, {j}) did not close within '
                    f'{self.step_budget} steps'
                )
                raise RuntimeError(msg)

        return points


def _nest_last_outer(polygons: list[Polygon], chain: list[Point]) -> None:
    if polygons:
        last = polygons[-1]
        if all(point_in_polygon(p, last.outer) for p in chain):
            last.holes.append(chain)
            return
    polygons.append(Polygon(outer=chain))


def _nest_any_outer(
    polygons: list[Polygon],
    bboxes: list[tuple[float, float, float, float]],
    chain: list[Point],
) -> None:
    for idx in range(len(polygons) - 1, -1, -1):
        bbox = bboxes[idx]
        if not all(bbox_contains(bbox, p) for p in chain):
            continue
        if all(point_in_polygon(p, polygons[idx].outer) for p in chain):
            polygons[idx].holes.append(chain)
            return
    polygons.append(Polygon(outer=chain))
    bboxes.append(polygon_bbox(chain))


def trace_polygons(
    grid: Grid,
    cell_size: float,
    *,
    hole_nesting: HoleNesting = HoleNesting.LAST_OUTER,
) -> list[Polygon]:
    """
    Walk a classified grid into polygons with holes.

    Args:
        grid: Classified cells.
        cell_size: World units per cell.
        hole_nesting: LAST_OUTER tests a new sequence against the most recently
            emitted outer contour only; ANY_OUTER tests every outer contour
            found so far, most recent first.

    Returns:
        Polygons in discovery order; ``outer`` is the first sequence found,
        ``holes`` the sequences nested inside it.

    """
    cell_size = validate_cell_size(cell_size)
    hole_nesting = HoleNesting(hole_nesting)
    walker = _ChainWalker(grid, cell_size)
    polygons: list[Polygon] = []
    bboxes: list[tuple[float, float, float, float]] = []
    chains = 0

    for j in range(grid.height):
        for i in range(grid.width):
            if walker.visited[j, i]:
                continue
            case = grid.case_at(i, j)
            if case in MS_NO_CONTOUR_CASES:
                continue
            # Half-consumed saddle: its other strand is reached from a neighbour
            if case in MS_SADDLE_CASES and walker.passes[j, i] > 0:
                continue
            chain = walker.walk(i, j)
            if not chain:
                continue
            chains += 1
            if hole_nesting == HoleNesting.ANY_OUTER:
                _nest_any_outer(polygons, bboxes, chain)
            else:
                _nest_last_outer(polygons, chain)

    logger.debug(
        'Traced %d chains into %d polygons from %s',
        chains,
        len(polygons),
        grid,
    )
    return polygons
