from __future__ import annotations

from typing import TYPE_CHECKING

from shared.constants import CELL_CENTER_OFFSET

if TYPE_CHECKING:
    from collections.abc import Sequence

Point = tuple[float, float]


def cell_to_world(
    i: int,
    j: int,
    local: Point,
    cell_size: float,
) -> Point:
    """
    Map a cell-local point in [0, 1] x [0, 1] of cell (i, j) to world space.

    A half-cell offset is applied uniformly so that a grid sample sits at the
    centre of its world square.
    """
    x_offset = i * cell_size
    y_offset = j * cell_size
    return (
        x_offset + cell_size * (local[0] + CELL_CENTER_OFFSET),
        y_offset + cell_size * (local[1] + CELL_CENTER_OFFSET),
    )


def point_in_polygon(point: Point, vertices: Sequence[Point]) -> bool:
    """
    Even-odd ray casting test.

    A horizontal ray is cast from ``point`` towards +x and the number of polygon
    edges it crosses is counted; an odd count means inside. Points lying exactly
    on an edge or vertex get whatever classification the parity rule yields.
    """
    x, y = point
    inside = False
    n = len(vertices)
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i]
        xj, yj = vertices[j]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def polygon_bbox(vertices: Sequence[Point]) -> tuple[float, float, float, float]:
    """Return (min_x, min_y, max_x, max_y) of a non-empty vertex list."""
    if not vertices:
        msg = 'polygon_bbox requires at least one vertex'
        raise ValueError(msg)
    xs = [p[0] for p in vertices]
    ys = [p[1] for p in vertices]
    return min(xs), min(ys), max(xs), max(ys)


def bbox_contains(
    bbox: tuple[float, float, float, float],
    point: Point,
) -> bool:
    min_x, min_y, max_x, max_y = bbox
    return min_x <= point[0] <= max_x and min_y <= point[1] <= max_y
