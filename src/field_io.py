"""Reading scalar fields from disk and writing extraction results."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np

from shared.constants import OutputKind

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from contours.builder import ExtractionResult

logger = logging.getLogger(__name__)

NPY_SUFFIX = '.npy'
TEXT_SUFFIXES = ('.csv', '.txt')


def load_field(path: str | Path) -> NDArray[np.float64]:
    """
    Load a 2D scalar field.

    ``.npy`` files are read with numpy.load; ``.csv`` / ``.txt`` files are
    comma separated (``.csv``) or whitespace separated (``.txt``) rows.
    """
    p = Path(path)
    if not p.exists():
        msg = f'Field file not found: {p}'
        raise FileNotFoundError(msg)
    suffix = p.suffix.lower()
    if suffix == NPY_SUFFIX:
        field = np.load(p, allow_pickle=False)
    elif suffix in TEXT_SUFFIXES:
        delimiter = ',' if suffix == '.csv' else None
        field = np.loadtxt(p, delimiter=delimiter, dtype=np.float64, ndmin=2)
    else:
        msg = f'Unsupported field format: {p.suffix!r} (expected .npy, .csv or .txt)'
        raise ValueError(msg)
    field = np.asarray(field, dtype=np.float64)
    logger.info('Loaded field %s with shape %s', p, field.shape)
    return field


def _points(points: list[tuple[float, float]]) -> list[list[float]]:
    return [[float(x), float(y)] for x, y in points]


def result_to_dict(result: ExtractionResult) -> dict[str, Any]:
    """Plain JSON-serialisable view of an extraction result."""
    levels: list[dict[str, Any]] = []
    for li, threshold in enumerate(result.levels):
        entry: dict[str, Any] = {'index': li, 'threshold': threshold}
        if result.kind == OutputKind.SEGMENTS:
            entry['segments'] = [
                [s.x1, s.y1, s.x2, s.y2] for s in result.segments.get(li, [])
            ]
        else:
            entry['polygons'] = [
                {
                    'outer': _points(poly.outer),
                    'holes': [_points(h) for h in poly.holes],
                }
                for poly in result.polygons.get(li, [])
            ]
        levels.append(entry)
    return {
        'kind': result.kind.value,
        'width': result.width,
        'height': result.height,
        'cell_size': result.cell_size,
        'levels': levels,
    }


def write_result_json(result: ExtractionResult, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(result_to_dict(result), indent=2), encoding='utf-8')
    logger.info('Result written to %s', p)
    return p
