import math

from pydantic import BaseModel, field_validator

from contours.builder import cell_size_for_scale
from shared.constants import (
    CONTOUR_PARALLEL_WORKERS,
    DEFAULT_BOUNDARY_MODE,
    DEFAULT_CELL_SIZE,
    DEFAULT_THRESHOLD,
    BoundaryMode,
    HoleNesting,
    OutputKind,
)


class ContourSettings(BaseModel):
    """Parameters of one extraction run, loadable from a TOML profile."""

    model_config = {
        'extra': 'ignore',  # игнорировать лишние поля из профилей
    }

    # Пороги (уровни изолиний), порядок сохраняется в результате
    thresholds: list[float] = [DEFAULT_THRESHOLD]

    # Размер ячейки в мировых единицах
    cell_size: float = DEFAULT_CELL_SIZE
    # Ширина результата в мировых единицах; если задана, заменяет cell_size
    output_scale: float | None = None

    boundary_mode: BoundaryMode = DEFAULT_BOUNDARY_MODE
    hole_nesting: HoleNesting = HoleNesting.LAST_OUTER
    output_kind: OutputKind = OutputKind.POLYGONS

    # Число потоков для независимых уровней
    parallel_workers: int = CONTOUR_PARALLEL_WORKERS

    @field_validator('thresholds')
    @classmethod
    def validate_thresholds(cls, v: list[float]) -> list[float]:
        if not v:
            msg = 'Нужен хотя бы один порог'
            raise ValueError(msg)
        for t in v:
            if not math.isfinite(t):
                msg = f'Порог должен быть конечным числом: {t}'
                raise ValueError(msg)
        return v

    @field_validator('cell_size')
    @classmethod
    def validate_cell_size(cls, v: float) -> float:
        v = float(v)
        if not math.isfinite(v) or v <= 0.0:
            msg = 'cell_size должен быть положительным'
            raise ValueError(msg)
        return v

    @field_validator('output_scale')
    @classmethod
    def validate_output_scale(cls, v: float | None) -> float | None:
        if v is None:
            return v
        v = float(v)
        if not math.isfinite(v) or v <= 0.0:
            msg = 'output_scale должен быть положительным'
            raise ValueError(msg)
        return v

    @field_validator('parallel_workers')
    @classmethod
    def validate_parallel_workers(cls, v: int) -> int:
        v = int(v)
        if v < 1:
            msg = 'parallel_workers не может быть меньше 1'
            raise ValueError(msg)
        return v

    def effective_cell_size(self, grid_width: int) -> float:
        """World units per cell for a field of ``grid_width`` columns."""
        if self.output_scale is not None:
            return cell_size_for_scale(self.output_scale, grid_width)
        return self.cell_size
