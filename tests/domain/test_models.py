"""Tests for domain.models module."""

import pytest
from pydantic import ValidationError

from domain.models import ContourSettings
from shared.constants import (
    CONTOUR_PARALLEL_WORKERS,
    DEFAULT_THRESHOLD,
    BoundaryMode,
    HoleNesting,
    OutputKind,
)


class TestContourSettingsDefaults:
    """Tests for default values."""

    def test_defaults(self):
        settings = ContourSettings()
        assert settings.thresholds == [DEFAULT_THRESHOLD]
        assert settings.cell_size == 1.0
        assert settings.output_scale is None
        assert settings.boundary_mode is BoundaryMode.WRAPPED
        assert settings.hole_nesting is HoleNesting.LAST_OUTER
        assert settings.output_kind is OutputKind.POLYGONS
        assert settings.parallel_workers == CONTOUR_PARALLEL_WORKERS

    def test_enum_values_from_strings(self):
        """Profiles store enums as their string values."""
        settings = ContourSettings(
            boundary_mode='clamped', hole_nesting='any_outer', output_kind='segments'
        )
        assert settings.boundary_mode is BoundaryMode.CLAMPED
        assert settings.hole_nesting is HoleNesting.ANY_OUTER
        assert settings.output_kind is OutputKind.SEGMENTS

    def test_extra_fields_ignored(self):
        settings = ContourSettings(legacy_option=True)
        assert not hasattr(settings, 'legacy_option')


class TestContourSettingsValidators:
    """Tests for ContourSettings validators."""

    def test_thresholds_keep_order(self):
        settings = ContourSettings(thresholds=[0.9, 0.1, 0.5])
        assert settings.thresholds == [0.9, 0.1, 0.5]

    def test_empty_thresholds(self):
        with pytest.raises(ValidationError):
            ContourSettings(thresholds=[])

    @pytest.mark.parametrize('value', [float('nan'), float('inf')])
    def test_non_finite_threshold(self, value):
        with pytest.raises(ValidationError):
            ContourSettings(thresholds=[0.5, value])

    @pytest.mark.parametrize('value', [0.0, -2.0, float('inf')])
    def test_bad_cell_size(self, value):
        with pytest.raises(ValidationError):
            ContourSettings(cell_size=value)

    def test_bad_output_scale(self):
        with pytest.raises(ValidationError):
            ContourSettings(output_scale=-1.0)

    def test_bad_workers(self):
        with pytest.raises(ValidationError):
            ContourSettings(parallel_workers=0)

    def test_unknown_boundary_mode(self):
        with pytest.raises(ValidationError):
            ContourSettings(boundary_mode='mirror')


class TestEffectiveCellSize:
    def test_uses_cell_size_without_scale(self):
        assert ContourSettings(cell_size=2.5).effective_cell_size(100) == 2.5

    def test_scale_overrides_cell_size(self):
        settings = ContourSettings(cell_size=2.5, output_scale=50.0)
        assert settings.effective_cell_size(100) == pytest.approx(0.5)
