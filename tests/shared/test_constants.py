"""Tests for constants module."""

from shared.constants import (
    BOUNDARY_MODE_LABELS,
    MS_CASE_COUNT,
    MS_NO_CONTOUR_CASES,
    MS_SADDLE_CASES,
    MS_SADDLE_TL_BR_RIGHT_AFTER,
    MS_SADDLE_TR_BL_UP_AFTER,
    BoundaryMode,
    HoleNesting,
)


class TestMarchingSquaresConstants:
    def test_case_count(self):
        assert MS_CASE_COUNT == 16

    def test_trivial_and_saddle_cases(self):
        assert MS_NO_CONTOUR_CASES == {0, 15}
        assert MS_SADDLE_CASES == (5, 10)

    def test_saddle_histories(self):
        assert MS_SADDLE_TL_BR_RIGHT_AFTER == (2, 6, 14)
        assert MS_SADDLE_TR_BL_UP_AFTER == (1, 3, 7)


class TestEnums:
    def test_string_values(self):
        assert BoundaryMode('wrapped') is BoundaryMode.WRAPPED
        assert HoleNesting('any_outer') is HoleNesting.ANY_OUTER

    def test_every_boundary_mode_labelled(self):
        assert set(BOUNDARY_MODE_LABELS) == set(BoundaryMode)
