"""Tests for field_io module."""

import json

import numpy as np
import pytest

from contours.builder import run_extraction
from domain.models import ContourSettings
from field_io import load_field, result_to_dict, write_result_json
from shared.constants import BoundaryMode, OutputKind


class TestLoadField:
    """Tests for load_field."""

    def test_npy(self, tmp_path, square_blob):
        path = tmp_path / 'field.npy'
        np.save(path, square_blob)
        field = load_field(path)
        assert field.dtype == np.float64
        np.testing.assert_array_equal(field, square_blob)

    def test_csv(self, tmp_path):
        path = tmp_path / 'field.csv'
        path.write_text('0,1,2\n3,4,5\n', encoding='utf-8')
        field = load_field(str(path))
        assert field.shape == (2, 3)
        assert field[1, 2] == 5.0

    def test_txt_single_row(self, tmp_path):
        path = tmp_path / 'field.txt'
        path.write_text('0.5 1.5 2.5\n', encoding='utf-8')
        assert load_field(path).shape == (1, 3)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_field(tmp_path / 'absent.npy')

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / 'field.png'
        path.write_bytes(b'\x89PNG')
        with pytest.raises(ValueError, match='Unsupported'):
            load_field(path)


class TestResultJson:
    """Tests for result serialisation."""

    def test_polygons(self, ring_field):
        settings = ContourSettings(boundary_mode=BoundaryMode.CLAMPED, cell_size=2.0)
        data = result_to_dict(run_extraction(ring_field, settings))
        assert data['kind'] == 'polygons'
        assert (data['width'], data['height'], data['cell_size']) == (7, 7, 2.0)
        level = data['levels'][0]
        assert level['index'] == 0
        assert level['threshold'] == 0.5
        assert len(level['polygons']) == 1
        assert len(level['polygons'][0]['holes']) == 1
        assert all(len(p) == 2 for p in level['polygons'][0]['outer'])

    def test_segments(self, square_blob):
        settings = ContourSettings(
            output_kind=OutputKind.SEGMENTS, boundary_mode=BoundaryMode.CLAMPED
        )
        data = result_to_dict(run_extraction(square_blob, settings))
        segments = data['levels'][0]['segments']
        assert len(segments) == 8
        assert segments[0] == [1.5, 1.0, 1.0, 1.5]

    def test_write_result_json(self, tmp_path, square_blob):
        result = run_extraction(square_blob, ContourSettings())
        path = write_result_json(result, tmp_path / 'out' / 'result.json')
        data = json.loads(path.read_text(encoding='utf-8'))
        assert data == json.loads(json.dumps(result_to_dict(result)))
