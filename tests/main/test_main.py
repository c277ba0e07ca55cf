"""Tests for the command line entry point."""

import json

import numpy as np

from main import build_parser, main, resolve_settings
from shared.constants import BoundaryMode, OutputKind


class TestParser:
    def test_repeated_thresholds(self):
        args = build_parser().parse_args(['f.npy', '-t', '0.2', '-t', '0.8'])
        assert args.thresholds == [0.2, 0.8]

    def test_resolve_settings_overrides(self):
        args = build_parser().parse_args(
            ['f.npy', '--boundary', 'clamped', '--output', 'segments', '--workers', '2']
        )
        settings = resolve_settings(args)
        assert settings.boundary_mode is BoundaryMode.CLAMPED
        assert settings.output_kind is OutputKind.SEGMENTS
        assert settings.parallel_workers == 2
        assert settings.thresholds == [0.5]

    def test_resolve_settings_from_profile_file(self, tmp_path):
        profile = tmp_path / 'p.toml'
        profile.write_text('[extraction]\nthresholds = [0.1, 0.9]\n', encoding='utf-8')
        args = build_parser().parse_args(['f.npy', '--profile', str(profile), '--cell-size', '3'])
        settings = resolve_settings(args)
        assert settings.thresholds == [0.1, 0.9]
        assert settings.cell_size == 3.0


class TestMain:
    def test_writes_json(self, tmp_path, ring_field):
        field_path = tmp_path / 'ring.npy'
        np.save(field_path, ring_field)
        out = tmp_path / 'result.json'

        code = main([str(field_path), '--boundary', 'clamped', '-o', str(out)])

        assert code == 0
        data = json.loads(out.read_text(encoding='utf-8'))
        assert data['kind'] == 'polygons'
        assert len(data['levels'][0]['polygons']) == 1

    def test_writes_stdout(self, tmp_path, square_blob, capsys):
        field_path = tmp_path / 'blob.csv'
        np.savetxt(field_path, square_blob, delimiter=',')

        code = main([str(field_path), '--output', 'segments', '-t', '0.5', '-t', '5'])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert [lv['threshold'] for lv in data['levels']] == [0.5, 5.0]
        assert data['levels'][1]['segments'] == []

    def test_missing_field_returns_error(self, tmp_path):
        assert main([str(tmp_path / 'missing.npy')]) == 1

    def test_invalid_settings_return_error(self, tmp_path, square_blob):
        field_path = tmp_path / 'blob.npy'
        np.save(field_path, square_blob)
        assert main([str(field_path), '--cell-size', '-1']) == 1
