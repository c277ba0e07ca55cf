"""Tests for TOML sectioned profile mapping layer."""

import tomlkit

from domain.models import ContourSettings
from domain.toml_sections import (
    SECTION_MAP,
    flat_to_sectioned,
    sectioned_to_flat,
)


class TestFlatToSectioned:
    """Tests for flat_to_sectioned()."""

    def test_creates_expected_sections(self):
        flat = ContourSettings().model_dump(mode='json')
        result = flat_to_sectioned(flat)
        assert set(result) == {'extraction', 'grid', 'runtime'}

    def test_short_names(self):
        flat = ContourSettings(output_scale=10.0).model_dump(mode='json')
        result = flat_to_sectioned(flat)
        assert result['extraction']['output'] == 'polygons'
        assert result['grid']['scale'] == 10.0
        assert result['runtime']['workers'] == flat['parallel_workers']
        # Flat name must NOT be in grid section
        assert 'output_scale' not in result['grid']

    def test_none_values_dropped(self):
        flat = ContourSettings().model_dump(mode='json')
        result = flat_to_sectioned(flat)
        assert 'scale' not in result['grid']

    def test_unknown_key_goes_to_common(self):
        result = flat_to_sectioned({'custom': 1})
        assert result == {'common': {'custom': 1}}


class TestSectionedToFlat:
    """Tests for sectioned_to_flat()."""

    def test_expands_short_names(self):
        data = {
            'extraction': {'thresholds': [0.1], 'output': 'segments'},
            'grid': {'scale': 20.0},
            'runtime': {'workers': 2},
        }
        flat = sectioned_to_flat(data)
        assert flat == {
            'thresholds': [0.1],
            'output_kind': 'segments',
            'output_scale': 20.0,
            'parallel_workers': 2,
        }

    def test_unknown_section_passes_through(self):
        assert sectioned_to_flat({'common': {'x': 1}}) == {'x': 1}

    def test_flat_top_level_keys(self):
        """Old flat profiles keep working."""
        assert sectioned_to_flat({'cell_size': 3.0}) == {'cell_size': 3.0}


class TestRoundTripThroughToml:
    def test_settings_survive_toml_text(self):
        settings = ContourSettings(
            thresholds=[0.25, 0.75],
            cell_size=4.0,
            boundary_mode='clamped',
            hole_nesting='any_outer',
            parallel_workers=2,
        )
        text = tomlkit.dumps(flat_to_sectioned(settings.model_dump(mode='json')))
        assert '[extraction]' in text
        data = tomlkit.parse(text).unwrap()
        restored = ContourSettings.model_validate(sectioned_to_flat(data))
        assert restored == settings

    def test_every_field_mapped(self):
        mapped = {f for fields in SECTION_MAP.values() for f in fields}
        assert mapped == set(ContourSettings.model_fields)
