"""Tests for config module."""

import dataclasses

import pytest
from coindet.config import (DEFAULT_CONFIG, DetectorConfig, EvaluatorConfig,
                            build_configs, load_config, merge_config)


class TestConfig:
    """Test configuration module."""

    def test_default_config_exists(self):
        """Test that default config exists."""
        assert isinstance(DEFAULT_CONFIG, dict)
        assert set(DEFAULT_CONFIG) == {'preprocessing', 'detection', 'evaluation'}

    def test_detector_defaults(self):
        """Dataclass defaults agree with the default dictionary."""
        detector_config, evaluator_config = build_configs(DEFAULT_CONFIG)
        assert detector_config == DetectorConfig()
        assert evaluator_config == EvaluatorConfig()
        assert detector_config.gauss_kernel == 9
        assert detector_config.gauss_sigma == 2.0
        assert detector_config.min_radius == 10
        assert detector_config.max_radius == 200

    def test_evaluation_defaults(self):
        """Library tolerances default to 20px and 40%."""
        config = EvaluatorConfig()
        assert config.match_tolerance_px == 20.0
        assert config.radius_tolerance == 0.4

    def test_configs_are_immutable(self):
        """Configs cannot be changed in place."""
        config = DetectorConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.gauss_kernel = 5

    def test_partial_override(self):
        """Overriding one key keeps the others."""
        config = DetectorConfig.from_dict({'detection': {'min_radius': 20}})
        assert config.min_radius == 20
        assert config.max_radius == 200

    def test_unknown_key_rejected(self):
        """Typos in keys are reported."""
        with pytest.raises(ValueError, match='min_raduis'):
            DetectorConfig.from_dict({'detection': {'min_raduis': 20}})

    def test_merge_does_not_mutate_base(self):
        """Merging returns a new dictionary."""
        merged = merge_config(DEFAULT_CONFIG, {'evaluation': {'radius_tolerance': 0.1}})
        assert merged['evaluation']['radius_tolerance'] == 0.1
        assert merged['evaluation']['match_tolerance_px'] == 20.0
        assert DEFAULT_CONFIG['evaluation']['radius_tolerance'] == 0.4


class TestLoadConfig:
    """Test YAML loading."""

    def test_no_path_returns_defaults(self):
        """Without a file the defaults are returned."""
        config = load_config()
        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_yaml_override(self, tmp_path):
        """YAML values are merged over the defaults."""
        path = tmp_path / 'config.yaml'
        path.write_text("preprocessing:\n  gauss_kernel: 5\nevaluation:\n  match_tolerance_px: 25\n")

        detector_config, evaluator_config = build_configs(load_config(path))
        assert detector_config.gauss_kernel == 5
        assert detector_config.gauss_sigma == 2.0
        assert evaluator_config.match_tolerance_px == 25

    def test_custom_base(self, tmp_path):
        """A caller supplied base replaces DEFAULT_CONFIG."""
        base = merge_config(DEFAULT_CONFIG, {'evaluation': {'radius_tolerance': 0.5}})
        path = tmp_path / 'config.yaml'
        path.write_text("detection:\n  max_radius: 80\n")

        config = load_config(path, base=base)
        assert config['evaluation']['radius_tolerance'] == 0.5
        assert config['detection']['max_radius'] == 80

    def test_empty_yaml(self, tmp_path):
        """An empty file means no overrides."""
        path = tmp_path / 'empty.yaml'
        path.write_text("")
        assert load_config(path) == DEFAULT_CONFIG

    def test_non_mapping_rejected(self, tmp_path):
        """A YAML list is not a configuration."""
        path = tmp_path / 'list.yaml'
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_config(path)

    def test_unknown_section_rejected(self, tmp_path):
        """Unknown top-level sections are reported."""
        path = tmp_path / 'bad.yaml'
        path.write_text("pitch:\n  length_meters: 105\n")
        with pytest.raises(ValueError, match='pitch'):
            load_config(path)

    def test_malformed_yaml_rejected(self, tmp_path):
        """YAML syntax errors are reported as ValueError."""
        path = tmp_path / 'broken.yaml'
        path.write_text("detection: [1, 2\n")
        with pytest.raises(ValueError, match='Invalid YAML'):
            load_config(path)

    def test_scalar_section_rejected(self, tmp_path):
        """A section must itself be a mapping."""
        path = tmp_path / 'scalar.yaml'
        path.write_text("evaluation: 5\n")
        with pytest.raises(ValueError, match='evaluation'):
            load_config(path)
