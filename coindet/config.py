"""
Configuration management for coindet
"""

import copy
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml


DEFAULT_CONFIG = {
    "preprocessing": {
        "gauss_kernel": 9,
        "gauss_sigma": 2.0,
        "canny_low": 100,
        "canny_high": 200
    },
    "detection": {
        "hough_dp": 1.0,
        "hough_min_dist": 47.0,
        "hough_param1": 200,
        "hough_param2": 32,
        "min_radius": 10,
        "max_radius": 200
    },
    "evaluation": {
        "match_tolerance_px": 20.0,
        "radius_tolerance": 0.4
    }
}

# Tolerances used by the command line front end.
CLI_EVALUATION = {
    "match_tolerance_px": 25.0,
    "radius_tolerance": 0.5
}


@dataclass(frozen=True)
class DetectorConfig:
    """Immutable tuning for :class:`coindet.detection.CircleDetector`."""

    gauss_kernel: int = 9
    gauss_sigma: float = 2.0
    canny_low: int = 100
    canny_high: int = 200
    hough_dp: float = 1.0
    hough_min_dist: float = 47.0
    hough_param1: int = 200
    hough_param2: int = 32
    min_radius: int = 10
    max_radius: int = 200

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'DetectorConfig':
        """Build from a config with ``preprocessing`` and ``detection`` sections."""
        values = {}
        values.update(config.get("preprocessing", {}))
        values.update(config.get("detection", {}))
        return cls(**_checked(cls, values))


@dataclass(frozen=True)
class EvaluatorConfig:
    """Immutable matching tolerances."""

    match_tolerance_px: float = 20.0
    radius_tolerance: float = 0.4

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'EvaluatorConfig':
        """Build from a config with an ``evaluation`` section."""
        return cls(**_checked(cls, dict(config.get("evaluation", {}))))


def _checked(cls, values: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(cls)}
    for key in values:
        if key not in known:
            raise ValueError(f"Unknown configuration key '{key}' for {cls.__name__}")
    return values


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Union[str, Path]] = None,
                base: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Load a YAML configuration file on top of the defaults.

    Args:
        path: YAML file; ``None`` returns a copy of the base
        base: Configuration to merge onto, DEFAULT_CONFIG if omitted

    Returns:
        Merged configuration dictionary
    """
    base = DEFAULT_CONFIG if base is None else base
    if path is None:
        return copy.deepcopy(base)

    with open(path, 'r') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")

    for section, values in data.items():
        if section not in DEFAULT_CONFIG:
            raise ValueError(f"Unknown configuration section '{section}' in {path}")
        if not isinstance(values, dict):
            raise ValueError(f"Configuration section '{section}' in {path} must be a mapping")

    return merge_config(base, data)


def build_configs(config: Dict[str, Any]) -> Tuple[DetectorConfig, EvaluatorConfig]:
    """Split a merged configuration into detector and evaluator settings."""
    return DetectorConfig.from_dict(config), EvaluatorConfig.from_dict(config)
