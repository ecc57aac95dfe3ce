"""
Configuration validation for simulation experiments.

This module provides validation for:
- Simulation thread configuration
- Metrics output configuration
- Visualization output configuration
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from ..workload.catalog import DEFAULT_CATALOG, WorkloadCatalog

logger = logging.getLogger(__name__)

MIN_THREAD_COUNT = 1
MAX_THREAD_COUNT = 10
DEFAULT_THREAD_COUNT = 3
DEFAULT_PROFILE = "low-io"

DEFAULT_METRICS_CONFIG = {
    "percentiles_to_calculate": [0.5, 0.9, 0.99],
}


class ConfigurationError(ValueError):
    """Raised when configuration validation fails."""
    pass


def resolve_thread_list(simulation: Dict[str, Any]) -> List[str]:
    """Expand the simulation section into one profile key per thread.

    An explicit ``threads`` list wins; otherwise ``thread_count`` copies of
    ``default_profile`` are used.
    """
    if "threads" in simulation:
        return list(simulation["threads"])
    count = simulation.get("thread_count", DEFAULT_THREAD_COUNT)
    return [simulation.get("default_profile", DEFAULT_PROFILE)] * count


def worst_case_ticks(profile_keys: List[str], catalog: WorkloadCatalog = DEFAULT_CATALOG) -> int:
    """Upper bound on run length: every phase of every thread fully serialized."""
    return sum(catalog.lookup(key).total_duration for key in profile_keys)


class ExperimentConfigValidator:
    """Validates complete experiment configuration."""

    @classmethod
    def validate(
        cls, config: Any, catalog: WorkloadCatalog = DEFAULT_CATALOG
    ) -> Tuple[bool, List[str]]:
        """Validate complete experiment configuration."""
        all_errors = []

        if not isinstance(config, dict):
            all_errors.append("Configuration must be a mapping")
            return False, all_errors

        if "simulation" not in config:
            all_errors.append("Missing top-level field: simulation")
            return False, all_errors

        all_errors.extend(cls._validate_simulation(config["simulation"], catalog))
        all_errors.extend(cls._validate_metrics(config.get("metrics_config") or {}))
        all_errors.extend(cls._validate_visualization(config.get("visualization") or {}))

        return len(all_errors) == 0, all_errors

    @classmethod
    def _validate_simulation(cls, simulation: Any, catalog: WorkloadCatalog) -> List[str]:
        """Validate simulation configuration."""
        errors = []

        if not isinstance(simulation, dict):
            errors.append("simulation must be a mapping")
            return errors

        if "threads" in simulation:
            threads = simulation["threads"]
            if not isinstance(threads, list):
                errors.append("simulation.threads must be a list of profile keys")
                return errors
            non_strings = [i for i, key in enumerate(threads) if not isinstance(key, str)]
            if non_strings:
                errors.append(f"simulation.threads has non-string entries at positions {non_strings}")
                return errors
        else:
            count = simulation.get("thread_count", DEFAULT_THREAD_COUNT)
            if isinstance(count, bool) or not isinstance(count, int):
                errors.append(f"Invalid thread_count: {count!r}")
                return errors
            if not MIN_THREAD_COUNT <= count <= MAX_THREAD_COUNT:
                errors.append(
                    f"Invalid thread_count: {count} (should be {MIN_THREAD_COUNT}-{MAX_THREAD_COUNT})"
                )
            default_profile = simulation.get("default_profile", DEFAULT_PROFILE)
            if not isinstance(default_profile, str):
                errors.append(f"Invalid default_profile: {default_profile!r}")
                return errors

        keys = resolve_thread_list(simulation)
        unknown = sorted({key for key in keys if key not in catalog})
        if unknown:
            errors.append(
                f"Unknown profile(s): {', '.join(unknown)}. Valid profiles are: {', '.join(catalog.keys())}"
            )
            return errors

        if "max_ticks" in simulation:
            max_ticks = simulation["max_ticks"]
            if isinstance(max_ticks, bool) or not isinstance(max_ticks, int) or max_ticks <= 0:
                errors.append(f"Invalid max_ticks: {max_ticks!r}")
            else:
                demand = worst_case_ticks(keys, catalog)
                if demand > max_ticks:
                    errors.append(
                        f"Worst-case run length {demand} ticks exceeds max_ticks {max_ticks}"
                    )

        return errors

    @classmethod
    def _validate_metrics(cls, metrics_config: Any) -> List[str]:
        """Validate metrics configuration."""
        errors = []

        if not isinstance(metrics_config, dict):
            errors.append("metrics_config must be a mapping")
            return errors

        for p in metrics_config.get("percentiles_to_calculate", []):
            if isinstance(p, bool) or not isinstance(p, (int, float)) or not 0 < p < 1:
                errors.append(f"Invalid percentile: {p!r} (should be between 0 and 1)")

        return errors

    @classmethod
    def _validate_visualization(cls, visualization: Any) -> List[str]:
        errors = []
        if not isinstance(visualization, dict):
            errors.append("visualization must be a mapping")
        return errors


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load a YAML or JSON configuration file, chosen by suffix."""
    config_file = Path(config_path)

    with open(config_file) as f:
        if config_file.suffix in [".yaml", ".yml"]:
            return yaml.safe_load(f)
        return json.load(f)


def validate_and_fix_config(config_path: str) -> Tuple[bool, List[str], Optional[Dict[str, Any]]]:
    """
    Load, validate, and attempt to fix a configuration file.

    Returns:
        (is_valid, errors, fixed_config)
    """
    config = load_config_file(config_path)

    if isinstance(config, dict) and "metrics_config" not in config:
        config["metrics_config"] = dict(DEFAULT_METRICS_CONFIG)
        logger.warning("Added missing metrics_config with default percentiles")

    is_valid, errors = ExperimentConfigValidator.validate(config)

    if not is_valid:
        logger.warning(f"Configuration has {len(errors)} validation errors")
        for error in errors[:10]:
            logger.warning(f"  - {error}")
        if len(errors) > 10:
            logger.warning(f"  ... and {len(errors) - 10} more errors")

    return is_valid, errors, config
