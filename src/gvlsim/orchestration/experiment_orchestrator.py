"""Experiment orchestrator for managing simulation execution."""

import json
import logging
from pathlib import Path
from pprint import pformat
from typing import Any, Dict, List, Optional

import yaml

from ..metrics import MetricsCollector
from ..scheduler import ContentionScheduler, SimulationResult
from ..utils.config_validator import (
    ConfigurationError,
    ExperimentConfigValidator,
    resolve_thread_list,
)
from ..visualization import plot_timelines
from ..workload import DEFAULT_CATALOG, WorkloadCatalog

logger = logging.getLogger(__name__)


class ExperimentOrchestrator:
    """Main entry point to set up and run simulation experiments."""

    def __init__(self, config_data: Dict[str, Any], catalog: WorkloadCatalog = DEFAULT_CATALOG):
        """Initialize the orchestrator with experiment configuration.

        Args:
            config_data: Complete experiment configuration dictionary
            catalog: Profile catalog used to resolve thread profiles
        """
        self.config = config_data
        self.catalog = catalog
        self._validate_config()

        self.profile_keys: List[str] = resolve_thread_list(self.config["simulation"])
        self.scheduler = ContentionScheduler(catalog)
        self.metrics_collector = MetricsCollector(self.config.get("metrics_config") or {})
        self.result: Optional[SimulationResult] = None

        logger.info(f"ExperimentOrchestrator initialized with {len(self.profile_keys)} threads")

    def _validate_config(self) -> None:
        """Validate the experiment configuration structure."""
        if not isinstance(self.config, dict):
            raise ConfigurationError("Configuration must be a mapping")

        if "simulation" not in self.config:
            raise ConfigurationError("Missing required configuration section: simulation")

        simulation = self.config["simulation"]
        if not isinstance(simulation, dict):
            raise ConfigurationError("simulation section must be a mapping")

        if "threads" not in simulation and "thread_count" not in simulation:
            raise ConfigurationError("simulation.threads or simulation.thread_count is required")

        # Includes the max_ticks demand check: the scheduler itself has no cancellation
        is_valid, errors = ExperimentConfigValidator.validate(self.config, self.catalog)
        if not is_valid:
            raise ConfigurationError("Invalid configuration: " + "; ".join(errors))

        logger.info("Configuration validated successfully")

    def run(self) -> Dict[str, Any]:
        """Run the complete simulation experiment.

        Returns:
            Summary report dictionary
        """
        logger.info("=" * 60)
        logger.info("STARTING SIMULATION EXPERIMENT")
        logger.info("=" * 60)
        logger.debug(f"Configuration: {pformat(self.config)}")

        self.result = self.scheduler.simulate(self.profile_keys)
        summary_report = self.metrics_collector.generate_summary_report(self.result)

        self._save_outputs(summary_report)

        logger.info("=" * 60)
        logger.info("SIMULATION EXPERIMENT COMPLETED")
        logger.info("=" * 60)

        return summary_report

    def _save_outputs(self, summary_report: Dict[str, Any]) -> None:
        """Write whichever report files the configuration asks for."""
        metrics_config = self.config.get("metrics_config") or {}

        summary_path = metrics_config.get("output_summary_json_path")
        if summary_path:
            summary_file = Path(summary_path)
            summary_file.parent.mkdir(parents=True, exist_ok=True)
            with open(summary_file, "w") as f:
                json.dump(summary_report, f, indent=2)
            logger.info(f"Saved summary report to {summary_file}")

        segments_path = metrics_config.get("output_segments_csv_path")
        if segments_path:
            csv_file = Path(segments_path)
            csv_file.parent.mkdir(parents=True, exist_ok=True)
            self.metrics_collector.get_segments_df(self.result).to_csv(csv_file, index=False)
            logger.info(f"Saved timeline segments to {csv_file}")

        threads_path = metrics_config.get("output_threads_csv_path")
        if threads_path:
            csv_file = Path(threads_path)
            csv_file.parent.mkdir(parents=True, exist_ok=True)
            self.metrics_collector.get_per_thread_metrics_df(self.result).to_csv(csv_file, index=False)
            logger.info(f"Saved per-thread metrics to {csv_file}")

        plot_path = (self.config.get("visualization") or {}).get("output_plot_path")
        if plot_path:
            plot_timelines(self.result, plot_path)

    @classmethod
    def from_yaml_file(cls, config_path: str) -> "ExperimentOrchestrator":
        """Create an orchestrator from a YAML configuration file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            ExperimentOrchestrator instance
        """
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f)

        return cls(config_data)

    @classmethod
    def from_json_file(cls, config_path: str) -> "ExperimentOrchestrator":
        """Create an orchestrator from a JSON configuration file.

        Args:
            config_path: Path to JSON configuration file

        Returns:
            ExperimentOrchestrator instance
        """
        with open(config_path, "r") as f:
            config_data = json.load(f)

        return cls(config_data)
