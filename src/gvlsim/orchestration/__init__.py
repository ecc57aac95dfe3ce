"""Experiment orchestration module."""

from .experiment_orchestrator import ExperimentOrchestrator

__all__ = ["ExperimentOrchestrator"]
