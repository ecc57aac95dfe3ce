"""Core simulation environment module."""

from .simulation_environment import SimulationEnvironment

__all__ = ["SimulationEnvironment"]
