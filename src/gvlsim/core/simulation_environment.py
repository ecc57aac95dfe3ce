"""Core simulation environment wrapper around SimPy."""

import logging
from typing import Any, Callable, Optional

import simpy

logger = logging.getLogger(__name__)


class SimulationEnvironment:
    """Wrapper around simpy.Environment that drives tick-based simulation processes.

    The scheduler expresses its per-tick loop as a SimPy process that yields a
    timeout of one tick per step. SimPy orders events deterministically, so a
    run with the same processes always produces the same event sequence.
    """

    def __init__(self) -> None:
        self.env: simpy.Environment = simpy.Environment()
        self.active_processes: list = []

        logger.debug("SimulationEnvironment initialized")

    def schedule_process(self, process_generator_func: Callable, *args, **kwargs) -> simpy.Process:
        """Schedule a SimPy process (a generator function).

        Args:
            process_generator_func: A generator function that yields SimPy events
            *args: Positional arguments for the generator function
            **kwargs: Keyword arguments for the generator function

        Returns:
            The SimPy Process object
        """
        process = self.env.process(process_generator_func(*args, **kwargs))
        self.active_processes.append(process)
        logger.debug(f"Scheduled process: {process_generator_func.__name__}")
        return process

    def step(self) -> simpy.Timeout:
        """Event that fires after one tick of simulated time."""
        return self.env.timeout(1)

    def run(self, until: Optional[Any] = None) -> None:
        """Run the simulation until no events remain, or until ``until``.

        Exceptions raised inside a process propagate to the caller after
        being logged with the simulation time at which they occurred.
        """
        try:
            self.env.run(until=until)
        except Exception as e:
            logger.error(f"Error during simulation at time {self.env.now}: {e}")
            raise
        logger.debug(f"Simulation ended at time {self.env.now}")

    def now(self) -> int:
        """Get the current simulation time in ticks."""
        return self.env.now
