"""
Unit tests for the SimPy environment wrapper.
"""

import pytest

from gvlsim.core import SimulationEnvironment


class TestSimulationEnvironment:
    """Test tick stepping and error propagation."""

    def test_starts_at_zero(self):
        assert SimulationEnvironment().now() == 0

    def test_runs_process_to_completion(self):
        sim_env = SimulationEnvironment()
        seen = []

        def ticker(count):
            for _ in range(count):
                seen.append(sim_env.now())
                yield sim_env.step()

        sim_env.schedule_process(ticker, 4)
        sim_env.run()

        assert seen == [0, 1, 2, 3]
        assert sim_env.now() == 4
        assert len(sim_env.active_processes) == 1

    def test_run_until(self):
        sim_env = SimulationEnvironment()

        def forever():
            while True:
                yield sim_env.step()

        sim_env.schedule_process(forever)
        sim_env.run(until=10)

        assert sim_env.now() == 10

    def test_process_errors_propagate(self):
        sim_env = SimulationEnvironment()

        def failing():
            yield sim_env.step()
            raise RuntimeError("boom")

        sim_env.schedule_process(failing)
        with pytest.raises(RuntimeError, match="boom"):
            sim_env.run()
