"""Integration tests for the command-line interface."""

import json

import yaml
from click.testing import CliRunner

from gvlsim.cli import cli


class TestSimulateCommand:
    def test_text_output(self):
        result = CliRunner().invoke(cli, ["simulate", "low-io", "heavy-io"])

        assert result.exit_code == 0
        assert "Thread 1 (low-io): Total: 120ms  Blocked: 0ms  Active: 120ms" in result.output
        assert "Thread 2 (heavy-io): Total: 580ms  Blocked: 20ms  Active: 560ms" in result.output
        assert "Total Blocked Time: 20ms" in result.output

    def test_json_output(self):
        result = CliRunner().invoke(cli, ["simulate", "--json", "low-io"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["elapsed_ticks"] == 120
        assert data["timelines"][0][0] == {"state": "cpu", "start_time": 0, "duration": 20}

    def test_unknown_profile(self):
        result = CliRunner().invoke(cli, ["simulate", "low-io", "bogus"])

        assert result.exit_code == 1
        assert "bogus" in result.output

    def test_plot(self, tmp_path):
        plot_file = tmp_path / "timeline.png"
        result = CliRunner().invoke(cli, ["simulate", "low-io", "low-io", "--plot", str(plot_file)])

        assert result.exit_code == 0
        assert plot_file.exists()


class TestConfigCommands:
    def test_profiles(self):
        result = CliRunner().invoke(cli, ["profiles"])

        assert result.exit_code == 0
        assert "low-io" in result.output
        assert "CPU 10, IO 500, CPU 50 (total 560)" in result.output

    def test_generate_validate_run(self, tmp_path):
        runner = CliRunner()
        config_file = tmp_path / "config.yaml"

        result = runner.invoke(cli, ["generate-config", "-o", str(config_file)])
        assert result.exit_code == 0

        # Keep outputs inside the temporary directory
        config = yaml.safe_load(config_file.read_text())
        config["metrics_config"]["output_summary_json_path"] = str(tmp_path / "summary.json")
        del config["metrics_config"]["output_segments_csv_path"]
        del config["metrics_config"]["output_threads_csv_path"]
        del config["visualization"]
        config_file.write_text(yaml.dump(config))

        result = runner.invoke(cli, ["validate", str(config_file)])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

        result = runner.invoke(cli, ["run", str(config_file)])
        assert result.exit_code == 0
        assert "Simulation completed!" in result.output
        assert (tmp_path / "summary.json").exists()

    def test_validate_reports_errors(self, tmp_path):
        config_file = tmp_path / "bad.json"
        config_file.write_text(json.dumps({"simulation": {"thread_count": 42}}))

        result = CliRunner().invoke(cli, ["validate", str(config_file)])

        assert result.exit_code == 1
        assert "thread_count" in result.output

    def test_run_reports_errors(self, tmp_path):
        config_file = tmp_path / "bad.json"
        config_file.write_text(json.dumps({"simulation": {}}))

        result = CliRunner().invoke(cli, ["run", "--format", "json", str(config_file)])

        assert result.exit_code == 1
        assert "Error:" in result.output
