"""Command-line interface for GVLSim."""

import json
import logging
import sys
from pathlib import Path

import click
import yaml

from gvlsim.orchestration import ExperimentOrchestrator
from gvlsim.scheduler import ContentionScheduler
from gvlsim.utils.config_validator import validate_and_fix_config
from gvlsim.visualization import format_metrics_summary, plot_timelines
from gvlsim.workload import DEFAULT_CATALOG

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.version_option(version="0.1.0", prog_name="GVLSim")
def cli():
    """GVLSim: Visualize how threads contend for a global interpreter lock."""
    pass


@cli.command()
def profiles():
    """List the request profiles available to simulated threads."""
    for profile in DEFAULT_CATALOG.profiles():
        phases = ", ".join(f"{p.kind.value.upper()} {p.duration}" for p in profile.phases)
        click.echo(f"{profile.key:<10} {profile.name}")
        click.echo(f"{'':<10} {phases} (total {profile.total_duration})")


@cli.command()
@click.argument("profile_keys", nargs=-1)
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.option("--plot", "plot_path", type=click.Path(), default=None, help="Save a timeline image")
@click.option(
    "--log-level", "-l",
    type=click.Choice(LOG_LEVELS),
    default="WARNING",
    help="Logging level"
)
def simulate(profile_keys, as_json: bool, plot_path: str, log_level: str):
    """Simulate one thread per PROFILE_KEY, e.g. `gvlsim simulate low-io heavy-io`."""
    logging.getLogger().setLevel(getattr(logging, log_level))

    try:
        result = ContentionScheduler().simulate(list(profile_keys))
    except (TypeError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        for m in result.metrics.per_thread:
            click.echo(
                f"Thread {m.thread_id + 1} ({m.profile_key}): "
                f"Total: {m.total}ms  Blocked: {m.blocked}ms  Active: {m.active}ms"
            )
        for line in format_metrics_summary(result.metrics.aggregate):
            click.echo(line)

    if plot_path:
        written = plot_timelines(result, plot_path)
        click.echo(f"Saved timeline plot to {written}", err=as_json)


@cli.command()
@click.argument("config_file", type=click.Path(exists=True))
@click.option(
    "--format", "-f", type=click.Choice(["yaml", "json"]), default="yaml",
    help="Configuration file format"
)
@click.option(
    "--log-level", "-l",
    type=click.Choice(LOG_LEVELS),
    default="INFO",
    help="Logging level"
)
def run(config_file: str, format: str, log_level: str):
    """Run a simulation experiment from a configuration file."""
    logging.getLogger().setLevel(getattr(logging, log_level))

    click.echo(f"Loading configuration from {config_file}...")

    try:
        if format == "yaml":
            orchestrator = ExperimentOrchestrator.from_yaml_file(config_file)
        else:
            orchestrator = ExperimentOrchestrator.from_json_file(config_file)

        click.echo("Starting simulation...")
        summary = orchestrator.run()

        aggregate = summary["aggregate"]
        click.echo("\nSimulation completed!")
        click.echo(f"Threads: {summary['simulation']['threads']}")
        click.echo(f"Elapsed: {summary['simulation']['elapsed_ticks']}ms")
        click.echo(f"Blocked: {aggregate['percent_blocked']:.1f}% of thread time")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--output", "-o", default="example_config.yaml",
    help="Output file path"
)
@click.option(
    "--format", "-f", type=click.Choice(["yaml", "json"]), default="yaml",
    help="Configuration file format"
)
def generate_config(output: str, format: str):
    """Generate an example configuration file."""
    example_config = {
        "simulation": {
            "threads": ["low-io", "heavy-io", "low-io"],
            "max_ticks": 100_000,
        },
        "metrics_config": {
            "percentiles_to_calculate": [0.5, 0.9, 0.99],
            "output_summary_json_path": "experiments/results/summary.json",
            "output_segments_csv_path": "experiments/results/segments.csv",
            "output_threads_csv_path": "experiments/results/threads.csv",
        },
        "visualization": {
            "output_plot_path": "experiments/results/timeline.png",
        },
    }

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        if format == "yaml":
            yaml.dump(example_config, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(example_config, f, indent=2)

    click.echo(f"Generated example configuration at {output_path}")


@cli.command()
@click.argument("config_file", type=click.Path(exists=True))
def validate(config_file: str):
    """Validate a configuration file without running the simulation."""
    click.echo(f"Validating configuration: {config_file}")

    try:
        is_valid, errors, _ = validate_and_fix_config(config_file)
    except Exception as e:
        click.echo(click.style(f"Error validating configuration: {e}", fg="red"))
        sys.exit(1)

    if is_valid:
        click.echo(click.style("✓ Configuration is valid", fg="green"))
    else:
        click.echo(click.style(f"✗ Configuration has {len(errors)} errors:", fg="red"))
        for i, error in enumerate(errors[:20], 1):
            click.echo(f"  {i}. {error}")
        if len(errors) > 20:
            click.echo(f"  ... and {len(errors) - 20} more errors")

    sys.exit(0 if is_valid else 1)


if __name__ == "__main__":
    cli()
