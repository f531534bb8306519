"""CLI command for running jobs."""

import sys

import click

from s3fileoutput import run_job
from s3fileoutput.core.exceptions import (
    ConfigurationError,
    EngineError,
    S3OutputError,
)
from s3fileoutput.core.logging import configure_logging
from s3fileoutput.core.state_backend import LocalStateBackend
from s3fileoutput.models.loader import load_job


def parse_cli_vars(vars: tuple) -> dict[str, str]:
    """Parse ``key=value`` pairs given with ``--vars``."""
    cli_vars = {}
    for var in vars:
        if "=" not in var:
            raise click.BadParameter(
                f"Invalid variable format: {var}. Use key=value", param_hint="--vars"
            )
        key, value = var.split("=", 1)
        cli_vars[key] = value
    return cli_vars


@click.command()
@click.argument("job_path", type=click.Path(exists=True))
@click.argument("inputs", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--state-dir",
    default=".state",
    help=(
        "Directory for resume state files (default: .state). They hold the"
        " task configuration, credentials included, and are owner-only (0600)"
    ),
)
@click.option(
    "--vars",
    multiple=True,
    help="CLI variables in key=value format (can be used multiple times)",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Log level (default: INFO)",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Use JSON format for logs",
)
def run(
    job_path: str,
    inputs: tuple,
    state_dir: str,
    vars: tuple,
    log_level: str,
    json_logs: bool,
):
    """Upload INPUTS to S3 as described by the job file.

    Every input file becomes one object. Failed tasks can be rerun with
    'resume'.

    Examples:

        s3fileoutput run job.yml part-0.csv part-1.csv
        s3fileoutput run job.yml data/*.csv --vars env=prod
        s3fileoutput run job.yml data/*.csv --log-level DEBUG --json-logs
    """
    cli_vars = parse_cli_vars(vars)

    try:
        job = load_job(job_path, cli_vars=cli_vars or None)
        configure_logging(level=log_level, json_format=json_logs, job_name=job.name)

        click.echo(f"Running job: {job.name}")
        report = run_job(job, list(inputs), LocalStateBackend(state_dir))
        click.echo(
            f"Job completed successfully: {report.task_count} tasks, "
            f"{len(inputs)} files uploaded"
        )

    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except EngineError as e:
        click.echo(f"Execution error: {e}", err=True)
        click.echo("Run 's3fileoutput resume' to retry the failed tasks", err=True)
        sys.exit(1)
    except S3OutputError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
