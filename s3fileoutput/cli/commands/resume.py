"""CLI command for resuming a failed job."""

import sys

import click

from s3fileoutput import resume_job
from s3fileoutput.cli.commands.run import parse_cli_vars
from s3fileoutput.core.exceptions import ConfigurationError, S3OutputError
from s3fileoutput.core.logging import configure_logging
from s3fileoutput.core.state_backend import LocalStateBackend
from s3fileoutput.models.loader import load_job


@click.command()
@click.argument("job_path", type=click.Path(exists=True))
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
def resume(
    job_path: str,
    state_dir: str,
    vars: tuple,
    log_level: str,
    json_logs: bool,
):
    """Rerun the tasks that failed in the last run of a job.

    Tasks that already succeeded are skipped; the rerun tasks use the task
    configuration saved by the failed run.

    Examples:

        s3fileoutput resume job.yml
        s3fileoutput resume job.yml --state-dir /tmp/state
    """
    cli_vars = parse_cli_vars(vars)

    try:
        job = load_job(job_path, cli_vars=cli_vars or None)
        configure_logging(level=log_level, json_format=json_logs, job_name=job.name)

        backend = LocalStateBackend(state_dir)
        if not backend.load(job.name):
            click.echo(f"No resume state found for job '{job.name}'", err=True)
            click.echo("Use 's3fileoutput run' to start a new execution", err=True)
            sys.exit(1)

        click.echo(f"Resuming job: {job.name}")
        report = resume_job(job, backend)
        click.echo(f"Job completed successfully: {report.task_count} tasks")

    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except S3OutputError as e:
        click.echo(f"Execution error: {e}", err=True)
        sys.exit(1)
