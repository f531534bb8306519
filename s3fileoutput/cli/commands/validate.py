"""CLI command for validating job files."""

import sys

import click

from s3fileoutput.cli.commands.run import parse_cli_vars
from s3fileoutput.core.exceptions import ConfigurationError
from s3fileoutput.models.loader import load_job
from s3fileoutput.outputs import S3FileOutputPlugin, get_output_plugin
from s3fileoutput.outputs.s3.sequence import build_key


@click.command()
@click.argument("job_path", type=click.Path(exists=True))
@click.option(
    "--vars",
    multiple=True,
    help="CLI variables in key=value format (can be used multiple times)",
)
def validate(job_path: str, vars: tuple):
    """Validate a job YAML file.

    Checks:
    - YAML syntax
    - Job schema and template variables
    - Output configuration, including sequence_format

    Examples:

        s3fileoutput validate job.yml
        s3fileoutput validate job.yml --vars env=prod
    """
    cli_vars = parse_cli_vars(vars)

    try:
        job = load_job(job_path, cli_vars=cli_vars or None)
        plugin = get_output_plugin(job.output_type)

        click.echo(f"✓ Job '{job.name}' is valid")
        click.echo(f"  Output: {job.output_type}")
        if isinstance(plugin, S3FileOutputPlugin):
            task = plugin.load_config(job.out)
            first_key = build_key(
                task.path_prefix, task.sequence_format, 0, 0, task.file_ext
            )
            click.echo(f"  Bucket: {task.bucket}")
            click.echo(f"  First key: {first_key}")
            click.echo(f"  Auth method: {task.credentials.auth_method}")
        click.echo(f"  Max threads: {job.exec_config.max_threads}")

    except ConfigurationError as e:
        click.echo(f"✗ Job validation failed: {e}", err=True)
        sys.exit(1)
