"""CLI command for listing available outputs."""

import click

from s3fileoutput.outputs import list_output_types


@click.command("list-outputs")
def list_outputs():
    """List available output plugins."""
    output_types = list_output_types()

    click.echo("Available Outputs:")
    for output_type in output_types:
        click.echo(f"  - {output_type}")
