"""Main CLI entry point for s3fileoutput."""

import click

from s3fileoutput import __version__
from s3fileoutput.cli.commands.list import list_outputs
from s3fileoutput.cli.commands.resume import resume
from s3fileoutput.cli.commands.run import run
from s3fileoutput.cli.commands.validate import validate


@click.group()
@click.version_option(version=__version__)
def main():
    """s3fileoutput - upload files to S3 through a transactional file output."""
    pass


# Register commands
main.add_command(run)
main.add_command(resume)
main.add_command(validate)
main.add_command(list_outputs)


if __name__ == "__main__":
    main()
