"""Entry point for the docsections command line."""

import click

from docsections import __version__
from docsections.cli.commands.ingest import ingest
from docsections.cli.commands.normalize import normalize
from docsections.cli.commands.serve import serve
from docsections.lib.logging_config import setup_logging


@click.group()
@click.version_option(__version__, prog_name="docsections")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Only log warnings and errors")
def main(verbose: bool, quiet: bool) -> None:
    """Recover titled sections from uploaded documents."""
    setup_logging(verbose=verbose, quiet=quiet)


main.add_command(normalize)
main.add_command(ingest)
main.add_command(serve)


if __name__ == "__main__":  # pragma: no cover
    main()
