"""csspruner CLI entry point: Click group with subcommands."""

import logging

import click

from csspruner import __version__


@click.group()
@click.version_option(version=__version__, prog_name="csspruner")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """csspruner - strip CSS rules a page does not use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import and register subcommands
from csspruner.cli.optimize import optimize  # noqa: E402
from csspruner.cli.purge import minify_cmd, purge  # noqa: E402
from csspruner.cli.show import forget, show  # noqa: E402

cli.add_command(optimize)
cli.add_command(purge)
cli.add_command(minify_cmd)
cli.add_command(show)
cli.add_command(forget)
