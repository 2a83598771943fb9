"""CLI commands: csspruner show / forget -- read or drop stored optimized CSS for a page."""

from __future__ import annotations

import sys

import click

from csspruner.config import OptimizerConfig
from csspruner.store import Database, UsedCssRepository, run_migrations


@click.command()
@click.argument("url")
@click.option("--mobile", is_flag=True, help="Show the mobile variant")
@click.option("--db", default=OptimizerConfig().db_path, help="Database path")
def show(url: str, mobile: bool, db: str) -> None:
    """Print the optimized CSS stored for URL."""
    with Database(db) as database:
        run_migrations(database)
        css = UsedCssRepository(database).get(url, is_mobile=mobile)

    if css is None:
        device = "mobile" if mobile else "desktop"
        click.echo(f"No optimized CSS stored for {url} ({device})", err=True)
        sys.exit(1)
    click.echo(css)


@click.command()
@click.argument("url")
@click.option("--db", default=OptimizerConfig().db_path, help="Database path")
def forget(url: str, db: str) -> None:
    """Delete the optimized CSS stored for URL (desktop and mobile)."""
    with Database(db) as database:
        run_migrations(database)
        repo = UsedCssRepository(database)
        removed = repo.delete(url)
        remaining = repo.count()

    click.echo(f"Removed {removed} stylesheet(s) for {url}; {remaining} left in store", err=True)
    if not removed:
        sys.exit(1)
