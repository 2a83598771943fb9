"""CLI command: csspruner optimize -- prune the stylesheets of a saved HTML page."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import click

from csspruner.config import OptimizerConfig
from csspruner.optimizer import CssOptimizer
from csspruner.store import Database, UsedCssRepository, run_migrations


@click.command()
@click.argument("htmlfile", type=click.Path(exists=True, dir_okay=False))
@click.option("--url", "page_url", default="", help="Page URL; relative stylesheet links resolve against it")
@click.option("--mobile", is_flag=True, help="Store the result under the mobile device class")
@click.option("--admin", is_flag=True, help="Treat the request as coming from an administrator (skips optimization)")
@click.option("--logged-in", is_flag=True, help="Treat the request as coming from a logged-in user (skips optimization)")
@click.option("--safelist", "extra_safelist", multiple=True, help="Extra selector pattern to keep (repeatable)")
@click.option("--timeout", type=float, default=None, help="Per-stylesheet fetch timeout in seconds")
@click.option("--db", default=None, help="SQLite database for optimized CSS (omit to skip storing)")
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None, help="Write HTML here instead of stdout")
def optimize(
    htmlfile: str,
    page_url: str,
    mobile: bool,
    admin: bool,
    logged_in: bool,
    extra_safelist: tuple[str, ...],
    timeout: float | None,
    db: str | None,
    output: str | None,
) -> None:
    """Replace the stylesheets of HTMLFILE with a single pruned <style> block.

    Linked stylesheets are fetched over HTTP.  Prints a one-line summary to
    stderr and exits with code 1 if the page could not be optimized.
    """
    config = OptimizerConfig.from_env()
    if extra_safelist:
        config = config.with_safelist(lambda base: base + list(extra_safelist))
    if timeout is not None:
        config = replace(config, fetch_timeout=timeout)

    database: Database | None = None
    persist = None
    if db:
        database = Database(db)
        database.connect()
        run_migrations(database)
        repo = UsedCssRepository(database)

        def persist(key: tuple[str, bool], css: str) -> None:
            repo.save(key[0], css, is_mobile=key[1])

    html = Path(htmlfile).read_text(encoding="utf-8")
    try:
        with CssOptimizer(
            config,
            persist=persist,
            log=lambda msg: click.echo(msg, err=True),
            page_url=page_url,
            is_mobile=mobile,
            is_admin=admin,
            logged_in=logged_in,
        ) as optimizer:
            result, report = optimizer.optimize_with_report(html)
    finally:
        if database is not None:
            database.close()

    if output:
        Path(output).write_text(result, encoding="utf-8")
    else:
        click.echo(result)

    if report.skipped:
        click.echo("Skipped: optimization is disabled for this request", err=True)
        sys.exit(0)
    if report.failed_stage:
        click.echo(f"Failed at stage '{report.failed_stage}'; HTML left unchanged", err=True)
        sys.exit(1)
    click.echo(
        f"Summary: {report.fetched}/{len(report.stylesheet_urls)} stylesheet(s), "
        f"{report.input_bytes} -> {report.output_bytes} bytes "
        f"({report.savings:.0%} removed)",
        err=True,
    )
