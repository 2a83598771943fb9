"""CLI commands: csspruner purge / minify -- work on a standalone stylesheet."""

from __future__ import annotations

from pathlib import Path

import click

from csspruner.config import DEFAULT_SAFELIST
from csspruner.filter import filter_css
from csspruner.html import extract_used_selectors
from csspruner.media import extract_media_queries, reattach_media_queries
from csspruner.model import StyleSheetSource
from csspruner.transforms import apply_transforms, minify


@click.command()
@click.argument("cssfile", type=click.Path(exists=True, dir_okay=False))
@click.option("--used", "used_tokens", multiple=True, help="Selector token present in the page (repeatable)")
@click.option("--html", "htmlfile", type=click.Path(exists=True, dir_okay=False), default=None, help="Collect used tokens from this HTML file")
@click.option("--safelist", "extra_safelist", multiple=True, help="Extra selector pattern to keep (repeatable)")
@click.option("--no-default-safelist", is_flag=True, help="Do not keep the built-in safelist patterns")
def purge(
    cssfile: str,
    used_tokens: tuple[str, ...],
    htmlfile: str | None,
    extra_safelist: tuple[str, ...],
    no_default_safelist: bool,
) -> None:
    """Print the rules of CSSFILE that are used or safelisted, minified."""
    content = Path(cssfile).read_text(encoding="utf-8")
    used = set(used_tokens)
    if htmlfile:
        used |= extract_used_selectors(Path(htmlfile).read_text(encoding="utf-8"))

    safelist = () if no_default_safelist else DEFAULT_SAFELIST
    safelist = tuple(safelist) + tuple(extra_safelist)

    source = StyleSheetSource(url=cssfile, content=content)
    blocks = extract_media_queries([source])
    css = filter_css(minify(content), used, safelist)
    css += reattach_media_queries(blocks, used, safelist)
    click.echo(apply_transforms(css))


@click.command("minify")
@click.argument("cssfile", type=click.Path(exists=True, dir_okay=False))
def minify_cmd(cssfile: str) -> None:
    """Print CSSFILE with comments and redundant whitespace removed."""
    click.echo(minify(Path(cssfile).read_text(encoding="utf-8")))
