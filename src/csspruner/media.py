"""Preserve responsive ``@media`` blocks and re-filter their contents."""

from __future__ import annotations

import logging
from typing import Iterable

from csspruner.config import RESPONSIVE_FEATURES
from csspruner.filter import filter_css
from csspruner.model import MediaQueryBlock, StyleSheetSource
from csspruner.scanner import iter_blocks
from csspruner.transforms.minify import minify

__all__ = ["is_responsive", "extract_media_queries", "reattach_media_queries"]

logger = logging.getLogger(__name__)

# An @media block may hold plain rules, one level deep.
_MAX_MEDIA_DEPTH = 2


def is_responsive(prelude: str, features: Iterable[str] = RESPONSIVE_FEATURES) -> bool:
    """Return True if the media condition mentions a responsive feature."""
    return any(feature in prelude for feature in features)


def extract_media_queries(
    sources: Iterable[StyleSheetSource],
    features: Iterable[str] = RESPONSIVE_FEATURES,
) -> list[MediaQueryBlock]:
    """Collect responsive ``@media`` blocks from every source, in order.

    Non-responsive blocks (``@media print``) and blocks nested more than one
    level deep are dropped.
    """
    features = tuple(features)
    blocks: list[MediaQueryBlock] = []
    for source in sources:
        for block in iter_blocks(source.content):
            if block.at_keyword() != "@media":
                continue
            if block.depth > _MAX_MEDIA_DEPTH:
                logger.debug("Skipping deeply nested @media block in %s", source.url)
                continue
            if not is_responsive(block.prelude, features):
                continue
            blocks.append(
                MediaQueryBlock(prelude=block.prelude, inner=block.body, source_url=source.url)
            )
    return blocks


def reattach_media_queries(
    blocks: Iterable[MediaQueryBlock],
    used_selectors: Iterable[str],
    safelist: Iterable[str] = (),
) -> str:
    """Filter each block's rules and re-wrap the survivors in the original prelude.

    Blocks left with no rules are omitted.
    """
    used = tuple(used_selectors)
    patterns = tuple(safelist)
    parts: list[str] = []
    for block in blocks:
        inner = filter_css(minify(block.inner), used, patterns)
        if inner:
            parts.append(block.with_inner(inner).text)
    return "".join(parts)
