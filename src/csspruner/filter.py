"""Rule filter: keep only the CSS rules a document actually needs."""

from __future__ import annotations

from typing import Iterable, Iterator

from csspruner.matching import is_allow_listed, is_used
from csspruner.model import CssRule
from csspruner.scanner import iter_rules

__all__ = ["parse_rules", "should_keep", "filter_css"]


def parse_rules(css: str) -> Iterator[CssRule]:
    """Yield the flat rules of *css* in source order.

    Rules with an empty selector list are skipped.
    """
    for block in iter_rules(css):
        rule = CssRule(selector_text=block.prelude, body=block.body)
        if rule.selectors:
            yield rule


def should_keep(
    rule: CssRule, used_selectors: Iterable[str], safelist: Iterable[str]
) -> bool:
    """Return True if any selector of *rule* is allow-listed or used."""
    for selector in rule.selectors:
        if is_allow_listed(selector, safelist):
            return True
        if is_used(selector, used_selectors):
            return True
    return False


def filter_css(
    css: str, used_selectors: Iterable[str], safelist: Iterable[str] = ()
) -> str:
    """Return the kept rules of already-minified *css*, concatenated verbatim."""
    used = tuple(used_selectors)
    patterns = tuple(safelist)
    return "".join(
        rule.text for rule in parse_rules(css) if should_keep(rule, used, patterns)
    )
