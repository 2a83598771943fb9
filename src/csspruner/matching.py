"""Selector matching against allow-list patterns and used-selector tokens.

Allow-list patterns use glob semantics: ``*`` matches any run of zero or more
characters, everything else is literal, and the whole selector must match.

Allow-list checks also try a class or id without its leading ``.`` or ``#``,
so the pattern ``col-*`` keeps ``.col-6``.  ``matches`` itself stays a plain
anchored glob.

Usage matching is a deliberately loose heuristic.  A selector counts as used
when its text, minus any pseudo-class or pseudo-element suffix, appears
anywhere inside one of the tokens collected from the HTML.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

__all__ = ["matches", "is_allow_listed", "is_used", "strip_pseudo"]

# A pseudo-class/element and everything after it.
_PSEUDO_RE = re.compile(
    r"::?(?:hover|focus|active|visited|first-child|last-child|nth-child|before|after).*"
)

_SIGILS = ".#"


@lru_cache(maxsize=512)
def _compile(pattern: str) -> re.Pattern[str]:
    body = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.compile(body)


def matches(pattern: str, selector: str) -> bool:
    """Return True if *selector* fully matches the glob *pattern*."""
    return _compile(pattern).fullmatch(selector) is not None


def _candidates(selector: str) -> tuple[str, ...]:
    # ".btn" is tested both as written and as the bare class name.
    if len(selector) > 1 and selector[0] in _SIGILS:
        return (selector, selector[1:])
    return (selector,)


def is_allow_listed(selector: str, patterns: Iterable[str]) -> bool:
    """Return True on the first pattern that matches *selector*."""
    candidates = _candidates(selector)
    for pattern in patterns:
        if any(matches(pattern, c) for c in candidates):
            return True
    return False


def strip_pseudo(selector: str) -> str:
    """Cut *selector* at its first recognised pseudo-class or pseudo-element."""
    return _PSEUDO_RE.sub("", selector)


def is_used(selector: str, used_selectors: Iterable[str]) -> bool:
    """Return True if the stripped *selector* occurs inside any used token.

    A bare token (``foo``) also vouches for ``.foo`` and ``#foo``, but only on
    an exact match.
    """
    stripped = strip_pseudo(selector).strip()
    if not stripped:
        return False
    bare = stripped[1:] if len(stripped) > 1 and stripped[0] in _SIGILS else None
    for used in used_selectors:
        if stripped in used or used == bare:
            return True
    return False
