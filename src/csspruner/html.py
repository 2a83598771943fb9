"""HTML collaborators: stylesheet discovery, used-token extraction, and the splice."""

from __future__ import annotations

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup

__all__ = [
    "extract_stylesheet_urls",
    "extract_used_selectors",
    "replace_css_in_html",
]

_LINK_STYLESHEET_RE = re.compile(
    r"""<link[^>]*\srel\s*=\s*"""
    r"""(?:"[^"]*\bstylesheet\b[^"]*"|'[^']*\bstylesheet\b[^']*'|[^\s"'>]*\bstylesheet\b[^\s"'>]*)"""
    r"""[^>]*>""",
    re.IGNORECASE,
)

_STYLE_RE = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
_HEAD_CLOSE_RE = re.compile(r"</head>", re.IGNORECASE)


def _rel_values(tag) -> list[str]:
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return [r.lower() for r in rel]


def extract_stylesheet_urls(html: str, base_url: str | None = None) -> list[str]:
    """Return the ``href`` of every stylesheet ``<link>``, in document order.

    Relative URLs are resolved against *base_url* when one is given.
    Duplicates are dropped, keeping the first occurrence.
    """
    soup = BeautifulSoup(html, "html.parser")
    urls: list[str] = []
    seen: set[str] = set()
    for link in soup.find_all("link"):
        if "stylesheet" not in _rel_values(link):
            continue
        href = (link.get("href") or "").strip()
        if not href:
            continue
        if base_url:
            href = urljoin(base_url, href)
        if href not in seen:
            seen.add(href)
            urls.append(href)
    return urls


def extract_used_selectors(html: str) -> frozenset[str]:
    """Collect tag names, classes and ids present in the document.

    Classes and ids are recorded both bare (``btn``) and with their
    selector sigil (``.btn``, ``#main``).
    """
    soup = BeautifulSoup(html, "html.parser")
    used: set[str] = set()
    for tag in soup.find_all(True):
        used.add(tag.name)
        for cls in tag.get("class") or []:
            used.add(cls)
            used.add(f".{cls}")
        tag_id = tag.get("id")
        if tag_id:
            used.add(tag_id)
            used.add(f"#{tag_id}")
    return frozenset(used)


def replace_css_in_html(
    html: str,
    css: str,
    style_id: str = "macp-optimized-css",
    no_optimize_marker: str = "data-no-optimize",
) -> str:
    """Swap the page's stylesheets for a single inline ``<style>`` block.

    Every ``<link rel="stylesheet">`` is removed, every ``<style>`` block not
    carrying *no_optimize_marker* is removed, and the optimized CSS is
    inserted just before ``</head>``.  Without a ``</head>`` nothing is
    inserted.
    """
    html = _LINK_STYLESHEET_RE.sub("", html)

    def _keep_marked(match: re.Match[str]) -> str:
        block = match.group(0)
        return block if no_optimize_marker in block else ""

    html = _STYLE_RE.sub(_keep_marked, html)

    css_tag = f'<style id="{style_id}">{css}</style>'
    return _HEAD_CLOSE_RE.sub(lambda m: css_tag + m.group(0), html, count=1)
