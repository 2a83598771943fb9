"""Add ``font-display: swap`` to ``@font-face`` rules that lack it."""

from __future__ import annotations

from csspruner.scanner import iter_blocks

__all__ = ["apply_font_display_swap", "FontDisplaySwapTransform"]

_DECLARATION = "font-display:swap;"


def _patch_body(body: str) -> str:
    if "font-display" in body:
        return body
    stripped = body.rstrip()
    if stripped and not stripped.endswith(";"):
        return f"{stripped};{_DECLARATION}"
    return f"{stripped}{_DECLARATION}"


def apply_font_display_swap(css: str) -> str:
    """Insert ``font-display:swap;`` before the closing brace of each
    top-level ``@font-face`` block that does not declare ``font-display``.
    """
    parts: list[str] = []
    cursor = 0
    for block in iter_blocks(css):
        if block.at_keyword() != "@font-face" or not block.is_flat:
            continue
        patched = _patch_body(block.body)
        if patched == block.body:
            continue
        parts.append(css[cursor : block.start])
        parts.append(f"{block.prelude}{{{patched}}}")
        cursor = block.end
    if not parts:
        return css
    parts.append(css[cursor:])
    return "".join(parts)


class FontDisplaySwapTransform:
    """Transform wrapper around :func:`apply_font_display_swap`."""

    def apply(self, css: str) -> str:
        return apply_font_display_swap(css)
