"""Single-level brace scanner for raw CSS text.

The scanner walks the text once as a small state machine::

    OUTSIDE  -> SELECTOR  on the first non-blank character
    SELECTOR -> BODY      on '{'
    BODY     -> OUTSIDE   on the '}' that closes the block
    any      -> COMMENT   on '/*', back again on '*/'
    any      -> STRING    on a quote, back again on the matching quote

Braces inside comments and string literals are ignored.  Statements such as
``@import url(a.css);`` end at their ``;`` and are not yielded.  Text that
never closes its block is dropped without error.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

__all__ = ["Block", "iter_blocks", "iter_rules"]


class _State(Enum):
    OUTSIDE = "outside"
    SELECTOR = "selector"
    BODY = "body"
    COMMENT = "comment"
    STRING = "string"


@dataclass(frozen=True)
class Block:
    """A top-level ``prelude { body }`` span found by the scanner."""

    prelude: str
    body: str
    start: int  # index of the first prelude character
    end: int  # index just past the closing brace
    depth: int  # deepest brace nesting seen, 1 for a flat rule

    @property
    def is_flat(self) -> bool:
        return self.depth == 1

    def at_keyword(self) -> str:
        """Return the lower-cased at-keyword (``@media``) or an empty string."""
        head = self.prelude.lstrip()
        if not head.startswith("@"):
            return ""
        end = 1
        while end < len(head) and (head[end].isalnum() or head[end] in "-_"):
            end += 1
        return head[:end].lower()


def iter_blocks(css: str) -> Iterator[Block]:
    """Yield every top-level block of *css* in source order."""
    state = _State.OUTSIDE
    resume = _State.OUTSIDE
    quote = ""
    start = body_start = 0
    depth = max_depth = 0
    i = 0
    n = len(css)

    while i < n:
        ch = css[i]

        if state is _State.COMMENT:
            if css.startswith("*/", i):
                state = resume
                i += 2
            else:
                i += 1
            continue

        if state is _State.STRING:
            if ch == "\\":
                i += 2
                continue
            if ch == quote or ch == "\n":
                state = resume
            i += 1
            continue

        if css.startswith("/*", i):
            resume, state = state, _State.COMMENT
            i += 2
            continue

        if state is _State.OUTSIDE:
            if ch.isspace() or ch in ";}":
                i += 1
                continue
            state = _State.SELECTOR
            start = i

        if ch == "\\":
            i += 2
            continue

        if ch in "\"'" and state is not _State.OUTSIDE:
            resume, state, quote = state, _State.STRING, ch
            i += 1
            continue

        if state is _State.SELECTOR:
            if ch == ";":
                state = _State.OUTSIDE
            elif ch == "}":
                # Stray closing brace: the selector text so far is garbage.
                state = _State.OUTSIDE
            elif ch == "{":
                state = _State.BODY
                body_start = i + 1
                depth = max_depth = 1
        elif state is _State.BODY:
            if ch == "{":
                depth += 1
                max_depth = max(max_depth, depth)
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    yield Block(
                        prelude=css[start : body_start - 1],
                        body=css[body_start:i],
                        start=start,
                        end=i + 1,
                        depth=max_depth,
                    )
                    state = _State.OUTSIDE
        i += 1


def iter_rules(css: str) -> Iterator[Block]:
    """Yield only flat blocks (plain rules and flat at-rules like ``@font-face``).

    Blocks that contain nested braces are skipped.
    """
    for block in iter_blocks(css):
        if block.is_flat:
            yield block
