"""Base protocol for stylesheet text transforms."""

from __future__ import annotations

from typing import Protocol


class Transform(Protocol):
    """A CSS-text-to-CSS-text transformation step."""

    def apply(self, css: str) -> str: ...
