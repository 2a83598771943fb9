"""Core data model: stylesheet sources, rules, media blocks, and stage results."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")

# A set of class/id/tag tokens observed in the HTML document.
UsedSelectorSet = frozenset[str]


@dataclass(frozen=True)
class StyleSheetSource:
    """A fetched stylesheet: its URL and raw text content."""

    url: str
    content: str


@dataclass(frozen=True)
class FetchResult:
    """Outcome of retrieving one stylesheet URL."""

    url: str
    content: str = ""
    ok: bool = False
    error: str = ""

    def to_source(self) -> StyleSheetSource:
        return StyleSheetSource(url=self.url, content=self.content)


@dataclass(frozen=True)
class CssRule:
    """One selector list plus its declaration body.

    The body is opaque text; a rule is kept or discarded as a whole.
    """

    selector_text: str
    body: str

    @property
    def selectors(self) -> tuple[str, ...]:
        """Comma-separated selectors, trimmed, with empty entries dropped."""
        parts = (s.strip() for s in self.selector_text.split(","))
        return tuple(p for p in parts if p)

    @property
    def text(self) -> str:
        return f"{self.selector_text}{{{self.body}}}"


@dataclass(frozen=True)
class MediaQueryBlock:
    """An ``@media`` prelude and the raw CSS fragment inside its braces."""

    prelude: str  # e.g. "@media (min-width: 768px)"
    inner: str
    source_url: str = ""

    @property
    def text(self) -> str:
        return f"{self.prelude}{{{self.inner}}}"

    def with_inner(self, inner: str) -> MediaQueryBlock:
        """Return a copy with the inner fragment swapped, prelude untouched."""
        return replace(self, inner=inner)


class Status(Enum):
    """Outcome of a single optimizer pipeline stage."""

    SUCCESS = "success"
    FAIL = "fail"


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Value or error produced by one pipeline stage."""

    stage: str
    status: Status
    value: T | None = None
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is Status.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status is Status.FAIL


@dataclass
class OptimizationReport:
    """Statistics collected during one optimization run."""

    skipped: bool = False
    stylesheet_urls: list[str] = field(default_factory=list)
    fetched: int = 0
    failed_urls: list[str] = field(default_factory=list)
    media_blocks: int = 0
    input_bytes: int = 0
    output_bytes: int = 0
    failed_stage: str = ""
    persisted: bool = False

    @property
    def savings(self) -> float:
        """Fraction of input bytes removed, 0.0 when nothing was read."""
        if not self.input_bytes:
            return 0.0
        return 1.0 - (self.output_bytes / self.input_bytes)
