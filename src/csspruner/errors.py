"""Error hierarchy for csspruner."""

from __future__ import annotations


class CssPrunerError(Exception):
    """Base error for all csspruner errors."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class FetchError(CssPrunerError):
    """A stylesheet could not be retrieved."""

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.url = url
        self.status_code = status_code


class StageError(CssPrunerError):
    """An optimizer pipeline stage failed."""

    def __init__(self, stage: str, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(f"{stage}: {message}", cause=cause)
        self.stage = stage


class StoreError(CssPrunerError):
    """Optimized CSS could not be persisted or loaded."""
