"""Optimizer configuration and request gating."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Callable, Iterable

# Selector patterns that are always kept.  ``*`` matches any run of characters.
DEFAULT_SAFELIST: tuple[str, ...] = (
    # Responsive helpers
    "mobile-*",
    "tablet-*",
    "desktop-*",
    "sm:*",
    "md:*",
    "lg:*",
    "xl:*",
    "hidden-*",
    "show-*",
    "visible-*",
    "col-*",
    "row-*",
    "grid-*",
    "flex-*",
    "order-*",
    "w-*",
    "h-*",
    "gap-*",
    "space-*",
    "p-*",
    "m-*",
    # WordPress core classes
    "wp-*",
    "alignfull",
    "alignwide",
    "has-*",
    # Common framework classes
    "container",
    "container-fluid",
    "row",
    "col",
    "nav",
    "navbar",
    "btn",
    "card",
    "modal",
    # Font declarations are never referenced from markup
    "@font-face",
)

RESPONSIVE_FEATURES: tuple[str, ...] = ("min-width", "max-width", "orientation")


@dataclass(frozen=True)
class OptimizerConfig:
    enabled: bool = True
    safelist: tuple[str, ...] = DEFAULT_SAFELIST
    responsive_features: tuple[str, ...] = RESPONSIVE_FEATURES
    fetch_timeout: float = 10.0
    max_workers: int = 4
    style_id: str = "macp-optimized-css"
    no_optimize_marker: str = "data-no-optimize"
    db_path: str = "csspruner.db"

    def with_safelist(
        self, extend: Callable[[list[str]], Iterable[str]]
    ) -> OptimizerConfig:
        """Return a copy whose safelist is ``extend(current safelist)``."""
        return replace(self, safelist=tuple(extend(list(self.safelist))))

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> OptimizerConfig:
        """Build a config from ``CSSPRUNER_*`` environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()
        extra = [p.strip() for p in env.get("CSSPRUNER_SAFELIST", "").split(",") if p.strip()]
        return cls(
            enabled=env.get("CSSPRUNER_ENABLED", "1").lower() in ("1", "true", "yes", "on"),
            safelist=defaults.safelist + tuple(extra),
            fetch_timeout=float(env.get("CSSPRUNER_FETCH_TIMEOUT", defaults.fetch_timeout)),
            max_workers=int(env.get("CSSPRUNER_MAX_WORKERS", defaults.max_workers)),
            db_path=env.get("CSSPRUNER_DB_PATH", defaults.db_path),
        )


def should_process(
    config: OptimizerConfig, *, is_admin: bool = False, logged_in: bool = False
) -> bool:
    """Return True when optimization is enabled and the request is anonymous."""
    return config.enabled and not is_admin and not logged_in


_MOBILE_UA_TOKENS = (
    "Mobile",
    "Android",
    "Silk/",
    "Kindle",
    "BlackBerry",
    "Opera Mini",
    "Opera Mobi",
)


def is_mobile_user_agent(user_agent: str) -> bool:
    """Classify a User-Agent header as mobile (True) or desktop (False)."""
    if not user_agent:
        return False
    return any(token in user_agent for token in _MOBILE_UA_TOKENS)
