"""csspruner: strip CSS rules a page does not use."""

from __future__ import annotations

__version__ = "0.1.0"

from csspruner.config import DEFAULT_SAFELIST, OptimizerConfig, should_process  # noqa: E402
from csspruner.errors import CssPrunerError, FetchError, StageError, StoreError  # noqa: E402
from csspruner.filter import filter_css  # noqa: E402
from csspruner.matching import is_allow_listed, is_used, matches  # noqa: E402
from csspruner.media import extract_media_queries, reattach_media_queries  # noqa: E402
from csspruner.model import (  # noqa: E402
    CssRule,
    FetchResult,
    MediaQueryBlock,
    OptimizationReport,
    StyleSheetSource,
)
from csspruner.optimizer import CssOptimizer  # noqa: E402
from csspruner.transforms import apply_font_display_swap, minify  # noqa: E402

__all__ = [
    "__version__",
    # Orchestrator
    "CssOptimizer",
    "OptimizerConfig",
    "DEFAULT_SAFELIST",
    "should_process",
    # Engine
    "filter_css",
    "matches",
    "is_allow_listed",
    "is_used",
    "extract_media_queries",
    "reattach_media_queries",
    "minify",
    "apply_font_display_swap",
    # Model
    "CssRule",
    "FetchResult",
    "MediaQueryBlock",
    "OptimizationReport",
    "StyleSheetSource",
    # Errors
    "CssPrunerError",
    "FetchError",
    "StageError",
    "StoreError",
]
