"""Optimization orchestrator: HTML in, HTML with a single pruned stylesheet out."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Sequence

from csspruner.config import OptimizerConfig, should_process as request_gate
from csspruner.errors import StageError
from csspruner.fetch import Fetch, HttpFetcher, fetch_all
from csspruner.filter import filter_css
from csspruner.html import extract_stylesheet_urls, extract_used_selectors, replace_css_in_html
from csspruner.media import extract_media_queries, reattach_media_queries
from csspruner.model import (
    OptimizationReport,
    StageResult,
    Status,
    StyleSheetSource,
    UsedSelectorSet,
)
from csspruner.transforms import Transform, apply_transforms, minify

__all__ = ["CssOptimizer"]

logger = logging.getLogger(__name__)

Persist = Callable[[tuple[str, bool], str], None]


class CssOptimizer:
    """Strip unused CSS from a rendered page.

    Every collaborator is injectable; the defaults fetch over HTTP, parse the
    page with BeautifulSoup and skip persistence.  ``optimize`` never raises:
    when any stage fails the original HTML is returned unchanged.

    Pipeline, in order:

    1. gate        -- ``should_process()``, by default the enabled flag plus the
                      admin / logged-in request context; when False the HTML
                      is returned as-is
    2. discover    -- stylesheet URLs and used selector tokens
    3. fetch       -- every URL; failures are logged and skipped
    4. media       -- responsive ``@media`` blocks captured from the raw sources
    5. filter      -- each source minified, then stripped to the rules in use
    6. reattach    -- media blocks re-filtered and appended
    7. transform   -- ``font-display: swap`` plus any custom transforms
    8. persist     -- keyed by (page URL, is_mobile); failures are logged only
    9. splice      -- stylesheets replaced by one inline ``<style>`` block
    """

    def __init__(
        self,
        config: OptimizerConfig | None = None,
        *,
        fetch: Fetch | None = None,
        extract_urls: Callable[[str], Sequence[str]] | None = None,
        extract_used: Callable[[str], Iterable[str]] | None = None,
        should_process: Callable[[], bool] | None = None,
        persist: Persist | None = None,
        log: Callable[[str], None] | None = None,
        transforms: Sequence[Transform] | None = None,
        page_url: str = "",
        is_mobile: bool = False,
        is_admin: bool = False,
        logged_in: bool = False,
    ) -> None:
        self.config = config or OptimizerConfig()
        self.page_url = page_url
        self.is_mobile = is_mobile
        self._owned_fetcher: HttpFetcher | None = None
        if fetch is None:
            self._owned_fetcher = HttpFetcher(timeout=self.config.fetch_timeout)
            fetch = self._owned_fetcher.fetch
        self._fetch = fetch
        self._extract_urls = extract_urls
        self._extract_used = extract_used or extract_used_selectors
        self._should_process = should_process or (
            lambda: request_gate(self.config, is_admin=is_admin, logged_in=logged_in)
        )
        self._persist = persist
        self._log_fn = log
        self._transforms = list(transforms or [])

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def optimize(self, html: str, url: str | None = None) -> str:
        """Return *html* with its stylesheets replaced by the pruned CSS."""
        result, _ = self.optimize_with_report(html, url)
        return result

    def optimize_with_report(
        self, html: str, url: str | None = None
    ) -> tuple[str, OptimizationReport]:
        """Like :meth:`optimize`, also returning run statistics."""
        report = OptimizationReport()
        page_url = self.page_url if url is None else url

        gate = self._run_stage("gate", self._should_process)
        if gate.failed:
            return self._abort(html, gate, report)
        if not gate.value:
            report.skipped = True
            return html, report

        discovered = self._run_stage("discover", self._discover, html, page_url)
        if discovered.failed:
            return self._abort(html, discovered, report)
        urls, used = discovered.value
        report.stylesheet_urls = list(urls)

        fetched = self._run_stage("fetch", self._fetch_sources, urls, report)
        if fetched.failed:
            return self._abort(html, fetched, report)
        sources: list[StyleSheetSource] = fetched.value

        media = self._run_stage(
            "media", extract_media_queries, sources, self.config.responsive_features
        )
        if media.failed:
            return self._abort(html, media, report)
        report.media_blocks = len(media.value)

        filtered = self._run_stage("filter", self._filter_sources, sources, used)
        if filtered.failed:
            return self._abort(html, filtered, report)

        reattached = self._run_stage(
            "reattach", reattach_media_queries, media.value, used, self.config.safelist
        )
        if reattached.failed:
            return self._abort(html, reattached, report)

        transformed = self._run_stage(
            "transform", apply_transforms, filtered.value + reattached.value, self._transforms
        )
        if transformed.failed:
            return self._abort(html, transformed, report)
        css: str = transformed.value
        report.output_bytes = len(css)

        if self._persist is not None:
            stored = self._run_stage("persist", self._persist, (page_url, self.is_mobile), css)
            if stored.failed:
                self._log(f"Failed to persist optimized CSS for {page_url}: {stored.error}")
            else:
                report.persisted = True

        spliced = self._run_stage(
            "splice",
            replace_css_in_html,
            html,
            css,
            self.config.style_id,
            self.config.no_optimize_marker,
        )
        if spliced.failed:
            return self._abort(html, spliced, report)

        logger.debug(
            "Optimized %s: %d/%d stylesheets, %d -> %d bytes",
            page_url or "<page>",
            report.fetched,
            len(report.stylesheet_urls),
            report.input_bytes,
            report.output_bytes,
        )
        return spliced.value, report

    def close(self) -> None:
        """Close the HTTP client if this optimizer created it."""
        if self._owned_fetcher is not None:
            self._owned_fetcher.close()

    def __enter__(self) -> CssOptimizer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _discover(self, html: str, page_url: str) -> tuple[list[str], UsedSelectorSet]:
        if self._extract_urls is not None:
            urls = list(self._extract_urls(html))
        else:
            urls = extract_stylesheet_urls(html, base_url=page_url or None)
        return urls, frozenset(self._extract_used(html))

    def _fetch_sources(
        self, urls: Sequence[str], report: OptimizationReport
    ) -> list[StyleSheetSource]:
        sources: list[StyleSheetSource] = []
        for result in fetch_all(self._fetch, urls, self.config.max_workers):
            if not result.ok:
                report.failed_urls.append(result.url)
                self._log(f"Failed to fetch CSS: {result.error or result.url}")
                continue
            if not result.content:
                continue
            sources.append(result.to_source())
        report.fetched = len(sources)
        report.input_bytes = sum(len(s.content) for s in sources)
        return sources

    def _filter_sources(
        self, sources: Sequence[StyleSheetSource], used: UsedSelectorSet
    ) -> str:
        return "".join(
            filter_css(minify(source.content), used, self.config.safelist)
            for source in sources
        )

    # ------------------------------------------------------------------
    # Failure containment
    # ------------------------------------------------------------------

    @staticmethod
    def _run_stage(stage: str, fn: Callable[..., Any], *args: Any) -> StageResult[Any]:
        try:
            value = fn(*args)
        except Exception as exc:
            return StageResult(
                stage=stage,
                status=Status.FAIL,
                error=StageError(stage, str(exc) or type(exc).__name__, cause=exc),
            )
        return StageResult(stage=stage, status=Status.SUCCESS, value=value)

    def _abort(
        self, html: str, result: StageResult[Any], report: OptimizationReport
    ) -> tuple[str, OptimizationReport]:
        report.failed_stage = result.stage
        self._log(f"CSS optimization error: {result.error}")
        return html, report

    def _log(self, message: str) -> None:
        if self._log_fn is None:
            logger.warning(message)
            return
        try:
            self._log_fn(message)
        except Exception:
            logger.exception("Log callback failed for message: %s", message)
