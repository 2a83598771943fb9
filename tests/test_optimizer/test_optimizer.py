"""Tests for the optimization orchestrator."""

from __future__ import annotations

import httpx

from csspruner.config import OptimizerConfig
from csspruner.fetch import HttpFetcher
from csspruner.model import FetchResult
from csspruner.optimizer import CssOptimizer

PAGE = """<html><head>
<link rel="stylesheet" href="https://x.test/site.css">
<style>.inline{x:1}</style>
</head><body><div class="foo" id="main">hi</div></body></html>"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class FakeFetcher:
    """Serves canned stylesheet bodies; unknown URLs fail."""

    def __init__(self, sheets: dict[str, str]) -> None:
        self.sheets = sheets
        self.calls: list[str] = []

    def __call__(self, url: str) -> FetchResult:
        self.calls.append(url)
        if url in self.sheets:
            return FetchResult(url=url, content=self.sheets[url], ok=True)
        return FetchResult(url=url, ok=False, error=f"Failed to fetch {url}: HTTP 404")


class Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __call__(self, *args) -> None:
        self.calls.append(args)


def _optimizer(
    sheets: dict[str, str],
    *,
    urls: list[str] | None = None,
    used: set[str] | None = None,
    config: OptimizerConfig | None = None,
    **kwargs,
) -> CssOptimizer:
    return CssOptimizer(
        config or OptimizerConfig(safelist=()),
        fetch=FakeFetcher(sheets),
        extract_urls=lambda html: list(sheets) if urls is None else urls,
        extract_used=lambda html: used or set(),
        **kwargs,
    )


def _style_block(html: str) -> str:
    start = html.index('<style id="macp-optimized-css">') + len('<style id="macp-optimized-css">')
    return html[start : html.index("</style>", start)]


# ---------------------------------------------------------------------------
# End-to-end behaviour
# ---------------------------------------------------------------------------


class TestOptimize:
    def test_keeps_used_drops_unused(self):
        opt = _optimizer({"a.css": ".foo{color:red}.bar{color:blue}"}, used={"foo"})
        css = _style_block(opt.optimize(PAGE))
        assert ".foo{color:red}" in css
        assert ".bar{color:blue}" not in css

    def test_splices_html(self):
        opt = _optimizer({"a.css": ".foo{x:1}"}, used={"foo"})
        result = opt.optimize(PAGE)
        assert "<link" not in result
        assert ".inline{x:1}" not in result
        assert '<style id="macp-optimized-css">.foo{x:1}</style></head>' in result

    def test_sources_minified_before_filtering(self):
        opt = _optimizer({"a.css": "/* c */\n.foo {\n  color: red;\n}\n"}, used={"foo"})
        assert _style_block(opt.optimize(PAGE)) == ".foo{color:red;}"

    def test_sources_concatenated_in_discovery_order(self):
        sheets = {"1.css": ".b{x:1}", "2.css": ".a{x:2}"}
        opt = _optimizer(sheets, urls=["2.css", "1.css"], used={".a", ".b"})
        assert _style_block(opt.optimize(PAGE)) == ".a{x:2}.b{x:1}"

    def test_safelist_from_config(self):
        opt = _optimizer(
            {"a.css": ".col-6{x:1}.hero{x:2}"},
            config=OptimizerConfig(safelist=("col-*",)),
        )
        assert _style_block(opt.optimize(PAGE)) == ".col-6{x:1}"

    def test_extended_safelist(self):
        config = OptimizerConfig(safelist=()).with_safelist(lambda base: base + ["hero"])
        opt = _optimizer({"a.css": ".hero{x:2}"}, config=config)
        assert _style_block(opt.optimize(PAGE)) == ".hero{x:2}"

    def test_responsive_media_appended_after_rules(self):
        css = ".foo{x:1}@media (min-width: 768px) { .foo{color:red} .nope{x:0} }.z{y:1}"
        opt = _optimizer({"a.css": css}, used={"foo"})
        assert _style_block(opt.optimize(PAGE)) == ".foo{x:1}@media (min-width: 768px) {.foo{color:red}}"

    def test_print_media_never_present(self):
        css = "@media print { .foo{color:red} }.foo{x:1}"
        opt = _optimizer({"a.css": css}, used={"foo"})
        result = opt.optimize(PAGE)
        assert "@media print" not in result
        assert _style_block(result) == ".foo{x:1}"

    def test_font_display_patched(self):
        css = '@font-face{font-family:"X";src:url(a.woff)}.foo{x:1}'
        opt = _optimizer({"a.css": css}, used={"foo"}, config=OptimizerConfig())
        block = _style_block(opt.optimize(PAGE))
        assert block.count("font-display:swap;") == 1

    def test_custom_transforms_run_last(self):
        class Marker:
            def apply(self, css: str) -> str:
                return css + "/*done*/"

        opt = _optimizer({"a.css": ".foo{x:1}"}, used={"foo"}, transforms=[Marker()])
        assert _style_block(opt.optimize(PAGE)) == ".foo{x:1}/*done*/"

    def test_no_stylesheets(self):
        opt = _optimizer({}, urls=[])
        assert _style_block(opt.optimize(PAGE)) == ""


# ---------------------------------------------------------------------------
# Gating
# ---------------------------------------------------------------------------


class TestGating:
    def test_disabled_returns_input_untouched(self):
        persist = Recorder()
        fetcher = FakeFetcher({"a.css": ".foo{x:1}"})
        opt = CssOptimizer(
            OptimizerConfig(enabled=False),
            fetch=fetcher,
            extract_urls=lambda html: ["a.css"],
            persist=persist,
        )
        result, report = opt.optimize_with_report(PAGE)
        assert result is PAGE
        assert report.skipped
        assert fetcher.calls == []
        assert persist.calls == []

    def test_logged_in_request_skipped(self):
        fetcher = FakeFetcher({"a.css": ".foo{x:1}"})
        opt = CssOptimizer(fetch=fetcher, extract_urls=lambda html: ["a.css"], logged_in=True)
        result, report = opt.optimize_with_report(PAGE)
        assert result is PAGE
        assert report.skipped
        assert fetcher.calls == []

    def test_admin_request_skipped(self):
        fetcher = FakeFetcher({"a.css": ".foo{x:1}"})
        opt = CssOptimizer(fetch=fetcher, extract_urls=lambda html: ["a.css"], is_admin=True)
        assert opt.optimize(PAGE) is PAGE
        assert fetcher.calls == []

    def test_should_process_callable(self):
        class NoTransform:
            calls = 0

            def apply(self, css: str) -> str:
                NoTransform.calls += 1
                return css

        opt = _optimizer({"a.css": ".foo{x:1}"}, should_process=lambda: False, transforms=[NoTransform()])
        assert opt.optimize(PAGE) == PAGE
        assert NoTransform.calls == 0

    def test_gate_raising_returns_input(self):
        def broken() -> bool:
            raise RuntimeError("no request context")

        logs = Recorder()
        opt = _optimizer({}, should_process=broken, log=logs)
        assert opt.optimize(PAGE) == PAGE
        assert "no request context" in logs.calls[0][0]


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class TestPersistence:
    def test_persist_called_once_with_key(self):
        persist = Recorder()
        opt = _optimizer(
            {"a.css": ".foo{x:1}"},
            used={"foo"},
            persist=persist,
            page_url="https://x.test/page",
            is_mobile=True,
        )
        opt.optimize(PAGE)
        assert persist.calls == [(("https://x.test/page", True), ".foo{x:1}")]

    def test_url_argument_overrides_page_url(self):
        persist = Recorder()
        opt = _optimizer({}, persist=persist, page_url="https://x.test/default")
        opt.optimize(PAGE, url="https://x.test/other")
        assert persist.calls[0][0] == ("https://x.test/other", False)

    def test_persist_failure_does_not_block_splice(self):
        def broken_persist(key, css):
            raise OSError("disk full")

        logs = Recorder()
        opt = _optimizer({"a.css": ".foo{x:1}"}, used={"foo"}, persist=broken_persist, log=logs)
        result, report = opt.optimize_with_report(PAGE)
        assert _style_block(result) == ".foo{x:1}"
        assert report.persisted is False
        assert any("disk full" in call[0] for call in logs.calls)


# ---------------------------------------------------------------------------
# Failure containment
# ---------------------------------------------------------------------------


class TestFailures:
    def test_fetch_failure_skips_source(self):
        logs = Recorder()
        opt = _optimizer(
            {"good.css": ".foo{x:1}"},
            urls=["missing.css", "good.css"],
            used={"foo"},
            log=logs,
        )
        result, report = opt.optimize_with_report(PAGE)
        assert _style_block(result) == ".foo{x:1}"
        assert report.failed_urls == ["missing.css"]
        assert report.fetched == 1
        assert logs.calls == [("Failed to fetch CSS: Failed to fetch missing.css: HTTP 404",)]

    def test_transform_error_returns_original(self):
        class Broken:
            def apply(self, css: str) -> str:
                raise ValueError("bad transform")

        logs = Recorder()
        opt = _optimizer({"a.css": ".foo{x:1}"}, used={"foo"}, transforms=[Broken()], log=logs)
        result, report = opt.optimize_with_report(PAGE)
        assert result == PAGE
        assert report.failed_stage == "transform"
        assert "bad transform" in logs.calls[-1][0]

    def test_extractor_error_returns_original(self):
        def broken_extract(html):
            raise RuntimeError("parser exploded")

        opt = CssOptimizer(
            fetch=FakeFetcher({}),
            extract_urls=broken_extract,
            log=Recorder(),
        )
        result, report = opt.optimize_with_report(PAGE)
        assert result == PAGE
        assert report.failed_stage == "discover"

    def test_no_persist_on_failure(self):
        class Broken:
            def apply(self, css: str) -> str:
                raise ValueError("bad transform")

        persist = Recorder()
        opt = _optimizer({"a.css": ".foo{x:1}"}, transforms=[Broken()], persist=persist, log=Recorder())
        opt.optimize(PAGE)
        assert persist.calls == []

    def test_default_logger_used_without_log_callback(self, caplog):
        opt = _optimizer({}, urls=["gone.css"])
        with caplog.at_level("WARNING", logger="csspruner.optimizer"):
            opt.optimize(PAGE)
        assert "Failed to fetch CSS" in caplog.text

    def test_failing_log_callback_does_not_raise(self):
        def broken_log(message: str) -> None:
            raise RuntimeError("log sink down")

        opt = _optimizer({}, urls=["gone.css"], log=broken_log)
        assert "macp-optimized-css" in opt.optimize(PAGE)


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


class TestReport:
    def test_statistics(self):
        css = ".foo{x:1}.bar{x:2}@media (max-width:1px){.foo{x:3}}"
        opt = _optimizer({"a.css": css}, used={"foo"})
        _, report = opt.optimize_with_report(PAGE)
        assert report.stylesheet_urls == ["a.css"]
        assert report.fetched == 1
        assert report.media_blocks == 1
        assert report.input_bytes == len(css)
        assert report.output_bytes == len(".foo{x:1}@media (max-width:1px){.foo{x:3}}")
        assert 0 < report.savings < 1


# ---------------------------------------------------------------------------
# Default collaborators
# ---------------------------------------------------------------------------


class TestDefaultCollaborators:
    def test_http_fetch_and_bs4_extraction(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == "https://x.test/site.css"
            return httpx.Response(200, text=".foo{x:1}#main{y:2}.gone{z:3}")

        fetcher = HttpFetcher(transport=httpx.MockTransport(handler))
        opt = CssOptimizer(OptimizerConfig(safelist=()), fetch=fetcher.fetch, log=Recorder())
        css = _style_block(opt.optimize(PAGE))
        fetcher.close()
        assert css == ".foo{x:1}#main{y:2}"

    def test_relative_links_resolved_against_page_url(self):
        seen: list[str] = []

        def fetch(url: str) -> FetchResult:
            seen.append(url)
            return FetchResult(url=url, ok=False, error="offline")

        html = '<html><head><link rel="stylesheet" href="/css/a.css"></head></html>'
        opt = CssOptimizer(fetch=fetch, log=Recorder(), page_url="https://x.test/blog/")
        opt.optimize(html)
        assert seen == ["https://x.test/css/a.css"]

    def test_owned_fetcher_closed(self):
        with CssOptimizer() as opt:
            assert opt._owned_fetcher is not None
        assert opt._owned_fetcher._client.is_closed
