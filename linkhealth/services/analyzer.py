import logging
import threading
import time
from typing import Callable, Optional
from urllib.parse import urlsplit

import requests

from linkhealth import config as env
from linkhealth.domain.config import AnalyzerConfig
from linkhealth.domain.crawl_state import CrawlState
from linkhealth.domain.results import AnalysisResults
from linkhealth.exceptions import InvalidConfigError
from linkhealth.services.crawler import Crawler
from linkhealth.services.http_service import HttpService
from linkhealth.services.link_verifier import LinkVerifier
from linkhealth.services.renderer import PageRenderer
from linkhealth.services.report_builder import ReportBuilder
from linkhealth.utils.url_utils import normalize_url

logger = logging.getLogger(__name__)


class BrokenLinkAnalyzer:
    """Runs one broken-link analysis: crawl, then verify, then report.

    Construct a fresh analyzer per run. `cancel()` may be called from any
    thread while `analyze()` is running; work stops at the next page or batch
    boundary and the partial report is returned.

    The renderer is acquired once per `analyze()` call from `renderer_factory`
    and released on every exit path.
    """

    def __init__(
        self,
        *,
        renderer_factory: Callable[[], PageRenderer],
        http_service: Optional[HttpService] = None,
        crawler: Optional[Crawler] = None,
        verifier: Optional[LinkVerifier] = None,
        report_builder: Optional[ReportBuilder] = None,
        stop_event: Optional[threading.Event] = None,
    ):
        if renderer_factory is None:
            raise ValueError("renderer_factory is required")
        self.renderer_factory = renderer_factory
        if verifier is None:
            if http_service is None:
                http_service = HttpService(env.USER_AGENT, http_client=requests.head)
            verifier = LinkVerifier(http_service)
        self.crawler = crawler or Crawler()
        self.verifier = verifier
        self.report_builder = report_builder or ReportBuilder()
        self.stop_event = stop_event if stop_event is not None else threading.Event()

    def cancel(self) -> None:
        """Request cooperative cancellation of the running analysis."""
        logger.info("Cancellation requested")
        self.stop_event.set()

    @property
    def cancelled(self) -> bool:
        return self.stop_event.is_set()

    def _parse_seed(self, url: str):
        seed = normalize_url(url)
        if seed is None:
            raise InvalidConfigError([f"Malformed seed URL: {url!r}"])
        return seed, urlsplit(seed).hostname

    def analyze(self, config: AnalyzerConfig) -> AnalysisResults:
        """Analyze the site described by `config`.

        Raises InvalidConfigError for a malformed seed URL and
        RendererUnavailableError when no browser can be launched. Every
        per-page and per-link failure is reported as data.
        """
        if config is None:
            raise ValueError("config is required for analyze")
        started = time.monotonic()
        seed, base_host = self._parse_seed(config.url)
        state = CrawlState(stop_event=self.stop_event)
        logger.info("Starting analysis of %s (depth=%s, include_external=%s)", seed, config.depth, config.include_external)

        with self.renderer_factory() as renderer:
            self.crawler.crawl(seed, base_host, config, state, renderer)

        # Browser is released before verification; HEAD checks don't need it
        self.verifier.verify(config, state, base_host)

        elapsed_ms = int((time.monotonic() - started) * 1000)
        results = self.report_builder.build(state, elapsed_ms)
        logger.info(
            "Analysis of %s finished in %sms: %s pages, %s links, %s broken, health %s%s",
            seed,
            elapsed_ms,
            results.summary.total_pages,
            results.summary.total_links,
            results.summary.broken_links,
            results.summary.health_score,
            " (cancelled)" if state.is_stopped() else "",
        )
        return results
