import logging
from typing import Optional

from linkhealth import config as env
from linkhealth.domain.config import AnalyzerConfig
from linkhealth.domain.crawl_state import CrawlState
from linkhealth.domain.error_types import ErrorType
from linkhealth.domain.results import BrokenLinkRecord, PageData, PageVisitResult, ProgressData
from linkhealth.exceptions import RendererUnavailableError
from linkhealth.services.callbacks import notify
from linkhealth.services.crawl_policy import CrawlPolicy
from linkhealth.services.error_classifier import ErrorClassifier
from linkhealth.services.link_processor import LinkProcessor
from linkhealth.services.renderer import PageRenderer

logger = logging.getLogger(__name__)

CRAWLER_SOURCE = "crawler"


class Crawler:
    """Depth-bounded, single-threaded link discovery.

    Descends recursively from the seed, rendering each page once and
    following at most `max_links_per_page` internal links per page, so
    link-dense sites are sampled rather than crawled exhaustively.
    """

    def __init__(
        self,
        *,
        link_processor: Optional[LinkProcessor] = None,
        crawl_policy: Optional[CrawlPolicy] = None,
        error_classifier: Optional[ErrorClassifier] = None,
        user_agent: Optional[str] = None,
        max_links_per_page: Optional[int] = None,
    ):
        self.link_processor = link_processor or LinkProcessor()
        self.crawl_policy = crawl_policy or CrawlPolicy()
        self.error_classifier = error_classifier or ErrorClassifier()
        self.user_agent = user_agent or env.USER_AGENT
        self.max_links_per_page = max_links_per_page if max_links_per_page is not None else env.MAX_LINKS_PER_PAGE

    def crawl(self, seed_url: str, base_host: str, config: AnalyzerConfig, state: CrawlState, renderer: PageRenderer) -> None:
        """Crawl from `seed_url`, filling `state.visited_urls` and `state.found_links`."""
        self._crawl_from(seed_url, 0, base_host, config, state, renderer)
        logger.info(
            "Crawl finished: %s pages visited, %s links found%s",
            state.visited_count,
            state.found_count,
            " (cancelled)" if state.is_stopped() else "",
        )

    def visit_page(self, url: str, base_host: str, config: AnalyzerConfig, state: CrawlState, renderer: PageRenderer) -> PageVisitResult:
        """Render one page and return its filtered outbound links."""
        rendered = renderer.render(
            url,
            timeout_ms=config.timeout,
            user_agent=self.user_agent,
            stop_event=state.stop_event,
        )
        links = self.link_processor.filter_links(
            rendered.final_url or url,
            rendered.hrefs,
            base_host,
            config.include_external,
        )
        if rendered.status_code < 200 or rendered.status_code >= 300:
            logger.warning("Non-success status for %s: %s", url, rendered.status_code)
        return PageVisitResult(url=url, status_code=rendered.status_code, links=links)

    def _crawl_from(self, url: str, current_depth: int, base_host: str, config: AnalyzerConfig, state: CrawlState, renderer: PageRenderer) -> None:
        if self.crawl_policy.should_skip(url, current_depth, config.depth, state, config.exclude_paths):
            return
        state.mark_visited(url)

        try:
            visit = self.visit_page(url, base_host, config, state, renderer)
        except RendererUnavailableError:
            raise
        except Exception as e:
            if state.is_stopped():
                logger.info("Render of %s interrupted by cancellation", url)
                return
            logger.error("Error crawling %s: %s", url, e)
            self._record_navigation_failure(url, base_host, config, state)
            return

        self.link_processor.record_links(state, url, visit.links)
        logger.info("Rendered %s -> status %s, %s links", url, visit.status_code, len(visit.links))

        notify(
            config.on_page_analyzed,
            PageData(url=url, status_code=visit.status_code, links_count=len(visit.links)),
            "page_analyzed",
        )
        notify(config.on_progress, self._progress(config, state), "progress")

        if not self.crawl_policy.should_descend(current_depth, config.depth):
            return
        for link in self.link_processor.internal_links(visit.links, base_host, limit=self.max_links_per_page):
            if state.is_stopped():
                logger.info("Crawl cancelled during traversal of %s", url)
                return
            self._crawl_from(link, current_depth + 1, base_host, config, state, renderer)

    def _record_navigation_failure(self, url: str, base_host: str, config: AnalyzerConfig, state: CrawlState) -> None:
        record = BrokenLinkRecord(
            source_url=CRAWLER_SOURCE,
            target_url=url,
            status_code=0,
            error_type=ErrorType.NAVIGATION_ERROR,
            link_type=self.error_classifier.link_type(url, base_host),
        )
        state.add_broken_link(record)
        notify(config.on_broken_link, record, "broken_link")

    def _progress(self, config: AnalyzerConfig, state: CrawlState) -> ProgressData:
        # Rough estimate: total pages are unknowable ahead of time
        percentage = min(100.0, state.visited_count * 100 / (config.depth * 10))
        return ProgressData(
            percentage=percentage,
            pages_analyzed=state.visited_count,
            links_found=state.found_count,
            broken_links=state.broken_count,
        )
