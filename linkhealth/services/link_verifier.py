import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional

from linkhealth import config as env
from linkhealth.domain.config import AnalyzerConfig
from linkhealth.domain.crawl_state import CrawlState
from linkhealth.domain.results import BrokenLinkRecord, ProgressData
from linkhealth.exceptions import HttpFetchError
from linkhealth.services.callbacks import notify
from linkhealth.services.error_classifier import ErrorClassifier
from linkhealth.services.http_service import HttpService

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = "unknown"


class LinkVerifier:
    """Check every found link with a HEAD request, one bounded batch at a time.

    Links in a batch are checked concurrently; the next batch starts only once
    every request of the current one has settled. Peak concurrency is therefore
    `batch_size`, and progress reported after each batch never goes backwards.
    """

    def __init__(self, http_service: HttpService, *, error_classifier: Optional[ErrorClassifier] = None, batch_size: Optional[int] = None):
        self.http_service = http_service
        self.error_classifier = error_classifier or ErrorClassifier()
        self.batch_size = batch_size if batch_size is not None else env.VERIFY_BATCH_SIZE
        if self.batch_size <= 0:
            raise ValueError("batch_size must be > 0")

    def verify(self, config: AnalyzerConfig, state: CrawlState, base_host: str) -> None:
        links = state.found_links
        batches = [links[i:i + self.batch_size] for i in range(0, len(links), self.batch_size)]
        total = len(batches)
        if not total:
            return

        with ThreadPoolExecutor(max_workers=self.batch_size, thread_name_prefix="verify") as executor:
            for index, batch in enumerate(batches, start=1):
                if state.is_stopped():
                    logger.info("Verification cancelled before batch %s/%s", index, total)
                    return
                self._verify_batch(executor, batch, config, state, base_host)
                notify(
                    config.on_progress,
                    ProgressData(
                        percentage=min(100.0, index / total * 100),
                        pages_analyzed=state.visited_count,
                        links_found=state.found_count,
                        broken_links=state.broken_count,
                    ),
                    "progress",
                )
                logger.debug("Verified batch %s/%s (%s links)", index, total, len(batch))

    def _verify_batch(self, executor: ThreadPoolExecutor, batch: List[str], config: AnalyzerConfig, state: CrawlState, base_host: str) -> None:
        futures = {executor.submit(self.check_link, url, config, state, base_host): url for url in batch}
        # Records are collected on this thread only; workers never mutate state
        for future in as_completed(futures):
            url = futures[future]
            try:
                record = future.result()
            except Exception as e:
                logger.error("Unexpected error verifying %s: %s", url, e, exc_info=True)
                continue
            if record is None:
                continue
            state.add_broken_link(record)
            notify(config.on_broken_link, record, "broken_link")

    def check_link(self, url: str, config: AnalyzerConfig, state: CrawlState, base_host: str) -> Optional[BrokenLinkRecord]:
        """Return a BrokenLinkRecord if `url` is broken, else None."""
        try:
            response = self.http_service.head(url, timeout=config.timeout_seconds)
        except HttpFetchError as e:
            error_type = self.error_classifier.classify_exception(e)
            logger.warning("Link check failed for %s: %s (%s)", url, e.original, error_type)
            return self._record(url, 0, error_type, config, state, base_host)
        except Exception as e:
            error_type = self.error_classifier.classify_exception(e)
            logger.error("Unexpected error checking %s: %s", url, e, exc_info=True)
            return self._record(url, 0, error_type, config, state, base_host)

        error_type = self.error_classifier.classify_status(response.status_code)
        if error_type is None:
            if 300 <= response.status_code < 400:
                logger.debug("Redirect %s -> %s (%s)", url, response.location, response.status_code)
            return None
        logger.info("Broken link %s -> status %s", url, response.status_code)
        return self._record(url, response.status_code, error_type, config, state, base_host)

    def _record(self, url: str, status_code: int, error_type: str, config: AnalyzerConfig, state: CrawlState, base_host: str) -> BrokenLinkRecord:
        return BrokenLinkRecord(
            source_url=self._source_url(url, config, state),
            target_url=url,
            status_code=status_code,
            error_type=error_type,
            link_type=self.error_classifier.link_type(url, base_host),
        )

    def _source_url(self, url: str, config: AnalyzerConfig, state: CrawlState) -> str:
        if config.legacy_source_attribution:
            visited = state.visited_urls
            return visited[0] if visited else UNKNOWN_SOURCE
        return state.source_of(url) or UNKNOWN_SOURCE
