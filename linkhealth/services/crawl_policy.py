import logging
from typing import Iterable

from linkhealth.domain.crawl_state import CrawlState
from linkhealth.utils.url_utils import is_excluded

logger = logging.getLogger(__name__)


class CrawlPolicy:
    """Encapsulates crawl decision rules: cancellation, depth limit, revisits and excluded paths.

    Separates policy decisions from crawl orchestration logic.
    """

    def should_skip_due_to_cancellation(self, url: str, state: CrawlState) -> bool:
        if state.is_stopped():
            logger.info("Crawl cancelled before %s", url)
            return True
        return False

    def should_skip_due_to_depth(self, current_depth: int, max_depth: int) -> bool:
        """Depth counts from 0 at the seed; a page at `max_depth` is never rendered."""
        if current_depth >= max_depth:
            logger.debug("Skipping (max depth reached) at depth %s", current_depth)
            return True
        return False

    def should_skip_due_to_visit(self, url: str, state: CrawlState) -> bool:
        if state.is_visited(url):
            logger.debug("Skipping (visited) %s", url)
            return True
        return False

    def should_skip_due_to_exclusion(self, url: str, exclude_paths: Iterable[str]) -> bool:
        if is_excluded(url, exclude_paths):
            logger.info("Skipping (excluded path) %s", url)
            return True
        return False

    def should_skip(self, url: str, current_depth: int, max_depth: int, state: CrawlState, exclude_paths: Iterable[str]) -> bool:
        return (
            self.should_skip_due_to_cancellation(url, state)
            or self.should_skip_due_to_depth(current_depth, max_depth)
            or self.should_skip_due_to_visit(url, state)
            or self.should_skip_due_to_exclusion(url, exclude_paths)
        )

    def should_descend(self, current_depth: int, max_depth: int) -> bool:
        return current_depth < max_depth - 1
