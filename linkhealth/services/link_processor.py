import logging
from typing import Iterable, List, Optional

from linkhealth.domain.crawl_state import CrawlState
from linkhealth.utils.url_utils import is_same_host, normalize_url

logger = logging.getLogger(__name__)


class LinkProcessor:
    """Turn raw hrefs of a rendered page into the page's outbound link list."""

    def filter_links(self, page_url: str, hrefs: Iterable[str], base_host: str, include_external: bool) -> List[str]:
        """Normalize hrefs against `page_url`, drop unusable ones and dedupe.

        Order of first appearance is preserved; it decides which links the
        crawler descends into.
        """
        links: List[str] = []
        seen = set()
        for href in hrefs:
            link = normalize_url(href, page_url)
            if link is None:
                logger.debug("Skipping (unsupported) %r on %s", href, page_url)
                continue
            if not include_external and not is_same_host(link, base_host):
                logger.debug("Skipping (external) %s -> not same host as %s", link, base_host)
                continue
            if link in seen:
                continue
            seen.add(link)
            links.append(link)
        return links

    def record_links(self, state: CrawlState, page_url: str, links: Iterable[str]) -> int:
        """Union `links` into the found set; returns how many were new."""
        added = 0
        for link in links:
            if state.add_found_link(link, source_url=page_url):
                added += 1
        return added

    def internal_links(self, links: Iterable[str], base_host: str, limit: Optional[int] = None) -> List[str]:
        internal = [link for link in links if is_same_host(link, base_host)]
        if limit is not None:
            return internal[:limit]
        return internal
