import threading
from typing import Dict, List, Optional

from linkhealth.domain.results import BrokenLinkRecord


class CrawlState:
    """
    Mutable state of a single analysis run.

    Owned by one `BrokenLinkAnalyzer.analyze` call and discarded when it
    returns. Visited pages and found links keep insertion order so batches and
    reports are deterministic for a given crawl.

    Only `add_broken_link` is called from verifier worker threads' collector;
    it is lock-guarded so observers reading counts mid-run see a consistent list.
    """

    def __init__(self, stop_event: Optional[threading.Event] = None):
        self.stop_event = stop_event if stop_event is not None else threading.Event()
        self._visited: Dict[str, None] = {}
        self._found: Dict[str, None] = {}
        # target url -> first page that linked to it
        self._link_sources: Dict[str, str] = {}
        self._broken: List[BrokenLinkRecord] = []
        self._lock = threading.Lock()

    # Visited pages

    def mark_visited(self, url: str) -> None:
        self._visited[url] = None

    def is_visited(self, url: str) -> bool:
        return url in self._visited

    @property
    def visited_urls(self) -> List[str]:
        return list(self._visited)

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    # Found links

    def add_found_link(self, url: str, source_url: Optional[str] = None) -> bool:
        """Record a discovered link; returns False if it was already known."""
        if source_url is not None and url not in self._link_sources:
            self._link_sources[url] = source_url
        if url in self._found:
            return False
        self._found[url] = None
        return True

    @property
    def found_links(self) -> List[str]:
        return list(self._found)

    @property
    def found_count(self) -> int:
        return len(self._found)

    def source_of(self, url: str) -> Optional[str]:
        return self._link_sources.get(url)

    # Broken links

    def add_broken_link(self, record: BrokenLinkRecord) -> None:
        with self._lock:
            self._broken.append(record)

    @property
    def broken_links(self) -> List[BrokenLinkRecord]:
        with self._lock:
            return list(self._broken)

    @property
    def broken_count(self) -> int:
        with self._lock:
            return len(self._broken)

    # Cancellation

    def is_stopped(self) -> bool:
        return self.stop_event.is_set()

    def mark_stopped(self) -> None:
        self.stop_event.set()
