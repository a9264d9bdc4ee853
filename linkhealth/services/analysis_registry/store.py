from __future__ import annotations

from collections import deque
from datetime import datetime
from typing import Dict, List, Optional

from .models import ACTIVE_STATUSES, CANCELLED, COMPLETED, PENDING, RUNNING, AnalysisRecord


class _InMemoryAnalysisRecordStore:
    """Records of pending, running and recently completed analyses.

    Completed records are retained up to `max_completed_records`, oldest
    evicted first. Not thread-safe; the registry serializes access.
    """

    def __init__(self, *, max_completed_records: int):
        if max_completed_records < 0:
            raise ValueError("max_completed_records must be >= 0")
        self._records: Dict[str, AnalysisRecord] = {}
        self._max_completed_records = max_completed_records
        self._completed_order = deque()

    def create_pending(self, *, analysis_id: str, url: str, now: datetime) -> AnalysisRecord:
        rec = AnalysisRecord(id=analysis_id, url=url, status=PENDING, created_at=now, last_seen=now)
        self._records[analysis_id] = rec
        return rec

    def get(self, analysis_id: str) -> Optional[AnalysisRecord]:
        return self._records.get(analysis_id)

    def mark_running(self, analysis_id: str, *, now: datetime) -> bool:
        rec = self._records.get(analysis_id)
        if not rec or rec.status != PENDING:
            return False
        rec.status = RUNNING
        rec.started_at = now
        rec.last_seen = now
        return True

    def update(
        self,
        analysis_id: str,
        *,
        progress: Optional[float] = None,
        pages_analyzed: Optional[int] = None,
        links_found: Optional[int] = None,
        broken_links: Optional[int] = None,
        current_url: Optional[str] = None,
        now: datetime,
    ) -> bool:
        rec = self._records.get(analysis_id)
        if not rec or rec.status not in ACTIVE_STATUSES:
            return False
        if progress is not None:
            rec.progress = progress
        if pages_analyzed is not None:
            rec.pages_analyzed = pages_analyzed
        if links_found is not None:
            rec.links_found = links_found
        if broken_links is not None:
            rec.broken_links = broken_links
        if current_url is not None:
            rec.current_url = current_url
        rec.last_seen = now
        return True

    def finish(self, analysis_id: str, *, status: str, now: datetime, error: Optional[str] = None, results=None) -> bool:
        rec = self._records.get(analysis_id)
        if not rec:
            return False
        already_completed = rec.status not in ACTIVE_STATUSES
        # A cancelled analysis keeps its status but still receives its partial results
        if rec.status != CANCELLED:
            rec.status = status
            rec.completed_at = now
            if status == COMPLETED:
                rec.progress = 100.0
        rec.last_seen = now
        if error:
            rec.error = error
        if results is not None:
            rec.results = results
            rec.pages_analyzed = results.summary.total_pages
            rec.links_found = results.summary.total_links
            rec.broken_links = results.summary.broken_links
        if not already_completed:
            self._completed_order.append(analysis_id)
        return True

    def mark_cancelled(self, analysis_id: str, *, now: datetime) -> bool:
        rec = self._records.get(analysis_id)
        if not rec or rec.status not in ACTIVE_STATUSES:
            return False
        rec.status = CANCELLED
        rec.completed_at = now
        rec.last_seen = now
        self._completed_order.append(analysis_id)
        return True

    def evict_completed_overflow(self) -> List[str]:
        evicted: List[str] = []
        while len(self._completed_order) > self._max_completed_records:
            oldest = self._completed_order.popleft()
            if oldest in self._records:
                del self._records[oldest]
                evicted.append(oldest)
        return evicted

    def list_active(self) -> List[AnalysisRecord]:
        return [r for r in self._records.values() if r.status in ACTIVE_STATUSES]
