from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from .cancellation import _InMemoryAnalysisCancellationManager
from .models import AnalysisHandle, AnalysisRecord
from .store import _InMemoryAnalysisRecordStore


class InMemoryAnalysisRegistry:
    """Thread-safe in-memory registry of analyses and their progress.

    Ephemeral and single-process. Each analysis gets an id and a stop event;
    `cancel()` sets that event so the engine stops at its next check.
    Reads return copies so callers never observe a record mid-update.
    """

    def __init__(self, *, max_completed_records: int = 1000):
        self._lock = threading.Lock()
        self._records = _InMemoryAnalysisRecordStore(max_completed_records=max_completed_records)
        self._cancellation = _InMemoryAnalysisCancellationManager()

    def create(self, url: str) -> AnalysisHandle:
        with self._lock:
            aid = str(uuid.uuid4())
            self._records.create_pending(analysis_id=aid, url=url, now=datetime.utcnow())
            stop_event = self._cancellation.create(aid)
            return AnalysisHandle(analysis_id=aid, stop_event=stop_event)

    def start(self, analysis_id: str) -> bool:
        with self._lock:
            return self._records.mark_running(analysis_id, now=datetime.utcnow())

    def update(self, analysis_id: str, **fields) -> bool:
        with self._lock:
            return self._records.update(analysis_id, now=datetime.utcnow(), **fields)

    def finish(self, analysis_id: str, *, status: str = "completed", error: Optional[str] = None, results=None) -> bool:
        with self._lock:
            ok = self._records.finish(analysis_id, status=status, error=error, results=results, now=datetime.utcnow())
            if ok:
                self._cancellation.forget(analysis_id)
                self._evict()
            return ok

    def cancel(self, analysis_id: str) -> bool:
        """Request cancellation of a pending or running analysis."""
        with self._lock:
            rec = self._records.get(analysis_id)
            if rec is None or not self._cancellation.request_cancel(analysis_id):
                return False
            if not self._records.mark_cancelled(analysis_id, now=datetime.utcnow()):
                return False
            self._evict()
            return True

    def get(self, analysis_id: str) -> Optional[AnalysisRecord]:
        with self._lock:
            rec = self._records.get(analysis_id)
            return replace(rec) if rec else None

    def get_stop_event(self, analysis_id: str) -> Optional[threading.Event]:
        with self._lock:
            return self._cancellation.get(analysis_id)

    def list_active(self) -> List[AnalysisRecord]:
        with self._lock:
            return [replace(r) for r in self._records.list_active()]

    def _evict(self) -> None:
        for evicted_id in self._records.evict_completed_overflow():
            self._cancellation.forget(evicted_id)
