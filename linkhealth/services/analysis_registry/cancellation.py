from __future__ import annotations

import threading
from typing import Dict, Optional


class _InMemoryAnalysisCancellationManager:
    """Owns one stop event per tracked analysis."""

    def __init__(self, *, event_factory=threading.Event):
        self._event_factory = event_factory
        self._stop_events: Dict[str, threading.Event] = {}

    def create(self, analysis_id: str) -> threading.Event:
        ev = self._event_factory()
        self._stop_events[analysis_id] = ev
        return ev

    def get(self, analysis_id: str) -> Optional[threading.Event]:
        return self._stop_events.get(analysis_id)

    def request_cancel(self, analysis_id: str) -> bool:
        ev = self._stop_events.get(analysis_id)
        if not ev:
            return False
        ev.set()
        return True

    def forget(self, analysis_id: str) -> None:
        # Holders of the event keep their reference; only the mapping goes
        self._stop_events.pop(analysis_id, None)
