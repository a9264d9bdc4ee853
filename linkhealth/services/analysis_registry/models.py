from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from linkhealth.domain.results import AnalysisResults

PENDING = "pending"
RUNNING = "running"
COMPLETED = "completed"
FAILED = "failed"
CANCELLED = "cancelled"

ACTIVE_STATUSES = (PENDING, RUNNING)


@dataclass
class AnalysisRecord:
    id: str
    url: str
    status: str
    created_at: datetime
    last_seen: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    progress: float = 0.0
    pages_analyzed: int = 0
    links_found: int = 0
    broken_links: int = 0
    current_url: Optional[str] = None
    error: Optional[str] = None
    results: Optional[AnalysisResults] = None

    def to_status_dict(self) -> dict:
        """Status view in the camelCase shape API clients poll."""
        return {
            "analysisId": self.id,
            "status": self.status,
            "progress": self.progress,
            "pagesAnalyzed": self.pages_analyzed,
            "linksFound": self.links_found,
            "brokenLinks": self.broken_links,
            "startedAt": self.started_at or self.created_at,
            "completedAt": self.completed_at,
            "error": self.error,
        }


@dataclass(frozen=True)
class AnalysisHandle:
    analysis_id: str
    stop_event: threading.Event
