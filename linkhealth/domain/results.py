"""Result records produced by an analysis.

The `to_dict()` shapes use the camelCase field names report exporters consume;
they must not change.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

INTERNAL = "internal"
EXTERNAL = "external"


@dataclass(frozen=True)
class PageVisitResult:
    url: str
    status_code: int
    links: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PageData:
    """Payload of the page-analyzed callback."""
    url: str
    status_code: int
    links_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "statusCode": self.status_code, "linksCount": self.links_count}


@dataclass(frozen=True)
class ProgressData:
    """Payload of the progress callback."""
    percentage: float
    pages_analyzed: int
    links_found: int
    broken_links: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "percentage": self.percentage,
            "pagesAnalyzed": self.pages_analyzed,
            "linksFound": self.links_found,
            "brokenLinks": self.broken_links,
        }


@dataclass(frozen=True)
class BrokenLinkRecord:
    source_url: str
    target_url: str
    status_code: int
    error_type: str
    link_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourceUrl": self.source_url,
            "targetUrl": self.target_url,
            "statusCode": self.status_code,
            "errorType": self.error_type,
            "linkType": self.link_type,
        }


@dataclass(frozen=True)
class AnalysisSummary:
    total_pages: int
    total_links: int
    broken_links: int
    health_score: int
    analysis_time: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPages": self.total_pages,
            "totalLinks": self.total_links,
            "brokenLinks": self.broken_links,
            "healthScore": self.health_score,
            "analysisTime": self.analysis_time,
        }


@dataclass(frozen=True)
class AnalysisResults:
    summary: AnalysisSummary
    broken_links: List[BrokenLinkRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "brokenLinks": [b.to_dict() for b in self.broken_links],
        }
