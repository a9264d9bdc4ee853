"""Domain objects for linkhealth - explicit re-exports to satisfy linters."""
from .config import AnalyzerConfig as AnalyzerConfig
from .crawl_state import CrawlState as CrawlState
from .results import AnalysisResults as AnalysisResults
from .results import AnalysisSummary as AnalysisSummary
from .results import BrokenLinkRecord as BrokenLinkRecord
from .results import PageData as PageData
from .results import PageVisitResult as PageVisitResult
from .results import ProgressData as ProgressData

__all__ = [
    "AnalyzerConfig",
    "CrawlState",
    "AnalysisResults",
    "AnalysisSummary",
    "BrokenLinkRecord",
    "PageData",
    "PageVisitResult",
    "ProgressData",
]
