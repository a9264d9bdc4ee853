"""linkhealth - broken-link analysis engine."""
from linkhealth.services.analyzer import BrokenLinkAnalyzer as BrokenLinkAnalyzer
from linkhealth.domain.config import AnalyzerConfig as AnalyzerConfig
from linkhealth.domain.results import AnalysisResults as AnalysisResults

__all__ = ["BrokenLinkAnalyzer", "AnalyzerConfig", "AnalysisResults"]
