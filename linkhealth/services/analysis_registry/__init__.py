from .models import AnalysisRecord, AnalysisHandle
from .registry import InMemoryAnalysisRegistry

__all__ = ["AnalysisRecord", "AnalysisHandle", "InMemoryAnalysisRegistry"]
