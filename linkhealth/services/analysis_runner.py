import logging
import threading
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from linkhealth.domain.config import AnalyzerConfig
from linkhealth.domain.results import AnalysisResults, PageData, ProgressData
from linkhealth.exceptions import RendererUnavailableError
from linkhealth.services.analysis_registry import InMemoryAnalysisRegistry
from linkhealth.services.analysis_registry.models import CANCELLED, COMPLETED, FAILED, AnalysisRecord
from linkhealth.services.analyzer import BrokenLinkAnalyzer
from linkhealth.services.callbacks import notify
from linkhealth.services.report_builder import ReportBuilder

logger = logging.getLogger(__name__)


class AnalysisRunner:
    """Tracks analyses by id and runs them with a fresh analyzer each time.

    `create()` registers a pending analysis; `run()` executes it synchronously
    on the calling thread, mirroring progress into the registry. `cancel()`
    is safe to call from another thread while `run()` is in progress.
    """

    def __init__(self, *, analyzer_factory: Callable[..., BrokenLinkAnalyzer], registry: Optional[InMemoryAnalysisRegistry] = None, report_builder: Optional[ReportBuilder] = None):
        self.analyzer_factory = analyzer_factory
        self.registry = registry or InMemoryAnalysisRegistry()
        self.report_builder = report_builder or ReportBuilder()
        self._lock = threading.Lock()
        self._configs: Dict[str, AnalyzerConfig] = {}

    def create(self, config: AnalyzerConfig) -> str:
        handle = self.registry.create(config.url)
        with self._lock:
            self._configs[handle.analysis_id] = config
        logger.info("Created analysis %s for %s", handle.analysis_id, config.url)
        return handle.analysis_id

    def _tracked_config(self, analysis_id: str, config: AnalyzerConfig) -> AnalyzerConfig:
        """Wrap the caller's callbacks so the registry sees progress too."""
        registry = self.registry

        def on_progress(progress: ProgressData):
            registry.update(
                analysis_id,
                progress=progress.percentage,
                pages_analyzed=progress.pages_analyzed,
                links_found=progress.links_found,
                broken_links=progress.broken_links,
            )
            notify(config.on_progress, progress, "progress")

        def on_page_analyzed(page: PageData):
            registry.update(analysis_id, current_url=page.url)
            notify(config.on_page_analyzed, page, "page_analyzed")

        return replace(config, on_progress=on_progress, on_page_analyzed=on_page_analyzed)

    def run(self, analysis_id: str) -> Optional[AnalysisResults]:
        """Run a created analysis. Returns None if it was cancelled before starting."""
        with self._lock:
            config = self._configs.pop(analysis_id, None)
        if config is None:
            raise KeyError(f"Unknown analysis: {analysis_id}")

        stop_event = self.registry.get_stop_event(analysis_id)
        if stop_event is None or not self.registry.start(analysis_id):
            logger.info("Analysis %s is no longer pending; not running", analysis_id)
            return None

        analyzer = self.analyzer_factory(stop_event=stop_event)
        try:
            results = analyzer.analyze(self._tracked_config(analysis_id, config))
        except RendererUnavailableError as e:
            logger.error("Analysis %s failed: %s", analysis_id, e)
            self.registry.finish(analysis_id, status=FAILED, error=str(e))
            raise
        except Exception as e:
            logger.error("Analysis %s failed unexpectedly: %s", analysis_id, e, exc_info=True)
            self.registry.finish(analysis_id, status=FAILED, error=str(e))
            raise

        status = CANCELLED if stop_event.is_set() else COMPLETED
        self.registry.finish(analysis_id, status=status, results=results)
        return results

    def cancel(self, analysis_id: str) -> bool:
        return self.registry.cancel(analysis_id)

    def status(self, analysis_id: str) -> Optional[dict]:
        rec = self.registry.get(analysis_id)
        return rec.to_status_dict() if rec else None

    def results(self, analysis_id: str) -> Optional[AnalysisResults]:
        rec: Optional[AnalysisRecord] = self.registry.get(analysis_id)
        if rec is None or rec.status != COMPLETED:
            return None
        return rec.results

    def recommendations(self, analysis_id: str) -> List[str]:
        results = self.results(analysis_id)
        return self.report_builder.recommendations(results) if results else []
