"""Dependency injection container for the analysis engine."""
from dependency_injector import containers, providers
import requests

from linkhealth import config as env
from linkhealth.services.analysis_registry import InMemoryAnalysisRegistry
from linkhealth.services.analysis_runner import AnalysisRunner
from linkhealth.services.analyzer import BrokenLinkAnalyzer
from linkhealth.services.analyzer_config_parser import AnalyzerConfigParser
from linkhealth.services.content_review_service import ContentReviewService
from linkhealth.services.crawl_policy import CrawlPolicy
from linkhealth.services.crawler import Crawler
from linkhealth.services.error_classifier import ErrorClassifier
from linkhealth.services.headless_browser_renderer import PlaywrightHeadlessOptions, PlaywrightHeadlessRenderer
from linkhealth.services.http_service import HttpService
from linkhealth.services.link_processor import LinkProcessor
from linkhealth.services.link_verifier import LinkVerifier
from linkhealth.services.report_builder import ReportBuilder


# Environment variables used by the container (read via `linkhealth.config` helpers).
#
# USER_AGENT (str, default: "Mozilla/5.0 (compatible; BrokenLinkChecker/1.0)")
#   User-Agent for the headless browser and for HEAD link checks.
#
# HTTP_TIMEOUT_MS (int milliseconds, default: 10000)
#   Default per-request timeout when an analysis request doesn't set one.
#
# LINKHEALTH_VERIFY_BATCH_SIZE (int, default: 10)
#   Links verified concurrently per batch.
#
# LINKHEALTH_MAX_LINKS_PER_PAGE (int, default: 10)
#   Internal links the crawler descends into per page.
#
# LINKHEALTH_HEADLESS_WAIT_UNTIL (str, default: "networkidle")
#   Playwright navigation readiness: domcontentloaded | load | networkidle.
#
# LINKHEALTH_MAX_COMPLETED_RECORDS (int, default: 1000)
#   Completed analyses kept in the in-memory registry.
#
# LINKHEALTH_BLOCK_LOCALHOST (bool, default: false)
#   Reject localhost seed URLs during request validation.
ENV = {
    "USER_AGENT": env.get_str_env("USER_AGENT", env.DEFAULT_USER_AGENT),
    "HTTP_TIMEOUT_MS": env.get_int_env("HTTP_TIMEOUT_MS", 10_000),
    "LINKHEALTH_VERIFY_BATCH_SIZE": env.get_int_env("LINKHEALTH_VERIFY_BATCH_SIZE", 10),
    "LINKHEALTH_MAX_LINKS_PER_PAGE": env.get_int_env("LINKHEALTH_MAX_LINKS_PER_PAGE", 10),
    "LINKHEALTH_HEADLESS_WAIT_UNTIL": env.headless_wait_until(),
    "LINKHEALTH_MAX_COMPLETED_RECORDS": env.max_completed_records(),
    "LINKHEALTH_BLOCK_LOCALHOST": env.block_localhost(),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for linkhealth."""

    config = providers.Configuration(default=ENV)

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.head),
        timeout=providers.Callable(lambda ms: ms / 1000, config.HTTP_TIMEOUT_MS.as_(int)),
    )

    content_review_service = providers.Singleton(ContentReviewService)
    error_classifier = providers.Singleton(ErrorClassifier)
    report_builder = providers.Singleton(ReportBuilder)

    config_parser = providers.Singleton(
        AnalyzerConfigParser,
        default_timeout_ms=config.HTTP_TIMEOUT_MS.as_(int),
        block_localhost=config.LINKHEALTH_BLOCK_LOCALHOST.as_(bool),
    )

    # A new renderer (and browser) per analysis run
    renderer = providers.Factory(
        PlaywrightHeadlessRenderer,
        user_agent=config.USER_AGENT.as_(str),
        options=providers.Factory(
            PlaywrightHeadlessOptions,
            wait_until=config.LINKHEALTH_HEADLESS_WAIT_UNTIL.as_(str),
        ),
        content_review_service=content_review_service,
    )

    crawler = providers.Factory(
        Crawler,
        link_processor=providers.Factory(LinkProcessor),
        crawl_policy=providers.Factory(CrawlPolicy),
        error_classifier=error_classifier,
        user_agent=config.USER_AGENT.as_(str),
        max_links_per_page=config.LINKHEALTH_MAX_LINKS_PER_PAGE.as_(int),
    )

    link_verifier = providers.Factory(
        LinkVerifier,
        http_service=http_service,
        error_classifier=error_classifier,
        batch_size=config.LINKHEALTH_VERIFY_BATCH_SIZE.as_(int),
    )

    # Analyzers hold per-run cancellation state: always a fresh instance
    analyzer = providers.Factory(
        BrokenLinkAnalyzer,
        renderer_factory=renderer.provider,
        crawler=crawler,
        verifier=link_verifier,
        report_builder=report_builder,
    )

    analysis_registry = providers.Singleton(
        InMemoryAnalysisRegistry,
        max_completed_records=config.LINKHEALTH_MAX_COMPLETED_RECORDS.as_(int),
    )

    analysis_runner = providers.Singleton(
        AnalysisRunner,
        analyzer_factory=analyzer.provider,
        registry=analysis_registry,
        report_builder=report_builder,
    )
