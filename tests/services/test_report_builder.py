import pytest

from linkhealth.domain.crawl_state import CrawlState
from linkhealth.domain.results import AnalysisResults, AnalysisSummary, BrokenLinkRecord
from linkhealth.services.report_builder import ReportBuilder, calculate_health_score


def test_health_score_is_100_without_links():
    assert calculate_health_score(0, 0) == 100


def test_health_score_rounding():
    # 7 of 23 broken -> 100 - 30.43 = 69.57 -> 70
    assert calculate_health_score(7, 23) == 70


def test_health_score_rounds_half_up():
    # 1 of 8 broken -> 87.5 -> 88
    assert calculate_health_score(1, 8) == 88


@pytest.mark.parametrize("broken,total", [(0, 5), (5, 5), (9, 5), (3, 7), (1, 1000)])
def test_health_score_stays_in_range(broken, total):
    assert 0 <= calculate_health_score(broken, total) <= 100


def test_health_score_clamped_at_zero_when_navigation_failures_exceed_links():
    assert calculate_health_score(4, 2) == 0


def test_build_summarizes_state():
    state = CrawlState()
    state.mark_visited("https://example.com/")
    for i in range(4):
        state.add_found_link(f"https://example.com/{i}", source_url="https://example.com/")
    record = BrokenLinkRecord("https://example.com/", "https://example.com/2", 404, "404", "internal")
    state.add_broken_link(record)

    results = ReportBuilder().build(state, 1500)

    assert results.summary == AnalysisSummary(
        total_pages=1, total_links=4, broken_links=1, health_score=75, analysis_time=1500
    )
    assert results.broken_links == [record]


def test_recommendations_follow_error_types():
    results = AnalysisResults(
        summary=AnalysisSummary(1, 3, 3, 0, 10),
        broken_links=[
            BrokenLinkRecord("a", "https://example.com/x", 404, "404", "internal"),
            BrokenLinkRecord("a", "https://example.com/y", 404, "404", "internal"),
            BrokenLinkRecord("a", "https://other.org/", 0, "timeout", "external"),
        ],
    )
    advice = ReportBuilder().recommendations(results)
    assert "404" in advice[0]
    assert any("timeout" in a for a in advice)
    assert any("external" in a for a in advice)


def test_no_recommendations_for_healthy_site():
    results = AnalysisResults(summary=AnalysisSummary(1, 3, 0, 100, 10), broken_links=[])
    assert ReportBuilder().recommendations(results) == []
