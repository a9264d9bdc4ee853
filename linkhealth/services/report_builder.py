import math
from collections import Counter
from typing import List

from linkhealth.domain.crawl_state import CrawlState
from linkhealth.domain.error_types import ErrorType
from linkhealth.domain.results import EXTERNAL, AnalysisResults, AnalysisSummary


def calculate_health_score(broken_count: int, total_links: int) -> int:
    """Percentage of found links that are not broken, rounded half up, clamped to [0, 100].

    An empty crawl scores 100: finding nothing is not evidence of breakage.
    """
    if total_links <= 0:
        return 100
    broken_percentage = (broken_count / total_links) * 100
    return max(0, min(100, math.floor(100 - broken_percentage + 0.5)))


_RECOMMENDATIONS = (
    (ErrorType.NOT_FOUND, "Fix or remove links that return 404, or redirect the missing pages."),
    (ErrorType.SERVER_ERROR, "Investigate server errors (5xx) on the linked pages."),
    (ErrorType.FORBIDDEN, "Review access rules for links that return 403 Forbidden."),
    (ErrorType.UNAUTHORIZED, "Avoid linking to pages that require authentication, or mark them accordingly."),
    (ErrorType.HTTP_ERROR, "Check links that return other 4xx client errors."),
    (ErrorType.DNS_ERROR, "Remove links to domains that no longer resolve."),
    (ErrorType.CONNECTION_REFUSED, "Verify that the hosts refusing connections are still online."),
    (ErrorType.TIMEOUT, "Check slow hosts or review the request timeout setting."),
    (ErrorType.SSL_ERROR, "Update links pointing at hosts with invalid TLS certificates."),
    (ErrorType.REDIRECT_LOOP, "Fix redirect chains that never resolve."),
    (ErrorType.NETWORK_ERROR, "Re-check links that failed with network errors."),
    (ErrorType.NAVIGATION_ERROR, "Make sure crawled pages load in a browser without errors."),
)


class ReportBuilder:
    def build(self, state: CrawlState, analysis_time_ms: int) -> AnalysisResults:
        broken = state.broken_links
        summary = AnalysisSummary(
            total_pages=state.visited_count,
            total_links=state.found_count,
            broken_links=len(broken),
            health_score=calculate_health_score(len(broken), state.found_count),
            analysis_time=int(analysis_time_ms),
        )
        return AnalysisResults(summary=summary, broken_links=broken)

    def recommendations(self, results: AnalysisResults) -> List[str]:
        """Advice for the error types present, most frequent first."""
        counts = Counter(b.error_type for b in results.broken_links)
        if not counts:
            return []
        order = {error_type: i for i, (error_type, _) in enumerate(_RECOMMENDATIONS)}
        advice = dict(_RECOMMENDATIONS)
        ranked = sorted(counts, key=lambda t: (-counts[t], order.get(t, len(order))))
        out = [advice.get(t, advice[ErrorType.NETWORK_ERROR]) for t in ranked]
        if any(b.link_type == EXTERNAL for b in results.broken_links):
            out.append("Verify connectivity with external sites before removing their links.")
        # keep first occurrence only
        return list(dict.fromkeys(out))
