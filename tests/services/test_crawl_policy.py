from linkhealth.domain.crawl_state import CrawlState
from linkhealth.services.crawl_policy import CrawlPolicy


def test_depth_limit():
    policy = CrawlPolicy()
    assert not policy.should_skip_due_to_depth(0, 1)
    assert policy.should_skip_due_to_depth(1, 1)


def test_descend_only_above_last_level():
    policy = CrawlPolicy()
    assert not policy.should_descend(0, 1)
    assert policy.should_descend(0, 2)
    assert not policy.should_descend(1, 2)


def test_skip_visited_excluded_and_cancelled():
    policy = CrawlPolicy()
    state = CrawlState()
    url = "https://example.com/a"
    assert not policy.should_skip(url, 0, 2, state, ())
    assert policy.should_skip("https://example.com/admin/x", 0, 2, state, ("/admin",))
    state.mark_visited(url)
    assert policy.should_skip(url, 0, 2, state, ())
    state.mark_stopped()
    assert policy.should_skip("https://example.com/fresh", 0, 2, state, ())
