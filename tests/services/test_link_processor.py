from linkhealth.domain.crawl_state import CrawlState
from linkhealth.services.link_processor import LinkProcessor


PAGE = "https://example.com/blog/"


def test_filter_links_normalizes_and_dedupes():
    links = LinkProcessor().filter_links(
        PAGE,
        ["post-1", "/about", "post-1#comments", "https://EXAMPLE.com/about", "mailto:me@example.com"],
        "example.com",
        include_external=False,
    )
    assert links == ["https://example.com/blog/post-1", "https://example.com/about"]


def test_filter_links_drops_external_unless_included():
    hrefs = ["/a", "https://spam.test/x"]
    processor = LinkProcessor()
    assert processor.filter_links(PAGE, hrefs, "example.com", include_external=False) == ["https://example.com/a"]
    assert processor.filter_links(PAGE, hrefs, "example.com", include_external=True) == [
        "https://example.com/a",
        "https://spam.test/x",
    ]


def test_record_links_counts_only_new_links():
    state = CrawlState()
    processor = LinkProcessor()
    assert processor.record_links(state, PAGE, ["https://example.com/a", "https://example.com/b"]) == 2
    assert processor.record_links(state, "https://example.com/other", ["https://example.com/b", "https://example.com/c"]) == 1
    assert state.found_count == 3
    assert state.source_of("https://example.com/b") == PAGE


def test_internal_links_respects_limit():
    links = [f"https://example.com/{i}" for i in range(15)] + ["https://other.org/"]
    internal = LinkProcessor().internal_links(links, "example.com", limit=10)
    assert internal == [f"https://example.com/{i}" for i in range(10)]
