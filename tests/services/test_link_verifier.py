import threading
import time
from unittest.mock import MagicMock

import pytest
import requests

from linkhealth.domain.config import AnalyzerConfig
from linkhealth.domain.crawl_state import CrawlState
from linkhealth.domain.http_response import HttpResponse
from linkhealth.services.link_verifier import LinkVerifier

SEED = "https://example.com/"
HOST = "example.com"


def _state(links, source=SEED):
    state = CrawlState()
    state.mark_visited(SEED)
    for link in links:
        state.add_found_link(link, source_url=source)
    return state


def test_404_is_reported(fake_http):
    http = fake_http({"https://example.com/gone": 404})
    state = _state(["https://example.com/ok", "https://example.com/gone"])
    LinkVerifier(http, batch_size=10).verify(AnalyzerConfig(url=SEED), state, HOST)

    assert len(state.broken_links) == 1
    record = state.broken_links[0]
    assert record.target_url == "https://example.com/gone"
    assert record.status_code == 404
    assert record.error_type == "404"
    assert record.link_type == "internal"
    assert record.source_url == SEED


def test_timeout_is_reported_with_status_zero(fake_http):
    http = fake_http({"https://slow.example.org/": requests.exceptions.ReadTimeout("read timed out")})
    state = _state(["https://slow.example.org/"])
    LinkVerifier(http).verify(AnalyzerConfig(url=SEED, include_external=True), state, HOST)

    record = state.broken_links[0]
    assert record.status_code == 0
    assert record.error_type == "timeout"
    assert record.link_type == "external"


def test_redirect_status_is_not_a_failure(fake_http):
    http = fake_http({"https://example.com/moved": 301})
    state = _state(["https://example.com/moved"])
    LinkVerifier(http).verify(AnalyzerConfig(url=SEED), state, HOST)
    assert state.broken_links == []


def test_redirect_target_is_logged(caplog):
    http = MagicMock()
    http.head.return_value = HttpResponse(301, location="https://example.com/new")
    state = _state(["https://example.com/old"])
    caplog.set_level("DEBUG", logger="linkhealth.services.link_verifier")
    LinkVerifier(http).verify(AnalyzerConfig(url=SEED), state, HOST)
    assert state.broken_links == []
    assert "https://example.com/old -> https://example.com/new" in caplog.text


def test_every_link_checked_once_and_callback_fired(fake_http):
    links = [f"https://example.com/{i}" for i in range(23)]
    http = fake_http({links[3]: 500, links[17]: 403})
    on_broken = MagicMock()
    state = _state(links)
    LinkVerifier(http, batch_size=10).verify(AnalyzerConfig(url=SEED, on_broken_link=on_broken), state, HOST)

    assert sorted(http.calls) == sorted(links)
    assert {b.error_type for b in state.broken_links} == {"500", "forbidden"}
    assert on_broken.call_count == 2


def test_progress_reported_per_batch_and_monotonic(fake_http):
    links = [f"https://example.com/{i}" for i in range(25)]
    progress = MagicMock()
    state = _state(links)
    LinkVerifier(fake_http(), batch_size=10).verify(AnalyzerConfig(url=SEED, on_progress=progress), state, HOST)

    percentages = [c.args[0].percentage for c in progress.call_args_list]
    assert percentages == pytest.approx([100 / 3, 200 / 3, 100.0])
    assert percentages == sorted(percentages)
    last = progress.call_args_list[-1].args[0]
    assert last.pages_analyzed == 1
    assert last.links_found == 25


def test_batches_never_overlap():
    in_flight = 0
    peak = 0
    lock = threading.Lock()

    class SlowHttp:
        def head(self, url, timeout=None):
            nonlocal in_flight, peak
            with lock:
                in_flight += 1
                peak = max(peak, in_flight)
            time.sleep(0.01)
            with lock:
                in_flight -= 1
            return HttpResponse(200)

    state = _state([f"https://example.com/{i}" for i in range(30)])
    LinkVerifier(SlowHttp(), batch_size=10).verify(AnalyzerConfig(url=SEED), state, HOST)
    assert peak <= 10


def test_cancel_after_first_batch_stops_before_second(fake_http):
    links = [f"https://example.com/{i}" for i in range(30)]
    # one broken link in each batch
    http = fake_http({links[0]: 404, links[10]: 404, links[20]: 404})
    state = _state(links)

    def on_progress(progress):
        state.mark_stopped()

    LinkVerifier(http, batch_size=10).verify(AnalyzerConfig(url=SEED, on_progress=on_progress), state, HOST)

    assert sorted(http.calls) == sorted(links[:10])
    assert [b.target_url for b in state.broken_links] == [links[0]]


def test_reverification_is_idempotent(fake_http):
    links = [f"https://example.com/{i}" for i in range(15)]
    responses = {links[1]: 404, links[8]: requests.exceptions.ConnectionError(ConnectionRefusedError(111, "refused"))}

    def run():
        state = _state(links)
        LinkVerifier(fake_http(responses), batch_size=10).verify(AnalyzerConfig(url=SEED), state, HOST)
        return {b.to_dict()["targetUrl"]: b for b in state.broken_links}

    assert run() == run()


def test_source_url_is_the_referring_page(fake_http):
    state = CrawlState()
    state.mark_visited(SEED)
    state.mark_visited("https://example.com/blog")
    state.add_found_link("https://example.com/blog", source_url=SEED)
    state.add_found_link("https://example.com/blog/dead", source_url="https://example.com/blog")
    http = fake_http({"https://example.com/blog/dead": 404})

    LinkVerifier(http).verify(AnalyzerConfig(url=SEED), state, HOST)
    assert state.broken_links[0].source_url == "https://example.com/blog"


def test_legacy_source_attribution_uses_first_visited_page(fake_http):
    state = CrawlState()
    state.mark_visited(SEED)
    state.mark_visited("https://example.com/blog")
    state.add_found_link("https://example.com/blog/dead", source_url="https://example.com/blog")
    http = fake_http({"https://example.com/blog/dead": 404})

    LinkVerifier(http).verify(AnalyzerConfig(url=SEED, legacy_source_attribution=True), state, HOST)
    assert state.broken_links[0].source_url == SEED


def test_unknown_source_when_no_referrer(fake_http):
    state = CrawlState()
    state.add_found_link("https://example.com/orphan")
    LinkVerifier(fake_http({"https://example.com/orphan": 410})).verify(AnalyzerConfig(url=SEED), state, HOST)
    assert state.broken_links[0].source_url == "unknown"
    assert state.broken_links[0].error_type == "http_error"


def test_unexpected_client_error_is_recorded_as_network_error():
    http = MagicMock()
    http.head.side_effect = RuntimeError("client bug")
    state = _state(["https://example.com/x"])
    LinkVerifier(http).verify(AnalyzerConfig(url=SEED), state, HOST)
    assert state.broken_links[0].error_type == "network_error"
    assert state.broken_links[0].status_code == 0


def test_rejects_non_positive_batch_size(fake_http):
    with pytest.raises(ValueError):
        LinkVerifier(fake_http(), batch_size=0)


def test_timeout_passed_in_seconds(fake_http):
    http = MagicMock()
    http.head.return_value = HttpResponse(200)
    state = _state(["https://example.com/x"])
    LinkVerifier(http).verify(AnalyzerConfig(url=SEED, timeout=2500), state, HOST)
    http.head.assert_called_once_with("https://example.com/x", timeout=2.5)
