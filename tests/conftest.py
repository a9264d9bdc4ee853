import threading

import pytest

from linkhealth.domain.http_response import HttpResponse
from linkhealth.domain.rendered_page import RenderedPage
from linkhealth.exceptions import HttpFetchError


class FakeRenderer:
    """In-memory site: url -> (status, hrefs) or an exception to raise."""

    def __init__(self, pages=None, default_status=200):
        self.pages = dict(pages or {})
        self.default_status = default_status
        self.rendered = []
        self.entered = 0
        self.exited = 0
        self.on_render = None

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited += 1
        return None

    def render(self, url, *, timeout_ms, user_agent=None, stop_event=None):
        self.rendered.append(url)
        if self.on_render is not None:
            self.on_render(url)
        page = self.pages.get(url)
        if isinstance(page, Exception):
            raise page
        if page is None:
            return RenderedPage(self.default_status, [], url)
        status, hrefs = page
        return RenderedPage(status, list(hrefs), url)


class FakeHttpService:
    """HEAD responses keyed by url: an int status or an exception to wrap."""

    def __init__(self, responses=None, default_status=200):
        self.responses = dict(responses or {})
        self.default_status = default_status
        self.calls = []
        self._lock = threading.Lock()

    def head(self, url, timeout=None):
        with self._lock:
            self.calls.append(url)
        outcome = self.responses.get(url, self.default_status)
        if isinstance(outcome, Exception):
            raise HttpFetchError(url, outcome)
        return HttpResponse(outcome)


@pytest.fixture
def fake_renderer():
    def make(pages=None, default_status=200):
        return FakeRenderer(pages, default_status)
    return make


@pytest.fixture
def fake_http():
    def make(responses=None, default_status=200):
        return FakeHttpService(responses, default_status)
    return make
