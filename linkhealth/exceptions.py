"""Custom exceptions for the linkhealth engine."""
from typing import Iterable


class InvalidConfigError(ValueError):
    """Raised when an analysis request or seed URL is malformed."""

    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "invalid analyzer config")


class RendererUnavailableError(Exception):
    """Raised when the page-rendering engine cannot be acquired (e.g. browser launch fails).

    This is the only failure that aborts a whole analysis.
    """

    def __init__(self, reason: str, original: Exception = None):
        self.reason = reason
        self.original = original
        super().__init__(f"Rendering engine unavailable: {reason}")


class NavigationError(Exception):
    """Raised by a renderer when a page cannot be navigated to or rendered."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"Navigation failed for {url}: {original}")


class HttpFetchError(Exception):
    """Raised when an HTTP request fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")
