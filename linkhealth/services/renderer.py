from __future__ import annotations

from typing import Optional, Protocol

from linkhealth.domain.rendered_page import RenderedPage


class PageRenderer(Protocol):
    """Render a page and report its final status and outbound anchor hrefs.

    Renderers are context managers: the underlying engine is acquired on
    `__enter__` and released on `__exit__`, once per analysis run.
    Implementations raise `NavigationError` for per-page failures and
    `RendererUnavailableError` when the engine itself cannot be acquired.
    """

    def __enter__(self) -> "PageRenderer": ...

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]: ...

    def render(self, url: str, *, timeout_ms: int, user_agent: str, stop_event=None) -> RenderedPage: ...
