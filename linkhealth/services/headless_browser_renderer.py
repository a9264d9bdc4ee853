from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urljoin

from linkhealth.domain.rendered_page import RenderedPage
from linkhealth.exceptions import NavigationError, RendererUnavailableError
from linkhealth.services.content_review_service import ContentReviewService

logger = logging.getLogger(__name__)

DEFAULT_LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
)


def _resolve(base: str, href: str) -> Optional[str]:
    try:
        return urljoin(base, href)
    except ValueError:
        return None


@dataclass(frozen=True)
class PlaywrightHeadlessOptions:
    wait_until: str = "networkidle"  # domcontentloaded | load | networkidle
    launch_args: tuple = field(default=DEFAULT_LAUNCH_ARGS)


class PlaywrightHeadlessRenderer:
    """Page renderer backed by a headless Chromium driven by Playwright.

    One browser is launched when the renderer is entered and closed when it is
    exited, so a whole analysis shares a single browser. Each render opens a
    fresh page in a per-user-agent browser context.

    Playwright's sync API is bound to the thread that started it, and refuses
    to run inside a running asyncio loop. All Playwright calls are therefore
    funnelled through a dedicated single-thread executor.

    Playwright is imported lazily so the rest of the package imports without it.
    """

    def __init__(self, *, user_agent: str, options: Optional[PlaywrightHeadlessOptions] = None, content_review_service: Optional[ContentReviewService] = None):
        self._user_agent = user_agent
        self._options = options or PlaywrightHeadlessOptions()
        self._content_review_service = content_review_service or ContentReviewService()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._playwright_cm = None
        self._playwright = None
        self._browser = None
        self._contexts = {}

    # Lifecycle

    def __enter__(self) -> "PlaywrightHeadlessRenderer":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return None

    def _call(self, fn, *args, **kwargs):
        if self._executor is None:
            raise RendererUnavailableError("renderer is not open")
        return self._executor.submit(fn, *args, **kwargs).result()

    def open(self) -> None:
        if self._executor is not None:
            return
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="playwright")
        try:
            self._call(self._launch_sync)
        except RendererUnavailableError:
            self._shutdown_executor()
            raise
        except Exception as e:
            self._shutdown_executor()
            raise RendererUnavailableError(f"failed to launch headless browser: {e}", e) from e

    def _launch_sync(self) -> None:
        try:
            from playwright.sync_api import sync_playwright  # type: ignore
        except Exception as e:
            raise RendererUnavailableError(
                "Playwright is not installed. "
                "Install 'playwright' and run 'python -m playwright install chromium'.",
                e,
            ) from e

        self._playwright_cm = sync_playwright()
        self._playwright = self._playwright_cm.start()
        try:
            self._browser = self._playwright.chromium.launch(headless=True, args=list(self._options.launch_args))
        except Exception:
            self._stop_playwright_sync()
            raise
        logger.info("Launched headless Chromium")

    def close(self) -> None:
        if self._executor is None:
            return
        try:
            self._call(self._close_sync)
        except Exception:
            logger.warning("Error while closing headless browser", exc_info=True)
        finally:
            self._shutdown_executor()

    def _close_sync(self) -> None:
        try:
            for ctx in self._contexts.values():
                try:
                    ctx.close()
                except Exception:
                    logger.debug("Error closing browser context", exc_info=True)
            self._contexts.clear()
            if self._browser is not None:
                self._browser.close()
        finally:
            self._browser = None
            self._stop_playwright_sync()

    def _stop_playwright_sync(self) -> None:
        if self._playwright is not None:
            try:
                self._playwright.stop()
            finally:
                self._playwright = None
                self._playwright_cm = None

    def _shutdown_executor(self) -> None:
        executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    # Rendering

    def _context_for(self, user_agent: str):
        ctx = self._contexts.get(user_agent)
        if ctx is None:
            ctx = self._browser.new_context(user_agent=user_agent)
            self._contexts[user_agent] = ctx
        return ctx

    def _render_sync(self, url: str, timeout_ms: int, user_agent: str) -> RenderedPage:
        page = self._context_for(user_agent).new_page()
        try:
            page.set_default_timeout(timeout_ms)
            resp = page.goto(url, wait_until=self._options.wait_until, timeout=timeout_ms)
            status = int(resp.status) if resp is not None else 0
            final_url = page.url or url
            html = page.content()
        finally:
            try:
                page.close()
            except Exception:
                logger.debug("Error closing page for %s", url, exc_info=True)

        base = final_url
        declared_base = self._content_review_service.base_href(html)
        if declared_base:
            base = _resolve(final_url, declared_base) or final_url
        hrefs = []
        for href in self._content_review_service.extract_hrefs(html):
            absolute = _resolve(base, href)
            if absolute is None:
                logger.debug("Dropping unparsable href on %s: %r", url, href)
                continue
            hrefs.append(absolute)
        return RenderedPage(status_code=status, hrefs=hrefs, final_url=final_url)

    def render(self, url: str, *, timeout_ms: int, user_agent: Optional[str] = None, stop_event=None) -> RenderedPage:
        if stop_event is not None and getattr(stop_event, "is_set", lambda: False)():
            raise NavigationError(url, RuntimeError("Render cancelled"))
        if self._executor is None:
            raise RendererUnavailableError("renderer is not open")
        try:
            return self._call(self._render_sync, url, timeout_ms, user_agent or self._user_agent)
        except RendererUnavailableError:
            raise
        except Exception as e:
            raise NavigationError(url, e) from e
