from typing import List, NamedTuple, Optional


class RenderedPage(NamedTuple):
    """Outcome of rendering a page in the headless browser."""
    status_code: int
    hrefs: List[str]
    final_url: Optional[str] = None
