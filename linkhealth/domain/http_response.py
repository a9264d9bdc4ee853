from typing import NamedTuple, Optional


class HttpResponse(NamedTuple):
    """Response from a link existence check (HEAD)."""
    status_code: int
    location: Optional[str] = None
