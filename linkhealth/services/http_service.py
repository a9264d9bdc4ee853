import requests
from typing import Callable, Optional

from linkhealth.domain.http_response import HttpResponse
from linkhealth.exceptions import HttpFetchError


class HttpService:
    """
    HTTP client wrapper for lightweight link existence checks.

    Requires http_client callable for dependency injection (normally
    `requests.head`). This enables easy testing without patching and allows
    swapping HTTP libraries.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: float = 10.0):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def head(self, url: str, timeout: Optional[float] = None) -> HttpResponse:
        """Issue a single HEAD request without following redirects.

        Any status code is returned as data; only transport failures raise
        `HttpFetchError`.
        """
        headers = {"User-Agent": self.user_agent}
        try:
            resp = self.http_client(
                url,
                headers=headers,
                timeout=timeout if timeout is not None else self.timeout,
                allow_redirects=False,
            )
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e

        location = None
        if hasattr(resp, 'headers'):
            location = resp.headers.get('Location')

        return HttpResponse(resp.status_code, location)
