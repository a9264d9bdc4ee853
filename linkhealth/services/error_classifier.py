import socket
import ssl
from typing import Iterator, Optional

import requests
from urllib3.exceptions import NameResolutionError, NewConnectionError
from urllib3.exceptions import TimeoutError as Urllib3TimeoutError

from linkhealth.domain.error_types import ErrorType
from linkhealth.domain.results import EXTERNAL, INTERNAL
from linkhealth.exceptions import HttpFetchError
from linkhealth.utils.url_utils import is_same_host

_DNS_MESSAGES = (
    "name or service not known",
    "nodename nor servname",
    "failed to resolve",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
)


def _iter_causes(exc: BaseException) -> Iterator[BaseException]:
    """Walk an exception and everything it wraps.

    requests wraps urllib3 errors which wrap socket/ssl errors; the chain is
    spread over `args`, `.reason`, `__cause__` and `__context__`.
    """
    seen = set()
    stack = [exc]
    while stack:
        e = stack.pop()
        if not isinstance(e, BaseException) or id(e) in seen:
            continue
        seen.add(id(e))
        yield e
        if isinstance(e, HttpFetchError):
            stack.append(e.original)
        stack.append(getattr(e, "reason", None))
        stack.append(e.__cause__)
        stack.append(e.__context__)
        stack.extend(a for a in e.args if isinstance(a, BaseException))


def _is_timeout(e: BaseException) -> bool:
    # urllib3 2.x derives NewConnectionError from ConnectTimeoutError
    if isinstance(e, NewConnectionError):
        return False
    return isinstance(e, (requests.exceptions.Timeout, Urllib3TimeoutError, socket.timeout, TimeoutError))


class ErrorClassifier:
    """Map HTTP status codes and transport exceptions to error type tags."""

    def classify_status(self, status_code: int) -> Optional[str]:
        """Return the error type for a failing status, or None if it is not a failure."""
        if status_code < 400:
            return None
        if status_code == 404:
            return ErrorType.NOT_FOUND
        if status_code >= 500:
            return ErrorType.SERVER_ERROR
        if status_code == 403:
            return ErrorType.FORBIDDEN
        if status_code == 401:
            return ErrorType.UNAUTHORIZED
        return ErrorType.HTTP_ERROR

    def classify_exception(self, exc: BaseException) -> str:
        chain = list(_iter_causes(exc))

        # ConnectTimeout is also a ConnectionError, so timeouts go first
        if any(_is_timeout(e) for e in chain):
            return ErrorType.TIMEOUT
        if any(isinstance(e, (requests.exceptions.SSLError, ssl.SSLError, ssl.CertificateError)) for e in chain):
            return ErrorType.SSL_ERROR
        if any(isinstance(e, requests.exceptions.TooManyRedirects) for e in chain):
            return ErrorType.REDIRECT_LOOP
        if any(isinstance(e, (NameResolutionError, socket.gaierror)) for e in chain):
            return ErrorType.DNS_ERROR
        if any(isinstance(e, ConnectionRefusedError) for e in chain):
            return ErrorType.CONNECTION_REFUSED

        return self._classify_message(" ".join(str(e) for e in chain).lower())

    def _classify_message(self, message: str) -> str:
        if any(m in message for m in _DNS_MESSAGES):
            return ErrorType.DNS_ERROR
        if "connection refused" in message or "errno 111" in message:
            return ErrorType.CONNECTION_REFUSED
        if "timeout" in message or "timed out" in message:
            return ErrorType.TIMEOUT
        if "ssl" in message or "certificate" in message:
            return ErrorType.SSL_ERROR
        if "redirect" in message:
            return ErrorType.REDIRECT_LOOP
        return ErrorType.NETWORK_ERROR

    def link_type(self, url: str, base_host: str) -> str:
        return INTERNAL if is_same_host(url, base_host) else EXTERNAL
