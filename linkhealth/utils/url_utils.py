import logging
from typing import Iterable, Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")
_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(href: str, base_url: Optional[str] = None) -> Optional[str]:
    """Resolve `href` against `base_url` and return a canonical absolute URL.

    Lowercases scheme and host, drops default ports and the fragment, and uses
    "/" for an empty path. Returns None for unparsable or non-http(s) URLs.
    """
    if href is None:
        return None
    href = href.strip()
    if not href:
        return None
    try:
        absolute = urljoin(base_url, href) if base_url else href
        parts = urlsplit(absolute)
        scheme = parts.scheme.lower()
        if scheme not in ALLOWED_SCHEMES:
            return None
        host = parts.hostname
        if not host:
            return None
        port = parts.port
    except ValueError:
        logger.debug("Dropping unparsable href %r (base=%s)", href, base_url)
        return None

    netloc = host
    if ":" in host:
        # IPv6 literal
        netloc = f"[{host}]"
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    if parts.username:
        userinfo = parts.username
        if parts.password:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"
    path = parts.path or "/"
    return urlunsplit((scheme, netloc, path, parts.query, ""))


def hostname_of(url: str) -> Optional[str]:
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def is_same_host(url: str, base_host: Optional[str]) -> bool:
    """Exact hostname equality; subdomains are different hosts."""
    host = hostname_of(url)
    return host is not None and base_host is not None and host == base_host.lower()


def is_excluded(url: str, exclude_paths: Iterable[str]) -> bool:
    """True if the URL path starts with any of the given prefixes."""
    try:
        path = urlsplit(url).path or "/"
    except ValueError:
        return False
    return any(prefix and path.startswith(prefix) for prefix in exclude_paths)
