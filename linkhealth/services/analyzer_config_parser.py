import ipaddress
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlsplit

from linkhealth import config as env
from linkhealth.domain.config import AnalyzerConfig
from linkhealth.exceptions import InvalidConfigError

MIN_DEPTH = 1
MAX_DEPTH = 10
MIN_TIMEOUT_MS = 1_000
MAX_TIMEOUT_MS = 30_000

_LOCALHOST_NAMES = ("localhost", "127.0.0.1", "0.0.0.0", "::1")
_PRIVATE_NETWORKS = (
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
)


def validate_url(url: Any, *, block_localhost: Optional[bool] = None) -> List[str]:
    """Return the problems with a seed URL (empty list when acceptable)."""
    if block_localhost is None:
        block_localhost = env.block_localhost()
    if not url or not isinstance(url, str):
        return ["url is required"]
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
    except ValueError:
        return ["url is not a valid URL"]
    errors: List[str] = []
    if parts.scheme.lower() not in ("http", "https"):
        errors.append("url must use http or https")
    if not host:
        errors.append("url is not a valid URL")
        return errors
    if block_localhost and any(name in host for name in _LOCALHOST_NAMES):
        errors.append("localhost URLs cannot be analyzed")
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        ip = None
    if ip is not None and ip.version == 4 and any(ip in net for net in _PRIVATE_NETWORKS):
        errors.append("private IP addresses cannot be analyzed")
    return errors


def _pick(data: Dict[str, Any], *keys: str, default=None):
    for key in keys:
        if key in data:
            return data[key]
    return default


class AnalyzerConfigParser:
    """Parse an analysis request dict into an AnalyzerConfig.

    Responsibility: schema/validation of incoming requests. Accepts both the
    camelCase keys used by API payloads and snake_case keys. All problems are
    collected and raised together as InvalidConfigError.
    """

    def __init__(self, *, default_timeout_ms: Optional[int] = None, block_localhost: Optional[bool] = None):
        self.default_timeout_ms = default_timeout_ms if default_timeout_ms is not None else env.HTTP_TIMEOUT_MS
        self.block_localhost = block_localhost

    def validate(self, data: Dict[str, Any]) -> List[str]:
        errors = list(validate_url(_pick(data, "url"), block_localhost=self.block_localhost))

        depth = _pick(data, "depth", default=2)
        if isinstance(depth, bool) or not isinstance(depth, int):
            errors.append("depth must be an integer")
        elif depth < MIN_DEPTH or depth > MAX_DEPTH:
            errors.append(f"depth must be between {MIN_DEPTH} and {MAX_DEPTH}")

        exclude_paths = _pick(data, "excludePaths", "exclude_paths", default=[])
        if not isinstance(exclude_paths, (list, tuple)):
            errors.append("excludePaths must be a list")
        elif any(not isinstance(p, str) or not p.startswith("/") for p in exclude_paths):
            errors.append('excludePaths entries must be strings starting with "/"')

        include_external = _pick(data, "includeExternal", "include_external", default=False)
        if not isinstance(include_external, bool):
            errors.append("includeExternal must be a boolean")

        timeout = _pick(data, "timeout", default=self.default_timeout_ms)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            errors.append("timeout must be a number")
        elif timeout < MIN_TIMEOUT_MS or timeout > MAX_TIMEOUT_MS:
            errors.append(f"timeout must be between {MIN_TIMEOUT_MS}ms and {MAX_TIMEOUT_MS}ms")

        return errors

    def parse(
        self,
        data: Dict[str, Any],
        *,
        on_progress: Optional[Callable] = None,
        on_page_analyzed: Optional[Callable] = None,
        on_broken_link: Optional[Callable] = None,
    ) -> AnalyzerConfig:
        if not isinstance(data, dict):
            raise InvalidConfigError(["request body must be an object"])
        errors = self.validate(data)
        if errors:
            raise InvalidConfigError(errors)

        return AnalyzerConfig(
            url=data["url"].strip(),
            depth=_pick(data, "depth", default=2),
            exclude_paths=tuple(_pick(data, "excludePaths", "exclude_paths", default=[])),
            include_external=_pick(data, "includeExternal", "include_external", default=False),
            timeout=int(_pick(data, "timeout", default=self.default_timeout_ms)),
            on_progress=on_progress,
            on_page_analyzed=on_page_analyzed,
            on_broken_link=on_broken_link,
            legacy_source_attribution=bool(_pick(data, "legacySourceAttribution", "legacy_source_attribution", default=False)),
        )
