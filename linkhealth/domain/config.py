from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

from linkhealth.exceptions import InvalidConfigError

if TYPE_CHECKING:
    from linkhealth.domain.results import BrokenLinkRecord, PageData, ProgressData


@dataclass(frozen=True)
class AnalyzerConfig:
    """Settings for a single analysis run.

    `timeout` is the per-request bound in milliseconds and applies both to page
    rendering and to link verification. Callbacks are optional observers; they
    are invoked from the analyzing thread.
    """

    url: str
    depth: int = 2
    exclude_paths: tuple[str, ...] = ()
    include_external: bool = False
    timeout: int = 10_000
    on_progress: Optional[Callable[["ProgressData"], None]] = field(default=None, compare=False, repr=False)
    on_page_analyzed: Optional[Callable[["PageData"], None]] = field(default=None, compare=False, repr=False)
    on_broken_link: Optional[Callable[["BrokenLinkRecord"], None]] = field(default=None, compare=False, repr=False)
    # Report the first visited page as every link's source, like the first
    # generation of this tool did. Off by default: real referrers are tracked.
    legacy_source_attribution: bool = False

    def __post_init__(self):
        if self.url is None or (isinstance(self.url, str) and self.url.strip() == ""):
            raise InvalidConfigError(["url is required"])
        if isinstance(self.depth, bool) or not isinstance(self.depth, int) or self.depth < 1:
            raise InvalidConfigError([f"depth must be a positive integer, got {self.depth!r}"])
        if self.timeout is None or self.timeout <= 0:
            raise InvalidConfigError([f"timeout must be positive, got {self.timeout!r}"])
        # Accept any iterable of prefixes but keep the config hashable/immutable
        object.__setattr__(self, "exclude_paths", tuple(self.exclude_paths or ()))

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000.0
