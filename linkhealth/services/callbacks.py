import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


def notify(callback: Optional[Callable[[Any], None]], payload: Any, name: str) -> None:
    """Invoke an observer callback; a failing observer never aborts the analysis."""
    if callback is None:
        return
    try:
        callback(payload)
    except Exception as e:
        logger.warning("%s callback failed: %s", name, e, exc_info=True)
