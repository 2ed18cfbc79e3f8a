"""Loading guard for user-triggered fetches.

Calls run synchronously; the guard only keeps two loads from being issued
on top of each other and gives the renderer a busy flag to show.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from folklore.utils.logger import get_logger

from browser.state import BrowserState

logger = get_logger(__name__)

def run_with_loading(
    state: BrowserState, fn: Callable[..., Any], *args: Any, **kwargs: Any
) -> Optional[Any]:
    """Run ``fn`` with ``state.is_loading`` set; skip it if a load is in flight."""
    if state.is_loading:
        logger.debug("Skipping %s: a load is already in progress", getattr(fn, "__name__", fn))
        return None
    state.is_loading = True
    try:
        return fn(*args, **kwargs)
    finally:
        state.is_loading = False
