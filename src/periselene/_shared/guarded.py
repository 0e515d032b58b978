# Area: Shared
"""
periselene._shared.guarded — Fire-and-forget adapter calls
==========================================================

Every State Store and Broadcast Channel call goes through
``guarded_call``. A failure is logged with its traceback and the
caller receives a default value, so one client's disconnect degrades
its own view instead of crashing it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from ..errors import AdapterUnavailableError

logger = logging.getLogger("periselene.guarded")

T = TypeVar("T")

# Pass as `default` to tell a failed call apart from a None result
FAILED = object()


def guarded_call(
    operation: str,
    fn: Callable[..., T],
    *args: Any,
    default: Any = None,
    **kwargs: Any,
) -> T:
    """Call *fn*; on any exception log it and return *default*.

    Args:
        operation: Short label for logs, e.g. "store.read"
        fn: Adapter callable
        default: Value returned on failure

    Returns:
        The callable's result, or *default* on failure
    """
    try:
        return fn(*args, **kwargs)
    except AdapterUnavailableError as e:
        # Expected outage: no traceback noise
        logger.warning(
            "%s unavailable: %s", operation, e.reason,
            extra={"operation": operation, "error_type": e.error_type},
        )
    except Exception as e:
        logger.error(
            "%s failed: %s", operation, e,
            exc_info=True,
            extra={"operation": operation, "error_type": type(e).__name__},
        )
    return default

