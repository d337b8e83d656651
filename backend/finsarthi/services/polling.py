"""Fixed-interval polling for customers waiting on a coach's answer.

Polling runs only while at least one request is still pending. There is no
backoff, no jitter and no retry cap; callers stop it with ``max_polls`` or by
interrupting the loop.
"""

import logging
import time
from typing import Any, Callable, Iterable, Optional, Sequence

from finsarthi.models.chat import ChatStatus

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 5


def _status_of(request: Any) -> str:
    status = request.get("status") if isinstance(request, dict) else getattr(request, "status", None)
    return getattr(status, "value", status)


def has_pending(requests: Iterable[Any]) -> bool:
    return any(_status_of(request) == ChatStatus.PENDING.value for request in requests)


def next_poll_delay(requests: Iterable[Any]) -> Optional[int]:
    return POLL_INTERVAL_SECONDS if has_pending(requests) else None


def poll_until_settled(
    fetch: Callable[[], Sequence[Any]],
    *,
    interval: float = POLL_INTERVAL_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
    max_polls: int | None = None,
) -> Sequence[Any]:
    """Call ``fetch`` every ``interval`` seconds until nothing is pending.

    Returns the last fetched list. ``max_polls`` bounds the number of fetches.
    """
    requests = fetch()
    polls = 1
    while has_pending(requests):
        if max_polls is not None and polls >= max_polls:
            logger.debug("Stopping poll after %s fetches with requests still pending", polls)
            break
        sleep(interval)
        requests = fetch()
        polls += 1
    return requests
