"""HTTP availability probe with bounded retries."""

import logging
from typing import Optional

import requests

from uptimelib.monitor import Status
from uptimelib.transport import REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

# Extra attempts after the first one when the request itself fails.
MAX_RETRIES = 3


def probe(
    url: str,
    session: Optional[requests.Session] = None,
    max_retries: int = MAX_RETRIES,
    timeout: float = REQUEST_TIMEOUT,
) -> Status:
    """Request ``url`` and classify the outcome.

    A response that arrives is never retried: 200 is healthy, anything else
    is unhealthy with its code. Anything raised before a response arrives
    (timeouts, refused connections, DNS, TLS, socket errors) is retried back
    to back up to ``max_retries`` times before the target is reported
    unreachable.
    """
    http = session or requests
    last_error: Optional[Exception] = None

    for attempt in range(max_retries + 1):
        if attempt:
            logger.warning("Retry %d/%d: checking %s again...", attempt, max_retries, url)
        try:
            resp = http.get(url, timeout=timeout)
        except Exception as exc:
            last_error = exc
            continue

        if resp.status_code == 200:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("%s answered %s: %.200s", url, resp.status_code, resp.text)
            return Status.healthy()
        return Status.unhealthy(resp.status_code)

    return Status.unreachable(str(last_error))
