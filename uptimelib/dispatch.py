"""Fan a notification out to every configured channel."""

from dataclasses import dataclass
import logging
from typing import List, Optional, Sequence

from .notifiers import NotificationMessage, Notifier, SendResult
from .threads import fan_out

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    """Per-channel outcome of a dispatch."""

    backend: str
    ok: bool
    reason: Optional[str] = None


class NotificationDispatcher:
    """Send one message to all notifiers concurrently.

    ``dispatch`` waits for every channel, logs each failure on its own and
    never raises. There is no retry here.
    """

    def __init__(self, notifiers: Sequence[Notifier]):
        self.notifiers = list(notifiers)

    def dispatch(self, message: NotificationMessage) -> List[DispatchResult]:
        text = message.render()
        outcomes = fan_out(
            [(n.name, lambda n=n: n.send(text)) for n in self.notifiers]
        )

        results: List[DispatchResult] = []
        for name, result, exc in outcomes:
            if exc is not None:
                # Notifier.send already guards itself, this is a safety net
                logger.error("%s notifier raised: %s", name, exc, exc_info=exc)
                results.append(DispatchResult(name, False, str(exc)))
            elif isinstance(result, SendResult):
                results.append(DispatchResult(name, result.ok, result.reason))
            else:
                results.append(DispatchResult(name, False, f"unexpected result {result!r}"))

        delivered = sum(1 for r in results if r.ok)
        if delivered == len(results):
            logger.info("Notification delivered to %d/%d channels", delivered, len(results))
        else:
            failed = ", ".join(r.backend for r in results if not r.ok)
            logger.warning(
                "Notification delivered to %d/%d channels (failed: %s)",
                delivered,
                len(results),
                failed,
            )
        return results
