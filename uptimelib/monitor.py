"""Core availability logic: status model, state machine and probe cycle."""

from dataclasses import dataclass, field
from enum import Enum
import logging
import threading
from typing import Callable, Optional

from .dispatch import NotificationDispatcher
from .notifiers import NotificationMessage, Severity

logger = logging.getLogger(__name__)


class StatusKind(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class Status:
    """Classified outcome of one probe.

    ``error`` is diagnostic only and takes no part in equality, so two
    unreachable results with different messages are the same status.
    """

    kind: StatusKind
    code: Optional[int] = None
    error: Optional[str] = field(default=None, compare=False)

    @classmethod
    def healthy(cls) -> "Status":
        return cls(StatusKind.HEALTHY)

    @classmethod
    def unhealthy(cls, code: int) -> "Status":
        return cls(StatusKind.UNHEALTHY, code=code)

    @classmethod
    def unreachable(cls, error: str) -> "Status":
        return cls(StatusKind.UNREACHABLE, error=error)

    @property
    def is_healthy(self) -> bool:
        return self.kind is StatusKind.HEALTHY


@dataclass
class MonitorState:
    """Last reported status of the monitored target.

    Starts out healthy so the first failure alerts as a failure rather than
    producing a recovery message.
    """

    last_status: Status = field(default_factory=Status.healthy)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    cycle_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


@dataclass(frozen=True)
class AlertDecision:
    """What ``evaluate`` decided for one status."""

    alert: bool
    status: Status
    message: Optional[NotificationMessage] = None


def _message_for(status: Status, target: str) -> NotificationMessage:
    if status.is_healthy:
        return NotificationMessage(f"Website is back online: {target}", Severity.RECOVERY)
    if status.kind is StatusKind.UNHEALTHY:
        return NotificationMessage(f"Website down! Status: {status.code}", Severity.WARNING)
    return NotificationMessage(
        f"Error accessing the website: {status.error}", Severity.CRITICAL
    )


def evaluate(state: MonitorState, new_status: Status, target: str) -> AlertDecision:
    """Compare ``new_status`` with the last reported one and update the state.

    An alert is due whenever the status differs from the last reported
    value, with one exception: healthy after healthy is quiet. Because
    status equality includes the HTTP code, moving between two different
    error codes alerts every time. The state is updated before returning,
    so it is already current when the caller dispatches.
    """
    with state.lock:
        previous = state.last_status
        state.last_status = new_status

    if new_status == previous:
        return AlertDecision(False, new_status)

    message = _message_for(new_status, target)
    logger.log(message.severity.log_level, message.render())
    return AlertDecision(True, new_status, message)


def run_check(
    state: MonitorState,
    target: str,
    probe_fn: Callable[[], Status],
    dispatcher: NotificationDispatcher,
) -> Optional[AlertDecision]:
    """Run one probe cycle and dispatch an alert when the status changed.

    Returns ``None`` without probing if another cycle still holds the
    state.
    """
    if not state.cycle_lock.acquire(blocking=False):
        logger.warning("Previous check of %s still running, skipping this cycle", target)
        return None
    try:
        status = probe_fn()
        decision = evaluate(state, status, target)
        if decision.alert:
            dispatcher.dispatch(decision.message)
        return decision
    finally:
        state.cycle_lock.release()
