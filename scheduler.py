"""Simple scheduling manager for running health checks on intervals."""

from dataclasses import dataclass, field
import threading
import time
from typing import Any, Callable, Dict, Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class ScheduledCheck:
    """Represents a single periodic health check."""

    fn: Callable[[], Any]
    interval: float
    running: bool = False
    thread: Optional[threading.Thread] = None
    stop_event: threading.Event = field(default_factory=threading.Event)


_checks: Dict[str, ScheduledCheck] = {}


def add_check(name: str, fn: Callable[[], Any], interval: float) -> None:
    """Register or replace a health check to run every ``interval`` seconds."""
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval}")
    existing = _checks.get(name)
    if existing:
        # Stop any running thread before replacing the check
        stop_check(name)
        if existing.thread and existing.thread.is_alive():
            existing.thread.join()
    _checks[name] = ScheduledCheck(fn=fn, interval=interval)


def _run(name: str) -> None:
    check = _checks[name]
    # Each check runs in a single thread, so one cycle finishes before the
    # next starts even when a cycle outlasts the interval.
    while not check.stop_event.is_set():
        start = time.monotonic()
        try:
            check.fn()
        except Exception:  # safety net
            logger.exception("Check %s failed", name)
        elapsed = time.monotonic() - start
        if elapsed > check.interval:
            logger.warning(
                "Check %s took %.1fs, longer than its %.1fs interval",
                name,
                elapsed,
                check.interval,
            )
        check.stop_event.wait(max(0, check.interval - elapsed))
    check.running = False


def start_check(name: str) -> None:
    """Start running the named check in its own thread."""
    check = _checks.get(name)
    if not check or check.running:
        return
    check.running = True
    check.stop_event.clear()
    t = threading.Thread(target=_run, args=(name,), name=f"check-{name}", daemon=True)
    check.thread = t
    t.start()


def stop_check(name: str) -> None:
    """Ask the named check to stop after its current cycle."""
    check = _checks.get(name)
    if not check:
        return
    check.stop_event.set()


def start_all() -> None:
    """Start all registered checks."""
    for name in list(_checks.keys()):
        start_check(name)


def stop_all(wait: bool = False) -> None:
    """Stop all running checks, optionally joining their threads."""
    for name in list(_checks.keys()):
        stop_check(name)
    if wait:
        for check in list(_checks.values()):
            if check.thread and check.thread.is_alive():
                check.thread.join()


def any_running() -> bool:
    """Return True if any scheduled check is currently running."""
    return any(c.running for c in _checks.values())


def clear() -> None:
    """Stop everything and forget all registered checks."""
    stop_all(wait=True)
    _checks.clear()
