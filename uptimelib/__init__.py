"""Uptime monitoring library package."""

from .dispatch import DispatchResult, NotificationDispatcher
from .monitor import AlertDecision, MonitorState, Status, StatusKind, evaluate, run_check
from .notifiers import (
    NotificationMessage,
    Notifier,
    SendResult,
    Severity,
    SmsNotifier,
    TelegramNotifier,
    WebhookNotifier,
)

__all__ = [
    "AlertDecision",
    "DispatchResult",
    "MonitorState",
    "NotificationDispatcher",
    "NotificationMessage",
    "Notifier",
    "SendResult",
    "Severity",
    "SmsNotifier",
    "Status",
    "StatusKind",
    "TelegramNotifier",
    "WebhookNotifier",
    "evaluate",
    "run_check",
]
