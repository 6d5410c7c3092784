"""Tests for fanning notifications out to every channel."""

from unittest import mock
import logging
import os
import sys
import threading

# Ensure the package can be imported when running tests directly on Windows
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from uptimelib.dispatch import DispatchResult, NotificationDispatcher
from uptimelib.notifiers import NotificationMessage, Notifier, SendResult, Severity
from uptimelib.threads import fan_out


class _Recorder(Notifier):
    def __init__(self, name, result=SendResult(True), error=None):
        self.name = name
        self.result = result
        self.error = error
        self.received = []

    def _deliver(self, text):
        self.received.append(text)
        if self.error:
            raise self.error
        return self.result


def test_dispatch_sends_same_text_to_all():
    backends = [_Recorder("Telegram"), _Recorder("Slack"), _Recorder("SMS")]
    dispatcher = NotificationDispatcher(backends)

    results = dispatcher.dispatch(NotificationMessage("Website down! Status: 500", Severity.WARNING))

    assert results == [
        DispatchResult("Telegram", True),
        DispatchResult("Slack", True),
        DispatchResult("SMS", True),
    ]
    for b in backends:
        assert b.received == ["⚠️ Website down! Status: 500"]


def test_failing_backend_does_not_stop_others(caplog):
    telegram = _Recorder("Telegram", error=RuntimeError("proxy refused"))
    slack = _Recorder("Slack")
    sms = _Recorder("SMS", result=SendResult(False, "quota exceeded"))
    dispatcher = NotificationDispatcher([telegram, slack, sms])

    with caplog.at_level(logging.INFO):
        results = dispatcher.dispatch(NotificationMessage("x"))

    by_name = {r.backend: r for r in results}
    assert by_name["Telegram"].ok is False
    assert "proxy refused" in by_name["Telegram"].reason
    assert by_name["Slack"].ok is True
    assert by_name["SMS"] == DispatchResult("SMS", False, "quota exceeded")
    assert slack.received and sms.received
    assert "delivered to 1/3 channels" in caplog.text


def test_dispatch_survives_notifier_that_raises_from_send():
    broken = mock.Mock()
    broken.name = "Broken"
    broken.send.side_effect = RuntimeError("send exploded")
    slack = _Recorder("Slack")

    results = NotificationDispatcher([broken, slack]).dispatch(NotificationMessage("x"))

    assert results[0].backend == "Broken"
    assert results[0].ok is False
    assert results[1].ok is True


def test_dispatch_runs_backends_concurrently():
    barrier = threading.Barrier(2, timeout=2)

    class _Waiter(Notifier):
        def __init__(self, name):
            self.name = name

        def _deliver(self, text):
            # Only passes if both backends are inside _deliver at once
            barrier.wait()
            return SendResult(True)

    results = NotificationDispatcher([_Waiter("a"), _Waiter("b")]).dispatch(NotificationMessage("x"))

    assert all(r.ok for r in results)


def test_dispatch_with_no_backends():
    assert NotificationDispatcher([]).dispatch(NotificationMessage("x")) == []


def test_fan_out_preserves_order_and_captures_errors():
    def boom():
        raise ValueError("bad")

    outcomes = fan_out([("one", lambda: 1), ("two", boom), ("three", lambda: 3)])

    assert [(name, result) for name, result, _ in outcomes] == [
        ("one", 1),
        ("two", None),
        ("three", 3),
    ]
    assert isinstance(outcomes[1][2], ValueError)
