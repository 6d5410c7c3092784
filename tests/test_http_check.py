from unittest import mock
import logging
import os
import sys

# Ensure the package can be imported when running tests directly on Windows
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import requests

from health_checks.http_check import MAX_RETRIES, probe
from uptimelib.monitor import MonitorState, Status, StatusKind, run_check
from uptimelib.transport import REQUEST_TIMEOUT

URL = "https://example.com/health"


def _make_resp(status=200, text="ok"):
    resp = mock.Mock()
    resp.status_code = status
    resp.text = text
    return resp


def test_probe_healthy_on_200():
    session = mock.Mock()
    session.get.return_value = _make_resp(200)

    assert probe(URL, session) == Status.healthy()
    session.get.assert_called_once_with(URL, timeout=REQUEST_TIMEOUT)


def test_probe_does_not_retry_error_status():
    session = mock.Mock()
    session.get.return_value = _make_resp(503)

    status = probe(URL, session)

    assert status == Status.unhealthy(503)
    assert session.get.call_count == 1


def test_probe_retries_transport_errors_up_to_bound():
    session = mock.Mock()
    session.get.side_effect = requests.ConnectionError("connection refused")

    status = probe(URL, session)

    assert status.kind is StatusKind.UNREACHABLE
    assert "connection refused" in status.error
    assert session.get.call_count == MAX_RETRIES + 1


def test_probe_reports_last_error_message():
    session = mock.Mock()
    session.get.side_effect = [
        requests.ConnectionError("first"),
        requests.Timeout("second"),
        requests.ConnectionError("third"),
        requests.Timeout("last one"),
    ]

    status = probe(URL, session)

    assert status.error == "last one"


def test_probe_recovers_within_retries():
    session = mock.Mock()
    session.get.side_effect = [requests.Timeout("slow"), _make_resp(200)]

    assert probe(URL, session) == Status.healthy()
    assert session.get.call_count == 2


def test_probe_retry_then_error_status():
    session = mock.Mock()
    session.get.side_effect = [requests.ConnectionError("reset"), _make_resp(500)]

    assert probe(URL, session) == Status.unhealthy(500)
    assert session.get.call_count == 2


def test_probe_logs_each_retry(caplog):
    session = mock.Mock()
    session.get.side_effect = requests.ConnectionError("down")

    with caplog.at_level(logging.WARNING, logger="health_checks.http_check"):
        probe(URL, session, max_retries=2)

    retries = [r for r in caplog.records if "Retry" in r.getMessage()]
    assert [r.getMessage() for r in retries] == [
        f"Retry 1/2: checking {URL} again...",
        f"Retry 2/2: checking {URL} again...",
    ]
    assert all(r.levelno == logging.WARNING for r in retries)


def test_probe_without_session_uses_requests():
    with mock.patch("health_checks.http_check.requests.get", return_value=_make_resp(404)) as get:
        assert probe(URL) == Status.unhealthy(404)
    get.assert_called_once_with(URL, timeout=REQUEST_TIMEOUT)


def test_probe_retries_any_exception_before_response():
    session = mock.Mock()
    session.get.side_effect = OSError("socket closed")

    status = probe(URL, session)

    assert status.kind is StatusKind.UNREACHABLE
    assert status.error == "socket closed"
    assert session.get.call_count == MAX_RETRIES + 1


def test_run_check_alerts_when_transport_raises_non_requests_error():
    session = mock.Mock()
    session.get.side_effect = RuntimeError("tls handshake blew up")
    dispatcher = mock.Mock()
    state = MonitorState()

    decision = run_check(state, URL, lambda: probe(URL, session), dispatcher)

    assert decision.alert is True
    assert "tls handshake blew up" in decision.message.text
    assert state.last_status.kind is StatusKind.UNREACHABLE
    dispatcher.dispatch.assert_called_once_with(decision.message)


def test_probe_skips_body_decoding_when_debug_disabled():
    resp = mock.Mock(status_code=200)
    text = mock.PropertyMock(return_value="ok")
    type(resp).text = text
    session = mock.Mock()
    session.get.return_value = resp

    with mock.patch("health_checks.http_check.logger.isEnabledFor", return_value=False):
        assert probe(URL, session) == Status.healthy()
    text.assert_not_called()

    with mock.patch("health_checks.http_check.logger.isEnabledFor", return_value=True):
        probe(URL, session)
    text.assert_called_once()
