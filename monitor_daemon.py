"""Run the uptime monitor: probe one URL and alert every channel on changes."""

import logging
import os
import sys
import time
from functools import partial
from typing import List, Mapping, Optional

from dotenv import load_dotenv

import scheduler
from health_checks.http_check import probe
from uptimelib.config import ConfigError, Settings, load_settings
from uptimelib.dispatch import NotificationDispatcher
from uptimelib.monitor import MonitorState, run_check
from uptimelib.notifiers import (
    NotificationMessage,
    Notifier,
    Severity,
    SmsNotifier,
    TelegramNotifier,
    WebhookNotifier,
)
from uptimelib.transport import build_session

logger = logging.getLogger("uptime-monitor")

CHECK_NAME = "website"


def build_notifiers(settings: Settings) -> List[Notifier]:
    """Create one notifier per configured channel.

    Only Telegram traffic goes through the proxy. Everything else uses a
    direct session.
    """
    direct = build_session()
    telegram_session = build_session(settings.proxy) if settings.proxy else direct

    notifiers: List[Notifier] = [
        TelegramNotifier(settings.telegram_bot_token, settings.telegram_chat_ids, telegram_session),
        WebhookNotifier(settings.slack_webhook_url, direct),
    ]
    if settings.sms:
        notifiers.append(
            SmsNotifier(
                settings.sms.api_key,
                settings.sms.line_number,
                settings.sms.phone_numbers,
                direct,
            )
        )
    else:
        logger.info("SMS settings incomplete, SMS notifications disabled")
    return notifiers


def start_monitoring(settings: Settings, dispatcher: NotificationDispatcher) -> MonitorState:
    """Announce startup and schedule the periodic check."""
    state = MonitorState()
    probe_session = build_session()
    url = settings.url_to_check

    dispatcher.dispatch(NotificationMessage("Starting website monitoring...", Severity.INFO))

    scheduler.add_check(
        CHECK_NAME,
        partial(run_check, state, url, partial(probe, url, probe_session), dispatcher),
        settings.check_interval,
    )
    scheduler.start_check(CHECK_NAME)
    logger.info("Monitoring %s every %g seconds...", url, settings.check_interval)
    return state


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    """Entry point for ``uptime-monitor`` and ``python monitor_daemon.py``."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    try:
        settings = load_settings(environ)
    except ConfigError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    dispatcher = NotificationDispatcher(build_notifiers(settings))
    start_monitoring(settings, dispatcher)

    try:
        while scheduler.any_running():
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Stopping monitor")
    finally:
        scheduler.stop_all(wait=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
