"""Notification channels that deliver alert text to people."""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import List, Optional, Sequence

import requests

from .threads import fan_out
from .transport import REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"
SMS_BULK_URL = "https://api.sms.ir/v1/send/bulk"


class Severity(Enum):
    """Decoration for a message. Never used for routing."""

    INFO = ("🚀", logging.INFO)
    RECOVERY = ("✅", logging.INFO)
    WARNING = ("⚠️", logging.WARNING)
    CRITICAL = ("🚨", logging.ERROR)

    def __init__(self, emoji: str, log_level: int) -> None:
        self.emoji = emoji
        self.log_level = log_level


@dataclass(frozen=True)
class NotificationMessage:
    """Immutable alert text shared by every channel."""

    text: str
    severity: Severity = Severity.INFO

    def render(self) -> str:
        return f"{self.severity.emoji} {self.text}"


@dataclass(frozen=True)
class SendResult:
    """Outcome of one ``Notifier.send`` call."""

    ok: bool
    reason: Optional[str] = None


class Notifier:
    """Base class for a delivery channel.

    Subclasses implement ``_deliver`` and may raise freely. ``send`` turns
    any exception into a failed ``SendResult`` and logs it.
    """

    name = "notifier"

    def send(self, text: str) -> SendResult:
        try:
            result = self._deliver(text)
        except Exception as exc:
            reason = self._redact(f"{type(exc).__name__}: {exc}")
            logger.error("Failed to send %s message: %s", self.name, reason)
            return SendResult(False, reason)
        if result.ok:
            logger.info("%s notification sent.", self.name)
        return result

    def _deliver(self, text: str) -> SendResult:
        raise NotImplementedError

    def _redact(self, text: str) -> str:
        return text


class TelegramNotifier(Notifier):
    """Send the message to every configured Telegram chat at once."""

    name = "Telegram"

    def __init__(self, bot_token: str, chat_ids: Sequence[str], session: requests.Session):
        self.bot_token = bot_token
        self.chat_ids = [c.strip() for c in chat_ids if c and c.strip()]
        self.session = session

    def _redact(self, text: str) -> str:
        if self.bot_token:
            text = text.replace(self.bot_token, "<redacted>")
        return text

    def _post(self, chat_id: str, text: str) -> None:
        url = TELEGRAM_API_URL.format(token=self.bot_token)
        resp = self.session.post(
            url, json={"chat_id": chat_id, "text": text}, timeout=REQUEST_TIMEOUT
        )
        resp.raise_for_status()

    def _deliver(self, text: str) -> SendResult:
        outcomes = fan_out(
            [(chat_id, lambda c=chat_id: self._post(c, text)) for chat_id in self.chat_ids]
        )
        failed: List[str] = []
        for chat_id, _, exc in outcomes:
            if exc is None:
                continue
            failed.append(chat_id)
            logger.error(
                "Failed to send Telegram message to chat %s: %s",
                chat_id,
                self._redact(str(exc)),
            )
            response = getattr(exc, "response", None)
            if response is not None:
                logger.error("Telegram response body: %s", self._redact(response.text))
        if failed:
            return SendResult(False, f"failed for chat(s): {', '.join(failed)}")
        return SendResult(True)


class WebhookNotifier(Notifier):
    """Post ``{"text": ...}`` to a Slack style team webhook."""

    name = "Slack"

    def __init__(self, webhook_url: str, session: requests.Session):
        self.webhook_url = webhook_url
        self.session = session

    def _deliver(self, text: str) -> SendResult:
        resp = self.session.post(self.webhook_url, json={"text": text}, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return SendResult(True)


class SmsNotifier(Notifier):
    """Bulk SMS through the sms.ir API from a fixed sender line."""

    name = "SMS"

    def __init__(
        self,
        api_key: str,
        line_number: str,
        mobiles: Sequence[str],
        session: requests.Session,
    ):
        self.api_key = api_key
        self.line_number = line_number
        self.mobiles = [m.strip() for m in mobiles if m and m.strip()]
        self.session = session

    def _redact(self, text: str) -> str:
        if self.api_key:
            text = text.replace(self.api_key, "<redacted>")
        return text

    def _deliver(self, text: str) -> SendResult:
        resp = self.session.post(
            SMS_BULK_URL,
            json={
                "lineNumber": self.line_number,
                "MessageText": text,
                "Mobiles": self.mobiles,
            },
            headers={"X-API-KEY": self.api_key, "ACCEPT": "application/json"},
            timeout=REQUEST_TIMEOUT,
        )
        resp.raise_for_status()
        return SendResult(True)
