"""Environment driven settings for the uptime monitor."""

from dataclasses import dataclass
from typing import List, Mapping, Optional

from .transport import ProxySettings

DEFAULT_CHECK_INTERVAL_MS = 20000

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

REQUIRED_VARS = (
    "URL_TO_CHECK",
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_IDS",
    "SLACK_WEBHOOK_URL",
)


class ConfigError(ValueError):
    """Raised when the environment does not describe a runnable monitor."""


@dataclass(frozen=True)
class SmsSettings:
    api_key: str
    line_number: str
    phone_numbers: List[str]


@dataclass(frozen=True)
class Settings:
    url_to_check: str
    telegram_bot_token: str
    telegram_chat_ids: List[str]
    slack_webhook_url: str
    check_interval_ms: int = DEFAULT_CHECK_INTERVAL_MS
    sms: Optional[SmsSettings] = None
    proxy: Optional[ProxySettings] = None
    log_level: str = "INFO"

    @property
    def check_interval(self) -> float:
        """Interval between checks in seconds."""
        return self.check_interval_ms / 1000


def _split_list(raw: Optional[str]) -> List[str]:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


def _get(environ: Mapping[str, str], name: str) -> str:
    return (environ.get(name) or "").strip()


def _parse_interval(raw: str) -> int:
    if not raw:
        return DEFAULT_CHECK_INTERVAL_MS
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"CHECK_INTERVAL must be an integer number of milliseconds, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"CHECK_INTERVAL must be positive, got {value}")
    return value


def _parse_log_level(raw: str) -> str:
    level = raw.upper() or "INFO"
    if level not in LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {raw!r}")
    return level


def _parse_sms(environ: Mapping[str, str]) -> Optional[SmsSettings]:
    api_key = _get(environ, "SMS_API_KEY")
    line_number = _get(environ, "SMS_LINE_NUMBER")
    phones = _split_list(environ.get("SMS_PHONE_NUMBERS"))
    if not (api_key and line_number and phones):
        return None
    return SmsSettings(api_key, line_number, phones)


def _parse_proxy(environ: Mapping[str, str]) -> Optional[ProxySettings]:
    proxy_type = _get(environ, "PROXY_TYPE")
    host = _get(environ, "PROXY_HOST")
    port_raw = _get(environ, "PROXY_PORT")
    if not (proxy_type and host and port_raw):
        return None
    if not proxy_type.lower().startswith(("socks", "http")):
        raise ConfigError(f"PROXY_TYPE must be a socks or http variant, got {proxy_type!r}")
    try:
        port = int(port_raw)
    except ValueError:
        raise ConfigError(f"PROXY_PORT must be an integer, got {port_raw!r}")
    return ProxySettings(
        type=proxy_type,
        host=host,
        port=port,
        username=_get(environ, "PROXY_USERNAME") or None,
        password=environ.get("PROXY_PASSWORD") or None,
    )


def load_settings(environ: Mapping[str, str]) -> Settings:
    """Build ``Settings`` from an environment mapping such as ``os.environ``.

    SMS and proxy settings are optional groups: they only take effect when
    every variable of the group is present.
    """
    chat_ids = _split_list(environ.get("TELEGRAM_CHAT_IDS"))
    missing = [
        name
        for name in REQUIRED_VARS
        if not (chat_ids if name == "TELEGRAM_CHAT_IDS" else _get(environ, name))
    ]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    return Settings(
        url_to_check=_get(environ, "URL_TO_CHECK"),
        telegram_bot_token=_get(environ, "TELEGRAM_BOT_TOKEN"),
        telegram_chat_ids=chat_ids,
        slack_webhook_url=_get(environ, "SLACK_WEBHOOK_URL"),
        check_interval_ms=_parse_interval(_get(environ, "CHECK_INTERVAL")),
        sms=_parse_sms(environ),
        proxy=_parse_proxy(environ),
        log_level=_parse_log_level(_get(environ, "LOG_LEVEL")),
    )
