"""HTTP sessions used for probing and for sending notifications."""

from dataclasses import dataclass
import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

# Seconds allowed for any single outgoing request.
REQUEST_TIMEOUT = 5


@dataclass(frozen=True)
class ProxySettings:
    """Outbound proxy, e.g. ``socks5h`` or ``http``, with optional credentials."""

    type: str
    host: str
    port: int
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def url(self) -> str:
        auth = ""
        if self.username:
            auth = f"{self.username}:{self.password or ''}@"
        return f"{self.type}://{auth}{self.host}:{self.port}"


def build_session(proxy: Optional[ProxySettings] = None) -> requests.Session:
    """Return a session, routed through ``proxy`` when one is given.

    SOCKS proxies rely on the ``requests[socks]`` extra being installed.
    """
    session = requests.Session()
    if proxy is not None:
        # Ignore HTTP(S)_PROXY from the environment so only this proxy applies.
        session.trust_env = False
        session.proxies = {"http": proxy.url, "https": proxy.url}
        logger.info("Using %s proxy: %s:%s", proxy.type.upper(), proxy.host, proxy.port)
    return session
