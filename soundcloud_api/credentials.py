"""
Client ID storage and retrieval.

SoundCloud's web app embeds the client ID it uses for API requests in one of
the JavaScript bundles linked from the homepage. fetch_client_id() scrapes it
from there.
"""

import logging
import re
import threading
from typing import Optional

import requests

from soundcloud_api.exceptions import ClientIDError

logger = logging.getLogger(__name__)

HOMEPAGE_URL = "https://soundcloud.com"

# <script crossorigin src="https://a-v2.sndcdn.com/assets/0-abc123.js"></script>
SCRIPT_URL_PATTERN = re.compile(
    r'<script crossorigin src="(https://a-v2\.sndcdn\.com/assets/[^"]+)"'
)
CLIENT_ID_PATTERN = re.compile(r',client_id:"([^"]+)"')


def _get_text(session: requests.Session, url: str, timeout: float) -> str:
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise ClientIDError(f"Failed to fetch SoundCloud client ID: {e}") from e
    return response.text


def fetch_client_id(
    session: Optional[requests.Session] = None, timeout: float = 20.0
) -> str:
    """
    Scrape a client ID from the SoundCloud web app.

    Args:
        session: Session to use (a new one is created if not provided)
        timeout: Per-request timeout in seconds

    Returns:
        Client ID string

    Raises:
        ClientIDError: If a page cannot be fetched or no client ID is found
    """
    session = session or requests.Session()
    homepage = _get_text(session, HOMEPAGE_URL, timeout)

    script_urls = SCRIPT_URL_PATTERN.findall(homepage)
    if not script_urls:
        raise ClientIDError("Could not find the SoundCloud asset script URL")

    # The bundle carrying the client ID is imported last
    script = _get_text(session, script_urls[-1], timeout)
    match = CLIENT_ID_PATTERN.search(script)
    if not match:
        raise ClientIDError("Could not find a SoundCloud client ID")

    logger.info("Fetched SoundCloud client ID")
    return match.group(1)


class ClientIDStore:
    """
    Holds the client ID shared by every request of a client.

    Reads happen at send time, so a fan-out already in flight when the value
    is replaced can issue requests with both the old and the new ID.
    """

    def __init__(self, client_id: str):
        self._client_id = client_id
        self._lock = threading.Lock()

    @property
    def value(self) -> str:
        with self._lock:
            return self._client_id

    @value.setter
    def value(self, client_id: str) -> None:
        with self._lock:
            self._client_id = client_id
