"""
HTTP transport and request URL composition.
"""

import logging
from typing import BinaryIO, Iterable, Optional, Sequence, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests

from soundcloud_api.exceptions import FailedRequestError, InvalidOptionsError, TransportError

logger = logging.getLogger(__name__)

API_BASE = "https://api-v2.soundcloud.com"
TRACKS_URL = f"{API_BASE}/tracks"
RESOLVE_URL = f"{API_BASE}/resolve"
USERS_URL = f"{API_BASE}/users"
SEARCH_URL = f"{API_BASE}/search"


def build_url(
    base: str,
    params: Sequence[Tuple[str, object]] = (),
    client_id: Optional[str] = None,
) -> str:
    """
    Compose a request URL.

    Query parameters already present in ``base`` are kept. ``client_id``,
    when given, replaces any client_id the base carries, so cursors handed
    back by the API (``next_href``) can be forwarded as-is.

    Args:
        base: Endpoint URL, possibly with a query string
        params: Ordered (key, value) pairs to append
        client_id: Credential to attach

    Returns:
        Request URL with the query encoded and sorted by key
    """
    parts = urlsplit(base)
    if not parts.scheme or not parts.netloc:
        raise InvalidOptionsError(f"Invalid URL: {base!r}")

    query = parse_qsl(parts.query, keep_blank_values=True)
    query.extend((key, str(value)) for key, value in params)
    if client_id is not None:
        query = [(key, value) for key, value in query if key != "client_id"]
        query.append(("client_id", client_id))

    # Stable sort keeps repeated keys in insertion order
    query.sort(key=lambda pair: pair[0])
    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment)
    )


def resolve_url(resource_url: str, client_id: str) -> str:
    """URL of the resolve endpoint for a public soundcloud.com resource URL."""
    return build_url(RESOLVE_URL, [("url", resource_url.rstrip("/"))], client_id=client_id)


def _raise_for_status(response: requests.Response) -> None:
    """Raise FailedRequestError carrying the body for any non 2xx status."""
    if 200 <= response.status_code <= 299:
        return
    raise FailedRequestError(response.status_code, response.text)


class HTTPTransport:
    """Thin wrapper over requests.Session issuing one GET per call."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 20.0,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize transport.

        Args:
            session: Session to reuse (a new one is created if not provided)
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header for every request
        """
        self.session = session or requests.Session()
        self.timeout = timeout
        if user_agent:
            self.session.headers.update({"User-Agent": user_agent})

    def get(self, url: str) -> bytes:
        """
        Fetch a URL and return the whole body.

        Raises:
            FailedRequestError: On a non 2xx response
            TransportError: On connection or read failures
        """
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

        with response:
            _raise_for_status(response)
            return response.content

    def stream(self, url: str, sink: BinaryIO, chunk_size: int = 64 * 1024) -> int:
        """
        Copy a response body into ``sink`` without buffering all of it.

        Returns:
            Number of bytes written
        """
        logger.debug(f"GET (stream) {url}")
        written = 0
        try:
            with self.session.get(url, timeout=self.timeout, stream=True) as response:
                _raise_for_status(response)
                chunks: Iterable[bytes] = response.iter_content(chunk_size=chunk_size)
                for chunk in chunks:
                    if chunk:
                        sink.write(chunk)
                        written += len(chunk)
        except requests.RequestException as e:
            raise TransportError(f"Streaming {url} failed: {e}") from e
        return written

    def close(self) -> None:
        self.session.close()
