"""
Test helper functions and utilities.
"""
import json
import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
from urllib.parse import parse_qs, urlsplit

from soundcloud_api.exceptions import FailedRequestError

Handler = Union[bytes, Exception, Callable[[str], bytes]]


def make_track(track_id: int, **kwargs) -> Dict[str, Any]:
    """Create a track payload with optional overrides."""
    track = {
        "id": track_id,
        "kind": "track",
        "title": f"Track {track_id}",
        "permalink_url": f"https://soundcloud.com/artist/track-{track_id}",
        "media": {"transcodings": []},
    }
    track.update(kwargs)
    return track


def make_stub(track_id: int) -> Dict[str, Any]:
    """Create the ID-only track stub a playlist carries past its fifth track."""
    return {"id": track_id, "kind": "track", "monetization_model": "NOT_APPLICABLE", "policy": "ALLOW"}


def make_playlist(
    playlist_id: int,
    track_ids: List[int],
    secret_token: Optional[str] = None,
    **kwargs,
) -> Dict[str, Any]:
    """Create a resolve payload: first five tracks in full, the rest as stubs."""
    tracks = [
        make_track(track_id) if position < 5 else make_stub(track_id)
        for position, track_id in enumerate(track_ids)
    ]
    playlist = {
        "id": playlist_id,
        "kind": "playlist",
        "title": f"Playlist {playlist_id}",
        "secret_token": secret_token,
        "track_count": len(track_ids),
        "tracks": tracks,
    }
    playlist.update(kwargs)
    return playlist


def to_json(payload: Any) -> bytes:
    return json.dumps(payload).encode("utf-8")


def query_of(url: str) -> Dict[str, List[str]]:
    return parse_qs(urlsplit(url).query, keep_blank_values=True)


def ids_of(url: str) -> List[int]:
    """Track IDs of a tracks endpoint URL."""
    return [int(track_id) for track_id in query_of(url)["ids"][0].split(",")]


def tracks_endpoint(
    store: Dict[int, Dict[str, Any]],
    withheld: Iterable[int] = (),
    reverse: bool = True,
) -> Callable[[str], bytes]:
    """
    Build a tracks endpoint handler backed by ``store``.

    IDs missing from the store or listed in ``withheld`` are left out, and the
    result is reversed to mimic the API's arbitrary ordering.
    """
    withheld = set(withheld)

    def handle(url: str) -> bytes:
        found = [store[i] for i in ids_of(url) if i in store and i not in withheld]
        if reverse:
            found.reverse()
        return to_json(found)

    return handle


class FakeTransport:
    """
    In-memory stand-in for HTTPTransport.

    Routes are matched by substring in registration order. A route answers
    with bytes, raises an exception, or calls a function of the URL. An
    optional delay holds the answer back, which forces concurrent requests
    to complete out of order.
    """

    def __init__(self):
        self.routes: List[tuple] = []
        self.requests: List[str] = []
        self._lock = threading.Lock()

    def add(self, pattern: str, handler: Handler, delay: float = 0.0) -> "FakeTransport":
        self.routes.append((pattern, handler, delay))
        return self

    def add_json(self, pattern: str, payload: Any, delay: float = 0.0) -> "FakeTransport":
        return self.add(pattern, to_json(payload), delay)

    def requests_to(self, pattern: str) -> List[str]:
        with self._lock:
            return [url for url in self.requests if pattern in url]

    def get(self, url: str) -> bytes:
        with self._lock:
            self.requests.append(url)

        for pattern, handler, delay in self.routes:
            if pattern in url:
                if delay:
                    time.sleep(delay)
                if isinstance(handler, Exception):
                    raise handler
                if callable(handler):
                    return handler(url)
                return handler

        raise FailedRequestError(404, f"no route for {url}")

    def stream(self, url: str, sink, chunk_size: int = 64 * 1024) -> int:
        data = self.get(url)
        for start in range(0, len(data), chunk_size):
            sink.write(data[start:start + chunk_size])
        return len(data)

    def close(self) -> None:
        pass
