"""
SoundCloud v2 API client.
"""

import logging
from enum import Enum
from typing import BinaryIO, Callable, List, Optional, Sequence

import requests

from soundcloud_api.config import ClientSettings
from soundcloud_api.credentials import ClientIDStore, fetch_client_id
from soundcloud_api.exceptions import InvalidOptionsError, SoundCloudError
from soundcloud_api.hls import download_hls, download_progressive
from soundcloud_api.models import (
    DownloadURLResponse,
    MediaURLResponse,
    PaginatedQuery,
    Playlist,
    Track,
    Transcoding,
    User,
    decode,
)
from soundcloud_api.playlist import fetch_playlist
from soundcloud_api.tracks import PlaylistContext, fetch_tracks
from soundcloud_api.transport import (
    SEARCH_URL,
    TRACKS_URL,
    USERS_URL,
    HTTPTransport,
    build_url,
    resolve_url,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 10


class SearchKind(str, Enum):
    """Resource kind to restrict a search to."""

    ALL = ""
    TRACKS = "tracks"
    ALBUMS = "albums"
    PLAYLISTS = "playlist_without_albums"
    USERS = "users"


# Singular kind names, as used for likes
_SEARCH_KIND_ALIASES = {
    "track": SearchKind.TRACKS,
    "album": SearchKind.ALBUMS,
    "playlist": SearchKind.PLAYLISTS,
    "user": SearchKind.USERS,
}


def _search_kind(kind) -> SearchKind:
    if isinstance(kind, str) and kind in _SEARCH_KIND_ALIASES:
        return _SEARCH_KIND_ALIASES[kind]
    try:
        return SearchKind(kind)
    except ValueError as e:
        raise InvalidOptionsError(f"Unknown search kind: {kind!r}") from e


def _likes_endpoint(kind: str) -> str:
    if kind == "track":
        return "track_likes"
    if kind == "playlist":
        return "playlist_likes"
    return "likes"


class SoundCloudAPI:
    """Client for the private API behind soundcloud.com."""

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        session: Optional[requests.Session] = None,
        transport: Optional[HTTPTransport] = None,
        client_id_fetcher: Callable[..., str] = fetch_client_id,
    ):
        """
        Initialize with settings.

        Args:
            settings: Client settings (defaults apply if not provided)
            session: requests session for the default transport
            transport: Transport to use instead of the default one
            client_id_fetcher: Called with the transport's session and the timeout
                for a client ID when settings carry none

        Raises:
            ClientIDError: If no client ID is configured and fetching one fails
        """
        self.settings = settings or ClientSettings()
        self.transport = transport or HTTPTransport(
            session=session,
            timeout=self.settings.timeout,
            user_agent=self.settings.user_agent,
        )

        client_id = self.settings.client_id
        if not client_id:
            logger.info("No client ID configured, fetching one")
            client_id = client_id_fetcher(
                session=getattr(self.transport, "session", session),
                timeout=self.settings.timeout,
            )
        self._client_id = ClientIDStore(client_id)

    @property
    def client_id(self) -> str:
        return self._client_id.value

    def set_client_id(self, client_id: str) -> None:
        """
        Replace the client ID for subsequent requests.

        Requests of an operation already in progress may use either value.
        """
        self._client_id.value = client_id

    def _build(self, base: str, *params) -> str:
        return build_url(base, params, client_id=self._client_id.value)

    def _resolve(self, url: str) -> bytes:
        return self.transport.get(resolve_url(url, self._client_id.value))

    def get_track_info(
        self,
        url: Optional[str] = None,
        ids: Optional[Sequence[int]] = None,
        playlist_id: Optional[int] = None,
        playlist_secret_token: str = "",
    ) -> List[Track]:
        """
        Get track info by URL or by IDs.

        With ``ids`` (at most 50) the tracks come back in the same order, minus
        any the API withholds. Restricted tracks are only returned when the
        owning playlist's ID and secret token are given.

        Args:
            url: Track URL (single track)
            ids: Track IDs
            playlist_id: ID of the playlist the tracks belong to
            playlist_secret_token: Secret token of that playlist

        Returns:
            List of tracks

        Raises:
            InvalidOptionsError: If neither url nor ids is given
        """
        if ids:
            context = None
            if playlist_id or playlist_secret_token:
                context = PlaylistContext(playlist_id or 0, playlist_secret_token)
            return fetch_tracks(self.transport, self._client_id, ids, context)

        if url:
            return [decode(Track, self._resolve(url))]

        raise InvalidOptionsError("Invalid options. URL or ID must be provided")

    def get_playlist_info(self, url: str) -> Playlist:
        """Get a playlist with all of its tracks."""
        if not url:
            raise InvalidOptionsError("Playlist URL is required")
        return fetch_playlist(
            self.transport,
            self._client_id,
            url,
            batch_size=self.settings.batch_size,
            max_workers=self.settings.max_workers,
        )

    def get_media_url(self, transcoding_url: str) -> str:
        """Resolve a transcoding URL to the short-lived URL of its audio."""
        data = self.transport.get(self._build(transcoding_url))
        return decode(MediaURLResponse, data).url

    def download_track(self, transcoding: Transcoding, sink: BinaryIO) -> int:
        """
        Download a track's audio for the given transcoding into ``sink``.

        Returns:
            Number of bytes written
        """
        if not transcoding.url:
            raise InvalidOptionsError("Transcoding has no URL")

        media_url = self.get_media_url(transcoding.url)
        if transcoding.is_progressive:
            return download_progressive(
                self.transport, media_url, sink, chunk_size=self.settings.chunk_size
            )
        return download_hls(
            self.transport, media_url, sink, max_workers=self.settings.max_workers
        )

    def get_download_url(self, url: str, stream_type: str = "progressive") -> str:
        """
        Get a URL the track's audio can be fetched from.

        A public download link is preferred when the track offers one and
        ``stream_type`` ("progressive" or "hls") is ignored in that case.
        Otherwise the first transcoding with that protocol is used, falling
        back to the track's first transcoding.

        Raises:
            SoundCloudError: If the URL is not a track or has no transcodings
        """
        stream_type = (stream_type or "progressive").lower()
        track = decode(Track, self._resolve(url))
        if track.kind != "track":
            raise InvalidOptionsError(f"URL is not a track URL: {url}")

        if track.downloadable and track.has_downloads_left:
            data = self.transport.get(self._build(f"{TRACKS_URL}/{track.id}/download"))
            return decode(DownloadURLResponse, data).url

        if not track.transcodings:
            raise SoundCloudError(f"Track {track.id} has no transcodings")

        for transcoding in track.transcodings:
            if transcoding.format.protocol.lower() == stream_type:
                return self.get_media_url(transcoding.url)
        return self.get_media_url(track.transcodings[0].url)

    def get_user(
        self, profile_url: Optional[str] = None, user_id: Optional[int] = None
    ) -> User:
        """Get a user by profile URL or ID."""
        if profile_url:
            data = self._resolve(profile_url)
        elif user_id:
            data = self.transport.get(self._build(f"{USERS_URL}/{user_id}"))
        else:
            raise InvalidOptionsError("One of profile_url or user_id is required")
        return decode(User, data)

    def get_likes(
        self,
        profile_url: Optional[str] = None,
        user_id: Optional[int] = None,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: str = "",
        kind: str = "all",
    ) -> PaginatedQuery:
        """
        Get one page of a user's likes.

        Args:
            profile_url: User's profile URL (resolved to an ID)
            user_id: User's ID
            limit: Page size
            offset: Pagination cursor taken from a previous page, "" for the first
            kind: "track", "playlist" or "all"

        Returns:
            PaginatedQuery; use get_likes()/get_tracks()/get_playlists() on it
        """
        if profile_url:
            user_id = self.get_user(profile_url=profile_url).id
        elif not user_id:
            raise InvalidOptionsError("One of profile_url or user_id is required")

        params = [("limit", limit or DEFAULT_PAGE_LIMIT)]
        if offset:
            params.append(("offset", offset))
        endpoint = f"{USERS_URL}/{user_id}/{_likes_endpoint(kind)}"
        return self._fetch_page(self._build(endpoint, *params))

    def search(
        self,
        query: str = "",
        query_url: str = "",
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
        kind: SearchKind = SearchKind.ALL,
    ) -> PaginatedQuery:
        """
        Search for tracks, playlists, albums or users.

        Args:
            query: Search terms
            query_url: ``next_href`` of a previous page; overrides the other arguments
            limit: Page size
            offset: Number of results to skip
            kind: Restrict results to one resource kind (a SearchKind, its
                value, or "track", "album", "playlist" or "user")
        """
        if query_url:
            return self._fetch_page(self._build(query_url))
        if not query:
            raise InvalidOptionsError("One of query or query_url is required")

        kind = _search_kind(kind)
        base = f"{SEARCH_URL}/{kind.value}" if kind.value else SEARCH_URL
        url = self._build(
            base, ("q", query), ("limit", limit or DEFAULT_PAGE_LIMIT), ("offset", offset)
        )
        return self._fetch_page(url)

    def next_page(self, page: PaginatedQuery) -> Optional[PaginatedQuery]:
        """Fetch the page after ``page``, or None if it was the last."""
        if not page.next_href:
            return None
        return self._fetch_page(self._build(page.next_href))

    def _fetch_page(self, url: str) -> PaginatedQuery:
        return decode(PaginatedQuery, self.transport.get(url))

    def close(self) -> None:
        self.transport.close()
