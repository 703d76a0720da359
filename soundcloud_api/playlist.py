"""
Playlist assembly.

Resolving a playlist URL returns full metadata for the first five tracks
only; the rest of the ``tracks`` array holds ID stubs. The stubs are fetched
in batches of at most 50, concurrently, and spliced back at their original
positions.
"""

import logging
from functools import partial
from typing import Dict, List, Optional

from soundcloud_api.concurrency import fan_out
from soundcloud_api.config import MAX_BATCH_SIZE
from soundcloud_api.credentials import ClientIDStore
from soundcloud_api.models import Playlist, Track, decode
from soundcloud_api.tracks import PlaylistContext, fetch_tracks
from soundcloud_api.transport import HTTPTransport, resolve_url

logger = logging.getLogger(__name__)

# Tracks the resolve endpoint returns with full metadata
INLINE_TRACK_COUNT = 5


def fetch_playlist(
    transport: HTTPTransport,
    client_id: ClientIDStore,
    url: str,
    batch_size: int = MAX_BATCH_SIZE,
    max_workers: Optional[int] = None,
) -> Playlist:
    """
    Resolve a playlist and fill in every track.

    The returned ``tracks`` has ``track_count`` entries in playlist order.
    When a batch comes back short (restricted tracks withheld by the API),
    the positions at the end of that batch stay ``None``.

    Args:
        transport: HTTP transport
        client_id: Client ID holder, read when each request is sent
        url: Playlist URL
        batch_size: IDs per tracks request (at most 50)
        max_workers: Concurrent batch requests (default: one per batch)

    Returns:
        Complete Playlist

    Raises:
        TransportError: If the resolve or any batch request fails
        DecodeError: If a response has an unexpected shape
    """
    playlist = decode(Playlist, transport.get(resolve_url(url, client_id.value)))
    logger.info(
        f"Resolved playlist {playlist.id} ({playlist.title!r}) "
        f"with {playlist.track_count} tracks"
    )

    if playlist.track_count <= INLINE_TRACK_COUNT:
        return playlist

    inline = playlist.tracks[:INLINE_TRACK_COUNT]
    remaining_ids = [
        track.id
        for track in playlist.tracks[INLINE_TRACK_COUNT:playlist.track_count]
        if track is not None
    ]
    remaining: List[Optional[Track]] = [None] * (playlist.track_count - INLINE_TRACK_COUNT)

    context = PlaylistContext(playlist_id=playlist.id, secret_token=playlist.secret_token)
    chunks: Dict[int, List[int]] = {
        offset: remaining_ids[offset:offset + batch_size]
        for offset in range(0, len(remaining_ids), batch_size)
    }
    logger.debug(
        f"Fetching {len(remaining_ids)} playlist tracks in {len(chunks)} batch(es)"
    )

    results = fan_out(
        {
            offset: partial(fetch_tracks, transport, client_id, ids, context)
            for offset, ids in chunks.items()
        },
        max_workers=max_workers,
        thread_name_prefix="playlist",
    )

    for offset, tracks in results.items():
        requested = len(chunks[offset])
        if len(tracks) < requested:
            logger.warning(
                f"Playlist {playlist.id}: batch at offset {offset} returned "
                f"{len(tracks)} of {requested} tracks, leaving "
                f"{requested - len(tracks)} position(s) empty"
            )
        for i, track in enumerate(tracks[:requested]):
            remaining[offset + i] = track

    logger.info(f"Assembled playlist {playlist.id} with {playlist.track_count} tracks")
    return playlist.model_copy(update={"tracks": inline + remaining})
