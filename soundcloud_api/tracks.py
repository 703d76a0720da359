"""
Batch track lookup by ID.

The tracks endpoint answers a list of IDs with the matching tracks in no
particular order, and leaves out every ID it will not serve (restricted
tracks requested without the owning playlist's secret token). Results are
put back into the caller's order before they are returned.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from soundcloud_api.config import MAX_BATCH_SIZE
from soundcloud_api.credentials import ClientIDStore
from soundcloud_api.exceptions import InvalidOptionsError
from soundcloud_api.models import Track, decode_tracks
from soundcloud_api.transport import TRACKS_URL, HTTPTransport, build_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaylistContext:
    """Owning playlist of a batch, needed to resolve restricted tracks."""

    playlist_id: int
    secret_token: str = ""


def sort_tracks_by_ids(ids: Sequence[int], tracks: List[Track]) -> None:
    """
    Reorder ``tracks`` in place so that ``tracks[i].id == ids[i]``.

    Every ID in ``ids`` must be present in ``tracks``. For each position the
    matching track is found further along and swapped in. Quadratic, which is
    fine at the 50 track batch limit.
    """
    for j, track_id in enumerate(ids):
        if tracks[j].id == track_id:
            continue
        for k in range(j + 1, len(tracks)):
            if tracks[k].id == track_id:
                tracks[j], tracks[k] = tracks[k], tracks[j]
                break


def fetch_tracks(
    transport: HTTPTransport,
    client_id: ClientIDStore,
    ids: Sequence[int],
    context: Optional[PlaylistContext] = None,
) -> List[Track]:
    """
    Fetch up to 50 tracks in one request, in the order of ``ids``.

    IDs the API does not return are missing from the result, so it can be
    shorter than ``ids``. An ID requested more than once gets one entry per
    occurrence.

    Args:
        transport: HTTP transport
        client_id: Client ID holder, read when the request is sent
        ids: Track IDs (at most 50)
        context: Owning playlist, for restricted tracks

    Returns:
        Tracks ordered like ``ids``

    Raises:
        InvalidOptionsError: If ``ids`` is empty or longer than 50
        TransportError: If the request fails
        DecodeError: If the response is not a track list
    """
    if not ids:
        raise InvalidOptionsError("At least one track ID is required")
    if len(ids) > MAX_BATCH_SIZE:
        raise InvalidOptionsError(
            f"Cannot fetch {len(ids)} tracks at once (limit is {MAX_BATCH_SIZE})"
        )

    params = [("ids", ",".join(str(track_id) for track_id in ids))]
    if context is not None:
        params.append(("playlistId", context.playlist_id))
        params.append(("playlistSecretToken", context.secret_token))

    url = build_url(TRACKS_URL, params, client_id=client_id.value)
    tracks = decode_tracks(transport.get(url))

    # Restricted tracks are dropped silently, so only order what came back
    by_id: Dict[int, Track] = {}
    for track in tracks:
        by_id.setdefault(track.id, track)
    effective_ids = [track_id for track_id in ids if track_id in by_id]
    if len(effective_ids) < len(ids):
        logger.debug(
            f"Tracks endpoint returned {len(effective_ids)} of {len(ids)} requested tracks"
        )

    # One entry per requested occurrence, whether or not repeats were echoed
    wanted = Counter(effective_ids)
    ordered: List[Track] = []
    for track in tracks:
        if wanted[track.id] > 0:
            ordered.append(track)
            wanted[track.id] -= 1
    for track_id, missing in wanted.items():
        ordered.extend([by_id[track_id]] * missing)

    sort_tracks_by_ids(effective_ids, ordered)
    return ordered
