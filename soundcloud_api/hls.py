"""
Audio download for progressive and HLS transcodings.

A progressive transcoding is one audio file and is streamed straight into
the sink. An HLS transcoding is an m3u8 media playlist of short segments,
which are fetched concurrently, held in memory and written to the sink in
playlist order once all of them have arrived. Segments are tens to a few
hundred KB each, so a whole track fits comfortably in memory.
"""

import logging
from functools import partial
from typing import BinaryIO, List, Optional

import m3u8

from soundcloud_api.concurrency import fan_out
from soundcloud_api.exceptions import DecodeError
from soundcloud_api.transport import HTTPTransport

logger = logging.getLogger(__name__)


def parse_segment_uris(manifest: bytes, manifest_url: Optional[str] = None) -> List[Optional[str]]:
    """
    List the segment URIs of an m3u8 media playlist, in playlist order.

    Entries without a URI are kept as ``None`` so indexes match the playlist.
    Relative URIs are resolved against ``manifest_url``.

    Raises:
        DecodeError: If the manifest is not a media playlist
    """
    try:
        text = manifest.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"m3u8 playlist is not valid UTF-8: {e}") from e

    if not text.lstrip().startswith("#EXTM3U"):
        raise DecodeError("Failed to decode m3u8 playlist: missing #EXTM3U header")

    try:
        playlist = m3u8.loads(text, uri=manifest_url)
    except (m3u8.ParseError, ValueError) as e:
        raise DecodeError(f"Failed to decode m3u8 playlist: {e}") from e

    if playlist.is_variant:
        raise DecodeError("m3u8 playlist is not a media playlist")

    uris: List[Optional[str]] = []
    for segment in playlist.segments:
        if segment is None or not segment.uri:
            uris.append(None)
        elif manifest_url:
            uris.append(segment.absolute_uri)
        else:
            uris.append(segment.uri)
    return uris


def download_hls(
    transport: HTTPTransport,
    manifest_url: str,
    sink: BinaryIO,
    max_workers: Optional[int] = None,
) -> int:
    """
    Download every segment of an HLS stream and write them to ``sink`` in order.

    Nothing is written unless every segment downloads: the first failing
    segment aborts the download and its error propagates.

    Args:
        transport: HTTP transport
        manifest_url: URL of the m3u8 media playlist
        sink: Writable binary stream
        max_workers: Concurrent segment requests (default: one per segment)

    Returns:
        Number of bytes written

    Raises:
        TransportError: If the playlist or any segment request fails
        DecodeError: If the playlist cannot be parsed
    """
    uris = parse_segment_uris(transport.get(manifest_url), manifest_url)
    jobs = {index: partial(transport.get, uri) for index, uri in enumerate(uris) if uri}
    logger.debug(f"Downloading {len(jobs)} HLS segment(s) from {manifest_url}")

    segments = fan_out(jobs, max_workers=max_workers, thread_name_prefix="hls")

    written = 0
    for index in sorted(segments):
        sink.write(segments[index])
        written += len(segments[index])

    logger.info(f"Downloaded {len(segments)} HLS segment(s), {written} bytes")
    return written


def download_progressive(
    transport: HTTPTransport,
    url: str,
    sink: BinaryIO,
    chunk_size: int = 64 * 1024,
) -> int:
    """
    Stream a single-file transcoding into ``sink``.

    Returns:
        Number of bytes written
    """
    written = transport.stream(url, sink, chunk_size=chunk_size)
    logger.info(f"Downloaded progressive stream, {written} bytes")
    return written
