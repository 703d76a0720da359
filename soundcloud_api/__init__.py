"""
Client library for the private SoundCloud v2 API.
"""

from soundcloud_api.client import SearchKind, SoundCloudAPI
from soundcloud_api.config import ClientSettings, load_config
from soundcloud_api.credentials import fetch_client_id
from soundcloud_api.exceptions import (
    ClientIDError,
    ConfigError,
    DecodeError,
    FailedRequestError,
    InvalidOptionsError,
    SoundCloudError,
    TransportError,
)
from soundcloud_api.models import (
    Like,
    PaginatedQuery,
    Playlist,
    Track,
    Transcoding,
    TranscodingFormat,
    User,
)

__all__ = [
    "SoundCloudAPI",
    "SearchKind",
    "ClientSettings",
    "load_config",
    "fetch_client_id",
    "Track",
    "Transcoding",
    "TranscodingFormat",
    "Playlist",
    "User",
    "Like",
    "PaginatedQuery",
    "SoundCloudError",
    "TransportError",
    "FailedRequestError",
    "DecodeError",
    "InvalidOptionsError",
    "ClientIDError",
    "ConfigError",
]
