"""
Data models for the SoundCloud v2 API payloads.

Every model tolerates missing and null fields: the API sends sparse objects
(playlists only inline the first tracks in full, the rest are ID stubs) and
nulls for unset strings, both of which decode to the field's empty default.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from soundcloud_api.exceptions import DecodeError


M = TypeVar("M", bound="APIModel")


class DeliveryProtocol(str, Enum):
    """Delivery protocol of a transcoding."""

    PROGRESSIVE = "progressive"
    HLS = "hls"


class APIModel(BaseModel):
    """Base for all API payload models."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null decodes to the field default, not to None
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class User(APIModel):
    """User profile."""

    id: int = 0
    kind: str = ""
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    avatar_url: str = ""
    city: str = ""
    country_code: str = ""
    description: str = ""
    created_at: str = ""
    permalink_url: str = ""
    uri: str = ""
    comments_count: int = 0
    followers_count: int = 0
    followings_count: int = 0
    likes_count: int = 0
    playlist_likes_count: int = 0
    verified: bool = False


class TranscodingFormat(APIModel):
    """Protocol and mime type of a transcoding."""

    protocol: str = ""
    mime_type: str = ""


class Transcoding(APIModel):
    """One deliverable encoding of a track."""

    url: str = ""
    preset: str = ""
    snipped: bool = False
    format: TranscodingFormat = Field(default_factory=TranscodingFormat)

    @property
    def is_progressive(self) -> bool:
        """Whether the audio is a single file rather than a segmented stream."""
        if self.format.protocol:
            return self.format.protocol.lower() == DeliveryProtocol.PROGRESSIVE.value
        return "progressive" in self.url


class Media(APIModel):
    transcodings: List[Transcoding] = Field(default_factory=list)


class Track(APIModel):
    """Track metadata. Durations are in milliseconds."""

    id: int = 0
    kind: str = ""
    title: str = ""
    description: str = ""
    genre: str = ""
    tag_list: str = ""
    label_name: str = ""
    monetization_model: str = ""
    policy: str = ""
    created_at: str = ""
    last_modified: str = ""
    display_date: str = ""
    duration: int = 0
    full_duration: int = 0
    artwork_url: str = ""
    waveform_url: str = ""
    permalink: str = ""
    permalink_url: str = ""
    uri: str = ""
    secret_token: str = ""
    public: bool = False
    streamable: bool = False
    commentable: bool = False
    downloadable: bool = False
    has_downloads_left: bool = False
    comment_count: int = 0
    download_count: int = 0
    likes_count: int = 0
    playback_count: int = 0
    reposts_count: int = 0
    user_id: int = 0
    user: User = Field(default_factory=User)
    media: Media = Field(default_factory=Media)

    @property
    def transcodings(self) -> List[Transcoding]:
        return self.media.transcodings


class Playlist(APIModel):
    """
    Playlist metadata.

    ``tracks`` may contain ``None`` holes once assembled: positions whose
    track the API silently withheld (restricted tracks) stay unfilled.
    """

    id: int = 0
    kind: str = ""
    title: str = ""
    description: str = ""
    genre: str = ""
    tag_list: str = ""
    label_name: str = ""
    license: str = ""
    set_type: str = ""
    is_album: bool = False
    created_at: str = ""
    last_modified: str = ""
    published_at: str = ""
    display_date: str = ""
    duration: int = 0
    artwork_url: str = ""
    embeddable_by: str = ""
    permalink: str = ""
    permalink_url: str = ""
    uri: str = ""
    public: bool = False
    sharing: str = ""
    secret_token: str = ""
    managed_by_feeds: bool = False
    likes_count: int = 0
    user_id: int = 0
    user: User = Field(default_factory=User)
    track_count: int = 0
    tracks: List[Optional[Track]] = Field(default_factory=list)


class Like(APIModel):
    """A liked track or playlist. Exactly one of the payloads is set."""

    created_at: str = ""
    kind: str = ""
    track: Optional[Track] = None
    playlist: Optional[Playlist] = None

    @model_validator(mode="after")
    def _single_payload(self) -> "Like":
        if (self.track is None) == (self.playlist is None):
            raise ValueError("like must carry exactly one of track or playlist")
        return self

    @property
    def item(self) -> Union[Track, Playlist]:
        return self.track if self.track is not None else self.playlist


class PaginatedQuery(APIModel):
    """
    One page of a heterogeneous result list.

    ``next_href`` is an opaque URL for the following page; an empty string
    marks the last page.
    """

    collection: List[Dict[str, Any]] = Field(default_factory=list)
    total_results: int = 0
    next_href: str = ""
    query_urn: str = ""

    @field_validator("collection", mode="before")
    @classmethod
    def _only_objects(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [item for item in value if isinstance(item, dict)]
        return value

    @property
    def has_next(self) -> bool:
        return bool(self.next_href)

    def _project(self, model: Type[M], kind: str) -> List[M]:
        items = []
        for raw in self.collection:
            try:
                item = model.model_validate(raw)
            except ValidationError:
                continue
            if item.kind != kind:
                continue
            items.append(item)
        return items

    def get_tracks(self) -> List[Track]:
        """Items of the collection that are tracks."""
        return self._project(Track, "track")

    def get_playlists(self) -> List[Playlist]:
        """Items of the collection that are playlists."""
        return self._project(Playlist, "playlist")

    def get_likes(self) -> List[Like]:
        """Items of the collection that are likes."""
        return self._project(Like, "like")


class MediaURLResponse(APIModel):
    url: str


class DownloadURLResponse(APIModel):
    url: str = Field(alias="redirectUri")


_track_list = TypeAdapter(List[Track])


def _load_json(data: bytes, what: str) -> Any:
    try:
        return json.loads(data)
    except ValueError as e:
        raise DecodeError(f"Response is not valid JSON ({what}): {e}") from e


def decode(model: Type[M], data: bytes) -> M:
    """
    Decode a JSON response body into a model.

    Raises:
        DecodeError: If the body is not JSON or does not match the model
    """
    payload = _load_json(data, model.__name__)
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(f"JSON is not valid {model.__name__} data: {e}") from e


def decode_tracks(data: bytes) -> List[Track]:
    """Decode a JSON array of tracks."""
    payload = _load_json(data, "track list")
    try:
        return _track_list.validate_python(payload)
    except ValidationError as e:
        raise DecodeError(f"JSON is not valid track info: {e}") from e
