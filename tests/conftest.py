"""
Shared pytest fixtures for soundcloud_api tests.
"""
import tempfile
from pathlib import Path

import pytest

from soundcloud_api.client import SoundCloudAPI
from soundcloud_api.config import ClientSettings
from soundcloud_api.credentials import ClientIDStore
from tests.helpers import FakeTransport, make_track


TEST_CLIENT_ID = "a3e059563d7fd3372b49b37f00a00bcf"

# Trimmed /resolve response for a public track
SAMPLE_TRACK_DATA = make_track(
    1234567,
    title="Double Cheese Burger (Hold The Lettuce)",
    permalink_url="https://soundcloud.com/taliya-jenkins/double-cheese-burger-hold-the",
    duration=185000,
    full_duration=185000,
    genre="Hip-hop & Rap",
    description=None,
    label_name=None,
    downloadable=False,
    has_downloads_left=False,
    user={"id": 42, "kind": "user", "username": "Taliya Jenkins"},
    media={
        "transcodings": [
            {
                "url": "https://api-v2.soundcloud.com/media/soundcloud:tracks:1234567/abc/stream/hls",
                "preset": "mp3_0_0",
                "snipped": False,
                "format": {"protocol": "hls", "mime_type": "audio/mpeg"},
            },
            {
                "url": "https://api-v2.soundcloud.com/media/soundcloud:tracks:1234567/abc/stream/progressive",
                "preset": "mp3_0_0",
                "snipped": False,
                "format": {"protocol": "progressive", "mime_type": "audio/mpeg"},
            },
        ]
    },
)

SAMPLE_USER_DATA = {
    "id": 42,
    "kind": "user",
    "username": "Taliya Jenkins",
    "permalink_url": "https://soundcloud.com/taliya-jenkins",
    "city": None,
    "followers_count": 1200,
    "verified": False,
}

SAMPLE_MANIFEST = b"""#EXTM3U
#EXT-X-VERSION:6
#EXT-X-PLAYLIST-TYPE:VOD
#EXT-X-TARGETDURATION:10
#EXT-X-MEDIA-SEQUENCE:0
#EXTINF:1.985272,
https://cf-hls-media.sndcdn.com/media/0/31762/seg0.mp3
#EXTINF:9.952607,
https://cf-hls-media.sndcdn.com/media/31762/190316/seg1.mp3
#EXTINF:9.952607,
https://cf-hls-media.sndcdn.com/media/190316/349492/seg2.mp3
#EXT-X-ENDLIST
"""


@pytest.fixture
def tmp_test_dir():
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_transport():
    """Create an empty fake transport."""
    return FakeTransport()


@pytest.fixture
def client_id_store():
    """Create a client ID holder with the test client ID."""
    return ClientIDStore(TEST_CLIENT_ID)


@pytest.fixture
def sample_settings():
    """Create sample client settings."""
    return ClientSettings(client_id=TEST_CLIENT_ID, timeout=5)


@pytest.fixture
def api(sample_settings, fake_transport):
    """Create a SoundCloudAPI backed by the fake transport."""
    return SoundCloudAPI(settings=sample_settings, transport=fake_transport)


@pytest.fixture
def sample_config_yaml(tmp_test_dir):
    """Create sample config YAML file."""
    config_file = tmp_test_dir / "config.yaml"
    config_file.write_text(f"""
version: 1.0
client:
  client_id: {TEST_CLIENT_ID}
  timeout: 10
  batch_size: 25
  max_workers: 4
""")
    return str(config_file)
