"""
Custom exceptions for soundcloud_api.
"""

from typing import Optional


class SoundCloudError(Exception):
    """Base exception for all soundcloud_api errors."""


class TransportError(SoundCloudError):
    """Network-level request failures."""


class FailedRequestError(TransportError):
    """
    Request returned a non 2xx status.

    Attributes:
        status: HTTP status code of the response
        body: Raw response body (may be empty)
    """

    def __init__(self, status: int, body: Optional[str] = None):
        self.status = status
        self.body = body or ""
        if self.body:
            message = f"Request failed with status {status}: {self.body}"
        else:
            message = f"Request returned non 2xx status: {status}"
        super().__init__(message)


class DecodeError(SoundCloudError):
    """Response body does not match the expected shape."""


class InvalidOptionsError(SoundCloudError, ValueError):
    """Invalid argument combination, raised before any request is issued."""


class ClientIDError(SoundCloudError):
    """Client ID could not be retrieved."""


class ConfigError(SoundCloudError):
    """Configuration errors."""
