"""
Configuration models and loader.
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from soundcloud_api.exceptions import ConfigError

CLIENT_ID_ENV_VAR = "SOUNDCLOUD_CLIENT_ID"

# The tracks endpoint refuses more IDs than this in one request
MAX_BATCH_SIZE = 50

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)


def _client_id_from_env() -> Optional[str]:
    return os.getenv(CLIENT_ID_ENV_VAR) or None


class ClientSettings(BaseModel):
    """API client configuration settings."""

    client_id: Optional[str] = Field(default_factory=_client_id_from_env)
    timeout: float = Field(default=20.0, gt=0)  # Per-request timeout in seconds
    batch_size: int = Field(default=MAX_BATCH_SIZE, ge=1, le=MAX_BATCH_SIZE)
    max_workers: Optional[int] = Field(default=None, ge=1)  # None: one worker per task
    chunk_size: int = Field(default=64 * 1024, ge=1)  # Progressive copy buffer
    user_agent: str = DEFAULT_USER_AGENT

    @field_validator("client_id", mode="before")
    @classmethod
    def _blank_client_id(cls, value):
        """Treat an empty client ID like a missing one."""
        if isinstance(value, str) and not value.strip():
            return _client_id_from_env()
        return value

    @classmethod
    def from_yaml(cls, path: str) -> "ClientSettings":
        """
        Load and validate settings from YAML file.

        The file holds a ``version`` key and a ``client`` mapping:

            version: "1.0"
            client:
              client_id: abc123
              timeout: 10

        Args:
            path: Path to YAML configuration file

        Returns:
            ClientSettings instance

        Raises:
            ConfigError: If file not found or invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError("Invalid configuration: top level must be a mapping")

        # YAML reads an unquoted 1.0 as a float
        version = data.get("version")
        if str(version) != "1.0":
            raise ConfigError(f"Invalid version: {version}. Expected 1.0")

        client = data.get("client") or {}
        if not isinstance(client, dict):
            raise ConfigError("Invalid configuration: 'client' must be a mapping")

        try:
            return cls(**client)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(config_path: str) -> ClientSettings:
    """
    Load client settings from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        ClientSettings instance
    """
    return ClientSettings.from_yaml(config_path)
