"""Configuration, errors and remote collaborators."""

from .client import MediaClient, create_media_client
from .settings import Settings, get_settings

__all__ = ["MediaClient", "Settings", "create_media_client", "get_settings"]
