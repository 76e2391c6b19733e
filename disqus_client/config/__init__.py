"""Configuration for the Disqus client."""

from .logging import LoggingSettings
from .settings import (
    ConfigurationError,
    DisqusSettings,
    HTTPSettings,
    StorageSettings,
    get_settings,
)


__all__ = [
    "ConfigurationError",
    "DisqusSettings",
    "HTTPSettings",
    "LoggingSettings",
    "StorageSettings",
    "get_settings",
]
