"""Public API for netdispatch configuration."""

from .loader import load_settings
from .models import (
    DEFAULT_CONFIG_PATH,
    ClientSettings,
    LoggingSettings,
    NetDispatchSettings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ClientSettings",
    "LoggingSettings",
    "NetDispatchSettings",
    "load_settings",
]
