"""Configuration for the Ad Exchange Seller client."""

from .settings import (
    DEFAULT_BASE_URL,
    READONLY_SCOPE,
    READWRITE_SCOPE,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "DEFAULT_BASE_URL",
    "READWRITE_SCOPE",
    "READONLY_SCOPE",
]
