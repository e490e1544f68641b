"""Ad Exchange Seller API client package.

This package provides an async client for the Ad Exchange Seller REST
API. It covers resource listing for ad clients, ad units, custom
channels, URL channels and saved reports, and report generation as
decoded JSON or as a raw media stream.

:var __version__: Current package version
:type __version__: str
"""

__version__ = "0.1.0"

from .api import AdExchangeSellerService  # noqa: E402
from .exceptions import (  # noqa: E402
    AdExchangeSellerError,
    ApiError,
    DecodeError,
    NotModifiedError,
    TransportError,
    ValidationError,
)

__all__ = [
    "__version__",
    "AdExchangeSellerService",
    "AdExchangeSellerError",
    "ApiError",
    "DecodeError",
    "NotModifiedError",
    "TransportError",
    "ValidationError",
]
