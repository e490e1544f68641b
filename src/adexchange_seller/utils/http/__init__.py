"""HTTP utilities public API (barrel module).

This package provides:
- Shared HTTP client manager and helpers
- Bearer credential attachment
- Request helpers that map transport failures to client errors

Recommended import pattern for consumers:
    from adexchange_seller.utils.http import get_http_client, send_request
"""

from .auth import BearerTokenAuth, TokenProvider
from .client_manager import (
    HTTPClientManager,
    get_http_client,
    http_client_manager,
)
from .request import flatten_headers, read_body, send_request

__all__ = [
    "HTTPClientManager",
    "http_client_manager",
    "get_http_client",
    "BearerTokenAuth",
    "TokenProvider",
    "send_request",
    "read_body",
    "flatten_headers",
]
