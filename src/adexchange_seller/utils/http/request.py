"""HTTP request helpers that map transport failures to client errors.

Requests are always sent with a streamed body so the caller decides
when, and whether, the body is read. Failures that happen before a
status line arrives, or while the body is being read, are raised as
:class:`~adexchange_seller.exceptions.TransportError`. Task cancellation
is never converted; ``asyncio.CancelledError`` propagates as-is.
"""

import logging
from typing import List, Mapping, Optional, Tuple

import httpx

from ...exceptions import TransportError

logger = logging.getLogger(__name__)


async def send_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    params: Optional[List[Tuple[str, str]]] = None,
    headers: Optional[Mapping[str, str]] = None,
    auth: Optional[httpx.Auth] = None,
    timeout: Optional[float] = None,
    operation: Optional[str] = None,
) -> httpx.Response:
    """Send a request and return the response with its body unread.

    The caller owns the returned response and must close it.

    :param client: Pooled HTTP client
    :type client: httpx.AsyncClient
    :param method: HTTP method (e.g., 'GET')
    :type method: str
    :param url: Absolute URL
    :type url: str
    :param params: Ordered query parameters; repeated keys are kept
    :type params: Optional[List[Tuple[str, str]]]
    :param headers: Request headers
    :type headers: Optional[Mapping[str, str]]
    :param auth: Credential attached to this request only
    :type auth: Optional[httpx.Auth]
    :param timeout: Optional request timeout in seconds
    :type timeout: Optional[float]
    :param operation: Operation name used in error messages
    :type operation: Optional[str]
    :return: Streamed response
    :rtype: httpx.Response
    :raises TransportError: If no response could be obtained
    """
    request_kwargs = {"params": params, "headers": dict(headers or {})}
    if timeout is not None:
        request_kwargs["timeout"] = timeout
    request = client.build_request(method, url, **request_kwargs)
    logger.debug("%s %s", method, request.url)

    try:
        if auth is not None:
            response = await client.send(request, auth=auth, stream=True)
        else:
            response = await client.send(request, stream=True)
    except httpx.TimeoutException as e:
        raise TransportError(
            f"{operation or method} timed out", operation=operation, original_error=e
        ) from e
    except httpx.RequestError as e:
        raise TransportError(
            f"{operation or method} failed: {e}", operation=operation, original_error=e
        ) from e

    logger.debug("%s %s -> %d", method, request.url, response.status_code)
    return response


async def read_body(
    response: httpx.Response, operation: Optional[str] = None
) -> bytes:
    """Read a streamed response body fully.

    :param response: Streamed response
    :type response: httpx.Response
    :param operation: Operation name used in error messages
    :type operation: Optional[str]
    :return: Raw body bytes
    :rtype: bytes
    :raises TransportError: If the connection fails mid-body
    """
    try:
        return await response.aread()
    except httpx.TimeoutException as e:
        raise TransportError(
            f"{operation or 'request'} timed out reading body",
            operation=operation,
            original_error=e,
        ) from e
    except httpx.RequestError as e:
        raise TransportError(
            f"{operation or 'request'} failed reading body: {e}",
            operation=operation,
            original_error=e,
        ) from e


def flatten_headers(headers: httpx.Headers) -> dict:
    """Return response headers as a plain dict, joining repeated values."""
    flat: dict = {}
    for key, value in headers.multi_items():
        flat[key] = f"{flat[key]}, {value}" if key in flat else value
    return flat
