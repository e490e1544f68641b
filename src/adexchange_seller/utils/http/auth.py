"""Bearer credential attachment for outgoing requests.

The client never acquires or refreshes credentials itself. A caller
supplies either a fixed token or a token provider callable, and
:class:`BearerTokenAuth` asks for the current token on every request.
"""

import inspect
import logging
from typing import AsyncGenerator, Awaitable, Callable, Optional, Union

import httpx

from ...exceptions import ConfigurationError

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Union[str, Awaitable[str]]]


class BearerTokenAuth(httpx.Auth):
    """Attach ``Authorization: Bearer <token>`` to each request.

    :param token: Fixed access token
    :type token: Optional[str]
    :param token_provider: Sync or async callable returning the current token
    :type token_provider: Optional[TokenProvider]
    :raises ConfigurationError: If neither or both sources are given
    """

    def __init__(
        self,
        token: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
    ):
        if (token is None) == (token_provider is None):
            raise ConfigurationError(
                "Provide exactly one of token or token_provider",
                setting="access_token",
            )
        self._token = token
        self._token_provider = token_provider

    async def _resolve_token(self) -> str:
        if self._token is not None:
            return self._token
        value = self._token_provider()
        if inspect.isawaitable(value):
            value = await value
        if not value:
            raise ConfigurationError(
                "Token provider returned an empty token", setting="access_token"
            )
        return value

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        token = await self._resolve_token()
        request.headers["Authorization"] = f"Bearer {token}"
        logger.debug("Attached bearer credential to %s", request.url.path)
        yield request
