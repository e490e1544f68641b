"""Ad Exchange Seller service entry point.

:class:`AdExchangeSellerService` holds what every call needs: the base
URL, the pooled HTTP client, the credential and the per-call timeout.
Operations are reached through its resource groups::

    async with AdExchangeSellerService(token=token) as service:
        clients = await service.adclients.list()
        report = await service.reports.generate("today-7d", "today")

The service holds no per-call state, so one instance may serve any
number of concurrent calls.
"""

import logging
from typing import Optional

import httpx

from .. import __version__
from ..config import DEFAULT_BASE_URL, Settings
from ..exceptions import ConfigurationError
from ..utils.http import BearerTokenAuth, TokenProvider, get_http_client
from .resources import (
    AdClientsResource,
    AdUnitsResource,
    CustomChannelsResource,
    ReportsResource,
    UrlChannelsResource,
)

logger = logging.getLogger(__name__)

LIBRARY_USER_AGENT = f"adexchange-seller-python/{__version__}"


class AdExchangeSellerService:
    """Client for the Ad Exchange Seller API, version 1.

    :param base_url: API endpoint base URL; a trailing ``/`` is added
    :type base_url: str
    :param client: Injected HTTP client; the pooled client is used if omitted
    :type client: Optional[httpx.AsyncClient]
    :param auth: Credential attached to every request
    :type auth: Optional[httpx.Auth]
    :param token: Fixed bearer token, shorthand for ``BearerTokenAuth(token)``
    :type token: Optional[str]
    :param token_provider: Callable returning the current bearer token
    :type token_provider: Optional[TokenProvider]
    :param user_agent: Fragment appended to the library User-Agent token
    :type user_agent: Optional[str]
    :param timeout: Per-call deadline in seconds, None for no deadline
    :type timeout: Optional[float]
    :raises ConfigurationError: If more than one credential source is given
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: Optional[httpx.AsyncClient] = None,
        auth: Optional[httpx.Auth] = None,
        token: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = 30.0,
    ):
        sources = [s for s in (auth, token, token_provider) if s is not None]
        if len(sources) > 1:
            raise ConfigurationError(
                "Provide at most one of auth, token or token_provider",
                setting="access_token",
            )
        if auth is None and (token is not None or token_provider is not None):
            auth = BearerTokenAuth(token=token, token_provider=token_provider)

        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.auth = auth
        self.timeout = timeout
        self.user_agent = (
            f"{LIBRARY_USER_AGENT} {user_agent}" if user_agent else LIBRARY_USER_AGENT
        )
        self._client = client

        self.adclients = AdClientsResource(self)
        self.adunits = AdUnitsResource(self)
        self.customchannels = CustomChannelsResource(self)
        self.reports = ReportsResource(self)
        self.urlchannels = UrlChannelsResource(self)

        if auth is None:
            logger.warning("No credential configured; requests are sent unauthenticated")

    @classmethod
    def from_settings(
        cls, settings: Settings, client: Optional[httpx.AsyncClient] = None
    ) -> "AdExchangeSellerService":
        """Build a service from loaded settings.

        :param settings: Loaded settings
        :type settings: Settings
        :param client: Optional injected HTTP client
        :type client: Optional[httpx.AsyncClient]
        :return: Configured service
        :rtype: AdExchangeSellerService
        """
        token = (
            settings.access_token.get_secret_value() if settings.access_token else None
        )
        return cls(
            base_url=settings.base_url,
            client=client,
            token=token or None,
            user_agent=settings.user_agent,
            timeout=settings.timeout,
        )

    async def get_client(self) -> httpx.AsyncClient:
        """Return the injected client, or the shared pooled client."""
        if self._client is not None:
            return self._client
        return await get_http_client()

    async def aclose(self) -> None:
        """Close an injected client.

        The shared pool is left open; it is closed by
        ``http_client_manager.close_all()`` at shutdown.
        """
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "AdExchangeSellerService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
