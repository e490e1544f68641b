"""Resource groups of the Ad Exchange Seller API.

Each group maps its operations to a path template, an options type and
a result model, and runs them through :class:`~.call.ApiCall`. List
operations also expose ``pages`` and ``iter_items`` helpers that follow
continuation tokens.
"""

import re
from functools import partial
from typing import TYPE_CHECKING, AsyncIterator, Optional, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from ..models.options import (
    AdUnitListOptions,
    GetOptions,
    ListOptions,
    ReportOptions,
    SavedReportListOptions,
    SavedReportOptions,
)
from ..models.reports import Report
from ..models.resources import (
    AdClient,
    AdClients,
    AdUnit,
    AdUnits,
    CustomChannel,
    CustomChannels,
    SavedReport,
    SavedReports,
    UrlChannel,
    UrlChannels,
)
from .call import ApiCall
from .media import MediaDownload
from .pagination import iter_items, iter_pages

if TYPE_CHECKING:
    from .service import AdExchangeSellerService

OptionsT = TypeVar("OptionsT", bound=GetOptions)

# Literal YYYY-MM-DD, or today/startOfMonth/startOfYear plus up to three offsets
DATE_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}|(today|startOfMonth|startOfYear)(([\-\+]\d+[dwmy]){0,3}?)"
)


def _resolve_options(
    options: Optional[GetOptions], default: Type[OptionsT], accepted: Type[GetOptions]
) -> OptionsT:
    if options is None:
        return default()
    if not isinstance(options, accepted):
        raise ValidationError(
            f"expected {accepted.__name__}, got {type(options).__name__}",
            field="options",
        )
    if isinstance(options, default):
        return options
    # Re-validate so the resource's own ceilings and fields apply
    try:
        return default.model_validate(options.model_dump(exclude_unset=True))
    except PydanticValidationError as e:
        raise ValidationError(
            f"options not valid for {default.__name__}: {e.error_count()} error(s)",
            field="options",
        ) from e


def _check_date(name: str, value: str) -> str:
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise ValidationError(
            f"{name} must be YYYY-MM-DD or a relative date such as today-7d",
            field=name,
            value=value,
        )
    return value


class _Resource:
    def __init__(self, service: "AdExchangeSellerService"):
        self._service = service

    def _call(self, operation: str, path: str, result_type, options, **kwargs) -> ApiCall:
        return ApiCall(
            self._service,
            operation=operation,
            path=path,
            result_type=result_type,
            options=options,
            **kwargs,
        )


class AdClientsResource(_Resource):
    """Ad clients of the Ad Exchange account."""

    async def list(self, options: Optional[ListOptions] = None) -> AdClients:
        """List one page of ad clients.

        :param options: Paging, field mask and conditional-fetch modifiers
        :return: Page of ad clients
        """
        options = _resolve_options(options, ListOptions, ListOptions)
        return await self._call("adclients.list", "adclients", AdClients, options).execute()

    def pages(
        self, options: Optional[ListOptions] = None, max_pages: Optional[int] = None
    ) -> AsyncIterator[AdClients]:
        return iter_pages(self.list, options or ListOptions(), max_pages=max_pages)

    def iter_items(
        self, options: Optional[ListOptions] = None
    ) -> AsyncIterator[AdClient]:
        return iter_items(self.list, options or ListOptions())


class AdUnitCustomChannelsResource(_Resource):
    """Custom channels an ad unit belongs to."""

    async def list(
        self, ad_client_id: str, ad_unit_id: str, options: Optional[ListOptions] = None
    ) -> CustomChannels:
        """List one page of custom channels containing an ad unit.

        :param ad_client_id: Ad client that owns the ad unit
        :param ad_unit_id: Ad unit to list custom channels for
        :param options: Paging, field mask and conditional-fetch modifiers
        """
        options = _resolve_options(options, ListOptions, ListOptions)
        return await self._call(
            "adunits.customchannels.list",
            "adclients/{adClientId}/adunits/{adUnitId}/customchannels",
            CustomChannels,
            options,
            path_params={"adClientId": ad_client_id, "adUnitId": ad_unit_id},
        ).execute()

    def pages(
        self,
        ad_client_id: str,
        ad_unit_id: str,
        options: Optional[ListOptions] = None,
        max_pages: Optional[int] = None,
    ) -> AsyncIterator[CustomChannels]:
        fetch = partial(self._fetch, ad_client_id, ad_unit_id)
        return iter_pages(fetch, options or ListOptions(), max_pages=max_pages)

    def iter_items(
        self, ad_client_id: str, ad_unit_id: str, options: Optional[ListOptions] = None
    ) -> AsyncIterator[CustomChannel]:
        fetch = partial(self._fetch, ad_client_id, ad_unit_id)
        return iter_items(fetch, options or ListOptions())

    async def _fetch(self, ad_client_id: str, ad_unit_id: str, options: ListOptions):
        return await self.list(ad_client_id, ad_unit_id, options)


class AdUnitsResource(_Resource):
    """Ad units within an ad client."""

    def __init__(self, service: "AdExchangeSellerService"):
        super().__init__(service)
        self.customchannels = AdUnitCustomChannelsResource(service)

    async def get(
        self, ad_client_id: str, ad_unit_id: str, options: Optional[GetOptions] = None
    ) -> AdUnit:
        """Get one ad unit.

        :param ad_client_id: Ad client that owns the ad unit
        :param ad_unit_id: Ad unit to fetch
        :param options: Field mask and conditional-fetch modifiers
        """
        options = _resolve_options(options, GetOptions, GetOptions)
        return await self._call(
            "adunits.get",
            "adclients/{adClientId}/adunits/{adUnitId}",
            AdUnit,
            options,
            path_params={"adClientId": ad_client_id, "adUnitId": ad_unit_id},
        ).execute()

    async def list(
        self, ad_client_id: str, options: Optional[ListOptions] = None
    ) -> AdUnits:
        """List one page of ad units of an ad client.

        :param ad_client_id: Ad client to list ad units for
        :param options: Paging, ``include_inactive``, field mask and
            conditional-fetch modifiers
        """
        options = _resolve_options(options, AdUnitListOptions, ListOptions)
        return await self._call(
            "adunits.list",
            "adclients/{adClientId}/adunits",
            AdUnits,
            options,
            path_params={"adClientId": ad_client_id},
        ).execute()

    def pages(
        self,
        ad_client_id: str,
        options: Optional[ListOptions] = None,
        max_pages: Optional[int] = None,
    ) -> AsyncIterator[AdUnits]:
        fetch = partial(self.list, ad_client_id)
        return iter_pages(fetch, options or AdUnitListOptions(), max_pages=max_pages)

    def iter_items(
        self, ad_client_id: str, options: Optional[ListOptions] = None
    ) -> AsyncIterator[AdUnit]:
        return iter_items(partial(self.list, ad_client_id), options or AdUnitListOptions())


class CustomChannelAdUnitsResource(_Resource):
    """Ad units belonging to a custom channel."""

    async def list(
        self,
        ad_client_id: str,
        custom_channel_id: str,
        options: Optional[ListOptions] = None,
    ) -> AdUnits:
        """List one page of ad units in a custom channel.

        :param ad_client_id: Ad client that owns the custom channel
        :param custom_channel_id: Custom channel to list ad units for
        :param options: Paging, ``include_inactive``, field mask and
            conditional-fetch modifiers
        """
        options = _resolve_options(options, AdUnitListOptions, ListOptions)
        return await self._call(
            "customchannels.adunits.list",
            "adclients/{adClientId}/customchannels/{customChannelId}/adunits",
            AdUnits,
            options,
            path_params={
                "adClientId": ad_client_id,
                "customChannelId": custom_channel_id,
            },
        ).execute()

    def pages(
        self,
        ad_client_id: str,
        custom_channel_id: str,
        options: Optional[ListOptions] = None,
        max_pages: Optional[int] = None,
    ) -> AsyncIterator[AdUnits]:
        fetch = partial(self._fetch, ad_client_id, custom_channel_id)
        return iter_pages(fetch, options or AdUnitListOptions(), max_pages=max_pages)

    def iter_items(
        self,
        ad_client_id: str,
        custom_channel_id: str,
        options: Optional[ListOptions] = None,
    ) -> AsyncIterator[AdUnit]:
        fetch = partial(self._fetch, ad_client_id, custom_channel_id)
        return iter_items(fetch, options or AdUnitListOptions())

    async def _fetch(self, ad_client_id: str, custom_channel_id: str, options: ListOptions):
        return await self.list(ad_client_id, custom_channel_id, options)


class CustomChannelsResource(_Resource):
    """Custom channels within an ad client."""

    def __init__(self, service: "AdExchangeSellerService"):
        super().__init__(service)
        self.adunits = CustomChannelAdUnitsResource(service)

    async def get(
        self,
        ad_client_id: str,
        custom_channel_id: str,
        options: Optional[GetOptions] = None,
    ) -> CustomChannel:
        """Get one custom channel.

        :param ad_client_id: Ad client that owns the custom channel
        :param custom_channel_id: Custom channel to fetch
        :param options: Field mask and conditional-fetch modifiers
        """
        options = _resolve_options(options, GetOptions, GetOptions)
        return await self._call(
            "customchannels.get",
            "adclients/{adClientId}/customchannels/{customChannelId}",
            CustomChannel,
            options,
            path_params={
                "adClientId": ad_client_id,
                "customChannelId": custom_channel_id,
            },
        ).execute()

    async def list(
        self, ad_client_id: str, options: Optional[ListOptions] = None
    ) -> CustomChannels:
        """List one page of custom channels of an ad client."""
        options = _resolve_options(options, ListOptions, ListOptions)
        return await self._call(
            "customchannels.list",
            "adclients/{adClientId}/customchannels",
            CustomChannels,
            options,
            path_params={"adClientId": ad_client_id},
        ).execute()

    def pages(
        self,
        ad_client_id: str,
        options: Optional[ListOptions] = None,
        max_pages: Optional[int] = None,
    ) -> AsyncIterator[CustomChannels]:
        fetch = partial(self.list, ad_client_id)
        return iter_pages(fetch, options or ListOptions(), max_pages=max_pages)

    def iter_items(
        self, ad_client_id: str, options: Optional[ListOptions] = None
    ) -> AsyncIterator[CustomChannel]:
        return iter_items(partial(self.list, ad_client_id), options or ListOptions())


class UrlChannelsResource(_Resource):
    """URL channels within an ad client."""

    async def list(
        self, ad_client_id: str, options: Optional[ListOptions] = None
    ) -> UrlChannels:
        """List one page of URL channels of an ad client."""
        options = _resolve_options(options, ListOptions, ListOptions)
        return await self._call(
            "urlchannels.list",
            "adclients/{adClientId}/urlchannels",
            UrlChannels,
            options,
            path_params={"adClientId": ad_client_id},
        ).execute()

    def pages(
        self,
        ad_client_id: str,
        options: Optional[ListOptions] = None,
        max_pages: Optional[int] = None,
    ) -> AsyncIterator[UrlChannels]:
        fetch = partial(self.list, ad_client_id)
        return iter_pages(fetch, options or ListOptions(), max_pages=max_pages)

    def iter_items(
        self, ad_client_id: str, options: Optional[ListOptions] = None
    ) -> AsyncIterator[UrlChannel]:
        return iter_items(partial(self.list, ad_client_id), options or ListOptions())


class SavedReportsResource(_Resource):
    """Saved report definitions and their generation."""

    async def generate(
        self, saved_report_id: str, options: Optional[SavedReportOptions] = None
    ) -> Report:
        """Generate a report from a saved report definition.

        :param saved_report_id: Saved report to run
        :param options: Locale, row window, field mask and conditional-fetch
            modifiers
        """
        options = _resolve_options(options, SavedReportOptions, SavedReportOptions)
        return await self._call(
            "reports.saved.generate",
            "reports/{savedReportId}",
            Report,
            options,
            path_params={"savedReportId": saved_report_id},
        ).execute()

    async def list(self, options: Optional[ListOptions] = None) -> SavedReports:
        """List one page of saved reports."""
        options = _resolve_options(options, SavedReportListOptions, ListOptions)
        return await self._call(
            "reports.saved.list", "reports/saved", SavedReports, options
        ).execute()

    def pages(
        self, options: Optional[ListOptions] = None, max_pages: Optional[int] = None
    ) -> AsyncIterator[SavedReports]:
        return iter_pages(
            self.list, options or SavedReportListOptions(), max_pages=max_pages
        )

    def iter_items(
        self, options: Optional[ListOptions] = None
    ) -> AsyncIterator[SavedReport]:
        return iter_items(self.list, options or SavedReportListOptions())


class ReportsResource(_Resource):
    """Ad-hoc report generation."""

    def __init__(self, service: "AdExchangeSellerService"):
        super().__init__(service)
        self.saved = SavedReportsResource(service)

    def _generate_call(
        self, operation: str, start_date: str, end_date: str, options: Optional[ReportOptions]
    ) -> ApiCall:
        _check_date("start_date", start_date)
        _check_date("end_date", end_date)
        options = _resolve_options(options, ReportOptions, ReportOptions)
        return self._call(
            operation,
            "reports",
            Report,
            options,
            required_query=[("endDate", end_date), ("startDate", start_date)],
        )

    async def generate(
        self, start_date: str, end_date: str, options: Optional[ReportOptions] = None
    ) -> Report:
        """Generate a report as a decoded table.

        :param start_date: Inclusive start, ``YYYY-MM-DD`` or e.g. ``today-7d``
        :param end_date: Inclusive end, same format as ``start_date``
        :param options: Dimensions, metrics, filters, sort keys, row window,
            locale, field mask and conditional-fetch modifiers
        :return: Decoded report
        :raises ValidationError: If a date is malformed
        """
        call = self._generate_call("reports.generate", start_date, end_date, options)
        return await call.execute()

    async def download(
        self, start_date: str, end_date: str, options: Optional[ReportOptions] = None
    ) -> MediaDownload:
        """Generate a report and return its raw media stream (e.g. CSV).

        The caller owns the returned stream and must consume and close it.

        :param start_date: Inclusive start, ``YYYY-MM-DD`` or e.g. ``today-7d``
        :param end_date: Inclusive end, same format as ``start_date``
        :param options: Same modifiers as :meth:`generate`
        :return: Open media stream
        """
        call = self._generate_call("reports.download", start_date, end_date, options)
        return await call.download()
