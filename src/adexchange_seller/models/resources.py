"""Pydantic models for listed Ad Exchange Seller resources.

Each resource is a flat record of string, boolean and enumerated
fields. Identifiers are opaque and server-assigned; ad unit and channel
IDs are unique only within their ad client. Every field is optional on
decode so that partial responses produced by a field mask still parse.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import Field

from .base_models import BaseAPIResponse, ResourceCollection


class AdUnitStatus(str, Enum):
    """Activity status of an ad unit.

    NEW units were created within the last seven days and have no
    activity yet. ACTIVE and INACTIVE reflect whether there was any
    activity in the last seven days.
    """

    NEW = "NEW"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AdClient(BaseAPIResponse):
    """An ad client of the Ad Exchange account.

    :param arc_opt_in: Whether this ad client is opted in to ARC
    :type arc_opt_in: Optional[bool]
    :param id: Unique identifier of this ad client
    :type id: Optional[str]
    :param kind: Kind of resource, ``adexchangeseller#adClient``
    :type kind: Optional[str]
    :param product_code: Product code, matches the PRODUCT_CODE dimension
    :type product_code: Optional[str]
    :param supports_reporting: Whether this ad client supports reporting
    :type supports_reporting: Optional[bool]
    """

    arc_opt_in: Optional[bool] = Field(None, alias="arcOptIn")
    id: Optional[str] = None
    kind: Optional[str] = None
    product_code: Optional[str] = Field(None, alias="productCode")
    supports_reporting: Optional[bool] = Field(None, alias="supportsReporting")


class AdUnit(BaseAPIResponse):
    """An ad unit within an ad client.

    :param code: Identity code, not necessarily unique across ad clients
    :type code: Optional[str]
    :param id: Opaque unique identifier
    :type id: Optional[str]
    :param kind: Kind of resource, ``adexchangeseller#adUnit``
    :type kind: Optional[str]
    :param name: Name of this ad unit
    :type name: Optional[str]
    :param status: Activity status; unknown values are kept verbatim
    :type status: Optional[Union[AdUnitStatus, str]]
    """

    code: Optional[str] = None
    id: Optional[str] = None
    kind: Optional[str] = None
    name: Optional[str] = None
    status: Optional[Union[AdUnitStatus, str]] = Field(
        None, union_mode="left_to_right"
    )


class CustomChannelTargetingInfo(BaseAPIResponse):
    """Targeting information of an activated custom channel.

    :param ads_appear_on: Name used to describe this channel externally
    :param description: External description of the channel
    :param location: Where ads appear, e.g. TOP_LEFT or MULTIPLE_LOCATIONS
    :param site_language: Language of the sites ads are displayed on
    """

    ads_appear_on: Optional[str] = Field(None, alias="adsAppearOn")
    description: Optional[str] = None
    location: Optional[str] = None
    site_language: Optional[str] = Field(None, alias="siteLanguage")


class CustomChannel(BaseAPIResponse):
    """A custom channel within an ad client.

    :param code: Code of this channel, not necessarily unique across ad clients
    :param id: Opaque unique identifier
    :param kind: Kind of resource, ``adexchangeseller#customChannel``
    :param name: Name of this custom channel
    :param targeting_info: Targeting information, if activated
    """

    code: Optional[str] = None
    id: Optional[str] = None
    kind: Optional[str] = None
    name: Optional[str] = None
    targeting_info: Optional[CustomChannelTargetingInfo] = Field(
        None, alias="targetingInfo"
    )


class UrlChannel(BaseAPIResponse):
    """A URL channel within an ad client.

    :param url_pattern: URL pattern without scheme, e.g. ``www.example.com/home``
    """

    id: Optional[str] = None
    kind: Optional[str] = None
    url_pattern: Optional[str] = Field(None, alias="urlPattern")


class SavedReport(BaseAPIResponse):
    """A report definition saved in the Ad Exchange account."""

    id: Optional[str] = None
    kind: Optional[str] = None
    name: Optional[str] = None


class AdClients(ResourceCollection[AdClient]):
    """A page of ad clients."""


class AdUnits(ResourceCollection[AdUnit]):
    """A page of ad units."""


class CustomChannels(ResourceCollection[CustomChannel]):
    """A page of custom channels."""


class UrlChannels(ResourceCollection[UrlChannel]):
    """A page of URL channels."""


class SavedReports(ResourceCollection[SavedReport]):
    """A page of saved reports."""
