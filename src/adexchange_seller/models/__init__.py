"""Models package for the Ad Exchange Seller client.

Re-exports the response models, report models and option structs so
call sites can import from ``adexchange_seller.models`` directly.
"""

from .base_models import (
    BaseAPIResponse,
    ErrorItem,
    ErrorPayload,
    ResourceCollection,
    ResponseMetadata,
)
from .options import (
    AdUnitListOptions,
    GetOptions,
    ListOptions,
    ReportOptions,
    SavedReportListOptions,
    SavedReportOptions,
)
from .reports import Report, ReportHeader, ReportHeaderType
from .resources import (
    AdClient,
    AdClients,
    AdUnit,
    AdUnits,
    AdUnitStatus,
    CustomChannel,
    CustomChannels,
    CustomChannelTargetingInfo,
    SavedReport,
    SavedReports,
    UrlChannel,
    UrlChannels,
)

__all__ = [
    # Base
    "BaseAPIResponse",
    "ResponseMetadata",
    "ResourceCollection",
    "ErrorItem",
    "ErrorPayload",
    # Resources
    "AdClient",
    "AdClients",
    "AdUnit",
    "AdUnits",
    "AdUnitStatus",
    "CustomChannel",
    "CustomChannels",
    "CustomChannelTargetingInfo",
    "UrlChannel",
    "UrlChannels",
    "SavedReport",
    "SavedReports",
    # Reports
    "Report",
    "ReportHeader",
    "ReportHeaderType",
    # Options
    "GetOptions",
    "ListOptions",
    "AdUnitListOptions",
    "SavedReportListOptions",
    "SavedReportOptions",
    "ReportOptions",
]
