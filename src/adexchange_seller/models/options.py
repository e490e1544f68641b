"""Typed option structs for Ad Exchange Seller calls.

Each operation takes one options model. Every modifier is optional and
``None`` means "not sent": :meth:`GetOptions.to_query` only emits the
modifiers that hold a value. Invalid values are rejected when the
options are constructed, before any request exists.

Page size limits are clamped to the ceiling of the resource rather than
rejected.
"""

import logging
import re
from typing import ClassVar, FrozenSet, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"[a-zA-Z_]+")
FILTER_PATTERN = re.compile(r"[a-zA-Z_]+(==|=@).+")
SORT_PATTERN = re.compile(r"(\+|-)?[a-zA-Z_]+")

QueryParams = List[Tuple[str, str]]


def _clamp(value: Optional[int], ceiling: int, name: str) -> Optional[int]:
    if value is not None and value > ceiling:
        logger.debug("Clamping %s=%d to %d", name, value, ceiling)
        return ceiling
    return value


def _check_each(
    values: Optional[List[str]], pattern: "re.Pattern[str]", name: str
) -> Optional[List[str]]:
    if values is None:
        return None
    for value in values:
        if not pattern.fullmatch(value):
            raise ValueError(f"invalid {name} {value!r}")
    return values


def _format_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class GetOptions(BaseModel):
    """Modifiers accepted by every call.

    :param field_mask: Field mask restricting which response fields the
        server serializes; a list of names or one pre-joined string
    :type field_mask: Optional[str]
    :param if_none_match: Cache-validation tag; a matching tag makes the
        call fail with :class:`~adexchange_seller.exceptions.NotModifiedError`
    :type if_none_match: Optional[str]
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    # Sent as request headers, never as query parameters
    HEADER_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"if_none_match"})

    field_mask: Optional[str] = Field(None, alias="fields")
    if_none_match: Optional[str] = Field(None, alias="ifNoneMatch")

    @field_validator("field_mask", mode="before")
    @classmethod
    def combine_fields(cls, v: Union[None, str, Sequence[str]]) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        return ",".join(v)

    def to_query(self) -> QueryParams:
        """Serialize the set modifiers as query parameters.

        Repeatable modifiers produce one pair per value, in order.

        :return: Ordered ``(key, value)`` pairs
        :rtype: QueryParams
        """
        params: QueryParams = []
        for name, field in type(self).model_fields.items():
            if name in self.HEADER_FIELDS:
                continue
            value = getattr(self, name)
            if value is None:
                continue
            key = field.alias or name
            if isinstance(value, list):
                params.extend((key, _format_value(item)) for item in value)
            else:
                params.append((key, _format_value(value)))
        return params


class ListOptions(GetOptions):
    """Modifiers of a paged list call.

    :param max_results: Maximum items per page, clamped to the ceiling
    :type max_results: Optional[int]
    :param page_token: Continuation token from a previous page
    :type page_token: Optional[str]
    """

    MAX_RESULTS_CEILING: ClassVar[int] = 10000

    max_results: Optional[int] = Field(None, alias="maxResults", ge=0)
    page_token: Optional[str] = Field(None, alias="pageToken")

    @field_validator("max_results")
    @classmethod
    def clamp_max_results(cls, v: Optional[int]) -> Optional[int]:
        return _clamp(v, cls.MAX_RESULTS_CEILING, "maxResults")

    def with_page_token(self, page_token: Optional[str]) -> "ListOptions":
        """Return a copy of these options pointing at another page."""
        return self.model_copy(update={"page_token": page_token})


class AdUnitListOptions(ListOptions):
    """Modifiers of the ad unit list calls.

    :param include_inactive: Whether to include inactive ad units
    :type include_inactive: Optional[bool]
    """

    include_inactive: Optional[bool] = Field(None, alias="includeInactive")


class SavedReportListOptions(ListOptions):
    """Modifiers of the saved report list call."""

    MAX_RESULTS_CEILING: ClassVar[int] = 100


class SavedReportOptions(GetOptions):
    """Modifiers of saved report generation.

    :param locale: Locale for translating report output, ``en_US`` server default
    :type locale: Optional[str]
    :param max_results: Maximum rows of report data to return
    :type max_results: Optional[int]
    :param start_index: Index of the first row of report data to return
    :type start_index: Optional[int]
    """

    MAX_RESULTS_CEILING: ClassVar[int] = 50000
    START_INDEX_CEILING: ClassVar[int] = 5000

    locale: Optional[str] = Field(None, alias="locale")
    max_results: Optional[int] = Field(None, alias="maxResults", ge=0)
    start_index: Optional[int] = Field(None, alias="startIndex", ge=0)

    @field_validator("locale")
    @classmethod
    def check_locale(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not NAME_PATTERN.fullmatch(v):
            raise ValueError(f"invalid locale {v!r}")
        return v

    @field_validator("max_results")
    @classmethod
    def clamp_max_results(cls, v: Optional[int]) -> Optional[int]:
        return _clamp(v, cls.MAX_RESULTS_CEILING, "maxResults")

    @field_validator("start_index")
    @classmethod
    def clamp_start_index(cls, v: Optional[int]) -> Optional[int]:
        return _clamp(v, cls.START_INDEX_CEILING, "startIndex")


class ReportOptions(SavedReportOptions):
    """Modifiers of ad-hoc report generation.

    :param dimensions: Dimensions to base the report on
    :type dimensions: Optional[List[str]]
    :param metrics: Numeric columns to include
    :type metrics: Optional[List[str]]
    :param filters: Filters such as ``AD_UNIT_ID==123`` or ``DOMAIN_NAME=@example``
    :type filters: Optional[List[str]]
    :param sort: Columns to sort on, optionally prefixed with ``+`` or ``-``
    :type sort: Optional[List[str]]
    """

    dimensions: Optional[List[str]] = Field(None, alias="dimension")
    metrics: Optional[List[str]] = Field(None, alias="metric")
    filters: Optional[List[str]] = Field(None, alias="filter")
    sort: Optional[List[str]] = Field(None, alias="sort")

    @field_validator("dimensions", "metrics")
    @classmethod
    def check_names(cls, v: Optional[List[str]], info) -> Optional[List[str]]:
        return _check_each(v, NAME_PATTERN, info.field_name.rstrip("s"))

    @field_validator("filters")
    @classmethod
    def check_filters(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _check_each(v, FILTER_PATTERN, "filter")

    @field_validator("sort")
    @classmethod
    def check_sort(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _check_each(v, SORT_PATTERN, "sort key")
