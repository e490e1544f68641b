"""Pydantic models for generated reports.

A report is a table: ordered header descriptors, ordered data rows and
optional averages and totals rows. Every cell is a string; metric cells
hold textually encoded numbers. When headers are present, every row
must have one cell per header.
"""

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import Field, field_serializer, model_validator

from .base_models import BaseAPIResponse


class ReportHeaderType(str, Enum):
    """Semantic type of a report column."""

    DIMENSION = "DIMENSION"
    METRIC_TALLY = "METRIC_TALLY"
    METRIC_RATIO = "METRIC_RATIO"
    METRIC_CURRENCY = "METRIC_CURRENCY"


class ReportHeader(BaseAPIResponse):
    """Header descriptor of one report column.

    :param name: Name of the dimension or metric
    :type name: Optional[str]
    :param type: Column type
    :type type: Optional[Union[ReportHeaderType, str]]
    :param currency: Currency code, only for METRIC_CURRENCY columns
    :type currency: Optional[str]
    """

    name: Optional[str] = None
    type: Optional[Union[ReportHeaderType, str]] = Field(
        None, union_mode="left_to_right"
    )
    currency: Optional[str] = None

    @property
    def is_metric(self) -> bool:
        return self.type is not None and self.type != ReportHeaderType.DIMENSION


class Report(BaseAPIResponse):
    """A generated Ad Exchange report.

    Headers list one entry per requested dimension followed by one per
    requested metric. ``averages`` and ``totals`` have the same width as
    any row; cells under dimension columns are empty.

    :param kind: Kind of resource, ``adexchangeseller#report``
    :type kind: Optional[str]
    :param headers: Column descriptors
    :type headers: List[ReportHeader]
    :param rows: Data rows
    :type rows: List[List[str]]
    :param averages: Column averages row
    :type averages: Optional[List[str]]
    :param totals: Column totals row
    :type totals: Optional[List[str]]
    :param total_matched_rows: Rows matched server-side, may exceed ``len(rows)``
    :type total_matched_rows: Optional[int]
    :param warnings: Warnings raised while generating the report
    :type warnings: List[str]
    """

    kind: Optional[str] = None
    headers: List[ReportHeader] = Field(default_factory=list)
    rows: List[List[str]] = Field(default_factory=list)
    averages: Optional[List[str]] = None
    totals: Optional[List[str]] = None
    total_matched_rows: Optional[int] = Field(None, alias="totalMatchedRows")
    warnings: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_row_widths(self) -> "Report":
        """Reject rows whose cell count differs from the header count."""
        if not self.headers:
            return self
        width = len(self.headers)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"row {index} has {len(row)} cells, expected {width}"
                )
        for label in ("averages", "totals"):
            summary = getattr(self, label)
            if summary is not None and len(summary) != width:
                raise ValueError(
                    f"{label} row has {len(summary)} cells, expected {width}"
                )
        return self

    @field_serializer("total_matched_rows")
    def serialize_total_matched_rows(self, v: Optional[int]) -> Optional[str]:
        # int64 travels as a JSON string
        return None if v is None else str(v)

    @property
    def column_names(self) -> List[str]:
        return [header.name or "" for header in self.headers]

    def as_dicts(self) -> List[Dict[str, str]]:
        """Return the data rows keyed by column name.

        :return: One dictionary per row
        :rtype: List[Dict[str, str]]
        """
        names = self.column_names
        return [dict(zip(names, row)) for row in self.rows]
