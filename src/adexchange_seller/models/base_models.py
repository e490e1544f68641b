"""Shared Pydantic models for the Ad Exchange Seller client.

This module contains the building blocks every decoded response uses:

- Response metadata (status code and headers) attached after decode
- The base response model with presence-aware encoding
- The generic paged resource collection
- The structured error payload returned with non-2xx responses
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class ResponseMetadata(BaseModel):
    """HTTP status and headers of the response a result was decoded from.

    :param status_code: HTTP status code
    :type status_code: int
    :param headers: Response headers
    :type headers: Dict[str, str]
    """

    model_config = ConfigDict(frozen=True)

    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        """Look up a header case-insensitively.

        :param name: Header name
        :type name: str
        :return: Header value or None
        :rtype: Optional[str]
        """
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


class BaseAPIResponse(BaseModel):
    """Base model for all API responses.

    Results are immutable snapshots. The :attr:`server_response` field
    holds the response metadata and is never serialized.

    Encoding is presence-aware: :meth:`to_api_dict` emits every field
    that was explicitly set, on construction or on decode, even when its
    value is empty, false or zero. Fields never set are omitted.
    """

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields from API
        populate_by_name=True,  # Allow field population by alias
        frozen=True,
    )

    server_response: Optional[ResponseMetadata] = Field(default=None, exclude=True)

    def with_metadata(self, metadata: ResponseMetadata) -> "BaseAPIResponse":
        """Return a copy carrying the given response metadata.

        :param metadata: Status and headers of the source response
        :type metadata: ResponseMetadata
        :return: Copy of this model with metadata attached
        """
        return self.model_copy(update={"server_response": metadata})

    def to_api_dict(self) -> Dict[str, Any]:
        """Encode the model the way the API spells it.

        :return: Dictionary keyed by wire names, set fields only
        :rtype: Dict[str, Any]
        """
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


ItemT = TypeVar("ItemT", bound=BaseModel)


class ResourceCollection(BaseAPIResponse, Generic[ItemT]):
    """One page of a listed resource.

    :param etag: Cache-validation tag of this page
    :type etag: Optional[str]
    :param items: Resources on this page, in server order
    :type items: List[ItemT]
    :param kind: Kind of list this is
    :type kind: Optional[str]
    :param next_page_token: Continuation token, absent on the last page
    :type next_page_token: Optional[str]
    """

    etag: Optional[str] = None
    items: List[ItemT] = Field(default_factory=list)
    kind: Optional[str] = None
    next_page_token: Optional[str] = Field(None, alias="nextPageToken")

    @property
    def has_next_page(self) -> bool:
        """Return whether the server handed out a continuation token.

        A page may be empty and still carry a token.
        """
        return bool(self.next_page_token)


class ErrorItem(BaseModel):
    """One entry of the ``errors`` list in an API error payload."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    domain: Optional[str] = None
    reason: Optional[str] = None
    message: Optional[str] = None
    location: Optional[str] = None
    location_type: Optional[str] = Field(None, alias="locationType")


class ErrorPayload(BaseModel):
    """The ``error`` object carried by non-2xx response bodies.

    :param code: HTTP status code repeated by the server
    :type code: Optional[int]
    :param message: Server error message
    :type message: Optional[str]
    :param errors: Per-field error details
    :type errors: List[ErrorItem]
    """

    model_config = ConfigDict(extra="allow")

    code: Optional[int] = None
    message: Optional[str] = None
    errors: List[ErrorItem] = Field(default_factory=list)
