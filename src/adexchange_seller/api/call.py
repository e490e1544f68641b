"""Request building, sending and response interpretation for one call.

Every operation of the client goes through :class:`ApiCall`:

1. The request builder resolves the path template against the base URL,
   escaping each identifier, and appends ``alt``, the required query
   parameters and every modifier that is set. Unset modifiers are
   never sent.
2. The request is sent with a streamed body.
3. The response is interpreted: 304 raises :class:`NotModifiedError`
   without reading the body, any other non-2xx status raises
   :class:`ApiError` with the decoded error payload, and a 2xx body is
   decoded into the expected model with the response metadata attached.
   Bodies that do not decode raise :class:`DecodeError`.

The response is closed on every path except a successful media
download, where ownership moves to the returned :class:`MediaDownload`.
"""

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Tuple, Type, TypeVar
from urllib.parse import quote, urljoin

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import (
    ApiError,
    DecodeError,
    NotModifiedError,
    TransportError,
    ValidationError,
)
from ..models.base_models import BaseAPIResponse, ErrorPayload, ResponseMetadata
from ..models.options import GetOptions
from ..utils.http import flatten_headers, read_body, send_request
from .media import MediaDownload

if TYPE_CHECKING:
    from .service import AdExchangeSellerService

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseAPIResponse)

_BODY_EXCERPT = 512


class ApiCall:
    """A single-use GET call against the Ad Exchange Seller API.

    :param service: Service supplying the client, credential and base URL
    :param operation: Dotted operation name, e.g. ``adunits.list``
    :param path: Path template relative to the base URL
    :param path_params: Values for the ``{placeholders}`` in ``path``
    :param required_query: Required query parameters, sent before modifiers
    :param options: Optional modifiers
    :param result_type: Model the JSON body is decoded into
    """

    def __init__(
        self,
        service: "AdExchangeSellerService",
        operation: str,
        path: str,
        result_type: Type[ResultT],
        options: GetOptions,
        path_params: Optional[Mapping[str, str]] = None,
        required_query: Optional[List[Tuple[str, str]]] = None,
    ):
        self._service = service
        self.operation = operation
        self.path = path
        self.result_type = result_type
        self.options = options
        self.path_params = dict(path_params or {})
        self.required_query = list(required_query or [])
        self._used = False

    def build_url(self) -> str:
        """Resolve the path template against the service base URL.

        :return: Absolute URL without query string
        :rtype: str
        :raises ValidationError: If a path identifier is empty
        """
        path = self.path
        for name, value in self.path_params.items():
            if not value:
                raise ValidationError(f"{name} must not be empty", field=name)
            path = path.replace("{" + name + "}", quote(str(value), safe=""))
        return urljoin(self._service.base_url, path)

    def build_params(self, alt: str) -> List[Tuple[str, str]]:
        """Assemble the query parameters for the given response format.

        :param alt: ``json`` for decoded results, ``media`` for raw downloads
        :type alt: str
        :return: Ordered ``(key, value)`` pairs
        :rtype: List[Tuple[str, str]]
        """
        return [("alt", alt), *self.required_query, *self.options.to_query()]

    def build_headers(self, alt: str) -> Dict[str, str]:
        headers = {"User-Agent": self._service.user_agent}
        if alt == "json":
            headers["Accept"] = "application/json"
        if self.options.if_none_match is not None:
            headers["If-None-Match"] = self.options.if_none_match
        return headers

    def _claim(self) -> None:
        if self._used:
            raise RuntimeError(f"{self.operation} call objects are single-use")
        self._used = True

    async def _send(self, alt: str) -> httpx.Response:
        client = await self._service.get_client()
        return await send_request(
            client,
            "GET",
            self.build_url(),
            params=self.build_params(alt),
            headers=self.build_headers(alt),
            auth=self._service.auth,
            timeout=self._service.timeout,
            operation=self.operation,
        )

    async def _with_deadline(self, coro):
        timeout = self._service.timeout
        if timeout is None:
            return await coro
        try:
            return await asyncio.wait_for(coro, timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"{self.operation} exceeded {timeout}s deadline",
                operation=self.operation,
                original_error=e,
            ) from e

    async def execute(self) -> ResultT:
        """Run the call and decode the JSON response.

        :return: Decoded result with response metadata attached
        :raises NotModifiedError: If the cache-validation tag matched
        :raises ApiError: On any other non-2xx status
        :raises DecodeError: If a 2xx body does not decode
        :raises TransportError: If no complete response was received
        """
        self._claim()
        return await self._with_deadline(self._execute())

    async def _execute(self) -> ResultT:
        response = await self._send("json")
        try:
            await self._check_status(response)
            body = await read_body(response, self.operation)
            return self._decode(response, body)
        finally:
            await response.aclose()

    async def download(self) -> MediaDownload:
        """Run the call in media mode and hand over the open stream.

        The caller must consume and close the returned download.

        :return: Open media stream with a 2xx status
        :raises NotModifiedError: If the cache-validation tag matched
        :raises ApiError: On any other non-2xx status
        :raises TransportError: If no response was received
        """
        self._claim()
        response = await self._with_deadline(self._send("media"))
        try:
            await self._check_status(response)
        except BaseException:
            await response.aclose()
            raise
        logger.debug("%s: handing media stream to caller", self.operation)
        return MediaDownload(response)

    async def _check_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status == 304:
            raise NotModifiedError(headers=flatten_headers(response.headers))
        if 200 <= status < 300:
            return
        body = await read_body(response, self.operation)
        raise self._api_error(response, body)

    def _api_error(self, response: httpx.Response, body: bytes) -> ApiError:
        text = body.decode("utf-8", errors="replace")
        payload: Optional[ErrorPayload] = None
        try:
            document = json.loads(text) if text else None
            if isinstance(document, dict) and isinstance(document.get("error"), dict):
                payload = ErrorPayload.model_validate(document["error"])
        except (ValueError, PydanticValidationError):
            payload = None

        status = response.status_code
        if payload is not None and payload.message:
            message = f"{self.operation}: HTTP {status}: {payload.message}"
        else:
            message = f"{self.operation}: HTTP {status}"
        logger.debug("%s failed with HTTP %d", self.operation, status)
        return ApiError(
            message,
            status_code=status,
            headers=flatten_headers(response.headers),
            response_body=text or None,
            errors=payload.errors if payload is not None else None,
        )

    def _decode(self, response: httpx.Response, body: bytes) -> ResultT:
        headers = flatten_headers(response.headers)
        try:
            result = self.result_type.model_validate_json(body)
        except PydanticValidationError as e:
            excerpt = body[:_BODY_EXCERPT].decode("utf-8", errors="replace")
            raise DecodeError(
                f"{self.operation}: response does not decode as "
                f"{self.result_type.__name__}: {e.error_count()} error(s)",
                status_code=response.status_code,
                headers=headers,
                response_body=excerpt,
            ) from e
        metadata = ResponseMetadata(status_code=response.status_code, headers=headers)
        return result.with_metadata(metadata)
