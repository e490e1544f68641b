"""Raw media responses handed to the caller.

A :class:`MediaDownload` owns an open, streamed HTTP response with a 2xx
status. The body has not been read; the holder must consume it and
close the download, ideally with ``async with``.
"""

import logging
from typing import AsyncIterator, Dict, Optional

import httpx

from ..exceptions import TransportError
from ..utils.http import flatten_headers, read_body

logger = logging.getLogger(__name__)


class MediaDownload:
    """Open byte stream of a media-mode response.

    :param response: Streamed response whose body is still unread
    :type response: httpx.Response
    """

    def __init__(self, response: httpx.Response):
        self.response = response

    @property
    def status_code(self) -> int:
        """Get the HTTP status code of the response.

        :return: HTTP status code
        :rtype: int
        """
        return self.response.status_code

    @property
    def headers(self) -> Dict[str, str]:
        """Get the response headers.

        :return: Response headers
        :rtype: Dict[str, str]
        """
        return flatten_headers(self.response.headers)

    @property
    def content_type(self) -> Optional[str]:
        """Get the media type of the body without parameters.

        :return: Media type such as ``text/csv``, or None
        :rtype: Optional[str]
        """
        value = self.response.headers.get("content-type")
        if not value:
            return None
        return value.split(";", 1)[0].strip().lower()

    @property
    def is_closed(self) -> bool:
        return self.response.is_closed

    async def aiter_bytes(self, chunk_size: Optional[int] = None) -> AsyncIterator[bytes]:
        """Iterate over the body in chunks.

        :param chunk_size: Optional chunk size in bytes
        :type chunk_size: Optional[int]
        """
        try:
            async for chunk in self.response.aiter_bytes(chunk_size):
                yield chunk
        except httpx.RequestError as e:
            raise TransportError(
                f"media download failed mid-stream: {e}",
                operation="media download",
                original_error=e,
            ) from e

    async def aread(self) -> bytes:
        """Read the remaining body into memory.

        :return: Body bytes
        :rtype: bytes
        """
        return await read_body(self.response, "media download")

    async def aclose(self) -> None:
        """Close the underlying response and release the connection."""
        if not self.response.is_closed:
            await self.response.aclose()
            logger.debug("Closed media stream")

    async def __aenter__(self) -> "MediaDownload":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
