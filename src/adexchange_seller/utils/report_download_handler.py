"""Report download handler for media-mode report generation.

Stores streamed report downloads in a local directory tree, one file
per download plus a ``.meta.json`` sidecar describing it.

Directory Structure:
    data/
    └── reports/
        ├── 20261018_153045_report.csv
        └── 20261018_153045_report.meta.json

Environment Variables:
    - ADX_SELLER_DOWNLOAD_DIR: Custom download directory path
"""

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ..api.media import MediaDownload

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "text/csv": ".csv",
    "text/tab-separated-values": ".tsv",
    "application/json": ".json",
    "application/vnd.ms-excel": ".xls",
}


class ReportDownloadHandler:
    """Writes :class:`MediaDownload` streams to disk.

    Files are named ``<timestamp>_<name><ext>`` where the extension comes
    from the response content type, falling back to ``.bin``.

    :param base_dir: Base directory for downloads (default: ./data)
    :type base_dir: Optional[Path]
    """

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir) if base_dir else Path.cwd() / "data"
        logger.debug("Report download handler using %s", self.base_dir)

    @property
    def reports_dir(self) -> Path:
        return self.base_dir / "reports"

    def _infer_filename(
        self, name: str, content_type: Optional[str], content_disposition: Optional[str]
    ) -> Tuple[str, str]:
        """Infer the stored filename and extension.

        :param name: Base name used when the server names no file
        :param content_type: Media type without parameters
        :param content_disposition: Content-Disposition header value
        :return: tuple of (filename, extension)
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        if content_disposition and "filename=" in content_disposition:
            match = re.search(r'filename="?([^";]+)"?', content_disposition)
            if match:
                original = Path(match.group(1)).name
                return f"{timestamp}_{original}", Path(original).suffix
        extension = _EXTENSIONS.get(content_type or "", ".bin")
        return f"{timestamp}_{name}{extension}", extension

    async def save(
        self,
        download: MediaDownload,
        name: str = "report",
        metadata: Optional[Dict[str, Any]] = None,
        path: Optional[Path] = None,
    ) -> Path:
        """Consume a download into a file and write its metadata sidecar.

        The download is closed whether or not saving succeeds.

        :param download: Open media stream
        :type download: MediaDownload
        :param name: Base name for the generated filename
        :type name: str
        :param metadata: Extra fields for the ``.meta.json`` sidecar
        :type metadata: Optional[Dict[str, Any]]
        :param path: Explicit destination; overrides the generated name
        :type path: Optional[Path]
        :return: Path of the written file
        :rtype: Path
        :raises TransportError: If the stream fails mid-download
        """
        async with download:
            if path is None:
                filename, _ = self._infer_filename(
                    name,
                    download.content_type,
                    download.headers.get("content-disposition"),
                )
                file_path = self.reports_dir / filename
            else:
                file_path = Path(path)
            file_path.parent.mkdir(parents=True, exist_ok=True)

            size = 0
            with open(file_path, "wb") as f:
                async for chunk in download.aiter_bytes():
                    f.write(chunk)
                    size += len(chunk)
            logger.info("Saved report download to: %s (%d bytes)", file_path, size)

            meta = dict(metadata or {})
            meta["download_timestamp"] = datetime.now().isoformat()
            meta["content_type"] = download.content_type
            meta["file_size"] = size
            meta["status_code"] = download.status_code
            meta["saved_path"] = str(file_path)

        meta_path = file_path.with_suffix(".meta.json")
        with open(meta_path, "w", encoding="utf-8") as f:
            json.dump(meta, f, indent=2)
        logger.debug("Saved metadata to: %s", meta_path)
        return file_path
