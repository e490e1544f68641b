"""Unit tests for media-mode report downloads and their storage."""

import json
from pathlib import Path

import httpx
import pytest

from adexchange_seller.api import MediaDownload
from adexchange_seller.exceptions import ApiError, NotModifiedError
from adexchange_seller.models import ReportOptions
from adexchange_seller.utils.report_download_handler import ReportDownloadHandler

CSV = b"DATE,EARNINGS\n2026-01-01,1.50\n"


async def _stream_body():
    for line in CSV.splitlines(keepends=True):
        yield line


def csv_handler(recorded, headers=None):
    def handler(request):
        recorded.append(request)
        # An async iterator body keeps the response open until it is read
        return httpx.Response(
            200,
            content=_stream_body(),
            headers=headers or {"Content-Type": "text/csv; charset=UTF-8"},
        )

    return handler


@pytest.mark.asyncio
class TestMediaDownload:
    async def test_download_hands_over_open_stream(self, make_service, recorded):
        async with make_service(csv_handler(recorded)) as service:
            download = await service.reports.download(
                "2026-01-01", "2026-01-31", ReportOptions(metrics=["EARNINGS"])
            )
            assert isinstance(download, MediaDownload)
            assert not download.is_closed
            assert download.status_code == 200
            assert download.content_type == "text/csv"
            async with download:
                body = await download.aread()
            assert download.is_closed

        assert body == CSV
        request = recorded[0]
        assert request.url.params["alt"] == "media"
        assert request.url.params["metric"] == "EARNINGS"
        assert request.headers.get("accept") != "application/json"

    async def test_download_streams_chunks(self, make_service, recorded):
        async with make_service(csv_handler(recorded)) as service:
            download = await service.reports.download("today-7d", "today")
            async with download:
                chunks = [chunk async for chunk in download.aiter_bytes()]

        assert b"".join(chunks) == CSV

    async def test_download_error_status_raises(self, make_service):
        body = {"error": {"code": 400, "message": "Invalid metric"}}

        async with make_service(lambda request: httpx.Response(400, json=body)) as service:
            with pytest.raises(ApiError) as exc_info:
                await service.reports.download("today", "today")

        assert exc_info.value.status_code == 400
        assert "Invalid metric" in exc_info.value.message

    async def test_download_not_modified(self, make_service):
        async with make_service(lambda request: httpx.Response(304)) as service:
            with pytest.raises(NotModifiedError):
                await service.reports.download(
                    "today", "today", ReportOptions(if_none_match="tag")
                )


@pytest.mark.asyncio
class TestReportDownloadHandler:
    async def test_save_writes_file_and_metadata(self, make_service, recorded, tmp_path: Path):
        handler = ReportDownloadHandler(base_dir=tmp_path)

        async with make_service(csv_handler(recorded)) as service:
            download = await service.reports.download("today-7d", "today")
            out = await handler.save(download, metadata={"start_date": "today-7d"})

        assert download.is_closed
        assert out.parent == tmp_path / "reports"
        assert out.suffix == ".csv"
        assert out.read_bytes() == CSV

        meta = json.loads(out.with_suffix(".meta.json").read_text(encoding="utf-8"))
        assert meta["start_date"] == "today-7d"
        assert meta["file_size"] == len(CSV)
        assert meta["content_type"] == "text/csv"
        assert meta["saved_path"] == str(out)

    async def test_save_uses_content_disposition_name(
        self, make_service, recorded, tmp_path: Path
    ):
        headers = {
            "Content-Type": "text/csv",
            "Content-Disposition": 'attachment; filename="earnings.csv"',
        }
        handler = ReportDownloadHandler(base_dir=tmp_path)

        async with make_service(csv_handler(recorded, headers)) as service:
            download = await service.reports.download("today", "today")
            out = await handler.save(download)

        assert out.name.endswith("_earnings.csv")

    async def test_save_to_explicit_path(self, make_service, recorded, tmp_path: Path):
        target = tmp_path / "nested" / "out.csv"

        async with make_service(csv_handler(recorded)) as service:
            download = await service.reports.download("today", "today")
            out = await ReportDownloadHandler(base_dir=tmp_path).save(download, path=target)

        assert out == target
        assert target.read_bytes() == CSV
        assert (tmp_path / "nested" / "out.meta.json").exists()
