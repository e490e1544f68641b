"""Unit tests for request building and response interpretation.

Every test drives the service through ``httpx.MockTransport`` so the
full path from resource method to decoded result is exercised.
"""

import asyncio

import httpx
import pytest

from adexchange_seller.api import ApiCall
from adexchange_seller.exceptions import (
    ApiError,
    DecodeError,
    NotModifiedError,
    TransportError,
    ValidationError,
    is_not_modified,
)
from adexchange_seller.models import (
    AdClients,
    GetOptions,
    ListOptions,
    ReportOptions,
)


def _path(request: httpx.Request) -> bytes:
    return request.url.raw_path.split(b"?")[0]


class TrackingStream(httpx.AsyncByteStream):
    """Response body that records whether it was read and closed."""

    def __init__(self, body: bytes):
        self.body = body
        self.was_read = False
        self.was_closed = False

    async def __aiter__(self):
        self.was_read = True
        yield self.body

    async def aclose(self) -> None:
        self.was_closed = True


@pytest.mark.asyncio
class TestRequestBuilding:
    async def test_list_sends_only_alt_when_no_modifiers(self, make_service, recorded):
        def handler(request):
            recorded.append(request)
            return httpx.Response(200, json={"kind": "adexchangeseller#adClients"})

        async with make_service(handler) as service:
            page = await service.adclients.list()

        request = recorded[0]
        assert request.method == "GET"
        assert _path(request) == b"/adexchangeseller/v1/adclients"
        assert request.url.params.multi_items() == [("alt", "json")]
        assert request.headers["accept"] == "application/json"
        assert request.headers["authorization"] == "Bearer test-token"
        assert request.headers["user-agent"].startswith("adexchange-seller-python/")
        assert "if-none-match" not in request.headers
        assert page.kind == "adexchangeseller#adClients"
        assert page.items == []

    async def test_path_ids_are_escaped(self, make_service, recorded):
        def handler(request):
            recorded.append(request)
            return httpx.Response(200, json={"id": "x"})

        async with make_service(handler) as service:
            await service.adunits.get("ca-pub/1", "unit 7")

        assert _path(recorded[0]) == (
            b"/adexchangeseller/v1/adclients/ca-pub%2F1/adunits/unit%207"
        )

    async def test_empty_id_rejected_before_sending(self, make_service, recorded):
        def handler(request):
            recorded.append(request)
            return httpx.Response(200, json={})

        async with make_service(handler) as service:
            with pytest.raises(ValidationError) as exc_info:
                await service.customchannels.get("ca-pub-1", "")

        assert exc_info.value.field == "customChannelId"
        assert recorded == []

    async def test_report_query_parameters(self, make_service, recorded):
        def handler(request):
            recorded.append(request)
            return httpx.Response(200, json={"kind": "adexchangeseller#report"})

        options = ReportOptions(
            metrics=["EARNINGS", "CLICKS"],
            dimensions=["DATE"],
            filters=["AD_UNIT_ID==1"],
            locale="en_US",
            max_results=99999,
            field_mask="rows,totals",
        )
        async with make_service(handler) as service:
            await service.reports.generate("2026-01-01", "today-1d", options)

        params = recorded[0].url.params
        assert _path(recorded[0]) == b"/adexchangeseller/v1/reports"
        assert params["alt"] == "json"
        assert params["startDate"] == "2026-01-01"
        assert params["endDate"] == "today-1d"
        assert params.get_list("metric") == ["EARNINGS", "CLICKS"]
        assert params.get_list("dimension") == ["DATE"]
        assert params["filter"] == "AD_UNIT_ID==1"
        assert params["locale"] == "en_US"
        assert params["maxResults"] == "50000"
        assert params["fields"] == "rows,totals"
        assert "startIndex" not in params
        assert "sort" not in params

    @pytest.mark.parametrize(
        "start, end",
        [("2026/01/01", "today"), ("today", "yesterday"), ("", "today")],
    )
    async def test_bad_dates_rejected(self, make_service, recorded, start, end):
        def handler(request):
            recorded.append(request)
            return httpx.Response(200, json={})

        async with make_service(handler) as service:
            with pytest.raises(ValidationError):
                await service.reports.generate(start, end)
        assert recorded == []

    async def test_relative_dates_accepted(self, make_service):
        def handler(request):
            return httpx.Response(200, json={})

        async with make_service(handler) as service:
            await service.reports.generate("startOfMonth-1m", "startOfYear+2w-1d")

    async def test_wrong_options_type_rejected(self, make_service):
        async with make_service(lambda request: httpx.Response(200, json={})) as service:
            with pytest.raises(ValidationError):
                await service.adclients.list(ReportOptions())

    async def test_if_none_match_sent_as_header(self, make_service, recorded):
        def handler(request):
            recorded.append(request)
            return httpx.Response(200, json={"id": "c1"})

        async with make_service(handler) as service:
            await service.customchannels.get(
                "ca-pub-1", "c1", GetOptions(if_none_match='"v1"')
            )

        assert recorded[0].headers["if-none-match"] == '"v1"'
        assert "ifNoneMatch" not in recorded[0].url.params

    async def test_user_agent_fragment_appended(self, make_service, recorded):
        def handler(request):
            recorded.append(request)
            return httpx.Response(200, json={})

        async with make_service(handler, user_agent="reporting-job/2") as service:
            await service.reports.saved.list()

        agent = recorded[0].headers["user-agent"]
        assert agent.startswith("adexchange-seller-python/")
        assert agent.endswith(" reporting-job/2")

    async def test_nested_list_paths(self, make_service, recorded):
        def handler(request):
            recorded.append(request)
            return httpx.Response(200, json={})

        async with make_service(handler) as service:
            await service.adunits.customchannels.list("ca-pub-1", "u1")
            await service.customchannels.adunits.list("ca-pub-1", "c1")
            await service.urlchannels.list("ca-pub-1")
            await service.reports.saved.generate("sr-1")

        assert [_path(r) for r in recorded] == [
            b"/adexchangeseller/v1/adclients/ca-pub-1/adunits/u1/customchannels",
            b"/adexchangeseller/v1/adclients/ca-pub-1/customchannels/c1/adunits",
            b"/adexchangeseller/v1/adclients/ca-pub-1/urlchannels",
            b"/adexchangeseller/v1/reports/sr-1",
        ]


@pytest.mark.asyncio
class TestResponseHandling:
    async def test_decoded_result_carries_metadata(self, make_service):
        def handler(request):
            return httpx.Response(
                200,
                json={"items": [{"id": "ca-pub-1", "supportsReporting": True}]},
                headers={"ETag": '"e1"'},
            )

        async with make_service(handler) as service:
            page = await service.adclients.list()

        assert page.items[0].supports_reporting is True
        assert page.server_response.status_code == 200
        assert page.server_response.header("ETag") == '"e1"'

    async def test_not_modified(self, make_service):
        def handler(request):
            return httpx.Response(304, headers={"ETag": '"v1"'})

        async with make_service(handler) as service:
            with pytest.raises(NotModifiedError) as exc_info:
                await service.adclients.list(ListOptions(if_none_match='"v1"'))

        error = exc_info.value
        assert is_not_modified(error)
        assert isinstance(error, ApiError)
        assert error.status_code == 304
        assert error.etag == '"v1"'

    async def test_error_payload_decoded(self, make_service):
        body = {
            "error": {
                "code": 403,
                "message": "User lacks permission",
                "errors": [
                    {
                        "domain": "global",
                        "reason": "forbidden",
                        "message": "User lacks permission",
                        "locationType": "header",
                    }
                ],
            }
        }

        async with make_service(lambda request: httpx.Response(403, json=body)) as service:
            with pytest.raises(ApiError) as exc_info:
                await service.adunits.list("ca-pub-1")

        error = exc_info.value
        assert not is_not_modified(error)
        assert error.status_code == 403
        assert "adunits.list: HTTP 403: User lacks permission" == error.message
        assert error.errors[0].reason == "forbidden"
        assert error.errors[0].location_type == "header"
        assert "User lacks permission" in error.response_body
        assert error.to_dict()["error"] == "API_ERROR"

    async def test_non_json_error_body(self, make_service):
        def handler(request):
            return httpx.Response(502, text="<html>bad gateway</html>")

        async with make_service(handler) as service:
            with pytest.raises(ApiError) as exc_info:
                await service.urlchannels.list("ca-pub-1")

        assert exc_info.value.status_code == 502
        assert exc_info.value.errors == []
        assert exc_info.value.response_body == "<html>bad gateway</html>"

    async def test_malformed_body_raises_decode_error(self, make_service):
        def handler(request):
            return httpx.Response(200, text="{not json")

        async with make_service(handler) as service:
            with pytest.raises(DecodeError) as exc_info:
                await service.adclients.list()

        assert exc_info.value.status_code == 200
        assert exc_info.value.response_body == "{not json"

    async def test_report_width_violation_raises_decode_error(self, make_service):
        body = {"headers": [{"name": "DATE"}, {"name": "CLICKS"}], "rows": [["x"]]}

        async with make_service(lambda request: httpx.Response(200, json=body)) as service:
            with pytest.raises(DecodeError):
                await service.reports.generate("today", "today")

    async def test_connection_failure_raises_transport_error(self, make_service):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_service(handler) as service:
            with pytest.raises(TransportError) as exc_info:
                await service.adclients.list()

        assert exc_info.value.operation == "adclients.list"
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)

    async def test_deadline_raises_transport_error(self, make_service):
        async def handler(request):
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        async with make_service(handler, timeout=0.05) as service:
            with pytest.raises(TransportError):
                await service.adclients.list()

    async def test_cancellation_propagates(self, make_service):
        started = asyncio.Event()

        async def handler(request):
            started.set()
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        async with make_service(handler, timeout=None) as service:
            task = asyncio.create_task(service.adclients.list())
            await started.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

    async def test_token_provider_called_per_request(self, make_service, recorded):
        tokens = iter(["t1", "t2"])

        async def provider():
            return next(tokens)

        def handler(request):
            recorded.append(request.headers["authorization"])
            return httpx.Response(200, json={})

        async with make_service(handler, token_provider=provider) as service:
            await service.adclients.list()
            await service.adclients.list()

        assert recorded == ["Bearer t1", "Bearer t2"]


@pytest.mark.asyncio
class TestResponseRelease:
    async def test_not_modified_body_closed_and_never_read(self, make_service):
        stream = TrackingStream(b'{"items": [{"id": "stale"}]}')

        def handler(request):
            return httpx.Response(
                304,
                headers={"ETag": '"v1"', "Content-Type": "application/json"},
                stream=stream,
            )

        async with make_service(handler) as service:
            with pytest.raises(NotModifiedError):
                await service.adclients.list(ListOptions(if_none_match='"v1"'))

        assert not stream.was_read
        assert stream.was_closed

    async def test_media_not_modified_body_closed_and_never_read(self, make_service):
        stream = TrackingStream(b"DATE\n")

        def handler(request):
            return httpx.Response(304, stream=stream)

        async with make_service(handler) as service:
            with pytest.raises(NotModifiedError):
                await service.reports.download(
                    "today", "today", ReportOptions(if_none_match="v1")
                )

        assert not stream.was_read
        assert stream.was_closed

    @pytest.mark.parametrize(
        "status, body, error_type",
        [
            (403, b'{"error": {"code": 403, "message": "denied"}}', ApiError),
            (500, b"internal", ApiError),
            (200, b"{not json", DecodeError),
            (200, b'{"headers": [{"name": "A"}], "rows": [["1", "2"]]}', DecodeError),
        ],
    )
    async def test_failed_calls_close_the_body(
        self, make_service, status, body, error_type
    ):
        stream = TrackingStream(body)

        def handler(request):
            return httpx.Response(status, stream=stream)

        async with make_service(handler) as service:
            with pytest.raises(error_type):
                await service.reports.generate("today", "today")

        assert stream.was_read
        assert stream.was_closed

    async def test_media_error_closes_the_body(self, make_service):
        stream = TrackingStream(b'{"error": {"code": 400, "message": "bad metric"}}')

        def handler(request):
            return httpx.Response(400, stream=stream)

        async with make_service(handler) as service:
            with pytest.raises(ApiError):
                await service.reports.download("today", "today")

        assert stream.was_closed

    async def test_successful_call_closes_the_body(self, make_service):
        stream = TrackingStream(b'{"items": []}')

        async with make_service(lambda request: httpx.Response(200, stream=stream)) as service:
            await service.adclients.list()

        assert stream.was_read
        assert stream.was_closed


@pytest.mark.asyncio
async def test_call_objects_are_single_use(make_service):
    async with make_service(lambda request: httpx.Response(200, json={})) as service:
        call = ApiCall(service, "adclients.list", "adclients", AdClients, ListOptions())
        await call.execute()
        with pytest.raises(RuntimeError):
            await call.execute()
