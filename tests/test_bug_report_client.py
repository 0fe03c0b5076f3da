"""
Bug Report Client Tests
=======================
All HTTP goes through httpx.MockTransport — no real network.

Covers:
    - Endpoint normalization and target URL
    - Content-Type / Authorization headers
    - Status mapping (200/201, ServerError, HttpError, DecodingError)
    - Encoding, transport and protocol failures
    - Cancellation during token resolution
    - Concurrent submissions on one instance
"""
import asyncio
import json
from unittest.mock import AsyncMock

import httpx
import pytest

from shake_reporter.client.bug_report_client import BugReportClient
from shake_reporter.client.errors import (
    DecodingError,
    EncodingError,
    HttpError,
    InvalidResponseError,
    ServerError,
    TransportError,
)
from shake_reporter.models.bug_report import BugReportPriority, BugReportRequest

ENDPOINT = "https://api.x.com"


def _request(**overrides):
    fields = {
        "app_id": "myapp",
        "description": "Save button crashes the app",
        "priority": BugReportPriority.HIGH,
    }
    fields.update(overrides)
    return BugReportRequest(**fields)


class RecordingHandler:
    """Returns a canned response and remembers every request it saw."""

    def __init__(self, status_code=201, json_body=None, content=b""):
        self.status_code = status_code
        self.json_body = json_body
        self.content = content
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if self.json_body is not None:
            return httpx.Response(self.status_code, json=self.json_body)
        return httpx.Response(self.status_code, content=self.content)


def _client(handler, provider=None, endpoint=ENDPOINT):
    return BugReportClient(endpoint, provider, transport=httpx.MockTransport(handler))


def _run(coro):
    return asyncio.run(coro)


CREATED = {"success": True, "bugReport": {"id": "1", "status": "open"}}


# ===================================================================
# Happy path
# ===================================================================
def test_created_response_is_returned():
    handler = RecordingHandler(201, CREATED)
    resp = _run(_client(handler).submit(_request()))

    assert resp.success is True
    assert resp.bug_report.id == "1"
    assert resp.bug_report.status == "open"


def test_ok_status_is_also_success():
    handler = RecordingHandler(200, CREATED)
    resp = _run(_client(handler).submit(_request()))
    assert resp.bug_report.id == "1"


def test_success_false_on_200_is_returned_not_raised():
    handler = RecordingHandler(200, {"success": False, "error": "rate limited"})
    resp = _run(_client(handler).submit(_request()))

    assert resp.success is False
    assert resp.error == "rate limited"


def test_request_shape():
    handler = RecordingHandler(201, CREATED)
    _run(_client(handler).submit(_request(screen_name="Checkout")))

    sent = handler.requests[0]
    assert sent.method == "POST"
    assert str(sent.url) == "https://api.x.com/bug-reports"
    assert sent.headers["Content-Type"] == "application/json"
    assert json.loads(sent.content) == {
        "appId": "myapp",
        "description": "Save button crashes the app",
        "priority": "high",
        "screenName": "Checkout",
    }


def test_body_round_trips_through_echo_server():
    original = _request(
        screenshot_base64="/9j/4AAQSkZJRg==",
        app_version="2.0",
        build_number="100",
        ios_version="17.4",
        device_model="iPhone15,2",
        screen_name="Feed",
    )
    received = []

    def echo(request):
        received.append(BugReportRequest.model_validate_json(request.content))
        return httpx.Response(201, json=CREATED)

    _run(_client(echo).submit(original))
    assert received == [original]


@pytest.mark.parametrize("endpoint", ["https://api.x.com/", "https://api.x.com"])
def test_endpoint_trailing_slash_is_normalized(endpoint):
    handler = RecordingHandler(201, CREATED)
    client = _client(handler, endpoint=endpoint)
    _run(client.submit(_request()))

    assert client.endpoint == "https://api.x.com"
    assert str(handler.requests[0].url) == "https://api.x.com/bug-reports"


def test_only_one_trailing_slash_is_removed():
    client = BugReportClient("https://api.x.com/v1//")
    assert client.url == "https://api.x.com/v1//bug-reports"


# ===================================================================
# Authorization
# ===================================================================
def test_no_provider_sends_no_authorization():
    handler = RecordingHandler(201, CREATED)
    _run(_client(handler).submit(_request()))
    assert "Authorization" not in handler.requests[0].headers


@pytest.mark.parametrize("token", [None, ""])
def test_provider_returning_nothing_sends_no_authorization(token):
    handler = RecordingHandler(201, CREATED)
    provider = AsyncMock(return_value=token)

    resp = _run(_client(handler, provider).submit(_request()))

    provider.assert_awaited_once()
    assert resp.success is True
    assert "Authorization" not in handler.requests[0].headers


def test_provider_token_becomes_bearer_header():
    handler = RecordingHandler(201, CREATED)
    provider = AsyncMock(return_value="abc")

    _run(_client(handler, provider).submit(_request()))

    assert handler.requests[0].headers["Authorization"] == "Bearer abc"


def test_token_resolves_before_request_is_sent():
    events = []

    async def provider():
        events.append("token")
        return "abc"

    def handler(request):
        events.append("request")
        return httpx.Response(201, json=CREATED)

    _run(_client(handler, provider).submit(_request()))
    assert events == ["token", "request"]


@pytest.mark.parametrize("token", ["tøken", "abc\r\nX-Evil: 1", "abc\nd", "abc\0"])
def test_unsendable_token_raises_encoding_error_before_io(token):
    handler = RecordingHandler(201, CREATED)

    with pytest.raises(EncodingError):
        _run(_client(handler, AsyncMock(return_value=token)).submit(_request()))

    assert handler.requests == []


# ===================================================================
# Error mapping
# ===================================================================
def test_server_error_message_is_raised():
    handler = RecordingHandler(400, {"success": False, "error": "description too short"})

    with pytest.raises(ServerError) as exc_info:
        _run(_client(handler).submit(_request()))

    assert exc_info.value.message == "description too short"
    assert str(exc_info.value) == "description too short"


def test_server_error_wins_even_when_success_true():
    handler = RecordingHandler(409, {"success": True, "error": "conflict"})

    with pytest.raises(ServerError) as exc_info:
        _run(_client(handler).submit(_request()))
    assert exc_info.value.message == "conflict"


def test_empty_error_body_raises_http_error():
    handler = RecordingHandler(500, content=b"")

    with pytest.raises(HttpError) as exc_info:
        _run(_client(handler).submit(_request()))

    assert exc_info.value.status_code == 500
    assert str(exc_info.value) == "Server returned error code 500"


def test_error_body_without_success_field_raises_http_error():
    handler = RecordingHandler(400, {"error": "missing success"})

    with pytest.raises(HttpError) as exc_info:
        _run(_client(handler).submit(_request()))
    assert exc_info.value.status_code == 400


def test_error_body_without_message_raises_http_error():
    handler = RecordingHandler(404, {"success": False})

    with pytest.raises(HttpError) as exc_info:
        _run(_client(handler).submit(_request()))
    assert exc_info.value.status_code == 404


def test_undecodable_success_body_raises_decoding_error():
    handler = RecordingHandler(200, content=b"<html>ok</html>")

    with pytest.raises(DecodingError) as exc_info:
        _run(_client(handler).submit(_request()))
    assert exc_info.value.status_code == 200


def test_success_body_with_wrong_shape_raises_decoding_error():
    handler = RecordingHandler(201, {"bugReport": {"id": "1"}})

    with pytest.raises(DecodingError):
        _run(_client(handler).submit(_request()))


class _UnencodableRequest(BugReportRequest):
    def to_json(self) -> bytes:
        raise ValueError("cannot encode")


def test_encoding_failure_happens_before_any_io():
    handler = RecordingHandler(201, CREATED)
    provider = AsyncMock(return_value="abc")
    report = _UnencodableRequest(app_id="myapp", description="Crash", priority=BugReportPriority.LOW)

    with pytest.raises(EncodingError) as exc_info:
        _run(_client(handler, provider).submit(report))

    assert isinstance(exc_info.value.__cause__, ValueError)
    provider.assert_not_awaited()
    assert handler.requests == []


def test_connection_failure_raises_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as exc_info:
        _run(_client(handler).submit(_request()))

    assert isinstance(exc_info.value.cause, httpx.ConnectError)
    assert exc_info.value.__cause__ is exc_info.value.cause


def test_timeout_raises_transport_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError):
        _run(_client(handler).submit(_request()))


def test_protocol_violation_raises_invalid_response():
    def handler(request):
        raise httpx.RemoteProtocolError("malformed status line", request=request)

    with pytest.raises(InvalidResponseError):
        _run(_client(handler).submit(_request()))


def test_malformed_outgoing_request_raises_encoding_error():
    def handler(request):
        raise httpx.LocalProtocolError("illegal header value")

    with pytest.raises(EncodingError) as exc_info:
        _run(_client(handler).submit(_request()))
    assert isinstance(exc_info.value.__cause__, httpx.LocalProtocolError)


# ===================================================================
# Concurrency / cancellation
# ===================================================================
def test_cancel_during_token_fetch_sends_nothing():
    handler = RecordingHandler(201, CREATED)

    async def run_test():
        started = asyncio.Event()
        never = asyncio.Event()

        async def slow_provider():
            started.set()
            await never.wait()
            return "abc"

        task = asyncio.create_task(_client(handler, slow_provider).submit(_request()))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    _run(run_test())
    assert handler.requests == []


def test_cancel_during_inflight_request():
    seen = []

    async def run_test():
        started = asyncio.Event()
        never = asyncio.Event()

        async def hanging(request):
            seen.append(request)
            started.set()
            await never.wait()
            return httpx.Response(201, json=CREATED)

        task = asyncio.create_task(_client(hanging).submit(_request()))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert task.cancelled()

    _run(run_test())
    assert len(seen) == 1


def test_concurrent_submits_are_independent():
    def handler(request):
        payload = json.loads(request.content)
        return httpx.Response(
            201, json={"success": True, "bugReport": {"id": payload["description"], "status": "open"}}
        )

    client = _client(handler, AsyncMock(return_value="abc"))

    async def run_test():
        return await asyncio.gather(
            *(client.submit(_request(description=f"report {i}")) for i in range(5))
        )

    results = _run(run_test())
    assert [r.bug_report.id for r in results] == [f"report {i}" for i in range(5)]
