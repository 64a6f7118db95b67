"""Tests for the aggregation server client."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from tempo_sync.contracts.config import TempoSyncConfig
from tempo_sync.contracts.exceptions import RemoteError, UploadError, WatermarkError
from tempo_sync.contracts.sample import Sample, UploadResult
from tempo_sync.remote.client import TempoClient

HR = "HKQuantityTypeIdentifierHeartRate"
STEPS = "HKQuantityTypeIdentifierStepCount"


def make_client(handler, *, max_retries: int = 0) -> TempoClient:  # type: ignore[no-untyped-def]
    return TempoClient(
        status_url="https://tempo.example.com/api/health/status",
        upload_url="https://tempo.example.com/api/health/sync",
        max_retries=max_retries,
        transport=httpx.MockTransport(handler),
    )


def make_sample(minutes: int = 1) -> Sample:
    end = datetime(2026, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=minutes)
    return Sample(
        id="3f2504e0-4f89-41d3-9a0c-0305e82c3301",
        metric_type=HR,
        value=72.0,
        start_time=end - timedelta(seconds=1),
        end_time=end,
    )


def test_from_config_uses_config_urls() -> None:
    config = TempoSyncConfig(server_url="https://tempo.example.com/", max_retries=1, timeout=5)

    client = TempoClient.from_config(config)

    assert client._status_url == "https://tempo.example.com/api/health/status"
    assert client._upload_url == "https://tempo.example.com/api/health/sync"
    assert client._max_retries == 1
    assert client._timeout == 5


@pytest.mark.asyncio
async def test_get_watermarks_parses_status_payload() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "samples": [
                    {"type": HR, "endDate": "2026-01-02T03:04:05Z"},
                    {"type": STEPS, "endDate": "2026-01-01T00:00:00+02:00"},
                ]
            },
        )

    async with make_client(handler) as client:
        watermarks = await client.get_watermarks()

    assert watermarks == {
        HR: datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        STEPS: datetime(2025, 12, 31, 22, 0, tzinfo=timezone.utc),
    }
    assert requests[0].method == "GET"
    assert requests[0].url.path == "/api/health/status"
    assert requests[0].headers["Accept"] == "application/json"
    assert requests[0].headers["User-Agent"].startswith("tempo-sync/")


@pytest.mark.asyncio
async def test_get_watermarks_skips_bad_dates_and_keeps_latest() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "samples": [
                    {"type": HR, "endDate": "2026-01-01T00:00:00Z"},
                    {"type": HR, "endDate": "2026-02-01T00:00:00Z"},
                    {"type": STEPS, "endDate": "yesterday"},
                ]
            },
        )

    async with make_client(handler) as client:
        watermarks = await client.get_watermarks()

    assert watermarks == {HR: datetime(2026, 2, 1, tzinfo=timezone.utc)}


@pytest.mark.asyncio
async def test_get_watermarks_naive_timestamp_is_utc() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"samples": [{"type": HR, "endDate": "2026-01-01T12:00:00"}]})

    async with make_client(handler) as client:
        watermarks = await client.get_watermarks()

    assert watermarks[HR] == datetime(2026, 1, 1, 12, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_get_watermarks_http_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "boom"})

    async with make_client(handler) as client:
        with pytest.raises(WatermarkError, match="HTTP 500") as exc_info:
            await client.get_watermarks()

    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_get_watermarks_rejects_unexpected_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"type": HR}])

    async with make_client(handler) as client:
        with pytest.raises(WatermarkError, match="unexpected watermark payload"):
            await client.get_watermarks()


@pytest.mark.asyncio
async def test_get_watermarks_rejects_invalid_json() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>maintenance</html>")

    async with make_client(handler) as client:
        with pytest.raises(WatermarkError, match="invalid JSON"):
            await client.get_watermarks()


@pytest.mark.asyncio
async def test_transport_failure_maps_to_remote_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(WatermarkError, match="connection refused") as exc_info:
            await client.get_watermarks()

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_upload_batch_posts_wire_format() -> None:
    bodies: list[object] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/api/health/sync"
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"received": 1, "stored": 1})

    async with make_client(handler) as client:
        result = await client.upload_batch([make_sample()])

    assert result == UploadResult(received=1, stored=1)
    assert bodies == [
        [
            {
                "uuid": "3f2504e0-4f89-41d3-9a0c-0305e82c3301",
                "type": HR,
                "quantity": 72.0,
                "startDate": "2026-01-01T00:00:59Z",
                "endDate": "2026-01-01T00:01:00Z",
            }
        ]
    ]


@pytest.mark.asyncio
async def test_upload_empty_batch_skips_request() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    async with make_client(handler) as client:
        result = await client.upload_batch([])

    assert result == UploadResult(received=0, stored=0)


@pytest.mark.asyncio
async def test_upload_batch_http_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(413)

    async with make_client(handler) as client:
        with pytest.raises(UploadError, match="HTTP 413") as exc_info:
            await client.upload_batch([make_sample()])

    assert exc_info.value.status_code == 413


@pytest.mark.asyncio
async def test_upload_batch_rejects_payload_without_counts() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True})

    async with make_client(handler) as client:
        with pytest.raises(UploadError, match="unexpected upload payload"):
            await client.upload_batch([make_sample()])


@pytest.mark.asyncio
async def test_upload_batch_retries_transient_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    async def no_backoff(self, attempt: int) -> None:  # type: ignore[no-untyped-def]
        return None

    monkeypatch.setattr("tempo_sync.remote._retrying_transport.RetryingTransport._sleep_backoff", no_backoff)
    responses = iter([httpx.Response(503), httpx.Response(200, json={"received": 1, "stored": 0})])

    def handler(request: httpx.Request) -> httpx.Response:
        return next(responses)

    async with make_client(handler, max_retries=2) as client:
        result = await client.upload_batch([make_sample()])

    assert result == UploadResult(received=1, stored=0)


@pytest.mark.asyncio
async def test_requires_open_client() -> None:
    client = make_client(lambda request: httpx.Response(200))

    with pytest.raises(RemoteError, match="not open"):
        await client.get_watermarks()
