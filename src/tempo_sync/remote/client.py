"""HTTP client for the aggregation server."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError, version
from types import TracebackType
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from tempo_sync.contracts.config import TempoSyncConfig
from tempo_sync.contracts.exceptions import RemoteError, UploadError, WatermarkError
from tempo_sync.contracts.remote import BatchUploader, WatermarkClient
from tempo_sync.contracts.sample import MetricType, Sample, UploadResult
from tempo_sync.remote._retrying_transport import RetryingTransport

_LOG = logging.getLogger(__name__)


class _WatermarkEntry(BaseModel):
    type: str
    end_date: str = Field(alias="endDate")


class _StatusResponse(BaseModel):
    samples: list[_WatermarkEntry]


def _user_agent() -> str:
    try:
        return f"tempo-sync/{version('tempo-sync')}"
    except PackageNotFoundError:
        return "tempo-sync/0.0.0"


def _parse_timestamp(raw: str) -> datetime | None:
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


class TempoClient(WatermarkClient, BatchUploader):
    """Watermark and upload endpoints of the aggregation server.

    Use as an async context manager so the underlying connection pool is
    opened and closed around the sync run::

        async with TempoClient.from_config(config) as client:
            watermarks = await client.get_watermarks()
    """

    def __init__(
        self,
        *,
        status_url: str,
        upload_url: str,
        timeout: float = 30.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._status_url = status_url
        self._upload_url = upload_url
        self._timeout = timeout
        self._max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, config: TempoSyncConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> TempoClient:
        return cls(
            status_url=config.status_url,
            upload_url=config.upload_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            transport=transport,
        )

    async def __aenter__(self) -> TempoClient:
        self._client = httpx.AsyncClient(
            transport=RetryingTransport(transport=self._transport, max_retries=self._max_retries),
            headers={"Accept": "application/json", "User-Agent": _user_agent()},
            timeout=httpx.Timeout(self._timeout),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_watermarks(self) -> dict[MetricType, datetime]:
        """Return the server's last synced end time per metric.

        Entries whose timestamp cannot be parsed are skipped. When a metric
        appears more than once the latest timestamp wins.

        Raises:
            WatermarkError: On transport failure, non-2xx status, or a
                payload that is not ``{"samples": [{"type", "endDate"}]}``.
        """
        payload = await self._request_json("GET", self._status_url, error=WatermarkError)
        try:
            status = _StatusResponse.model_validate(payload)
        except ValidationError as exc:
            raise WatermarkError(f"unexpected watermark payload: {exc}") from exc

        watermarks: dict[MetricType, datetime] = {}
        for entry in status.samples:
            end_date = _parse_timestamp(entry.end_date)
            if end_date is None:
                _LOG.debug("Skipping watermark for %s with invalid endDate %r", entry.type, entry.end_date)
                continue
            current = watermarks.get(entry.type)
            if current is None or end_date > current:
                watermarks[entry.type] = end_date
        return watermarks

    async def upload_batch(self, samples: Sequence[Sample]) -> UploadResult:
        """POST *samples* and return the server's received/stored counts.

        Raises:
            UploadError: On transport failure, non-2xx status, or a payload
                without integer ``received`` and ``stored`` fields.
        """
        if not samples:
            return UploadResult(received=0, stored=0)
        body = [sample.to_wire() for sample in samples]
        payload = await self._request_json("POST", self._upload_url, error=UploadError, json=body)
        try:
            result = UploadResult.model_validate(payload)
        except ValidationError as exc:
            raise UploadError(f"unexpected upload payload: {exc}") from exc
        _LOG.debug("Uploaded %d sample(s): %d received, %d stored", len(samples), result.received, result.stored)
        return result

    async def _request_json(self, method: str, url: str, *, error: type[RemoteError], **kwargs: Any) -> Any:
        client = self._require_client()
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise error(f"{method} {url} failed: {exc}") from exc

        if not response.is_success:
            raise error(f"{method} {url} returned HTTP {response.status_code}", status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise error(f"{method} {url} returned invalid JSON", status_code=response.status_code) from exc

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RemoteError("TempoClient is not open; use it as an async context manager")
        return self._client
