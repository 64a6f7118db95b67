"""Configuration contracts."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_METRIC_TYPES = (
    "HKQuantityTypeIdentifierActiveEnergyBurned",
    "HKQuantityTypeIdentifierBodyMass",
    "HKQuantityTypeIdentifierHeartRate",
    "HKQuantityTypeIdentifierStepCount",
)


class TempoSyncConfig(BaseModel):
    server_url: str
    status_path: str = "/api/health/status"
    sync_path: str = "/api/health/sync"
    metric_types: list[str] = Field(default_factory=lambda: list(DEFAULT_METRIC_TYPES))
    max_concurrent: int = Field(default=4, ge=1, le=64)
    batch_size: int = Field(default=1000, ge=1)
    timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=0, le=10)
    source_path: Path | None = None

    model_config = {"frozen": True}

    @field_validator("server_url")
    @classmethod
    def validate_server_url(cls, value: str) -> str:
        candidate = value.strip().rstrip("/")
        if not candidate.startswith(("http://", "https://")):
            raise ValueError("server_url must be an http(s) URL")
        return candidate

    @field_validator("status_path", "sync_path")
    @classmethod
    def validate_endpoint_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("endpoint paths must start with '/'")
        return value

    @field_validator("metric_types")
    @classmethod
    def validate_metric_types(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("metric_types must not be empty")
        if any(not metric.strip() for metric in value):
            raise ValueError("metric_types must not contain blank identifiers")
        if len(set(value)) != len(value):
            raise ValueError("metric_types must not contain duplicates")
        return value

    @property
    def status_url(self) -> str:
        return f"{self.server_url}{self.status_path}"

    @property
    def upload_url(self) -> str:
        return f"{self.server_url}{self.sync_path}"
