"""Sample and batch contracts."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

MetricType = str

BEGINNING_OF_TIME = datetime.min.replace(tzinfo=timezone.utc)


class Sample(BaseModel):
    """One timestamped measurement of a metric stream.

    Field aliases are the names the aggregation server speaks on the wire
    (``uuid``, ``type``, ``quantity``, ``startDate``, ``endDate``); the
    Python attribute names are used everywhere else.
    """

    id: UUID = Field(alias="uuid")
    metric_type: MetricType = Field(alias="type")
    value: float = Field(alias="quantity")
    start_time: datetime = Field(alias="startDate")
    end_time: datetime | None = Field(default=None, alias="endDate")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def sort_key(self) -> datetime:
        """Timestamp batches are ordered by and cursors advance with."""
        return self.end_time if self.end_time is not None else self.start_time

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class UploadResult(BaseModel):
    received: int = Field(ge=0)
    stored: int = Field(ge=0)

    model_config = {"frozen": True}
