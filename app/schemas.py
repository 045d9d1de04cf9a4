"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.records import HeartRateCategory


class ApiModel(BaseModel):
    """Base model exposing camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReadingSubmission(ApiModel):
    """Payload accepted by the ingest endpoint."""

    pulse: int = Field(..., ge=30, le=250, strict=True, description="Heart rate in BPM.")
    spo2: Optional[float] = Field(
        default=None, ge=50, le=100, strict=True, description="Blood oxygen saturation (%)."
    )


class ReadingOut(ApiModel):
    id: int
    hour: str = Field(..., description="Local time of the reading (HH:MM).")
    pulse: int
    spo2: Optional[float] = None
    is_risky: bool
    category: HeartRateCategory
    timestamp: datetime


class SpO2Stats(ApiModel):
    current: Optional[float] = None
    last_5_minutes: Optional[int] = Field(default=None, alias="last5Minutes")
    last_15_minutes: Optional[int] = Field(default=None, alias="last15Minutes")
    last_30_minutes: Optional[int] = Field(default=None, alias="last30Minutes")


class HeartRateStats(ApiModel):
    """Rolling averages and current value; ``null`` means no data."""

    last_5_minutes: Optional[int] = Field(default=None, alias="last5Minutes")
    last_15_minutes: Optional[int] = Field(default=None, alias="last15Minutes")
    last_30_minutes: Optional[int] = Field(default=None, alias="last30Minutes")
    current: Optional[int] = None
    last_updated: Optional[str] = None
    total_readings: int = Field(default=0, ge=0)
    has_data: bool = False
    spo2: SpO2Stats = Field(default_factory=SpO2Stats)


class SubmissionResponse(ApiModel):
    message: str
    reading: ReadingOut
    stats: HeartRateStats


class CurrentHeartRate(ApiModel):
    current: Optional[int] = None
    last_updated: Optional[str] = None
    timestamp: datetime = Field(..., description="Server time when the response was built.")


class ReadingCount(ApiModel):
    total: int = Field(..., ge=0)
    risky: int = Field(..., ge=0)
    normal: int = Field(..., ge=0)
    risky_percentage: int = Field(..., ge=0, le=100)


class ThresholdInfo(ApiModel):
    risky_threshold: int
    normal_min: int
    max_history: int


class DetailedStatistics(ApiModel):
    reading_count: ReadingCount
    averages: HeartRateStats
    thresholds: ThresholdInfo


class DemoStatus(ApiModel):
    active: bool
    interval: float
    next_update: Optional[datetime] = None


class HealthStatus(ApiModel):
    status: str
    timestamp: datetime
    version: str
    demo: Optional[DemoStatus] = None
