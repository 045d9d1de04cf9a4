"""HTTP route definitions for the service."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas import (
    CurrentHeartRate,
    DemoStatus,
    DetailedStatistics,
    HealthStatus,
    HeartRateStats,
    ReadingOut,
    ReadingSubmission,
    SubmissionResponse,
)
from services.demo import DemoFeeder, build_default_feeder
from services.heart_rate import DEFAULT_READINGS_LIMIT, HeartRateService, build_default_service
from storage.reading_store import InvalidReading

API_VERSION = "1.0.0"

router = APIRouter(prefix="/api/heart-rate", tags=["heart-rate"])
health_router = APIRouter()


def get_service() -> HeartRateService:
    return build_default_service()


def get_feeder() -> Optional[DemoFeeder]:
    return build_default_feeder()


@router.post(
    "/reading",
    status_code=status.HTTP_201_CREATED,
    response_model=SubmissionResponse,
    summary="Submit a heart rate reading.",
)
def submit_reading(
    payload: ReadingSubmission,
    service: HeartRateService = Depends(get_service),
) -> SubmissionResponse:
    try:
        return service.record_reading(payload.pulse, payload.spo2)
    except InvalidReading as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc


@router.get(
    "/stats",
    response_model=HeartRateStats,
    summary="Rolling averages, current value and reading count.",
)
def get_stats(service: HeartRateService = Depends(get_service)) -> HeartRateStats:
    return service.stats()


@router.get(
    "/readings",
    response_model=List[ReadingOut],
    summary="Recent readings, newest first.",
)
def list_readings(
    limit: int = Query(DEFAULT_READINGS_LIMIT, ge=1, le=100),
    since: Optional[datetime] = Query(
        None, description="ISO 8601 timestamp; only readings at or after it are returned."
    ),
    service: HeartRateService = Depends(get_service),
) -> List[ReadingOut]:
    return service.readings(limit=limit, since=since)


@router.get(
    "/current",
    response_model=CurrentHeartRate,
    summary="Most recent heart rate.",
)
def get_current(service: HeartRateService = Depends(get_service)) -> CurrentHeartRate:
    return service.current()


@router.get(
    "/statistics",
    response_model=DetailedStatistics,
    summary="Risky/normal tally alongside averages and thresholds.",
)
def get_statistics(service: HeartRateService = Depends(get_service)) -> DetailedStatistics:
    return service.statistics()


def _health(feeder: Optional[DemoFeeder]) -> HealthStatus:
    demo = DemoStatus.model_validate(feeder.status()) if feeder is not None else None
    return HealthStatus(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        version=API_VERSION,
        demo=demo,
    )


@health_router.get(
    "/health",
    response_model=HealthStatus,
    summary="Health check endpoint.",
)
async def healthcheck(feeder: Optional[DemoFeeder] = Depends(get_feeder)) -> HealthStatus:
    return _health(feeder)


@health_router.get(
    "/",
    response_model=HealthStatus,
    summary="Root endpoint mirrors health information.",
)
async def root(feeder: Optional[DemoFeeder] = Depends(get_feeder)) -> HealthStatus:
    return _health(feeder)
