"""Coordinates the reading store, the aggregator and the API schemas."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import List, Optional

from app.schemas import (
    CurrentHeartRate,
    DetailedStatistics,
    HeartRateStats,
    ReadingCount,
    ReadingOut,
    SpO2Stats,
    SubmissionResponse,
    ThresholdInfo,
)
from models.records import Reading
from services.aggregator import Aggregator, StatsSummary
from storage.reading_store import InvalidReading, ReadingStore, build_default_store

logger = logging.getLogger(__name__)

DEFAULT_READINGS_LIMIT = 20


class HeartRateService:
    """Entry point used by the HTTP routes."""

    def __init__(self, store: ReadingStore, aggregator: Aggregator) -> None:
        self.store = store
        self.aggregator = aggregator

    def record_reading(self, pulse: int, spo2: Optional[float] = None) -> SubmissionResponse:
        try:
            reading = self.store.append(pulse, spo2)
        except InvalidReading as exc:
            logger.warning(
                "Rejected heart rate reading",
                extra={"pulse": pulse, "spo2": spo2, "reason": str(exc)},
            )
            raise

        log = logger.warning if reading.is_risky else logger.info
        log(
            "Recorded heart rate reading",
            extra={
                "reading_id": reading.id,
                "pulse": reading.pulse,
                "spo2": reading.spo2,
                "is_risky": reading.is_risky,
            },
        )
        return SubmissionResponse(
            message="Heart rate reading recorded successfully",
            reading=self._to_schema(reading),
            stats=self.stats(),
        )

    def stats(self, now: Optional[datetime] = None) -> HeartRateStats:
        snapshot = self.store.read_all()
        logger.debug("Heart rate stats requested", extra={"total_readings": len(snapshot)})
        return self._stats_schema(self.aggregator.stats_summary(snapshot, now=now))

    def readings(
        self, limit: int = DEFAULT_READINGS_LIMIT, since: Optional[datetime] = None
    ) -> List[ReadingOut]:
        logger.debug("Heart rate readings requested", extra={"limit": limit, "since": since})
        snapshot = self.store.read_all()
        selected = self.aggregator.filtered_readings(snapshot, limit=limit, since=since)
        return [self._to_schema(reading) for reading in selected]

    def current(self) -> CurrentHeartRate:
        summary = self.aggregator.stats_summary(self.store.read_all())
        return CurrentHeartRate(
            current=summary.current,
            last_updated=summary.last_updated,
            timestamp=datetime.now(timezone.utc),
        )

    def statistics(self) -> DetailedStatistics:
        snapshot = self.store.read_all()
        tally = self.aggregator.category_tally(snapshot)
        thresholds = self.store.thresholds
        return DetailedStatistics(
            reading_count=ReadingCount(
                total=tally.total,
                risky=tally.risky,
                normal=tally.normal,
                risky_percentage=tally.risky_percentage,
            ),
            averages=self._stats_schema(self.aggregator.stats_summary(snapshot)),
            thresholds=ThresholdInfo(
                risky_threshold=thresholds.upper,
                normal_min=thresholds.lower,
                max_history=self.store.max_history,
            ),
        )

    def _to_schema(self, reading: Reading) -> ReadingOut:
        return ReadingOut(
            id=reading.id,
            hour=reading.hour,
            pulse=reading.pulse,
            spo2=reading.spo2,
            is_risky=reading.is_risky,
            category=self.store.thresholds.categorize(reading.pulse),
            timestamp=reading.timestamp,
        )

    @staticmethod
    def _stats_schema(summary: StatsSummary) -> HeartRateStats:
        return HeartRateStats(
            last_5_minutes=summary.last_5_minutes,
            last_15_minutes=summary.last_15_minutes,
            last_30_minutes=summary.last_30_minutes,
            current=summary.current,
            last_updated=summary.last_updated,
            total_readings=summary.total_readings,
            has_data=summary.has_data,
            spo2=SpO2Stats(
                current=summary.spo2.current,
                last_5_minutes=summary.spo2.last_5_minutes,
                last_15_minutes=summary.spo2.last_15_minutes,
                last_30_minutes=summary.spo2.last_30_minutes,
            ),
        )


@lru_cache
def build_default_service() -> HeartRateService:
    """Factory that wires the service with the process-wide store."""
    return HeartRateService(store=build_default_store(), aggregator=Aggregator())
