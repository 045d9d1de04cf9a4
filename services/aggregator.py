"""Aggregation logic for heart rate readings.

Every function here works on a snapshot taken from the reading store and keeps no
state between calls. Missing data is reported as ``None`` rather than a made-up value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import List, Optional, Sequence

from models.records import Reading

MAX_READINGS_LIMIT = 100
STATS_WINDOWS = (5, 15, 30)


class Metric(str, Enum):
    pulse = "pulse"
    spo2 = "spo2"


@dataclass
class WindowAverages:
    """Current value and trailing-window means for one metric."""

    current: Optional[float] = None
    last_5_minutes: Optional[int] = None
    last_15_minutes: Optional[int] = None
    last_30_minutes: Optional[int] = None


@dataclass
class StatsSummary:
    last_5_minutes: Optional[int] = None
    last_15_minutes: Optional[int] = None
    last_30_minutes: Optional[int] = None
    current: Optional[int] = None
    last_updated: Optional[str] = None
    total_readings: int = 0
    has_data: bool = False
    spo2: WindowAverages = field(default_factory=WindowAverages)


@dataclass
class ReadingTally:
    total: int = 0
    risky: int = 0
    normal: int = 0
    risky_percentage: int = 0


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (72.5 -> 73)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with stored timestamps."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _metric_value(reading: Reading, metric: Metric) -> Optional[float]:
    if metric is Metric.spo2:
        return reading.spo2
    return reading.pulse


def format_local_time(timestamp: datetime) -> str:
    return timestamp.astimezone().strftime("%H:%M:%S")


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def current_value(
        self, readings: Sequence[Reading], metric: Metric = Metric.pulse
    ) -> Optional[float]:
        """Value of the newest reading that carries ``metric``."""
        for reading in reversed(readings):
            value = _metric_value(reading, metric)
            if value is not None:
                return value
        return None

    def windowed_average(
        self,
        readings: Sequence[Reading],
        window_minutes: float,
        metric: Metric = Metric.pulse,
        now: Optional[datetime] = None,
    ) -> Optional[int]:
        cutoff = as_utc(now or _utcnow()) - timedelta(minutes=window_minutes)
        total = 0.0
        count = 0
        for reading in readings:
            if reading.timestamp < cutoff:
                continue
            value = _metric_value(reading, metric)
            if value is None:
                continue
            total += value
            count += 1
        if not count:
            return None
        return round_half_up(total / count)

    def window_averages(
        self,
        readings: Sequence[Reading],
        metric: Metric,
        now: datetime,
    ) -> WindowAverages:
        five, fifteen, thirty = (
            self.windowed_average(readings, minutes, metric=metric, now=now)
            for minutes in STATS_WINDOWS
        )
        return WindowAverages(
            current=self.current_value(readings, metric),
            last_5_minutes=five,
            last_15_minutes=fifteen,
            last_30_minutes=thirty,
        )

    def stats_summary(
        self, readings: Sequence[Reading], now: Optional[datetime] = None
    ) -> StatsSummary:
        moment = as_utc(now or _utcnow())
        pulse = self.window_averages(readings, Metric.pulse, moment)
        total = len(readings)
        return StatsSummary(
            last_5_minutes=pulse.last_5_minutes,
            last_15_minutes=pulse.last_15_minutes,
            last_30_minutes=pulse.last_30_minutes,
            current=pulse.current,
            last_updated=format_local_time(readings[-1].timestamp) if readings else None,
            total_readings=total,
            has_data=total > 0,
            spo2=self.window_averages(readings, Metric.spo2, moment),
        )

    def filtered_readings(
        self,
        readings: Sequence[Reading],
        limit: int,
        since: Optional[datetime] = None,
    ) -> List[Reading]:
        """Newest-first slice of ``readings``, optionally bounded below by ``since``."""
        limit = min(limit, MAX_READINGS_LIMIT)
        if limit < 1:
            return []
        candidates = readings
        if since is not None:
            cutoff = as_utc(since)
            candidates = [reading for reading in readings if reading.timestamp >= cutoff]
        # snapshots are in insertion order, which is also id order
        return list(reversed(candidates))[:limit]

    def category_tally(self, readings: Sequence[Reading]) -> ReadingTally:
        total = len(readings)
        risky = sum(1 for reading in readings if reading.is_risky)
        percentage = round_half_up(100 * risky / total) if total else 0
        return ReadingTally(
            total=total,
            risky=risky,
            normal=total - risky,
            risky_percentage=percentage,
        )
