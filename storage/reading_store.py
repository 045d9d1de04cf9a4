from __future__ import annotations

import numbers
from collections import deque
from datetime import datetime, timezone
from functools import lru_cache
from threading import Lock
from typing import Callable, Deque, List, Optional

from models.records import Reading, RiskThresholds
from settings import get_settings

PULSE_MIN = 30
PULSE_MAX = 250
SPO2_MIN = 50
SPO2_MAX = 100


class InvalidReading(ValueError):
    """Raised when a reading is outside the accepted domain."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_number(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and value == value


def validate_reading(pulse: object, spo2: object = None) -> None:
    if not _is_number(pulse):
        raise InvalidReading("Heart rate must be a number")
    if pulse < PULSE_MIN:  # type: ignore[operator]
        raise InvalidReading(f"Heart rate cannot be less than {PULSE_MIN} BPM")
    if pulse > PULSE_MAX:  # type: ignore[operator]
        raise InvalidReading(f"Heart rate cannot be greater than {PULSE_MAX} BPM")
    if spo2 is None:
        return
    if not _is_number(spo2):
        raise InvalidReading("SpO2 must be a number")
    if not SPO2_MIN <= spo2 <= SPO2_MAX:  # type: ignore[operator]
        raise InvalidReading(f"SpO2 must be between {SPO2_MIN} and {SPO2_MAX} percent")


class ReadingStore:
    """Bounded, thread-safe log of readings with monotonically increasing ids."""

    def __init__(
        self,
        max_history: int = 50,
        thresholds: Optional[RiskThresholds] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if max_history < 1:
            raise ValueError("max_history must be at least 1.")
        self.max_history = max_history
        self.thresholds = thresholds or RiskThresholds()
        self._clock = clock
        self._readings: Deque[Reading] = deque()
        self._next_id = 1
        self._lock = Lock()

    def append(self, pulse: int, spo2: Optional[float] = None) -> Reading:
        validate_reading(pulse, spo2)
        with self._lock:
            reading = Reading(
                id=self._next_id,
                pulse=pulse,
                spo2=spo2,
                timestamp=self._clock(),
                is_risky=self.thresholds.is_risky(pulse),
            )
            self._next_id += 1
            self._readings.append(reading)
            while len(self._readings) > self.max_history:
                self._readings.popleft()
        return reading

    def read_all(self) -> List[Reading]:
        """Return a snapshot of the log in insertion order."""

        with self._lock:
            return list(self._readings)

    def count(self) -> int:
        with self._lock:
            return len(self._readings)

    def reset(self) -> None:
        """Drop every reading and restart ids at 1. Intended for tests and admin tooling."""

        with self._lock:
            self._readings.clear()
            self._next_id = 1


@lru_cache
def build_default_store(max_history: Optional[int] = None) -> ReadingStore:
    settings = get_settings()
    capacity = settings.max_history if max_history is None else max_history
    thresholds = RiskThresholds(upper=settings.risky_threshold, lower=settings.normal_min)
    return ReadingStore(max_history=capacity, thresholds=thresholds)
