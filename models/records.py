"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class HeartRateCategory(str, Enum):
    """Where a pulse falls relative to the configured normal range."""

    low = "low"
    normal = "normal"
    high = "high"


@dataclass(frozen=True, slots=True)
class RiskThresholds:
    """Normal pulse range; anything outside it is risky."""

    upper: int = 100
    lower: int = 60

    def is_risky(self, pulse: float) -> bool:
        return pulse > self.upper or pulse < self.lower

    def categorize(self, pulse: float) -> HeartRateCategory:
        if pulse < self.lower:
            return HeartRateCategory.low
        if pulse > self.upper:
            return HeartRateCategory.high
        return HeartRateCategory.normal


@dataclass(frozen=True, slots=True)
class Reading:
    """A single heart rate reading accepted by the store."""

    id: int
    pulse: int
    timestamp: datetime
    is_risky: bool
    spo2: Optional[float] = None

    @property
    def hour(self) -> str:
        """Local wall-clock label (``HH:MM``) for display."""
        return self.timestamp.astimezone().strftime("%H:%M")
