"""Synthetic readings for local development.

Nothing here runs unless ``DEMO_MODE`` is enabled. Demo readings go through the
regular store ``append`` path, so they are indistinguishable from submitted ones
once stored; keep this off anywhere real data is expected.
"""

from __future__ import annotations

import logging
import random
import threading
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from settings import get_settings
from storage.reading_store import ReadingStore, build_default_store

logger = logging.getLogger(__name__)

RISKY_CHANCE = 0.2
HIGH_RISK_SHARE = 0.8


def generate_pulse(rng: random.Random, base_rate: int = 80, variance: int = 30) -> int:
    """Plausible pulse with roughly one reading in five outside the normal range."""
    if rng.random() < RISKY_CHANCE:
        if rng.random() < HIGH_RISK_SHARE:
            return rng.randint(110, 159)
        return rng.randint(40, 59)
    normal = base_rate + (rng.random() - 0.5) * variance
    return max(60, min(100, int(normal)))


def generate_spo2(rng: random.Random) -> float:
    return float(rng.randint(95, 99))


class DemoFeeder:
    """Background thread appending synthetic readings at a fixed interval."""

    def __init__(
        self,
        store: ReadingStore,
        interval_s: float,
        initial_count: int = 20,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store
        self.interval_s = interval_s
        self.initial_count = initial_count
        self._rng = rng or random.Random()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.active:
            return
        logger.info(
            "[demo] Starting synthetic data generation",
            extra={"interval_s": self.interval_s},
        )
        for _ in range(self.initial_count):
            self.generate_one()
        logger.info(
            "[demo] Seeded initial readings",
            extra={"total_readings": self.store.count()},
        )
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="demo-feeder", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout=timeout)
        self._thread = None
        logger.info("[demo] Stopped synthetic data generation")

    def generate_one(self) -> None:
        reading = self.store.append(generate_pulse(self._rng), generate_spo2(self._rng))
        logger.debug(
            "[demo] Generated reading",
            extra={"reading_id": reading.id, "pulse": reading.pulse},
        )

    def status(self) -> Dict[str, Any]:
        active = self.active
        next_update = None
        if active:
            next_update = datetime.now(timezone.utc) + timedelta(seconds=self.interval_s)
        return {"active": active, "interval": self.interval_s, "nextUpdate": next_update}

    def _run(self) -> None:
        while not self._stop.wait(self.interval_s):
            self.generate_one()


@lru_cache
def build_default_feeder() -> Optional[DemoFeeder]:
    """Demo feeder bound to the default store, or ``None`` when demo mode is off."""
    settings = get_settings()
    if not settings.demo_mode:
        return None
    return DemoFeeder(store=build_default_store(), interval_s=settings.demo_interval_s)
