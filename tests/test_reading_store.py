"""Unit tests for the bounded reading store."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from models.records import RiskThresholds
from storage.reading_store import InvalidReading, ReadingStore


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


START = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_append_assigns_sequential_ids_and_server_timestamps() -> None:
    clock = FakeClock(START)
    store = ReadingStore(max_history=10, clock=clock)

    first = store.append(75)
    clock.advance(seconds=30)
    second = store.append(82, spo2=97.0)

    assert (first.id, second.id) == (1, 2)
    assert first.timestamp == START
    assert second.timestamp == START + timedelta(seconds=30)
    assert first.spo2 is None
    assert second.spo2 == 97.0
    assert store.count() == 2


def test_eviction_keeps_most_recent_readings_in_order() -> None:
    store = ReadingStore(max_history=5)

    for pulse in range(61, 73):
        store.append(pulse)

    readings = store.read_all()
    assert store.count() == 5
    assert [reading.pulse for reading in readings] == [68, 69, 70, 71, 72]
    assert [reading.id for reading in readings] == [8, 9, 10, 11, 12]


def test_ids_are_never_reused_after_eviction() -> None:
    store = ReadingStore(max_history=2)

    ids = [store.append(70).id for _ in range(6)]

    assert ids == [1, 2, 3, 4, 5, 6]


@pytest.mark.parametrize(
    ("pulse", "risky"),
    [(59, True), (60, False), (100, False), (101, True)],
)
def test_risk_flag_boundaries(pulse: int, risky: bool) -> None:
    store = ReadingStore()

    assert store.append(pulse).is_risky is risky


def test_custom_thresholds_apply_at_insertion() -> None:
    store = ReadingStore(thresholds=RiskThresholds(upper=120, lower=50))

    assert store.append(110).is_risky is False
    assert store.append(45).is_risky is True


@pytest.mark.parametrize(
    ("pulse", "spo2", "message"),
    [
        (29, None, "less than 30"),
        (251, None, "greater than 250"),
        ("75", None, "must be a number"),
        (True, None, "must be a number"),
        (float("nan"), None, "must be a number"),
        (75, 49.0, "between 50 and 100"),
        (75, 101, "between 50 and 100"),
        (75, "98", "must be a number"),
    ],
)
def test_invalid_readings_are_rejected_without_consuming_ids(pulse, spo2, message) -> None:
    store = ReadingStore()

    with pytest.raises(InvalidReading, match=message):
        store.append(pulse, spo2)

    assert store.count() == 0
    assert store.append(70).id == 1


def test_read_all_returns_a_detached_snapshot() -> None:
    store = ReadingStore(max_history=3)
    store.append(70)

    snapshot = store.read_all()
    snapshot.clear()

    assert store.count() == 1


def test_returned_readings_are_immutable_and_survive_eviction() -> None:
    store = ReadingStore(max_history=1)
    first = store.append(70)

    store.append(90)

    assert first.pulse == 70
    with pytest.raises(FrozenInstanceError):
        first.pulse = 80  # type: ignore[misc]


def test_reset_clears_log_and_restarts_ids() -> None:
    store = ReadingStore()
    store.append(70)
    store.append(80)

    store.reset()

    assert store.count() == 0
    assert store.read_all() == []
    assert store.append(90).id == 1


def test_rejects_non_positive_capacity() -> None:
    with pytest.raises(ValueError):
        ReadingStore(max_history=0)


def test_concurrent_appends_produce_unique_ids() -> None:
    store = ReadingStore(max_history=50)
    total = 400

    with ThreadPoolExecutor(max_workers=8) as executor:
        readings = list(executor.map(lambda i: store.append(60 + i % 40), range(total)))

    ids = [reading.id for reading in readings]
    assert len(set(ids)) == total
    assert sorted(ids) == list(range(1, total + 1))
    assert store.count() == 50
    retained = [reading.id for reading in store.read_all()]
    assert retained == list(range(total - 49, total + 1))
