import logging
import random
import time

from services.demo import DemoFeeder, generate_pulse, generate_spo2
from storage.reading_store import ReadingStore


def test_generated_values_stay_in_accepted_ranges() -> None:
    rng = random.Random(1234)

    pulses = [generate_pulse(rng) for _ in range(2000)]
    spo2_values = [generate_spo2(rng) for _ in range(200)]

    assert all(40 <= pulse <= 159 for pulse in pulses)
    assert any(pulse > 100 for pulse in pulses)
    assert any(pulse < 60 for pulse in pulses)
    assert all(95 <= value <= 99 for value in spo2_values)


def test_feeder_seeds_and_keeps_generating() -> None:
    store = ReadingStore(max_history=100)
    feeder = DemoFeeder(store=store, interval_s=0.01, initial_count=5, rng=random.Random(7))

    feeder.start()
    try:
        assert store.count() >= 5
        deadline = time.monotonic() + 2.0
        while store.count() < 8 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert store.count() >= 8
        assert feeder.status()["active"] is True
    finally:
        feeder.stop()

    assert feeder.active is False
    assert feeder.status() == {"active": False, "interval": 0.01, "nextUpdate": None}


def test_feeder_logs_are_labelled(caplog) -> None:
    store = ReadingStore()
    feeder = DemoFeeder(store=store, interval_s=60, initial_count=2)

    with caplog.at_level(logging.INFO, logger="services.demo"):
        feeder.start()
        feeder.stop()

    messages = [record.getMessage() for record in caplog.records if record.name == "services.demo"]
    assert messages
    assert all(message.startswith("[demo]") for message in messages)
