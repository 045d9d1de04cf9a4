from __future__ import annotations

from typing import Iterable

import pytest

from services.demo import build_default_feeder
from services.heart_rate import build_default_service
from settings import get_settings
from storage.reading_store import build_default_store


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


_CACHES = (get_settings, build_default_store, build_default_service, build_default_feeder)


@pytest.fixture(autouse=True)
def fresh_caches() -> Iterable[None]:
    _clear_caches(_CACHES)
    yield
    _clear_caches(_CACHES)


def test_defaults(monkeypatch) -> None:
    for name in ("MAX_READINGS_HISTORY", "RISKY_HR_THRESHOLD", "NORMAL_HR_MIN", "DEMO_MODE", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.max_history == 50
    assert settings.risky_threshold == 100
    assert settings.normal_min == 60
    assert settings.demo_mode is False
    assert settings.log_level == "INFO"
    assert build_default_feeder() is None


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("MAX_READINGS_HISTORY", "7")
    monkeypatch.setenv("RISKY_HR_THRESHOLD", "120")
    monkeypatch.setenv("NORMAL_HR_MIN", "50")
    monkeypatch.setenv("DEMO_MODE", "yes")
    monkeypatch.setenv("DATA_UPDATE_INTERVAL", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    store = build_default_store()
    service = build_default_service()
    feeder = build_default_feeder()

    assert store.max_history == 7
    assert store.thresholds.upper == 120
    assert store.thresholds.lower == 50
    assert service.store is store
    assert feeder is not None
    assert feeder.store is store
    assert feeder.interval_s == 2.5
    assert get_settings().log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["", "abc", "0", "-3"])
def test_malformed_capacity_falls_back_to_default(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("MAX_READINGS_HISTORY", raw)

    assert get_settings().max_history == 50


def test_settings_are_read_once(monkeypatch) -> None:
    monkeypatch.setenv("MAX_READINGS_HISTORY", "10")
    store = build_default_store()

    monkeypatch.setenv("MAX_READINGS_HISTORY", "20")

    assert build_default_store() is store
    assert store.max_history == 10


def test_inverted_thresholds_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("RISKY_HR_THRESHOLD", "55")
    monkeypatch.setenv("NORMAL_HR_MIN", "90")

    settings = get_settings()

    assert (settings.risky_threshold, settings.normal_min) == (100, 60)
    assert build_default_store().append(75).is_risky is False


def test_cors_origins(monkeypatch) -> None:
    monkeypatch.delenv("CORS_ORIGIN", raising=False)
    assert get_settings().cors_origins == ("*",)

    get_settings.cache_clear()
    monkeypatch.setenv("CORS_ORIGIN", " https://a.example , https://b.example ,")
    assert get_settings().cors_origins == ("https://a.example", "https://b.example")
