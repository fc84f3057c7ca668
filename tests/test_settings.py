from __future__ import annotations

from decimal import Decimal

import pytest

from core.exceptions import ValidationError
from infra import path as path_mod
from infra.settings import EngineSettings, load_settings


def test_load_settings_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("GIG_DATA_DIR", str(tmp_path))

    settings = load_settings({})

    assert settings.database_url == f"sqlite:///{(tmp_path / 'gig_ledger.db').as_posix()}"
    assert settings.mileage_rate == Decimal("0.70")
    assert settings.default_tax_rate == 23
    assert settings.multi_day_window_days == 7
    assert settings.google_maps_api_key is None
    assert settings.distance_timeout_seconds == 10.0
    assert path_mod.default_db_path() == tmp_path / "gig_ledger.db"


def test_load_settings_reads_overrides():
    settings = load_settings(
        {
            "GIG_DATABASE_URL": "sqlite:///:memory:",
            "GIG_MILEAGE_RATE": "0.67",
            "GIG_DEFAULT_TAX_RATE": "30",
            "GIG_MULTI_DAY_WINDOW_DAYS": "3",
            "GOOGLE_MAPS_API_KEY": " abc ",
            "GIG_DISTANCE_TIMEOUT": "2.5",
        }
    )

    assert settings == EngineSettings(
        database_url="sqlite:///:memory:",
        mileage_rate=Decimal("0.67"),
        default_tax_rate=30,
        multi_day_window_days=3,
        google_maps_api_key="abc",
        distance_timeout_seconds=2.5,
    )
    policy = settings.tax_policy()
    assert policy.mileage_rate == Decimal("0.67")
    assert policy.fallback_tax_rate == 30


@pytest.mark.parametrize(
    "key, value",
    [
        ("GIG_MILEAGE_RATE", "cheap"),
        ("GIG_MILEAGE_RATE", "-1"),
        ("GIG_DEFAULT_TAX_RATE", "101"),
        ("GIG_MULTI_DAY_WINDOW_DAYS", "0"),
        ("GIG_DISTANCE_TIMEOUT", "0"),
    ],
)
def test_load_settings_rejects_invalid_values(key, value):
    with pytest.raises(ValidationError) as exc:
        load_settings({"GIG_DATABASE_URL": "sqlite:///:memory:", key: value})

    assert exc.value.code == "SETTINGS_INVALID"
    assert key in str(exc.value)
