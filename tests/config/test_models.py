from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from enshunter.config import ScanConfig, ScanSettings
from enshunter.errors import ValidationError


def test_settings_defaults() -> None:
    settings = ScanSettings()
    assert settings.model_dump() == {
        "infura_key": "",
        "workers": 5,
        "rate_limit": 100,
        "retries": 3,
        "timeout": 30,
    }


@pytest.mark.parametrize(
    "overrides",
    [{"workers": 0}, {"rate_limit": -1}, {"retries": -2}, {"timeout": 0}],
)
def test_settings_reject_out_of_range(overrides: dict) -> None:
    with pytest.raises(PydanticValidationError):
        ScanSettings(**overrides)


def test_scan_config_is_frozen(scan_config) -> None:
    config = scan_config()
    with pytest.raises(PydanticValidationError):
        config.workers = 10  # type: ignore[misc]


def test_scan_config_from_settings_applies_overrides() -> None:
    settings = ScanSettings(infura_key="file-key", workers=8, rate_limit=250)
    config = ScanConfig.from_settings(settings, workers=2, retries=None, input_path="in.txt")
    assert config.infura_key == "file-key"
    assert config.workers == 2
    assert config.retries == 3
    assert config.rate_limit_ms == 250
    assert config.rate_limit_interval == pytest.approx(0.25)
    assert config.input_path == Path("in.txt")


def test_scan_config_invalid_override_raises_validation_error() -> None:
    with pytest.raises(ValidationError):
        ScanConfig.from_settings(ScanSettings(), workers=0)


def test_scan_config_suffix_must_start_with_dot() -> None:
    with pytest.raises(PydanticValidationError):
        ScanConfig(suffix="eth")


def test_to_settings_roundtrip() -> None:
    settings = ScanSettings(infura_key="k", workers=7, rate_limit=50, retries=1, timeout=12)
    assert ScanConfig.from_settings(settings).to_settings() == settings


def test_to_settings_keeps_sub_second_timeout_valid() -> None:
    config = ScanConfig(timeout_s=0.25)
    assert config.to_settings().timeout == 1
