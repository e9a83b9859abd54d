"""Pydantic models used across the ENS Hunter configuration flow."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError

DEFAULT_SUFFIX = ".eth"
DEFAULT_INPUT = Path("esn.txt")
DEFAULT_OUTPUT = Path("ens_available.txt")


class ScanSettings(BaseModel):
    """Persisted defaults, stored as ``config.json`` in the settings home.

    Field names match the on-disk keys so existing config files keep loading.
    ``rate_limit`` is expressed in milliseconds and ``timeout`` in seconds.
    """

    infura_key: str = ""
    workers: int = 5
    rate_limit: int = 100
    retries: int = 3
    timeout: int = 30

    @field_validator("infura_key", mode="before")
    @classmethod
    def _coerce_key(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @model_validator(mode="after")
    def _validate_ranges(self) -> "ScanSettings":
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        if self.rate_limit < 0:
            raise ValueError("rate_limit must be >= 0")
        if self.retries < 0:
            raise ValueError("retries must be >= 0")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        return self


class ScanConfig(BaseModel):
    """Immutable run configuration handed to the scan pipeline."""

    model_config = ConfigDict(frozen=True)

    infura_key: str = ""
    workers: int = Field(default=5, ge=1)
    rate_limit_ms: int = Field(default=100, ge=0)
    retries: int = Field(default=3, ge=0)
    timeout_s: float = Field(default=30.0, gt=0)
    suffix: str = DEFAULT_SUFFIX
    verbose: bool = False
    input_path: Path = DEFAULT_INPUT
    output_path: Path = DEFAULT_OUTPUT

    @field_validator("suffix")
    @classmethod
    def _validate_suffix(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("."):
            raise ValueError("suffix must start with '.'")
        return value

    @field_validator("input_path", "output_path", mode="before")
    @classmethod
    def _coerce_paths(cls, value: Any) -> Path:
        return Path(value)

    @property
    def rate_limit_interval(self) -> float:
        """Pacing interval in seconds."""

        return self.rate_limit_ms / 1000.0

    @classmethod
    def from_settings(cls, settings: ScanSettings, **overrides: Any) -> "ScanConfig":
        """Merge persisted settings with run options, raising our ValidationError."""

        payload: dict[str, Any] = {
            "infura_key": settings.infura_key,
            "workers": settings.workers,
            "rate_limit_ms": settings.rate_limit,
            "retries": settings.retries,
            "timeout_s": settings.timeout,
        }
        payload.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return cls(**payload)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid configuration: {exc}") from exc

    def to_settings(self) -> ScanSettings:
        return ScanSettings(
            infura_key=self.infura_key,
            workers=self.workers,
            rate_limit=self.rate_limit_ms,
            retries=self.retries,
            timeout=max(1, int(self.timeout_s)),
        )


__all__ = [
    "DEFAULT_INPUT",
    "DEFAULT_OUTPUT",
    "DEFAULT_SUFFIX",
    "ScanConfig",
    "ScanSettings",
]
