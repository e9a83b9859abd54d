"""Configuration loading helpers for ENS Hunter."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import structlog
from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError
from .models import ScanSettings

SETTINGS_FILENAME = "config.json"
HOME_ENV_VAR = "ENSHUNTER_HOME"

# environment variable -> settings field
ENV_OVERRIDES: dict[str, str] = {
    "INFURA_KEY": "infura_key",
    "WORKERS": "workers",
    "RATE_LIMIT": "rate_limit",
    "RETRIES": "retries",
    "TIMEOUT": "timeout",
}


def _read_file(path: Path) -> dict:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


@dataclass(slots=True)
class ConfigLocator:
    """Resolve the settings home (``~/.enshunter`` unless overridden)."""

    home_dir: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV_VAR)
        if self.home_dir is not None:
            root = Path(self.home_dir).expanduser()
        elif env_root:
            root = Path(env_root).expanduser()
        else:
            root = Path.home() / ".enshunter"
        self.home_dir = root.resolve()
        if self.logs_dir is None:
            self.logs_dir = self.home_dir / "logs"
        self.logs_dir = Path(self.logs_dir).expanduser().resolve()

    def ensure_directories(self) -> None:
        for directory in (self.home_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def settings_path(self) -> Path:
        return self.home_dir / SETTINGS_FILENAME


class ConfigRepository:
    """Repository encapsulating settings IO, env overrides and validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self.logger = structlog.get_logger("enshunter.config")

    def load_settings(self) -> ScanSettings:
        """Return file settings over built-in defaults; missing file means defaults."""

        path = self.locator.settings_path()
        if not path.exists():
            return ScanSettings()
        try:
            payload = _read_file(path)
            return ScanSettings.model_validate(payload)
        except (ValueError, PydanticValidationError) as exc:
            raise ValidationError(f"Invalid configuration file {path}: {exc}") from exc

    def save_settings(self, settings: ScanSettings) -> Path:
        self.locator.ensure_directories()
        path = self.locator.settings_path()
        _write_file(path, settings.model_dump(mode="json"))
        self.logger.info("settings_saved", path=str(path))
        return path

    def apply_environment(
        self, settings: ScanSettings, environ: Mapping[str, str] | None = None
    ) -> ScanSettings:
        """Layer environment variables (and a local ``.env``) over ``settings``.

        Integer variables that do not parse are ignored with a warning.
        """

        if environ is None:
            load_dotenv()
            environ = os.environ
        updates: dict[str, object] = {}
        for env_name, field_name in ENV_OVERRIDES.items():
            raw = (environ.get(env_name) or "").strip()
            if not raw:
                continue
            if field_name == "infura_key":
                updates[field_name] = raw
                continue
            try:
                updates[field_name] = int(raw)
            except ValueError:
                self.logger.warning("env_override_ignored", variable=env_name, value=raw)
        if not updates:
            return settings
        try:
            return ScanSettings.model_validate({**settings.model_dump(), **updates})
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid environment configuration: {exc}") from exc

    def resolve_settings(self, environ: Mapping[str, str] | None = None) -> ScanSettings:
        return self.apply_environment(self.load_settings(), environ)


__all__ = ["ConfigLocator", "ConfigRepository", "ENV_OVERRIDES", "SETTINGS_FILENAME"]
