"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import DEFAULT_INPUT, DEFAULT_OUTPUT, DEFAULT_SUFFIX, ScanConfig, ScanSettings

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "DEFAULT_INPUT",
    "DEFAULT_OUTPUT",
    "DEFAULT_SUFFIX",
    "ScanConfig",
    "ScanSettings",
]
