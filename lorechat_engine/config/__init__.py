"""Configuration loading and validation."""

from .models import (
    SystemConfig,
    PathsConfig,
    DatabaseConfig,
    ImportConfig,
)
from .loader import ConfigLoader, ConfigLoadError, ConfigValidationError

__all__ = [
    "SystemConfig",
    "PathsConfig",
    "DatabaseConfig",
    "ImportConfig",
    "ConfigLoader",
    "ConfigLoadError",
    "ConfigValidationError",
]
