"""Configuration management for storage deployments."""

from .models import ConnectionSettings, DeploymentSettings
from .parser import (
    ConfigValidationError,
    build_settings,
    load_settings_file,
    parse_connection_string,
)

__all__ = [
    "ConnectionSettings",
    "DeploymentSettings",
    "ConfigValidationError",
    "build_settings",
    "load_settings_file",
    "parse_connection_string",
]
