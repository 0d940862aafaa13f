"""Settings file and connection string parsing."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from storage_deploy.utils.errors import ConfigurationError

from .models import ConnectionSettings, DeploymentSettings


# Connection string keys (lower-cased) mapped to ConnectionSettings fields
CONNECTION_KEYS = {
    "endpointurl": "endpoint_url",
    "region": "region",
    "accesskeyid": "access_key_id",
    "secretaccesskey": "secret_access_key",
    "sessiontoken": "session_token",
    "profile": "profile",
    "bucket": "bucket",
    "addressingstyle": "addressing_style",
}


class ConfigValidationError(ConfigurationError):
    """Exception raised when a settings file fails validation."""

    def __init__(self, message: str, errors: Optional[List[Dict]] = None):
        self.errors = errors or []
        super().__init__(message)

    def __str__(self) -> str:
        """Format validation errors for display."""
        if not self.errors:
            return self.message

        error_lines = [self.message, ""]
        for error in self.errors:
            location = " -> ".join(str(loc) for loc in error.get("loc", []))
            msg = error.get("msg", "Unknown error")
            error_lines.append(f"  - {location}: {msg}")

        return "\n".join(error_lines)


def _validation_errors(error: ValidationError) -> List[Dict]:
    return [{"loc": list(e["loc"]), "msg": e["msg"]} for e in error.errors()]


def parse_connection_string(connection_string: Optional[str]) -> ConnectionSettings:
    """Parse ``Key=Value;Key=Value`` pairs into connection settings.

    Keys are case-insensitive. Values may contain ``=`` (only the first one
    splits the pair). Empty segments, such as a trailing ``;``, are ignored.

    Raises:
        ConfigurationError: If the string is empty, a pair is malformed or a
            key is not recognised
    """
    if not connection_string or not connection_string.strip():
        raise ConfigurationError(
            "Missing connection string",
            suggestions=[
                "Pass --connection-string or set STORAGE_DEPLOY_CONNECTION_STRING",
                "Format: EndpointUrl=https://...;AccessKeyId=...;SecretAccessKey=...;Bucket=..."
            ]
        )

    values: Dict[str, Any] = {}
    for segment in connection_string.split(";"):
        segment = segment.strip()
        if not segment:
            continue

        key, sep, value = segment.partition("=")
        if not sep or not key.strip():
            raise ConfigurationError(f"Malformed connection string segment: {segment!r}")

        field_name = CONNECTION_KEYS.get(key.strip().lower())
        if field_name is None:
            raise ConfigurationError(
                f"Unknown connection string key: {key.strip()!r}",
                suggestions=[f"Supported keys: {', '.join(sorted(CONNECTION_KEYS))}"]
            )
        values[field_name] = value.strip()

    try:
        return ConnectionSettings(**values)
    except ValidationError as e:
        raise ConfigValidationError(
            "Connection string validation failed",
            _validation_errors(e)
        ) from e


def load_settings_file(config_path: str) -> Dict[str, Any]:
    """Load raw settings from a YAML file.

    Keys use the snake_case names of ``DeploymentSettings``; dashes are
    accepted too so that keys can mirror the command line flags.

    Raises:
        ConfigurationError: If the file is missing
        ConfigValidationError: If the YAML cannot be parsed or has unknown keys
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Failed to parse YAML: {e}")

    if not isinstance(data, dict):
        raise ConfigValidationError(f"Configuration file must contain a mapping: {path}")

    known = set(DeploymentSettings.model_fields)
    normalized = {}
    errors = []
    for key, value in data.items():
        name = str(key).replace("-", "_")
        if name not in known:
            errors.append({"loc": [key], "msg": "Unknown setting"})
            continue
        normalized[name] = value

    if errors:
        raise ConfigValidationError(
            f"Configuration validation failed with {len(errors)} error(s)",
            errors
        )

    return normalized


def build_settings(
    overrides: Dict[str, Any],
    config_path: Optional[str] = None
) -> DeploymentSettings:
    """Merge file values with command line overrides and validate.

    ``None`` overrides are treated as unset so file values and model
    defaults apply.
    """
    data: Dict[str, Any] = {}
    if config_path:
        data.update(load_settings_file(config_path))
    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return DeploymentSettings(**data)
    except ValidationError as e:
        raise ConfigValidationError(
            f"Settings validation failed with {e.error_count()} error(s)",
            _validation_errors(e)
        ) from e
