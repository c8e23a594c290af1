"""
Configuration loader for YAML files.

Loads and validates configuration from YAML files into Pydantic models.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from demandscan.core.errors import ConfigError

from .models import AppConfig

DEFAULT_CONFIG_PATH = Path("configs/app.yaml")

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dictionary.

    Raises:
        ConfigError: If file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}", path=path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if data is not None else {}
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML in {path}",
            path=path,
            details=str(e),
        ) from e
    except OSError as e:
        raise ConfigError(
            f"Cannot read {path}",
            path=path,
            details=str(e),
        ) from e


def _expand_env_vars(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} in string values."""

    def replacer(match: re.Match[str]) -> str:
        return os.environ.get(match.group(1), match.group(2) or "")

    def expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _ENV_PATTERN.sub(replacer, value)
        elif isinstance(value, dict):
            return {k: expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [expand_value(item) for item in value]
        return value

    return expand_value(data)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply well-known environment variables on top of file values."""
    database_url = os.environ.get("DATABASE_URL")
    if database_url:
        data.setdefault("database", {})
        data["database"]["url"] = database_url

    resend_key = os.environ.get("RESEND_API_KEY")
    if resend_key:
        notifications = data.setdefault("notifications", {})
        notifications.setdefault("email", {})
        notifications["email"].setdefault("api_key", resend_key)

    return data


def load_app_config(
    path: Path | str | None = None,
    expand_env: bool = True,
) -> AppConfig:
    """Load application configuration from YAML file.

    Args:
        path: Path to app.yaml (default: configs/app.yaml)
        expand_env: Whether to expand environment variables

    Returns:
        Validated AppConfig instance

    Raises:
        ConfigError: If configuration is invalid
    """
    path = DEFAULT_CONFIG_PATH if path is None else Path(path)

    data: dict[str, Any] = _load_yaml_file(path) if path.exists() else {}

    if expand_env:
        data = _expand_env_vars(data)
        data = _apply_env_overrides(data)

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid app configuration in {path}",
            path=path,
            details=str(e),
        ) from e

    if not config.database.url.strip():
        raise ConfigError("Database URL is not configured", path=path)

    return config


def validate_app_config_file(path: Path | str) -> list[str]:
    """Validate an app configuration file without loading it.

    Returns:
        List of validation error messages (empty if valid)
    """
    path = Path(path)
    errors: list[str] = []

    try:
        data = _load_yaml_file(path)
    except ConfigError as e:
        errors.append(str(e))
        return errors

    try:
        AppConfig.model_validate(data)
    except ValidationError as e:
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

    return errors


DEFAULT_APP_YAML = """\
# DemandScan Configuration

data_dir: data

database:
  url: ${DATABASE_URL:-sqlite:///data/demandscan.db}
  echo: false

logging:
  level: INFO
  file: logs/demandscan.log
  json_format: true
  rich_console: true

crawler:
  user_agent: "DemandScanBot/1.0 (respectful-bot)"
  robots_agent_token: demandscan
  robots_fail_open: true
  rate_limit_ms: 3000
  timeout_seconds: 30

detection:
  score_per_match: 15
  max_score: 100
  snippet_context_chars: 150

notifications:
  email:
    api_key: ${RESEND_API_KEY:-}
    from_address: "Lead Alerts <alerts@demandscan.local>"
  whatsapp:
    max_leads_in_message: 3

api:
  host: 127.0.0.1
  port: 8000
"""
