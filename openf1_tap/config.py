"""Configuration loader for the OpenF1 tap."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any

from dotenv import load_dotenv
import yaml

from openf1_tap.data.endpoints import BASE_URL
from openf1_tap.output import DEFAULT_HIGH_WATER_MARK, LINE, OUTPUT_FORMATS


@dataclass(frozen=True)
class OpenF1Config:
    """OpenF1 API configuration."""

    base_url: str
    timeout_seconds: float


@dataclass(frozen=True)
class OutputConfig:
    """Output file configuration."""

    format: str
    high_water_mark: int


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str | None


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    openf1: OpenF1Config
    output: OutputConfig
    log: LoggingConfig


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _base_url_from_env(default: str) -> str:
    return os.environ.get("OPENF1_BASE_URL", "").strip() or default


def default_config() -> AppConfig:
    """Built-in configuration used when no config file is given."""
    load_dotenv()
    return AppConfig(
        openf1=OpenF1Config(base_url=_base_url_from_env(BASE_URL), timeout_seconds=10),
        output=OutputConfig(format=LINE, high_water_mark=DEFAULT_HIGH_WATER_MARK),
        log=LoggingConfig(level="INFO", log_dir=None),
    )


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """Load application configuration from a YAML file."""
    load_dotenv()
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    openf1_section = _require_key(data, "openf1", "openf1")
    output_section = _require_key(data, "output", "output")
    logging_section = _require_key(data, "logging", "logging")

    if not isinstance(openf1_section, dict):
        raise ValueError("'openf1' config must be a mapping")
    if not isinstance(output_section, dict):
        raise ValueError("'output' config must be a mapping")
    if not isinstance(logging_section, dict):
        raise ValueError("'logging' config must be a mapping")

    openf1 = OpenF1Config(
        base_url=_base_url_from_env(_require_key(openf1_section, "base_url", "openf1")),
        timeout_seconds=_require_key(openf1_section, "timeout_seconds", "openf1"),
    )

    output = OutputConfig(
        format=_require_key(output_section, "format", "output"),
        high_water_mark=_require_key(output_section, "high_water_mark", "output"),
    )
    if output.format not in OUTPUT_FORMATS:
        raise ValueError(f"'output.format' must be one of: {', '.join(OUTPUT_FORMATS)}")

    logging = LoggingConfig(
        level=_require_key(logging_section, "level", "logging"),
        log_dir=_require_key(logging_section, "log_dir", "logging"),
    )

    return AppConfig(openf1=openf1, output=output, log=logging)
