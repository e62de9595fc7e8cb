"""
Configuration management for SP3-Orbit.

Uses Pydantic for validation and supports YAML configuration files
with environment variable expansion.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal, Sequence

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sp3orbit.core.exceptions import ConfigurationError


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in strings."""
    if isinstance(value, str):
        return os.path.expandvars(value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(v) for v in value]
    return value


class OutputConfig(BaseModel):
    """Output file configuration."""

    orbit: Path | None = None
    clock: Path | None = None
    covariance: Path | None = None


class ConversionConfig(BaseModel):
    """Satellite selection."""

    # e.g. L09 for GRACE-A; empty: first satellite; <all>: every satellite
    satellite_identifier: str = ""


class EarthRotationConfig(BaseModel):
    """TRF -> CRF rotation model."""

    model: Literal["none", "era"] = "none"


class GravityFieldConfig(BaseModel):
    """Degree-1 gravity field for the CM2CE correction."""

    model: Literal["none", "constant", "series"] = "none"
    reference_radius: float = 6378136.3
    c00: float = 0.0
    c10: float = 0.0
    c11: float = 0.0
    s11: float = 0.0
    path: Path | None = None

    @model_validator(mode="after")
    def check_series_path(self) -> "GravityFieldConfig":
        if self.model == "series" and self.path is None:
            raise ValueError("gravity_field.path is required for model 'series'")
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_dir: Path = Field(default=Path("logs"))
    log_to_file: bool = False
    log_to_console: bool = True
    json_format: bool = False


class Settings(BaseSettings):
    """Main settings container."""

    model_config = SettingsConfigDict(
        env_prefix="SP3ORBIT_",
        env_nested_delimiter="__",
    )

    output: OutputConfig = Field(default_factory=OutputConfig)
    conversion: ConversionConfig = Field(default_factory=ConversionConfig)
    earth_rotation: EarthRotationConfig = Field(default_factory=EarthRotationConfig)
    gravity_field: GravityFieldConfig = Field(default_factory=GravityFieldConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML file.

    Args:
        config_path: Path to YAML configuration file.
                    If None, tries default locations.

    Returns:
        Settings instance.
    """
    search_paths = []

    if config_path:
        search_paths.append(Path(config_path))
    else:
        search_paths.extend([
            Path("config/sp3orbit.local.yaml"),
            Path("config/sp3orbit.yaml"),
            Path.home() / ".sp3orbit" / "settings.yaml",
        ])

    config_data: dict[str, Any] = {}

    for path in search_paths:
        if path.exists():
            with open(path) as f:
                raw_data = yaml.safe_load(f)
                if raw_data:
                    config_data = expand_env_vars(raw_data)
            break

    return Settings(**config_data)


def _is_writable_target(path: Path) -> bool:
    """Whether ``path`` can be created or overwritten."""
    if path.exists():
        return path.is_file() and os.access(path, os.W_OK)
    parent = path.parent
    # The writer creates missing directories below the first existing one
    while not parent.exists():
        if parent == parent.parent:
            return False
        parent = parent.parent
    return parent.is_dir() and os.access(parent, os.W_OK)


def validate_run(inputs: Sequence[Path | str], settings: Settings) -> None:
    """Check run configuration before any file is parsed.

    Raises:
        ConfigurationError: No inputs, no orbit output, or an output
            target that cannot be written
    """
    if not inputs:
        raise ConfigurationError("No input files given")

    if settings.output.orbit is None:
        raise ConfigurationError("No orbit output file given")

    for name in ("orbit", "clock", "covariance"):
        target = getattr(settings.output, name)
        if target is not None and not _is_writable_target(Path(target)):
            raise ConfigurationError(f"Output file for {name} is not writable: {target}")
