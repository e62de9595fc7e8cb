"""Core configuration and exceptions."""

from sp3orbit.core.config import Settings, load_settings, validate_run
from sp3orbit.core.exceptions import (
    Sp3OrbitError,
    ConfigurationError,
    StructuralError,
    Sp3FormatError,
    MissingPositionError,
    InputStreamError,
)

__all__ = [
    "Settings",
    "load_settings",
    "validate_run",
    "Sp3OrbitError",
    "ConfigurationError",
    "StructuralError",
    "Sp3FormatError",
    "MissingPositionError",
    "InputStreamError",
]
