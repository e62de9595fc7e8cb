"""
Custom exceptions for SP3-Orbit.

Provides a hierarchy of exceptions for different error conditions.
"""

from __future__ import annotations


class Sp3OrbitError(Exception):
    """Base exception for all SP3-Orbit errors."""

    pass


class ConfigurationError(Sp3OrbitError):
    """Configuration-related errors, detected before parsing starts."""

    pass


class StructuralError(Sp3OrbitError):
    """Malformed input that stops the processing of remaining files."""

    pass


class Sp3FormatError(StructuralError):
    """A fixed-width SP3 field could not be decoded."""

    def __init__(
        self,
        record: str,
        field_name: str,
        text: str,
        line_number: int | None = None,
    ):
        self.record = record
        self.field_name = field_name
        self.text = text
        self.line_number = line_number
        where = f" (line {line_number})" if line_number is not None else ""
        super().__init__(
            f"Invalid {field_name} field '{text}' in {record} record{where}"
        )


class MissingPositionError(StructuralError):
    """Velocity record without a preceding position record."""

    def __init__(self, satellite_id: str, message: str | None = None):
        self.satellite_id = satellite_id
        super().__init__(
            message or f"Velocity for {satellite_id} without a preceding position record"
        )


class InputStreamError(StructuralError):
    """Input stream could not be read or decoded."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Cannot read {source}: {message}")
