"""
Degree-1 gravity field providers for the CM2CE correction.

SP3 orbits usually refer to the center of the Earth's figure. The shift to the
center of mass follows from the degree-1 spherical harmonic coefficients
(fully normalized) of a time-variable gravity field:

    cm2ce = sqrt(3) * R * (c11, s11, c10)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol

import numpy as np

from sp3orbit.core.exceptions import ConfigurationError
from sp3orbit.utils.dates import mjd_from_datetime
from sp3orbit.utils.logging import get_logger


logger = get_logger(__name__)


# GRS80 / IERS reference radius (meters)
DEFAULT_REFERENCE_RADIUS = 6378136.3


@dataclass(frozen=True)
class Degree1Harmonics:
    """Degree 0/1 spherical harmonic coefficients at one epoch."""

    reference_radius: float
    c00: float = 0.0
    c10: float = 0.0
    c11: float = 0.0
    s11: float = 0.0

    def cm2ce_correction(self) -> np.ndarray:
        """Center-of-figure to center-of-mass shift in meters."""
        return math.sqrt(3.0) * self.reference_radius * np.array(
            [self.c11, self.s11, self.c10]
        )


class GravityField(Protocol):
    """Gravity field provider queried once per epoch."""

    def spherical_harmonics_degree1(self, time: datetime) -> Degree1Harmonics:
        ...


class ConstantDegree1Field:
    """Time-invariant degree-1 coefficients."""

    def __init__(
        self,
        c10: float = 0.0,
        c11: float = 0.0,
        s11: float = 0.0,
        c00: float = 0.0,
        reference_radius: float = DEFAULT_REFERENCE_RADIUS,
    ):
        self._harmonics = Degree1Harmonics(
            reference_radius=reference_radius,
            c00=c00,
            c10=c10,
            c11=c11,
            s11=s11,
        )

    def spherical_harmonics_degree1(self, time: datetime) -> Degree1Harmonics:
        return self._harmonics


class Degree1SeriesField:
    """Degree-1 coefficients interpolated from a time series.

    The series file holds whitespace-separated rows ``mjd c10 c11 s11``;
    lines starting with ``#`` are comments. Values are interpolated linearly
    and held constant outside the covered interval.
    """

    def __init__(
        self,
        mjd: np.ndarray,
        coefficients: np.ndarray,
        reference_radius: float = DEFAULT_REFERENCE_RADIUS,
    ):
        if len(mjd) == 0:
            raise ConfigurationError("Degree-1 series is empty")
        order = np.argsort(mjd)
        self.mjd = np.asarray(mjd, dtype=float)[order]
        self.coefficients = np.asarray(coefficients, dtype=float)[order]
        self.reference_radius = reference_radius

    @classmethod
    def from_file(
        cls,
        path: Path | str,
        reference_radius: float = DEFAULT_REFERENCE_RADIUS,
    ) -> "Degree1SeriesField":
        path = Path(path)
        try:
            data = np.loadtxt(path, comments="#", ndmin=2)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Cannot read degree-1 series {path}: {e}") from e
        if data.shape[1] < 4:
            raise ConfigurationError(
                f"Degree-1 series {path} needs 4 columns (mjd c10 c11 s11), got {data.shape[1]}"
            )

        logger.info("Read degree-1 series", path=str(path), epochs=len(data))
        return cls(data[:, 0], data[:, 1:4], reference_radius)

    def spherical_harmonics_degree1(self, time: datetime) -> Degree1Harmonics:
        mjd = mjd_from_datetime(time)
        c10, c11, s11 = (
            float(np.interp(mjd, self.mjd, self.coefficients[:, i])) for i in range(3)
        )
        return Degree1Harmonics(
            reference_radius=self.reference_radius,
            c10=c10,
            c11=c11,
            s11=s11,
        )


def create_gravity_field(
    model: str,
    reference_radius: float = DEFAULT_REFERENCE_RADIUS,
    c00: float = 0.0,
    c10: float = 0.0,
    c11: float = 0.0,
    s11: float = 0.0,
    path: Path | str | None = None,
) -> GravityField | None:
    """Create a gravity field provider by name ('none', 'constant', 'series')."""
    name = model.lower()
    if name == "none":
        return None
    if name == "constant":
        return ConstantDegree1Field(
            c10=c10, c11=c11, s11=s11, c00=c00, reference_radius=reference_radius
        )
    if name == "series":
        if path is None:
            raise ConfigurationError("Degree-1 series model needs a file path")
        return Degree1SeriesField.from_file(path, reference_radius)
    raise ConfigurationError(f"Unknown gravity field model: {model}")
