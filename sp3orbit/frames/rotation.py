"""
Reference frame rotations.

Provides:
- Rotation: 3x3 orthogonal transform applied to vectors and covariance matrices
- EarthRotation: interface of TRF <-> CRF rotation providers
- EarthRotationAngle: z-axis rotation by the IERS Earth Rotation Angle
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

import numpy as np

from sp3orbit.core.exceptions import ConfigurationError
from sp3orbit.utils.dates import gps_to_utc, mjd_from_datetime, MJD_OFFSET


# Nominal Earth angular velocity (rad/s), IERS conventions
EARTH_ANGULAR_VELOCITY = 7.292115e-5

# Julian Date of J2000.0
J2000_JD = 2451545.0


@dataclass(frozen=True, eq=False)
class Rotation:
    """Orthogonal 3x3 rotation.

    ``rotate`` maps a vector ``v`` to ``R @ v`` and a matrix ``C`` to the
    similarity transform ``R @ C @ R.T``.
    """

    matrix: np.ndarray = field(default_factory=lambda: np.eye(3))

    @classmethod
    def identity(cls) -> "Rotation":
        return cls(np.eye(3))

    @classmethod
    def about_z(cls, angle: float) -> "Rotation":
        """Rotation of the coordinate frame by ``angle`` radians about z."""
        c, s = math.cos(angle), math.sin(angle)
        return cls(np.array([
            [c, s, 0.0],
            [-s, c, 0.0],
            [0.0, 0.0, 1.0],
        ]))

    def inverse(self) -> "Rotation":
        return Rotation(self.matrix.T.copy())

    def rotate(self, value: np.ndarray) -> np.ndarray:
        """Rotate a 3-vector or a 3x3 matrix."""
        value = np.asarray(value, dtype=float)
        if value.shape == (3,):
            return self.matrix @ value
        if value.shape == (3, 3):
            return self.matrix @ value @ self.matrix.T
        raise ValueError(f"Cannot rotate array of shape {value.shape}")

    @property
    def is_identity(self) -> bool:
        return bool(np.array_equal(self.matrix, np.eye(3)))


class EarthRotation(Protocol):
    """Rotation provider between celestial (CRF) and terrestrial (TRF) frames.

    ``rotation_matrix`` maps CRF to TRF coordinates; ``rotation_axis`` is the
    angular velocity vector (rad/s) in the CRF.
    """

    def rotation_matrix(self, time: datetime) -> np.ndarray:
        ...

    def rotation_axis(self, time: datetime) -> np.ndarray:
        ...


def earth_rotation_angle(time: datetime) -> float:
    """Earth Rotation Angle (radians) for a GPS time, taking UT1 = UTC."""
    jd_ut1 = mjd_from_datetime(gps_to_utc(time)) + MJD_OFFSET
    days = jd_ut1 - J2000_JD
    turns = 0.7790572732640 + 1.00273781191135448 * days
    return 2.0 * math.pi * (turns % 1.0)


class EarthRotationAngle:
    """Simplified Earth rotation: spin about the z axis only.

    Ignores precession, nutation and polar motion, so it is suitable for
    quick-look frame changes, not for precise orbit work.
    """

    def __init__(self, angular_velocity: float = EARTH_ANGULAR_VELOCITY):
        self.angular_velocity = angular_velocity

    def rotation_matrix(self, time: datetime) -> np.ndarray:
        return Rotation.about_z(earth_rotation_angle(time)).matrix

    def rotation_axis(self, time: datetime) -> np.ndarray:
        return np.array([0.0, 0.0, self.angular_velocity])


def create_earth_rotation(model: str) -> EarthRotation | None:
    """Create a rotation provider by name ('none' or 'era')."""
    name = model.lower()
    if name == "none":
        return None
    if name == "era":
        return EarthRotationAngle()
    raise ConfigurationError(f"Unknown earth rotation model: {model}")
