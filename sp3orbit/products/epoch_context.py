"""
Per-file parsing context of an SP3 file.

The context carries everything an SP3 data record needs but does not contain
itself: the epoch of the enclosing ``*`` block (already in GPS time), the
frame rotation and angular velocity, the CM2CE correction of that epoch and
the satellite of the most recent position record.

The context is immutable; decoders return an updated copy.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum

import numpy as np

from sp3orbit.frames.gravity import GravityField
from sp3orbit.frames.rotation import EarthRotation, Rotation
from sp3orbit.utils.dates import GPS_EPOCH, tai_to_gps, utc_to_gps


class TimeSystem(str, Enum):
    """Time system declared in the %c header line."""
    GPS = "GPS"
    UTC = "UTC"
    TAI = "TAI"


def normalize_epoch(
    time: datetime,
    time_system: TimeSystem,
    leap_second: bool = False,
) -> datetime:
    """Convert an epoch given in ``time_system`` to GPS time.

    With ``leap_second`` the epoch was written as second 60 and ``time`` is
    one second earlier, so the offset is taken before the leap second.
    """
    if leap_second:
        return normalize_epoch(time, time_system) + timedelta(seconds=1)
    if time_system == TimeSystem.UTC:
        return utc_to_gps(time)
    if time_system == TimeSystem.TAI:
        return tai_to_gps(time)
    return time


@dataclass(frozen=True, eq=False)
class EpochContext:
    """State shared by the records of one SP3 file."""

    time: datetime = GPS_EPOCH
    time_system: TimeSystem = TimeSystem.GPS
    rotation: Rotation = field(default_factory=Rotation.identity)
    angular_velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    cm2ce_correction: np.ndarray = field(default_factory=lambda: np.zeros(3))
    current_satellite: str | None = None
    satellite_ids: tuple[str, ...] = ()
    satellite_accuracies: tuple[int, ...] = ()

    def with_time_system(self, time_system: TimeSystem) -> "EpochContext":
        return replace(self, time_system=time_system)

    def with_satellite(self, satellite_id: str) -> "EpochContext":
        return replace(self, current_satellite=satellite_id)

    def with_listed_satellites(self, satellite_ids: list[str]) -> "EpochContext":
        return replace(self, satellite_ids=self.satellite_ids + tuple(satellite_ids))

    def with_listed_accuracies(self, accuracies: list[int]) -> "EpochContext":
        return replace(
            self, satellite_accuracies=self.satellite_accuracies + tuple(accuracies)
        )

    def for_epoch(
        self,
        civil_time: datetime,
        earth_rotation: EarthRotation | None = None,
        gravity_field: GravityField | None = None,
        leap_second: bool = False,
    ) -> "EpochContext":
        """Context of a new epoch block.

        Normalizes the epoch to GPS time and queries the providers once:
        the gravity field for the CM2CE correction and, if configured, the
        earth rotation for the TRF -> CRF rotation and angular velocity.

        Args:
            civil_time: Epoch as written in the file
            earth_rotation: Optional rotation provider
            gravity_field: Optional degree-1 gravity field provider
            leap_second: ``civil_time`` is one second before a second-60 epoch

        Returns:
            Updated context
        """
        time = normalize_epoch(civil_time, self.time_system, leap_second)

        if gravity_field is not None:
            cm2ce = gravity_field.spherical_harmonics_degree1(time).cm2ce_correction()
        else:
            cm2ce = np.zeros(3)

        rotation = self.rotation
        angular_velocity = self.angular_velocity
        if earth_rotation is not None:
            rotation = Rotation(np.asarray(earth_rotation.rotation_matrix(time), dtype=float)).inverse()
            angular_velocity = np.asarray(earth_rotation.rotation_axis(time), dtype=float)

        return replace(
            self,
            time=time,
            rotation=rotation,
            angular_velocity=angular_velocity,
            cm2ce_correction=cm2ce,
        )

    def transform_position(self, position: np.ndarray) -> np.ndarray:
        """Shift to the center of mass and rotate into the output frame."""
        return self.rotation.rotate(np.asarray(position, dtype=float) - self.cm2ce_correction)

    def transform_velocity(self, velocity: np.ndarray, position: np.ndarray) -> np.ndarray:
        """Rotate a velocity, adding the frame rotation term at ``position``.

        ``position`` must already be in the output frame.
        """
        return self.rotation.rotate(velocity) + np.cross(self.angular_velocity, position)

    def transform_covariance(self, covariance: np.ndarray) -> np.ndarray:
        return self.rotation.rotate(covariance)

    def first_accurate_satellite(self) -> str | None:
        """First listed satellite with an orbit accuracy above zero."""
        for satellite_id, accuracy in zip(self.satellite_ids, self.satellite_accuracies):
            if accuracy > 0:
                return satellite_id
        return None


def epoch_datetime(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    second: float,
) -> datetime:
    """Build an epoch; seconds may be fractional or reach 60."""
    return datetime(year, month, day, hour, minute) + timedelta(seconds=second)
