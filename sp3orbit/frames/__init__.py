"""Reference frame rotation and gravity field providers."""

from sp3orbit.frames.gravity import (
    DEFAULT_REFERENCE_RADIUS,
    ConstantDegree1Field,
    Degree1Harmonics,
    Degree1SeriesField,
    GravityField,
    create_gravity_field,
)
from sp3orbit.frames.rotation import (
    EARTH_ANGULAR_VELOCITY,
    EarthRotation,
    EarthRotationAngle,
    Rotation,
    create_earth_rotation,
    earth_rotation_angle,
)

__all__ = [
    # Gravity field
    "DEFAULT_REFERENCE_RADIUS",
    "ConstantDegree1Field",
    "Degree1Harmonics",
    "Degree1SeriesField",
    "GravityField",
    "create_gravity_field",
    # Rotation
    "EARTH_ANGULAR_VELOCITY",
    "EarthRotation",
    "EarthRotationAngle",
    "Rotation",
    "create_earth_rotation",
    "earth_rotation_angle",
]
