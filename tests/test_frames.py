"""Tests for rotation and gravity field providers."""

import math
from datetime import datetime
from pathlib import Path

import numpy as np
import pytest

from sp3orbit.core.exceptions import ConfigurationError
from sp3orbit.frames.gravity import (
    ConstantDegree1Field,
    Degree1Harmonics,
    Degree1SeriesField,
    create_gravity_field,
)
from sp3orbit.frames.rotation import (
    EARTH_ANGULAR_VELOCITY,
    EarthRotationAngle,
    Rotation,
    create_earth_rotation,
    earth_rotation_angle,
)


class TestRotation:
    """Tests for the Rotation wrapper."""

    def test_identity(self):
        rotation = Rotation.identity()
        assert rotation.is_identity
        np.testing.assert_array_equal(rotation.rotate(np.array([1.0, 2.0, 3.0])), [1.0, 2.0, 3.0])

    def test_inverse_undoes_rotation(self):
        rotation = Rotation.about_z(0.7)
        vector = np.array([1.0, -2.0, 3.0])
        np.testing.assert_allclose(rotation.inverse().rotate(rotation.rotate(vector)), vector)

    def test_matrix_similarity(self):
        rotation = Rotation.about_z(math.pi / 2)
        matrix = np.diag([1.0, 4.0, 9.0])
        np.testing.assert_allclose(rotation.rotate(matrix), np.diag([4.0, 1.0, 9.0]), atol=1e-15)

    def test_bad_shape(self):
        with pytest.raises(ValueError):
            Rotation.identity().rotate(np.zeros(4))


class TestEarthRotationAngle:
    """Tests for the simplified earth rotation provider."""

    def test_angle_at_j2000(self):
        # GPS - UTC = 13 s in 2000
        angle = earth_rotation_angle(datetime(2000, 1, 1, 12, 0, 13))
        assert angle == pytest.approx(2.0 * math.pi * 0.7790572732640, abs=1e-9)

    def test_matrix_is_orthogonal(self):
        matrix = EarthRotationAngle().rotation_matrix(datetime(2020, 1, 1))
        np.testing.assert_allclose(matrix @ matrix.T, np.eye(3), atol=1e-15)

    def test_axis(self):
        axis = EarthRotationAngle().rotation_axis(datetime(2020, 1, 1))
        np.testing.assert_array_equal(axis, [0.0, 0.0, EARTH_ANGULAR_VELOCITY])

    def test_factory(self):
        assert create_earth_rotation("none") is None
        assert isinstance(create_earth_rotation("ERA"), EarthRotationAngle)
        with pytest.raises(ConfigurationError):
            create_earth_rotation("iers2010")


class TestGravityField:
    """Tests for degree-1 providers."""

    def test_cm2ce_order(self):
        harmonics = Degree1Harmonics(reference_radius=2.0, c10=1.0, c11=2.0, s11=3.0)
        np.testing.assert_allclose(
            harmonics.cm2ce_correction(), math.sqrt(3.0) * 2.0 * np.array([2.0, 3.0, 1.0])
        )

    def test_constant_field(self):
        field = ConstantDegree1Field(c10=1e-10)
        harmonics = field.spherical_harmonics_degree1(datetime(2020, 1, 1))
        assert harmonics.c10 == 1e-10
        assert harmonics.c11 == 0.0

    def test_series_interpolation(self, tmp_path: Path):
        path = tmp_path / "degree1.txt"
        path.write_text(
            "# mjd c10 c11 s11\n"
            "58849.0 1e-10 2e-10 3e-10\n"
            "58851.0 3e-10 4e-10 5e-10\n"
        )
        field = Degree1SeriesField.from_file(path, reference_radius=1.0)

        harmonics = field.spherical_harmonics_degree1(datetime(2020, 1, 2))

        assert harmonics.c10 == pytest.approx(2e-10)
        assert harmonics.c11 == pytest.approx(3e-10)
        assert harmonics.s11 == pytest.approx(4e-10)

    def test_series_holds_outside_interval(self, tmp_path: Path):
        path = tmp_path / "degree1.txt"
        path.write_text("58849.0 1e-10 2e-10 3e-10\n58851.0 3e-10 4e-10 5e-10\n")
        field = Degree1SeriesField.from_file(path)

        harmonics = field.spherical_harmonics_degree1(datetime(2021, 1, 1))

        assert harmonics.c10 == pytest.approx(3e-10)

    def test_series_needs_four_columns(self, tmp_path: Path):
        path = tmp_path / "degree1.txt"
        path.write_text("58849.0 1e-10\n")
        with pytest.raises(ConfigurationError, match="4 columns"):
            Degree1SeriesField.from_file(path)

    def test_factory(self):
        assert create_gravity_field("none") is None
        field = create_gravity_field("constant", c11=1e-9)
        assert isinstance(field, ConstantDegree1Field)
        with pytest.raises(ConfigurationError):
            create_gravity_field("series")
        with pytest.raises(ConfigurationError):
            create_gravity_field("eigen6c4")
