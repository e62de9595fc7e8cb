"""Tests for date/time utilities."""

from datetime import datetime

import pytest

from sp3orbit.utils.dates import (
    TAI_MINUS_GPS_SECONDS,
    datetime_from_mjd,
    gps_to_utc,
    gps_utc_offset,
    mjd_from_date,
    mjd_from_datetime,
    tai_to_gps,
    utc_to_gps,
)


class TestMJDConversions:
    """Test MJD conversion functions."""

    def test_mjd_from_known_date(self):
        """Test MJD calculation for known dates."""
        # January 1, 2000 00:00:00 = MJD 51544
        assert mjd_from_date(2000, 1, 1) == pytest.approx(51544.0)

    def test_gps_epoch(self):
        assert mjd_from_date(1980, 1, 6) == pytest.approx(44244.0)

    def test_fraction_of_day(self):
        assert mjd_from_datetime(datetime(2000, 1, 1, 12)) == pytest.approx(51544.5)

    def test_mjd_roundtrip(self):
        """Test MJD conversion roundtrip."""
        original = datetime(2024, 6, 15, 12, 30, 45)
        result = datetime_from_mjd(mjd_from_datetime(original))
        assert abs((result - original).total_seconds()) < 1e-3


class TestLeapSeconds:
    """Test GPS - UTC handling."""

    def test_before_first_leap_second(self):
        assert gps_utc_offset(datetime(1981, 6, 30, 23, 59, 59)) == 0

    def test_offset_2017(self):
        assert gps_utc_offset(datetime(2016, 12, 31, 23, 59, 59)) == 17
        assert gps_utc_offset(datetime(2017, 1, 1)) == 18

    def test_utc_to_gps(self):
        assert utc_to_gps(datetime(2020, 1, 1)) == datetime(2020, 1, 1, 0, 0, 18)

    def test_gps_to_utc_roundtrip(self):
        for utc in (datetime(2005, 6, 1), datetime(2017, 1, 1), datetime(2020, 1, 1, 12)):
            assert gps_to_utc(utc_to_gps(utc)) == utc

    def test_tai_to_gps(self):
        assert TAI_MINUS_GPS_SECONDS == 19.0
        assert tai_to_gps(datetime(2020, 1, 1, 0, 0, 37)) == datetime(2020, 1, 1, 0, 0, 18)
