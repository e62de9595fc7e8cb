"""Utility modules for time scales and logging."""

from sp3orbit.utils.dates import (
    GPS_EPOCH,
    TAI_MINUS_GPS_SECONDS,
    mjd_from_date,
    mjd_from_datetime,
    datetime_from_mjd,
    gps_utc_offset,
    utc_to_gps,
    gps_to_utc,
    tai_to_gps,
)
from sp3orbit.utils.logging import get_logger, setup_logging

__all__ = [
    # Time scales
    "GPS_EPOCH",
    "TAI_MINUS_GPS_SECONDS",
    "mjd_from_date",
    "mjd_from_datetime",
    "datetime_from_mjd",
    "gps_utc_offset",
    "utc_to_gps",
    "gps_to_utc",
    "tai_to_gps",
    # Logging
    "get_logger",
    "setup_logging",
]
