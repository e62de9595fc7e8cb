"""
Date and time utilities for SP3 processing.

Provides conversions between the time scales found in SP3 files:
- Modified Julian Date (MJD)
- GPS time, UTC and TAI

All datetimes are naive; the time scale is implied by the caller.
"""

from __future__ import annotations

from bisect import bisect_right
from datetime import datetime, timedelta


# Constants
GPS_EPOCH = datetime(1980, 1, 6)
GPS_EPOCH_MJD = 44244.0  # January 6, 1980
MJD_OFFSET = 2400000.5   # Offset from JD to MJD
MJD_EPOCH = datetime(1858, 11, 17)

# TAI - GPS is fixed since the GPS epoch
TAI_MINUS_GPS_SECONDS = 19.0

# UTC instants from which GPS - UTC takes the given value (seconds)
LEAP_SECONDS: list[tuple[datetime, int]] = [
    (datetime(1981, 7, 1), 1),
    (datetime(1982, 7, 1), 2),
    (datetime(1983, 7, 1), 3),
    (datetime(1985, 7, 1), 4),
    (datetime(1988, 1, 1), 5),
    (datetime(1990, 1, 1), 6),
    (datetime(1991, 1, 1), 7),
    (datetime(1992, 7, 1), 8),
    (datetime(1993, 7, 1), 9),
    (datetime(1994, 7, 1), 10),
    (datetime(1996, 1, 1), 11),
    (datetime(1997, 7, 1), 12),
    (datetime(1999, 1, 1), 13),
    (datetime(2006, 1, 1), 14),
    (datetime(2009, 1, 1), 15),
    (datetime(2012, 7, 1), 16),
    (datetime(2015, 7, 1), 17),
    (datetime(2017, 1, 1), 18),
]

_LEAP_DATES = [date for date, _ in LEAP_SECONDS]


def mjd_from_date(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
) -> float:
    """Calculate Modified Julian Date from calendar date.

    Args:
        year: Year (e.g., 2024)
        month: Month (1-12)
        day: Day of month (1-31)
        hour: Hour (0-23)
        minute: Minute (0-59)
        second: Second (0-59.999...)

    Returns:
        MJD as float
    """
    # Algorithm from astronomical computing
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3

    # Julian Day Number
    jdn = day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045

    # Add fractional day
    frac = (hour + minute / 60.0 + second / 3600.0) / 24.0

    # JDN refers to noon, MJD to midnight
    return jdn - MJD_OFFSET - 0.5 + frac


def mjd_from_datetime(dt: datetime) -> float:
    """Calculate MJD of a datetime, keeping sub-second resolution."""
    return mjd_from_date(
        dt.year, dt.month, dt.day,
        dt.hour, dt.minute, dt.second + dt.microsecond * 1e-6,
    )


def datetime_from_mjd(mjd: float) -> datetime:
    """Convert MJD to a naive datetime (microsecond resolution)."""
    return MJD_EPOCH + timedelta(days=mjd)


def gps_utc_offset(utc: datetime) -> int:
    """GPS - UTC in seconds at a UTC instant.

    Instants before the first leap second after the GPS epoch return 0.
    """
    index = bisect_right(_LEAP_DATES, utc)
    if index == 0:
        return 0
    return LEAP_SECONDS[index - 1][1]


def utc_to_gps(utc: datetime) -> datetime:
    """Convert a UTC datetime to GPS time."""
    return utc + timedelta(seconds=gps_utc_offset(utc))


def gps_to_utc(gps: datetime) -> datetime:
    """Convert a GPS datetime to UTC."""
    utc = gps - timedelta(seconds=gps_utc_offset(gps))
    # Instants right after a leap second need the offset at the shifted time
    return gps - timedelta(seconds=gps_utc_offset(utc))


def tai_to_gps(tai: datetime) -> datetime:
    """Convert a TAI datetime to GPS time."""
    return tai - timedelta(seconds=TAI_MINUS_GPS_SECONDS)
