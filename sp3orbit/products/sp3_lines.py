"""
SP3 line classification and record decoding.

SP3 is line oriented; the record kind of a line follows from its first
characters and every value sits at a fixed column range:

    #dP2020  1  1  0  0  0.00000000     288 ORBIT IGS14 HLM  GFZ
    +    1   L09  0  0  0 ...
    ++       5  0  0  0 ...
    %c L  cc GPS ccc cccc cccc cccc cccc ccccc ccccc ccccc ccccc
    *  2020  1  1  0  0  0.00000000
    PL09   1234.567890  -5678.901234   3456.789012    123.456789
    EP  12   13   14         1234567  -1234567          0   2345678
    VL09  12345.678901 -23456.789012  34567.890123 999999.999999
    EOF

Decoders are pure: they take the line and the current EpochContext and
return a tagged result. Physical quantities leave the decoders in SI units
and in the output frame, except velocities, which still need the matching
position for the frame rotation term and are finished by the aggregator.

Reference:
https://files.igs.org/pub/data/format/sp3d.pdf
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Union

import numpy as np

from sp3orbit.core.exceptions import Sp3FormatError
from sp3orbit.frames.gravity import GravityField
from sp3orbit.frames.rotation import EarthRotation
from sp3orbit.products.epoch_context import EpochContext, TimeSystem, epoch_datetime


# Clock values at or above this mark a missing clock (microseconds)
BAD_CLOCK = 999999.0

# Satellite id / accuracy slots of the + and ++ header lines
SLOT_START = 9
SLOT_WIDTH = 3
SLOTS_PER_LINE = 17


class LineKind(str, Enum):
    """Record kind of an SP3 line."""
    HEADER = "header"
    SATELLITE_LIST = "satellite_list"
    SATELLITE_ACCURACY = "satellite_accuracy"
    TIME_SYSTEM = "time_system"
    EPOCH_HEADER = "epoch_header"
    POSITION = "position"
    VELOCITY = "velocity"
    POSITION_COVARIANCE = "position_covariance"
    END_OF_FILE = "end_of_file"
    UNKNOWN = "unknown"


# Checked in order, longest prefixes first
_PREFIXES: list[tuple[str, LineKind]] = [
    ("EOF", LineKind.END_OF_FILE),
    ("EP", LineKind.POSITION_COVARIANCE),
    ("++", LineKind.SATELLITE_ACCURACY),
    ("+", LineKind.SATELLITE_LIST),
    ("%c", LineKind.TIME_SYSTEM),
    ("%f", LineKind.HEADER),
    ("%i", LineKind.HEADER),
    ("/*", LineKind.HEADER),
    ("#", LineKind.HEADER),
    ("* ", LineKind.EPOCH_HEADER),
    ("P", LineKind.POSITION),
    ("V", LineKind.VELOCITY),
]


def classify_line(line: str) -> LineKind:
    """Return the record kind of a single SP3 line."""
    for prefix, kind in _PREFIXES:
        if line.startswith(prefix):
            return kind
    return LineKind.UNKNOWN


# =============================================================================
# Decoded results
# =============================================================================

@dataclass(frozen=True, eq=False)
class PositionResult:
    """Position record: orbit position (None for the zero vector) and clock."""
    satellite_id: str
    time: datetime
    position: np.ndarray | None  # m, output frame
    clock_bias: float | None  # s


@dataclass(frozen=True, eq=False)
class VelocityResult:
    """Velocity record in m/s, still in the source frame."""
    satellite_id: str
    time: datetime
    velocity: np.ndarray
    context: EpochContext


@dataclass(frozen=True, eq=False)
class CovarianceResult:
    """Position covariance in m^2, output frame."""
    satellite_id: str
    time: datetime
    covariance: np.ndarray


@dataclass(frozen=True, eq=False)
class ContextUpdate:
    """New parsing context; may nominate a default satellite."""
    context: EpochContext
    detected_satellite: str | None = None
    diagnostic: str | None = None


@dataclass(frozen=True)
class Ignored:
    """Line without content for the conversion."""
    kind: LineKind


@dataclass(frozen=True)
class EndOfFile:
    """EOF marker line."""


DecodedLine = Union[
    PositionResult,
    VelocityResult,
    CovarianceResult,
    ContextUpdate,
    Ignored,
    EndOfFile,
]


# =============================================================================
# Field helpers
# =============================================================================

def _float(line: str, start: int, end: int, record: str, name: str) -> float:
    text = line[start:end]
    try:
        return float(text)
    except ValueError:
        raise Sp3FormatError(record, name, text) from None


def _int(line: str, start: int, end: int, record: str, name: str) -> int:
    text = line[start:end]
    try:
        return int(text)
    except ValueError:
        raise Sp3FormatError(record, name, text) from None


def _vector(line: str, record: str) -> np.ndarray:
    return np.array([
        _float(line, 4, 18, record, "x"),
        _float(line, 18, 32, record, "y"),
        _float(line, 32, 46, record, "z"),
    ])


def _slots(line: str) -> list[str]:
    slots = []
    for j in range(SLOTS_PER_LINE):
        start = SLOT_START + j * SLOT_WIDTH
        text = line[start:start + SLOT_WIDTH]
        if len(text) < SLOT_WIDTH:
            break
        slots.append(text)
    return slots


def _satellite_id(line: str, record: str) -> str:
    satellite_id = line[1:4]
    if len(satellite_id) != 3 or not satellite_id.strip():
        raise Sp3FormatError(record, "satellite id", satellite_id)
    return satellite_id


# =============================================================================
# Decoders
# =============================================================================

def decode_satellite_list(line: str, context: EpochContext) -> ContextUpdate:
    """Append the ids of a '+' line to the satellite listing.

    Empty slots ('  0' or blanks) pad the last line and are skipped.
    """
    ids = [
        slot for slot in _slots(line)
        if slot.strip() and slot.strip() not in ("0", "00")
    ]
    return ContextUpdate(context=context.with_listed_satellites(ids))


def decode_satellite_accuracy(line: str, context: EpochContext) -> ContextUpdate:
    """Append the accuracy exponents of a '++' line.

    The first listed satellite with an accuracy above zero is reported as
    the default satellite candidate.
    """
    remaining = len(context.satellite_ids) - len(context.satellite_accuracies)
    accuracies = []
    for slot in _slots(line)[:max(remaining, 0)]:
        text = slot.strip()
        if not text:
            accuracies.append(0)
            continue
        try:
            accuracies.append(int(text))
        except ValueError:
            raise Sp3FormatError("satellite accuracy", "accuracy", slot) from None

    updated = context.with_listed_accuracies(accuracies)
    return ContextUpdate(
        context=updated,
        detected_satellite=updated.first_accurate_satellite(),
    )


def decode_time_system(line: str, context: EpochContext) -> ContextUpdate:
    """Decode the time system tag of the first '%c' line."""
    tag = line[9:12]
    try:
        time_system = TimeSystem(tag)
    except ValueError:
        return ContextUpdate(
            context=context.with_time_system(TimeSystem.GPS),
            diagnostic=f"Unknown time system ({tag}), assuming GPS time",
        )
    return ContextUpdate(context=context.with_time_system(time_system))


def decode_epoch_header(
    line: str,
    context: EpochContext,
    earth_rotation: EarthRotation | None = None,
    gravity_field: GravityField | None = None,
) -> ContextUpdate:
    """Decode a '*' line and derive the context of the new epoch."""
    record = "epoch header"
    year = _int(line, 3, 7, record, "year")
    month = _int(line, 8, 10, record, "month")
    day = _int(line, 11, 13, record, "day")
    hour = _int(line, 14, 16, record, "hour")
    minute = _int(line, 17, 19, record, "minute")
    second = _float(line, 20, 31, record, "second")

    # 23:59:60 must not roll into the next day before the leap second lookup
    leap_second = second >= 60.0
    if leap_second:
        second -= 1.0

    try:
        civil_time = epoch_datetime(year, month, day, hour, minute, second)
    except ValueError:
        raise Sp3FormatError(record, "date", line[3:31]) from None

    return ContextUpdate(
        context=context.for_epoch(
            civil_time, earth_rotation, gravity_field, leap_second
        )
    )


def decode_position(line: str, context: EpochContext) -> tuple[PositionResult, EpochContext]:
    """Decode a 'P' line.

    Returns the result and the context with the current satellite set.
    """
    record = "position"
    satellite_id = _satellite_id(line, record)
    position_m = 1e3 * _vector(line, record)  # km -> m
    clock = _float(line, 46, 60, record, "clock")

    position = None
    if np.any(position_m):
        position = context.transform_position(position_m)

    clock_bias = None
    if clock < BAD_CLOCK:
        clock_bias = 1e-6 * clock  # microsecond -> second

    result = PositionResult(
        satellite_id=satellite_id,
        time=context.time,
        position=position,
        clock_bias=clock_bias,
    )
    return result, context.with_satellite(satellite_id)


def decode_velocity(line: str, context: EpochContext) -> VelocityResult | Ignored:
    """Decode a 'V' line; the zero vector means no data."""
    record = "velocity"
    satellite_id = _satellite_id(line, record)
    velocity = 0.1 * _vector(line, record)  # dm/s -> m/s
    if not np.any(velocity):
        return Ignored(LineKind.VELOCITY)
    return VelocityResult(
        satellite_id=satellite_id,
        time=context.time,
        velocity=velocity,
        context=context,
    )


def covariance_matrix(
    sigma_x: float,
    sigma_y: float,
    sigma_z: float,
    corr_xy: float,
    corr_xz: float,
    corr_yz: float,
) -> np.ndarray:
    """Build a covariance (m^2) from std devs (mm) and correlations (1e-7)."""
    xx = (1e-3 * sigma_x) ** 2
    yy = (1e-3 * sigma_y) ** 2
    zz = (1e-3 * sigma_z) ** 2
    xy = 1e-13 * corr_xy * sigma_x * sigma_y
    xz = 1e-13 * corr_xz * sigma_x * sigma_z
    yz = 1e-13 * corr_yz * sigma_y * sigma_z
    return np.array([
        [xx, xy, xz],
        [xy, yy, yz],
        [xz, yz, zz],
    ])


def decode_covariance(line: str, context: EpochContext) -> CovarianceResult:
    """Decode an 'EP' line for the satellite of the preceding 'P' line."""
    record = "position covariance"
    if context.current_satellite is None:
        raise Sp3FormatError(record, "satellite", "no preceding position record")

    covariance = covariance_matrix(
        _float(line, 4, 8, record, "sigma x"),
        _float(line, 9, 13, record, "sigma y"),
        _float(line, 14, 18, record, "sigma z"),
        _float(line, 27, 35, record, "correlation xy"),
        _float(line, 36, 44, record, "correlation xz"),
        _float(line, 54, 62, record, "correlation yz"),
    )
    return CovarianceResult(
        satellite_id=context.current_satellite,
        time=context.time,
        covariance=context.transform_covariance(covariance),
    )


def decode_line(
    line: str,
    context: EpochContext,
    earth_rotation: EarthRotation | None = None,
    gravity_field: GravityField | None = None,
) -> tuple[DecodedLine, EpochContext]:
    """Classify and decode one line.

    The companion line of a '%c' record is not consumed here; the caller
    skips it.

    Args:
        line: Raw line without line terminator
        context: Context before the line
        earth_rotation: Optional rotation provider, queried per epoch
        gravity_field: Optional gravity field provider, queried per epoch

    Returns:
        Tuple of (decoded result, context after the line)
    """
    kind = classify_line(line)

    if kind == LineKind.EPOCH_HEADER:
        update = decode_epoch_header(line, context, earth_rotation, gravity_field)
        return update, update.context
    if kind == LineKind.POSITION:
        return decode_position(line, context)
    if kind == LineKind.VELOCITY:
        return decode_velocity(line, context), context
    if kind == LineKind.POSITION_COVARIANCE:
        return decode_covariance(line, context), context
    if kind == LineKind.SATELLITE_LIST:
        update = decode_satellite_list(line, context)
        return update, update.context
    if kind == LineKind.SATELLITE_ACCURACY:
        update = decode_satellite_accuracy(line, context)
        return update, update.context
    if kind == LineKind.TIME_SYSTEM:
        update = decode_time_system(line, context)
        return update, update.context
    if kind == LineKind.END_OF_FILE:
        return EndOfFile(), context
    return Ignored(kind), context

