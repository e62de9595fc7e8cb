"""SP3 orbit products.

Includes line classification, record decoding, per-satellite aggregation,
the multi-file driver and series writers.
"""

from sp3orbit.products.epoch_context import (
    EpochContext,
    TimeSystem,
    normalize_epoch,
)
from sp3orbit.products.sp3_lines import (
    # Classification
    LineKind,
    classify_line,
    # Decoded results
    PositionResult,
    VelocityResult,
    CovarianceResult,
    ContextUpdate,
    Ignored,
    EndOfFile,
    # Decoders
    decode_line,
    decode_epoch_header,
    decode_position,
    decode_velocity,
    decode_covariance,
    decode_time_system,
    decode_satellite_list,
    decode_satellite_accuracy,
    covariance_matrix,
)
from sp3orbit.products.aggregator import (
    ALL_SATELLITES,
    OrbitEpoch,
    ClockEpoch,
    CovarianceEpoch,
    SatelliteAggregator,
    SelectedSeries,
    Selection,
    SeriesKind,
    series_statistics,
)
from sp3orbit.products.converter import (
    ConversionResult,
    Sp3Converter,
    convert_sp3,
    open_sp3,
)
from sp3orbit.products.writers import (
    SeriesWriter,
    TextSeriesWriter,
    output_path,
    write_selection,
)

__all__ = [
    # Context
    "EpochContext",
    "TimeSystem",
    "normalize_epoch",
    # Classification
    "LineKind",
    "classify_line",
    # Decoded results
    "PositionResult",
    "VelocityResult",
    "CovarianceResult",
    "ContextUpdate",
    "Ignored",
    "EndOfFile",
    # Decoders
    "decode_line",
    "decode_epoch_header",
    "decode_position",
    "decode_velocity",
    "decode_covariance",
    "decode_time_system",
    "decode_satellite_list",
    "decode_satellite_accuracy",
    "covariance_matrix",
    # Aggregation
    "ALL_SATELLITES",
    "OrbitEpoch",
    "ClockEpoch",
    "CovarianceEpoch",
    "SatelliteAggregator",
    "SelectedSeries",
    "Selection",
    "SeriesKind",
    "series_statistics",
    # Driver
    "ConversionResult",
    "Sp3Converter",
    "convert_sp3",
    "open_sp3",
    # Writers
    "SeriesWriter",
    "TextSeriesWriter",
    "output_path",
    "write_selection",
]
