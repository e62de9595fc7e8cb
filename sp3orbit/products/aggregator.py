"""
Per-satellite accumulation of decoded SP3 records.

Orbit, clock and covariance epochs are collected in three independent
mappings keyed by satellite id. The mappings span all input files of a run
and keep input order. The selection policy decides at the end which series
are written:

- "<all>": every non-empty series of every satellite, with the satellite id
  appended to the output name
- otherwise: the series of the configured (or auto-detected) satellite
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import numpy as np

from sp3orbit.core.exceptions import MissingPositionError
from sp3orbit.products.sp3_lines import (
    CovarianceResult,
    DecodedLine,
    PositionResult,
    VelocityResult,
)
from sp3orbit.utils.logging import get_logger


logger = get_logger(__name__)


ALL_SATELLITES = "<all>"


class SeriesKind(str, Enum):
    """Output series produced from SP3 records."""
    ORBIT = "orbit"
    CLOCK = "clock"
    COVARIANCE = "covariance"


@dataclass(eq=False)
class OrbitEpoch:
    """Position (m) and optional velocity (m/s) in the output frame."""

    time: datetime
    position: np.ndarray
    velocity: np.ndarray | None = None


@dataclass
class ClockEpoch:
    """Clock bias in seconds."""

    time: datetime
    bias: float


@dataclass(eq=False)
class CovarianceEpoch:
    """Symmetric 3x3 position covariance (m^2) in the output frame."""

    time: datetime
    covariance: np.ndarray


@dataclass
class SelectedSeries:
    """One series chosen for output."""

    kind: SeriesKind
    satellite_id: str
    epochs: list[Any]
    suffix: str | None = None  # appended to the output base name


@dataclass
class Selection:
    """Result of the selection policy."""

    series: list[SelectedSeries] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def of_kind(self, kind: SeriesKind) -> list[SelectedSeries]:
        return [s for s in self.series if s.kind == kind]


class SatelliteAggregator:
    """Collects orbit, clock and covariance epochs per satellite.

    Usage:
        aggregator = SatelliteAggregator(identifier="L09")
        aggregator.add(result)  # for every decoded line
        selection = aggregator.select()
    """

    def __init__(self, identifier: str | None = None):
        """Initialize aggregator.

        Args:
            identifier: Satellite id, "<all>", or empty/None to take the
                first satellite with a positive accuracy in the header
        """
        self.identifier = identifier or ""
        self.orbits: dict[str, list[OrbitEpoch]] = {}
        self.clocks: dict[str, list[ClockEpoch]] = {}
        self.covariances: dict[str, list[CovarianceEpoch]] = {}

    @property
    def is_resolved(self) -> bool:
        return bool(self.identifier)

    def offer_default(self, satellite_id: str | None) -> bool:
        """Adopt ``satellite_id`` if no satellite has been chosen yet."""
        if self.identifier or not satellite_id:
            return False
        self.identifier = satellite_id
        logger.info("Selected satellite from header", satellite=satellite_id)
        return True

    def add(self, result: DecodedLine) -> None:
        """Store a decoded record; non-data results are ignored."""
        if isinstance(result, PositionResult):
            self._add_position(result)
        elif isinstance(result, VelocityResult):
            self._add_velocity(result)
        elif isinstance(result, CovarianceResult):
            self.covariances.setdefault(result.satellite_id, []).append(
                CovarianceEpoch(time=result.time, covariance=result.covariance)
            )

    def _add_position(self, result: PositionResult) -> None:
        if result.position is not None:
            self.orbits.setdefault(result.satellite_id, []).append(
                OrbitEpoch(time=result.time, position=result.position)
            )
        if result.clock_bias is not None:
            self.clocks.setdefault(result.satellite_id, []).append(
                ClockEpoch(time=result.time, bias=result.clock_bias)
            )

    def _add_velocity(self, result: VelocityResult) -> None:
        epoch = self.last_orbit_epoch(result.satellite_id, result.time)
        epoch.velocity = result.context.transform_velocity(result.velocity, epoch.position)

    def last_orbit_epoch(self, satellite_id: str, time: datetime | None = None) -> OrbitEpoch:
        """Most recent orbit epoch of a satellite.

        Args:
            satellite_id: Satellite id
            time: If given, the epoch must carry this time

        Raises:
            MissingPositionError: No (matching) orbit epoch exists
        """
        epochs = self.orbits.get(satellite_id)
        if not epochs:
            raise MissingPositionError(satellite_id)
        epoch = epochs[-1]
        if time is not None and epoch.time != time:
            raise MissingPositionError(
                satellite_id,
                f"Velocity for {satellite_id} at {time.isoformat()} without a "
                f"position record of that epoch (last position {epoch.time.isoformat()})",
            )
        return epoch

    def select(self) -> Selection:
        """Apply the satellite selection policy."""
        selection = Selection()
        series_maps: list[tuple[SeriesKind, dict[str, list[Any]]]] = [
            (SeriesKind.ORBIT, self.orbits),
            (SeriesKind.CLOCK, self.clocks),
            (SeriesKind.COVARIANCE, self.covariances),
        ]

        if self.identifier == ALL_SATELLITES:
            for kind, series_map in series_maps:
                for satellite_id, epochs in series_map.items():
                    if epochs:
                        selection.series.append(
                            SelectedSeries(kind, satellite_id, epochs, suffix=satellite_id)
                        )
            return selection

        satellite_id = self.identifier
        if not self.orbits.get(satellite_id):
            selection.warnings.append(f"No data found for identifier='{satellite_id}'")
        for kind, series_map in series_maps:
            epochs = series_map.get(satellite_id)
            if epochs:
                selection.series.append(SelectedSeries(kind, satellite_id, epochs))
        return selection

    @property
    def satellites(self) -> list[str]:
        """All satellite ids seen, in first-seen order per series."""
        seen: dict[str, None] = {}
        for series_map in (self.orbits, self.clocks, self.covariances):
            for satellite_id in series_map:
                seen.setdefault(satellite_id, None)
        return list(seen)


def series_statistics(epochs: list[Any]) -> dict[str, Any]:
    """Summary of an epoch series: count, span, sampling and gaps.

    A gap is a step longer than 1.5 times the median sampling.
    """
    if not epochs:
        return {"epochs": 0}

    stats: dict[str, Any] = {
        "epochs": len(epochs),
        "start": epochs[0].time.isoformat(),
        "end": epochs[-1].time.isoformat(),
    }
    if len(epochs) > 1:
        start = epochs[0].time
        steps = np.diff([(e.time - start).total_seconds() for e in epochs])
        sampling = float(np.median(steps))
        stats["sampling"] = sampling
        stats["gaps"] = int(np.sum(steps > 1.5 * sampling)) if sampling > 0 else 0
    return stats
