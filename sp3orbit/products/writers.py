"""
Series writers.

Writes selected orbit, clock and covariance series as whitespace-separated
text files. Times are written as MJD in GPS time.

Formats:
- orbit:      mjd x y z [vx vy vz]        (m, m/s)
- clock:      mjd bias                    (s)
- covariance: mjd xx yy zz xy xz yz       (m^2)
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from sp3orbit.products.aggregator import (
    ClockEpoch,
    CovarianceEpoch,
    OrbitEpoch,
    SelectedSeries,
    Selection,
    SeriesKind,
    series_statistics,
)
from sp3orbit.utils.dates import mjd_from_datetime
from sp3orbit.utils.logging import get_logger


logger = get_logger(__name__)


class SeriesWriter(Protocol):
    """Persists one series."""

    def write(self, path: Path, series: SelectedSeries) -> None:
        ...


def output_path(base: Path | str, suffix: str | None = None) -> Path:
    """Append ``.suffix`` to the base name, keeping the extension.

    ``orbit.dat`` with suffix ``L09`` becomes ``orbit.L09.dat``.
    """
    base = Path(base)
    if not suffix:
        return base
    return base.with_name(f"{base.stem}.{suffix}{base.suffix}")


def _orbit_row(epoch: OrbitEpoch) -> str:
    values = list(epoch.position)
    if epoch.velocity is not None:
        values.extend(epoch.velocity)
    return " ".join(f"{v:.4f}" for v in values)


def _clock_row(epoch: ClockEpoch) -> str:
    return f"{epoch.bias:.15e}"


def _covariance_row(epoch: CovarianceEpoch) -> str:
    c = epoch.covariance
    values = [c[0, 0], c[1, 1], c[2, 2], c[0, 1], c[0, 2], c[1, 2]]
    return " ".join(f"{v:.9e}" for v in values)


class TextSeriesWriter:
    """Writer for plain text series files."""

    COLUMNS = {
        SeriesKind.ORBIT: "mjd x y z [vx vy vz]",
        SeriesKind.CLOCK: "mjd bias",
        SeriesKind.COVARIANCE: "mjd xx yy zz xy xz yz",
    }

    ROW_FORMATTERS = {
        SeriesKind.ORBIT: _orbit_row,
        SeriesKind.CLOCK: _clock_row,
        SeriesKind.COVARIANCE: _covariance_row,
    }

    def write(self, path: Path, series: SelectedSeries) -> None:
        format_row = self.ROW_FORMATTERS[series.kind]
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            f.write(f"# {series.kind.value} {series.satellite_id}\n")
            f.write(f"# {self.COLUMNS[series.kind]}\n")
            for epoch in series.epochs:
                f.write(f"{mjd_from_datetime(epoch.time):.10f} {format_row(epoch)}\n")


def write_selection(
    selection: Selection,
    outputs: dict[SeriesKind, Path | None],
    writer: SeriesWriter | None = None,
) -> list[Path]:
    """Write every selected series that has an output target.

    Args:
        selection: Result of the selection policy
        outputs: Base output path per series kind (None skips the kind)
        writer: Series writer (default: TextSeriesWriter)

    Returns:
        Written paths in order
    """
    writer = writer or TextSeriesWriter()
    written: list[Path] = []

    for series in selection.series:
        base = outputs.get(series.kind)
        if base is None:
            continue
        path = output_path(base, series.suffix)
        logger.info("Write series", kind=series.kind.value, path=str(path))
        writer.write(path, series)
        written.append(path)

        if series.kind == SeriesKind.ORBIT and series.suffix is None:
            logger.info("Orbit statistics", **series_statistics(series.epochs))

    return written

