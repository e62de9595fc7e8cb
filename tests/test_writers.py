"""Tests for series writers."""

from datetime import datetime
from pathlib import Path

import numpy as np

from sp3orbit.products.aggregator import (
    ALL_SATELLITES,
    ClockEpoch,
    CovarianceEpoch,
    OrbitEpoch,
    SatelliteAggregator,
    SelectedSeries,
    SeriesKind,
)
from sp3orbit.products.sp3_lines import PositionResult
from sp3orbit.products.writers import TextSeriesWriter, output_path, write_selection


class RecordingWriter:
    """Keeps write calls instead of touching the disk."""

    def __init__(self):
        self.calls = []

    def write(self, path, series):
        self.calls.append((path, series))


def aggregator_with(identifier: str) -> SatelliteAggregator:
    aggregator = SatelliteAggregator(identifier)
    for sat in ("L09", "L10"):
        aggregator.add(PositionResult(sat, datetime(2020, 1, 1), np.array([7.0e6, 0.0, 0.0]), 1e-6))
    return aggregator


class TestOutputPath:
    """Tests for output_path."""

    def test_suffix_before_extension(self):
        assert output_path("out/orbit.dat", "L09") == Path("out/orbit.L09.dat")

    def test_without_extension(self):
        assert output_path("orbit", "G01") == Path("orbit.G01")

    def test_no_suffix(self):
        assert output_path("orbit.dat") == Path("orbit.dat")


class TestWriteSelection:
    """Tests for write_selection."""

    def test_all_satellites_get_separate_files(self):
        writer = RecordingWriter()
        selection = aggregator_with(ALL_SATELLITES).select()

        written = write_selection(selection, {SeriesKind.ORBIT: Path("orbit.txt")}, writer)

        assert written == [Path("orbit.L09.txt"), Path("orbit.L10.txt")]
        assert [series.satellite_id for _, series in writer.calls] == ["L09", "L10"]

    def test_single_satellite_keeps_name(self):
        writer = RecordingWriter()
        selection = aggregator_with("L10").select()

        written = write_selection(
            selection,
            {SeriesKind.ORBIT: Path("orbit.txt"), SeriesKind.CLOCK: Path("clock.txt")},
            writer,
        )

        assert written == [Path("orbit.txt"), Path("clock.txt")]

    def test_kind_without_target_skipped(self):
        writer = RecordingWriter()
        selection = aggregator_with("L09").select()

        write_selection(selection, {SeriesKind.ORBIT: None, SeriesKind.CLOCK: Path("c.txt")}, writer)

        assert [series.kind for _, series in writer.calls] == [SeriesKind.CLOCK]


class TestTextSeriesWriter:
    """Tests for the text file format."""

    def test_orbit_file(self, tmp_path: Path):
        epochs = [
            OrbitEpoch(datetime(2000, 1, 1), np.array([1.0, 2.0, 3.0])),
            OrbitEpoch(datetime(2000, 1, 1, 12), np.array([4.0, 5.0, 6.0]), np.array([0.1, 0.2, 0.3])),
        ]
        path = tmp_path / "sub" / "orbit.txt"

        TextSeriesWriter().write(path, SelectedSeries(SeriesKind.ORBIT, "L09", epochs))

        lines = path.read_text().splitlines()
        assert lines[0] == "# orbit L09"
        rows = [line.split() for line in lines[2:]]
        assert float(rows[0][0]) == 51544.0
        assert [float(v) for v in rows[0][1:]] == [1.0, 2.0, 3.0]
        assert float(rows[1][0]) == 51544.5
        assert len(rows[1]) == 7

    def test_clock_and_covariance_files(self, tmp_path: Path):
        writer = TextSeriesWriter()
        time = datetime(2000, 1, 1)

        writer.write(
            tmp_path / "clock.txt",
            SelectedSeries(SeriesKind.CLOCK, "L09", [ClockEpoch(time, 1.5e-5)]),
        )
        covariance = np.array([[1.0, 0.1, 0.2], [0.1, 2.0, 0.3], [0.2, 0.3, 3.0]])
        writer.write(
            tmp_path / "cov.txt",
            SelectedSeries(SeriesKind.COVARIANCE, "L09", [CovarianceEpoch(time, covariance)]),
        )

        clock_row = (tmp_path / "clock.txt").read_text().splitlines()[2].split()
        assert float(clock_row[1]) == 1.5e-5
        cov_row = (tmp_path / "cov.txt").read_text().splitlines()[2].split()
        assert [float(v) for v in cov_row[1:]] == [1.0, 2.0, 3.0, 0.1, 0.2, 0.3]
