"""
SP3 file driver.

Streams the lines of one or more SP3 inputs through classification,
decoding and aggregation.

Failure policy: a structural error in one input (unparsable field, velocity
without position, unreadable stream) stops the whole run. Inputs after the
failing one are not read, but everything aggregated so far is kept and can
still be written.

Usage:
    from sp3orbit.products.converter import convert_sp3

    with open("grace.sp3", "rb") as f:
        result = convert_sp3([f], identifier="L09")
    for series in result.select().series:
        print(series.kind, series.satellite_id, len(series.epochs))
"""

from __future__ import annotations

import gzip
import io
import subprocess
import zlib
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Iterable, Iterator

from sp3orbit.core.exceptions import InputStreamError, Sp3FormatError, StructuralError
from sp3orbit.frames.gravity import GravityField
from sp3orbit.frames.rotation import EarthRotation
from sp3orbit.products.aggregator import (
    ClockEpoch,
    CovarianceEpoch,
    OrbitEpoch,
    SatelliteAggregator,
    Selection,
)
from sp3orbit.products.epoch_context import EpochContext
from sp3orbit.products.sp3_lines import (
    ContextUpdate,
    EndOfFile,
    LineKind,
    classify_line,
    decode_line,
)
from sp3orbit.utils.logging import get_logger


logger = get_logger(__name__)


@dataclass
class ConversionResult:
    """Aggregated series of a run plus non-fatal diagnostics."""

    aggregator: SatelliteAggregator
    diagnostics: list[str] = field(default_factory=list)
    files_processed: int = 0
    failed_source: str | None = None

    @property
    def orbits(self) -> dict[str, list[OrbitEpoch]]:
        return self.aggregator.orbits

    @property
    def clocks(self) -> dict[str, list[ClockEpoch]]:
        return self.aggregator.clocks

    @property
    def covariances(self) -> dict[str, list[CovarianceEpoch]]:
        return self.aggregator.covariances

    @property
    def identifier(self) -> str:
        return self.aggregator.identifier

    @property
    def aborted(self) -> bool:
        return self.failed_source is not None

    def select(self) -> Selection:
        """Apply the selection policy; its warnings join the diagnostics."""
        selection = self.aggregator.select()
        for warning in selection.warnings:
            logger.warning(warning)
            self.diagnostics.append(warning)
        return selection


def iter_lines(stream: Iterable[Any], source: str) -> Iterator[str]:
    """Yield text lines without terminators from a binary or text stream."""
    try:
        for raw in stream:
            if isinstance(raw, bytes):
                raw = raw.decode("ascii")
            yield raw.rstrip("\r\n")
    except (OSError, EOFError, zlib.error, UnicodeDecodeError) as e:
        raise InputStreamError(source, str(e)) from e


@contextmanager
def open_sp3(filepath: str | Path) -> Iterator[IO[str]]:
    """Open an SP3 file as text (supports .sp3, .sp3.Z, .sp3.gz)."""
    filepath = Path(filepath)
    try:
        if filepath.suffix == ".Z":
            result = subprocess.run(
                ["zcat", str(filepath)],
                capture_output=True,
            )
            if result.returncode != 0:
                raise InputStreamError(str(filepath), "failed to decompress")
            try:
                text = result.stdout.decode("ascii")
            except UnicodeDecodeError as e:
                raise InputStreamError(str(filepath), str(e)) from e
            stream: IO[str] = io.StringIO(text)
        elif filepath.suffix == ".gz":
            stream = gzip.open(filepath, "rt", encoding="ascii")
        else:
            stream = open(filepath, "r", encoding="ascii")
    except OSError as e:
        raise InputStreamError(str(filepath), str(e)) from e

    with stream:
        yield stream


class Sp3Converter:
    """Converts SP3 inputs into per-satellite series.

    One converter instance represents one run: satellite selection and
    aggregated series are shared by all inputs, the parsing context is
    created fresh for each input.
    """

    def __init__(
        self,
        identifier: str | None = None,
        earth_rotation: EarthRotation | None = None,
        gravity_field: GravityField | None = None,
    ):
        """Initialize converter.

        Args:
            identifier: Satellite id, "<all>", or empty/None for auto-detect
            earth_rotation: Optional TRF -> CRF rotation provider
            gravity_field: Optional degree-1 gravity field for CM2CE
        """
        self.earth_rotation = earth_rotation
        self.gravity_field = gravity_field
        self.result = ConversionResult(aggregator=SatelliteAggregator(identifier))

    def process_stream(self, stream: Iterable[Any], source: str = "<stream>") -> None:
        """Parse one SP3 input into the aggregator.

        Raises:
            StructuralError: Malformed or unreadable input
        """
        aggregator = self.result.aggregator
        context = EpochContext()
        lines = enumerate(iter_lines(stream, source), start=1)

        for line_number, line in lines:
            try:
                decoded, context = decode_line(
                    line, context, self.earth_rotation, self.gravity_field
                )
            except Sp3FormatError as e:
                raise Sp3FormatError(e.record, e.field_name, e.text, line_number) from e

            if isinstance(decoded, EndOfFile):
                break

            if isinstance(decoded, ContextUpdate):
                if decoded.diagnostic:
                    self._diagnostic(decoded.diagnostic, source=source, line=line_number)
                aggregator.offer_default(decoded.detected_satellite)
                if classify_line(line) == LineKind.TIME_SYSTEM:
                    next(lines, None)  # second %c line
                continue

            aggregator.add(decoded)

    def process(self, sources: Iterable[tuple[str, Iterable[Any]]]) -> ConversionResult:
        """Process named inputs in order, stopping at the first structural error."""
        for source, stream in sources:
            logger.info("Read SP3 file", path=source)
            try:
                self.process_stream(stream, source)
            except StructuralError as e:
                self._abort(source, e)
                break
            self.result.files_processed += 1
        return self.result

    def process_files(self, filepaths: Iterable[str | Path]) -> ConversionResult:
        """Process SP3 files by path (compressed files supported)."""
        for filepath in filepaths:
            source = str(filepath)
            logger.info("Read SP3 file", path=source)
            try:
                with open_sp3(filepath) as stream:
                    self.process_stream(stream, source)
            except StructuralError as e:
                self._abort(source, e)
                break
            self.result.files_processed += 1
        return self.result

    def _abort(self, source: str, error: StructuralError) -> None:
        message = f"{source}: {error}"
        logger.error("Stopped reading input files", path=source, error=str(error))
        self.result.diagnostics.append(message)
        self.result.failed_source = source

    def _diagnostic(self, message: str, **context: Any) -> None:
        logger.warning(message, **context)
        self.result.diagnostics.append(message)


def convert_sp3(
    streams: Iterable[Iterable[Any]],
    identifier: str | None = None,
    earth_rotation: EarthRotation | None = None,
    gravity_field: GravityField | None = None,
) -> ConversionResult:
    """Convert SP3 inputs into per-satellite orbit, clock and covariance series.

    Args:
        streams: Binary or text file objects, or iterables of lines
        identifier: Satellite id, "<all>", or None to take the first
            satellite with a positive accuracy in the header
        earth_rotation: Optional TRF -> CRF rotation provider
        gravity_field: Optional degree-1 gravity field for CM2CE

    Returns:
        ConversionResult with the aggregated series and diagnostics
    """
    converter = Sp3Converter(identifier, earth_rotation, gravity_field)
    sources = (
        (str(getattr(stream, "name", f"<input {i}>")), stream)
        for i, stream in enumerate(streams, start=1)
    )
    return converter.process(sources)
