"""
Command-line interface for SP3-Orbit.

Provides a CLI using Click for converting SP3 files into orbit, clock and
covariance series.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from sp3orbit import __version__


@click.group()
@click.version_option(version=__version__, prog_name="SP3-Orbit")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.pass_context
def cli(ctx: click.Context, config: Path | None, verbose: bool) -> None:
    """SP3-Orbit: read orbits, clocks and covariances from SP3 files.

    With --satellite a single satellite is selected if the inputs contain
    more than one. Without it the first satellite with a positive orbit
    accuracy in the header is taken. --satellite '<all>' writes every
    satellite, appending the identifier to each output file name.
    """
    from sp3orbit.core.config import load_settings
    from sp3orbit.utils.logging import setup_logging

    settings = load_settings(config)
    log = settings.logging
    setup_logging(
        level="DEBUG" if verbose else log.level,
        log_dir=log.log_dir,
        log_to_file=log.log_to_file,
        log_to_console=log.log_to_console,
        json_format=log.json_format,
    )

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument(
    "inputs",
    nargs=-1,
    type=click.Path(path_type=Path),
)
@click.option(
    "--orbit", "-o",
    type=click.Path(path_type=Path),
    help="Output file for orbit (position/velocity)",
)
@click.option(
    "--clock",
    type=click.Path(path_type=Path),
    help="Output file for clock bias",
)
@click.option(
    "--covariance",
    type=click.Path(path_type=Path),
    help="Output file for 3x3 epoch covariance",
)
@click.option(
    "--satellite", "-s",
    type=str,
    help="Satellite id (e.g. L09), empty for first satellite, <all> for every satellite",
)
@click.option(
    "--earth-rotation",
    type=click.Choice(["none", "era"]),
    help="Rotation from TRF to CRF",
)
@click.pass_context
def convert(
    ctx: click.Context,
    inputs: tuple[Path, ...],
    orbit: Path | None,
    clock: Path | None,
    covariance: Path | None,
    satellite: str | None,
    earth_rotation: str | None,
) -> None:
    """Convert SP3 files into orbit, clock and covariance series.

    Examples:

        # GRACE-A orbit in the terrestrial frame
        sp3orbit convert GA-OG-1B-ORBIT.sp3 -o orbit.txt -s L09

        # All satellites, rotated to the celestial frame
        sp3orbit convert igs23450.sp3.gz -o orbit.txt --clock clock.txt -s '<all>' --earth-rotation era
    """
    from sp3orbit.core.config import validate_run
    from sp3orbit.core.exceptions import ConfigurationError
    from sp3orbit.frames.gravity import create_gravity_field
    from sp3orbit.frames.rotation import create_earth_rotation
    from sp3orbit.products.aggregator import SeriesKind
    from sp3orbit.products.converter import Sp3Converter
    from sp3orbit.products.writers import write_selection

    settings = ctx.obj["settings"]

    # Command-line options override the configuration file
    if orbit is not None:
        settings.output.orbit = orbit
    if clock is not None:
        settings.output.clock = clock
    if covariance is not None:
        settings.output.covariance = covariance
    if satellite is not None:
        settings.conversion.satellite_identifier = satellite
    if earth_rotation is not None:
        settings.earth_rotation.model = earth_rotation

    gravity = settings.gravity_field
    try:
        validate_run(inputs, settings)
        rotation_model = create_earth_rotation(settings.earth_rotation.model)
        gravity_model = create_gravity_field(
            gravity.model,
            reference_radius=gravity.reference_radius,
            c00=gravity.c00,
            c10=gravity.c10,
            c11=gravity.c11,
            s11=gravity.s11,
            path=gravity.path,
        )
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e

    converter = Sp3Converter(
        identifier=settings.conversion.satellite_identifier,
        earth_rotation=rotation_model,
        gravity_field=gravity_model,
    )
    result = converter.process_files(inputs)

    selection = result.select()
    written = write_selection(
        selection,
        {
            SeriesKind.ORBIT: settings.output.orbit,
            SeriesKind.CLOCK: settings.output.clock,
            SeriesKind.COVARIANCE: settings.output.covariance,
        },
    )

    for path in written:
        click.echo(f"Wrote {path}")
    click.echo(
        f"Processed {result.files_processed}/{len(inputs)} files, "
        f"{len(written)} output files"
    )

    if result.aborted:
        click.echo(f"Stopped at {result.failed_source}", err=True)
        sys.exit(1)


@cli.command()
@click.argument(
    "inputs",
    nargs=-1,
    required=True,
    type=click.Path(path_type=Path),
)
def info(inputs: tuple[Path, ...]) -> None:
    """List satellites and epoch counts of SP3 files."""
    from sp3orbit.products.aggregator import ALL_SATELLITES, series_statistics
    from sp3orbit.products.converter import Sp3Converter

    converter = Sp3Converter(identifier=ALL_SATELLITES)
    result = converter.process_files(inputs)

    click.echo(f"{'Sat':<4} {'Orbit':>6} {'Vel':>6} {'Clock':>6} {'Cov':>6}  {'Start':<26} {'End':<26}")
    click.echo("-" * 86)
    for satellite_id in result.aggregator.satellites:
        orbits = result.orbits.get(satellite_id, [])
        velocities = sum(1 for e in orbits if e.velocity is not None)
        clocks = result.clocks.get(satellite_id, [])
        covariances = result.covariances.get(satellite_id, [])
        stats = series_statistics(orbits or clocks)
        click.echo(
            f"{satellite_id:<4} {len(orbits):>6} {velocities:>6} {len(clocks):>6} "
            f"{len(covariances):>6}  {stats.get('start', ''):<26} {stats.get('end', ''):<26}"
        )

    click.echo(f"\nTotal: {len(result.aggregator.satellites)} satellites")

    if result.aborted:
        click.echo(f"Stopped at {result.failed_source}", err=True)
        sys.exit(1)


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
