from __future__ import annotations

import logging
import sys
from typing import NoReturn, Optional

import typer

import geohash
from geohash import GeohashError
from geohash_geometry import bounding_box, distance, estimate_length

logger = logging.getLogger(__name__)

# Lets negative numbers like "-33.8688" through as arguments instead of options.
_NUMERIC_ARGS = {"ignore_unknown_options": True}

app = typer.Typer(help="Encode and decode 12-character geohashes.", no_args_is_help=True)


# ----------------------------------------------------------------------
# Internal helpers
# ----------------------------------------------------------------------

def _read_input(value: Optional[str]) -> str:
    """Return the argument, or the last non-empty stdin line for None / "-"."""
    if value is not None and value != "-":
        return value

    lines = [line.strip() for line in sys.stdin.read().splitlines() if line.strip()]
    if not lines:
        typer.secho("Error: no input given", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)
    return lines[-1]


def _fail(action: str, exc: GeohashError) -> NoReturn:
    logger.info("%s failed: %s", action, exc)
    typer.secho(f"Error {action}: {exc}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING", "--log-level", envvar="GEOHASH_LOG_LEVEL", help="Python logging level."
    ),
) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ----------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------

@app.command("encode", context_settings=_NUMERIC_ARGS)
def encode_cmd(
    coords: Optional[str] = typer.Argument(None, help='"lat, lng"; read from stdin if omitted or "-".'),
    precision: int = typer.Option(geohash.MAX_PRECISION, "--precision", "-p", min=1, max=geohash.MAX_PRECISION),
) -> None:
    """Encode a "lat, lng" pair."""
    text = _read_input(coords)
    try:
        lat, lng = geohash.parse_coordinate(text)
        typer.echo(geohash.encode(lat, lng, precision))
    except GeohashError as exc:
        _fail("encoding", exc)


@app.command("decode")
def decode_cmd(
    value: Optional[str] = typer.Argument(None, help='Geohash; read from stdin if omitted or "-".'),
) -> None:
    """Decode a geohash into "lat, lng"."""
    text = _read_input(value)
    try:
        lat, lng = geohash.decode(text)
    except GeohashError as exc:
        _fail("decoding", exc)
    typer.echo(f"{lat:.4f}, {lng:.4f}")


@app.command("bbox", context_settings=_NUMERIC_ARGS)
def bbox_cmd(lat: float, lng: float, radius_km: float) -> None:
    """Bounding box of radius_km around a point."""
    try:
        box = bounding_box(lat, lng, radius_km)
    except GeohashError as exc:
        _fail("computing bounding box", exc)
    for name, value in box._asdict().items():
        typer.echo(f"{name}: {value:.6f}")


@app.command("distance", context_settings=_NUMERIC_ARGS)
def distance_cmd(lat1: float, lng1: float, lat2: float, lng2: float) -> None:
    """Great-circle distance in kilometers."""
    try:
        km = distance(lat1, lng1, lat2, lng2)
    except GeohashError as exc:
        _fail("computing distance", exc)
    typer.echo(f"{km:.3f}")


@app.command("length", context_settings=_NUMERIC_ARGS)
def length_cmd(radius_km: float) -> None:
    """Geohash length suited to a search radius."""
    try:
        typer.echo(estimate_length(radius_km))
    except GeohashError as exc:
        _fail("estimating length", exc)


if __name__ == "__main__":
    app()
