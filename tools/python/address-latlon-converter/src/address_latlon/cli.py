"""
Address LatLon Converter — CLI Entry Point
===========================================
Installed as the ``geo-latlon`` command via ``pyproject.toml``.

Usage:
    geo-latlon --input data/shops.csv --encoding Shift_JIS \\
               -a 都道府県 -a 住所 --format combined --backend gsi
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from address_latlon.converter import AddressLatLonConverter, ConverterConfig
from address_latlon.decoder import DEFAULT_ENCODING, SUPPORTED_ENCODINGS
from address_latlon.export import PREVIEW_LIMIT, CoordinateFormat, preview_headers
from address_latlon.gateway import DEFAULT_USER_AGENT, GATEWAY_BACKENDS, create_gateway
from shared.python.exceptions import LatLonKitError


@click.command(
    name="geo-latlon",
    help="Add latitude/longitude columns to a CSV of addresses.",
)
@click.option(
    "--input", "-i", "input_path",
    required=True,
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    help="Path to the input CSV file.",
)
@click.option(
    "--output", "-o", "output_path",
    default=None,
    type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
    help="Output CSV path.  [default: <input>_geocoded.csv]",
)
@click.option(
    "--encoding",
    type=click.Choice(list(SUPPORTED_ENCODINGS), case_sensitive=False),
    default=DEFAULT_ENCODING,
    show_default=True,
    help="Character encoding of the input file.",
)
@click.option(
    "--address-col", "-a", "address_cols",
    multiple=True,
    help="Address column; repeat to concatenate several in order.  [default: first column]",
)
@click.option(
    "--format", "coordinate_format",
    type=click.Choice([f.value for f in CoordinateFormat], case_sensitive=False),
    default=CoordinateFormat.SEPARATE.value,
    show_default=True,
    help="Write latitude/longitude as two columns or one 'lat_lon' column.",
)
@click.option(
    "--backend",
    type=click.Choice(list(GATEWAY_BACKENDS), case_sensitive=False),
    default="gsi",
    show_default=True,
    help="Geocoding provider to use.",
)
@click.option(
    "--user-agent",
    default=DEFAULT_USER_AGENT,
    show_default=True,
    envvar="LATLON_USER_AGENT",
    help="User-agent string sent to the provider.  "
         "Can also be set via the LATLON_USER_AGENT environment variable.",
)
@click.option(
    "--rate-limit",
    default=None,
    type=float,
    help="Seconds to wait between geocoding requests.  [default: provider-specific]",
)
@click.option("--timeout", default=10, show_default=True, type=int, help="HTTP timeout in seconds.")
@click.option("--preview/--no-preview", default=True, show_default=True, help="Print the first rows of the result.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def main(
    input_path: Path,
    output_path: Path | None,
    encoding: str,
    address_cols: tuple[str, ...],
    coordinate_format: str,
    backend: str,
    user_agent: str,
    rate_limit: float | None,
    timeout: int,
    preview: bool,
    verbose: bool,
) -> None:
    """CLI entry point — wires Click options into AddressLatLonConverter."""
    gateway = create_gateway(
        backend,
        user_agent=user_agent,
        rate_limit_seconds=rate_limit,
        timeout=timeout,
    )
    config = ConverterConfig(
        input_encoding=encoding,
        address_columns=list(address_cols),
        coordinate_format=coordinate_format.lower(),
    )

    with click.progressbar(length=100, label="Geocoding") as bar:
        last = [0]

        def _advance(percent: int) -> None:
            bar.update(percent - last[0])
            last[0] = percent

        tool = AddressLatLonConverter(
            input_path=input_path,
            output_path=output_path,
            config=config,
            gateway=gateway,
            on_progress=_advance,
            verbose=verbose,
        )
        try:
            tool.run()
        except LatLonKitError as exc:
            click.echo(f"\nError: {exc.message}", err=True)
            sys.exit(1)

    result = tool.result
    assert result is not None and tool.session is not None

    if preview:
        click.echo("\n" + " | ".join(preview_headers(config.coordinate_format)))
        for row in tool.session.preview(config.coordinate_format):
            click.echo(" | ".join((row.address, *row.coordinates, row.status)))
        remaining = len(result.records) - PREVIEW_LIMIT
        if remaining > 0:
            click.echo(f"... and {remaining} more")

    click.echo(f"\nCSV written to: {tool.output_path}")
    click.echo(f"Geocoded: {result.success_count}/{len(result.records)} addresses successfully.")


if __name__ == "__main__":
    main()
