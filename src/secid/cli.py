"""
SecID command line.

Usage:
    secid detect TOKEN [TOKEN ...] [--types isin,cusip] [--format table|json]
    secid scan [TEXT] [--types ...] [--format table|json]   (stdin when TEXT omitted)
    secid info TYPE
    secid types
"""

from __future__ import annotations

import json
import sys
from typing import Any

import click

from secid import api
from secid.config import get_settings
from secid.exceptions import SecIDError
from secid.logging_config import setup_logging


MAX_CELL_WIDTH = 50


class OutputFormatter:
    """Render rows for the terminal (padded columns) or for scripts (JSON).

    Cells wider than MAX_CELL_WIDTH are cut and end in ``...``.
    """

    def __init__(self, output_format: str = "table") -> None:
        self.format = output_format

    def _dump(self, data: Any) -> None:
        click.echo(json.dumps(data, indent=2, default=str))

    def print_table(
        self,
        data: list[dict[str, Any]],
        columns: list[str],
    ) -> None:
        if self.format == "json":
            self._dump(data)
            return

        titles = [name.replace("_", " ").title() for name in columns]
        cells = [[_cell(row.get(name)) for name in columns] for row in data]
        widths = [
            min(MAX_CELL_WIDTH, max([len(title)] + [len(line[i]) for line in cells]))
            for i, title in enumerate(titles)
        ]

        title_line = "  ".join(title.ljust(width) for title, width in zip(titles, widths))
        click.echo(title_line)
        click.echo("-" * len(title_line))
        for line in cells:
            padded = (_fit(text, width).ljust(width) for text, width in zip(line, widths))
            click.echo("  ".join(padded).rstrip())

    def print_single(self, data: dict[str, Any]) -> None:
        if self.format == "json":
            self._dump(data)
            return
        for name, value in data.items():
            click.echo(f"  {name}: {_cell(value)}")


def _fit(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return str(value)


def _parse_types(types: str | None) -> list[str] | None:
    if not types:
        return None
    return [t.strip() for t in types.split(",") if t.strip()]


format_option = click.option(
    "--format",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"]),
    help="Output format",
)
types_option = click.option(
    "--types",
    "-t",
    default=None,
    help="Comma-separated format keys to restrict to (e.g. isin,cusip)",
)


@click.group()
@click.version_option(package_name="secid")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override SECID_LOGGING__LEVEL",
)
def cli(log_level: str | None) -> None:
    """SecID - detect and extract financial identifiers"""
    settings = get_settings()
    setup_logging(
        level=log_level or settings.logging.level,
        json_format=settings.logging.json_format,
    )


@cli.command()
@click.argument("tokens", nargs=-1, required=True)
@types_option
@format_option
def detect(tokens: tuple[str, ...], types: str | None, output_format: str) -> None:
    """Classify each TOKEN, most specific format first.

    Exits with status 1 when no token matches.

    Examples:
        secid detect 037833100
        secid detect US5949181045 B0YBKJ7 --format json
    """
    try:
        allowed = api.get_engine().detector.tables.resolve_types(_parse_types(types))
    except SecIDError as e:
        raise click.ClickException(e.message) from e

    rows = []
    for token in tokens:
        keys = api.detect(token)
        if allowed is not None:
            keys = [k for k in keys if k in allowed]
        rows.append({"token": token, "types": keys})

    OutputFormatter(output_format).print_table(rows, columns=["token", "types"])
    if not any(row["types"] for row in rows):
        sys.exit(1)


@cli.command()
@click.argument("text", required=False)
@types_option
@format_option
def scan(text: str | None, types: str | None, output_format: str) -> None:
    """Find identifiers in TEXT (or standard input).

    Examples:
        secid scan "Buy US5949181045 and 594918104"
        cat filing.txt | secid scan --types isin,cusip --format json
    """
    if text is None:
        text = click.get_text_stream("stdin").read()

    try:
        matches = api.extract(text, _parse_types(types))
    except SecIDError as e:
        raise click.ClickException(e.message) from e

    rows = [m.to_dict() for m in matches]
    OutputFormatter(output_format).print_table(
        rows, columns=["type", "raw", "start", "end", "normalized"]
    )


@cli.command()
@click.argument("type_key")
@format_option
def info(type_key: str, output_format: str) -> None:
    """Show metadata for one format."""
    try:
        cls = api.lookup(type_key)
    except SecIDError as e:
        raise click.ClickException(e.message) from e

    length = cls.id_length
    OutputFormatter(output_format).print_single({
        "key": cls.key,
        "name": cls.full_name,
        "length": f"{length.start}-{length.stop - 1}" if isinstance(length, range) else length,
        "check_digit": cls.has_check_digit,
        "example": cls.example,
    })


@cli.command(name="types")
@format_option
def list_types(output_format: str) -> None:
    """List built-in formats in load order."""
    rows = [
        {"key": cls.key, "name": cls.full_name, "check_digit": cls.has_check_digit}
        for cls in api.identifier_types()
    ]
    OutputFormatter(output_format).print_table(rows, columns=["key", "name", "check_digit"])


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
