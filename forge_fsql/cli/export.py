"""fsql-export: dump schema and data from a Forge SQL webtrigger."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import click

from ..client import ForgeClient
from ..config import URL_ENV_VAR
from ..export import (
    ExportError,
    SqlExporter,
    extract_ddl_from_migrations,
    find_migration_candidates,
)
from ..utils.logging import setup_logging

DEFAULT_DUMP_DIR = Path("fsql-dumps")


def default_output_path(now: Optional[datetime] = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
    return DEFAULT_DUMP_DIR / f"fsql-export-{stamp}.sql"


def resolve_migration_file(migrations: Optional[str]) -> Optional[str]:
    """Pick the migration file by flag, auto-discovery, or user input."""
    if migrations:
        return migrations

    click.echo(click.style("Forge FSQL Export", fg="blue", bold=True), err=True)
    click.echo(
        "Searching for migrations file to extract DDL [NOTE: use --live-schema "
        "to skip this and use the database only].\n",
        err=True,
    )
    candidates = find_migration_candidates()

    if len(candidates) == 1:
        if click.confirm(f"Found migration file: {candidates[0]}. Use this?", default=True, err=True):
            return candidates[0]
    elif len(candidates) > 1:
        click.echo("Found multiple migration files:\n", err=True)
        for index, candidate in enumerate(candidates, start=1):
            click.echo(f"  {index}) {candidate}", err=True)
        choice = click.prompt(
            "Enter number to use, or press Enter to skip",
            default="",
            show_default=False,
            err=True,
        )
        if choice.isdigit() and 1 <= int(choice) <= len(candidates):
            return candidates[int(choice) - 1]

    user_path = click.prompt(
        "Enter path to migration.ts (or press Enter to skip)",
        default="",
        show_default=False,
        err=True,
    ).strip()
    if not user_path:
        return None
    if not Path(user_path).exists():
        click.echo(f"File not found: {user_path}", err=True)
        return None
    return user_path


@click.command()
@click.option("--url", envvar=URL_ENV_VAR, help=f"Webtrigger URL. Defaults to ${URL_ENV_VAR}.")
@click.option("--schema-only", is_flag=True, help="Export schema only (skip data).")
@click.option(
    "--output",
    type=click.Path(dir_okay=False),
    help="Output file (default: ./fsql-dumps/fsql-export-<timestamp>.sql).",
)
@click.option(
    "--migrations",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    help="Path to migration.ts for DDL extraction.",
)
@click.option("--live-schema", is_flag=True, help="Skip migrations, fetch all DDL from the live database.")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=30.0,
    show_default=True,
    help="Request timeout in seconds.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
def cli(
    url: Optional[str],
    schema_only: bool,
    output: Optional[str],
    migrations: Optional[str],
    live_schema: bool,
    timeout: float,
    log_level: str,
) -> None:
    """Export schema and data from Atlassian Forge SQL."""
    setup_logging(log_level)

    if not url:
        click.echo(click.style(f"Error: {URL_ENV_VAR} not configured", fg="red"), err=True)
        sys.exit(1)

    ddl_overrides = {}
    if live_schema:
        click.echo("Live schema mode: all DDL will be fetched from the database", err=True)
    else:
        migration_file = resolve_migration_file(migrations)
        if migration_file:
            ddl = extract_ddl_from_migrations(migration_file)
            ddl_overrides = ddl.merged()
            click.echo(
                click.style(f"Using migrations from: {migration_file}", fg="green")
                + f" ({len(ddl.tables)} table(s), {len(ddl.views)} view(s))",
                err=True,
            )
            if not ddl:
                click.echo("Warning: No DDL statements found in migration file", err=True)
        else:
            click.echo("No migration file: all DDL will be fetched from the database", err=True)

    if schema_only:
        click.echo("Mode: Schema only (skipping data)", err=True)

    with ForgeClient(url, timeout=timeout) as client:
        exporter = SqlExporter(client, schema_only=schema_only, ddl_overrides=ddl_overrides)
        try:
            dump = exporter.export()
        except ExportError as exc:
            click.echo(click.style(str(exc), fg="red"), err=True)
            sys.exit(1)

    output_path = Path(output) if output else default_output_path()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dump, encoding="utf-8")
    click.echo(click.style(f"Export written to {output_path}", fg="green"), err=True)


if __name__ == "__main__":
    cli()
