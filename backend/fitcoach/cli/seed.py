"""``flask seed run|fresh``: demo data for development databases."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from fitcoach.core.extensions import db
from fitcoach.seeds import seed_data
from fitcoach.services._shared.errors import ServiceError

LOGGER = logging.getLogger(__name__)


def _echo_summary(summary: dict[str, dict[str, int]]) -> None:
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (no changes)")
        return
    width = max(len(name) for name in summary)
    for table, counters in sorted(summary.items()):
        created = counters.get("created", 0)
        existing = counters.get("existing", 0)
        click.echo(f"  {table.ljust(width)}  created={created:>2}  existing={existing:>2}")


def _ensure_non_production() -> None:
    """Abort destructive commands outside development and testing."""
    config = current_app.config
    if not (config.get("DEBUG") or config.get("TESTING")):
        raise click.UsageError("'flask seed fresh' is restricted to non-production environments.")


def _run(verbose: bool, label: str) -> None:
    try:
        summary = seed_data.run_all(db, verbose=verbose)
    except ServiceError as exc:
        db.session.rollback()
        raise click.ClickException(f"{label} failed: {exc}") from exc
    _echo_summary(summary)


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Enable verbose logging for seeding.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Database seeding commands."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger(seed_data.__name__).setLevel(level)
    LOGGER.setLevel(level)


@seed_cli.command("run")
@click.pass_context
@with_appcontext
def run_command(ctx: click.Context) -> None:
    """Populate the database with idempotent demo data."""
    _run(bool(ctx.obj.get("verbose", False)), "Seeding")


@seed_cli.command("fresh")
@click.option("--yes", is_flag=True, help="Skip the destructive confirmation prompt.")
@click.pass_context
@with_appcontext
def fresh_command(ctx: click.Context, yes: bool) -> None:
    """Drop all tables, recreate the schema and seed demo data."""
    _ensure_non_production()
    if not yes:
        click.confirm("This will DROP all application tables and recreate them. Continue?", abort=True)
    LOGGER.info("Recreating database schema...")
    db.session.remove()
    db.drop_all()
    db.create_all()
    _run(bool(ctx.obj.get("verbose", False)), "Fresh seed")
