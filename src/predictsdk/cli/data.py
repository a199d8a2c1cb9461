"""Data subcommand: stats, export, import, clear."""

from __future__ import annotations

from pathlib import Path

import typer

from predictsdk.cli.common import open_sdk, run_op
from predictsdk.models import StorageSnapshot

app = typer.Typer(help="Storage statistics and JSON snapshots")


@app.command("stats")
def stats(ctx: typer.Context) -> None:
    """Entity counts in storage."""
    with open_sdk(ctx) as sdk:
        s = sdk.get_storage_stats()
    typer.echo(f"Markets: {s['markets']}  Bets: {s['bets']}  Users: {s['users']}")


@app.command("export")
def export(
    ctx: typer.Context,
    output: str = typer.Option("snapshot.json", "--output", "-o", help="Output path"),
) -> None:
    """Export all markets, bets and users to a JSON snapshot."""
    with open_sdk(ctx) as sdk:
        snapshot = sdk.export_data()
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
    typer.echo(f"Exported {len(snapshot.markets)} markets, {len(snapshot.bets)} bets, {len(snapshot.users)} users to {output}")


@app.command("import")
def import_(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Snapshot JSON file"),
) -> None:
    """Upsert a JSON snapshot into storage."""
    snapshot = StorageSnapshot.model_validate_json(Path(path).read_text(encoding="utf-8"))
    counts = run_op(ctx, lambda sdk: sdk.import_data(snapshot))
    typer.echo(f"Imported. Markets: {counts['markets']}  Bets: {counts['bets']}  Users: {counts['users']}")


@app.command("clear")
def clear(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete every market, bet and user in this storage namespace."""
    if not yes:
        typer.confirm("Delete all markets, bets and users?", abort=True)
    run_op(ctx, lambda sdk: sdk.clear())
    typer.echo("Storage cleared.")
