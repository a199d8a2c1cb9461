"""Odds subcommand: format, kelly. Pure math, no storage."""

from __future__ import annotations

import typer

from predictsdk.utils.odds import DEFAULT_KELLY_FRACTION, ODDS_FORMATS, format_odds, kelly_bet

app = typer.Typer(help="Odds formatting and stake sizing")


@app.command("format")
def format_cmd(
    odds: float = typer.Argument(..., help="Decimal odds"),
    fmt: str = typer.Option("decimal", "--format", "-f", help="decimal, american or fractional"),
) -> None:
    """Render decimal odds in another format."""
    if fmt not in ODDS_FORMATS:
        typer.echo(f"Unknown format: {fmt}. Choose from: {list(ODDS_FORMATS)}")
        raise typer.Exit(1)
    try:
        typer.echo(format_odds(odds, fmt))
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


@app.command("kelly")
def kelly(
    probability: float = typer.Option(..., "--probability", "-p", help="Estimated win probability"),
    odds: float = typer.Option(..., "--odds", help="Decimal odds"),
    bankroll: float = typer.Option(..., "--bankroll", "-b"),
    fraction: float = typer.Option(DEFAULT_KELLY_FRACTION, "--fraction", help="Kelly multiplier"),
) -> None:
    """Fractional-Kelly stake suggestion."""
    typer.echo(f"{kelly_bet(probability, odds, bankroll, fraction):.2f}")
