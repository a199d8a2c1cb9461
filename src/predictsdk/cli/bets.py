"""Bets subcommand: place, list."""

from __future__ import annotations

import typer

from predictsdk.cli.common import run_op
from predictsdk.models import PlaceBetInput

app = typer.Typer(help="Place and list bets")


@app.command("place")
def place(
    ctx: typer.Context,
    market: str = typer.Option(..., "--market", "-m", help="Market ID"),
    user: str = typer.Option(..., "--user", "-u", help="Bettor ID"),
    outcome: str = typer.Option(..., "--outcome", "-o", help="Outcome ID"),
    amount: float = typer.Option(..., "--amount", "-a", help="Stake"),
) -> None:
    """Place a bet (debits the bettor's balance)."""
    data = PlaceBetInput(market_id=market, bettor_id=user, outcome_id=outcome, amount=amount)
    bet = run_op(ctx, lambda sdk: sdk.place_bet(data))
    typer.echo(f"Bet {bet.id}: {bet.amount:.2f} on {bet.outcome_id}")
    typer.echo(f"Odds at bet: {bet.odds_at_bet:.2f}  Potential payout: {bet.potential_payout:.2f}")


@app.command("list")
def list_bets(
    ctx: typer.Context,
    market: str | None = typer.Option(None, "--market", "-m", help="Filter by market ID"),
    user: str | None = typer.Option(None, "--user", "-u", help="Filter by bettor ID"),
) -> None:
    """List bets for a market or a user."""
    if not market and not user:
        typer.echo("--market or --user is required")
        raise typer.Exit(1)
    if market:
        bets = run_op(ctx, lambda sdk: sdk.get_bets_by_market(market))
    else:
        bets = run_op(ctx, lambda sdk: sdk.get_bets_by_user(user))
    if market and user:
        bets = [b for b in bets if b.bettor_id == user]
    for b in bets:
        payout = f"{b.payout:.2f}" if b.payout is not None else "-"
        typer.echo(f"  {b.id}  {b.bettor_id:<16}  {b.outcome_id}  {b.amount:>10.2f}  {b.status.value:<9}  {payout}")
    typer.echo(f"Total: {len(bets)} bets")
