"""Markets subcommand: create, list, show, close, resolve, cancel, stats, expire."""

from __future__ import annotations

import typer

from predictsdk.cli.common import echo_market, run_op
from predictsdk.models import CreateMarketInput, MarketStatus, OutcomeType, ResolveMarketInput
from predictsdk.utils.clock import now_ms

app = typer.Typer(help="Market lifecycle")


@app.command("create")
def create(
    ctx: typer.Context,
    question: str = typer.Option(..., "--question", "-q", help="Market question"),
    outcomes: list[str] = typer.Option(..., "--outcome", "-o", help="Outcome label (repeat for each outcome)"),
    closes_in: int = typer.Option(60, "--closes-in", help="Minutes until the market closes"),
    outcome_type: OutcomeType = typer.Option(OutcomeType.BINARY, "--type", help="binary, multiple or scalar"),
    fee_rate: float | None = typer.Option(None, "--fee-rate", help="Fee rate in [0, 0.5] (default from config)"),
    min_bet: float | None = typer.Option(None, "--min-bet"),
    max_bet: float | None = typer.Option(None, "--max-bet"),
    allow: list[str] | None = typer.Option(None, "--allow", help="Allowed bettor id (repeat); default: anyone"),
    description: str | None = typer.Option(None, "--description", "-d"),
) -> None:
    """Create a market."""
    data = CreateMarketInput(
        question=question,
        description=description,
        outcomes=list(outcomes),
        closes_at=now_ms() + closes_in * 60_000,
        outcome_type=outcome_type,
        fee_rate=fee_rate,
        min_bet=min_bet,
        max_bet=max_bet,
        allowed_bettors=list(allow) if allow else None,
    )
    market = run_op(ctx, lambda sdk: sdk.create_market(data))
    typer.echo("Created market:")
    echo_market(market)


@app.command("list")
def list_markets(
    ctx: typer.Context,
    status: MarketStatus | None = typer.Option(None, "--status", "-s", help="Filter by status"),
) -> None:
    """List markets with live odds."""
    markets = run_op(ctx, lambda sdk: sdk.get_all_markets(status=status))
    for m in markets:
        typer.echo(f"  {m.id}  {m.status.value:<9}  {m.total_pool:>10.2f}  {m.question[:60]}")
    typer.echo(f"Total: {len(markets)} markets")


@app.command("show")
def show(ctx: typer.Context, market_id: str = typer.Argument(..., help="Market ID")) -> None:
    """Show one market with its outcomes."""
    market = run_op(ctx, lambda sdk: sdk.get_market(market_id))
    if market is None:
        typer.echo(f"Market not found: {market_id}")
        raise typer.Exit(1)
    echo_market(market)


@app.command("close")
def close(ctx: typer.Context, market_id: str = typer.Argument(..., help="Market ID")) -> None:
    """Stop accepting bets on a market."""
    market = run_op(ctx, lambda sdk: sdk.close_market(market_id))
    typer.echo(f"Closed {market.id}")


@app.command("resolve")
def resolve(
    ctx: typer.Context,
    market_id: str = typer.Argument(..., help="Market ID"),
    winner: str = typer.Option(..., "--winner", "-w", help="Winning outcome ID"),
    proof: str | None = typer.Option(None, "--proof", help="Resolution source / evidence"),
) -> None:
    """Resolve a market and pay out winners."""
    data = ResolveMarketInput(market_id=market_id, winning_outcome_id=winner, proof=proof)
    market = run_op(ctx, lambda sdk: sdk.resolve_market(data))
    typer.echo(f"Resolved {market.id}: winner {market.winning_outcome_id}")


@app.command("cancel")
def cancel(
    ctx: typer.Context,
    market_id: str = typer.Argument(..., help="Market ID"),
    reason: str | None = typer.Option(None, "--reason", "-r"),
) -> None:
    """Cancel a market and refund every bet."""
    market = run_op(ctx, lambda sdk: sdk.cancel_market(market_id, reason=reason))
    typer.echo(f"Cancelled {market.id}")


@app.command("stats")
def stats(ctx: typer.Context, market_id: str = typer.Argument(..., help="Market ID")) -> None:
    """Pool, bet count and per-outcome odds."""
    s = run_op(ctx, lambda sdk: sdk.get_market_stats(market_id))
    typer.echo(f"Total pool: {s.total_pool:.2f}")
    typer.echo(f"Total bets: {s.total_bets}")
    for o in s.outcome_stats:
        typer.echo(f"  {o.label[:30]:<30}  bets {o.bet_count:>4}  stake {o.total_bets:>10.2f}  odds {o.odds:.2f}")


@app.command("expire")
def expire(ctx: typer.Context) -> None:
    """Close every open market past its close time."""
    closed = run_op(ctx, lambda sdk: sdk.check_and_close_expired_markets())
    typer.echo(f"Closed {len(closed)} expired markets.")
