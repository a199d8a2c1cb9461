"""Users subcommand: show, fund."""

from __future__ import annotations

import typer

from predictsdk.cli.common import run_op
from predictsdk.models import User

app = typer.Typer(help="User balances")


def _echo_user(user: User) -> None:
    typer.echo(f"User: {user.id}")
    typer.echo(f"Balance: {user.balance:.2f}")
    typer.echo(f"Wagered: {user.total_bets:.2f}  Won: {user.total_won:.2f}  Lost: {user.total_lost:.2f}")


@app.command("show")
def show(ctx: typer.Context, user_id: str = typer.Argument(..., help="User ID")) -> None:
    """Show a user's balance and lifetime totals."""
    user = run_op(ctx, lambda sdk: sdk.get_user(user_id))
    if user is None:
        typer.echo(f"User not found: {user_id}")
        raise typer.Exit(1)
    _echo_user(user)


@app.command("fund")
def fund(
    ctx: typer.Context,
    user_id: str = typer.Argument(..., help="User ID"),
    amount: float = typer.Argument(..., help="Amount to credit"),
) -> None:
    """Credit a user's balance (creates the user if needed)."""
    user = run_op(ctx, lambda sdk: sdk.add_funds(user_id, amount))
    _echo_user(user)
