"""Shared CLI helpers: build the SDK from settings, run an operation, report errors."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

import typer

from predictsdk.core import PredictSDK
from predictsdk.errors import PredictSDKError
from predictsdk.models import Market

T = TypeVar("T")


@contextmanager
def open_sdk(ctx: typer.Context) -> Iterator[PredictSDK]:
    """SDK over the configured storage; closes the DuckDB connection afterwards."""
    settings = ctx.obj["settings"]
    try:
        storage = settings.create_storage()
        sdk = PredictSDK(settings.sdk_config(), storage=storage)
    except PredictSDKError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    try:
        yield sdk
    finally:
        close = getattr(storage, "close", None)
        if close is not None:
            close()


def run_op(ctx: typer.Context, op: Callable[[PredictSDK], Awaitable[T]]) -> T:
    """Run one async SDK operation; PredictSDKError -> message on stderr + exit 1."""
    with open_sdk(ctx) as sdk:
        try:
            return asyncio.run(op(sdk))
        except PredictSDKError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from e


def echo_market(market: Market) -> None:
    typer.echo(f"{market.id}  [{market.status.value}]  {market.question}")
    typer.echo(f"  pool: {market.total_pool:.2f}  fee: {market.fee_rate:.2%}  closes_at: {market.closes_at}")
    for o in market.outcomes:
        typer.echo(
            f"  {o.id}  {o.label[:40]:<40}  stake {o.total_bets:>10.2f}  odds {o.odds:>6.2f}  p {o.probability:.3f}"
        )
    if market.winning_outcome_id:
        typer.echo(f"  winner: {market.winning_outcome_id}")
