"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from predictsdk.config import get_settings
from predictsdk.config.settings import configure_logging

app = typer.Typer(
    name="predict",
    help="predict-sdk - parimutuel prediction markets: create, bet, resolve, pay out.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. dev) to overlay on default.toml"
    ),
    db_path: str | None = typer.Option(None, "--db-path", help="DuckDB file (overrides config)"),
) -> None:
    """Configure logging and store settings in context."""
    settings = get_settings(profile, config_dir)
    if db_path:
        settings.storage["db_path"] = db_path
    configure_logging(settings)
    ctx.obj = {"settings": settings, "config_dir": config_dir, "profile": profile}


# Subcommands registered from other modules
from predictsdk.cli import bets, data, markets, odds, users  # noqa: E402

app.add_typer(markets.app, name="markets")
app.add_typer(bets.app, name="bets")
app.add_typer(users.app, name="users")
app.add_typer(data.app, name="data")
app.add_typer(odds.app, name="odds")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
