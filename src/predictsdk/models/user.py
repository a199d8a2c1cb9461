"""User - balance and lifetime totals."""

from pydantic import BaseModel


class User(BaseModel):
    """Created lazily on first reference with the configured starting balance."""

    id: str
    balance: float = 0.0
    total_bets: float = 0.0  # lifetime amount wagered
    total_won: float = 0.0
    total_lost: float = 0.0
    created_at: int  # ms epoch
