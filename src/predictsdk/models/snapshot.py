"""StorageSnapshot - bulk export/import payload."""

from pydantic import BaseModel, Field

from predictsdk.models.bet import Bet
from predictsdk.models.market import Market
from predictsdk.models.user import User


class StorageSnapshot(BaseModel):
    markets: list[Market] = Field(default_factory=list)
    bets: list[Bet] = Field(default_factory=list)
    users: list[User] = Field(default_factory=list)
