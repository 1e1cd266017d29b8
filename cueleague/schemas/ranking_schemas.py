from enum import Enum
from typing import Optional

from pydantic import BaseModel

class Tier(str, Enum):
    QUALIFIED = "QUALIFIED"
    REPLACEMENT = "REPLACEMENT"
    REMAINDER = "REMAINDER"

class RankedEntry(BaseModel):
    position: int
    tier: Tier
    player_id: Optional[int] = None
    name: str
    points: int
    wins: int
    losses: int
    games_played: int
    score_units: int
    average: float

    class Config:
        use_enum_values = True
