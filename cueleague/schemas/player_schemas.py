from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

class PlayerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    tournament_id: Optional[int] = None

class PlayerRead(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    tournament_id: Optional[int] = None
    points: int
    wins: int
    losses: int
    games_played: int
    score_units: int

    class Config:
        from_attributes = True

class PlayerHistoryEntry(BaseModel):
    match_id: int
    result: str # "WON" or "LOST"
    opponent: str
    own_score: int
    opponent_score: int
    played_at: datetime

class PlayerHistory(BaseModel):
    player: PlayerRead
    played: int
    matches: List[PlayerHistoryEntry]
