from pydantic import BaseModel, Field
from datetime import datetime
from .rules_schemas import RulesConfig

class TournamentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    rules: RulesConfig = Field(default_factory=RulesConfig)

class TournamentRead(BaseModel):
    id: int
    name: str
    created_at: datetime
    win_points: int
    loss_points: int
    min_games: int
    top_slots: int
    replacement_slots: int

    class Config:
        from_attributes = True
