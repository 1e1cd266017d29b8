from pydantic import BaseModel, Field
from typing import List, Optional, Union
from datetime import datetime

class MatchCreate(BaseModel):
    winner: str
    loser: str
    # Raw values: the recorder decides whether they are valid scores
    winner_score: Union[int, str]
    loser_score: Union[int, str]
    tournament_id: Optional[int] = None

class MatchRead(BaseModel):
    id: int
    tournament_id: Optional[int] = None
    winner_id: Optional[int] = None
    loser_id: Optional[int] = None
    winner_name: str
    loser_name: str
    winner_score: int
    loser_score: int
    winner_points: int
    loser_points: int
    encounter: int
    played_at: datetime

    class Config:
        from_attributes = True

class MatchScoresUpdate(BaseModel):
    winner_score: Union[int, str]
    loser_score: Union[int, str]

class UndoRequest(BaseModel):
    tournament_id: Optional[int] = None

class BulkDeleteRequest(BaseModel):
    ids: List[int] = Field(..., min_length=1)

class ReversalReport(BaseModel):
    reversed: List[int] = Field(default_factory=list)
    skipped: List[int] = Field(default_factory=list)
    ledger_misses: List[str] = Field(default_factory=list)
