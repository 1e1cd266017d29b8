from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cueleague.services import ranking_service
from cueleague.schemas import ranking_schemas
from cueleague.api.dependencies import get_db

router = APIRouter()

@router.get("", response_model=List[ranking_schemas.RankedEntry])
def get_ranking_endpoint(
    tournament: Optional[int] = Query(None, description="Tournament id; omit for the club league"),
    db: Session = Depends(get_db),
):
    """
    Tiered leaderboard: qualified players first, then replacements, then
    everyone else (including players below the games-played threshold).
    """
    return ranking_service.get_leaderboard(db=db, tournament_id=tournament)
