from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from cueleague.services import match_service, reversal_service
from cueleague.schemas import auth_schemas, match_schemas
from cueleague.api.dependencies import get_db, get_current_organizer

router = APIRouter()

@router.post("", response_model=match_schemas.MatchRead, status_code=status.HTTP_201_CREATED)
def record_match_endpoint(
    match_in: match_schemas.MatchCreate,
    db: Session = Depends(get_db),
    organizer: auth_schemas.TokenData = Depends(get_current_organizer),
):
    return match_service.record_match(
        db=db,
        winner=match_in.winner,
        loser=match_in.loser,
        winner_score=match_in.winner_score,
        loser_score=match_in.loser_score,
        tournament_id=match_in.tournament_id,
    )

@router.get("", response_model=List[match_schemas.MatchRead])
def list_matches_endpoint(
    tournament: Optional[int] = Query(None),
    player: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    return match_service.list_matches(db=db, tournament_id=tournament, player_id=player)

@router.post("/undo-last", response_model=match_schemas.ReversalReport)
def undo_last_endpoint(
    undo_in: Optional[match_schemas.UndoRequest] = None,
    db: Session = Depends(get_db),
    organizer: auth_schemas.TokenData = Depends(get_current_organizer),
):
    tournament_id = undo_in.tournament_id if undo_in else None
    return reversal_service.undo_last(db=db, tournament_id=tournament_id)

@router.post("/bulk-delete", response_model=match_schemas.ReversalReport)
def bulk_delete_endpoint(
    bulk_in: match_schemas.BulkDeleteRequest,
    db: Session = Depends(get_db),
    organizer: auth_schemas.TokenData = Depends(get_current_organizer),
):
    return reversal_service.reverse_selected(db=db, match_ids=bulk_in.ids)

@router.get("/{match_id}", response_model=match_schemas.MatchRead)
def get_match_endpoint(match_id: int, db: Session = Depends(get_db)):
    return match_service.get_match(db=db, match_id=match_id)

@router.patch("/{match_id}", response_model=match_schemas.MatchRead)
def update_match_scores_endpoint(
    match_id: int,
    scores_in: match_schemas.MatchScoresUpdate,
    db: Session = Depends(get_db),
    organizer: auth_schemas.TokenData = Depends(get_current_organizer),
):
    return match_service.update_match_scores(
        db=db, match_id=match_id, winner_score=scores_in.winner_score, loser_score=scores_in.loser_score
    )
