from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cueleague.services import tournament_service
from cueleague.schemas import auth_schemas, tournament_schemas
from cueleague.schemas.rules_schemas import RulesOverride
from cueleague.api.dependencies import get_db, get_current_organizer

router = APIRouter()

@router.post("", response_model=tournament_schemas.TournamentRead, status_code=status.HTTP_201_CREATED)
def create_tournament_endpoint(
    tournament_in: tournament_schemas.TournamentCreate,
    db: Session = Depends(get_db),
    organizer: auth_schemas.TokenData = Depends(get_current_organizer),
):
    return tournament_service.create_tournament(db=db, tournament=tournament_in)

@router.get("", response_model=List[tournament_schemas.TournamentRead])
def list_tournaments_endpoint(db: Session = Depends(get_db)):
    return tournament_service.list_tournaments(db=db)

@router.get("/{tournament_id}", response_model=tournament_schemas.TournamentRead)
def get_tournament_endpoint(tournament_id: int, db: Session = Depends(get_db)):
    return tournament_service.require_tournament(db=db, tournament_id=tournament_id)

@router.patch("/{tournament_id}/rules", response_model=tournament_schemas.TournamentRead)
def override_rules_endpoint(
    tournament_id: int,
    override_in: RulesOverride,
    db: Session = Depends(get_db),
    organizer: auth_schemas.TokenData = Depends(get_current_organizer),
):
    """
    Break-glass override. Only **min_games** and **top_slots** may change once
    a tournament exists; any other field is refused.
    """
    return tournament_service.override_rules(
        db=db, tournament_id=tournament_id, changes=override_in.model_dump()
    )
