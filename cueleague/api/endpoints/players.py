from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from cueleague.services import ledger_service, player_service
from cueleague.schemas import auth_schemas, player_schemas
from cueleague.api.dependencies import get_db, get_current_organizer

router = APIRouter()

@router.post("", response_model=player_schemas.PlayerRead, status_code=status.HTTP_201_CREATED)
def register_player_endpoint(
    player_in: player_schemas.PlayerCreate,
    db: Session = Depends(get_db),
    organizer: auth_schemas.TokenData = Depends(get_current_organizer),
):
    return player_service.register_player(
        db=db, name=player_in.name, phone=player_in.phone, tournament_id=player_in.tournament_id
    )

@router.get("", response_model=List[player_schemas.PlayerRead])
def list_players_endpoint(
    tournament: Optional[int] = Query(None, description="Tournament id; omit for the club league"),
    db: Session = Depends(get_db),
):
    return ledger_service.list_players(db=db, tournament_id=tournament)

# Declared before /{player_id} so "lookup" is not parsed as an id
@router.get("/lookup", response_model=player_schemas.PlayerHistory)
def lookup_player_endpoint(phone: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    """Public lookup of a player's match history by phone number."""
    return player_service.lookup_by_phone(db=db, phone=phone)

@router.get("/{player_id}", response_model=player_schemas.PlayerRead)
def get_player_endpoint(player_id: int, db: Session = Depends(get_db)):
    return player_service.get_player(db=db, player_id=player_id)
