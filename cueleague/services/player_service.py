import logging
from typing import Optional

from sqlalchemy.orm import Session

from cueleague.core.database import transaction
from cueleague.core.exceptions import InvalidPlayer, NotFound
from cueleague.models import player as player_model
from cueleague.models import match as match_model
from cueleague.schemas import player_schemas
from cueleague.services import history_service, ledger_service, tournament_service

logger = logging.getLogger(__name__)


def register_player(db: Session, name: str, phone: Optional[str] = None,
                    tournament_id: Optional[int] = None) -> player_model.Player:
    """Adds a player, or updates the phone of an existing one. Stats are kept."""
    name = ledger_service.normalize_name(name)
    if tournament_id is not None:
        tournament_service.require_tournament(db, tournament_id)
    phone = phone.strip() if phone else None
    if phone:
        owner = db.query(player_model.Player).filter(player_model.Player.phone == phone).first()
        if owner and not (owner.name == name and owner.tournament_id == tournament_id):
            raise InvalidPlayer(f"Phone {phone} already belongs to {owner.name}")

    with transaction(db):
        player = ledger_service.upsert_player_increment(
            db, name, set_fields={"phone": phone} if phone else None, tournament_id=tournament_id
        )
    db.refresh(player)
    logger.info("Registered player %s (%s)", player.name, player.id)
    return player


def get_player(db: Session, player_id: int) -> player_model.Player:
    player = ledger_service.find_player(db, player_id)
    if not player:
        raise NotFound(f"Player {player_id} not found")
    return player


def _history_entry(player_id: int, record: match_model.MatchRecord) -> player_schemas.PlayerHistoryEntry:
    won = record.winner_id == player_id
    return player_schemas.PlayerHistoryEntry(
        match_id=record.id,
        result="WON" if won else "LOST",
        opponent=record.loser_name if won else record.winner_name,
        own_score=record.winner_score if won else record.loser_score,
        opponent_score=record.loser_score if won else record.winner_score,
        played_at=record.played_at,
    )


def lookup_by_phone(db: Session, phone: str) -> player_schemas.PlayerHistory:
    """Public lookup: a player's record, newest match first."""
    phone = (phone or "").strip()
    player = db.query(player_model.Player).filter(player_model.Player.phone == phone).first() if phone else None
    if not player:
        raise NotFound(f"No player found with phone {phone}")

    matches = history_service.find_matches(db, player_id=player.id)
    return player_schemas.PlayerHistory(
        player=player_schemas.PlayerRead.model_validate(player),
        played=len(matches),
        matches=[_history_entry(player.id, m) for m in matches],
    )
