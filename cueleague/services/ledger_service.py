"""
Player ledger store.

The ledger columns of ``Player`` are denormalized aggregates of the match
history. They are only ever changed here, through server-side
``col = col + delta`` updates, so concurrent requests touching the same
player cannot lose an increment.
"""
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from cueleague.core.exceptions import InvalidPlayer
from cueleague.models import player as player_model

LEDGER_FIELDS = ("points", "wins", "losses", "games_played", "score_units")
SETTABLE_FIELDS = ("phone",)


def normalize_name(name) -> str:
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        raise InvalidPlayer("Player name must not be empty")
    return name


def find_player(db: Session, player_id: int) -> Optional[player_model.Player]:
    return db.query(player_model.Player).filter(player_model.Player.id == player_id).first()


def find_player_by_name(db: Session, name: str, tournament_id: Optional[int] = None) -> Optional[player_model.Player]:
    return db.query(player_model.Player).filter(
        player_model.Player.name == name,
        player_model.Player.tournament_id.is_(None) if tournament_id is None
        else player_model.Player.tournament_id == tournament_id,
    ).first()


def list_players(db: Session, tournament_id: Optional[int] = None, phone: Optional[str] = None) -> List[player_model.Player]:
    query = db.query(player_model.Player)
    if tournament_id is None:
        query = query.filter(player_model.Player.tournament_id.is_(None))
    else:
        query = query.filter(player_model.Player.tournament_id == tournament_id)
    if phone is not None:
        query = query.filter(player_model.Player.phone == phone)
    return query.order_by(player_model.Player.id).all()


def apply_increment(db: Session, player_id: Optional[int], deltas: Dict[str, int]) -> bool:
    """
    Adds ``deltas`` to the player's ledger in a single UPDATE statement.
    Returns False when the player row does not exist.
    """
    if player_id is None:
        return False
    unknown = set(deltas) - set(LEDGER_FIELDS)
    if unknown:
        raise ValueError(f"Not ledger fields: {sorted(unknown)}")

    values = {
        getattr(player_model.Player, field): getattr(player_model.Player, field) + delta
        for field, delta in deltas.items() if delta
    }
    if not values:
        return find_player(db, player_id) is not None

    updated = db.query(player_model.Player)\
        .filter(player_model.Player.id == player_id)\
        .update(values, synchronize_session=False)
    return updated == 1


def upsert_player_increment(
    db: Session,
    name: str,
    deltas: Optional[Dict[str, int]] = None,
    set_fields: Optional[Dict[str, object]] = None,
    tournament_id: Optional[int] = None,
) -> player_model.Player:
    """
    Creates the player on first sight, then applies ``deltas`` atomically and
    overwrites ``set_fields``. Does not commit.
    """
    name = normalize_name(name)
    set_fields = set_fields or {}
    unknown = set(set_fields) - set(SETTABLE_FIELDS)
    if unknown:
        raise ValueError(f"Not settable fields: {sorted(unknown)}")

    player = find_player_by_name(db, name, tournament_id)
    if player is None:
        player = player_model.Player(
            name=name,
            tournament_id=tournament_id,
            points=0, wins=0, losses=0, games_played=0, score_units=0,
        )
        db.add(player)
        # A concurrent insert of the same name fails here with IntegrityError
        db.flush()

    if set_fields:
        db.query(player_model.Player)\
            .filter(player_model.Player.id == player.id)\
            .update(set_fields, synchronize_session=False)
    if deltas:
        apply_increment(db, player.id, deltas)

    db.refresh(player)
    return player
