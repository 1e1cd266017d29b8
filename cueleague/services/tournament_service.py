import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from cueleague.core.config import settings
from cueleague.core.database import transaction
from cueleague.core.exceptions import InvalidRules, NotFound, RulesLocked
from cueleague.models import tournament as tournament_model
from cueleague.schemas import tournament_schemas
from cueleague.schemas.rules_schemas import RulesConfig, OVERRIDABLE_FIELDS

logger = logging.getLogger(__name__)


def club_rules() -> RulesConfig:
    """Rules for the club-wide league, which has no tournament row."""
    return RulesConfig(
        win_points=settings.DEFAULT_WIN_POINTS,
        loss_points=settings.DEFAULT_LOSS_POINTS,
        min_games=settings.DEFAULT_MIN_GAMES,
        top_slots=settings.DEFAULT_TOP_SLOTS,
        replacement_slots=settings.DEFAULT_REPLACEMENT_SLOTS,
    )


def create_tournament(db: Session, tournament: tournament_schemas.TournamentCreate) -> tournament_model.Tournament:
    with transaction(db):
        db_tournament = tournament_model.Tournament(
            name=tournament.name.strip(),
            **tournament.rules.model_dump(),
        )
        db.add(db_tournament)
    db.refresh(db_tournament)
    logger.info("Created tournament %s (%s)", db_tournament.id, db_tournament.name)
    return db_tournament


def get_tournament(db: Session, tournament_id: int) -> Optional[tournament_model.Tournament]:
    return db.query(tournament_model.Tournament).filter(tournament_model.Tournament.id == tournament_id).first()


def require_tournament(db: Session, tournament_id: int) -> tournament_model.Tournament:
    tournament = get_tournament(db, tournament_id)
    if not tournament:
        raise NotFound(f"Tournament {tournament_id} not found")
    return tournament


def list_tournaments(db: Session) -> List[tournament_model.Tournament]:
    return db.query(tournament_model.Tournament).order_by(tournament_model.Tournament.id).all()


def get_rules(db: Session, tournament_id: Optional[int] = None) -> RulesConfig:
    if tournament_id is None:
        return club_rules()
    return RulesConfig.model_validate(require_tournament(db, tournament_id))


def override_rules(db: Session, tournament_id: int, changes: Dict[str, Any]) -> tournament_model.Tournament:
    """
    Break-glass update of a running tournament. Only the eligibility
    threshold and the number of qualifying slots may change.
    """
    changes = {k: v for k, v in changes.items() if v is not None}
    locked = set(changes) - OVERRIDABLE_FIELDS
    if locked:
        raise RulesLocked(
            f"Only {', '.join(sorted(OVERRIDABLE_FIELDS))} can be changed after creation; "
            f"refused: {', '.join(sorted(locked))}"
        )
    for key, value in changes.items():
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise InvalidRules(f"{key} must be a non-negative integer")

    with transaction(db):
        db_tournament = require_tournament(db, tournament_id)
        for key, value in changes.items():
            setattr(db_tournament, key, value)
    db.refresh(db_tournament)
    logger.info("Rules override on tournament %s: %s", tournament_id, changes)
    return db_tournament
