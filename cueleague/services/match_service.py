import logging
from datetime import datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

from cueleague.core.database import transaction
from cueleague.core.exceptions import InvalidScore, NotFound, RematchLimitReached, SelfMatch, StoreConflict
from cueleague.models import match as match_model
from cueleague.schemas.rules_schemas import RulesConfig
from cueleague.services import history_service, ledger_service, tournament_service

logger = logging.getLogger(__name__)

MAX_ENCOUNTERS_PER_PAIR = 2
# A lost race on the pair slot or on a new player's name is retried once
RECORD_ATTEMPTS = 2


def parse_score(value: Union[int, str, None], label: str) -> int:
    """Accepts ints or digit strings; anything else is not a score."""
    if isinstance(value, bool):
        raise InvalidScore(f"{label} score must be a non-negative integer")
    if isinstance(value, str):
        value = value.strip()
        if not (value.isascii() and value.isdigit()):
            raise InvalidScore(f"{label} score must be a non-negative integer, got {value!r}")
        value = int(value)
    if not isinstance(value, int) or value < 0:
        raise InvalidScore(f"{label} score must be a non-negative integer, got {value!r}")
    return value


def winner_deltas(rules_points: int, score: int) -> dict:
    return {"points": rules_points, "wins": 1, "games_played": 1, "score_units": score}


def loser_deltas(rules_points: int, score: int) -> dict:
    return {"points": rules_points, "losses": 1, "games_played": 1, "score_units": score}


def _apply_match(db: Session, winner: str, loser: str, winner_score: int, loser_score: int,
                 rules: RulesConfig, tournament_id: Optional[int]) -> match_model.MatchRecord:
    winner_row = ledger_service.upsert_player_increment(db, winner, tournament_id=tournament_id)
    loser_row = ledger_service.upsert_player_increment(db, loser, tournament_id=tournament_id)

    pair = history_service.pair_key(winner_row.id, loser_row.id)
    if history_service.count_matches(db, pair=pair) >= MAX_ENCOUNTERS_PER_PAIR:
        raise RematchLimitReached(
            f"{winner} and {loser} have already played {MAX_ENCOUNTERS_PER_PAIR} times"
        )
    taken = set(history_service.used_encounters(db, pair))
    encounter = min(slot for slot in range(1, MAX_ENCOUNTERS_PER_PAIR + 1) if slot not in taken)

    record = history_service.insert_match(db, match_model.MatchRecord(
        tournament_id=tournament_id,
        winner_id=winner_row.id,
        loser_id=loser_row.id,
        winner_name=winner_row.name,
        loser_name=loser_row.name,
        winner_score=winner_score,
        loser_score=loser_score,
        winner_points=rules.win_points,
        loser_points=rules.loss_points,
        pair_key=pair,
        encounter=encounter,
        played_at=datetime.utcnow(),
    ))
    ledger_service.apply_increment(db, winner_row.id, winner_deltas(rules.win_points, winner_score))
    ledger_service.apply_increment(db, loser_row.id, loser_deltas(rules.loss_points, loser_score))
    return record


def record_match(
    db: Session,
    winner: str,
    loser: str,
    winner_score: Union[int, str],
    loser_score: Union[int, str],
    tournament_id: Optional[int] = None,
) -> match_model.MatchRecord:
    """
    Validates a result and applies it: both ledgers and the history record
    are written in one transaction, so a failure leaves no trace.
    """
    winner_score = parse_score(winner_score, "Winner")
    loser_score = parse_score(loser_score, "Loser")
    winner = ledger_service.normalize_name(winner)
    loser = ledger_service.normalize_name(loser)
    if winner == loser:
        raise SelfMatch(f"Winner {winner} cannot also be the loser")

    rules = tournament_service.get_rules(db, tournament_id)

    for attempt in range(1, RECORD_ATTEMPTS + 1):
        try:
            with transaction(db):
                record = _apply_match(db, winner, loser, winner_score, loser_score, rules, tournament_id)
            break
        except StoreConflict:
            if attempt == RECORD_ATTEMPTS:
                raise
            logger.info("Concurrent write for %s vs %s, retrying", winner, loser)

    db.refresh(record)
    logger.info("Recorded match %s: %s beat %s (%s-%s)", record.id, winner, loser, winner_score, loser_score)
    return record


def update_match_scores(db: Session, match_id: int, winner_score: Union[int, str],
                        loser_score: Union[int, str]) -> match_model.MatchRecord:
    """
    Corrects the scores of a recorded match. Only score units move; who won
    stays as recorded (undo and record again to change that).
    """
    winner_score = parse_score(winner_score, "Winner")
    loser_score = parse_score(loser_score, "Loser")

    with transaction(db):
        record = history_service.find_match(db, match_id)
        if not record:
            raise NotFound(f"Match {match_id} not found")
        for player_id, name, delta in (
            (record.winner_id, record.winner_name, winner_score - record.winner_score),
            (record.loser_id, record.loser_name, loser_score - record.loser_score),
        ):
            if not ledger_service.apply_increment(db, player_id, {"score_units": delta}):
                logger.warning("Match %s: ledger for %s missing, score edit not applied to it", match_id, name)
        record.winner_score = winner_score
        record.loser_score = loser_score

    db.refresh(record)
    logger.info("Match %s scores corrected to %s-%s", match_id, winner_score, loser_score)
    return record


def list_matches(db: Session, tournament_id: Optional[int] = None, player_id: Optional[int] = None):
    return history_service.find_matches(db, tournament_id=tournament_id, player_id=player_id)


def get_match(db: Session, match_id: int) -> match_model.MatchRecord:
    record = history_service.find_match(db, match_id)
    if not record:
        raise NotFound(f"Match {match_id} not found")
    return record
