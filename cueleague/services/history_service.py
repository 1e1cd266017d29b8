from typing import List, Optional, Sequence

from sqlalchemy.orm import Session
from sqlalchemy import or_

from cueleague.models import match as match_model

MatchRecord = match_model.MatchRecord


def pair_key(player_a_id: int, player_b_id: int) -> str:
    """Order-independent key for a pair of players."""
    low, high = sorted((player_a_id, player_b_id))
    return f"{low}:{high}"


def insert_match(db: Session, record: MatchRecord) -> MatchRecord:
    db.add(record)
    db.flush()
    return record


def find_match(db: Session, match_id: int) -> Optional[MatchRecord]:
    return db.query(MatchRecord).filter(MatchRecord.id == match_id).first()


def find_most_recent(db: Session, tournament_id: Optional[int] = None) -> Optional[MatchRecord]:
    """Latest match overall, or within one tournament when ``tournament_id`` is given."""
    query = db.query(MatchRecord)
    if tournament_id is not None:
        query = query.filter(MatchRecord.tournament_id == tournament_id)
    return query.order_by(MatchRecord.played_at.desc(), MatchRecord.id.desc()).first()


def _filtered(db: Session, tournament_id: Optional[int] = None, player_id: Optional[int] = None,
              pair: Optional[str] = None, ids: Optional[Sequence[int]] = None):
    query = db.query(MatchRecord)
    if tournament_id is not None:
        query = query.filter(MatchRecord.tournament_id == tournament_id)
    if player_id is not None:
        query = query.filter(or_(MatchRecord.winner_id == player_id, MatchRecord.loser_id == player_id))
    if pair is not None:
        query = query.filter(MatchRecord.pair_key == pair)
    if ids is not None:
        query = query.filter(MatchRecord.id.in_(list(ids)))
    return query


def find_matches(db: Session, **filters) -> List[MatchRecord]:
    """Newest first. Filters: tournament_id, player_id, pair, ids."""
    return _filtered(db, **filters).order_by(MatchRecord.played_at.desc(), MatchRecord.id.desc()).all()


def count_matches(db: Session, **filters) -> int:
    return _filtered(db, **filters).count()


def used_encounters(db: Session, pair: str) -> List[int]:
    return [row.encounter for row in db.query(MatchRecord.encounter).filter(MatchRecord.pair_key == pair).all()]


def delete_match(db: Session, match_id: int) -> bool:
    deleted = db.query(MatchRecord).filter(MatchRecord.id == match_id).delete()
    return deleted == 1
