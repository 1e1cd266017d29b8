"""
Reversal engine: undoes the effect of recorded matches.

Each reversal subtracts exactly what the recorder added, using the points
and scores stored on the match record, then deletes the record. A missing
player ledger never blocks the deletion; it is logged and reported.
"""
import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from cueleague.core.database import transaction
from cueleague.models import match as match_model
from cueleague.schemas.match_schemas import ReversalReport
from cueleague.services import history_service, ledger_service, tournament_service
from cueleague.services.match_service import loser_deltas, winner_deltas

logger = logging.getLogger(__name__)


def _negated(deltas: dict) -> dict:
    return {field: -value for field, value in deltas.items()}


def reverse_one(db: Session, record: match_model.MatchRecord) -> List[str]:
    """
    Applies the inverse deltas of ``record`` and deletes it. Does not commit.
    Returns the names of players whose ledger could not be found.
    """
    misses = []
    sides = (
        (record.winner_id, record.winner_name, winner_deltas(record.winner_points, record.winner_score)),
        (record.loser_id, record.loser_name, loser_deltas(record.loser_points, record.loser_score)),
    )
    for player_id, name, deltas in sides:
        if not ledger_service.apply_increment(db, player_id, _negated(deltas)):
            logger.warning(
                "Reversing match %s: no ledger for %s, stats not adjusted", record.id, name
            )
            misses.append(name)
    history_service.delete_match(db, record.id)
    return misses


def undo_last(db: Session, tournament_id: Optional[int] = None) -> ReversalReport:
    """Reverses the most recent match. An empty history is not an error."""
    if tournament_id is not None:
        tournament_service.require_tournament(db, tournament_id)
    report = ReversalReport()
    with transaction(db):
        record = history_service.find_most_recent(db, tournament_id)
        if record is None:
            logger.info("Undo requested but there is no match to undo")
            return report
        match_id = record.id
        report.ledger_misses.extend(reverse_one(db, record))
    report.reversed.append(match_id)
    logger.info("Undid match %s", match_id)
    return report


def reverse_selected(db: Session, match_ids: Iterable[int]) -> ReversalReport:
    """
    Reverses each listed match in its own transaction. Ids that no longer
    exist are skipped and reported, the rest of the batch still runs.
    """
    report = ReversalReport()
    for match_id in dict.fromkeys(match_ids):
        with transaction(db):
            record = history_service.find_match(db, match_id)
            if record is None:
                report.skipped.append(match_id)
                continue
            misses = reverse_one(db, record)
        report.reversed.append(match_id)
        report.ledger_misses.extend(misses)

    logger.info("Bulk delete: %d reversed, %d skipped", len(report.reversed), len(report.skipped))
    return report
