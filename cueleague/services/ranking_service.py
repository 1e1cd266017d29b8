"""
Leaderboard computation.

Players who reached the games-played threshold compete for the qualifying
and replacement slots; everyone else is listed below them. Within each
group the order is points, then wins, both descending. Exact ties keep
the input order (``sorted`` is stable).
"""
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from cueleague.schemas.ranking_schemas import RankedEntry, Tier
from cueleague.schemas.rules_schemas import RulesConfig
from cueleague.services import ledger_service, tournament_service


def _standing_key(player):
    return (-player.points, -player.wins)


def average_score(score_units: int, games_played: int) -> float:
    if not games_played:
        return 0.0
    return round(score_units / games_played, 2)


def compute_ranking(players: Sequence, rules: RulesConfig) -> List[RankedEntry]:
    """
    Pure function of ``(players, rules)``. ``players`` only needs the ledger
    attributes (``name``, ``points``, ``wins``, ``losses``, ``games_played``,
    ``score_units`` and optionally ``id``).
    """
    eligible = sorted(
        (p for p in players if p.games_played >= rules.min_games), key=_standing_key
    )
    ineligible = [p for p in players if p.games_played < rules.min_games]

    qualified = eligible[:rules.top_slots]
    replacement = eligible[rules.top_slots:rules.top_slots + rules.replacement_slots]
    remainder = sorted(
        eligible[rules.top_slots + rules.replacement_slots:] + ineligible, key=_standing_key
    )

    tiers = (
        (Tier.QUALIFIED, qualified),
        (Tier.REPLACEMENT, replacement),
        (Tier.REMAINDER, remainder),
    )
    ranking = []
    for tier, members in tiers:
        for player in members:
            ranking.append(RankedEntry(
                position=len(ranking) + 1,
                tier=tier,
                player_id=getattr(player, "id", None),
                name=player.name,
                points=player.points,
                wins=player.wins,
                losses=player.losses,
                games_played=player.games_played,
                score_units=player.score_units,
                average=average_score(player.score_units, player.games_played),
            ))
    return ranking


def get_leaderboard(db: Session, tournament_id: Optional[int] = None) -> List[RankedEntry]:
    rules = tournament_service.get_rules(db, tournament_id)
    players = ledger_service.list_players(db, tournament_id=tournament_id)
    return compute_ranking(players, rules)
