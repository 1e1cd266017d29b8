import pytest

from cueleague.core.exceptions import InvalidPlayer, InvalidScore, NotFound, RematchLimitReached, SelfMatch
from cueleague.models.match import MatchRecord
from cueleague.models.player import Player
from cueleague.schemas.rules_schemas import RulesConfig
from cueleague.schemas.tournament_schemas import TournamentCreate
from cueleague.services import history_service, ledger_service, match_service, reversal_service, tournament_service


def ledger(db, name, tournament_id=None):
    db.expire_all()
    return ledger_service.find_player_by_name(db, name, tournament_id)


class TestRecordMatch:

    def test_record_updates_both_ledgers_with_default_rules(self, db):
        record = match_service.record_match(db, "Ana", "Beto", 30, 12)

        ana = ledger(db, "Ana")
        beto = ledger(db, "Beto")
        assert (ana.points, ana.wins, ana.losses, ana.games_played, ana.score_units) == (3, 1, 0, 1, 30)
        assert (beto.points, beto.wins, beto.losses, beto.games_played, beto.score_units) == (1, 0, 1, 1, 12)
        assert history_service.count_matches(db) == 1
        assert record.winner_id == ana.id
        assert record.loser_id == beto.id
        assert record.winner_points == 3
        assert record.loser_points == 1
        assert record.encounter == 1

    def test_scores_as_digit_strings_are_accepted(self, db):
        record = match_service.record_match(db, "Ana", "Beto", " 25 ", "0")
        assert (record.winner_score, record.loser_score) == (25, 0)

    def test_existing_players_accumulate(self, db):
        match_service.record_match(db, "Ana", "Beto", 30, 12)
        match_service.record_match(db, "Ana", "Carla", 30, 29)
        ana = ledger(db, "Ana")
        assert ana.points == 6
        assert ana.wins == 2
        assert ana.games_played == 2
        assert ana.score_units == 60

    @pytest.mark.parametrize("bad_score", ["abc", "-3", -3, "3.5", "", None, True, "１２"])
    def test_invalid_score_rejected_without_side_effects(self, db, bad_score):
        with pytest.raises(InvalidScore):
            match_service.record_match(db, "Ana", "Beto", bad_score, 10)
        assert db.query(Player).count() == 0
        assert db.query(MatchRecord).count() == 0

    def test_score_checked_before_self_match(self, db):
        with pytest.raises(InvalidScore):
            match_service.record_match(db, "Ana", "Ana", "x", 10)

    def test_self_match_rejected_without_side_effects(self, db):
        match_service.record_match(db, "Ana", "Beto", 30, 12)
        with pytest.raises(SelfMatch):
            match_service.record_match(db, "Ana", " Ana ", 30, 12)
        ana = ledger(db, "Ana")
        assert (ana.points, ana.games_played) == (3, 1)
        assert history_service.count_matches(db) == 1

    def test_empty_player_name_rejected(self, db):
        with pytest.raises(InvalidPlayer):
            match_service.record_match(db, "  ", "Beto", 30, 12)

    def test_unknown_tournament_rejected(self, db):
        with pytest.raises(NotFound):
            match_service.record_match(db, "Ana", "Beto", 30, 12, tournament_id=999)
        assert db.query(Player).count() == 0


class TestRematchCap:

    def test_third_encounter_refused_in_any_order(self, db):
        match_service.record_match(db, "Ana", "Beto", 30, 12)
        match_service.record_match(db, "Beto", "Ana", 30, 28)

        with pytest.raises(RematchLimitReached):
            match_service.record_match(db, "Ana", "Beto", 30, 10)
        with pytest.raises(RematchLimitReached):
            match_service.record_match(db, "Beto", "Ana", 30, 10)

        ana = ledger(db, "Ana")
        beto = ledger(db, "Beto")
        assert ana.games_played == 2
        assert beto.games_played == 2
        assert history_service.count_matches(db) == 2

    def test_cap_is_per_pair(self, db):
        match_service.record_match(db, "Ana", "Beto", 30, 12)
        match_service.record_match(db, "Ana", "Beto", 30, 12)
        match_service.record_match(db, "Ana", "Carla", 30, 12)
        assert ledger(db, "Ana").games_played == 3

    def test_reversal_frees_an_encounter_slot(self, db):
        first = match_service.record_match(db, "Ana", "Beto", 30, 12)
        first_id = first.id
        match_service.record_match(db, "Beto", "Ana", 30, 12)
        reversal_service.reverse_selected(db, [first_id])

        again = match_service.record_match(db, "Ana", "Beto", 30, 20)
        assert again.encounter == 1
        assert history_service.count_matches(db) == 2

    def test_same_names_in_different_tournaments_are_different_pairs(self, db):
        tournament = tournament_service.create_tournament(db, TournamentCreate(name="Copa"))
        match_service.record_match(db, "Ana", "Beto", 30, 12)
        match_service.record_match(db, "Ana", "Beto", 30, 12)
        match_service.record_match(db, "Ana", "Beto", 30, 12, tournament_id=tournament.id)
        assert ledger(db, "Ana", tournament.id).games_played == 1


    def test_lost_slot_race_retries_into_free_slot(self, db, monkeypatch):
        match_service.record_match(db, "Ana", "Beto", 30, 12)
        real_used = history_service.used_encounters
        calls = []

        def stale_used_encounters(session, pair):
            calls.append(pair)
            # First read misses the committed slot 1, as a concurrent writer would
            return [] if len(calls) == 1 else real_used(session, pair)

        monkeypatch.setattr(history_service, "used_encounters", stale_used_encounters)
        record = match_service.record_match(db, "Beto", "Ana", 30, 20)

        assert len(calls) == 2
        assert record.encounter == 2
        assert history_service.count_matches(db) == 2
        assert ledger(db, "Ana").games_played == 2
        assert ledger(db, "Beto").games_played == 2

    def test_lost_slot_race_with_full_pair_is_refused(self, db, monkeypatch):
        match_service.record_match(db, "Ana", "Beto", 30, 12)
        match_service.record_match(db, "Beto", "Ana", 30, 20)
        real_count = history_service.count_matches
        real_used = history_service.used_encounters
        stale = {"count": True, "used": True}

        def stale_count(session, **filters):
            if stale.pop("count", False):
                return 0
            return real_count(session, **filters)

        def stale_used(session, pair):
            if stale.pop("used", False):
                return []
            return real_used(session, pair)

        monkeypatch.setattr(history_service, "count_matches", stale_count)
        monkeypatch.setattr(history_service, "used_encounters", stale_used)
        with pytest.raises(RematchLimitReached):
            match_service.record_match(db, "Ana", "Beto", 30, 5)

        assert stale == {}
        assert real_count(db) == 2
        assert ledger(db, "Ana").games_played == 2
        assert ledger(db, "Beto").games_played == 2

class TestTournamentRules:

    def test_configured_points_are_applied_and_stored(self, db):
        tournament = tournament_service.create_tournament(
            db, TournamentCreate(name="Relampago", rules=RulesConfig(win_points=2, loss_points=0))
        )
        record = match_service.record_match(db, "Ana", "Beto", 15, 9, tournament_id=tournament.id)

        assert (record.winner_points, record.loser_points) == (2, 0)
        assert ledger(db, "Ana", tournament.id).points == 2
        assert ledger(db, "Beto", tournament.id).points == 0
        assert ledger(db, "Ana") is None


class TestUpdateMatchScores:

    def test_score_edit_moves_only_score_units(self, db):
        record = match_service.record_match(db, "Ana", "Beto", 30, 12)
        updated = match_service.update_match_scores(db, record.id, 30, 25)

        assert (updated.winner_score, updated.loser_score) == (30, 25)
        ana = ledger(db, "Ana")
        beto = ledger(db, "Beto")
        assert (ana.points, ana.wins, ana.score_units) == (3, 1, 30)
        assert (beto.points, beto.games_played, beto.score_units) == (1, 1, 25)

    def test_undo_after_edit_restores_zero(self, db):
        record = match_service.record_match(db, "Ana", "Beto", 30, 12)
        match_service.update_match_scores(db, record.id, "28", "27")
        reversal_service.undo_last(db)
        assert ledger(db, "Ana").score_units == 0
        assert ledger(db, "Beto").score_units == 0

    def test_edit_unknown_match(self, db):
        with pytest.raises(NotFound):
            match_service.update_match_scores(db, 42, 30, 12)

    def test_edit_rejects_invalid_score(self, db):
        record = match_service.record_match(db, "Ana", "Beto", 30, 12)
        with pytest.raises(InvalidScore):
            match_service.update_match_scores(db, record.id, "thirty", 12)
        assert ledger(db, "Ana").score_units == 30
