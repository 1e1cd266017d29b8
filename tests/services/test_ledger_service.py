import pytest

from cueleague.core.exceptions import InvalidPlayer, StoreConflict
from cueleague.core.database import transaction
from cueleague.models.player import Player
from cueleague.models.tournament import Tournament
from cueleague.services import ledger_service


class TestLedgerService:

    def test_upsert_creates_player_with_deltas(self, db):
        player = ledger_service.upsert_player_increment(db, " Ana ", {"points": 3, "wins": 1})
        db.commit()
        assert player.name == "Ana"
        assert (player.points, player.wins, player.games_played) == (3, 1, 0)

    def test_upsert_existing_player_adds_to_counters(self, db):
        ledger_service.upsert_player_increment(db, "Ana", {"points": 3})
        player = ledger_service.upsert_player_increment(db, "Ana", {"points": 1, "games_played": 1})
        db.commit()
        assert db.query(Player).count() == 1
        assert (player.points, player.games_played) == (4, 1)

    def test_set_fields_do_not_touch_counters(self, db):
        ledger_service.upsert_player_increment(db, "Ana", {"points": 3})
        player = ledger_service.upsert_player_increment(db, "Ana", set_fields={"phone": "5512345678"})
        assert player.phone == "5512345678"
        assert player.points == 3

    def test_concurrent_increments_are_not_lost(self, db, session_factory):
        player_id = ledger_service.upsert_player_increment(db, "Ana").id
        db.commit()

        other = session_factory()
        try:
            # Both sessions have read points == 0 before either writes
            assert ledger_service.find_player(db, player_id).points == 0
            assert ledger_service.find_player(other, player_id).points == 0
            ledger_service.apply_increment(other, player_id, {"points": 3})
            other.commit()
            ledger_service.apply_increment(db, player_id, {"points": 3})
            db.commit()
        finally:
            other.close()

        assert ledger_service.find_player(db, player_id).points == 6

    def test_apply_increment_on_missing_player(self, db):
        assert ledger_service.apply_increment(db, 9999, {"points": -3}) is False
        assert ledger_service.apply_increment(db, None, {"points": -3}) is False

    def test_only_ledger_fields_can_be_incremented(self, db):
        player = ledger_service.upsert_player_increment(db, "Ana")
        with pytest.raises(ValueError):
            ledger_service.apply_increment(db, player.id, {"phone": 1})
        with pytest.raises(ValueError):
            ledger_service.upsert_player_increment(db, "Ana", set_fields={"points": 99})

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_names_rejected(self, db, name):
        with pytest.raises(InvalidPlayer):
            ledger_service.upsert_player_increment(db, name)

    def test_duplicate_name_in_same_tournament_conflicts(self, db):
        tournament = Tournament(name="Copa")
        db.add(tournament)
        db.commit()
        ledger_service.upsert_player_increment(db, "Beto", tournament_id=tournament.id)
        db.commit()

        # What a concurrent request would hit after its own existence check
        with pytest.raises(StoreConflict):
            with transaction(db):
                db.add(Player(name="Beto", tournament_id=tournament.id))
                db.flush()
        assert len(ledger_service.list_players(db, tournament_id=tournament.id)) == 1

    def test_duplicate_name_in_club_league_conflicts(self, db):
        ledger_service.upsert_player_increment(db, "Beto")
        db.commit()

        with pytest.raises(StoreConflict):
            with transaction(db):
                db.add(Player(name="Beto", tournament_id=None))
                db.flush()
        assert len(ledger_service.list_players(db)) == 1

    def test_list_players_by_scope_and_phone(self, db):
        ledger_service.upsert_player_increment(db, "Ana", set_fields={"phone": "111"})
        ledger_service.upsert_player_increment(db, "Beto")
        db.commit()
        assert [p.name for p in ledger_service.list_players(db)] == ["Ana", "Beto"]
        assert [p.name for p in ledger_service.list_players(db, phone="111")] == ["Ana"]
        assert ledger_service.list_players(db, tournament_id=5) == []
