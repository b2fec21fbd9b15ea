from datetime import datetime, timezone

from app.models.match import Match, Player
from app.services.match_store import MatchStore

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _match(match_id: str, user1: str = "u1", user2: str | None = None) -> Match:
    match = Match(match_id=match_id, player1=Player(username="alice-gh", user_id=user1), created_at=NOW)
    if user2:
        match.player2 = Player(username="bob-gh", user_id=user2)
    return match


def test_put_and_get():
    store = MatchStore()
    store.put(_match("m1"))

    assert store.get("m1").match_id == "m1"
    assert store.get("missing") is None
    assert len(store) == 1


def test_match_for_user_follows_index():
    store = MatchStore()
    store.put(_match("m1"))
    store.index_user("u1", "m1")

    assert store.match_for_user("u1").match_id == "m1"
    assert store.match_for_user("u2") is None


def test_dangling_index_entry_is_dropped():
    store = MatchStore()
    store.index_user("u1", "gone")

    assert store.match_for_user("u1") is None

    # A match created later under the same id must not be picked up
    store.put(_match("gone"))
    assert store.match_for_user("u1") is None


def test_delete_unindexes_both_players():
    store = MatchStore()
    store.put(_match("m1", "u1", "u2"))
    store.index_user("u1", "m1")
    store.index_user("u2", "m1")

    deleted = store.delete("m1")

    assert deleted.match_id == "m1"
    assert store.get("m1") is None
    assert store.match_for_user("u1") is None
    assert store.match_for_user("u2") is None


def test_delete_keeps_index_pointing_at_newer_match():
    store = MatchStore()
    store.put(_match("old", "u1"))
    store.put(_match("new", "u1"))
    store.index_user("u1", "new")

    store.delete("old")

    assert store.match_for_user("u1").match_id == "new"


def test_delete_unknown_match():
    store = MatchStore()

    assert store.delete("missing") is None


def test_unindex_user():
    store = MatchStore()
    store.put(_match("m1"))
    store.index_user("u1", "m1")

    store.unindex_user("u1")
    store.unindex_user("never-indexed")

    assert store.match_for_user("u1") is None
    assert store.get("m1") is not None


def test_all_matches_is_a_copy():
    store = MatchStore()
    store.put(_match("m1"))
    store.put(_match("m2"))

    matches = store.all_matches()
    matches.clear()

    assert len(store) == 2
