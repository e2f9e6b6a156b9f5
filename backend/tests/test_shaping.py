from datetime import datetime

from services.shaping import (
    clean_username,
    extract_active_players,
    is_synthesized_matchup_id,
    placeholder_user,
    resolve_team_name,
    shape_matchups,
    shape_players,
    shape_teams,
)


def test_clean_username_strips_long_numeric_suffix():
    assert clean_username("JohnSmith123456789") == "Johnsmith"


def test_clean_username_keeps_short_numeric_suffix():
    assert clean_username("mike12") == "Mike12"


def test_clean_username_numeric_only():
    assert clean_username("4821") == "Player 4821"


def test_clean_username_title_cases_words():
    assert clean_username("big_bad wolf") == "Big Bad Wolf"


def test_clean_username_truncates_long_names():
    cleaned = clean_username("the greatest fantasy manager ever")
    assert cleaned == "The Greatest Fant..."
    assert len(cleaned) == 20


def test_clean_username_empty():
    assert clean_username(None) == ""
    assert clean_username("   ") == ""


def test_team_name_priority():
    roster = {"roster_id": 7, "owner_id": "998877", "metadata": {"team_name": "Roster Name"}}
    user = {"display_name": "someone", "metadata": {"team_name": "Custom Crew"}}

    assert resolve_team_name(roster, user) == "Custom Crew"
    assert resolve_team_name(roster, {"display_name": "someone", "metadata": {}}) == "Roster Name"
    assert resolve_team_name({**roster, "metadata": {}}, {"display_name": "someone"}) == "Someone"
    assert resolve_team_name({**roster, "metadata": {}}, None) == "Team 8877"
    assert resolve_team_name({"roster_id": 7}, None) == "Team 7"


def test_shape_teams_defaults():
    rows = shape_teams([{"roster_id": 3, "owner_id": None, "players": None}], loaded_at=datetime(2025, 9, 10, 12, 0))
    assert rows == [{
        "team_id": "team_3",
        "team_name": "Team 3",
        "roster_id": "3",
        "owner_id": None,
        "players": "",
        "avatar_id": None,
        "loaded_at": datetime(2025, 9, 10, 12, 0),
    }]


def test_shape_teams_uses_owner_profile():
    users = {"u1": {"user_id": "u1", "display_name": "alpha_dog", "avatar": "abc"}}
    rows = shape_teams([{"roster_id": 1, "owner_id": "u1", "players": ["10", "20"]}], users)

    assert rows[0]["team_id"] == "u1"
    assert rows[0]["team_name"] == "Alpha Dog"
    assert rows[0]["players"] == "10,20"
    assert rows[0]["avatar_id"] == "abc"


def test_shape_players_fills_missing_fields():
    rows = shape_players({"99": {"first_name": "Solo"}})
    assert rows == [{
        "player_id": "99",
        "first_name": "Solo",
        "last_name": "",
        "team": "",
        "position": "",
        "age": None,
        "injury_status": "",
    }]


def test_shape_matchups_defaults_and_fallback_id():
    loaded_at = datetime(2025, 9, 10, 12, 0)
    rows = shape_matchups(
        [{"roster_id": 4, "points": None}, {"matchup_id": 2, "roster_id": 5, "points": "88.5", "week": 3}],
        week=6,
        loaded_at=loaded_at,
    )

    assert rows[0]["matchup_id"].startswith("matchup_")
    assert rows[0]["week"] == 6
    assert rows[0]["roster_id"] == "4"
    assert rows[0]["points"] == 0.0
    assert rows[0]["loaded_at"] == loaded_at

    assert rows[1]["matchup_id"] == "2"
    assert rows[1]["week"] == 3
    assert rows[1]["points"] == 88.5


def test_placeholder_user():
    user = placeholder_user("u-5551234")
    assert user["display_name"] == "User 1234"
    assert user["is_placeholder"] is True


def test_extract_active_players_drops_inactive():
    players = {
        "1": {"full_name": "Active Guy", "position": "WR", "team": "BUF", "active": True, "search_rank": 12},
        "2": {"first_name": "Bench", "last_name": "Warmer", "active": False},
        "3": {"first_name": "No", "last_name": "Fullname", "active": True},
    }
    lean = extract_active_players(players)

    assert [p["player_id"] for p in lean] == ["1", "3"]
    assert lean[0]["search_rank"] == 12
    assert lean[1]["name"] == "No Fullname"
    assert lean[1]["fantasy_positions"] == []


def test_rosters_without_a_game_get_distinct_ids():
    rows = shape_matchups(
        [
            {"matchup_id": 1, "roster_id": 1, "points": 101.0},
            {"matchup_id": 1, "roster_id": 2, "points": 99.0},
            {"matchup_id": None, "roster_id": 3, "points": 120.0},
            {"matchup_id": None, "roster_id": 4, "points": 80.0},
        ],
        week=15,
    )
    ids = [r["matchup_id"] for r in rows]

    assert ids[:2] == ["1", "1"]
    assert ids[2] != ids[3]
    assert ids[2].endswith("_3") and ids[3].endswith("_4")
    assert all(is_synthesized_matchup_id(i) for i in ids[2:])
    assert not is_synthesized_matchup_id(ids[0])
