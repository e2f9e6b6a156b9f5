import pytest

from services.migrations import (
    MIGRATIONS,
    applied_versions,
    apply_migrations,
    count_rows,
    describe_table,
    duplicate_rosters,
    truncate_table,
)
from services.warehouse import Warehouse, WarehouseError


def _team(roster_id, name="Team"):
    return {"team_id": f"t{roster_id}", "team_name": name, "roster_id": roster_id, "owner_id": None,
            "players": "", "avatar_id": None}


def test_migrations_apply_once(warehouse):
    assert applied_versions(warehouse) == [m.version for m in MIGRATIONS]
    assert apply_migrations(warehouse) == []


def test_migrations_on_fresh_connection():
    wh = Warehouse.connect(":memory:", dataset="other_league")
    try:
        assert apply_migrations(wh) == [1, 2, 3, 4, 5, 6, 7]
        columns = [c["column_name"] for c in describe_table(wh, "teams")]
        assert columns == ["team_id", "team_name", "roster_id", "owner_id", "players", "avatar_id", "loaded_at"]
    finally:
        wh.close()


def test_matchups_columns(warehouse):
    columns = {c["column_name"]: c["data_type"] for c in describe_table(warehouse, "matchups")}
    assert columns["week"] == "INTEGER"
    assert columns["points"] == "DOUBLE"
    assert "loaded_at" in columns


def test_insert_empty_batch_is_skipped(warehouse):
    assert warehouse.insert_rows("teams", []) == 0
    assert count_rows(warehouse, "teams") == 0


def test_insert_and_truncate(warehouse):
    assert warehouse.insert_rows("teams", [_team("1"), _team("2")]) == 2
    assert count_rows(warehouse, "teams") == 2

    assert truncate_table(warehouse, "teams") == 2
    assert count_rows(warehouse, "teams") == 0


def test_replace_rows_swaps_snapshot(warehouse):
    player = {"player_id": "1", "first_name": "A", "last_name": "B", "team": "KC", "position": "QB",
              "age": 25, "injury_status": ""}
    warehouse.replace_rows("players", [player, {**player, "player_id": "2"}])
    warehouse.replace_rows("players", [{**player, "player_id": "3"}])

    df = warehouse.query_df(f"SELECT player_id FROM {warehouse.table_ref('players')}")
    assert df["player_id"].tolist() == ["3"]


def test_duplicate_rosters(warehouse):
    warehouse.insert_rows("teams", [_team("1"), _team("1"), _team("2")])
    dupes = duplicate_rosters(warehouse)

    assert dupes["roster_id"].tolist() == ["1"]
    assert int(dupes["copies"].iloc[0]) == 2


def test_unknown_table_rejected(warehouse):
    with pytest.raises(WarehouseError):
        warehouse.table_ref("nope")
    with pytest.raises(WarehouseError):
        warehouse.insert_rows("nope", [{"a": 1}])


def test_invalid_dataset_name():
    with pytest.raises(WarehouseError):
        Warehouse(None, dataset="bad-name; DROP")
