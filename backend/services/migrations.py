# backend/services/migrations.py
"""
Versioned schema for the warehouse.

Each migration is idempotent on its own (IF NOT EXISTS everywhere), and the
applied versions are recorded in {dataset}.schema_migrations so a normal run
only executes what is new.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import pandas as pd

from services.warehouse import Warehouse, WarehouseError


class MigrationError(Exception):
    pass


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    statements: Tuple[str, ...]


# ============================================================
#  MIGRATION LIST (append only)
# ============================================================

MIGRATIONS: List[Migration] = [
    Migration(1, "create_dataset", (
        "CREATE SCHEMA IF NOT EXISTS {dataset}",
    )),
    Migration(2, "create_teams", (
        """
        CREATE TABLE IF NOT EXISTS {dataset}.teams (
            team_id VARCHAR,
            team_name VARCHAR,
            roster_id VARCHAR,
            owner_id VARCHAR,
            players VARCHAR
        )
        """,
    )),
    Migration(3, "create_players", (
        """
        CREATE TABLE IF NOT EXISTS {dataset}.players (
            player_id VARCHAR,
            first_name VARCHAR,
            last_name VARCHAR,
            team VARCHAR,
            position VARCHAR,
            age INTEGER,
            injury_status VARCHAR
        )
        """,
    )),
    Migration(4, "create_matchups", (
        """
        CREATE TABLE IF NOT EXISTS {dataset}.matchups (
            matchup_id VARCHAR,
            week INTEGER,
            roster_id VARCHAR,
            points DOUBLE
        )
        """,
    )),
    Migration(5, "add_teams_avatar_id", (
        "ALTER TABLE {dataset}.teams ADD COLUMN IF NOT EXISTS avatar_id VARCHAR",
    )),
    Migration(6, "add_matchups_loaded_at", (
        "ALTER TABLE {dataset}.matchups ADD COLUMN IF NOT EXISTS loaded_at TIMESTAMP",
    )),
    Migration(7, "add_teams_loaded_at", (
        "ALTER TABLE {dataset}.teams ADD COLUMN IF NOT EXISTS loaded_at TIMESTAMP",
    )),
]


def _ensure_tracking_table(warehouse: Warehouse) -> None:
    ds = warehouse.dataset
    warehouse.execute(f"CREATE SCHEMA IF NOT EXISTS {ds}")
    warehouse.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {ds}.schema_migrations (
            version INTEGER,
            name VARCHAR,
            applied_at TIMESTAMP DEFAULT current_timestamp
        )
        """
    )


def applied_versions(warehouse: Warehouse) -> List[int]:
    _ensure_tracking_table(warehouse)
    df = warehouse.query_df(
        f"SELECT DISTINCT version FROM {warehouse.table_ref('schema_migrations')} ORDER BY version"
    )
    return [int(v) for v in df["version"].tolist()]


def apply_migrations(warehouse: Warehouse, migrations: List[Migration] = MIGRATIONS) -> List[int]:
    """
    Apply every migration not yet recorded, in version order.
    Returns the versions applied by this call.
    """
    done = set(applied_versions(warehouse))
    newly_applied: List[int] = []

    for migration in sorted(migrations, key=lambda m: m.version):
        if migration.version in done:
            continue

        print(f"🔧 Applying migration {migration.version}: {migration.name}")
        try:
            for statement in migration.statements:
                warehouse.execute(statement.format(dataset=warehouse.dataset))
        except WarehouseError as e:
            raise MigrationError(f"Migration {migration.version} ({migration.name}) failed: {e}") from e

        warehouse.execute(
            f"INSERT INTO {warehouse.table_ref('schema_migrations')} (version, name) VALUES (?, ?)",
            [migration.version, migration.name],
        )
        newly_applied.append(migration.version)

    if newly_applied:
        print(f"✅ Applied migrations: {newly_applied}")
    return newly_applied


# ============================================================
#  MAINTENANCE HELPERS
# ============================================================

def count_rows(warehouse: Warehouse, table: str) -> int:
    df = warehouse.query_df(f"SELECT COUNT(*) AS total FROM {warehouse.table_ref(table)}")
    return int(df["total"].iloc[0])


def truncate_table(warehouse: Warehouse, table: str) -> int:
    """Delete every row from a table; returns how many rows were removed."""
    before = count_rows(warehouse, table)
    warehouse.execute(f"DELETE FROM {warehouse.table_ref(table)}")
    print(f"🧹 Cleared {before} rows from {table}")
    return before


def describe_table(warehouse: Warehouse, table: str) -> List[Dict[str, Any]]:
    warehouse.table_ref(table)
    df = warehouse.query_df(
        """
        SELECT column_name, data_type, is_nullable
        FROM information_schema.columns
        WHERE table_schema = ? AND table_name = ?
        ORDER BY ordinal_position
        """,
        [warehouse.dataset, table],
    )
    return df.to_dict(orient="records")


def duplicate_rosters(warehouse: Warehouse) -> pd.DataFrame:
    """roster_ids that appear in more than one teams row."""
    return warehouse.query_df(
        f"""
        SELECT roster_id, COUNT(*) AS copies
        FROM {warehouse.table_ref('teams')}
        GROUP BY roster_id
        HAVING COUNT(*) > 1
        ORDER BY roster_id
        """
    )
