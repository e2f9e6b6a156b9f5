# backend/services/warehouse.py

import threading
from typing import Any, Dict, List, Optional, Sequence

import duckdb
import pandas as pd

# Column order for every table the loader appends to.
TABLE_COLUMNS: Dict[str, List[str]] = {
    "teams": ["team_id", "team_name", "roster_id", "owner_id", "players", "avatar_id", "loaded_at"],
    "players": ["player_id", "first_name", "last_name", "team", "position", "age", "injury_status"],
    "matchups": ["matchup_id", "week", "roster_id", "points", "loaded_at"],
}

INTERNAL_TABLES = {"schema_migrations"}


class WarehouseError(Exception):
    pass


class Warehouse:
    """
    DuckDB-backed analytical store. All league tables live in one schema
    (the "dataset"), e.g. sleeper_league.teams.

    Read views call in from threadpool workers; one lock serializes every use
    of the shared connection.
    """

    def __init__(self, conn: duckdb.DuckDBPyConnection, dataset: str = "sleeper_league"):
        if not dataset.isidentifier():
            raise WarehouseError(f"Invalid dataset name: {dataset!r}")
        self.conn = conn
        self.dataset = dataset
        self._lock = threading.RLock()

    @classmethod
    def connect(cls, path: str = ":memory:", dataset: str = "sleeper_league") -> "Warehouse":
        print(f"🦆 Opening warehouse {path} (dataset {dataset})")
        return cls(duckdb.connect(path), dataset)

    def table_ref(self, table: str) -> str:
        if table not in TABLE_COLUMNS and table not in INTERNAL_TABLES:
            raise WarehouseError(f"Unknown table: {table!r}")
        return f"{self.dataset}.{table}"

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> None:
        try:
            with self._lock:
                if params is None:
                    self.conn.execute(sql)
                else:
                    self.conn.execute(sql, params)
        except duckdb.Error as e:
            raise WarehouseError(str(e)) from e

    def query_df(self, sql: str, params: Optional[Sequence[Any]] = None) -> pd.DataFrame:
        try:
            with self._lock:
                cursor = self.conn.execute(sql) if params is None else self.conn.execute(sql, params)
                return cursor.df()
        except duckdb.Error as e:
            raise WarehouseError(str(e)) from e

    def insert_rows(self, table: str, rows: List[Dict[str, Any]]) -> int:
        """
        Batch-append rows. An empty batch is skipped; failures are raised to
        the caller untouched apart from the WarehouseError wrapper.
        """
        if not rows:
            print(f"No rows to upload for table {table}")
            return 0

        ref = self.table_ref(table)
        columns = TABLE_COLUMNS[table]
        placeholders = ", ".join("?" for _ in columns)
        values = [tuple(row.get(c) for c in columns) for row in rows]

        try:
            with self._lock:
                self.conn.executemany(
                    f"INSERT INTO {ref} ({', '.join(columns)}) VALUES ({placeholders})",
                    values,
                )
        except duckdb.Error as e:
            print(f"❌ Error uploading to {table}: {e}")
            raise WarehouseError(f"Insert into {table} failed: {e}") from e

        print(f"Uploaded {len(rows)} rows to {table}")
        return len(rows)

    def replace_rows(self, table: str, rows: List[Dict[str, Any]]) -> int:
        """Swap the whole table for a new snapshot. An empty batch leaves the old one in place."""
        if not rows:
            print(f"No rows to upload for table {table}")
            return 0

        with self._lock:
            self.execute(f"DELETE FROM {self.table_ref(table)}")
            return self.insert_rows(table, rows)

    def close(self) -> None:
        with self._lock:
            self.conn.close()
