# backend/services/league_views.py
"""
Read services behind the /api endpoints.

Each view pulls the base tables from the warehouse, aggregates them, and
overlays live owner names from Sleeper. When the warehouse has nothing (or
the query blows up) the view answers with a placeholder dataset tagged
kind="fallback" instead of an error.
"""

from typing import Any, Dict, List, Tuple

import pandas as pd
from fastapi.concurrency import run_in_threadpool

from config import MOCK_TEAM_COUNT
from models.league_models import (
    LeagueInfo,
    LeagueInfoResult,
    ProgressResult,
    StandingsResult,
    TeamPointsResult,
)
from services.aggregation import aggregate
from services.enrichment import enrich_team_names
from services.fallback import mock_league_info, mock_standings, mock_team_points
from services.sleeper_client import SleeperAPIError, SleeperClient
from services.warehouse import Warehouse


# ============================================================
#  WAREHOUSE ACCESS
# ============================================================

def load_base_tables(warehouse: Warehouse) -> Tuple[pd.DataFrame, pd.DataFrame]:
    teams = warehouse.query_df(
        f"""
        SELECT team_id, team_name, roster_id, owner_id, avatar_id, loaded_at
        FROM {warehouse.table_ref('teams')}
        ORDER BY loaded_at NULLS FIRST
        """
    )
    matchups = warehouse.query_df(
        f"""
        SELECT matchup_id, week, roster_id, points, loaded_at
        FROM {warehouse.table_ref('matchups')}
        WHERE roster_id IS NOT NULL
        """
    )
    print(f"✅ Warehouse returned {len(teams)} team rows, {len(matchups)} matchup rows")
    return teams, matchups


def compute_view(warehouse: Warehouse, view: str, **params: Any) -> List[Dict[str, Any]]:
    """Blocking: query the base tables and aggregate. Views run it in the threadpool."""
    teams, matchups = load_base_tables(warehouse)
    return aggregate(view, teams, matchups, **params)


def _log_query_failure(view: str, error: Exception) -> None:
    print(f"❌ Error computing {view}: {error}")
    print("🔍 Error details:", {
        "message": str(error),
        "code": type(error).__name__,
        "details": repr(getattr(error, "__cause__", None)),
    })


async def _league_users(sleeper: SleeperClient) -> List[Dict[str, Any]]:
    try:
        return await sleeper.get_league_users()
    except SleeperAPIError as e:
        print(f"⚠️ Could not load league users, keeping stored names: {e}")
        return []


# ============================================================
#  VIEWS
# ============================================================

async def team_points_view(warehouse: Warehouse, sleeper: SleeperClient, week: int) -> TeamPointsResult:
    print(f"🔍 Computing team points for week {week}...")
    try:
        rows = await run_in_threadpool(compute_view, warehouse, "points", week=week)
    except Exception as e:
        _log_query_failure("team points", e)
        return TeamPointsResult(kind="fallback", week=week, data=mock_team_points(week), reason="query_failed")

    if not rows:
        print("📊 No data found, generating mock team points...")
        return TeamPointsResult(kind="fallback", week=week, data=mock_team_points(week), reason="warehouse_empty")

    rows = enrich_team_names(rows, await _league_users(sleeper))
    return TeamPointsResult(kind="real", week=week, data=rows)


async def standings_view(warehouse: Warehouse, sleeper: SleeperClient) -> StandingsResult:
    print("🏆 Computing team standings...")
    try:
        rows = await run_in_threadpool(compute_view, warehouse, "standings")
    except Exception as e:
        _log_query_failure("team standings", e)
        return StandingsResult(kind="fallback", data=mock_standings(), reason="query_failed")

    if not rows:
        print("📊 No data found, generating mock standings...")
        return StandingsResult(kind="fallback", data=mock_standings(), reason="warehouse_empty")

    rows = enrich_team_names(rows, await _league_users(sleeper))
    return StandingsResult(kind="real", data=rows)


async def weekly_progress_view(warehouse: Warehouse, max_week: int) -> ProgressResult:
    print("📈 Computing weekly progress...")
    try:
        rows = await run_in_threadpool(compute_view, warehouse, "progress", max_week=max_week)
    except Exception as e:
        _log_query_failure("weekly progress", e)
        return ProgressResult(kind="fallback", data=[], reason="query_failed")

    if not rows:
        return ProgressResult(kind="fallback", data=[], reason="warehouse_empty")
    return ProgressResult(kind="real", data=rows)


async def league_info_view(sleeper: SleeperClient, warehouse: Warehouse) -> LeagueInfoResult:
    """
    League metadata straight from Sleeper. If Sleeper is down, fall back to
    the team count in the warehouse, then to a static placeholder.
    """
    print("🏈 Fetching league info from Sleeper API...")
    try:
        league = await sleeper.get_league()
        info = LeagueInfo(
            name=league.get("name") or "Fantasy League",
            season=str(league.get("season") or ""),
            status=league.get("status") or "Active",
            total_teams=int(league.get("total_rosters") or MOCK_TEAM_COUNT),
            league_id=str(league.get("league_id") or sleeper.league_id),
        )
        print(f"✅ Sleeper API returned league info: {info.name} ({info.season}, {info.status})")
        return LeagueInfoResult(kind="real", data=info)
    except (SleeperAPIError, ValueError, TypeError, AttributeError) as e:
        print(f"❌ Error fetching league info: {e}")

    print("🔄 Falling back to warehouse for league info...")
    try:
        df = await run_in_threadpool(
            warehouse.query_df,
            f"SELECT COUNT(DISTINCT team_id) AS total_teams FROM {warehouse.table_ref('teams')}",
        )
        total = int(df["total_teams"].iloc[0]) if not df.empty else 0
        info = mock_league_info(sleeper.league_id, total_teams=total or MOCK_TEAM_COUNT)
        return LeagueInfoResult(kind="fallback", data=info, reason="sleeper_unavailable")
    except Exception as fallback_error:
        _log_query_failure("league info fallback", fallback_error)
        return LeagueInfoResult(kind="fallback", data=mock_league_info(sleeper.league_id), reason="query_failed")
