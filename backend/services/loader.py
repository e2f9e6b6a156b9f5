# backend/services/loader.py

from datetime import datetime
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from models.league_models import LoadReport
from services.shaping import shape_matchups, shape_players, shape_teams
from services.sleeper_client import SleeperClient
from services.warehouse import Warehouse


async def load_league(
    sleeper: SleeperClient,
    warehouse: Warehouse,
    week: Optional[int] = None,
) -> LoadReport:
    """
    Pull rosters, owners, players and one week of matchups from Sleeper and
    append them to the warehouse.

    Teams and matchups are appended, not upserted: running it twice for the
    same week stores the week twice. Players are a snapshot and get replaced.
    Any failure is raised to the caller.
    """
    print("🚀 Starting data upload to warehouse...")

    if week is None:
        week = await sleeper.resolve_current_week()

    rosters = await sleeper.get_rosters()
    users = await sleeper.get_league_users()
    players = await sleeper.get_players()
    matchups = await sleeper.get_matchups(week)

    print(f"📊 Fetched: {len(rosters)} teams, {len(players)} players, {len(matchups)} matchups (week {week})")

    # ------------------------------------------------------------
    # OWNER PROFILES
    # league users cover joined owners; anyone else is looked up directly
    # ------------------------------------------------------------
    users_by_id = {str(u.get("user_id")): u for u in users if isinstance(u, dict) and u.get("user_id")}
    missing = [str(r.get("owner_id")) for r in rosters if r.get("owner_id") and str(r.get("owner_id")) not in users_by_id]
    if missing:
        users_by_id.update(await sleeper.get_owner_profiles(missing))

    # ------------------------------------------------------------
    # SHAPE + APPEND
    # ------------------------------------------------------------
    loaded_at = datetime.now()
    teams_rows = shape_teams(rosters, users_by_id, loaded_at=loaded_at)
    players_rows = shape_players(players)
    matchups_rows = shape_matchups(matchups, week, loaded_at=loaded_at)

    print(f"📝 Prepared data: {len(teams_rows)} teams, {len(players_rows)} players, {len(matchups_rows)} matchups")

    report = LoadReport(
        week=week,
        teams=await run_in_threadpool(warehouse.insert_rows, "teams", teams_rows),
        players=await run_in_threadpool(warehouse.replace_rows, "players", players_rows),
        matchups=await run_in_threadpool(warehouse.insert_rows, "matchups", matchups_rows),
    )

    print("✅ All data uploaded successfully!")
    return report
