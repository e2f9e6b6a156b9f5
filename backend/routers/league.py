# backend/routers/league.py

from fastapi import APIRouter, Depends, Path

from config import Settings
from dependencies import get_settings, get_sleeper, get_warehouse
from services.league_views import (
    league_info_view,
    standings_view,
    team_points_view,
    weekly_progress_view,
)
from services.sleeper_client import SleeperClient
from services.warehouse import Warehouse

router = APIRouter(prefix="/api", tags=["League"])


@router.get("/team-points/{week}")
async def team_points(
    week: int = Path(..., ge=1, le=18),
    warehouse: Warehouse = Depends(get_warehouse),
    sleeper: SleeperClient = Depends(get_sleeper),
):
    """
    Every team's points for one week, highest first.
    Falls back to random placeholder teams when nothing is stored yet.
    """
    result = await team_points_view(warehouse, sleeper, week)
    return result.model_dump()


@router.get("/team-standings")
async def team_standings(
    warehouse: Warehouse = Depends(get_warehouse),
    sleeper: SleeperClient = Depends(get_sleeper),
):
    result = await standings_view(warehouse, sleeper)
    return result.model_dump()


@router.get("/weekly-progress")
async def weekly_progress(
    warehouse: Warehouse = Depends(get_warehouse),
    settings: Settings = Depends(get_settings),
):
    """Weekly and cumulative points per team across the regular season."""
    result = await weekly_progress_view(warehouse, settings.regular_season_weeks)
    return result.model_dump()


@router.get("/league-info")
async def league_info(
    warehouse: Warehouse = Depends(get_warehouse),
    sleeper: SleeperClient = Depends(get_sleeper),
):
    result = await league_info_view(sleeper, warehouse)
    return result.model_dump()
