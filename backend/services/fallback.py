# backend/services/fallback.py
"""
Placeholder datasets served when the warehouse is empty (pre-season) or a
query fails. Values are random; the shape is fixed: exactly MOCK_TEAM_COUNT teams ranked 1..N.
"""

import random
from typing import Any, Dict, List, Optional

from config import MOCK_TEAM_COUNT


def _mock_teams(count: int = MOCK_TEAM_COUNT) -> List[Dict[str, Any]]:
    return [
        {
            "team_name": f"Team {i}",
            "roster_id": str(i),
            "team_id": f"team_{i}",
            "owner_id": None,
            "avatar_id": None,
            "is_real_team": False,
        }
        for i in range(1, count + 1)
    ]


def _mock_streak(rng: random.Random) -> str:
    prefix = "W" if rng.random() > 0.5 else "L"
    return f"{prefix}{rng.randint(1, 3)}"


def mock_team_points(week: int, rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    rng = rng or random.Random()
    rows = [{**team, "points": float(rng.randint(50, 199))} for team in _mock_teams()]
    rows.sort(key=lambda r: r["points"], reverse=True)
    return rows


def mock_standings(rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    rng = rng or random.Random()
    rows = [
        {
            **team,
            "wins": rng.randint(2, 9),
            "losses": rng.randint(2, 9),
            "ties": 0,
            "streak": _mock_streak(rng),
            "total_score": float(rng.randint(1200, 1699)),
        }
        for team in _mock_teams()
    ]
    rows.sort(key=lambda r: (-r["wins"], -r["total_score"], int(r["roster_id"])))
    for rank, row in enumerate(rows, start=1):
        row["rank"] = rank
    return rows


def mock_league_info(league_id: Optional[str] = None, total_teams: int = MOCK_TEAM_COUNT) -> Dict[str, Any]:
    return {
        "name": "Fantasy League Dashboard (Fallback)",
        "season": "2025",
        "status": "pre_draft",
        "total_teams": total_teams,
        "league_id": league_id,
    }
