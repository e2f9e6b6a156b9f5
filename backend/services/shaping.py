# backend/services/shaping.py
"""
Pure functions mapping Sleeper JSON payloads onto the flat rows stored in
the warehouse tables (teams, players, matchups).

Nothing here raises on a missing field: every optional value falls back to
0, "" or None.
"""

import re
import time
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

MAX_TEAM_NAME_LENGTH = 20
TRUNCATED_NAME_LENGTH = 17

_TRAILING_DIGITS = re.compile(r"\d{6,}$")
_WORD_SPLIT = re.compile(r"[\s_]+")


# ============================================================
#  NAME CLEANUP
# ============================================================

def clean_username(name: Optional[str]) -> str:
    """
    Turn a raw Sleeper display name into something fit for a standings table.

    - purely numeric names become "Player N"
    - a trailing run of 6+ digits is stripped ("JohnSmith123456789" -> "Johnsmith")
    - each word is capitalized
    - names over 20 characters are cut to 17 characters plus "..."
    """
    raw = (name or "").strip()
    if not raw:
        return ""

    if raw.isdigit():
        cleaned = f"Player {raw}"
    else:
        stripped = _TRAILING_DIGITS.sub("", raw).strip()
        words = [w for w in _WORD_SPLIT.split(stripped) if w]
        cleaned = " ".join(w.capitalize() for w in words)

    if len(cleaned) > MAX_TEAM_NAME_LENGTH:
        cleaned = cleaned[:TRUNCATED_NAME_LENGTH] + "..."
    return cleaned


def placeholder_user(user_id: str) -> Dict[str, Any]:
    """Stand-in profile for an owner whose lookup failed."""
    user_id = str(user_id or "")
    return {
        "user_id": user_id,
        "display_name": f"User {user_id[-4:]}",
        "avatar": None,
        "metadata": {},
        "is_placeholder": True,
    }


def custom_team_name(roster: Optional[Dict[str, Any]], user: Optional[Dict[str, Any]]) -> str:
    user_meta = (user or {}).get("metadata") or {}
    roster_meta = (roster or {}).get("metadata") or {}
    for candidate in (user_meta.get("team_name"), roster_meta.get("team_name")):
        if candidate and str(candidate).strip():
            return str(candidate).strip()
    return ""


def resolve_team_name(roster: Dict[str, Any], user: Optional[Dict[str, Any]] = None) -> str:
    """
    Priority: custom team name > cleaned owner display name >
    "Team {last 4 of owner id}" > "Team {roster id}".
    """
    custom = custom_team_name(roster, user)
    if custom:
        return custom

    display = clean_username((user or {}).get("display_name"))
    if display:
        return display

    owner_id = roster.get("owner_id")
    if owner_id:
        return f"Team {str(owner_id)[-4:]}"

    return f"Team {roster.get('roster_id', '')}"


# ============================================================
#  ROW SHAPERS
# ============================================================

def shape_teams(
    rosters: Iterable[Dict[str, Any]],
    users_by_id: Optional[Dict[str, Dict[str, Any]]] = None,
    loaded_at: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    users_by_id = users_by_id or {}
    loaded_at = loaded_at or datetime.now()
    rows: List[Dict[str, Any]] = []

    for roster in rosters or []:
        if not isinstance(roster, dict):
            continue

        roster_id = roster.get("roster_id")
        owner_id = roster.get("owner_id") or None
        user = users_by_id.get(str(owner_id)) if owner_id else None

        rows.append({
            "team_id": str(owner_id) if owner_id else f"team_{roster_id}",
            "team_name": resolve_team_name(roster, user),
            "roster_id": str(roster_id) if roster_id is not None else "",
            "owner_id": str(owner_id) if owner_id else None,
            "players": ",".join(str(p) for p in (roster.get("players") or [])),
            "avatar_id": (user or {}).get("avatar") or None,
            "loaded_at": loaded_at,
        })

    return rows


def _age(value: Any) -> Optional[int]:
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def shape_players(players: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Flatten the {player_id: {...}} catalog. The players table is a full
    snapshot, so callers replace it rather than merge into it.
    """
    rows: List[Dict[str, Any]] = []
    for key, p in (players or {}).items():
        if not isinstance(p, dict):
            continue
        rows.append({
            "player_id": str(p.get("player_id") or key),
            "first_name": p.get("first_name") or "",
            "last_name": p.get("last_name") or "",
            "team": p.get("team") or "",
            "position": p.get("position") or "",
            "age": _age(p.get("age")),
            "injury_status": p.get("injury_status") or "",
        })
    return rows


def _week(value: Any, default: int) -> int:
    try:
        return int(value) if value not in (None, "") else int(default)
    except (TypeError, ValueError):
        return int(default)


def _points(value: Any) -> float:
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


SYNTHESIZED_MATCHUP_PREFIX = "matchup_"


def synthesized_matchup_id(roster_id: Any) -> str:
    return f"{SYNTHESIZED_MATCHUP_PREFIX}{int(time.time() * 1000)}_{roster_id}"


def is_synthesized_matchup_id(matchup_id: Any) -> bool:
    return str(matchup_id).startswith(SYNTHESIZED_MATCHUP_PREFIX)


def shape_matchups(
    matchups: Iterable[Dict[str, Any]],
    week: int,
    loaded_at: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """
    One row per roster for the given week.

    Rosters without a game that week (byes, no playoff slot) come back with no
    matchup id and get "matchup_{epoch ms}_{roster id}": unique per row, so
    they never pair with each other or with an earlier load of the same week.
    """
    loaded_at = loaded_at or datetime.now()
    rows: List[Dict[str, Any]] = []

    for m in matchups or []:
        if not isinstance(m, dict):
            continue

        matchup_id = m.get("matchup_id")
        roster_id = m.get("roster_id")

        rows.append({
            "matchup_id": str(matchup_id) if matchup_id is not None else synthesized_matchup_id(roster_id),
            "week": _week(m.get("week"), week),
            "roster_id": str(roster_id) if roster_id is not None else None,
            "points": _points(m.get("points")),
            "loaded_at": loaded_at,
        })

    return rows


def extract_active_players(players: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Lean roster view: active players only, inactive ones are dropped."""
    lean = []
    for key, p in (players or {}).items():
        if not isinstance(p, dict) or not p.get("active"):
            continue

        name = p.get("full_name") or " ".join(
            part for part in (p.get("first_name"), p.get("last_name")) if part
        )
        lean.append({
            "player_id": str(p.get("player_id") or key),
            "name": name,
            "position": p.get("position") or "",
            "team": p.get("team") or "",
            "search_rank": p.get("search_rank"),
            "fantasy_positions": p.get("fantasy_positions") or [],
        })
    return lean
