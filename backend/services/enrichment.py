# backend/services/enrichment.py

import re
from typing import Any, Dict, Iterable, List, Optional

from services.shaping import clean_username, custom_team_name

_GENERIC_NAME = re.compile(r"^(team[ _]\d+|user \d{1,4}|unnamed team)$", re.IGNORECASE)


def is_generic_name(name: Optional[str]) -> bool:
    """True for synthesized placeholders like "Team 3", "team_3" or an empty name."""
    name = (name or "").strip()
    return not name or bool(_GENERIC_NAME.match(name))


def enrich_team_names(
    rows: List[Dict[str, Any]],
    users: Iterable[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Overlay live owner names/avatars on computed rows.

    - a custom team name from the owner always wins
    - otherwise the stored name is kept, unless it is a generic placeholder,
      in which case the owner's cleaned display name is used
    - avatar comes from the owner when they have one
    """
    users_by_id = {str(u.get("user_id")): u for u in users or [] if isinstance(u, dict) and u.get("user_id")}

    enriched = []
    for row in rows:
        owner_id = row.get("owner_id")
        user = users_by_id.get(str(owner_id)) if owner_id else None

        if not user:
            enriched.append({**row, "is_real_team": False})
            continue

        name = custom_team_name(None, user)
        if not name:
            name = row.get("team_name") or ""
            display = clean_username(user.get("display_name"))
            if is_generic_name(name) and display:
                name = display

        enriched.append({
            **row,
            "team_name": name,
            "avatar_id": user.get("avatar") or row.get("avatar_id"),
            "is_real_team": True,
        })

    return enriched
