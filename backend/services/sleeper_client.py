# backend/services/sleeper_client.py

import asyncio
from typing import Any, Dict, Iterable, List, Optional

import httpx

from config import DEFAULT_SLEEPER_BASE_URL
from services.shaping import placeholder_user


class SleeperAPIError(Exception):
    pass


class SleeperClient:
    """
    Thin async wrapper over the public Sleeper API.
    One instance lives for the whole process; every call is a single GET.
    """

    def __init__(
        self,
        league_id: str,
        base_url: str = DEFAULT_SLEEPER_BASE_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.league_id = league_id
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def fetch_json(self, path: str) -> Any:
        url = f"/{path.lstrip('/')}"
        try:
            resp = await self._client.get(url)
        except httpx.HTTPError as e:
            raise SleeperAPIError(f"Failed to fetch {url}: {e}") from e

        if resp.status_code != 200:
            raise SleeperAPIError(f"Failed to fetch {url} (status {resp.status_code})")
        try:
            return resp.json()
        except ValueError as e:
            raise SleeperAPIError(f"Invalid JSON from {url}") from e

    # ---------------------------------------------------------
    # LEAGUE ENDPOINTS
    # ---------------------------------------------------------

    async def get_league(self) -> Dict[str, Any]:
        league = await self.fetch_json(f"league/{self.league_id}")
        if not league:
            # Sleeper answers 200 with a null body for unknown league ids
            raise SleeperAPIError(f"League not found. Please verify the league ID: {self.league_id}")
        return league

    async def get_rosters(self) -> List[Dict[str, Any]]:
        return await self.fetch_json(f"league/{self.league_id}/rosters") or []

    async def get_league_users(self) -> List[Dict[str, Any]]:
        return await self.fetch_json(f"league/{self.league_id}/users") or []

    async def get_matchups(self, week: int) -> List[Dict[str, Any]]:
        return await self.fetch_json(f"league/{self.league_id}/matchups/{week}") or []

    # ---------------------------------------------------------
    # GLOBAL ENDPOINTS
    # ---------------------------------------------------------

    async def get_players(self) -> Dict[str, Dict[str, Any]]:
        # ~5MB payload; Sleeper asks callers to pull this at most once a day
        return await self.fetch_json("players/nfl") or {}

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        return await self.fetch_json(f"user/{user_id}")

    async def get_nfl_state(self) -> Dict[str, Any]:
        return await self.fetch_json("state/nfl") or {}

    # ---------------------------------------------------------
    # COMPOSITE LOOKUPS
    # ---------------------------------------------------------

    async def get_owner_profiles(self, owner_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        """
        Fetch user profiles for every owner id concurrently.
        A lookup that fails is replaced by a placeholder user.
        Results are keyed by owner id.
        """
        ids = list(dict.fromkeys(oid for oid in owner_ids if oid))
        if not ids:
            return {}

        async def _one(owner_id: str) -> Dict[str, Any]:
            try:
                return await self.get_user(owner_id) or placeholder_user(owner_id)
            except SleeperAPIError as e:
                print(f"⚠️ Could not fetch profile for {owner_id}: {e}")
                return placeholder_user(owner_id)

        results = await asyncio.gather(*(_one(oid) for oid in ids))
        return dict(zip(ids, results))

    async def resolve_current_week(self, max_week: int = 18) -> int:
        """
        Current week from the NFL state endpoint. If that is unavailable,
        scan the league's matchups for the latest week with any scored points.
        Falls back to week 1.
        """
        try:
            state = await self.get_nfl_state()
            week = int(state.get("week") or 0)
            if week > 0:
                return min(week, max_week)
        except (SleeperAPIError, ValueError, TypeError) as e:
            print(f"⚠️ NFL state unavailable, scanning matchups instead: {e}")

        current_week = 1
        for week in range(1, max_week + 1):
            try:
                matchups = await self.get_matchups(week)
            except SleeperAPIError:
                continue
            if any((m or {}).get("points") for m in matchups):
                current_week = week

        print(f"📅 Determined current week: {current_week}")
        return current_week

    async def aclose(self) -> None:
        await self._client.aclose()
