import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import asyncio

from config import Settings
from services.shaping import extract_active_players
from services.sleeper_client import SleeperAPIError, SleeperClient


async def check():
    settings = Settings.from_env()
    sleeper = SleeperClient(settings.league_id, base_url=settings.sleeper_base_url, timeout=settings.http_timeout)
    failures = 0

    try:
        print(f"== League {settings.league_id} ==")
        checks = [
            ("league", sleeper.get_league()),
            ("rosters", sleeper.get_rosters()),
            ("users", sleeper.get_league_users()),
            ("nfl state", sleeper.get_nfl_state()),
            ("matchups week 1", sleeper.get_matchups(1)),
        ]
        for label, call in checks:
            try:
                data = await call
            except SleeperAPIError as e:
                failures += 1
                print(f"❌ {label}: {e}")
                continue
            size = len(data) if isinstance(data, (list, dict)) else 1
            print(f"✅ {label}: {size} entries")

        try:
            players = await sleeper.get_players()
        except SleeperAPIError as e:
            failures += 1
            print(f"❌ players: {e}")
        else:
            active = extract_active_players(players)
            print(f"✅ players: {len(players)} total, {len(active)} active")
            for p in active[:5]:
                print(f"   {p['name']} ({p['position']}, {p['team'] or 'FA'})")
    finally:
        await sleeper.aclose()

    return failures


if __name__ == "__main__":
    sys.exit(1 if asyncio.run(check()) else 0)
