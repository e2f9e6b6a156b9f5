import sys
from pathlib import Path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import json

import httpx
import pytest

from services.migrations import apply_migrations
from services.sleeper_client import SleeperClient
from services.warehouse import Warehouse

LEAGUE_ID = "1234"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def warehouse():
    wh = Warehouse.connect(":memory:")
    apply_migrations(wh)
    yield wh
    wh.close()


def sample_league_payloads():
    """Canned Sleeper responses for a two-team league, keyed by path under /v1."""
    return {
        f"league/{LEAGUE_ID}": {
            "league_id": LEAGUE_ID,
            "name": "Sunday Legends",
            "season": "2025",
            "status": "in_season",
            "total_rosters": 2,
        },
        f"league/{LEAGUE_ID}/rosters": [
            {"roster_id": 1, "owner_id": "u-1001", "players": ["4046", "6794"], "metadata": {}},
            {"roster_id": 2, "owner_id": "u-2002", "players": ["4034"], "metadata": {}},
        ],
        f"league/{LEAGUE_ID}/users": [
            {"user_id": "u-1001", "display_name": "alpha_dog", "avatar": "av1", "metadata": {"team_name": "Alpha Squad"}},
        ],
        f"league/{LEAGUE_ID}/matchups/1": [
            {"matchup_id": 1, "roster_id": 1, "points": 100.0},
            {"matchup_id": 1, "roster_id": 2, "points": 90.0},
        ],
        "players/nfl": {
            "4046": {"player_id": "4046", "first_name": "Patrick", "last_name": "Mahomes", "team": "KC",
                     "position": "QB", "age": 29, "active": True},
            "6794": {"player_id": "6794", "first_name": "Justin", "last_name": "Jefferson", "team": "MIN",
                     "position": "WR", "active": True},
            "4034": {"player_id": "4034", "first_name": "Christian", "last_name": "McCaffrey", "team": "SF",
                     "position": "RB", "injury_status": "Questionable", "active": False},
        },
        "state/nfl": {"week": 1, "season": "2025"},
        "user/u-2002": {"user_id": "u-2002", "display_name": "BigBob123456789", "avatar": None, "metadata": {}},
    }


def mock_transport(payloads=None, status_code=200):
    """
    MockTransport answering from a {path: body} table.
    Unknown paths 404; status_code != 200 fails every request.
    """
    payloads = sample_league_payloads() if payloads is None else payloads

    def handler(request: httpx.Request) -> httpx.Response:
        if status_code != 200:
            return httpx.Response(status_code, json={"error": "unavailable"})
        path = request.url.path.split("/v1/", 1)[-1]
        if path not in payloads:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(
            200,
            content=json.dumps(payloads[path]).encode(),
            headers={"content-type": "application/json"},
        )

    return httpx.MockTransport(handler)


@pytest.fixture
def league_payloads():
    return sample_league_payloads()


@pytest.fixture
def make_sleeper():
    def _make(payloads=None, status_code=200):
        return SleeperClient(LEAGUE_ID, transport=mock_transport(payloads, status_code))
    return _make
