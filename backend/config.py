# backend/config.py

import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

DEFAULT_LEAGUE_ID = "1260317227861692416"
DEFAULT_SLEEPER_BASE_URL = "https://api.sleeper.app/v1"

# The dashboard always renders exactly this many placeholder teams.
MOCK_TEAM_COUNT = 10


class Settings(BaseModel):
    league_id: str = DEFAULT_LEAGUE_ID
    sleeper_base_url: str = DEFAULT_SLEEPER_BASE_URL
    http_timeout: float = 10.0
    warehouse_path: str = "sleeper_league.duckdb"
    warehouse_dataset: str = "sleeper_league"
    cors_allowed_origins: str = "*"
    regular_season_weeks: int = 14

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from the environment (and a local .env file, if any).
        Every value has a hardcoded default so a bare checkout still runs.
        """
        load_dotenv()

        return cls(
            league_id=os.getenv("SLEEPER_LEAGUE_ID", DEFAULT_LEAGUE_ID),
            sleeper_base_url=os.getenv("SLEEPER_BASE_URL", DEFAULT_SLEEPER_BASE_URL).rstrip("/"),
            http_timeout=float(os.getenv("SLEEPER_HTTP_TIMEOUT", "10")),
            warehouse_path=os.getenv("WAREHOUSE_PATH", "sleeper_league.duckdb"),
            warehouse_dataset=os.getenv("WAREHOUSE_DATASET", "sleeper_league"),
            cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
            regular_season_weeks=int(os.getenv("REGULAR_SEASON_WEEKS", "14")),
        )
