import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import argparse
import asyncio

from config import Settings
from services.loader import load_league
from services.migrations import apply_migrations
from services.sleeper_client import SleeperClient
from services.warehouse import Warehouse


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch the Sleeper league and append it to the warehouse.")
    parser.add_argument(
        "--week",
        type=int,
        default=None,
        help="Week of matchups to load (default: current NFL week).",
    )
    return parser.parse_args()


async def run(week):
    settings = Settings.from_env()
    warehouse = Warehouse.connect(settings.warehouse_path, settings.warehouse_dataset)
    sleeper = SleeperClient(
        settings.league_id,
        base_url=settings.sleeper_base_url,
        timeout=settings.http_timeout,
    )
    try:
        apply_migrations(warehouse)
        return await load_league(sleeper, warehouse, week)
    finally:
        await sleeper.aclose()
        warehouse.close()


def main():
    args = parse_args()
    try:
        report = asyncio.run(run(args.week))
    except Exception as e:
        print(f"❌ Load failed: {e}")
        sys.exit(1)

    print(f"week {report.week}: {report.teams} teams, {report.players} players, {report.matchups} matchups")


if __name__ == "__main__":
    main()
