import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import argparse

from config import Settings
from services.migrations import (
    apply_migrations,
    count_rows,
    describe_table,
    duplicate_rosters,
    truncate_table,
)
from services.warehouse import TABLE_COLUMNS, Warehouse


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Warehouse schema and maintenance commands.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("apply", help="Apply pending schema migrations.")

    for name, help_text in (
        ("describe", "Print a table's columns."),
        ("count", "Print a table's row count."),
        ("truncate", "Delete every row from a table."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("table", choices=sorted(TABLE_COLUMNS))

    sub.add_parser("duplicates", help="List roster ids stored more than once in teams.")
    return parser.parse_args()


def main():
    args = parse_args()
    settings = Settings.from_env()
    warehouse = Warehouse.connect(settings.warehouse_path, settings.warehouse_dataset)

    try:
        if args.command == "apply":
            applied = apply_migrations(warehouse)
            print(f"applied: {applied or 'nothing new'}")
            return

        # every other command needs the tables to exist
        apply_migrations(warehouse)

        if args.command == "describe":
            for col in describe_table(warehouse, args.table):
                print(f"  {col['column_name']}: {col['data_type']} (nullable={col['is_nullable']})")
        elif args.command == "count":
            print(f"{args.table}: {count_rows(warehouse, args.table)} rows")
        elif args.command == "truncate":
            truncate_table(warehouse, args.table)
            print(f"{args.table}: {count_rows(warehouse, args.table)} rows remaining")
        elif args.command == "duplicates":
            dupes = duplicate_rosters(warehouse)
            if dupes.empty:
                print("✅ No duplicate rosters")
            else:
                print(f"⚠️ {len(dupes)} roster ids stored more than once:")
                print(dupes.to_string(index=False))
    finally:
        warehouse.close()


if __name__ == "__main__":
    main()
