"""Command-line interface for the cell tower lookup service."""

import argparse
import json
import os
import sys

from dotenv import load_dotenv  # type: ignore

from apikeys.ApiKeyService import ApiKeyService
from common.exceptions import AppBaseError
from common.logging_config import setup_logging
from database.DatabaseProvider import DatabaseProvider
from database.RecordStore import RecordStore
from towers.models import TowerFilter
from towers.seed import seed_if_empty
from towers.TowerSearchEngine import TowerSearchEngine

DEFAULT_DB_PATH = "data/towers.db"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cellid",
        description="Manage and query the Indonesian cell tower database.",
    )
    parser.add_argument(
        "--db",
        default=None,
        help=f"SQLite database path (default: $DB_PATH or {DEFAULT_DB_PATH})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    sub.add_parser("seed", help="Insert the sample towers if the database is empty")
    sub.add_parser("generate-key", help="Create a new active API key and print it")

    revoke = sub.add_parser("revoke-key", help="Deactivate an API key")
    revoke.add_argument("key")

    search = sub.add_parser("search", help="Search towers and print them as JSON lines")
    search.add_argument("--mcc", type=int)
    search.add_argument("--mnc", type=int)
    search.add_argument("--lac", type=int)
    search.add_argument("--cell-id", type=int, dest="cell_id")
    search.add_argument("--lat", type=float)
    search.add_argument("--lon", type=float)
    search.add_argument("--radius", type=float, default=1000.0, help="Meters (default: 1000)")

    return parser


def _tower_to_json(tower) -> str:
    return json.dumps(
        {
            "id": tower.id,
            "mcc": tower.mcc,
            "mnc": tower.mnc,
            "lac": tower.lac,
            "cellId": tower.cell_id,
            "lat": tower.lat,
            "lon": tower.lon,
            "radio": tower.radio,
            "range": tower.range,
            "province": tower.province,
            "district": tower.district,
            "subdistrict": tower.subdistrict,
            "village": tower.village,
            "address": tower.address,
            "updatedAt": tower.updated_at.isoformat(),
        }
    )


def run(args: argparse.Namespace) -> int:
    """Execute a parsed command against the configured database.

    Returns:
        Process exit status.
    """
    if args.command == "serve":
        from api.main import serve

        if args.db:
            os.environ["DB_PATH"] = args.db
        serve()
        return 0

    db_provider = DatabaseProvider(args.db or os.environ.get("DB_PATH", DEFAULT_DB_PATH))
    store = RecordStore(db_provider.get_connection())
    try:
        if args.command == "seed":
            inserted = seed_if_empty(TowerSearchEngine(store), store)
            print(f"Inserted {inserted} towers." if inserted else "Database already has towers; nothing to do.")
            return 0

        if args.command == "search":
            tower_filter = TowerFilter(
                mcc=args.mcc,
                mnc=args.mnc,
                lac=args.lac,
                cell_id=args.cell_id,
                lat=args.lat,
                lon=args.lon,
                radius=args.radius,
            )
            for tower in TowerSearchEngine(store).search(tower_filter):
                print(_tower_to_json(tower))
            return 0

        key_service = ApiKeyService(store)
        try:
            if args.command == "generate-key":
                print(key_service.generate().key)
                return 0

            if args.command == "revoke-key":
                if key_service.deactivate(args.key):
                    print("Key deactivated.")
                    return 0
                print("Error: no such API key", file=sys.stderr)
                return 1
        finally:
            key_service.close()
    finally:
        db_provider.close()

    return 2


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, load ``.env`` and run the selected command."""
    load_dotenv()
    setup_logging(os.environ.get("LOG_LEVEL", "WARNING"))

    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except (AppBaseError, ConnectionError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
