# patch_tracker/cli.py
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

from loguru import logger

from patch_tracker.config import DEFAULT_HOST, DEFAULT_PORT, Settings
from patch_tracker.errors import ConfigError, StoreFailure
from patch_tracker.extract.chain import build_update_extractor
from patch_tracker.log import configure_logging
from patch_tracker.scrape.orchestrator import run_update_check
from patch_tracker.storage.catalog import CatalogStore


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Track the latest released version of live-service games.")
    p.add_argument("--catalog", default=None, help="Catalog JSON file (default: $PATCH_TRACKER_CATALOG or data/games.json)")
    p.add_argument("--debug", action="store_true", help="Verbose logging")

    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("check", help="Run one update check over every tracked game")
    sub.add_parser("list", help="Print the current catalog as JSON")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=DEFAULT_HOST)
    serve.add_argument("--port", type=int, default=DEFAULT_PORT)

    return p.parse_args(argv)


def cmd_check(settings: Settings) -> int:
    try:
        extractor = build_update_extractor(settings)
    except ConfigError as e:
        logger.error(f"{e}. Add it to your environment or .env file.")
        return 2

    report = run_update_check(store=CatalogStore(settings.catalog_file), extractor=extractor)
    print(json.dumps(report.to_dict(), indent=2))
    return 0 if report.success else 1


def cmd_list(settings: Settings) -> int:
    try:
        games = CatalogStore(settings.catalog_file).load()
    except StoreFailure as e:
        logger.error(str(e))
        return 1
    print(json.dumps([g.to_dict() for g in games], indent=2, ensure_ascii=False))
    return 0


def cmd_serve(settings: Settings, host: str, port: int) -> int:
    from patch_tracker.web.app import create_app

    app = create_app(settings)
    app.run(host=host, port=port, debug=settings.is_development)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    settings = Settings.from_env()
    if args.catalog:
        settings = replace(settings, catalog_file=Path(args.catalog).expanduser().resolve())
    if args.debug:
        settings = replace(settings, debug=True)

    configure_logging(settings.debug, settings.log_file)

    if args.command == "check":
        return cmd_check(settings)
    if args.command == "list":
        return cmd_list(settings)
    return cmd_serve(settings, args.host, args.port)


if __name__ == "__main__":
    sys.exit(main())
