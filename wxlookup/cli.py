"""CLI entry point for the weather lookup tool."""

import argparse
import asyncio
import logging

from wxlookup.config.loader import load_config
from wxlookup.config.schema import AppConfig
from wxlookup.ingest.weatherapi_client import WeatherApiClient
from wxlookup.models.result import Err
from wxlookup.reporting.formatters import format_snapshot_json, format_snapshot_text
from wxlookup.search.classifier import InvalidSearchError, classify, prepare_query
from wxlookup.storage.state_store import LAST_LOCATION_KEY, SqliteKeyValueStore
from wxlookup.store.coordinator import WeatherStore

DEFAULT_CONFIG = "wxlookup.yaml"

logger = logging.getLogger(__name__)


def build_store(config: AppConfig) -> WeatherStore:
    """Compose the client, storage and store from config."""
    client = WeatherApiClient(
        api_key=config.provider.api_key,
        base_url=config.provider.base_url,
        timeout=config.provider.timeout,
        days=config.provider.days,
        window_clock=config.provider.window_clock,
    )
    storage = SqliteKeyValueStore(config.store.db_path)
    return WeatherStore(
        client, storage, default_location=config.store.default_location
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="wxlookup",
        description="Look up current, hourly and daily weather for a location",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # lookup
    lookup_p = sub.add_parser("lookup", help="Fetch weather for a location")
    lookup_p.add_argument("query", help="City, zip/postal code, or region")
    lookup_p.add_argument("--json", action="store_true", help="Print JSON")

    # init
    init_p = sub.add_parser(
        "init", help="Fetch weather for the last searched location (or the default)"
    )
    init_p.add_argument("--json", action="store_true", help="Print JSON")

    # classify
    classify_p = sub.add_parser("classify", help="Show how a query is interpreted")
    classify_p.add_argument("query")

    # last
    last_p = sub.add_parser("last", help="Show the last searched location")
    last_p.add_argument(
        "--clear", action="store_true", help="Forget the last searched location"
    )

    # config show
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.db is not None:
        config = config.model_copy(
            update={"store": config.store.model_copy(update={"db_path": args.db})}
        )

    if args.command == "lookup":
        return _cmd_lookup(config, args)
    elif args.command == "init":
        return _cmd_init(config, args)
    elif args.command == "classify":
        return _cmd_classify(args)
    elif args.command == "last":
        return _cmd_last(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _print_store(store: WeatherStore, as_json: bool) -> int:
    last_updated = store.formatted_last_updated
    if as_json:
        print(format_snapshot_json(store.snapshot, last_updated))
    else:
        print(format_snapshot_text(store.snapshot, last_updated))
    return 1 if store.error else 0


def _cmd_lookup(config: AppConfig, args) -> int:
    try:
        query = prepare_query(args.query)
    except InvalidSearchError as e:
        print(f"Error: {e}")
        return 1
    logger.debug("Query %r detected as %s", query.value, query.type)

    store = build_store(config)
    asyncio.run(store.fetch_weather_data(query.value))
    return _print_store(store, args.json)


def _cmd_init(config: AppConfig, args) -> int:
    store = build_store(config)
    asyncio.run(store.initialize_store())
    return _print_store(store, args.json)


def _cmd_classify(args) -> int:
    result = classify(args.query)
    print(f"{result.type.value}: {result.value}")
    return 0


def _cmd_last(config: AppConfig, args) -> int:
    storage = SqliteKeyValueStore(config.store.db_path)
    if args.clear:
        if isinstance(storage.delete(LAST_LOCATION_KEY), Err):
            print(f"Could not clear the last location in {storage.db_path}")
            return 1
        print("Last location cleared")
        return 0
    last = storage.get(LAST_LOCATION_KEY)
    print(last if last else "No location saved")
    return 0


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        redacted = config.model_copy(
            update={
                "provider": config.provider.model_copy(
                    update={"api_key": "***" if config.provider.api_key else ""}
                )
            }
        )
        print(redacted.model_dump_json(indent=2))
        return 0
    print("Use: config show")
    return 1
