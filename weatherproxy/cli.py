"""CLI entry point for the weather forecast proxy."""

import argparse
import json
import logging
import os

from dotenv import find_dotenv, load_dotenv

from weatherproxy.config.loader import get_config_value, load_config, resolve_api_key
from weatherproxy.ingest.cwa_client import CwaClient
from weatherproxy.ingest.transformer import ForecastTransformer
from weatherproxy.models.errors import WeatherProxyError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weatherproxy",
        description="CWA weather forecast proxy",
    )
    parser.add_argument(
        "--config", default=None, help="Config YAML path"
    )

    sub = parser.add_subparsers(dest="command")

    # serve
    serve_p = sub.add_parser("serve", help="Run the HTTP server")
    serve_p.add_argument("--host", default=None, help="Bind address")
    serve_p.add_argument("--port", type=int, default=None, help="Listen port")

    # fetch
    fetch_p = sub.add_parser("fetch", help="Fetch one city's forecast")
    fetch_p.add_argument("city", help="City key, e.g. taipei")

    # cities
    sub.add_parser("cities", help="List registered cities")

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Display one config value")
    get_p.add_argument("key", help="Dotted key, e.g. upstream.timeout_seconds")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_dotenv(find_dotenv(usecwd=True))

    config = load_config(args.config)

    if args.command == "serve":
        return _cmd_serve(config, args)
    elif args.command == "fetch":
        return _cmd_fetch(config, args)
    elif args.command == "cities":
        return _cmd_cities(config)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_serve(config, args) -> int:
    import uvicorn

    from weatherproxy.app import create_app

    host = args.host or config.server.host
    port = args.port or int(os.environ.get("PORT") or config.server.port)
    logger.info(
        "Serving on %s:%d (env: %s)", host, port, os.environ.get("APP_ENV", "development")
    )
    uvicorn.run(create_app(config), host=host, port=port)
    return 0


def _cmd_fetch(config, args) -> int:
    city = config.city_registry().get(args.city)
    if city is None:
        print(f"Error: unknown city '{args.city}'")
        return 1
    client = CwaClient.from_config(config.upstream, resolve_api_key(config.upstream))
    try:
        forecast = ForecastTransformer(client).fetch(city.location_name)
    except WeatherProxyError as e:
        print(f"Error: {e.message}")
        return 1
    print(json.dumps(forecast.to_dict(), ensure_ascii=False, indent=2))
    return 0


def _cmd_cities(config) -> int:
    for slug, city in config.city_registry().items():
        print(f"{slug}: {city.location_name}")
    return 0


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "get":
        try:
            print(get_config_value(config, args.key))
            return 0
        except (KeyError, AttributeError, IndexError, ValueError):
            print(f"Error: unknown config key '{args.key}'")
            return 1
    print("Use: config show | config get <key>")
    return 1
