"""Ping a Minecraft Java Edition server from the command line.

Settings may be overridden by a ``privVars.py`` on the import path, e.g.:

    DEBUG = True
    LOG_FILE = "log.log"
    SENTRY_DSN = "https://..."
"""
import argparse
import json
import sys

from . import config
from .config import LATEST_PROTOCOL_VERSION
from .logger import Logger
from .pinger import ping
from .pycraft.connector import parse_address
from .pycraft.errors import PingError


def load_settings() -> dict:
    settings = {
        "DEBUG": config.DEBUG,
        "LOG_LEVEL": config.LOG_LEVEL,
        "LOG_FILE": config.LOG_FILE,
        "SENTRY_DSN": config.SENTRY_DSN,
        "DEFAULT_TIMEOUT": config.DEFAULT_TIMEOUT,
    }
    try:
        import privVars
    except ImportError:
        return settings

    for key in settings:
        settings[key] = getattr(privVars, key, settings[key])
    return settings


def build_parser(settings: dict) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcping", description="Ping a Minecraft Java Edition server."
    )
    parser.add_argument("host", help="host or host:port, [v6]:port for IPv6")
    parser.add_argument("-p", "--port", type=int, default=None)
    parser.add_argument(
        "--protocol",
        type=int,
        default=LATEST_PROTOCOL_VERSION,
        help=f"protocol version to ping with (default {LATEST_PROTOCOL_VERSION})",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=settings["DEFAULT_TIMEOUT"],
        help="seconds for the whole exchange",
    )
    parser.add_argument(
        "--json", action="store_true", help="print the response as JSON"
    )
    parser.add_argument("--debug", action="store_true", default=settings["DEBUG"])
    return parser


def format_response(res) -> str:
    lines = [
        f"Version: {res.version.name} ({res.version.protocol})",
        f"Players: {res.players.online}/{res.players.max}",
        f"Description: {res.description_raw}",
    ]
    if res.players.sample:
        lines.append(
            "Sample: " + ", ".join(f"{p.name} ({p.id})" for p in res.players.sample)
        )
    lines.append(f"Favicon: {'yes' if res.favicon else 'no'}")
    return "\n".join(lines)


def main(argv=None) -> int:
    settings = load_settings()
    args = build_parser(settings).parse_args(argv)

    Logger.setup(
        level=settings["LOG_LEVEL"], debug=args.debug, log_file=settings["LOG_FILE"]
    )
    logger = Logger(
        debug=args.debug,
        sentry_dsn=settings["SENTRY_DSN"] if settings["SENTRY_DSN"] != "..." else None,
    )

    host, port = parse_address(args.host)
    if args.port is not None:
        port = args.port

    logger.info(f"Pinging {host}:{port} with protocol {args.protocol}")
    try:
        res = ping(
            host,
            port=port,
            protocol_version=args.protocol,
            timeout=args.timeout,
            logger=logger,
        )
    except PingError as err:
        logger.exception(f"Ping to {host}:{port} failed", exception=err)
        print(
            f"error ({err.kind}{', timed out' if err.timed_out else ''}): {err}",
            file=sys.stderr,
        )
        return 1

    print(json.dumps(res.toDict(), ensure_ascii=False) if args.json else format_response(res))
    return 0


if __name__ == "__main__":
    sys.exit(main())
