from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from gum import __version__
from gum.config import Settings, load_settings, parse_addr, parse_redirect
from gum.errors import ConfigurationError
from gum.main import build_server

logger = logging.getLogger("gum")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gum", description="Personal short URL redirection server")
    parser.add_argument("--addr", help="TCP address to listen on, HOST:PORT (default: localhost:8080)")
    parser.add_argument(
        "--redirect",
        action="append",
        default=[],
        metavar="PREFIX=DEST",
        help="Redirect /PREFIX/... to DEST (repeatable)",
    )
    parser.add_argument(
        "--static", action="append", default=[], metavar="DIR", help="Watch DIR for HTML short links (repeatable)"
    )
    parser.add_argument("--jekyll", metavar="DIR", help="Jekyll site directory to read post short URLs from")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    parser.add_argument("--version", action="store_true", help="Print version information and exit")
    return parser


def resolve_settings(args: argparse.Namespace, base: Settings) -> Settings:
    """Apply command line flags on top of environment settings."""
    values = base.model_dump()
    if args.addr:
        values["host"], values["port"] = parse_addr(args.addr)
    if args.redirect:
        values["redirects"] = [parse_redirect(r).model_dump() for r in args.redirect]
    if args.static:
        values["static_roots"] = list(args.static)
    if args.jekyll:
        values["jekyll_root"] = args.jekyll
    if args.log_level:
        values["log_level"] = args.log_level
    return Settings(**values)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"gum {__version__}")
        return 0

    try:
        settings = resolve_settings(args, load_settings())
    except (ConfigurationError, ValueError) as exc:
        print(f"gum: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    try:
        server = build_server(settings)
    except ConfigurationError as exc:
        logger.error("error adding handler: %s", exc)
        return 2

    logger.info("gum (version %s) listening on %s:%d", __version__, settings.host, settings.port)
    uvicorn.run(server.app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
