"""
=============================================================================
STATIC-FALLBACK CLI ENTRY POINT
=============================================================================

    # Serve ./public under /static, everything else gets a plain 404
    python -m staticfallback --directory ./public --prefix static

    # Directory from the environment
    WEBROOT=/srv/www python -m staticfallback

    # Serve directory requests with their index.html
    python -m staticfallback -d ./public --index

    # Serve assets shipped inside an installed package (mypkg/assets/...)
    python -m staticfallback --binfs -d assets --embed-package mypkg

Anything not given on the command line comes from the environment
(HTTP_HOST, HTTP_PORT, HTTP_LOG_LEVEL, HTTP_LOG_FORMAT, STATIC_PREFIX,
WEBROOT, STATIC_BINFS, STATIC_INDEX), then from the defaults.

=============================================================================
"""

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from . import __version__, embedded
from .config import LOG_LEVELS, LOG_FORMATS, ServerConfig, StaticConfigError, StaticOptions, setup_logging
from .handlers import StaticMiddleware
from .middleware import LoggingMiddleware
from .server import StaticServer


logger = logging.getLogger("staticfallback")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="static-fallback",
        description="Serve static files, falling back to a 404 for everything else",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m staticfallback -d ./public                  # Serve ./public at /
  python -m staticfallback -d ./public --prefix static  # Serve at /static
  python -m staticfallback -d ./public --index          # index.html for dirs
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--host", "-H", default=None, help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Port to listen on (default: 8080)")

    # ─────────────────────────────────────────────────────────────────────
    # STATIC FILE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=None,
        help="Directory to serve (default: $WEBROOT)",
    )
    parser.add_argument("--prefix", default=None, help="URL prefix to strip, e.g. 'static'")
    parser.add_argument(
        "--binfs",
        action="store_true",
        default=None,
        help="Look the directory up in the embedded filesystem",
    )
    parser.add_argument(
        "--embed-package",
        metavar="PACKAGE",
        default=None,
        help="Embed PACKAGE's data files found under --directory before starting",
    )
    parser.add_argument(
        "--index",
        action="store_true",
        default=None,
        help="Serve index.html for directory requests",
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING AND META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--log-level", "-l", choices=LOG_LEVELS, default=None, help="Logging level (default: INFO)")
    parser.add_argument("--log-format", choices=LOG_FORMATS, default=None, help="Access log format (default: text)")
    parser.add_argument("--version", "-v", action="version", version=f"static-fallback {__version__}")

    return parser


def build_server(args: argparse.Namespace) -> StaticServer:
    """
    Turn parsed arguments into a ready-to-run server.

    Raises:
        StaticConfigError: the options can never work (bad port, missing
            embedded directory, ...).
    """
    config = ServerConfig.from_env()
    config = replace(
        config,
        host=args.host or config.host,
        port=config.port if args.port is None else args.port,
        log_level=args.log_level or config.log_level,
        log_format=args.log_format or config.log_format,
    )
    config.validate()

    options = StaticOptions.from_env()
    options = replace(
        options,
        prefix=options.prefix if args.prefix is None else args.prefix,
        directory=args.directory or options.directory,
        binfs=options.binfs if args.binfs is None else args.binfs,
        index=options.index if args.index is None else args.index,
    )

    if args.embed_package:
        try:
            count = embedded.embed_package(args.embed_package, options.directory)
        except (ImportError, OSError) as e:
            raise StaticConfigError(f"Cannot embed package {args.embed_package!r}: {e}") from e
        logger.info(f"Embedded {count} files from {args.embed_package}")

    server = StaticServer(config)
    server.use(LoggingMiddleware(log_format=config.log_format))
    server.use(StaticMiddleware(options))
    return server


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level or "INFO")

    try:
        server = build_server(args)
    except StaticConfigError as e:
        print(f"static-fallback: {e}", file=sys.stderr)
        return 2

    server.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
