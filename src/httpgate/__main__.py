"""
Command-line entry point: ``python -m httpgate`` or ``httpgate``.

Settings come from HTTPGATE_* environment variables first; flags given
on the command line override them.
"""

from typing import List, Optional
import argparse
import sys

from . import __version__
from .app import create_app
from .config import LOG_FORMATS, ServerConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="httpgate",
        description="Threaded HTTP/1.1 server with a middleware chain and demo API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m httpgate                       # Run with defaults
  python -m httpgate --port 3000           # Custom port
  python -m httpgate --host 0.0.0.0        # Listen on all interfaces
  python -m httpgate --strict-params       # /api/users/:id matches one segment only
  HTTPGATE_LOG_FORMAT=json python -m httpgate
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--host", "-H", help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, help="Port to listen on (default: 8080)")
    parser.add_argument("--workers", "-w", type=int, help="Number of worker threads (default: 4)")

    # ─────────────────────────────────────────────────────────────────────
    # BEHAVIOUR
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--strict-params",
        action="store_true",
        help="Route placeholders match exactly one path segment",
    )
    parser.add_argument(
        "--strict-parsing",
        action="store_true",
        help="Answer 400 to requests without a method and target",
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        help="Access log format (default: text)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"httpgate {__version__}",
    )

    return parser


def config_from_args(args: argparse.Namespace, base: Optional[ServerConfig] = None) -> ServerConfig:
    """Overlay parsed command-line flags on ``base`` (environment by default)."""
    config = base or ServerConfig.from_env()

    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.workers is not None:
        config.workers = args.workers
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format
    if args.strict_params:
        config.strict_params = True
    if args.strict_parsing:
        config.strict_parsing = True

    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        server = create_app(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
