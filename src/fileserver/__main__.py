"""
=============================================================================
FILE SERVER CLI ENTRY POINT
=============================================================================

Command-line interface for running the file server.

=============================================================================
USAGE
=============================================================================

    # Serve ./www on 127.0.0.1:6969
    python -m fileserver

    # Serve another directory on another port
    python -m fileserver --root ./public --port 8080

    # Listen on all interfaces (for containers)
    python -m fileserver --host 0.0.0.0

    # Drop clients that don't send a request line within 10s
    python -m fileserver --read-timeout 10

=============================================================================
WHERE SETTINGS COME FROM
=============================================================================

    CLI flag  >  FILESERVER_* environment variable  >  ServerConfig default

Every flag defaults to None, meaning "not given"; only the flags that
were given override the environment-derived config.

=============================================================================
"""

import argparse
import sys
from dataclasses import replace
from typing import List, Optional

from . import __version__
from .config import ServerConfig, LOG_FORMATS
from .server import FileServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fileserver",
        description="Minimal static HTTP file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fileserver                          # Serve ./www on 127.0.0.1:6969
  python -m fileserver --root ./public          # Serve another directory
  python -m fileserver --port 8080              # Custom port
  python -m fileserver --host 0.0.0.0           # Listen on all interfaces
  python -m fileserver --log-format json        # JSON access log
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for containers)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 6969, 0 picks a free port)"
    )

    parser.add_argument(
        "--read-timeout",
        type=float,
        default=None,
        help="Seconds to wait for the request line (default: wait forever)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # SERVING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=None,
        help="Directory to serve (default: www)"
    )

    parser.add_argument(
        "--index",
        default=None,
        help="Default document for directory requests (default: index.html)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Access log format (default: text)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"fileserver {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Overlay the flags that were given onto the environment config."""
    overrides = {
        "host": args.host,
        "port": args.port,
        "root": args.root,
        "index_file": args.index,
        "read_timeout": args.read_timeout,
        "log_level": args.log_level,
        "log_format": args.log_format,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return replace(ServerConfig.from_env(), **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status: 0 after a clean shutdown, 1 if the server
        could not start (bad config, port in use, ...).
    """
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        server = FileServer(config)
        server.run()
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
