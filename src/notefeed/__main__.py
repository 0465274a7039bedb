"""CLI entry point for the feed server.

Examples:
    ```bash
    python -m notefeed
    python -m notefeed --config config/feed.yaml --port 9000
    NOTEFEED_HANDLE=alice@example.com python -m notefeed --log-level DEBUG
    python -m notefeed --log-format json
    ```
"""

import argparse
import sys
from pathlib import Path

import uvicorn

from notefeed.core.exceptions import ConfigurationError
from notefeed.core.logger import LogFormat, Logger, setup_logging
from notefeed.services.feed import FeedConfig, create_app


DEFAULT_CONFIG = Path("config") / "feed.yaml"

logger = Logger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for the feed server."""
    parser = argparse.ArgumentParser(
        prog="notefeed",
        description="Serve a single-author Nostr feed as HTML",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Config path (default: {DEFAULT_CONFIG})",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level (default: INFO)",
    )

    parser.add_argument(
        "--log-format",
        type=LogFormat,
        choices=list(LogFormat),
        default=LogFormat.TEXT,
        help="Log output format (default: text)",
    )

    parser.add_argument("--host", help="Bind address (overrides server.host)")
    parser.add_argument("--port", type=int, help="Bind port (overrides server.port)")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Load the configuration and serve the app until interrupted."""
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_format)

    try:
        config = FeedConfig.from_yaml(str(args.config))
    except FileNotFoundError:
        logger.error("config_not_found", path=str(args.config))
        return 1
    except ConfigurationError as e:
        logger.error("config_invalid", path=str(args.config), error=str(e))
        return 1

    host = args.host or config.server.host
    port = args.port or config.server.port
    logger.info("http_server_starting", host=host, port=port, relays=len(config.relays))

    uvicorn.run(create_app(config), host=host, port=port, log_level="warning", access_log=False)
    return 0


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
