#!/usr/bin/env python3
"""
Shard Server Entry Point

This is the main entry point for starting the Shard server.

Usage:
    python -m shard.server                    # Default settings (0.0.0.0:8080)
    python -m shard.server --port 9090        # Custom port
    python -m shard.server --host 127.0.0.1   # Custom host
    python -m shard.server --debug            # Enable debug logging

Environment Variables:
    SHARD_HOST       - Server bind address
    SHARD_PORT       - Server port
    SHARD_DEBUG      - Enable debug mode (true/false)
    SHARD_LOG_LEVEL  - Log level when not in debug mode (e.g. INFO, WARNING)
"""

import argparse
import asyncio
import logging
import sys

from . import __version__
from .cache.store import KVStore
from .config.settings import settings
from .network.http_server import ShardServer


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Shard: In-Memory Key-Value Store over HTTP",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--host",
        type=str,
        default=settings.HOST,
        help="Host address to bind to",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=settings.PORT,
        help="Port number to listen on",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=settings.LOG_LEVEL.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def setup_logging(debug: bool = False, level: str = "INFO") -> None:
    """Configure logging based on debug flag and level name."""
    log_level = logging.DEBUG if debug else getattr(logging, level, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )


def main(argv=None) -> None:
    """Main entry point for the server."""
    args = parse_args(argv)

    setup_logging(debug=args.debug, level=args.log_level)
    logger = logging.getLogger(__name__)

    store = KVStore()
    server = ShardServer(host=args.host, port=args.port, store=store)

    logger.info(f"Starting Shard server v{__version__}")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")
    logger.info(f"  Debug: {args.debug}")

    try:
        asyncio.run(server.start())
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    except Exception as e:
        logger.error(f"Server error: {e}")
        raise
    finally:
        logger.info("Server shutdown complete")


if __name__ == "__main__":
    main()
