"""
Main entry point for the Simple API Demo service.
"""

import asyncio
import logging
import sys
from typing import Mapping, Optional

from .config import DEFAULT_LOG_LEVEL, load_config
from .errors import AppError, ConfigError, ServerError
from .server import ServerManager

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def main(environ: Optional[Mapping[str, str]] = None) -> None:
    """Load configuration and run both servers until they stop.

    Exits with status 1 when configuration is invalid, a port cannot be
    bound or a server fails while running.
    """
    try:
        config = load_config(environ)
    except AppError as e:
        _configure_logging(DEFAULT_LOG_LEVEL)
        logger.error(ConfigError(f"Failed to load configuration: {e}"))
        sys.exit(1)

    _configure_logging(config.log_level)

    server_manager = ServerManager(config)
    try:
        asyncio.run(server_manager.start())
    except KeyboardInterrupt:
        logger.info("Interrupted, servers stopped")
    except Exception as e:
        logger.error(ServerError(f"Failed to start servers: {e}"))
        sys.exit(1)


if __name__ == "__main__":
    main()
