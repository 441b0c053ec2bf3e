"""Composition root for the rack bridge.

This module is the ONLY location that imports both the core servlet
and the concrete HTTP host. All wiring happens here:

- Configuration loading via config module
- Logging setup
- Servlet construction (evaluates the rackup script)
- HTTP host startup
"""

import asyncio
import json
import logging
import sys

from rackbridge.adapters.http.server import ServletHTTPServer
from rackbridge.config import load_settings
from rackbridge.core.servlet import RackServlet


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    logging.basicConfig(
        level=level,
        handlers=[handler],
    )


async def bootstrap() -> None:
    """Load configuration, build the servlet, and serve it.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Construct the RackServlet
    4. Start the HTTP host and serve until cancelled

    Raises:
        ValueError: If the rackup script is missing or invalid
        asyncio.CancelledError: On graceful shutdown signal
    """
    # Step 1: Load configuration
    settings = load_settings()

    # Step 2: Configure logging
    configure_logging("DEBUG" if settings.debug else settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info(f"Loading rack application from {settings.rack_config_path}")

    # Step 3: Construct the servlet
    servlet = RackServlet(settings.servlet_config())
    servlet.init(settings)

    # Step 4: Serve
    http_server = ServletHTTPServer(
        servlet=servlet,
        host=settings.http_host,
        port=settings.http_port,
    )
    await http_server.start()

    try:
        while True:
            await asyncio.sleep(1)
    finally:
        await http_server.stop()
        servlet.destroy()


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except asyncio.CancelledError:
        logger.info("Graceful shutdown completed")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
