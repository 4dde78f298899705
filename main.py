"""Entry point for the WordPress MCP server."""

import logging
import os
import sys

from wp_mcp.server import build_server
from wp_mcp.settings import Settings
from wp_mcp.sites import ConfigError


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    # stderr keeps the stdio transport's stdout free for protocol frames.
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


def main() -> None:
    """Load the site configuration and serve until interrupted."""
    _configure_logging()
    logger = logging.getLogger("server-wp-mcp")

    try:
        settings = Settings.load()
    except ConfigError as exc:
        logger.error("Server failed to start: %s", exc)
        sys.exit(1)

    server = build_server(settings)

    try:
        server.startup()
        logger.info(
            "WordPress MCP server started with %d site(s) configured",
            len(settings.sites),
            extra={"source": settings.config_source},
        )
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutdown requested (Ctrl+C).")
    except Exception:
        logger.exception("Server stopped due to an unexpected error.")
        raise
    finally:
        server.shutdown()
        logger.info("Server shutdown complete.")


if __name__ == "__main__":
    main()
