# ================================
# FILE: run.py
# ================================
"""
Main entry point for the Harness Demo App.

- Configures structured logging before anything else logs.
- Builds the application eagerly so configuration errors abort startup.
- Runs uvicorn in-process; SIGINT/SIGTERM drain in-flight requests for at most
  SHUTDOWN_TIMEOUT seconds before remaining requests are abandoned.
"""
import logging
import signal
import sys
from pathlib import Path

import uvicorn

# Put project root on sys.path so "import harness_demo" works when running run.py directly.
PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from harness_demo.core.config import settings  # noqa: E402
from harness_demo.core.exceptions import ConfigurationError  # noqa: E402
from harness_demo.core.logging_config import setup_logging  # noqa: E402

logger = logging.getLogger("harness_demo.run")


class Server(uvicorn.Server):
    """uvicorn server that logs the shutdown signal before draining"""

    def handle_exit(self, sig, frame):
        if not self.should_exit:
            logger.info("shutdown signal received", extra={"signal": signal.Signals(sig).name})
        super().handle_exit(sig, frame)


class DrainTimeoutFlag(logging.Filter):
    """Notices uvicorn giving up on in-flight requests when the drain timeout expires"""

    MARKER = "timeout graceful shutdown exceeded"

    def __init__(self):
        super().__init__()
        self.tripped = False

    def filter(self, record):
        if self.MARKER in record.getMessage():
            self.tripped = True
        return True


def run_server(server: uvicorn.Server) -> bool:
    """Run until shutdown. Returns False when in-flight requests were abandoned."""
    drain = DrainTimeoutFlag()
    uvicorn_logger = logging.getLogger("uvicorn.error")
    uvicorn_logger.addFilter(drain)
    try:
        server.run()
    finally:
        uvicorn_logger.removeFilter(drain)
    return not drain.tripped


def main() -> None:
    setup_logging(
        log_level=settings.log_level,
        enable_json=settings.log_json,
        log_dir=settings.log_dir,
    )

    # Importing here so a broken configuration is reported through the configured logger
    try:
        from harness_demo.main import app
    except ConfigurationError as exc:
        logger.error("failed to start: %s", exc.message, extra={"details": exc.details})
        sys.exit(1)

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        access_log=False,
        timeout_keep_alive=settings.keep_alive_timeout,
        timeout_graceful_shutdown=settings.shutdown_timeout,
    )
    server = Server(config)
    logger.debug("effective settings", extra={"settings": settings.get_settings_dict()})

    logger.info(
        "server starting",
        extra={
            "port": settings.port,
            "commit": settings.commit,
            "version": settings.version,
            "env": settings.environment,
            "buildTime": settings.build_time,
        },
    )

    try:
        drained = run_server(server)
    except Exception as exc:
        logger.exception("server shutdown error: %s", exc)
        sys.exit(2)

    if drained:
        logger.info("server stopped cleanly")
    else:
        logger.error(
            "server shutdown error",
            extra={"reason": "drain timeout exceeded", "timeout": settings.shutdown_timeout},
        )


if __name__ == "__main__":
    main()
