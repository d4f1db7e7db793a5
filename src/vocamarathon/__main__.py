"""Main entry point for the drill application."""
import logging

from vocamarathon.cli import app
from vocamarathon.config import ensure_directories, settings
from vocamarathon.logging_config import setup_logging
from vocamarathon.monitoring import start_monitoring

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the terminal application."""
    ensure_directories()
    setup_logging("Starting vocamarathon ...")

    if settings.monitoring.metrics_port:
        start_monitoring(settings.monitoring.metrics_port)
        logger.info(f"Metrics exposed on port {settings.monitoring.metrics_port}")

    try:
        app()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")


if __name__ == "__main__":
    main()
