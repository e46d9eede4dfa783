# file: PORTAL/core/logger.py
import logging

from PORTAL.core.config import AppConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(config: AppConfig) -> None:
    """
    Route stdlib logging either to Google Cloud Logging or to stderr.
    """
    level = getattr(logging, config.log_level, logging.INFO)

    if config.cloud_logging:
        import google.cloud.logging

        client = google.cloud.logging.Client()
        client.setup_logging(log_level=level)
        return

    logging.basicConfig(level=level, format=LOG_FORMAT)


def log_to_cloud(category: str, severity: str, message: str, metadata: dict = None):
    logging.log(
        getattr(logging, severity.upper(), logging.INFO),
        f"[{category}] {message}",
        extra={"metadata": metadata or {}}
    )
