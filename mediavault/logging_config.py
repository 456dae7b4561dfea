# Filename: mediavault/logging_config.py
import logging
import sys

logger = logging.getLogger("mediavault")


def setup_logging(level: str = "INFO") -> None:
    """
    Configures the root logger for the service.
    Called once from the application lifespan.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        stream=sys.stdout,
    )
    logger.setLevel(level)
    # Silence noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)
