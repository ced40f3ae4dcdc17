# core/logger.py
import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"

logger = logging.getLogger("feedback_admin")
logger.setLevel(logging.INFO)
logger.propagate = False

if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)


def configure_logging(level: str) -> None:
    """Apply LOG_LEVEL from settings; unknown names fall back to INFO."""
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
