import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fintrack.config import settings


def setup_logger() -> logging.Logger:
    """
    Set up a rotating file logger for API requests.

    Returns:
        logging.Logger: Configured logger instance
    """
    logs_dir = Path(settings.LOG_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("fintrack.requests")
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))
    logger.propagate = False

    # Prevent duplicate handlers if logger already exists
    if logger.handlers:
        return logger

    file_handler = RotatingFileHandler(
        filename=logs_dir / "api_requests.log",
        maxBytes=settings.LOG_MAX_SIZE_MB * 1024 * 1024,
        backupCount=settings.LOG_MAX_FILES,
        encoding="utf-8",
    )

    formatter = logging.Formatter(
        fmt="[%(asctime)s.%(msecs)03d] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger


def setup_app_logger() -> logging.Logger:
    """
    Set up a logger for application events that outputs to stdout.

    Separate from api_logger which logs requests to rotating files. Only user
    and transaction ids go through this logger, never emails, passwords,
    amounts or descriptions.

    Returns:
        logging.Logger: Configured logger instance
    """
    logger = logging.getLogger("fintrack.app")
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))

    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    formatter = logging.Formatter(
        fmt="[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


# Create global logger instances
api_logger = setup_logger()
app_logger = setup_app_logger()
