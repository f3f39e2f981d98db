import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import config


def setup_logging() -> None:
    """Configure logging for the client and write logs to file."""
    level = getattr(logging, config.LOGGING.LEVEL, logging.INFO)

    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)

    root_logger.setLevel(level)
    root_logger.addHandler(stream_handler)

    log_file = Path(config.LOGGING.FILE)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=config.LOGGING.MAX_BYTES,
            backupCount=config.LOGGING.BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError:
        root_logger.warning("Could not open log file %s, file logging disabled", log_file)
    else:
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
