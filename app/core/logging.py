"""
Logging setup shared by the API process and the standalone job runner
"""
import logging
from logging.handlers import RotatingFileHandler
import os

from .config import settings

_configured = False


def setup_logging(level: int = logging.INFO, log_file: str = "tailor_pos.log") -> None:
    """Configure console + rotating file logging once per process."""
    global _configured
    if _configured:
        return

    handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    ))
    handlers.append(console_handler)

    try:
        os.makedirs(settings.LOGS_PATH, exist_ok=True)
        # 50MB per file, keep 7
        file_handler = RotatingFileHandler(
            os.path.join(settings.LOGS_PATH, log_file),
            maxBytes=50 * 1024 * 1024,
            backupCount=7,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        handlers.append(file_handler)
    except OSError as e:
        logging.getLogger(__name__).warning(f"File logging disabled: {e}")

    # Disable noisy loggers before basicConfig
    logging.getLogger('sqlalchemy').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.pool').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('apscheduler').setLevel(logging.WARNING)

    logging.basicConfig(level=level, handlers=handlers)
    _configured = True
