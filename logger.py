# logger.py - Centralized logging configuration
import os
import logging
from logging.handlers import RotatingFileHandler

LOG_DIR = os.environ.get("LOG_DIR", "logs")
LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]"


def _level_from_env(default=logging.INFO):
    name = os.environ.get("LOG_LEVEL", "").upper()
    return getattr(logging, name, default) if name else default


def setup_logger(name, log_file=None, level=None):
    """
    Rotating file logger under LOG_DIR, plus a console handler outside
    production. Loggers named after a package ("hierarchy") also collect
    records from its modules (logging.getLogger(__name__)).
    """
    os.makedirs(LOG_DIR, exist_ok=True)

    if not log_file:
        log_file = os.path.join(LOG_DIR, f"{name}.log")
    if level is None:
        level = _level_from_env()

    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if not logger.handlers:
        logger.setLevel(level)

        file_handler = RotatingFileHandler(log_file, maxBytes=1024 * 1024, backupCount=10)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

        if os.environ.get("FLASK_ENV") != "production":
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.DEBUG)
            console_handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))
            logger.addHandler(console_handler)

    return logger


auth_logger = setup_logger("auth")
hierarchy_logger = setup_logger("hierarchy")
