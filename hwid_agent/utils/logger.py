# hwid_agent/utils/logger.py

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

logger = logging.getLogger("HwidAgent")


def setup_logging(level="INFO", log_file=None):
    """
    Attach stream (and optional file) handlers to the agent logger
    """
    formatter = logging.Formatter(LOG_FORMAT)

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    level = level or "INFO"
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger
