import logging
import os
import sys

# Constants
LOG_DIR = os.environ.get("LIFETUNES_LOG_DIR", "logs")
LOG_FILE_NAME = "lifetunes.log"
LOG_FORMAT = "[%(asctime)s] | %(levelname)-8s | %(name)-15s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str = "lifetunes", level: int = logging.INFO,
                 log_to_file: bool = True) -> logging.Logger:
    """
    Configures and returns a standardized logger.

    Features:
    - Console output (StreamHandler)
    - File output, overwritten on each run
    - Standardized formatting

    Handlers are attached once; later calls return the configured logger.
    Child loggers (lifetunes.core.*, lifetunes.adapters.*) propagate here.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_to_file:
        os.makedirs(LOG_DIR, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(LOG_DIR, LOG_FILE_NAME), mode='w', encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    # Records stop here; the root logger has no handlers of ours
    logger.propagate = False
    return logger
