"""
Logging configuration for the KB CMS backend.
Centralizes all logging setup so every module logs the same way.
"""
import os
import sys
import logging
from logging.handlers import RotatingFileHandler

ROOT_LOGGER_NAME = "kbcms"
MAX_LOG_SIZE = 30 * 1024 * 1024  # 30 MB
BACKUP_COUNT = 5
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level="INFO", log_file=None):
    """
    Configure the package logger once per process.

    Args:
        level: Log level name for the package logger
        log_file: Optional path of a rotating log file; falsy disables file logging

    Returns:
        The configured ``kbcms`` logger
    """
    # Suppress driver chatter
    logging.getLogger('pymongo').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('s3transfer').setLevel(logging.WARNING)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Only configure if handlers haven't been added yet
    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            try:
                log_dir = os.path.dirname(log_file)
                if log_dir:
                    os.makedirs(log_dir, exist_ok=True)
                # delay=True avoids opening the file until the first record
                file_handler = RotatingFileHandler(
                    log_file,
                    maxBytes=MAX_LOG_SIZE,
                    backupCount=BACKUP_COUNT,
                    delay=True
                )
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)
            except OSError as e:
                logger.warning("Could not set up file logging: %s", e)

    return logger


def get_logger(module_name=None):
    """
    Get a logger under the package namespace.

    Args:
        module_name: Dotted module name, usually ``__name__``

    Returns:
        Logger instance
    """
    if not module_name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if module_name == ROOT_LOGGER_NAME or module_name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(module_name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{module_name}")
