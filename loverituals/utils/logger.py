# loverituals/utils/logger.py

import logging
import os
import traceback

# Plain-text formatter for the file loggers; configure_logging swaps in JSON
formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%Y-%m-%d %H:%M:%S")

access_logger = logging.getLogger("access")
error_logger = logging.getLogger("error")


def setup_logger(name, log_file, level):
    """A helper function to set up a file logger."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False  # Prevent duplicate logs in parent loggers

    # Avoid adding handlers if they already exist (e.g., during autoreload)
    if not logger.handlers:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def setup_file_loggers(logs_path: str) -> None:
    """Route the access/error loggers to files under logs_path."""
    os.makedirs(logs_path, exist_ok=True)
    setup_logger("access", os.path.join(logs_path, "access.log"), logging.INFO)
    setup_logger("error", os.path.join(logs_path, "error.log"), logging.ERROR)


def log_info(message):
    access_logger.info(message)


def log_exception(e: Exception, context: str = ""):
    formatted = "".join(traceback.format_exception(type(e), e, e.__traceback__))
    error_logger.error(f"Exception in {context}:\n{formatted}")
