import logging
import os
import sys
from typing import Union

ROOT_LOGGER = "Codesize"

def get_logger(name: str) -> logging.Logger:
    """
    Returns a configured logger with the given name.
    Avoids duplicate handlers and respects CODESIZE_LOG_LEVEL.
    """
    logger = logging.getLogger(name)

    log_level_str = os.getenv("CODESIZE_LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, log_level_str, logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%SZ"
        ))
        logger.addHandler(handler)

    # Size reports go to stdout; keep log lines off any root handler
    logger.propagate = False

    return logger

def set_log_level(level: Union[int, str]) -> None:
    """Changes the level of every Codesize logger created so far."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    for name, obj in list(logging.Logger.manager.loggerDict.items()):
        if isinstance(obj, logging.Logger) and (name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + ".")):
            obj.setLevel(level)
