import logging
import os
import sys

LOGGER_NAME = "stronghold"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def _has_file_handler(logger: logging.Logger, log_file: str) -> bool:
    target = os.path.abspath(log_file)
    return any(
        isinstance(h, logging.FileHandler) and h.baseFilename == target
        for h in logger.handlers
    )


def setup_logging(
    level: int = logging.INFO, log_file: str | None = None
) -> logging.Logger:
    """Configure the ``stronghold`` logger.

    Safe to call again once settings are known: the stdout handler is only
    installed once and ``log_file`` is attached at most once per path.
    """
    logger = logging.getLogger(LOGGER_NAME)
    fmt = logging.Formatter(LOG_FORMAT)
    if not logger.handlers:
        logger.setLevel(level)
        stdout = logging.StreamHandler(sys.stdout)
        stdout.setFormatter(fmt)
        logger.addHandler(stdout)
        # gateway heartbeats and per-request httpx lines drown out export logs
        for noisy in ("discord", "discord.client", "discord.gateway", "httpx"):
            logging.getLogger(noisy).setLevel(logging.WARNING)
    if log_file and not _has_file_handler(logger, log_file):
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(fmt)
        logger.addHandler(file_handler)
    return logger


def get_logger(component: str) -> logging.Logger:
    """Return the ``stronghold.<component>`` child logger."""
    return logging.getLogger(f"{LOGGER_NAME}.{component}")
