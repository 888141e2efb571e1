import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# HTTP client libraries log one INFO line per request; the worker polls and calls the LLM per job
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3")


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Give the root logger a stdout handler (once) and the requested level.
    Under uvicorn the handlers already exist and only the level is applied;
    the worker and the scripts call this first thing in main().
    """
    resolved_level = (level or DEFAULT_LEVEL).upper()
    root_logger = logging.getLogger()

    if not root_logger.handlers:
        logging.basicConfig(
            level=resolved_level,
            format=LOG_FORMAT,
            handlers=[logging.StreamHandler(sys.stdout)],
        )
    else:
        root_logger.setLevel(resolved_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    return logging.getLogger("stylist")
