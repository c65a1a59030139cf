"""
Logging configuration for the biomine command line.

Jobs log through module loggers under the "biomine" namespace; the CLI
attaches the handlers once per run.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEFAULT_LOG_NAME = "postprocess.log"


def setup_logging(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """
    Send a logger's records to stdout and, optionally, a log file.

    Handlers from an earlier call are replaced. With only log_dir set
    the file is log_dir/postprocess.log; a relative log_file is placed
    inside log_dir when both are given.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file or log_dir:
        log_path = Path(log_file or DEFAULT_LOG_NAME)
        if log_dir:
            log_path = Path(log_dir) / log_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
