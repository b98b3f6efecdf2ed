from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


def setup_logger(
    name: Optional[str] = None,
    log_level: Union[int, str] = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Sets up a logger with console (StreamHandler) output and, when log_dir is
    given, a RotatingFileHandler writing estimator.log in that directory.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Streamlit reruns the script on every interaction; attach handlers once.
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path / "estimator.log", maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"  # 5 MB
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(file_handler)

    return logger
