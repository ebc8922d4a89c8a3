import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    format_string: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Configure the ``httpwrap`` logger.

    Console output goes to stderr through rich, so response bodies written
    to stdout are never interleaved with log lines.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file that also receives every record
        format_string: Optional format for the file handler
        force: If True, replace handlers that are already installed

    Returns:
        The configured ``httpwrap`` logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger("httpwrap")
    logger.setLevel(numeric_level)

    if force or not logger.handlers:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        console_handler = RichHandler(console=Console(stderr=True), show_path=False)
        console_handler.setLevel(numeric_level)
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(logging.Formatter(format_string or FILE_FORMAT))
            logger.addHandler(file_handler)

    # Records stop here; the root logger would print them twice
    logger.propagate = False

    return logger
