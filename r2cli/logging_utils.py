import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "r2cli"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a child of the package logger."""
    if name is None or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(debug: bool = False) -> logging.Logger:
    """
    Set up the package logger.

    - DEBUG level when debug is on, WARNING otherwise.
    - Output goes to stderr through a RichHandler so it never mixes with
      command results on stdout.
    - Calling it again only changes the level; no second handler is added.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="%H:%M:%S"))
        logger.addHandler(handler)

    # keep botocore quiet unless asked
    logging.getLogger("botocore").setLevel(logging.DEBUG if debug else logging.WARNING)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.ERROR)

    logger.propagate = True
    return logger
