import logging
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "qc_line_search"

_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)


def setup_logging(
    log_file: Optional[Union[str, Path]] = None,
    *,
    quiet: bool = False,
    debug: bool = False,
) -> logging.Logger:
    """Configure and return the shared `qc_line_search` logger.

    Each line search logs every trial (step, verdict, energies) at DEBUG,
    acceptance at DEBUG and failures at WARNING. With ``debug=False`` only
    failures and other INFO-or-higher records are emitted. Calling this again
    replaces the previously installed handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    # pytest caplog listens on the root logger.
    logger.propagate = True

    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file:
        try:
            _attach(logger, logging.FileHandler(log_file, mode="w"), level)
        except OSError as exc:
            print(f"[logging] Could not open log file '{log_file}': {exc}")

    if not quiet:
        _attach(logger, logging.StreamHandler(), level)

    return logger
