"""Logger setup for the ``salattimes`` namespace, used by the CLI."""

import logging
import sys

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> None:
    """Send ``salattimes.*`` records to stderr and, optionally, a file.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Threshold for the logger and its handlers.
        log_file: Path to a log file, truncated on open (``--log-file``).
    """
    logger = logging.getLogger("salattimes")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(_FORMAT, datefmt="%H:%M:%S")
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging to %s", log_file or "stderr")
