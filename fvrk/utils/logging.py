import os
import sys
from loguru import logger

DEFAULT_LEVEL = os.environ.get("FVRK_LOG_LEVEL", "INFO")


def setup_logging(level=DEFAULT_LEVEL, show_time=True, sink=None):
    """Configure loguru for the solver.

    Parameters
    ----------
    level : str
        Logging level (DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL).
        Per-stage pipeline messages are emitted at DEBUG.
    show_time : bool
        Whether to show timestamps in the output.
    sink : file-like or path, optional
        Destination of the log records (default: stderr).
    """
    logger.remove()

    if show_time:
        log_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
        )
    else:
        log_format = (
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
        )

    if sink is None:
        logger.add(sys.stderr, format=log_format, level=level, colorize=True)
    else:
        logger.add(sink, format=log_format, level=level, colorize=False)

    return logger
