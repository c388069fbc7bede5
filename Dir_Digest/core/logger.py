import logging
import sys
from typing import Optional, TextIO


LOG_FORMAT = "%(message)s"
VERBOSE_LOG_FORMAT = "[%(component)s] %(message)s"

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class RunLogger:
    """
    Logging handle handed to scans and runs explicitly.

    Call shape is log(level, component, message). Each handle owns its
    own logging.Logger, so nothing here touches the process-wide
    logging tree unless a caller passes in one of its loggers.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        if logger is None:
            logger = logging.Logger("dir_digest")
            logger.addHandler(logging.NullHandler())
        self.logger = logger

    @classmethod
    def for_console(
        cls,
        *,
        quiet: bool = False,
        verbose: bool = False,
        stream: Optional[TextIO] = None,
    ) -> "RunLogger":
        if quiet:
            level = logging.ERROR
        elif verbose:
            level = logging.DEBUG
        else:
            level = logging.INFO

        logger = logging.Logger("dir_digest", level)
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(logging.Formatter(VERBOSE_LOG_FORMAT if verbose else LOG_FORMAT))
        logger.addHandler(handler)
        return cls(logger)

    def log(self, level: str, component: str, message: str):
        self.logger.log(
            LEVELS.get(level.upper(), logging.INFO),
            message,
            extra={"component": component},
        )

    def is_enabled(self, level: str) -> bool:
        return self.logger.isEnabledFor(LEVELS.get(level.upper(), logging.INFO))
