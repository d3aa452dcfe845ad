# session_scheduler/logging_config.py
import logging

LOGGER_NAME = "session_scheduler"

_HANDLER_NAME = "session_scheduler.console"
_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a single console handler to the package logger.

    Safe to call more than once (app startup, CLI, tests): the handler is
    only installed the first time, later calls just adjust the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler.set_name(_HANDLER_NAME)
        logger.addHandler(handler)

    return logger
