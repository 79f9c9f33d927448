from logging import Logger, StreamHandler, getLogger
from typing import Optional

from json_log_formatter import JSONFormatter

from .settings import GlobalSettings

LoggerLevelT = int

LOGGER_NAME = "recordflow"


def get_logger(level: Optional[LoggerLevelT] = None) -> Logger:
    logger = getLogger(LOGGER_NAME)
    if len(logger.handlers) == 0:
        if level is None:
            level = GlobalSettings().logger_settings.level
        stream_handler = StreamHandler()
        stream_handler.setLevel(level=level)
        stream_handler.setFormatter(JSONFormatter())
        logger.addHandler(stream_handler)
        logger.setLevel(level)
    return logger
