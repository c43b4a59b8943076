from typing import Optional, Union

from ..logs import logger


class ComputationalModel:
    """
    Base class of the time-stepping models.

    Provides the package logger as ``self.logger``. A level is applied only
    when one is given, so a level set by the caller is left alone.

    Parameters:
        log_level: Logging level name or number, e.g. "INFO" or "DEBUG", or None
            to keep the current level.
    """

    def __init__(self, log_level: Optional[Union[str, int]] = None):
        self.logger = logger
        if log_level is not None:
            self.logger.setLevel(log_level)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}()"
