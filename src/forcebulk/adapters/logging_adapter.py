import logging

from forcebulk.core.interfaces.logging import LoggingPort
from forcebulk.core.logging_config import coerce_level


class LoggingAdapter(LoggingPort):
    """Concrete logging adapter.

    Delegates to Python's logging without adding handlers, so that
    `configure_logging` (or the embedding application) owns the sinks.
    """

    def __init__(self, name: str = "forcebulk", log_level: int | str = logging.INFO):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(coerce_level(log_level))
        self.logger.propagate = True

    def info(self, msg: str, *args):
        self.logger.info(msg, *args)

    def warning(self, msg: str, *args):
        self.logger.warning(msg, *args)

    def error(self, msg: str, *args):
        self.logger.error(msg, *args)

    def debug(self, msg: str, *args):
        self.logger.debug(msg, *args)
