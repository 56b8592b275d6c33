"""Central logging configuration utilities.

`configure_logging` is meant to be called once by the application embedding
forcebulk. It wires separate stdout/stderr sinks and injects the id of the job
being waited on into every record. Library modules never touch handlers; they
only emit through `LoggingPort` or standard module loggers.
"""

from __future__ import annotations

import contextvars
import logging
import sys
from typing import Optional

# Set by BulkQueryJob.wait() for the duration of a wait loop
job_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "job_id", default="-"
)

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)s %(name)s job=%(job_id)s: %(message)s"


def coerce_level(level: int | str | None) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    key = str(level).upper().strip()
    return logging.getLevelNamesMapping().get(key, logging.INFO)


class _JobIdFilter(logging.Filter):
    """Inject the current job id from the contextvar into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.job_id = job_id_var.get()
        return True


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self.max_level


def configure_logging(
    level: int | str | None = None,
    fmt: Optional[str] = None,
    quiet_aiohttp: bool = True,
) -> None:
    """Configure the root logger with stdout (DEBUG/INFO) and stderr (WARNING+) sinks."""
    numeric_level = coerce_level(level)
    formatter = logging.Formatter(fmt or DEFAULT_FORMAT)
    job_filter = _JobIdFilter()

    root = logging.getLogger()
    root.setLevel(numeric_level)

    # Clear existing handlers to avoid duplication on repeated calls
    for h in list(root.handlers):
        root.removeHandler(h)

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(_MaxLevelFilter(logging.INFO))
    stdout_handler.addFilter(job_filter)
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.addFilter(job_filter)
    stderr_handler.setFormatter(formatter)

    root.addHandler(stdout_handler)
    root.addHandler(stderr_handler)

    if quiet_aiohttp:
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

    logging.getLogger("forcebulk").debug(
        "Logging configured level=%s quiet_aiohttp=%s", numeric_level, quiet_aiohttp
    )
