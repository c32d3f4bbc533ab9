"""
Root logger wiring for the ``category-affinity`` command line.

Each CLI command calls ``configure_logging(config.logging)`` right after the
config loads. Library modules only ask for ``logging.getLogger(__name__)``;
the matrix and batch summaries they log reach the user through the handlers
installed here. Log lines go to stderr so stdout carries only report text.

With ``[logging] json_format = true`` every record becomes a single JSON line::

    {"ts": "2024-06-30T12:00:00Z", "level": "INFO", "logger": "category_affinity.affinity.batch", "msg": "..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from category_affinity.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_STANDARD_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """Render a record as one JSON line.

    Besides ``ts``/``level``/``logger``/``msg``, any key passed through
    ``extra=`` (for example ``goal_category``) is copied in as-is, and a
    traceback lands under ``exc``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        line: dict = dict(
            ts=created.strftime(LOG_DATE_FORMAT),
            level=record.levelname,
            logger=record.name,
            msg=record.getMessage(),
        )
        line.update(
            (key, val)
            for key, val in vars(record).items()
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            line["exc"] = self.formatException(record.exc_info)
        return json.dumps(line, default=str)


def _make_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return _JsonFormatter()
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def configure_logging(config: "LoggingConfig") -> None:
    """Replace the root logger's handlers according to ``config``.

    A stderr handler is always installed. When ``config.log_file`` is
    non-empty a UTF-8 file handler is added too, and its parent directory is
    created on demand. Both share one formatter. Calling this again (each
    CLI invocation does) swaps the handlers rather than stacking them.

    Args:
        config: The ``[logging]`` section of ``AppConfig``.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter = _make_formatter(config.json_format)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # keep Parquet export chatter out of the affinity run log
    logging.getLogger("pyarrow").setLevel(logging.WARNING)
