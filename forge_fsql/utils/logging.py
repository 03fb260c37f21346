"""Logging setup for the fsql tools.

Log records go to stderr (and optionally a file) so they never mix with
query output on stdout. ``structured=True`` switches to one JSON document
per record.
"""

import logging
import sys
import json
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# chatty third-party loggers held at WARNING regardless of the chosen level
QUIET_LOGGERS = ("urllib3",)


class StructuredFormatter(logging.Formatter):
    """Renders each record as a JSON object.

    Fields attached through ``ContextLoggerAdapter`` are merged into the
    top level of the document.
    """

    def format(self, record: logging.LogRecord) -> str:
        document = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)
        context = getattr(record, "context", None)
        if context:
            document.update(context)
        return json.dumps(document, default=str)


def _build_handlers(
    formatter: logging.Formatter, level: int, log_file: Optional[str]
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
    return handlers


def setup_logging(
    level: str = "WARNING",
    structured: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Configure the root logger for a CLI run.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        structured: Emit JSON records instead of plain text
        log_file: Also append records to this file
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    if structured:
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT)

    logging.basicConfig(
        level=log_level,
        handlers=_build_handlers(formatter, log_level, log_file),
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """Attaches a fixed context mapping to every record it logs."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.setdefault("extra", {})
        extra["context"] = self.extra
        return msg, kwargs


def get_contextual_logger(name: str, context: Dict[str, Any]) -> ContextLoggerAdapter:
    """Logger for ``name`` whose records carry ``context``.

    The client uses this to tag every request log with its endpoint URL.
    """
    return ContextLoggerAdapter(logging.getLogger(name), context)
