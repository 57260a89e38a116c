"""
Logging setup for the ROI optimizer.

``configure_logging(config)`` is called once by each CLI command before any
analysis runs. Library modules only ever do ``logging.getLogger(__name__)``.

Run context
-----------
Every record passing through the root handlers is stamped with a ``run_id``
(``"-"`` when the command did not supply one). ``analyze`` passes a short
id so all lines from one invocation can be grouped, including lines from
the file handler.

Engines attach ``extra={"investment_id": ...}`` to their per-investment
lines. In JSON mode (``json_format = true`` under ``[logging]``) those
extras become top-level keys::

    {"ts": "2024-06-01T12:00:00Z", "level": "INFO", "logger": "roi_optimizer.recommendations.engine",
     "run_id": "3fa85f64", "msg": "Generated 6 recommendation(s) ...", "investment_id": "inv-crm"}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional, TextIO

if TYPE_CHECKING:
    from roi_optimizer.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
RUN_LOG_FORMAT = "%(asctime)s [%(levelname)s] [run %(run_id)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

NO_RUN_ID = "-"

# Attributes every LogRecord carries, plus the ones added here.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "run_id"}


class RunContextFilter(logging.Filter):
    """Stamp ``record.run_id`` on every record handled."""

    def __init__(self, run_id: Optional[str] = None) -> None:
        super().__init__()
        self.run_id = run_id or NO_RUN_ID

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "run_id"):
            record.run_id = self.run_id
        return True


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, run_id, msg, then extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "run_id": getattr(record, "run_id", NO_RUN_ID),
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        payload.update(
            (key, val)
            for key, val in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, default=str)


def _build_formatter(config: "LoggingConfig", run_id: Optional[str]) -> logging.Formatter:
    if config.json_format:
        return JsonLineFormatter()
    return logging.Formatter(RUN_LOG_FORMAT if run_id else LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def configure_logging(
    config: "LoggingConfig",
    stream: TextIO | None = None,
    run_id: Optional[str] = None,
    debug: bool = False,
) -> None:
    """Install console (and optional file) handlers on the root logger.

    Args:
        config: ``[logging]`` section of ``AppConfig``.
        stream: Console stream; stdout by default. ``analyze --json`` passes
            stderr so stdout holds only the JSON payload.
        run_id: Identifier stamped on every record of this invocation.
        debug: Force DEBUG level regardless of ``config.level``.
    """
    level = logging.DEBUG if debug else getattr(logging, config.level, logging.INFO)
    formatter = _build_formatter(config, run_id)
    context = RunContextFilter(run_id)

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context)

    logging.basicConfig(level=level, handlers=handlers, force=True)
