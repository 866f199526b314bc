# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging setup.

Human-readable lines by default, one JSON object per line when
``CREDSTORE_LOG_FORMAT=json``. ``user`` and ``operation`` passed through
``extra=`` are added to the output.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from credstore import config

ROOT_LOGGER = "credstore"
CONTEXT_FIELDS = ("operation", "user")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                data[field] = getattr(record, field)
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        message = f"[{ts}] {record.levelname:<8} {record.name}: {record.getMessage()}"

        context = [f"{f}={getattr(record, f)}" for f in CONTEXT_FIELDS if hasattr(record, f)]
        if context:
            message += f" [{', '.join(context)}]"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Logger:
    """Configure the ``credstore`` logger. Safe to call more than once."""
    level_name = (level or config.LOG_LEVEL).upper()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if (fmt or config.LOG_FORMAT) == "json" else TextFormatter())

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    logger.handlers.clear()
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``credstore`` namespace (usually for ``__name__``)."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
