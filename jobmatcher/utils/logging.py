# SPDX-License-Identifier: Apache-2.0
"""
Logging setup for the job matcher MCP server.

- Optional JSON or compact formats.
- Secret masking ('Bearer ...', API_AUTH_TOKEN=...) and e-mail masking for ALL logs.
- Always logs to stderr; stdout belongs to the stdio MCP transport.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import Any, Dict

BEARER_RE = re.compile(r"(Bearer\s+)([^\s'\",;]+)", re.IGNORECASE)
TOKEN_RE = re.compile(r"(API_AUTH_TOKEN\s*[=:]\s*)([^\s'\",;]+)", re.IGNORECASE)
EMAIL_RE = re.compile(r"([A-Za-z0-9._%+-]+)@([A-Za-z0-9.-]+\.[A-Za-z]{2,})")


def mask(text: str) -> str:
    text = BEARER_RE.sub(r"\1***", text)
    text = TOKEN_RE.sub(r"\1***", text)
    return EMAIL_RE.sub(r"\1@***", text)


class PIIMask(logging.Filter):
    """Mask bearer tokens and e-mail addresses in log messages & args."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = mask(record.msg)
        if record.args:
            items = record.args if isinstance(record.args, tuple) else (record.args,)
            if isinstance(record.args, dict):
                record.args = {k: mask(v) if isinstance(v, str) else v for k, v in record.args.items()}
            else:
                record.args = tuple(mask(a) if isinstance(a, str) else a for a in items)
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": mask(record.getMessage()),
        }
        if hasattr(record, "error_type"):
            log_data["error_type"] = getattr(record, "error_type")
        if hasattr(record, "status"):
            log_data["status"] = getattr(record, "status")
        if record.exc_info:
            log_data["exception"] = mask(self.formatException(record.exc_info))
        return json.dumps(log_data)


class CompactFormatter(logging.Formatter):
    """HH:MM:SS, shortened logger names."""

    def format(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith("jobmatcher."):
            name = name[len("jobmatcher.") :]
        ts = self.formatTime(record, datefmt="%H:%M:%S")
        line = f"{ts} - {name} - {record.levelname} - {mask(record.getMessage())}"
        if record.exc_info:
            line += "\n" + mask(self.formatException(record.exc_info))
        return line


def configure_logging(log_level: str = "INFO", json_format: bool = False) -> logging.Logger:
    """
    Configure root logging with masking and the selected formatter.

    Args:
        log_level: "DEBUG", "INFO", "WARNING", or "ERROR"
        json_format: True -> JSON logs; False -> compact human-readable
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, (log_level or "INFO").upper(), logging.INFO))

    # clear handlers
    for h in list(root.handlers):
        root.removeHandler(h)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(JSONFormatter() if json_format else CompactFormatter())
    console.addFilter(PIIMask())
    root.addHandler(console)

    # Quiet noisy libs
    logging.getLogger("urllib3").setLevel(logging.ERROR)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    return root
