from __future__ import annotations

import json
import logging
import sys
from typing import Any

from openid_rp.middleware.request_id import RequestIDFilter

EXTRA_FIELDS = ("request_id", "method", "path", "client")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, self.datefmt),
        }
        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(as_json: bool, log_level: str) -> None:
    root_logger = logging.getLogger()
    level = getattr(logging, log_level.upper(), logging.INFO)
    if root_logger.handlers:
        # Avoid duplicating handlers on reload
        root_logger.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDFilter())
    if as_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root_logger.addHandler(handler)
    root_logger.setLevel(level)
