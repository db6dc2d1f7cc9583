# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Structured Logging Configuration
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Union


class NodebookJSONFormatter(logging.Formatter):
    """
    JSON Formatter for Nodebook Core.
    Encodes log records as structured machine-readable JSON.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.module,
            "filename": record.filename,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        # Include extra attributes if provided via 'extra' kwarg
        if hasattr(record, "graph_context"):
            log_data["graph_context"] = record.graph_context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_nodebook_logging(
    level: Union[int, str] = logging.INFO,
    json_output: bool = True,
    log_file: str | None = None
) -> logging.Logger:
    """
    Initializes structured logging for the ``nodebook`` logger tree.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger("nodebook")
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    # Console Handler
    console_handler = logging.StreamHandler(sys.stderr)
    if json_output:
        console_handler.setFormatter(NodebookJSONFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(
            '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
        ))
    root_logger.addHandler(console_handler)

    # Optional File Handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(NodebookJSONFormatter() if json_output else logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        root_logger.addHandler(file_handler)

    root_logger.info("Structured logging initialized", extra={"json_enabled": json_output})
    return root_logger
