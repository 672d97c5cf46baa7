"""
backend/fixturesync/logging_config.py

Purpose:
    Process-wide logging bootstrap and the structured one-line run summary
    emitted at the end of every sync.

Dependencies:
    - logging
    - json
"""

import json
import logging
from datetime import datetime
from typing import Any


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def _json_default(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def log_structured(logger: logging.Logger, level: int, data: dict[str, Any]) -> None:
    """Emit one JSON object per line so log pipelines can index run summaries."""
    logger.log(level, json.dumps(data, default=_json_default, sort_keys=True))
