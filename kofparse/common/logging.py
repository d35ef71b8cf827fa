"""JSON logging with stable schema."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from kofparse.common.constants import JSON_LOG_FIELDS, LOGGER_NAME
from kofparse.common.fs import ensure_dir
from kofparse.common.time_utils import utc_timestamp_iso


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": utc_timestamp_iso(),
            "level": record.levelname,
            "run_id": getattr(record, "run_id", None),
            "stage": getattr(record, "stage", None),
            "file": getattr(record, "file", None),
            "line": getattr(record, "line", None),
            "event": getattr(record, "event", None),
            "status": getattr(record, "status", None),
            "strategy": getattr(record, "strategy", None),
            "error_code": getattr(record, "error_code", None),
            "geometries": getattr(record, "geometries", None),
            "warnings": getattr(record, "warnings", None),
            "message": record.getMessage(),
        }
        for field in JSON_LOG_FIELDS:
            payload.setdefault(field, None)
        return json.dumps(payload, ensure_ascii=False)


def get_logger(name: str | None = None) -> logging.Logger:
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def build_logger(run_id: str, log_dir: Path | None = None, level: str = "INFO") -> logging.Logger:
    logger = get_logger(run_id)
    logger.setLevel(level.upper())
    logger.handlers.clear()

    stream = logging.StreamHandler()
    stream.setFormatter(JsonLineFormatter())
    logger.addHandler(stream)

    if log_dir is not None:
        log_path = log_dir / f"{run_id}.log.jsonl"
        ensure_dir(log_path.parent)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

    return logger


def log_event(logger: logging.Logger, message: str, **event_fields: Any) -> None:
    logger.info(message, extra=event_fields)


def log_debug(logger: logging.Logger, message: str, **event_fields: Any) -> None:
    logger.debug(message, extra=event_fields)
