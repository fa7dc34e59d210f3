"""Structured event logging for interview turns."""
from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import time
import uuid
from dataclasses import dataclass
from typing import Any, Optional

_HUMAN_FORMAT = "[%(asctime)s] %(levelname)s %(name)s :: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_HUMAN_KEYS = ("question_id", "action", "trigger", "intensity", "mood", "frustration", "evasions")

_logger = logging.getLogger("interview")
_logger.propagate = False


@dataclass
class LogConfig:
    level: str = "INFO"
    file_logs: bool = True
    log_file: str = "logs/interview.log"
    max_bytes: int = 5242880
    backup_count: int = 5

    @classmethod
    def from_env(cls) -> "LogConfig":
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            file_logs=os.getenv("ENABLE_FILE_LOGS", "1") in ("1", "true", "True"),
            log_file=os.getenv("LOG_FILE", "logs/interview.log"),
            max_bytes=int(os.getenv("LOG_MAX_BYTES", "5242880")),
            backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
        )


_config = LogConfig.from_env()


def _is_json(record: logging.LogRecord) -> bool:
    return getattr(record, "is_json", False) is True


def _human_handler(handler: logging.Handler, level: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_HUMAN_FORMAT, datefmt=_DATE_FORMAT))
    handler.addFilter(lambda record: not _is_json(record))
    return handler


def _human_file_name(log_file: str) -> str:
    name = log_file if log_file.endswith(".log") else f"{log_file}.log"
    return name[: -len(".log")] + "-human.log"


def configure_logging(config: Optional[LogConfig] = None) -> LogConfig:
    """(Re)install handlers; console always, rotating files when enabled."""

    global _config
    _config = config or LogConfig.from_env()
    for handler in list(_logger.handlers):
        _logger.removeHandler(handler)
        handler.close()
    _logger.setLevel(_config.level)

    _logger.addHandler(_human_handler(logging.StreamHandler(stream=sys.stdout), _config.level))
    if not _config.file_logs:
        return _config

    log_dir = os.path.dirname(_config.log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    json_file = logging.handlers.RotatingFileHandler(
        _config.log_file,
        maxBytes=_config.max_bytes,
        backupCount=_config.backup_count,
    )
    json_file.setLevel(_config.level)
    json_file.setFormatter(logging.Formatter("%(message)s"))
    json_file.addFilter(_is_json)
    _logger.addHandler(json_file)

    human_file = logging.handlers.RotatingFileHandler(
        _human_file_name(_config.log_file),
        maxBytes=_config.max_bytes,
        backupCount=_config.backup_count,
    )
    _logger.addHandler(_human_handler(human_file, _config.level))
    return _config


def _format_human(evt: dict[str, Any]) -> str:
    base = f"interview={evt.get('interview_id')} kind={evt.get('kind')}"
    extras = [f"{key}={evt[key]}" for key in _HUMAN_KEYS if evt.get(key) is not None]
    return base + (" " + " ".join(extras) if extras else "")


def _emit(message: str, *, is_json: bool) -> None:
    record = _logger.makeRecord(
        name=_logger.name,
        level=logging.INFO,
        fn="",
        lno=0,
        msg=message,
        args=(),
        exc_info=None,
    )
    record.is_json = is_json  # type: ignore[attr-defined]
    _logger.handle(record)


def log_event(kind: str, interview_id: str, **fields: Any) -> None:
    """Emit a human line to the console and a JSON line to the log file."""

    if not _logger.handlers:
        configure_logging(_config)

    payload: dict[str, Any] = {
        "ts": time.time(),
        "trace": str(uuid.uuid4()),
        "kind": kind,
        "interview_id": interview_id,
    }
    payload.update(fields)

    _emit(_format_human(payload), is_json=False)
    if _config.file_logs:
        _emit(json.dumps(payload, ensure_ascii=False, default=str), is_json=True)


__all__ = ["LogConfig", "configure_logging", "log_event"]
