"""Logging setup for the agent.

``configure_logging`` installs handlers on the root logger once per process,
for cron runs on a host as well as containerized runs. ``log_event`` emits one
structured line per pipeline event and ``StepTimer`` logs stage durations.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from logging.handlers import RotatingFileHandler
from typing import Any, List, Literal, Optional

DEFAULT_LEVEL = "INFO"
DEFAULT_OUTPUT = "both"
DEFAULT_FILE_PATH = "logs/seo-agent.log"
DEFAULT_FORMAT = "text"

LogOutput = Literal["stdout", "file", "both"]
LogFormat = Literal["text", "json"]

_TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
_ROTATE_BYTES = 10 * 1024 * 1024
_ROTATE_BACKUPS = 5


class JsonLineFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "file": f"{record.filename}:{record.lineno}",
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def is_kubernetes_env() -> bool:
    return bool(
        os.environ.get("K8S_CLUSTER")
        or os.environ.get("KUBERNETES_SERVICE_HOST")
        or os.path.exists("/var/run/secrets/kubernetes.io/serviceaccount")
    )


def _default_output() -> str:
    # containers ship stdout to the cluster log pipeline
    if "LOG_OUTPUT" in os.environ:
        return os.environ["LOG_OUTPUT"].lower()
    return "stdout" if is_kubernetes_env() else DEFAULT_OUTPUT


def _handlers(output: str, file_path: str) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if output in ("stdout", "both"):
        handlers.append(logging.StreamHandler(sys.stdout))
    if output in ("file", "both"):
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                file_path, maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_BACKUPS, encoding="utf-8"
            )
        )
    return handlers


def configure_logging(
    level: str | int | None = None,
    output: LogOutput | None = None,
    file_path: str | None = None,
    log_format: LogFormat | None = None,
    module: Optional[str] = None,
) -> None:
    """Install stdout and/or rotating-file handlers on the root logger.

    Every argument left as None falls back to its environment variable
    (``LOG_LEVEL``, ``LOG_OUTPUT``, ``LOG_FILE_PATH``, ``LOG_FORMAT``) and then
    to the module default. ``module`` names one extra logger that gets
    ``level`` too, for turning up a single area while debugging.
    """
    level = level or os.environ.get("LOG_LEVEL", DEFAULT_LEVEL).upper()
    fmt = (log_format or os.environ.get("LOG_FORMAT") or DEFAULT_FORMAT).lower()
    target = (output or _default_output()).lower()
    path = file_path or os.environ.get("LOG_FILE_PATH") or DEFAULT_FILE_PATH

    formatter = JsonLineFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT)
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in _handlers(target, path):
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)

    if module:
        logging.getLogger(module).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit one structured log line as compact JSON."""
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str, sort_keys=True))


class StepTimer:
    """Context manager logging how long a pipeline stage took."""

    def __init__(self, name: str, logger: logging.Logger) -> None:
        self.name = name
        self.logger = logger
        self.start = 0.0
        self.elapsed = 0.0

    def __enter__(self) -> "StepTimer":
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.elapsed = time.perf_counter() - self.start
        self.logger.info("Stage '%s' finished in %.2fs", self.name, self.elapsed)
