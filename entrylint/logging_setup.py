"""
JSONL logging bootstrap for the CLI.
Attaches an opt-in JSONL file sink so lint traces can be inspected after a run.
"""

import json
import logging
import os
from datetime import UTC
from datetime import datetime
from pathlib import Path

PATH_ENV_VAR = "ENTRYLINT_LOG_PATH"
LEVEL_ENV_VAR = "ENTRYLINT_LOG_LEVEL"
DEFAULT_PATH = "./entrylint.log.jsonl"
DEFAULT_LEVEL = "INFO"

# LogRecord attributes that are not copied into the payload as extras
_RESERVED_ATTRS = frozenset(
    (
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "name",
    )
)


class JsonlHandler(logging.Handler):
    def __init__(self, path: str):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            base = {
                "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
                "lvl": record.levelname,
                "schema": {"name": "entrylint.log", "ver": "1.0.0"},
                "logger": record.name,
                "message": record.getMessage(),
            }
            if record.exc_info and record.exc_info[1] is not None:
                base["error"] = repr(record.exc_info[1])
            for k, v in record.__dict__.items():
                if k in _RESERVED_ATTRS:
                    continue
                base.setdefault(k, v)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(base, ensure_ascii=False, default=str) + "\n")
        except Exception:
            # Logging must never break a lint run
            self.handleError(record)


def is_logging_requested() -> bool:
    """Whether JSONL logging was requested through the environment."""
    return bool(os.environ.get(PATH_ENV_VAR))


def init_json_logging(path: str | None = None, level: str | None = None) -> None:
    path = path or os.environ.get(PATH_ENV_VAR) or DEFAULT_PATH
    level = (level or os.environ.get(LEVEL_ENV_VAR) or DEFAULT_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    # Remove existing handlers of the same kind to avoid duplicates
    for h in list(root.handlers):
        if isinstance(h, JsonlHandler):
            root.removeHandler(h)
    root.addHandler(JsonlHandler(path))
