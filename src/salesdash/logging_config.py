from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

CHANNEL_FILES = {
    "salesdash.api": "api.log",
    "salesdash.sales": "sales.log",
}


class JsonFormatter(logging.Formatter):
    """One JSON object per line; the worker thread is kept since fetches run off the Tk thread."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _file_handler(path: Path, level: int) -> RotatingFileHandler:
    fh = RotatingFileHandler(path, maxBytes=2_000_000, backupCount=5, encoding="utf-8")
    fh.setFormatter(JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    fh.setLevel(level)
    return fh


def setup_logging(logs_dir: Path, level: int = logging.INFO, console: bool = False) -> None:
    logs_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        return

    root.addHandler(_file_handler(logs_dir / "app.log", logging.INFO))
    root.addHandler(_file_handler(logs_dir / "errors.log", logging.ERROR))
    if console:
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        sh.setLevel(level)
        root.addHandler(sh)

    for channel, filename in CHANNEL_FILES.items():
        logger = logging.getLogger(channel)
        logger.addHandler(_file_handler(logs_dir / filename, logging.INFO))
        logger.setLevel(logging.INFO)
