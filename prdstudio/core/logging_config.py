"""
Настройка логирования.

- readable: человекочитаемый формат для разработки
- json: одна JSON-запись на строку для сборщиков логов
- Уровень задается переменной LOG_LEVEL
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from prdstudio.core.config import settings


class JSONFormatter(logging.Formatter):
    """JSON-формат логов"""

    EXTRA_FIELDS = ("method", "path", "status", "document_id", "project_id", "field")

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        for key in self.EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value
        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ReadableFormatter(logging.Formatter):
    """Цветной формат для разработки"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        ts = datetime.now().strftime("%H:%M:%S")
        base = f"{color}{ts} {record.levelname:<8}{self.RESET} {record.name}: {record.getMessage()}"
        if record.exc_info and record.exc_info[0] is not None:
            base += "\n" + self.formatException(record.exc_info)
        return base


def configure_logging(level_name: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Единая настройка корневого логгера"""
    level_name = (level_name or settings.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    log_format = log_format or settings.log_format

    formatter = JSONFormatter() if log_format == "json" else ReadableFormatter()

    root = logging.getLogger()
    # Повторный вызов не должен дублировать обработчики
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    handler.setLevel(level)
    root.addHandler(handler)
    root.setLevel(level)

    for noisy in ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging configured: level=%s format=%s", level_name, log_format)
