"""
Модуль настройки логирования для Money Tracker.

Обеспечивает:
- Структурированное логирование (JSON формат) в файл сеанса
- Вывод в консоль в читаемом формате
- Сериализацию Decimal и дат в дополнительных полях (extra)
"""

import json
import logging
import sys
from pathlib import Path
from datetime import datetime, date
from typing import Any, Dict, Optional
from decimal import Decimal

from money_tracker.config import settings

# Стандартные атрибуты LogRecord, которые не считаются полями extra
_RESERVED_ATTRS = frozenset([
    "args", "asctime", "created", "exc_info", "exc_text", "filename",
    "funcName", "levelname", "levelno", "lineno", "module",
    "msecs", "message", "msg", "name", "pathname", "process",
    "processName", "relativeCreated", "stack_info", "thread", "threadName",
    "taskName",
])


class JsonFormatter(logging.Formatter):
    """
    Форматтер для вывода логов в формате JSON.

    Дополнительные поля, переданные через extra, попадают в запись:
        logger.info("Баланс изменён", extra={"account_id": acc_id, "delta": delta})
    """
    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S'),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_record[key] = self._serialize_value(value)

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False)

    def _serialize_value(self, value: Any) -> Any:
        """
        Преобразует значение в JSON-сериализуемый формат.

        Decimal сериализуется строкой, чтобы не терять копейки.
        """
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        elif isinstance(value, Decimal):
            return str(value)
        elif isinstance(value, (str, int, float, bool)) or value is None:
            return value
        return str(value)


def setup_logging(log_file: Optional[str] = None, level: Optional[str] = None) -> Path:
    """
    Настраивает систему логирования приложения.

    - Создаёт новый файл лога для каждого сеанса (money_tracker_YYYYMMDD_HHMMSS.log)
    - JSON форматирование для файла
    - Текстовый формат для консоли (stderr)

    Args:
        log_file: Базовый путь файла лога (по умолчанию settings.log_file)
        level: Уровень логирования (по умолчанию settings.log_level)

    Returns:
        Path: Путь к файлу лога текущего сеанса
    """
    log_path = Path(log_file or settings.log_file)
    log_dir = log_path.parent
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    session_log_file = log_dir / f"{log_path.stem}_{timestamp}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(level or settings.log_level)

    # Удаляем существующие хендлеры
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(session_log_file, encoding='utf-8')
    file_handler.setFormatter(JsonFormatter())
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(
        fmt='%(asctime)s | %(levelname)-8s | %(module)s:%(funcName)s | %(message)s',
        datefmt='%H:%M:%S'
    ))
    root_logger.addHandler(console_handler)

    logging.info("Система логирования инициализирована")
    logging.info(f"Логи записываются в: {session_log_file}")
    return session_log_file


def get_logger(name: str) -> logging.Logger:
    """
    Возвращает логгер с указанным именем.

    Args:
        name: Имя логгера (обычно __name__)
    """
    return logging.getLogger(name)
