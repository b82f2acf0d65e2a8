"""
Модуль конфигурации Money Tracker.

Содержит настройки:
- Основные параметры приложения (название, версия)
- Настройки базы данных (URL подключения)
- Настройки логирования
- Форматы отображения (дата, валюта)
- Персистентность настроек (загрузка/сохранение)
- Управление пользовательской директорией данных
"""

import os
import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Переменная окружения для переопределения директории данных (тесты, CI)
HOME_ENV_VAR = "MONEY_TRACKER_HOME"

# Ключ в config.json -> атрибут Config
PERSISTED_SETTINGS = {
    "database_url": "database_url_override",
    "log_level": "log_level",
    "date_format": "date_format",
    "currency_symbol": "currency_symbol",
    "upcoming_payments_days": "upcoming_payments_days",
}


class Config:
    """
    Класс конфигурации приложения.
    Реализует паттерн Singleton для доступа к настройкам из любой части приложения.

    Все пользовательские данные (БД, логи, настройки) хранятся в
    директории ~/.money_tracker_data/, если не задана переменная MONEY_TRACKER_HOME.
    """

    _instance = None

    # Константы приложения
    APP_NAME = "Money Tracker"
    VERSION = "2.0.0"

    @staticmethod
    def get_user_data_dir() -> Path:
        """
        Возвращает путь к директории пользовательских данных.

        Создаёт директорию и поддиректорию logs/ при необходимости.

        Returns:
            Path: Путь к директории данных
        """
        override = os.environ.get(HOME_ENV_VAR)
        data_dir = Path(override) if override else Path.home() / ".money_tracker_data"

        data_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Директория пользовательских данных: {data_dir}")

        logs_dir = data_dir / "logs"
        logs_dir.mkdir(exist_ok=True)

        return data_dir

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True

        self.user_data_dir = self.get_user_data_dir()

        # Пути к файлам
        self.db_path: str = str(self.user_data_dir / "money.db")
        self.config_file: str = str(self.user_data_dir / "config.json")
        self.log_file: str = str(self.user_data_dir / "logs" / "money_tracker.log")

        # Явный URL БД (например, PostgreSQL); None = SQLite файл db_path
        self.database_url_override: Optional[str] = None

        # Настройки логирования
        self.log_level: str = "INFO"

        # Настройки форматов
        self.date_format: str = "%d.%m.%Y"
        self.currency_symbol: str = "₽"

        # Горизонт напоминаний о платежах (дней)
        self.upcoming_payments_days: int = 7

        self.load()

    @property
    def database_url(self) -> str:
        """URL подключения к БД для SQLAlchemy."""
        if self.database_url_override:
            return self.database_url_override
        return f"sqlite:///{self.db_path}"

    def load(self) -> None:
        """
        Читает config.json поверх значений по умолчанию.

        Отсутствующий или повреждённый файл не мешает запуску.
        """
        config_path = Path(self.config_file)
        if not config_path.exists():
            logger.info(f"Нет файла настроек {config_path}, остаются значения по умолчанию")
            return

        try:
            data = json.loads(config_path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.error(f"Не удалось прочитать настройки {config_path}: {e}")
            return

        for key, attribute in PERSISTED_SETTINGS.items():
            if key in data:
                setattr(self, attribute, data[key])

        logger.info(f"Настройки прочитаны из {config_path}")

    def save(self) -> None:
        """Записывает изменяемые настройки в config.json."""
        data = {key: getattr(self, attribute) for key, attribute in PERSISTED_SETTINGS.items()}
        config_path = Path(self.config_file)

        try:
            config_path.write_text(json.dumps(data, indent=4, ensure_ascii=False), encoding='utf-8')
            logger.info(f"Настройки записаны в {config_path}")
        except OSError as e:
            logger.error(f"Не удалось записать настройки {config_path}: {e}")

    def format_money(self, amount) -> str:
        """Форматирует сумму для вывода: '1 234.50 ₽'."""
        return f"{amount:,.2f}".replace(",", " ") + f" {self.currency_symbol}"


# Глобальный экземпляр конфигурации
settings = Config()
