"""
Модуль управления базой данных для Money Tracker.

Содержит функции для:
- Инициализации базы данных и создания таблиц
- Управления сессиями БД через контекстный менеджер
- Обработки ошибок с автоматическим откатом транзакций

URL базы данных определяется в config.py через settings.database_url
"""

from contextlib import contextmanager
from typing import Generator, Optional
import logging
import atexit

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError

from money_tracker.config import settings
from money_tracker.models import Base

# Настройка логирования
logger = logging.getLogger(__name__)


# Глобальные переменные для engine и session factory
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None
_atexit_registered = False


def init_db(database_url: Optional[str] = None) -> Engine:
    """
    Инициализирует подключение к базе данных и создаёт таблицы.

    Args:
        database_url: URL подключения (по умолчанию settings.database_url)

    Returns:
        Engine: Созданный engine SQLAlchemy

    Raises:
        SQLAlchemyError: При ошибках подключения или создания таблиц
    """
    global _engine, _SessionLocal, _atexit_registered

    url = database_url or settings.database_url

    try:
        logger.info(f"Инициализация базы данных: {url}")

        if _engine is not None:
            close_db()

        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        _engine = create_engine(url, connect_args=connect_args, echo=False)

        # Таблицы accounts, categories, transactions
        Base.metadata.create_all(bind=_engine)
        logger.info("Схема хранилища проверена")

        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=_engine
        )

        if not _atexit_registered:
            atexit.register(close_db)
            _atexit_registered = True

        logger.info("Хранилище готово к работе")
        return _engine

    except SQLAlchemyError as e:
        logger.error(f"Не удалось подключить хранилище {url}: {e}")
        raise


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Контекстный менеджер для работы с сессией базы данных.

    Откатывает незафиксированные изменения при любой ошибке и всегда
    закрывает сессию.

    Raises:
        RuntimeError: Если init_db() ещё не вызывался
    """
    if _SessionLocal is None:
        message = "Хранилище не подключено: сначала вызовите init_db()"
        logger.error(message)
        raise RuntimeError(message)

    session: Session = _SessionLocal()

    try:
        logger.debug("Сессия БД открыта")
        yield session

    except Exception as e:
        kind = "ошибка хранилища" if isinstance(e, SQLAlchemyError) else "ошибка"
        logger.error(f"Сессия прервана ({kind}), незафиксированные изменения отменены: {e}")
        session.rollback()
        raise

    finally:
        session.close()
        logger.debug("Сессия БД закрыта")


def close_db() -> None:
    """Освобождает пул соединений; повторный вызов ничего не делает."""
    global _engine, _SessionLocal

    if _engine is not None:
        _engine.dispose()
        _engine = None
        _SessionLocal = None
        logger.info("Подключение к хранилищу закрыто")
