"""
Конфигурация pytest для тестов money_tracker.
"""
import uuid
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from money_tracker.models import Base, AccountCreate, AccountType
from money_tracker.services.account_service import create_account
from money_tracker.utils.cache import cache
from money_tracker.utils.error_handler import set_notifier


@pytest.fixture
def db_session():
    """
    Централизованная фикстура для создания временной БД и сессии.
    Автоматически закрывает соединение после теста.
    """
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()

    yield session

    # Закрываем сессию и соединение
    session.close()
    engine.dispose()


@pytest.fixture(autouse=True)
def clear_cache():
    """Сбрасывает кэш категорий между тестами."""
    cache.clear_all()
    yield
    cache.clear_all()


@pytest.fixture
def notifications():
    """
    Перехватывает сообщения, которые ErrorHandler показывает пользователю.

    Returns:
        list: Список текстов уведомлений в порядке появления
    """
    messages = []
    set_notifier(messages.append)
    yield messages
    set_notifier(None)


@pytest.fixture
def owner_id():
    return str(uuid.uuid4())


@pytest.fixture
def other_owner_id():
    return str(uuid.uuid4())


@pytest.fixture
def checking_account(db_session, owner_id):
    """Расчётный счёт владельца с начальным балансом 1000.00."""
    return create_account(
        db_session,
        owner_id,
        AccountCreate(name="Основная карта", type=AccountType.CHECKING, balance=Decimal("1000.00"))
    )


@pytest.fixture
def savings_account(db_session, owner_id):
    """Накопительный счёт владельца с начальным балансом 500.00."""
    return create_account(
        db_session,
        owner_id,
        AccountCreate(name="Накопления", type=AccountType.SAVINGS, balance=Decimal("500.00"))
    )
