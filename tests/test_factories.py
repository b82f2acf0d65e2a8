"""
Фабрики для создания тестовых данных.

Фабрики create_test_* возвращают объекты SQLAlchemy (не сохраняют в БД
автоматически), make_* возвращают Pydantic модели для сервисного слоя.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from money_tracker.models import (
    AccountDB,
    AccountType,
    PaymentStatus,
    RecurringPeriod,
    TransactionCreate,
    TransactionDB,
    TransactionType,
    signed_amount,
)


def create_test_account(
    user_id: str,
    name: str = "Тестовый счёт",
    balance: Decimal = Decimal("0.00"),
    type: AccountType = AccountType.CHECKING,
    id: Optional[str] = None,
) -> AccountDB:
    """
    Создаёт тестовый счёт.

    Example:
        >>> account = create_test_account(owner_id, balance=Decimal("1000.00"))
        >>> session.add(account)
        >>> session.commit()
    """
    return AccountDB(
        id=id or str(uuid.uuid4()),
        user_id=user_id,
        name=name,
        type=type,
        balance=balance,
    )


def create_test_transaction(
    user_id: str,
    amount: Decimal = Decimal("100.00"),
    type: TransactionType = TransactionType.EXPENSE,
    transaction_date: Optional[date] = None,
    description: str = "Тестовая транзакция",
    category: Optional[str] = None,
    account_id: Optional[str] = None,
    is_recurring: bool = False,
    recurring_period: Optional[RecurringPeriod] = None,
    installment_current: Optional[int] = None,
    installment_total: Optional[int] = None,
    due_date: Optional[date] = None,
    payment_status: PaymentStatus = PaymentStatus.PENDING,
) -> TransactionDB:
    """
    Создаёт тестовую транзакцию напрямую, минуя согласование балансов.

    Знак суммы выставляется по типу.
    """
    return TransactionDB(
        id=str(uuid.uuid4()),
        user_id=user_id,
        description=description,
        amount=signed_amount(type, amount),
        date=transaction_date or date.today(),
        type=type,
        category=category,
        account_id=account_id,
        is_recurring=is_recurring,
        recurring_period=recurring_period,
        installment_current=installment_current,
        installment_total=installment_total,
        due_date=due_date,
        payment_status=payment_status,
    )


def make_transaction_create(
    amount="100.00",
    type: TransactionType = TransactionType.EXPENSE,
    account_id: Optional[str] = None,
    transaction_date: Optional[date] = None,
    description: str = "Покупка",
    category: Optional[str] = None,
    **kwargs,
) -> TransactionCreate:
    """Создаёт модель TransactionCreate со значениями по умолчанию."""
    return TransactionCreate(
        description=description,
        amount=amount,
        type=type,
        date=transaction_date or date.today(),
        category=category,
        account_id=account_id,
        **kwargs,
    )


def save_all(session: Session, *objects) -> None:
    """Сохраняет объекты в БД одним commit."""
    session.add_all(objects)
    session.commit()


def account_balance(session: Session, account_id: str) -> Decimal:
    """Читает актуальный баланс счёта из БД."""
    session.expire_all()
    return session.get(AccountDB, account_id).balance
