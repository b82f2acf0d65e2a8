"""
Сервис статусов оплаты.

Классифицирует транзакции как ожидающие, просроченные или оплаченные
относительно текущей даты и предоставляет функции напоминаний:
- classify_payment_status: чистая классификация одной транзакции
- get_overdue_transactions: просроченные неоплаченные транзакции
- get_upcoming_payments: платежи со сроком в ближайшие N дней
- mark_as_paid: отметка об оплате (баланс счёта не меняется)
- refresh_overdue_statuses: сохранение статуса overdue для просроченных транзакций
"""

import logging
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from money_tracker.config import settings
from money_tracker.models import PaymentStatus, TransactionDB, TransactionUpdate
from money_tracker.services.transaction_service import update_transaction
from money_tracker.utils.error_handler import error_handler
from money_tracker.utils.exceptions import DatabaseError

# Настройка логирования
logger = logging.getLogger(__name__)


def classify_payment_status(transaction, today: date) -> PaymentStatus:
    """
    Определяет статус оплаты транзакции на дату today.

    Правила:
    - оплаченная транзакция всегда PAID;
    - срок оплаты раньше today - OVERDUE;
    - срок оплаты сегодня, в будущем или не задан - PENDING.

    Сохранённый OVERDUE не учитывается: статус неоплаченной транзакции
    зависит только от due_date.

    Args:
        transaction: Транзакция (ORM или Pydantic объект)
        today: Текущая дата

    Returns:
        Статус оплаты

    Example:
        >>> classify_payment_status(tx_due_yesterday, date.today())
        <PaymentStatus.OVERDUE: 'overdue'>
    """
    if transaction.payment_status == PaymentStatus.PAID:
        return PaymentStatus.PAID

    if transaction.due_date is not None and transaction.due_date < today:
        return PaymentStatus.OVERDUE

    return PaymentStatus.PENDING


def get_overdue_transactions(session: Session, owner_id: str, today: Optional[date] = None) -> List[TransactionDB]:
    """
    Получает неоплаченные транзакции владельца со сроком оплаты раньше today.

    Returns:
        Список транзакций, отсортированный по сроку оплаты
    """
    if not owner_id:
        return []

    today = today or date.today()

    try:
        transactions = session.query(TransactionDB).filter(
            TransactionDB.user_id == owner_id,
            TransactionDB.payment_status != PaymentStatus.PAID,
            TransactionDB.due_date.isnot(None),
            TransactionDB.due_date < today
        ).order_by(TransactionDB.due_date).all()

        logger.info(f"Найдено {len(transactions)} просроченных платежей на {today}")
        return transactions

    except SQLAlchemyError as e:
        error_handler.handle(DatabaseError(str(e)), "Не удалось загрузить просроченные платежи")
        return []


def get_upcoming_payments(
    session: Session,
    owner_id: str,
    today: Optional[date] = None,
    days: Optional[int] = None
) -> List[TransactionDB]:
    """
    Получает неоплаченные транзакции со сроком оплаты в интервале [today, today + days].

    Args:
        session: Активная сессия БД
        owner_id: Владелец
        today: Текущая дата (по умолчанию сегодня)
        days: Горизонт в днях (по умолчанию settings.upcoming_payments_days)

    Returns:
        Список транзакций, отсортированный по сроку оплаты
    """
    if not owner_id:
        return []

    today = today or date.today()
    horizon = today + timedelta(days=settings.upcoming_payments_days if days is None else days)

    try:
        transactions = session.query(TransactionDB).filter(
            TransactionDB.user_id == owner_id,
            TransactionDB.payment_status != PaymentStatus.PAID,
            TransactionDB.due_date.isnot(None),
            TransactionDB.due_date >= today,
            TransactionDB.due_date <= horizon
        ).order_by(TransactionDB.due_date).all()

        logger.info(f"Найдено {len(transactions)} платежей со сроком до {horizon}")
        return transactions

    except SQLAlchemyError as e:
        error_handler.handle(DatabaseError(str(e)), "Не удалось загрузить ближайшие платежи")
        return []


def mark_as_paid(session: Session, owner_id: str, transaction_id: str) -> Optional[TransactionDB]:
    """
    Отмечает транзакцию как оплаченную.

    Сумма и счёт не меняются, поэтому баланс счёта остаётся прежним.
    """
    return update_transaction(
        session, owner_id, transaction_id,
        TransactionUpdate(payment_status=PaymentStatus.PAID)
    )


def refresh_overdue_statuses(session: Session, owner_id: str, today: Optional[date] = None) -> int:
    """
    Сохраняет статус OVERDUE для ожидающих транзакций с истёкшим сроком оплаты.

    Returns:
        Количество обновлённых транзакций
    """
    if not owner_id:
        return 0

    today = today or date.today()

    try:
        pending = session.query(TransactionDB).filter(
            TransactionDB.user_id == owner_id,
            TransactionDB.payment_status == PaymentStatus.PENDING,
            TransactionDB.due_date.isnot(None),
            TransactionDB.due_date < today
        ).all()

        for transaction in pending:
            transaction.payment_status = PaymentStatus.OVERDUE

        session.commit()

        if pending:
            logger.info(f"Статус OVERDUE установлен для {len(pending)} транзакций")
        return len(pending)

    except SQLAlchemyError as e:
        session.rollback()
        error_handler.handle(DatabaseError(str(e)), "Не удалось обновить статусы платежей")
        return 0
