"""
Модуль сервисного слоя транзакций для Money Tracker.

Содержит CRUD операции для работы с транзакциями владельца:
- get_transactions: все транзакции (новые сверху) с данными счёта
- get_transaction: одна транзакция по ID
- get_by_date_range: транзакции за период (включительно)
- add_transaction: создание транзакции с изменением баланса счёта
- update_transaction: изменение транзакции с согласованием балансов
- delete_transaction: удаление транзакции с отменой её вклада в баланс

Изменение транзакции и связанные изменения балансов фиксируются одной
транзакцией БД: ошибка хранилища на любом шаге откатывает всё. Отсутствующий
счёт (удалённый или чужой) ошибкой не считается - изменение транзакции
сохраняется, а в лог пишется предупреждение.

Все функции принимают сессию БД как параметр (Dependency Injection).
"""

from datetime import date
from typing import List, Optional
import logging

from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import SQLAlchemyError

from money_tracker.models import (
    PaymentStatus,
    TransactionDB,
    TransactionCreate,
    TransactionType,
    TransactionUpdate,
    signed_amount,
)
from money_tracker.services.account_service import adjust_balance
from money_tracker.services.balance_reconciliation import (
    BalanceAdjustment,
    LedgerEntry,
    adjustments_for_add,
    adjustments_for_delete,
    adjustments_for_update,
)
from money_tracker.utils.error_handler import error_handler
from money_tracker.utils.exceptions import DatabaseError, ValidationError
from money_tracker.utils.validation import validate_uuid_format


# Настройка логирования
logger = logging.getLogger(__name__)


def _apply_adjustments(session: Session, owner_id: str, adjustments: List[BalanceAdjustment]) -> int:
    """
    Применяет изменения балансов в текущей транзакции БД (без commit).

    Returns:
        Количество счетов, баланс которых был изменён
    """
    applied = 0
    for adjustment in adjustments:
        if adjust_balance(session, owner_id, adjustment.account_id, adjustment.delta, commit=False):
            applied += 1
        else:
            logger.warning(
                f"Баланс счёта {adjustment.account_id} не согласован: счёт не найден "
                f"(изменение {adjustment.delta} пропущено)"
            )
    return applied


def get_transactions(session: Session, owner_id: str) -> List[TransactionDB]:
    """
    Получает все транзакции владельца, новые сверху.

    Счёт каждой транзакции подгружается заранее, поэтому account_name
    и account_color доступны без дополнительных запросов.

    Returns:
        Список транзакций (пустой, если владелец не определён или произошла ошибка)
    """
    if not owner_id:
        logger.warning("Пользователь не определён, невозможно загрузить транзакции")
        return []

    try:
        transactions = session.query(TransactionDB).options(
            selectinload(TransactionDB.account)
        ).filter(
            TransactionDB.user_id == owner_id
        ).order_by(
            TransactionDB.date.desc(),
            TransactionDB.created_at.desc()
        ).all()

        logger.info(f"Загружено {len(transactions)} транзакций владельца {owner_id}")
        return transactions

    except SQLAlchemyError as e:
        error_handler.handle(DatabaseError(str(e)), "Не удалось загрузить транзакции")
        return []


def get_transaction(session: Session, owner_id: str, transaction_id: str) -> Optional[TransactionDB]:
    """
    Получает транзакцию владельца по ID.

    Raises:
        ValidationError: Если transaction_id не является UUID
    """
    if not owner_id:
        return None

    validate_uuid_format(transaction_id, "transaction_id")

    try:
        return session.query(TransactionDB).filter(
            TransactionDB.id == transaction_id,
            TransactionDB.user_id == owner_id
        ).first()
    except SQLAlchemyError as e:
        error_handler.handle(DatabaseError(str(e)), "Не удалось загрузить транзакцию")
        return None


def get_by_date_range(
    session: Session,
    owner_id: str,
    start_date: date,
    end_date: date,
    transaction_type: Optional[TransactionType] = None
) -> List[TransactionDB]:
    """
    Получает транзакции владельца за указанный период (включительно).

    Args:
        session: Активная сессия БД
        owner_id: Владелец
        start_date: Дата начала периода
        end_date: Дата окончания периода
        transaction_type: Фильтр по типу (None = все)

    Returns:
        Список транзакций за период в порядке возрастания даты

    Raises:
        ValidationError: Если начало периода позже конца
    """
    if not owner_id:
        return []

    if start_date > end_date:
        raise ValidationError(f"Начало периода {start_date} позже окончания {end_date}")

    try:
        logger.debug(f"Получение транзакций за период: {start_date} - {end_date}")

        query = session.query(TransactionDB).filter(
            TransactionDB.user_id == owner_id,
            TransactionDB.date >= start_date,
            TransactionDB.date <= end_date
        )
        if transaction_type is not None:
            query = query.filter(TransactionDB.type == transaction_type)

        transactions = query.order_by(TransactionDB.date, TransactionDB.created_at).all()

        logger.info(f"Найдено {len(transactions)} транзакций за период {start_date} - {end_date}")
        return transactions

    except SQLAlchemyError as e:
        error_handler.handle(DatabaseError(str(e)), "Не удалось загрузить транзакции за период")
        return []


def add_transaction(session: Session, owner_id: str, transaction: TransactionCreate) -> Optional[TransactionDB]:
    """
    Создаёт новую транзакцию и применяет её сумму к балансу счёта.

    Если account_id указан, баланс счёта изменяется на amount (сумма уже со
    знаком). Транзакция без счёта баланс не затрагивает.

    Args:
        session: Активная сессия БД
        owner_id: Владелец транзакции
        transaction: Данные для создания транзакции (Pydantic модель)

    Returns:
        Созданная транзакция или None при ошибке сохранения
    """
    if not owner_id:
        logger.warning("Пользователь не определён, транзакция не добавлена")
        return None

    try:
        logger.debug(f"Создание новой транзакции: {transaction.amount}, account_id={transaction.account_id}")

        db_transaction = TransactionDB(user_id=owner_id, **transaction.model_dump())
        session.add(db_transaction)
        session.flush()

        _apply_adjustments(session, owner_id, adjustments_for_add(LedgerEntry.of(db_transaction)))

        session.commit()
        session.refresh(db_transaction)

        logger.info(f"Транзакция успешно создана с ID: {db_transaction.id}")
        return db_transaction

    except SQLAlchemyError as e:
        session.rollback()
        error_handler.handle(DatabaseError(str(e)), "Не удалось добавить транзакцию")
        return None


def update_transaction(
    session: Session,
    owner_id: str,
    transaction_id: str,
    transaction: TransactionUpdate
) -> Optional[TransactionDB]:
    """
    Обновляет существующую транзакцию и согласует балансы счетов.

    Знак суммы пересчитывается по итоговому типу транзакции. Балансы
    изменяются по правилам balance_reconciliation.adjustments_for_update.

    Args:
        session: Активная сессия БД
        owner_id: Владелец транзакции
        transaction_id: ID транзакции для обновления (UUID)
        transaction: Новые данные транзакции (только переданные поля)

    Returns:
        Обновлённая транзакция или None, если транзакция не найдена или произошла ошибка

    Raises:
        ValidationError: Если transaction_id невалиден или регулярная транзакция
            остаётся без периода повторения
    """
    db_transaction = get_transaction(session, owner_id, transaction_id)
    if db_transaction is None:
        logger.warning(f"Транзакция с ID {transaction_id} не найдена")
        return None

    changes = transaction.model_dump(exclude_unset=True)

    final_type = changes.get("type", db_transaction.type)
    if "amount" in changes or "type" in changes:
        changes["amount"] = signed_amount(final_type, changes.get("amount", db_transaction.amount))

    is_recurring = changes.get("is_recurring", db_transaction.is_recurring)
    if not is_recurring:
        changes["recurring_period"] = None
    elif changes.get("recurring_period", db_transaction.recurring_period) is None:
        raise ValidationError("Для регулярной транзакции необходимо указать период повторения")

    # Новый срок оплаты: просрочка пересчитывается заново
    if (
        "due_date" in changes
        and "payment_status" not in changes
        and db_transaction.payment_status == PaymentStatus.OVERDUE
    ):
        changes["payment_status"] = PaymentStatus.PENDING

    old_entry = LedgerEntry.of(db_transaction)

    try:
        logger.debug(f"Обновление транзакции ID: {transaction_id}, поля: {sorted(changes)}")

        for field, value in changes.items():
            setattr(db_transaction, field, value)
        session.flush()

        new_entry = LedgerEntry.of(db_transaction)
        _apply_adjustments(session, owner_id, adjustments_for_update(old_entry, new_entry))

        session.commit()
        session.refresh(db_transaction)

        logger.info(f"Транзакция ID {transaction_id} успешно обновлена")
        return db_transaction

    except SQLAlchemyError as e:
        session.rollback()
        error_handler.handle(DatabaseError(str(e)), "Не удалось обновить транзакцию")
        return None


def delete_transaction(session: Session, owner_id: str, transaction_id: str) -> bool:
    """
    Удаляет транзакцию и отменяет её вклад в баланс счёта.

    Args:
        session: Активная сессия БД
        owner_id: Владелец транзакции
        transaction_id: ID транзакции для удаления (UUID)

    Returns:
        True если транзакция удалена, False если не найдена или произошла ошибка
    """
    db_transaction = get_transaction(session, owner_id, transaction_id)
    if db_transaction is None:
        logger.warning(f"Транзакция с ID {transaction_id} не найдена для удаления")
        return False

    entry = LedgerEntry.of(db_transaction)

    try:
        logger.debug(f"Удаление транзакции ID: {transaction_id}")

        session.delete(db_transaction)
        session.flush()

        _apply_adjustments(session, owner_id, adjustments_for_delete(entry))

        session.commit()

        logger.info(f"Транзакция ID {transaction_id} успешно удалена")
        return True

    except SQLAlchemyError as e:
        session.rollback()
        error_handler.handle(DatabaseError(str(e)), "Не удалось удалить транзакцию")
        return False
