"""
Сервис управления счетами.

Предоставляет функции для работы со счетами владельца:
- create_account / get_account / get_accounts: создание и чтение
- update_account: изменение метаданных (название, тип, цвет)
- delete_account: удаление без каскада на транзакции
- adjust_balance: атомарное изменение кэшированного баланса
- get_total_accounts_balance: сумма балансов всех счетов

Все функции принимают сессию БД как параметр и ограничивают запросы
владельцем (owner_id), как это делает row-level security хранилища.
Ошибки хранилища не пробрасываются: они передаются в ErrorHandler,
а функция возвращает None/False.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
import logging

from sqlalchemy import update, func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from money_tracker.models import AccountDB, AccountCreate, AccountUpdate
from money_tracker.utils.error_handler import error_handler
from money_tracker.utils.exceptions import DatabaseError
from money_tracker.utils.validation import validate_uuid_format

# Настройка логирования
logger = logging.getLogger(__name__)


def create_account(session: Session, owner_id: str, account: AccountCreate) -> Optional[AccountDB]:
    """
    Создаёт новый счёт владельца.

    Начальный баланс берётся из account.balance; это единственный случай,
    когда баланс задаётся напрямую.

    Args:
        session: Активная сессия БД
        owner_id: Владелец счёта
        account: Данные счёта (Pydantic модель)

    Returns:
        Созданный счёт или None при ошибке сохранения / отсутствии владельца
    """
    if not owner_id:
        logger.warning("Пользователь не определён, счёт не создан")
        return None

    try:
        logger.debug(f"Создание счёта '{account.name}' для владельца {owner_id}")

        db_account = AccountDB(user_id=owner_id, **account.model_dump())
        session.add(db_account)
        session.commit()
        session.refresh(db_account)

        logger.info(f"Счёт '{db_account.name}' создан с ID: {db_account.id}, баланс {db_account.balance}")
        return db_account

    except SQLAlchemyError as e:
        session.rollback()
        error_handler.handle(DatabaseError(str(e)), "Не удалось добавить счёт")
        return None


def get_account(session: Session, owner_id: str, account_id: str) -> Optional[AccountDB]:
    """
    Получает счёт владельца по ID.

    Returns:
        Счёт или None, если он не найден (или принадлежит другому владельцу)

    Raises:
        ValidationError: Если account_id не является UUID
    """
    if not owner_id:
        return None

    validate_uuid_format(account_id, "account_id")

    try:
        return session.query(AccountDB).filter(
            AccountDB.id == account_id,
            AccountDB.user_id == owner_id
        ).first()
    except SQLAlchemyError as e:
        error_handler.handle(DatabaseError(str(e)), "Не удалось загрузить счёт")
        return None


def get_accounts(session: Session, owner_id: str) -> List[AccountDB]:
    """
    Получает все счета владельца, отсортированные по названию.

    Returns:
        Список счетов (пустой, если владелец не определён или произошла ошибка)
    """
    if not owner_id:
        logger.warning("Пользователь не определён, невозможно загрузить счета")
        return []

    try:
        accounts = session.query(AccountDB).filter(
            AccountDB.user_id == owner_id
        ).order_by(AccountDB.name).all()

        logger.info(f"Загружено {len(accounts)} счетов владельца {owner_id}")
        return accounts

    except SQLAlchemyError as e:
        error_handler.handle(DatabaseError(str(e)), "Не удалось загрузить счета")
        return []


def update_account(
    session: Session,
    owner_id: str,
    account_id: str,
    account: AccountUpdate
) -> Optional[AccountDB]:
    """
    Обновляет метаданные счёта (название, тип, цвет).

    Баланс через эту функцию не меняется: AccountUpdate не содержит поля balance.

    Returns:
        Обновлённый счёт или None, если счёт не найден или произошла ошибка
    """
    db_account = get_account(session, owner_id, account_id)
    if db_account is None:
        logger.warning(f"Счёт с ID {account_id} не найден")
        return None

    try:
        for field, value in account.model_dump(exclude_unset=True).items():
            if field in ("name", "type") and value is None:
                continue
            setattr(db_account, field, value)

        session.commit()
        session.refresh(db_account)

        logger.info(f"Счёт ID {account_id} успешно обновлён")
        return db_account

    except SQLAlchemyError as e:
        session.rollback()
        error_handler.handle(DatabaseError(str(e)), "Не удалось обновить счёт")
        return None


def delete_account(session: Session, owner_id: str, account_id: str) -> bool:
    """
    Удаляет счёт владельца.

    Транзакции, ссылающиеся на счёт, не удаляются и не изменяются.

    Returns:
        True если счёт удалён, False если не найден или произошла ошибка
    """
    db_account = get_account(session, owner_id, account_id)
    if db_account is None:
        logger.warning(f"Счёт с ID {account_id} не найден для удаления")
        return False

    try:
        session.delete(db_account)
        session.commit()

        logger.info(f"Счёт ID {account_id} успешно удалён")
        return True

    except SQLAlchemyError as e:
        session.rollback()
        error_handler.handle(DatabaseError(str(e)), "Не удалось удалить счёт")
        return False


def adjust_balance(
    session: Session,
    owner_id: str,
    account_id: str,
    delta: Decimal,
    commit: bool = True
) -> bool:
    """
    Изменяет баланс счёта на delta одним атомарным UPDATE.

    Выполняет `UPDATE accounts SET balance = balance + :delta` на стороне БД,
    поэтому параллельные изменения одного счёта не теряются.

    Args:
        session: Активная сессия БД
        owner_id: Владелец счёта
        account_id: ID счёта
        delta: Изменение баланса со знаком
        commit: Фиксировать ли транзакцию. При commit=False изменение остаётся
            частью текущей транзакции вызывающего кода, а ошибки БД пробрасываются,
            чтобы вызывающий код откатил всю операцию целиком.

    Returns:
        True если баланс изменён, False если счёт не найден или запись отклонена
    """
    if not owner_id or not account_id:
        return False

    try:
        logger.debug(f"Изменение баланса счёта {account_id} на {delta}")

        result = session.execute(
            update(AccountDB)
            .where(AccountDB.id == account_id, AccountDB.user_id == owner_id)
            .values(balance=AccountDB.balance + delta, updated_at=datetime.now())
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            logger.warning(f"Счёт {account_id} не найден, баланс не изменён (delta={delta})")
            return False

        if commit:
            session.commit()

        logger.info(
            f"Баланс счёта {account_id} изменён на {delta}",
            extra={"account_id": account_id, "delta": delta}
        )
        return True

    except SQLAlchemyError as e:
        if not commit:
            raise
        session.rollback()
        logger.error(f"Ошибка при изменении баланса счёта {account_id}: {e}")
        return False


def get_total_accounts_balance(session: Session, owner_id: str) -> Decimal:
    """
    Возвращает сумму кэшированных балансов всех счетов владельца.
    """
    if not owner_id:
        return Decimal('0.00')

    try:
        total = session.query(func.sum(AccountDB.balance)).filter(
            AccountDB.user_id == owner_id
        ).scalar()
        return Decimal(str(total)).quantize(Decimal('0.01')) if total is not None else Decimal('0.00')

    except SQLAlchemyError as e:
        error_handler.handle(DatabaseError(str(e)), "Не удалось рассчитать баланс счетов")
        return Decimal('0.00')
