"""
Сервис прогнозирования баланса с учётом будущих и регулярных транзакций.

Предоставляет функции для:
- Расчёта фактического баланса на основе транзакций до указанной даты
- Получения прогноза баланса по дням на период
- Определения кассовых разрывов (когда прогнозируемый баланс становится отрицательным)

Регулярные транзакции хранятся одной записью на каждое фактическое вхождение;
будущие вхождения проецируются от последней записи каждой серии
(описание, категория, счёт, период). Платежи рассрочки уже сохранены
отдельными записями и не проецируются.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from money_tracker.models import ForecastPoint, RecurringPeriod, TransactionDB
from money_tracker.services.recurrence_service import generate_occurrence_dates
from money_tracker.services.transaction_service import get_transactions
from money_tracker.utils.error_handler import error_handler
from money_tracker.utils.exceptions import DatabaseError, ValidationError
from money_tracker.utils.validation import to_money

# Настройка логирования
logger = logging.getLogger(__name__)

SeriesKey = Tuple[str, Optional[str], Optional[str], RecurringPeriod]


def calculate_actual_balance(session: Session, owner_id: str, up_to_date: date) -> Decimal:
    """
    Вычисляет фактический баланс владельца как сумму транзакций
    с датой не позже up_to_date (включительно).

    Args:
        session: Активная сессия БД
        owner_id: Владелец
        up_to_date: Дата, до которой (включительно) рассчитывается баланс

    Returns:
        Баланс (может быть отрицательным); 0 при ошибке или отсутствии владельца

    Example:
        >>> calculate_actual_balance(session, owner_id, date.today())
        Decimal('850.00')
    """
    if not owner_id:
        return Decimal('0.00')

    try:
        total = session.query(func.coalesce(func.sum(TransactionDB.amount), 0)).filter(
            TransactionDB.user_id == owner_id,
            TransactionDB.date <= up_to_date
        ).scalar()

        balance = to_money(total)
        logger.info(f"Рассчитан фактический баланс на {up_to_date}: {balance}")
        return balance

    except SQLAlchemyError as e:
        error_handler.handle(DatabaseError(str(e)), "Не удалось рассчитать баланс")
        return Decimal('0.00')


def latest_recurring_series(transactions: Iterable) -> List:
    """
    Возвращает последнюю запись каждой серии регулярных транзакций.

    Серия определяется описанием, категорией, счётом и периодом.
    Платежи рассрочки в серии не входят.
    """
    latest: Dict[SeriesKey, object] = {}

    for transaction in transactions:
        if not transaction.is_recurring or transaction.recurring_period is None:
            continue
        if transaction.installment_total is not None:
            continue

        key = (
            transaction.description,
            transaction.category,
            transaction.account_id,
            RecurringPeriod(transaction.recurring_period),
        )
        current = latest.get(key)
        if current is None or transaction.date > current.date:
            latest[key] = transaction

    return list(latest.values())


def project_recurring(transactions: Iterable, today: date, until: date) -> Dict[date, Decimal]:
    """
    Проецирует будущие вхождения регулярных транзакций в интервале (today, until].

    Returns:
        Словарь {дата: сумма проецируемых транзакций за день}
    """
    projected: Dict[date, Decimal] = {}

    for transaction in latest_recurring_series(transactions):
        occurrences = generate_occurrence_dates(
            transaction.date,
            transaction.recurring_period,
            after=today,
            until=until
        )
        for occurrence_date in occurrences:
            projected[occurrence_date] = projected.get(occurrence_date, Decimal('0.00')) + Decimal(transaction.amount)

    return projected


def build_forecast(transactions: List, start_date: date, end_date: date, today: date) -> List[ForecastPoint]:
    """
    Строит прогноз баланса по дням из загруженных транзакций.

    Для дней до today включительно баланс фактический (сумма транзакций
    по эту дату). Для будущих дней к нему добавляются будущие записи
    и проецируемые вхождения регулярных транзакций.

    Raises:
        ValidationError: Если start_date > end_date
    """
    if start_date > end_date:
        raise ValidationError(f"Дата начала ({start_date}) не может быть позже даты окончания ({end_date})")

    deltas: Dict[date, Decimal] = {}
    opening = Decimal('0.00')

    for transaction in transactions:
        amount = Decimal(transaction.amount)
        if transaction.date < start_date:
            opening += amount
        else:
            deltas[transaction.date] = deltas.get(transaction.date, Decimal('0.00')) + amount

    for occurrence_date, amount in project_recurring(transactions, today, end_date).items():
        if occurrence_date < start_date:
            opening += amount
        else:
            deltas[occurrence_date] = deltas.get(occurrence_date, Decimal('0.00')) + amount

    points: List[ForecastPoint] = []
    running_balance = opening
    current_date = start_date

    while current_date <= end_date:
        running_balance += deltas.get(current_date, Decimal('0.00'))
        points.append(ForecastPoint(date=current_date, balance=running_balance))
        current_date += timedelta(days=1)

    return points


def get_balance_forecast(
    session: Session,
    owner_id: str,
    start_date: date,
    end_date: date,
    today: Optional[date] = None
) -> List[ForecastPoint]:
    """
    Возвращает прогноз баланса владельца для каждой даты в периоде.

    Args:
        session: Активная сессия БД
        owner_id: Владелец
        start_date: Начало периода
        end_date: Конец периода (включительно)
        today: Граница между фактом и прогнозом (по умолчанию сегодня)

    Returns:
        Список ForecastPoint по одному на каждый день периода

    Raises:
        ValidationError: Если start_date > end_date

    Example:
        >>> points = get_balance_forecast(session, owner_id, date.today(), date.today() + timedelta(days=30))
        >>> points[-1].balance
        Decimal('-120.00')
    """
    if start_date > end_date:
        raise ValidationError(f"Дата начала ({start_date}) не может быть позже даты окончания ({end_date})")

    today = today or date.today()
    transactions = get_transactions(session, owner_id)
    points = build_forecast(transactions, start_date, end_date, today)

    logger.info(
        f"Рассчитан прогноз для периода {start_date} - {end_date} "
        f"({len(points)} дат, транзакций: {len(transactions)})"
    )
    return points


def find_cash_gaps(points: List[ForecastPoint]) -> List[date]:
    """
    Определяет даты с кассовыми разрывами (прогнозируемый баланс < 0).

    Returns:
        Список дат с отрицательным балансом (может быть пустым)
    """
    cash_gaps = [point.date for point in points if point.balance < Decimal('0')]

    if cash_gaps:
        logger.warning(f"Обнаружено {len(cash_gaps)} кассовых разрывов, первый: {cash_gaps[0]}")
    else:
        logger.info("Кассовых разрывов не обнаружено")

    return cash_gaps
