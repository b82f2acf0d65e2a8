"""
Сервис расчёта дат регулярных транзакций.

Регулярные транзакции хранятся одной записью с периодом повторения;
будущие вхождения в БД не создаются, а только вычисляются (например,
для прогноза баланса).
"""

import logging
from datetime import date, timedelta
from typing import List

from money_tracker.models import RecurringPeriod
from money_tracker.services.installment_service import add_months

# Настройка логирования
logger = logging.getLogger(__name__)

# Ограничение на число вычисляемых вхождений за один вызов
MAX_OCCURRENCES = 5000


def next_occurrence_date(current_date: date, period: RecurringPeriod, step: int = 1) -> date:
    """
    Вычисляет дату через step периодов от current_date.

    Для месячного и годового периодов число месяца сохраняется, а если
    его нет в целевом месяце, берётся последний день месяца
    (31 января + 1 месяц = 28/29 февраля).

    Example:
        >>> next_occurrence_date(date(2025, 1, 31), RecurringPeriod.MONTHLY)
        datetime.date(2025, 2, 28)
        >>> next_occurrence_date(date(2024, 2, 29), RecurringPeriod.YEARLY)
        datetime.date(2025, 2, 28)

    Raises:
        ValueError: Если период неизвестен
    """
    period = RecurringPeriod(period)

    if period == RecurringPeriod.DAILY:
        return current_date + timedelta(days=step)
    if period == RecurringPeriod.WEEKLY:
        return current_date + timedelta(weeks=step)
    if period == RecurringPeriod.MONTHLY:
        return add_months(current_date, step)
    if period == RecurringPeriod.YEARLY:
        return add_months(current_date, 12 * step)

    raise ValueError(f"Неизвестный период повторения: {period}")


def generate_occurrence_dates(
    start_date: date,
    period: RecurringPeriod,
    after: date,
    until: date
) -> List[date]:
    """
    Генерирует даты вхождений регулярной транзакции в интервале (after, until].

    Даты отсчитываются от start_date (start_date + k периодов), поэтому
    "прилипание" к концу месяца не накапливается.

    Args:
        start_date: Дата исходной транзакции
        period: Период повторения
        after: Вхождения строго после этой даты
        until: Вхождения не позже этой даты (включительно)

    Returns:
        Список дат в порядке возрастания
    """
    dates: List[date] = []
    step = 1
    current = next_occurrence_date(start_date, period, step)

    while current <= until:
        if current > after:
            dates.append(current)
        if len(dates) >= MAX_OCCURRENCES:
            logger.warning(f"Достигнут лимит вхождений ({MAX_OCCURRENCES}) для периода {period}")
            break
        step += 1
        current = next_occurrence_date(start_date, period, step)

    return dates
