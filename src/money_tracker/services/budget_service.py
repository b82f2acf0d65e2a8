"""
Сервис месячных бюджетов по категориям.

Бюджеты (лимиты расходов по категориям) передаются вызывающим кодом и не
сохраняются в БД; сервис сопоставляет их с расходами владельца за месяц.
"""

import logging
from calendar import monthrange
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Tuple

from sqlalchemy.orm import Session

from money_tracker.models import BudgetSummary, BudgetTotals, TransactionType
from money_tracker.services.transaction_service import get_by_date_range
from money_tracker.utils.exceptions import ValidationError
from money_tracker.utils.validation import to_money

# Настройка логирования
logger = logging.getLogger(__name__)


def month_bounds(month: date) -> Tuple[date, date]:
    """Первый и последний день месяца, которому принадлежит дата."""
    last_day = monthrange(month.year, month.month)[1]
    return month.replace(day=1), month.replace(day=last_day)


def _percentage(spent: Decimal, allocated: Decimal) -> int:
    if allocated <= 0:
        return 0
    return int((spent / allocated * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def calculate_budget_summary(
    session: Session,
    owner_id: str,
    budgets: Dict[str, Decimal],
    month: date
) -> List[BudgetSummary]:
    """
    Рассчитывает исполнение бюджетов по категориям за месяц.

    Учитываются только расходы; потраченная сумма берётся по модулю.
    Процент исполнения округляется до целого и ограничивается 100,
    остаток может быть отрицательным при перерасходе.

    Args:
        session: Активная сессия БД
        owner_id: Владелец
        budgets: Лимиты расходов {название категории: сумма}
        month: Любая дата нужного месяца

    Returns:
        Список BudgetSummary в порядке категорий в budgets

    Raises:
        ValidationError: Если лимит категории не положительный

    Example:
        >>> calculate_budget_summary(session, owner_id, {"Продукты": Decimal("1200")}, date(2024, 3, 1))
        [BudgetSummary(category='Продукты', allocated=Decimal('1200.00'), spent=..., ...)]
    """
    allocations = {}
    for category, amount in budgets.items():
        allocated = to_money(amount)
        if allocated <= 0:
            raise ValidationError(f"Бюджет категории '{category}' должен быть положительным")
        allocations[category] = allocated

    start_date, end_date = month_bounds(month)
    expenses = get_by_date_range(session, owner_id, start_date, end_date, TransactionType.EXPENSE)

    spent_by_category: Dict[str, Decimal] = {}
    for transaction in expenses:
        if transaction.category in allocations:
            spent_by_category[transaction.category] = (
                spent_by_category.get(transaction.category, Decimal('0.00')) + abs(Decimal(transaction.amount))
            )

    summaries = []
    for category, allocated in allocations.items():
        spent = spent_by_category.get(category, Decimal('0.00'))
        summaries.append(BudgetSummary(
            category=category,
            allocated=allocated,
            spent=spent,
            remaining=allocated - spent,
            percentage=min(_percentage(spent, allocated), 100),
        ))

    logger.info(f"Рассчитано исполнение {len(summaries)} бюджетов за {start_date:%Y-%m}")
    return summaries


def calculate_budget_totals(summaries: List[BudgetSummary]) -> BudgetTotals:
    """
    Суммирует бюджеты месяца.

    Общий процент не ограничивается 100, чтобы перерасход был виден.
    """
    allocated = sum((s.allocated for s in summaries), Decimal('0.00'))
    spent = sum((s.spent for s in summaries), Decimal('0.00'))

    return BudgetTotals(
        allocated=allocated,
        spent=spent,
        remaining=allocated - spent,
        percentage=_percentage(spent, allocated),
    )
