"""
Сервис отчётов.

Строит сгруппированные суммы транзакций за период:
- group_transactions: чистая группировка по категории, дню или счёту
- generate_report: выборка транзакций владельца и построение отчёта

Суммы групп сохраняют знак (расходы отрицательные); для отображения
вызывающий код берёт модуль.
"""

import logging
from collections import OrderedDict
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from money_tracker.models import (
    ReportGroup,
    ReportGroupBy,
    ReportResult,
    ReportType,
    Transaction,
    TransactionType,
)
from money_tracker.services.transaction_service import get_by_date_range
from money_tracker.utils.exceptions import ValidationError

# Настройка логирования
logger = logging.getLogger(__name__)

# Ключи групп для транзакций без категории / без счёта
UNCATEGORIZED_KEY = "uncategorized"
NO_ACCOUNT_KEY = "no-account"


def _group_key(transaction, group_by: ReportGroupBy) -> str:
    if group_by == ReportGroupBy.CATEGORY:
        return transaction.category or UNCATEGORIZED_KEY
    if group_by == ReportGroupBy.DATE:
        return transaction.date.isoformat()
    return transaction.account_id or NO_ACCOUNT_KEY


def group_transactions(transactions: Iterable, group_by: ReportGroupBy) -> List[ReportGroup]:
    """
    Группирует транзакции и считает сумму и количество в каждой группе.

    Группы по категории и счёту идут в порядке первого появления,
    группы по дню отсортированы по возрастанию даты.

    Args:
        transactions: Транзакции (ORM или Pydantic объекты)
        group_by: Измерение группировки

    Returns:
        Список групп отчёта
    """
    totals: "OrderedDict[str, List]" = OrderedDict()

    for transaction in transactions:
        key = _group_key(transaction, group_by)
        bucket = totals.setdefault(key, [Decimal('0.00'), 0])
        bucket[0] += Decimal(transaction.amount)
        bucket[1] += 1

    keys = sorted(totals) if group_by == ReportGroupBy.DATE else list(totals)

    return [
        ReportGroup(key=key, total_amount=totals[key][0], count=totals[key][1])
        for key in keys
    ]


def generate_report(
    session: Session,
    owner_id: str,
    report_type: ReportType,
    start_date: date,
    end_date: date,
    group_by: ReportGroupBy
) -> Optional[ReportResult]:
    """
    Строит отчёт по транзакциям владельца за период.

    Args:
        session: Активная сессия БД
        owner_id: Владелец
        report_type: income, expense или all (без фильтра)
        start_date: Начало периода (включительно)
        end_date: Конец периода (включительно)
        group_by: category, date или account

    Returns:
        ReportResult или None, если владелец не определён

    Raises:
        ValidationError: Если начало периода позже конца
    """
    report_type = ReportType(report_type)
    group_by = ReportGroupBy(group_by)

    if start_date > end_date:
        raise ValidationError(f"Начало периода {start_date} позже окончания {end_date}")

    if not owner_id:
        logger.warning("Пользователь не определён, отчёт не построен")
        return None

    transaction_type = None if report_type == ReportType.ALL else TransactionType(report_type.value)
    transactions = get_by_date_range(session, owner_id, start_date, end_date, transaction_type)

    groups = group_transactions(transactions, group_by)

    logger.info(
        f"Отчёт {report_type.value} по {group_by.value} за {start_date} - {end_date}: "
        f"{len(groups)} групп, {len(transactions)} транзакций"
    )

    return ReportResult(
        type=report_type,
        start_date=start_date,
        end_date=end_date,
        group_by=group_by,
        groups=groups,
        transactions=[Transaction.model_validate(t) for t in transactions],
    )
