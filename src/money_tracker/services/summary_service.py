"""
Сервис сводки баланса.

Сводка считается по всем загруженным транзакциям владельца: общий баланс,
доходы, расходы, а также ожидающие и просроченные расходы.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from money_tracker.models import BalanceSummary, PaymentStatus
from money_tracker.services.payment_status_service import classify_payment_status
from money_tracker.services.transaction_service import get_transactions

# Настройка логирования
logger = logging.getLogger(__name__)


def calculate_balance_summary(transactions: Iterable, today: date) -> BalanceSummary:
    """
    Сворачивает транзакции в сводку баланса.

    Положительные суммы идут в доходы, отрицательные - в расходы (по модулю),
    общий баланс равен сумме со знаком. Расходы со статусом PENDING/OVERDUE
    (по classify_payment_status на дату today) дополнительно суммируются
    в pending_expenses / overdue_expenses.

    Args:
        transactions: Транзакции (ORM или Pydantic объекты)
        today: Дата, относительно которой определяется просрочка

    Returns:
        BalanceSummary
    """
    total = income = expenses = pending = overdue = Decimal('0.00')

    for transaction in transactions:
        amount = Decimal(transaction.amount)
        total += amount

        if amount > 0:
            income += amount
            continue

        expenses += -amount
        status = classify_payment_status(transaction, today)
        if status == PaymentStatus.PENDING:
            pending += -amount
        elif status == PaymentStatus.OVERDUE:
            overdue += -amount

    return BalanceSummary(
        total_balance=total,
        income=income,
        expenses=expenses,
        pending_expenses=pending,
        overdue_expenses=overdue,
    )


def get_balance_summary(session: Session, owner_id: str, today: Optional[date] = None) -> BalanceSummary:
    """
    Загружает транзакции владельца и строит сводку баланса.

    Если владелец не определён, возвращается пустая сводка.
    """
    today = today or date.today()
    transactions = get_transactions(session, owner_id)
    summary = calculate_balance_summary(transactions, today)

    logger.info(
        f"Сводка баланса владельца {owner_id}: баланс {summary.total_balance}, "
        f"доходы {summary.income}, расходы {summary.expenses}"
    )
    return summary
