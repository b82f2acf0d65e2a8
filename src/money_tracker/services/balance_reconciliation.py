"""
Правила согласования баланса счетов с транзакциями.

Кэшированный баланс счёта должен оставаться равным начальному балансу плюс
сумме всех транзакций, ссылающихся на счёт. Функции модуля чистые: по
состоянию транзакции до и после изменения они вычисляют, на сколько нужно
изменить баланс каждого затронутого счёта. Применяет изменения
transaction_service через account_service.adjust_balance.
"""

from decimal import Decimal
from typing import Dict, List, NamedTuple, Optional

from money_tracker.models import signed_amount

__all__ = [
    "LedgerEntry",
    "BalanceAdjustment",
    "adjustments_for_add",
    "adjustments_for_delete",
    "adjustments_for_update",
    "net_effect",
    "signed_amount",
]


class LedgerEntry(NamedTuple):
    """Вклад транзакции в баланс: счёт (или None) и сумма со знаком."""
    account_id: Optional[str]
    amount: Decimal

    @classmethod
    def of(cls, transaction) -> "LedgerEntry":
        """Снимок вклада транзакции (ORM или Pydantic объекта)."""
        return cls(transaction.account_id or None, Decimal(transaction.amount))


class BalanceAdjustment(NamedTuple):
    """Изменение баланса одного счёта."""
    account_id: str
    delta: Decimal


def adjustments_for_add(entry: LedgerEntry) -> List[BalanceAdjustment]:
    """
    Изменения балансов при добавлении транзакции.

    Транзакция без счёта баланс не затрагивает.

    Example:
        >>> adjustments_for_add(LedgerEntry("acc", Decimal("-150.00")))
        [BalanceAdjustment(account_id='acc', delta=Decimal('-150.00'))]
    """
    if not entry.account_id or entry.amount == 0:
        return []
    return [BalanceAdjustment(entry.account_id, entry.amount)]


def adjustments_for_delete(entry: LedgerEntry) -> List[BalanceAdjustment]:
    """Изменения балансов при удалении транзакции: её вклад отменяется."""
    if not entry.account_id or entry.amount == 0:
        return []
    return [BalanceAdjustment(entry.account_id, -entry.amount)]


def adjustments_for_update(old: LedgerEntry, new: LedgerEntry) -> List[BalanceAdjustment]:
    """
    Изменения балансов при редактировании транзакции.

    Правила:
    - счёт не изменился: применяется только разница new - old
      (полная новая сумма повторно не применяется);
    - счёт изменился: старый вклад отменяется на старом счёте,
      новый применяется на новом;
    - счёт убран: старый вклад отменяется, новый не применяется ни к чему;
    - счёт добавлен: новый вклад применяется к новому счёту.

    Example:
        >>> adjustments_for_update(LedgerEntry("a", Decimal("-150")), LedgerEntry("a", Decimal("-200")))
        [BalanceAdjustment(account_id='a', delta=Decimal('-50'))]
    """
    if old.account_id == new.account_id:
        if not old.account_id:
            return []
        delta = new.amount - old.amount
        if delta == 0:
            return []
        return [BalanceAdjustment(old.account_id, delta)]

    return adjustments_for_delete(old) + adjustments_for_add(new)


def net_effect(adjustments: List[BalanceAdjustment]) -> Dict[str, Decimal]:
    """Суммарное изменение баланса по каждому счёту."""
    effect: Dict[str, Decimal] = {}
    for adjustment in adjustments:
        effect[adjustment.account_id] = effect.get(adjustment.account_id, Decimal('0')) + adjustment.delta
    return effect
