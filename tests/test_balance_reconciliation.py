"""
Тесты правил согласования баланса (чистые функции без БД).
"""

from decimal import Decimal

from money_tracker.models import TransactionType
from money_tracker.services.balance_reconciliation import (
    BalanceAdjustment,
    LedgerEntry,
    adjustments_for_add,
    adjustments_for_delete,
    adjustments_for_update,
    net_effect,
    signed_amount,
)

from test_factories import create_test_transaction

A = "11111111-1111-1111-1111-111111111111"
C = "22222222-2222-2222-2222-222222222222"


def test_add_applies_signed_amount():
    assert adjustments_for_add(LedgerEntry(A, Decimal("-150.00"))) == [
        BalanceAdjustment(A, Decimal("-150.00"))
    ]


def test_add_without_account_is_noop():
    assert adjustments_for_add(LedgerEntry(None, Decimal("-150.00"))) == []


def test_delete_reverses_amount():
    assert adjustments_for_delete(LedgerEntry(A, Decimal("-150.00"))) == [
        BalanceAdjustment(A, Decimal("150.00"))
    ]


def test_update_same_account_applies_only_difference():
    adjustments = adjustments_for_update(LedgerEntry(A, Decimal("-150.00")), LedgerEntry(A, Decimal("-200.00")))

    assert adjustments == [BalanceAdjustment(A, Decimal("-50.00"))]


def test_update_same_amount_same_account_is_noop():
    assert adjustments_for_update(LedgerEntry(A, Decimal("-1.00")), LedgerEntry(A, Decimal("-1.00"))) == []


def test_update_reassignment_moves_contribution():
    adjustments = adjustments_for_update(LedgerEntry(A, Decimal("-150.00")), LedgerEntry(C, Decimal("-200.00")))

    assert net_effect(adjustments) == {A: Decimal("150.00"), C: Decimal("-200.00")}


def test_update_cleared_account_reverses_old_only():
    adjustments = adjustments_for_update(LedgerEntry(A, Decimal("-150.00")), LedgerEntry(None, Decimal("-200.00")))

    assert adjustments == [BalanceAdjustment(A, Decimal("150.00"))]


def test_update_newly_assigned_account_applies_new_only():
    adjustments = adjustments_for_update(LedgerEntry(None, Decimal("-150.00")), LedgerEntry(C, Decimal("-200.00")))

    assert adjustments == [BalanceAdjustment(C, Decimal("-200.00"))]


def test_update_without_accounts_is_noop():
    assert adjustments_for_update(LedgerEntry(None, Decimal("5")), LedgerEntry(None, Decimal("7"))) == []


def test_ledger_entry_of_transaction_normalizes_empty_account():
    transaction = create_test_transaction("owner", Decimal("42.00"), account_id="")

    assert LedgerEntry.of(transaction) == LedgerEntry(None, Decimal("-42.00"))


def test_signed_amount_follows_type():
    assert signed_amount(TransactionType.EXPENSE, Decimal("10")) == Decimal("-10")
    assert signed_amount(TransactionType.EXPENSE, Decimal("-10")) == Decimal("-10")
    assert signed_amount(TransactionType.INCOME, Decimal("-10")) == Decimal("10")
