"""
Тесты месячных бюджетов по категориям.
"""

from datetime import date
from decimal import Decimal

import pytest

from money_tracker.models import BudgetSummary, TransactionType
from money_tracker.services.budget_service import (
    calculate_budget_summary,
    calculate_budget_totals,
    month_bounds,
)
from money_tracker.utils.exceptions import ValidationError

from test_factories import create_test_transaction, save_all


def test_month_bounds():
    assert month_bounds(date(2024, 2, 17)) == (date(2024, 2, 1), date(2024, 2, 29))


def test_budget_summary_for_month(db_session, owner_id, other_owner_id):
    save_all(
        db_session,
        create_test_transaction(owner_id, Decimal("300.00"), category="Продукты", transaction_date=date(2024, 3, 1)),
        create_test_transaction(owner_id, Decimal("250.00"), category="Продукты", transaction_date=date(2024, 3, 31)),
        create_test_transaction(owner_id, Decimal("900.00"), category="Транспорт", transaction_date=date(2024, 3, 5)),
        create_test_transaction(owner_id, Decimal("100.00"), category="Продукты", transaction_date=date(2024, 4, 1)),
        create_test_transaction(owner_id, Decimal("700.00"), type=TransactionType.INCOME, category="Продукты",
                                transaction_date=date(2024, 3, 10)),
        create_test_transaction(other_owner_id, Decimal("50.00"), category="Продукты",
                                transaction_date=date(2024, 3, 10)),
    )

    summaries = calculate_budget_summary(
        db_session, owner_id,
        {"Продукты": Decimal("1200"), "Транспорт": Decimal("500"), "Кино": Decimal("300")},
        date(2024, 3, 20)
    )

    by_category = {s.category: s for s in summaries}
    assert [s.category for s in summaries] == ["Продукты", "Транспорт", "Кино"]

    assert by_category["Продукты"].spent == Decimal("550.00")
    assert by_category["Продукты"].remaining == Decimal("650.00")
    assert by_category["Продукты"].percentage == 46

    assert by_category["Транспорт"].spent == Decimal("900.00")
    assert by_category["Транспорт"].remaining == Decimal("-400.00")
    assert by_category["Транспорт"].percentage == 100

    assert by_category["Кино"].spent == Decimal("0.00")
    assert by_category["Кино"].percentage == 0


def test_non_positive_budget_rejected(db_session, owner_id):
    with pytest.raises(ValidationError):
        calculate_budget_summary(db_session, owner_id, {"Продукты": Decimal("0")}, date(2024, 3, 1))


def test_budget_totals_not_capped():
    summaries = [
        BudgetSummary(category="A", allocated=Decimal("100.00"), spent=Decimal("150.00"),
                      remaining=Decimal("-50.00"), percentage=100),
        BudgetSummary(category="B", allocated=Decimal("100.00"), spent=Decimal("75.00"),
                      remaining=Decimal("25.00"), percentage=75),
    ]

    totals = calculate_budget_totals(summaries)

    assert totals.allocated == Decimal("200.00")
    assert totals.spent == Decimal("225.00")
    assert totals.remaining == Decimal("-25.00")
    assert totals.percentage == 113


def test_budget_totals_empty():
    totals = calculate_budget_totals([])

    assert totals.allocated == Decimal("0.00")
    assert totals.percentage == 0
