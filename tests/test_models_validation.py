"""
Тесты валидации Pydantic моделей и утилит валидации.
"""

import uuid
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from money_tracker.models import (
    InstallmentResult,
    RecurringPeriod,
    TransactionCreate,
    TransactionType,
    TransactionUpdate,
)
from money_tracker.utils.exceptions import ValidationError
from money_tracker.utils.validation import normalize_optional_id, to_money, validate_uuid_format


class TestTransactionCreate:
    """Нормализация входных данных транзакции."""

    def test_amount_parsed_and_signed(self):
        expense = TransactionCreate(description="Кафе", amount="150.5", type=TransactionType.EXPENSE)
        income = TransactionCreate(description="Зарплата", amount="-1000", type="income")

        assert expense.amount == Decimal("-150.50")
        assert income.amount == Decimal("1000.00")

    def test_zero_amount_rejected(self):
        with pytest.raises(PydanticValidationError):
            TransactionCreate(description="Кафе", amount="0", type=TransactionType.EXPENSE)

    def test_too_many_decimal_places_rejected(self):
        with pytest.raises(PydanticValidationError):
            TransactionCreate(description="Кафе", amount="1.005", type=TransactionType.EXPENSE)

    def test_empty_description_rejected(self):
        with pytest.raises(PydanticValidationError):
            TransactionCreate(description="  ", amount="1", type=TransactionType.EXPENSE)

    def test_empty_account_and_category_become_none(self):
        transaction = TransactionCreate(
            description="Кафе", amount="1", type=TransactionType.EXPENSE, account_id="  ", category=""
        )

        assert transaction.account_id is None
        assert transaction.category is None

    def test_invalid_account_id_rejected(self):
        with pytest.raises(PydanticValidationError):
            TransactionCreate(description="Кафе", amount="1", type=TransactionType.EXPENSE, account_id="abc")

    def test_date_defaults_to_today(self):
        transaction = TransactionCreate(description="Кафе", amount="1", type=TransactionType.EXPENSE)

        assert transaction.date == date.today()

    def test_recurring_requires_period(self):
        with pytest.raises(PydanticValidationError):
            TransactionCreate(description="Аренда", amount="1", type=TransactionType.EXPENSE, is_recurring=True)

    def test_non_recurring_drops_period(self):
        transaction = TransactionCreate(
            description="Аренда", amount="1", type=TransactionType.EXPENSE,
            recurring_period=RecurringPeriod.MONTHLY
        )

        assert transaction.recurring_period is None

    @pytest.mark.parametrize("current, total", [(1, None), (4, 3), (0, 3)])
    def test_inconsistent_installment_rejected(self, current, total):
        with pytest.raises(PydanticValidationError):
            TransactionCreate(
                description="Телефон", amount="1", type=TransactionType.EXPENSE,
                installment_current=current, installment_total=total
            )

    def test_installment_total_at_least_two(self):
        with pytest.raises(PydanticValidationError):
            TransactionCreate(
                description="Телефон", amount="1", type=TransactionType.EXPENSE,
                installment_current=1, installment_total=1
            )


class TestTransactionUpdate:
    """Частичное обновление транзакции."""

    def test_only_set_fields_dumped(self):
        update = TransactionUpdate(description=" Кино ")

        assert update.model_dump(exclude_unset=True) == {"description": "Кино"}

    def test_explicit_account_clear(self):
        update = TransactionUpdate(account_id="")

        assert update.model_dump(exclude_unset=True) == {"account_id": None}

    @pytest.mark.parametrize("field", ["description", "amount", "type", "date", "is_recurring", "payment_status"])
    def test_required_fields_cannot_be_nulled(self, field):
        with pytest.raises(PydanticValidationError):
            TransactionUpdate(**{field: None})


def test_installment_result_message():
    result = InstallmentResult(success_count=11, total=12)

    assert result.message == "11 из 12 платежей добавлено"
    assert not result.all_succeeded


class TestValidationUtils:
    """Утилиты валидации идентификаторов и сумм."""

    def test_validate_uuid_format(self):
        validate_uuid_format(str(uuid.uuid4()), "account_id")

        with pytest.raises(ValidationError):
            validate_uuid_format("123", "account_id")

    def test_normalize_optional_id(self):
        value = str(uuid.uuid4())

        assert normalize_optional_id(None) is None
        assert normalize_optional_id("   ") is None
        assert normalize_optional_id(f" {value} ") == value
        with pytest.raises(ValueError):
            normalize_optional_id("abc")

    def test_to_money(self):
        assert to_money("10") == Decimal("10.00")
        assert to_money(Decimal("2.345")) == Decimal("2.35")
        assert to_money(0.1) == Decimal("0.10")
