"""
Property-based тесты согласования баланса счетов.

Тестирует:
- Property 1: Добавление транзакции изменяет баланс на её сумму
- Property 2: Удаление транзакции возвращает баланс
- Property 3: Перенос транзакции между счетами
- Property 4: Изменение суммы без смены счёта
- Property 8: Знак суммы соответствует типу
- Баланс счёта равен начальному балансу плюс сумме его транзакций
"""

import uuid
from contextlib import contextmanager
from datetime import date
from decimal import Decimal

from hypothesis import given, strategies as st, settings
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from money_tracker.models import (
    AccountCreate,
    AccountDB,
    Base,
    CategoryDB,
    TransactionCreate,
    TransactionDB,
    TransactionType,
    TransactionUpdate,
)
from money_tracker.services.account_service import create_account
from money_tracker.services.transaction_service import (
    add_transaction,
    delete_transaction,
    get_transactions,
    update_transaction,
)

from test_factories import account_balance

# Создаём тестовый движок БД в памяти
test_engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False}
)

Base.metadata.create_all(test_engine)
TestSessionLocal = sessionmaker(bind=test_engine)

OWNER = str(uuid.uuid4())


@contextmanager
def get_test_session():
    """Контекстный менеджер для создания тестовой сессии БД."""
    session = TestSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        # Очищаем данные после использования
        session.query(TransactionDB).delete()
        session.query(AccountDB).delete()
        session.query(CategoryDB).delete()
        session.commit()
        session.close()


# Стратегии для генерации тестовых данных
amounts_strategy = st.decimals(
    min_value=Decimal('0.01'),
    max_value=Decimal('1000000.00'),
    places=2
)

balances_strategy = st.decimals(
    min_value=Decimal('-100000.00'),
    max_value=Decimal('100000.00'),
    places=2
)

types_strategy = st.sampled_from(list(TransactionType))


def _new_account(session, balance: Decimal, name: str = "Счёт") -> str:
    return create_account(session, OWNER, AccountCreate(name=name, balance=balance)).id


def _expense(amount: Decimal, account_id) -> TransactionCreate:
    return TransactionCreate(
        description="Расход",
        amount=amount,
        type=TransactionType.EXPENSE,
        date=date(2024, 6, 1),
        account_id=account_id,
    )


class TestBalanceProperties:
    """Property-based тесты согласования балансов."""

    @given(initial=balances_strategy, amount=amounts_strategy, transaction_type=types_strategy)
    @settings(max_examples=50, deadline=None)
    def test_property_1_add_applies_amount(self, initial, amount, transaction_type):
        """
        Property 1: Для счёта с балансом B и новой транзакции с суммой x
        баланс после добавления равен B + x.
        """
        with get_test_session() as session:
            account_id = _new_account(session, initial)

            created = add_transaction(session, OWNER, TransactionCreate(
                description="Операция",
                amount=amount,
                type=transaction_type,
                account_id=account_id,
            ))

            assert account_balance(session, account_id) == initial + created.amount

    @given(initial=balances_strategy, amount=amounts_strategy)
    @settings(max_examples=50, deadline=None)
    def test_property_2_delete_restores_balance(self, initial, amount):
        """
        Property 2: Удаление транзакции с суммой x со счёта с балансом B
        даёт баланс B - x, то есть исходный баланс до добавления.
        """
        with get_test_session() as session:
            account_id = _new_account(session, initial)
            created = add_transaction(session, OWNER, _expense(amount, account_id))
            before_delete = account_balance(session, account_id)

            assert delete_transaction(session, OWNER, created.id) is True
            assert account_balance(session, account_id) == before_delete + amount
            assert account_balance(session, account_id) == initial

    @given(
        balance_a=balances_strategy,
        balance_c=balances_strategy,
        old_amount=amounts_strategy,
        new_amount=amounts_strategy
    )
    @settings(max_examples=50, deadline=None)
    def test_property_3_reassignment(self, balance_a, balance_c, old_amount, new_amount):
        """
        Property 3: Перенос транзакции со счёта A (сумма x) на счёт C (сумма y):
        баланс A становится B_A - x, баланс C становится B_C + y.
        """
        with get_test_session() as session:
            account_a = _new_account(session, balance_a, "A")
            account_c = _new_account(session, balance_c, "C")
            created = add_transaction(session, OWNER, _expense(old_amount, account_a))
            x = created.amount
            after_add_a = account_balance(session, account_a)

            updated = update_transaction(
                session, OWNER, created.id,
                TransactionUpdate(account_id=account_c, amount=new_amount)
            )
            y = updated.amount

            assert account_balance(session, account_a) == after_add_a - x
            assert account_balance(session, account_c) == balance_c + y

    @given(initial=balances_strategy, old_amount=amounts_strategy, new_amount=amounts_strategy)
    @settings(max_examples=50, deadline=None)
    def test_property_4_amount_edit_same_account(self, initial, old_amount, new_amount):
        """
        Property 4: Изменение суммы с x на y без смены счёта даёт баланс B - x + y.
        """
        with get_test_session() as session:
            account_id = _new_account(session, initial)
            created = add_transaction(session, OWNER, _expense(old_amount, account_id))
            x = created.amount
            before_edit = account_balance(session, account_id)

            updated = update_transaction(session, OWNER, created.id, TransactionUpdate(amount=new_amount))

            assert account_balance(session, account_id) == before_edit - x + updated.amount

    @given(
        amount=st.decimals(min_value=Decimal('-1000000.00'), max_value=Decimal('1000000.00'), places=2)
            .filter(lambda v: v != 0),
        transaction_type=types_strategy,
        new_type=types_strategy
    )
    @settings(max_examples=50, deadline=None)
    def test_property_8_sign_matches_type(self, amount, transaction_type, new_type):
        """
        Property 8: После добавления и после изменения типа у каждой транзакции
        расход имеет сумму <= 0, доход >= 0.
        """
        with get_test_session() as session:
            created = add_transaction(session, OWNER, TransactionCreate(
                description="Операция", amount=amount, type=transaction_type
            ))
            update_transaction(session, OWNER, created.id, TransactionUpdate(type=new_type))

            for transaction in get_transactions(session, OWNER):
                if transaction.type == TransactionType.EXPENSE:
                    assert transaction.amount <= 0
                else:
                    assert transaction.amount >= 0
                assert abs(transaction.amount) == abs(amount)

    @given(
        initial=balances_strategy,
        operations=st.lists(
            st.tuples(st.sampled_from(["add", "edit", "delete"]), amounts_strategy, types_strategy),
            min_size=1,
            max_size=15
        )
    )
    @settings(max_examples=30, deadline=None)
    def test_balance_equals_initial_plus_transactions(self, initial, operations):
        """
        Для любой последовательности добавлений, изменений и удалений баланс
        счёта равен начальному балансу плюс сумме его транзакций.
        """
        with get_test_session() as session:
            account_id = _new_account(session, initial)
            ids = []

            for operation, amount, transaction_type in operations:
                if operation == "add" or not ids:
                    created = add_transaction(session, OWNER, TransactionCreate(
                        description="Операция", amount=amount, type=transaction_type, account_id=account_id
                    ))
                    ids.append(created.id)
                elif operation == "edit":
                    update_transaction(session, OWNER, ids[-1], TransactionUpdate(amount=amount, type=transaction_type))
                else:
                    delete_transaction(session, OWNER, ids.pop())

            total = sum((t.amount for t in get_transactions(session, OWNER)), Decimal('0.00'))
            assert account_balance(session, account_id) == initial + total
