"""
Модуль перечислений (enums) для Money Tracker.

Содержит все Enum классы, используемые в моделях данных и сервисах.
"""

from enum import Enum


class TransactionType(str, Enum):
    """
    Тип финансовой транзакции.

    Attributes:
        INCOME: Доход (сумма >= 0)
        EXPENSE: Расход (сумма <= 0)
    """
    INCOME = "income"
    EXPENSE = "expense"


class AccountType(str, Enum):
    """
    Тип счёта.

    Attributes:
        CHECKING: Текущий (расчётный) счёт
        SAVINGS: Сберегательный счёт
        CREDIT_CARD: Кредитная карта
        INVESTMENT: Инвестиционный счёт
        OTHER: Другое
    """
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    INVESTMENT = "investment"
    OTHER = "other"


class RecurringPeriod(str, Enum):
    """
    Период повторения регулярной транзакции.

    Attributes:
        DAILY: Ежедневно
        WEEKLY: Еженедельно
        MONTHLY: Ежемесячно
        YEARLY: Ежегодно
    """
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class PaymentStatus(str, Enum):
    """
    Статус оплаты транзакции.

    Attributes:
        PENDING: Ожидает оплаты
        PAID: Оплачено
        OVERDUE: Просрочено
    """
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class ReportType(str, Enum):
    """
    Фильтр отчёта по типу транзакций.

    Attributes:
        INCOME: Только доходы
        EXPENSE: Только расходы
        ALL: Без фильтра
    """
    INCOME = "income"
    EXPENSE = "expense"
    ALL = "all"


class ReportGroupBy(str, Enum):
    """
    Измерение группировки отчёта.

    Attributes:
        CATEGORY: По категории
        DATE: По дню
        ACCOUNT: По счёту
    """
    CATEGORY = "category"
    DATE = "date"
    ACCOUNT = "account"
