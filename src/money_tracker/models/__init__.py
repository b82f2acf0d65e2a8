"""Модели данных Money Tracker (SQLAlchemy + Pydantic)."""

from money_tracker.models.enums import (
    TransactionType,
    AccountType,
    RecurringPeriod,
    PaymentStatus,
    ReportType,
    ReportGroupBy,
)
from money_tracker.models.models import (
    Base,
    AccountDB,
    CategoryDB,
    TransactionDB,
    NO_ACCOUNT_NAME,
    signed_amount,
    AccountCreate,
    AccountUpdate,
    Account,
    CategoryCreate,
    CategoryUpdate,
    Category,
    TransactionCreate,
    TransactionUpdate,
    Transaction,
    InstallmentRequest,
    InstallmentResult,
    BalanceSummary,
    ReportGroup,
    ReportResult,
    BudgetSummary,
    BudgetTotals,
    ForecastPoint,
)

__all__ = [
    "TransactionType",
    "AccountType",
    "RecurringPeriod",
    "PaymentStatus",
    "ReportType",
    "ReportGroupBy",
    "Base",
    "AccountDB",
    "CategoryDB",
    "TransactionDB",
    "NO_ACCOUNT_NAME",
    "signed_amount",
    "AccountCreate",
    "AccountUpdate",
    "Account",
    "CategoryCreate",
    "CategoryUpdate",
    "Category",
    "TransactionCreate",
    "TransactionUpdate",
    "Transaction",
    "InstallmentRequest",
    "InstallmentResult",
    "BalanceSummary",
    "ReportGroup",
    "ReportResult",
    "BudgetSummary",
    "BudgetTotals",
    "ForecastPoint",
]
