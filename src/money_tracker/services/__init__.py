__all__ = [
    "create_account",
    "get_account",
    "get_accounts",
    "update_account",
    "delete_account",
    "adjust_balance",
    "get_total_accounts_balance",
    "get_categories",
    "get_category",
    "create_category",
    "update_category",
    "delete_category",
    "ensure_default_categories",
    "get_transactions",
    "get_transaction",
    "get_by_date_range",
    "add_transaction",
    "update_transaction",
    "delete_transaction",
    "LedgerEntry",
    "BalanceAdjustment",
    "adjustments_for_add",
    "adjustments_for_delete",
    "adjustments_for_update",
    "net_effect",
    "add_months",
    "split_amount",
    "expand_installments",
    "create_installments",
    "group_transactions",
    "generate_report",
    "calculate_balance_summary",
    "get_balance_summary",
    "classify_payment_status",
    "get_overdue_transactions",
    "get_upcoming_payments",
    "mark_as_paid",
    "refresh_overdue_statuses",
    "next_occurrence_date",
    "generate_occurrence_dates",
    "calculate_budget_summary",
    "calculate_budget_totals",
    "calculate_actual_balance",
    "get_balance_forecast",
    "find_cash_gaps",
]

from money_tracker.services.account_service import (
    create_account,
    get_account,
    get_accounts,
    update_account,
    delete_account,
    adjust_balance,
    get_total_accounts_balance
)

from money_tracker.services.category_service import (
    get_categories,
    get_category,
    create_category,
    update_category,
    delete_category,
    ensure_default_categories
)

from money_tracker.services.transaction_service import (
    get_transactions,
    get_transaction,
    get_by_date_range,
    add_transaction,
    update_transaction,
    delete_transaction
)

from money_tracker.services.balance_reconciliation import (
    LedgerEntry,
    BalanceAdjustment,
    adjustments_for_add,
    adjustments_for_delete,
    adjustments_for_update,
    net_effect
)

from money_tracker.services.installment_service import (
    add_months,
    split_amount,
    expand_installments,
    create_installments
)

from money_tracker.services.report_service import (
    group_transactions,
    generate_report
)

from money_tracker.services.summary_service import (
    calculate_balance_summary,
    get_balance_summary
)

from money_tracker.services.payment_status_service import (
    classify_payment_status,
    get_overdue_transactions,
    get_upcoming_payments,
    mark_as_paid,
    refresh_overdue_statuses
)

from money_tracker.services.recurrence_service import (
    next_occurrence_date,
    generate_occurrence_dates
)

from money_tracker.services.budget_service import (
    calculate_budget_summary,
    calculate_budget_totals
)

from money_tracker.services.forecast_service import (
    calculate_actual_balance,
    get_balance_forecast,
    find_cash_gaps
)
