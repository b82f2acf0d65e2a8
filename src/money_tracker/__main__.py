"""
Точка входа для запуска через python -m money_tracker

Выводит счета владельца и сводку баланса:
    python -m money_tracker <owner_id>
"""
import sys
from datetime import date
from typing import List, Optional

from money_tracker.config import settings
from money_tracker.database import init_db, get_db_session
from money_tracker.services import (
    ensure_default_categories,
    get_accounts,
    get_balance_summary,
    get_total_accounts_balance,
    get_upcoming_payments,
)
from money_tracker.utils.error_handler import safe_handler, set_notifier
from money_tracker.utils.logger import setup_logging, get_logger

logger = get_logger(__name__)


@safe_handler("Не удалось показать сводку", default=1)
def show_overview(owner_id: str) -> int:
    with get_db_session() as session:
        ensure_default_categories(session, owner_id)

        print(f"{settings.APP_NAME} {settings.VERSION}")
        print("Счета:")
        accounts = get_accounts(session, owner_id)
        for account in accounts:
            print(f"  {account.name:<24} {settings.format_money(account.balance):>16}")
        if not accounts:
            print("  (нет счетов)")
        print(f"  {'Итого':<24} {settings.format_money(get_total_accounts_balance(session, owner_id)):>16}")

        today = date.today()
        summary = get_balance_summary(session, owner_id, today)
        print("Сводка:")
        print(f"  Баланс:             {settings.format_money(summary.total_balance)}")
        print(f"  Доходы:             {settings.format_money(summary.income)}")
        print(f"  Расходы:            {settings.format_money(summary.expenses)}")
        print(f"  Ожидают оплаты:     {settings.format_money(summary.pending_expenses)}")
        print(f"  Просрочено:         {settings.format_money(summary.overdue_expenses)}")

        upcoming = get_upcoming_payments(session, owner_id, today)
        if upcoming:
            print("Ближайшие платежи:")
            for transaction in upcoming:
                print(
                    f"  {transaction.due_date.strftime(settings.date_format)} "
                    f"{transaction.description} {settings.format_money(abs(transaction.amount))}"
                )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("Использование: python -m money_tracker <owner_id>", file=sys.stderr)
        return 2

    # 1. Настройка логирования
    setup_logging()
    logger.info(f"Запуск приложения {settings.APP_NAME}")

    # 2. Уведомления об ошибках выводятся в консоль
    set_notifier(lambda message: print(message, file=sys.stderr))

    # 3. Инициализация БД
    try:
        init_db()
    except Exception as e:
        logger.error(f"Ошибка инициализации БД: {e}")
        print(f"Критическая ошибка: {e}", file=sys.stderr)
        return 1

    return show_overview(argv[0])


if __name__ == "__main__":
    sys.exit(main())
