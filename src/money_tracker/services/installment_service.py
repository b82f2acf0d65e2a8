"""
Сервис рассрочек.

Разбивает одну покупку на N ежемесячных платежей:
- add_months: сдвиг даты на N календарных месяцев
- split_amount: деление суммы на равные доли до копеек
- expand_installments: построение N шаблонов транзакций
- create_installments: последовательное сохранение платежей через transaction_service

Каждый платёж сохраняется независимо: ошибка на платеже k не мешает
сохранить платёж k+1, уже сохранённые платежи не откатываются.
"""

import logging
from calendar import monthrange
from datetime import date
from decimal import Decimal, ROUND_DOWN
from typing import List

from sqlalchemy.orm import Session

from money_tracker.models import (
    InstallmentRequest,
    InstallmentResult,
    Transaction,
    TransactionCreate,
)
from money_tracker.services.transaction_service import add_transaction
from money_tracker.utils.validation import CENT

# Настройка логирования
logger = logging.getLogger(__name__)


def add_months(start: date, months: int) -> date:
    """
    Сдвигает дату на указанное число календарных месяцев.

    Год переходит корректно (13-й месяц = январь следующего года).
    Если в целевом месяце нет такого числа, берётся последний день месяца.

    Example:
        >>> add_months(date(2024, 11, 15), 2)
        datetime.date(2025, 1, 15)
        >>> add_months(date(2024, 1, 31), 1)
        datetime.date(2024, 2, 29)
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, monthrange(year, month)[1])
    return date(year, month, day)


def split_amount(total: Decimal, count: int) -> List[Decimal]:
    """
    Делит сумму на count равных долей с точностью до копеек.

    Доли округляются вниз, остаток добавляется к последней доле, поэтому сумма
    долей всегда равна исходной сумме.

    Example:
        >>> split_amount(Decimal('100.00'), 3)
        [Decimal('33.33'), Decimal('33.33'), Decimal('33.34')]

    Raises:
        ValueError: Если count < 1
    """
    if count < 1:
        raise ValueError(f"Количество долей должно быть положительным, получено: {count}")

    share = (total / count).quantize(CENT, rounding=ROUND_DOWN)
    shares = [share] * (count - 1)
    shares.append(total - share * (count - 1))
    return shares


def expand_installments(request: InstallmentRequest) -> List[TransactionCreate]:
    """
    Строит шаблоны транзакций для всех платежей рассрочки.

    Платёж i (с нуля) получает дату start_date + i месяцев,
    installment_current = i + 1 и installment_total = N.
    Знак суммы определяется типом (расход отрицательный).

    Args:
        request: Запрос на рассрочку

    Returns:
        Список из installment_total шаблонов в порядке возрастания номера
    """
    shares = split_amount(abs(request.amount), request.installment_total)

    return [
        TransactionCreate(
            description=request.description,
            amount=share,
            type=request.type,
            date=add_months(request.start_date, index),
            category=request.category,
            account_id=request.account_id,
            installment_current=index + 1,
            installment_total=request.installment_total,
            payment_status=request.payment_status,
        )
        for index, share in enumerate(shares)
    ]


def create_installments(session: Session, owner_id: str, request: InstallmentRequest) -> InstallmentResult:
    """
    Сохраняет все платежи рассрочки по одному, в порядке возрастания номера.

    Каждый платёж проходит через add_transaction и изменяет баланс счёта.
    Ошибки отдельных платежей считаются, но не прерывают цикл.

    Args:
        session: Активная сессия БД
        owner_id: Владелец
        request: Запрос на рассрочку

    Returns:
        InstallmentResult с количеством успешно сохранённых платежей
    """
    templates = expand_installments(request)
    total = len(templates)

    if not owner_id:
        logger.warning("Пользователь не определён, рассрочка не создана")
        return InstallmentResult(success_count=0, total=total)

    logger.debug(f"Создание рассрочки '{request.description}': {total} платежей на сумму {request.amount}")

    created: List[Transaction] = []
    for template in templates:
        db_transaction = add_transaction(session, owner_id, template)
        if db_transaction is None:
            logger.warning(
                f"Платёж {template.installment_current}/{total} рассрочки "
                f"'{request.description}' не сохранён"
            )
            continue
        created.append(Transaction.model_validate(db_transaction))

    result = InstallmentResult(success_count=len(created), total=total, transactions=created)

    if result.all_succeeded:
        logger.info(f"Рассрочка '{request.description}': {result.message}")
    else:
        logger.warning(f"Рассрочка '{request.description}' создана частично: {result.message}")
    return result
