import uuid
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from money_tracker.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def validate_uuid_format(id_value: str, field_name: str = "ID") -> None:
    """
    Валидация формата UUID.

    Args:
        id_value: Значение для проверки
        field_name: Название поля для сообщения об ошибке

    Raises:
        ValidationError: Если формат невалидный
    """
    try:
        uuid.UUID(str(id_value))
    except ValueError:
        error_msg = f'Невалидный формат {field_name}: {id_value}. Ожидается UUID формата: 550e8400-e29b-41d4-a716-446655440000'
        logger.error(error_msg)
        raise ValidationError(error_msg)


def normalize_optional_id(id_value: Optional[str], field_name: str = "ID") -> Optional[str]:
    """
    Приводит необязательную ссылку к виду "UUID или None".

    Пустая строка, строка из пробелов и None означают отсутствие ссылки.

    Raises:
        ValueError: Если значение задано, но не является UUID
    """
    if id_value is None:
        return None
    id_value = str(id_value).strip()
    if not id_value:
        return None
    try:
        uuid.UUID(id_value)
    except ValueError:
        raise ValueError(f'Невалидный UUID в поле {field_name}: {id_value}')
    return id_value


def to_money(value) -> Decimal:
    """Приводит значение к Decimal с точностью до копеек."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
