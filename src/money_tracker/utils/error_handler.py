"""
Модуль централизованной обработки ошибок.

Сервисы не пробрасывают ошибки хранилища наверх: они передают их в ErrorHandler,
который логирует ошибку и отправляет понятное сообщение в уведомитель
(например, всплывающее уведомление интерфейса), после чего сервис
возвращает None/False.
"""

import logging
import functools
from typing import Callable, Optional

from pydantic import ValidationError as PydanticValidationError

from money_tracker.utils.exceptions import (
    ValidationError,
    BusinessLogicError,
    DatabaseError
)

logger = logging.getLogger(__name__)

Notifier = Callable[[str], None]


class ErrorHandler:
    """
    Класс для централизованной обработки ошибок.
    """

    def __init__(self, notifier: Optional[Notifier] = None):
        self.notifier = notifier

    def handle(self, exception: Exception, context_message: str = "") -> str:
        """
        Обрабатывает возникшее исключение: логирует и уведомляет пользователя.

        Args:
            exception: Исключение, которое нужно обработать.
            context_message: Дополнительное сообщение о контексте ошибки.

        Returns:
            Сообщение, показанное пользователю.
        """
        error_message = self._get_user_message(exception, context_message)
        log_message = f"{context_message}: {exception}" if context_message else str(exception)

        if isinstance(exception, (ValidationError, PydanticValidationError, BusinessLogicError)):
            logger.warning(f"Ошибка пользователя: {log_message}")
        else:
            logger.error(f"Системная ошибка: {log_message}", exc_info=exception)

        if self.notifier is not None:
            try:
                self.notifier(error_message)
            except Exception as e:
                logger.error(f"Не удалось показать уведомление об ошибке: {e}")

        return error_message

    def _get_user_message(self, exception: Exception, context_message: str = "") -> str:
        """Возвращает понятное пользователю сообщение об ошибке."""
        if isinstance(exception, ValidationError):
            return f"Ошибка ввода: {exception}"
        elif isinstance(exception, PydanticValidationError):
            fields = ", ".join(str(err["loc"][-1]) for err in exception.errors() if err.get("loc"))
            return f"Ошибка ввода: проверьте поля {fields}" if fields else "Ошибка ввода"
        elif isinstance(exception, BusinessLogicError):
            return f"Невозможно выполнить операцию: {exception}"
        elif isinstance(exception, DatabaseError):
            if context_message:
                return f"{context_message}. Попробуйте позже."
            return "Произошла ошибка при работе с базой данных. Попробуйте позже."
        else:
            return f"Произошла непредвиденная ошибка: {exception}"


# Общий обработчик сервисного слоя
error_handler = ErrorHandler()


def set_notifier(notifier: Optional[Notifier]) -> None:
    """
    Регистрирует функцию показа уведомлений для общего обработчика.

    Args:
        notifier: Функция, принимающая текст сообщения, или None для отключения
    """
    error_handler.notifier = notifier


def safe_handler(context_message: str = "", default=None):
    """
    Декоратор для обработчиков на стороне вызывающего кода.

    Перехватывает ошибки приложения и валидации, передаёт их в общий
    ErrorHandler и возвращает default.

    Args:
        context_message: Контекст для лога и сообщения
        default: Значение, возвращаемое при ошибке
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                error_handler.handle(e, context_message=context_message or f"Ошибка в {func.__name__}")
                return default
        return wrapper
    return decorator
