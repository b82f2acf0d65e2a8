"""
Тесты централизованной обработки ошибок и логирования.
"""

import json
import logging
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from money_tracker.models import TransactionCreate, TransactionType
from money_tracker.utils.error_handler import ErrorHandler, error_handler, safe_handler
from money_tracker.utils.exceptions import BusinessLogicError, DatabaseError, ValidationError
from money_tracker.utils.logger import JsonFormatter, setup_logging


class TestErrorHandler:
    """Сообщения пользователю и уровни логирования."""

    def test_database_error_uses_context(self):
        handler = ErrorHandler()

        message = handler.handle(DatabaseError("disk I/O error"), "Не удалось добавить счёт")

        assert message == "Не удалось добавить счёт. Попробуйте позже."

    def test_validation_error_logged_as_warning(self, caplog):
        handler = ErrorHandler()

        with caplog.at_level(logging.WARNING, logger="money_tracker.utils.error_handler"):
            message = handler.handle(ValidationError("Сумма не может быть нулевой"))

        assert message == "Ошибка ввода: Сумма не может быть нулевой"
        assert caplog.records[-1].levelno == logging.WARNING

    def test_business_error_message(self):
        message = ErrorHandler().handle(BusinessLogicError("категория предустановлена"))

        assert message == "Невозможно выполнить операцию: категория предустановлена"

    def test_pydantic_error_lists_fields(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            TransactionCreate(description="", amount="0", type=TransactionType.EXPENSE)

        message = ErrorHandler().handle(exc_info.value)

        assert message.startswith("Ошибка ввода: проверьте поля")
        assert "amount" in message

    def test_notifier_receives_message(self):
        received = []
        handler = ErrorHandler(notifier=received.append)

        handler.handle(RuntimeError("boom"))

        assert received == ["Произошла непредвиденная ошибка: boom"]

    def test_failing_notifier_does_not_raise(self):
        def broken_notifier(message):
            raise RuntimeError("окно закрыто")

        handler = ErrorHandler(notifier=broken_notifier)

        assert handler.handle(DatabaseError("x")) == "Произошла ошибка при работе с базой данных. Попробуйте позже."


class TestSafeHandler:
    """Декоратор для обработчиков на стороне вызывающего кода."""

    def test_returns_default_and_notifies(self, notifications):
        @safe_handler("Не удалось сохранить", default=False)
        def handler():
            raise BusinessLogicError("дубликат")

        assert handler() is False
        assert notifications == ["Невозможно выполнить операцию: дубликат"]

    def test_passes_result_through(self):
        @safe_handler()
        def handler(value):
            return value * 2

        assert handler(21) == 42

    def test_shared_handler_is_error_handler_instance(self):
        assert isinstance(error_handler, ErrorHandler)


class TestLogging:
    """JSON логирование."""

    def test_json_formatter_serializes_decimal_extra(self):
        record = logging.LogRecord("money_tracker.test", logging.INFO, __file__, 1, "Баланс изменён", None, None)
        record.delta = Decimal("-150.00")

        data = json.loads(JsonFormatter().format(record))

        assert data["message"] == "Баланс изменён"
        assert data["level"] == "INFO"
        assert data["delta"] == "-150.00"

    def test_setup_logging_creates_session_file(self, tmp_path):
        root_logger = logging.getLogger()
        previous_handlers = list(root_logger.handlers)
        previous_level = root_logger.level

        try:
            log_path = setup_logging(str(tmp_path / "logs" / "app.log"), level="DEBUG")
            logging.getLogger("money_tracker.test").info("проверка")
            for handler in root_logger.handlers:
                handler.flush()

            assert log_path.parent == tmp_path / "logs"
            assert log_path.name.startswith("app_")
            lines = log_path.read_text(encoding="utf-8").splitlines()
            assert any(json.loads(line)["message"] == "проверка" for line in lines)
        finally:
            for handler in list(root_logger.handlers):
                root_logger.removeHandler(handler)
                handler.close()
            for handler in previous_handlers:
                root_logger.addHandler(handler)
            root_logger.setLevel(previous_level)
