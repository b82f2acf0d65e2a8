"""
Исключения учёта личных финансов.

ValidationError и BusinessLogicError показываются пользователю как есть,
DatabaseError заменяется общим сообщением в ErrorHandler.
"""


class MoneyTrackerError(Exception):
    """Общий предок ошибок приложения."""


class ValidationError(MoneyTrackerError):
    """Некорректный ввод: сумма, дата, идентификатор, период."""


class BusinessLogicError(MoneyTrackerError):
    """Операция допустима по формату, но запрещена правилами учёта."""


class DuplicateCategoryError(BusinessLogicError):
    """У владельца уже есть категория с таким названием."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Категория с названием '{name}' уже существует")


class DefaultCategoryError(BusinessLogicError):
    """Попытка удалить предустановленную категорию."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Невозможно удалить предустановленную категорию '{name}'")


class DatabaseError(MoneyTrackerError):
    """Сбой хранилища при чтении или записи."""
