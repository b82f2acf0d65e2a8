"""Утилиты приложения."""

from money_tracker.utils.logger import setup_logging, get_logger
from money_tracker.utils.cache import cache, AppCache, CacheStore
from money_tracker.utils.error_handler import ErrorHandler, error_handler, safe_handler, set_notifier
from money_tracker.utils.exceptions import (
    MoneyTrackerError,
    ValidationError,
    BusinessLogicError,
    DuplicateCategoryError,
    DefaultCategoryError,
    DatabaseError,
)
from money_tracker.utils.validation import validate_uuid_format, normalize_optional_id, to_money

__all__ = [
    "setup_logging",
    "get_logger",
    "cache",
    "AppCache",
    "CacheStore",
    "ErrorHandler",
    "error_handler",
    "safe_handler",
    "set_notifier",
    "MoneyTrackerError",
    "ValidationError",
    "BusinessLogicError",
    "DuplicateCategoryError",
    "DefaultCategoryError",
    "DatabaseError",
    "validate_uuid_format",
    "normalize_optional_id",
    "to_money",
]
