"""
Модуль кэширования данных приложения.
Хранит часто запрашиваемые справочники (категории) в памяти отдельно для каждого владельца.
"""

import logging
from typing import Dict, List, Optional, TypeVar, Generic
from threading import Lock

logger = logging.getLogger(__name__)

T = TypeVar('T')


class CacheStore(Generic[T]):
    """Хранилище кэша списков элементов, разделённое по владельцам."""

    def __init__(self, name: str):
        self.name = name
        self._lists: Dict[str, List[T]] = {}
        self._lock = Lock()

    def get_all(self, owner_id: str) -> Optional[List[T]]:
        """Список элементов владельца или None, если кэш пуст."""
        with self._lock:
            items = self._lists.get(owner_id)
            return list(items) if items is not None else None

    def set_all(self, owner_id: str, items: List[T]) -> None:
        """Сохранение списка элементов владельца."""
        with self._lock:
            self._lists[owner_id] = list(items)

    def invalidate(self, owner_id: Optional[str] = None) -> None:
        """Сброс кэша владельца (или всего кэша, если владелец не указан)."""
        with self._lock:
            if owner_id is None:
                self._lists.clear()
            else:
                self._lists.pop(owner_id, None)
        logger.debug(f"Кэш '{self.name}' сброшен (владелец: {owner_id or 'все'})")


class AppCache:
    """Глобальный менеджер кэша приложения."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(AppCache, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True

        self.categories: CacheStore = CacheStore("categories")

    def clear_all(self) -> None:
        """Очистка всех кэшей."""
        self.categories.invalidate()


# Глобальный экземпляр кэша
cache = AppCache()
