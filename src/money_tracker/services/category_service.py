"""
Сервис управления категориями транзакций.

Предоставляет функции для работы со справочником категорий владельца:
- Получение списка категорий (с кэшированием по владельцу)
- Создание, изменение и удаление пользовательских категорий
- Создание предустановленных категорий при первом запуске

Транзакции ссылаются на категорию по названию, поэтому изменение
и удаление категории не затрагивают сохранённые транзакции.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from money_tracker.models import Category, CategoryCreate, CategoryDB, CategoryUpdate
from money_tracker.utils.cache import cache
from money_tracker.utils.error_handler import error_handler
from money_tracker.utils.exceptions import DatabaseError, DefaultCategoryError, DuplicateCategoryError
from money_tracker.utils.validation import validate_uuid_format

# Настройка логирования
logger = logging.getLogger(__name__)

# Предустановленные категории: название и цвет
DEFAULT_CATEGORIES = [
    ("Продукты", "#4CAF50"),
    ("Транспорт", "#2196F3"),
    ("Жильё", "#795548"),
    ("Развлечения", "#FF9800"),
    ("Здоровье", "#F44336"),
    ("Зарплата", "#009688"),
]


def _find_by_name(session: Session, owner_id: str, name: str) -> Optional[CategoryDB]:
    return session.query(CategoryDB).filter(
        CategoryDB.user_id == owner_id,
        CategoryDB.name == name
    ).first()


def get_categories(session: Session, owner_id: str) -> List[Category]:
    """
    Получает категории владельца, отсортированные по названию.
    Использует кэширование.

    Returns:
        Список категорий (пустой при ошибке или отсутствии владельца)
    """
    if not owner_id:
        logger.warning("Пользователь не определён, категории не загружены")
        return []

    categories = cache.categories.get_all(owner_id)
    if categories is not None:
        logger.debug("Категории получены из кэша")
        return categories

    try:
        rows = session.query(CategoryDB).filter(
            CategoryDB.user_id == owner_id
        ).order_by(CategoryDB.name).all()

        categories = [Category.model_validate(row) for row in rows]
        cache.categories.set_all(owner_id, categories)
        logger.info(f"Загружено {len(categories)} категорий из БД и сохранено в кэш")
        return categories

    except SQLAlchemyError as e:
        error_handler.handle(DatabaseError(str(e)), "Не удалось загрузить категории")
        return []


def get_category(session: Session, owner_id: str, category_id: str) -> Optional[CategoryDB]:
    """Получает категорию владельца по ID (None, если не найдена)."""
    if not owner_id:
        return None

    validate_uuid_format(category_id, "category_id")

    try:
        return session.query(CategoryDB).filter(
            CategoryDB.id == category_id,
            CategoryDB.user_id == owner_id
        ).first()

    except SQLAlchemyError as e:
        error_handler.handle(DatabaseError(str(e)), "Не удалось загрузить категорию")
        return None


def create_category(session: Session, owner_id: str, category: CategoryCreate) -> Optional[CategoryDB]:
    """
    Создаёт категорию владельца.
    Инвалидирует кэш категорий владельца.

    Raises:
        DuplicateCategoryError: Если у владельца уже есть категория с таким названием
    """
    if not owner_id:
        logger.warning("Пользователь не определён, категория не создана")
        return None

    try:
        if _find_by_name(session, owner_id, category.name):
            raise DuplicateCategoryError(category.name)

        db_category = CategoryDB(user_id=owner_id, **category.model_dump())
        session.add(db_category)
        session.commit()
        session.refresh(db_category)

        cache.categories.invalidate(owner_id)

        logger.info(f"Создана категория '{db_category.name}' с ID {db_category.id}")
        return db_category

    except SQLAlchemyError as e:
        session.rollback()
        error_handler.handle(DatabaseError(str(e)), "Не удалось добавить категорию")
        return None


def update_category(
    session: Session,
    owner_id: str,
    category_id: str,
    category_update: CategoryUpdate
) -> Optional[CategoryDB]:
    """
    Обновляет название, цвет или иконку категории.
    Инвалидирует кэш категорий владельца.

    Returns:
        Обновлённая категория или None, если категория не найдена

    Raises:
        DuplicateCategoryError: Если новое название уже занято другой категорией владельца
    """
    db_category = get_category(session, owner_id, category_id)
    if db_category is None:
        logger.warning(f"Категория с ID {category_id} не найдена")
        return None

    update_data = category_update.model_dump(exclude_unset=True)

    try:
        new_name = update_data.get("name")
        if new_name and new_name != db_category.name:
            existing = _find_by_name(session, owner_id, new_name)
            if existing is not None and existing.id != db_category.id:
                raise DuplicateCategoryError(new_name)

        for key, value in update_data.items():
            if key == "name" and value is None:
                continue
            setattr(db_category, key, value)

        session.commit()
        session.refresh(db_category)

        cache.categories.invalidate(owner_id)

        logger.info(f"Категория {category_id} обновлена: {list(update_data)}")
        return db_category

    except SQLAlchemyError as e:
        session.rollback()
        error_handler.handle(DatabaseError(str(e)), "Не удалось обновить категорию")
        return None


def delete_category(session: Session, owner_id: str, category_id: str) -> bool:
    """
    Удаляет пользовательскую категорию.
    Инвалидирует кэш категорий владельца.

    Raises:
        DefaultCategoryError: Если категория предустановленная
    """
    db_category = get_category(session, owner_id, category_id)
    if db_category is None:
        logger.warning(f"Категория с ID {category_id} не найдена")
        return False

    if db_category.is_default:
        raise DefaultCategoryError(db_category.name)

    try:
        category_name = db_category.name
        session.delete(db_category)
        session.commit()

        cache.categories.invalidate(owner_id)

        logger.info(f"Удалена категория '{category_name}' (ID {category_id})")
        return True

    except SQLAlchemyError as e:
        session.rollback()
        error_handler.handle(DatabaseError(str(e)), "Не удалось удалить категорию")
        return False


def ensure_default_categories(session: Session, owner_id: str) -> int:
    """
    Создаёт предустановленные категории владельца, которых ещё нет.

    Функция идемпотентна: существующие категории не дублируются.

    Returns:
        Количество созданных категорий
    """
    if not owner_id:
        return 0

    try:
        created_count = 0
        for name, color in DEFAULT_CATEGORIES:
            if _find_by_name(session, owner_id, name) is None:
                session.add(CategoryDB(user_id=owner_id, name=name, color=color, is_default=True))
                created_count += 1
                logger.debug(f"Создана категория: {name}")

        if created_count > 0:
            session.commit()
            cache.categories.invalidate(owner_id)
            logger.info(f"Инициализировано {created_count} предустановленных категорий")
        else:
            logger.info("Предустановленные категории уже существуют")

        return created_count

    except SQLAlchemyError as e:
        session.rollback()
        error_handler.handle(DatabaseError(str(e)), "Не удалось создать предустановленные категории")
        return 0
