"""
Модуль моделей данных для Money Tracker.

Содержит определения моделей:
- AccountDB, CategoryDB, TransactionDB: SQLAlchemy модели для хранения в базе данных
- AccountCreate/AccountUpdate/Account: Pydantic модели счетов
- CategoryCreate/CategoryUpdate/Category: Pydantic модели категорий
- TransactionCreate/TransactionUpdate/Transaction: Pydantic модели транзакций
- InstallmentRequest/InstallmentResult: запрос и результат разбивки на рассрочку
- BalanceSummary, ReportGroup, ReportResult, BudgetSummary, BudgetTotals, ForecastPoint: производные модели

Все денежные суммы представлены Decimal с двумя знаками после запятой.
Знак суммы транзакции определяется её типом (расход <= 0, доход >= 0)
и выставляется один раз при валидации входных данных.
"""

from datetime import datetime
from datetime import date as date_type
from typing import List, Optional
from decimal import Decimal
import uuid

from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, Enum as SQLEnum, Boolean, Index
from sqlalchemy.orm import relationship, DeclarativeBase
from pydantic import BaseModel, field_validator, model_validator, Field, ConfigDict

from .enums import (
    TransactionType, AccountType, RecurringPeriod, PaymentStatus,
    ReportType, ReportGroupBy
)
from money_tracker.utils.validation import normalize_optional_id, to_money

# Название счёта для транзакций без счёта или с удалённым счётом
NO_ACCOUNT_NAME = "Счёт не указан"


# Декларативная база для SQLAlchemy моделей
class Base(DeclarativeBase):
    """Базовый класс для всех SQLAlchemy моделей."""
    pass


class AccountDB(Base):
    """
    Счёт пользователя (карта, наличные, вклад и т.д.).

    Attributes:
        id: Уникальный идентификатор счёта (UUID)
        user_id: Владелец счёта
        name: Название счёта
        type: Тип счёта
        balance: Кэшированный баланс (начальный баланс + сумма транзакций счёта)
        color: Цвет для отображения (опционально)
        created_at: Дата создания записи
        updated_at: Дата последнего обновления
    """
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String(64), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(SQLEnum(AccountType), nullable=False, default=AccountType.CHECKING)
    balance = Column(Numeric(14, 2), nullable=False, default=Decimal('0.00'))
    color = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class CategoryDB(Base):
    """
    Категория транзакций.

    Транзакции ссылаются на категорию по названию (свободный текст),
    поэтому удаление категории не затрагивает транзакции.
    Уникальность названия в рамках владельца проверяется сервисом, а не БД.

    Attributes:
        id: Уникальный идентификатор категории (UUID)
        user_id: Владелец категории
        name: Название категории
        color: Цвет для отображения
        icon: Иконка (опционально)
        is_default: Признак предустановленной категории
        created_at: Дата создания категории
    """
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String(64), nullable=False)
    name = Column(String, nullable=False)
    color = Column(String, nullable=False, default="#9E9E9E")
    icon = Column(String, nullable=True)
    is_default = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.now)

    __table_args__ = (
        Index('ix_categories_user_id_name', 'user_id', 'name'),
    )


class TransactionDB(Base):
    """
    Финансовая транзакция (доход или расход).

    account_id не является внешним ключом: транзакции удалённого счёта
    остаются со "висячей" ссылкой, каскадного удаления нет.

    Attributes:
        id: Уникальный идентификатор транзакции (UUID)
        user_id: Владелец транзакции
        description: Описание
        amount: Сумма со знаком (отрицательная для расходов)
        date: Дата транзакции
        type: Тип транзакции (доход или расход)
        category: Название категории (свободный текст)
        account_id: Ссылка на счёт (опционально)
        is_recurring: Признак регулярной транзакции (только информационный)
        recurring_period: Период повторения
        installment_current: Номер платежа рассрочки
        installment_total: Всего платежей в рассрочке
        due_date: Срок оплаты
        payment_status: Статус оплаты
        created_at: Дата создания записи
        updated_at: Дата последнего обновления

    Properties:
        account_name: Название счёта для отображения
        account_color: Цвет счёта для отображения
    """
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id = Column(String(64), nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    date = Column(Date, nullable=False)
    type = Column(SQLEnum(TransactionType), nullable=False)
    category = Column(String, nullable=True)
    account_id = Column(String(36), nullable=True, index=True)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_period = Column(SQLEnum(RecurringPeriod), nullable=True)
    installment_current = Column(Integer, nullable=True)
    installment_total = Column(Integer, nullable=True)
    due_date = Column(Date, nullable=True)
    payment_status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Только для чтения: счёт может быть удалён
    account = relationship(
        "AccountDB",
        primaryjoin="foreign(TransactionDB.account_id) == AccountDB.id",
        viewonly=True,
    )

    # Индексы для быстрого поиска
    __table_args__ = (
        Index('ix_transactions_user_id_date', 'user_id', 'date'),
        Index('ix_transactions_user_id_type_date', 'user_id', 'type', 'date'),
    )

    @property
    def account_name(self) -> str:
        """
        Название счёта транзакции.

        Returns:
            Название счёта или NO_ACCOUNT_NAME, если счёт не указан,
            удалён или принадлежит другому владельцу
        """
        if self.account is not None and self.account.user_id == self.user_id:
            return self.account.name
        return NO_ACCOUNT_NAME

    @property
    def account_color(self) -> Optional[str]:
        """Цвет счёта транзакции (None, если счёт недоступен)."""
        if self.account is not None and self.account.user_id == self.user_id:
            return self.account.color
        return None


# =============================================================================
# Правила нормализации входных данных
# =============================================================================

def signed_amount(transaction_type: TransactionType, amount: Decimal) -> Decimal:
    """
    Возвращает сумму со знаком, соответствующим типу транзакции.

    Расходы всегда <= 0, доходы всегда >= 0. Исходный знак игнорируется.

    Example:
        >>> signed_amount(TransactionType.EXPENSE, Decimal('150.00'))
        Decimal('-150.00')
        >>> signed_amount(TransactionType.INCOME, Decimal('-20'))
        Decimal('20')
    """
    magnitude = abs(amount)
    if TransactionType(transaction_type) == TransactionType.EXPENSE:
        return -magnitude
    return magnitude


def _clean_text(v: Optional[str], field_name: str) -> str:
    if v is None or not v.strip():
        raise ValueError(f'Поле {field_name} не может быть пустым')
    return v.strip()


def _clean_optional_text(v: Optional[str]) -> Optional[str]:
    if v is None or not v.strip():
        return None
    return v.strip()


def _check_amount(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is None:
        return v
    if v == Decimal('0'):
        raise ValueError('Сумма должна быть отличной от нуля')
    return to_money(v)


# =============================================================================
# Pydantic модели счетов
# =============================================================================

class AccountCreate(BaseModel):
    """
    Pydantic модель для создания счёта.

    Начальный баланс задаётся только при создании; в дальнейшем баланс
    изменяется исключительно при добавлении, изменении и удалении транзакций.

    Attributes:
        name: Название счёта (не может быть пустым)
        type: Тип счёта
        balance: Начальный баланс
        color: Цвет для отображения
    """
    name: str
    type: AccountType = AccountType.CHECKING
    balance: Decimal = Field(default=Decimal('0.00'), max_digits=14, decimal_places=2)
    color: Optional[str] = None

    @field_validator('name')
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return _clean_text(v, 'name')


class AccountUpdate(BaseModel):
    """
    Pydantic модель для обновления метаданных счёта.

    Баланс изменить нельзя: поле balance отклоняется как лишнее.
    """
    name: Optional[str] = None
    type: Optional[AccountType] = None
    color: Optional[str] = None

    model_config = ConfigDict(extra='forbid')

    @field_validator('name')
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _clean_text(v, 'name')


class Account(AccountCreate):
    """Pydantic модель для чтения счёта из базы данных."""
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Pydantic модели категорий
# =============================================================================

class CategoryCreate(BaseModel):
    """
    Pydantic модель для создания категории с валидацией.

    Attributes:
        name: Название категории (обрезается, не может быть пустым)
        color: Цвет категории
        icon: Иконка (опционально)
        is_default: Признак предустановленной категории
    """
    name: str = Field(description="Название категории")
    color: str = "#9E9E9E"
    icon: Optional[str] = None
    is_default: bool = False

    @field_validator('name')
    @classmethod
    def name_not_empty_and_trim(cls, v: str) -> str:
        """
        Проверяет, что название не пустое, и обрезает пробелы по краям.

        Example:
            >>> CategoryCreate(name="  Продукты  ").name
            'Продукты'
        """
        if not v or not v.strip():
            raise ValueError('Название категории не может быть пустым или состоять только из пробелов')
        return v.strip()


class CategoryUpdate(BaseModel):
    """Pydantic модель для обновления категории. Все поля опциональные."""
    name: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None

    @field_validator('name')
    @classmethod
    def name_not_empty_and_trim(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.strip():
            raise ValueError('Название категории не может быть пустым или состоять только из пробелов')
        return v.strip()


class Category(CategoryCreate):
    """Pydantic модель для чтения категории из БД."""
    id: str
    user_id: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Pydantic модели транзакций
# =============================================================================

class TransactionCreate(BaseModel):
    """
    Pydantic модель для создания транзакции с валидацией.

    Обеспечивает на границе ввода:
    - Сумма парсится в Decimal (строки допустимы), не равна нулю, 2 знака
    - Знак суммы выставляется по типу (расход <= 0, доход >= 0)
    - Пустой account_id ("" или None) превращается в None, иначе проверяется UUID
    - Пустая категория превращается в None
    - Для регулярной транзакции обязателен период; без флага период сбрасывается
    - Номер платежа рассрочки задаётся только вместе с общим числом платежей

    Attributes:
        description: Описание транзакции
        amount: Сумма (знак определяется типом)
        type: Тип транзакции
        date: Дата транзакции (по умолчанию сегодня)
        category: Название категории
        account_id: ID счёта (UUID) или None
        is_recurring: Признак регулярной транзакции
        recurring_period: Период повторения
        installment_current: Номер платежа рассрочки (1..installment_total)
        installment_total: Общее число платежей (>= 2)
        due_date: Срок оплаты
        payment_status: Статус оплаты
    """
    description: str
    amount: Decimal = Field(max_digits=14, decimal_places=2)
    type: TransactionType
    date: date_type = Field(default_factory=date_type.today)
    category: Optional[str] = None
    account_id: Optional[str] = None
    is_recurring: bool = False
    recurring_period: Optional[RecurringPeriod] = None
    installment_current: Optional[int] = Field(None, ge=1)
    installment_total: Optional[int] = Field(None, ge=2)
    due_date: Optional[date_type] = None
    payment_status: PaymentStatus = PaymentStatus.PENDING

    @field_validator('description')
    @classmethod
    def description_not_empty(cls, v: str) -> str:
        return _clean_text(v, 'description')

    @field_validator('amount')
    @classmethod
    def amount_not_zero(cls, v: Decimal) -> Decimal:
        return _check_amount(v)

    @field_validator('category')
    @classmethod
    def clean_category(cls, v: Optional[str]) -> Optional[str]:
        return _clean_optional_text(v)

    @field_validator('account_id')
    @classmethod
    def clean_account_id(cls, v: Optional[str]) -> Optional[str]:
        return normalize_optional_id(v, "account_id")

    @model_validator(mode='after')
    def check_consistency(self) -> 'TransactionCreate':
        """Согласует знак суммы с типом и проверяет рассрочку и повторение."""
        self.amount = signed_amount(self.type, self.amount)

        if not self.is_recurring:
            self.recurring_period = None
        elif self.recurring_period is None:
            raise ValueError('Для регулярной транзакции необходимо указать период повторения')

        if self.installment_current is not None:
            if self.installment_total is None:
                raise ValueError('Номер платежа рассрочки указан без общего числа платежей')
            if self.installment_current > self.installment_total:
                raise ValueError(
                    f'Номер платежа {self.installment_current} больше '
                    f'общего числа платежей {self.installment_total}'
                )
        return self


class TransactionUpdate(BaseModel):
    """
    Pydantic модель для обновления транзакции.

    Все поля опциональные - обновляются только переданные.
    Явно переданный account_id=None (или "") отвязывает транзакцию от счёта.
    """
    description: Optional[str] = None
    amount: Optional[Decimal] = Field(None, max_digits=14, decimal_places=2)
    type: Optional[TransactionType] = None
    date: Optional[date_type] = None
    category: Optional[str] = None
    account_id: Optional[str] = None
    is_recurring: Optional[bool] = None
    recurring_period: Optional[RecurringPeriod] = None
    due_date: Optional[date_type] = None
    payment_status: Optional[PaymentStatus] = None

    @field_validator('description')
    @classmethod
    def description_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _clean_text(v, 'description')

    @field_validator('amount')
    @classmethod
    def amount_not_zero(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _check_amount(v)

    @field_validator('category')
    @classmethod
    def clean_category(cls, v: Optional[str]) -> Optional[str]:
        return _clean_optional_text(v)

    @field_validator('account_id')
    @classmethod
    def clean_account_id(cls, v: Optional[str]) -> Optional[str]:
        return normalize_optional_id(v, "account_id")

    @field_validator('description', 'amount', 'type', 'date', 'is_recurring', 'payment_status', mode='before')
    @classmethod
    def not_explicit_null(cls, v):
        """Обязательные в БД поля нельзя сбросить в None."""
        if v is None:
            raise ValueError('Поле не может быть сброшено в пустое значение')
        return v


class Transaction(TransactionCreate):
    """
    Pydantic модель для чтения транзакции из базы данных.

    Добавляет генерируемые поля и данные счёта для отображения.
    """
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime
    account_name: str = NO_ACCOUNT_NAME
    account_color: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# Рассрочка
# =============================================================================

class InstallmentRequest(BaseModel):
    """
    Запрос на разбивку покупки на ежемесячные платежи.

    Attributes:
        description: Описание покупки
        amount: Общая сумма покупки (знак определяется типом)
        type: Тип транзакций
        start_date: Дата первого платежа
        installment_total: Количество платежей (>= 2)
        category: Категория
        account_id: Счёт
        payment_status: Статус оплаты для всех платежей
    """
    description: str
    amount: Decimal = Field(max_digits=14, decimal_places=2)
    type: TransactionType = TransactionType.EXPENSE
    start_date: date_type
    installment_total: int = Field(ge=2, le=600)
    category: Optional[str] = None
    account_id: Optional[str] = None
    payment_status: PaymentStatus = PaymentStatus.PENDING

    @field_validator('description')
    @classmethod
    def description_not_empty(cls, v: str) -> str:
        return _clean_text(v, 'description')

    @field_validator('amount')
    @classmethod
    def amount_not_zero(cls, v: Decimal) -> Decimal:
        return _check_amount(v)

    @field_validator('category')
    @classmethod
    def clean_category(cls, v: Optional[str]) -> Optional[str]:
        return _clean_optional_text(v)

    @field_validator('account_id')
    @classmethod
    def clean_account_id(cls, v: Optional[str]) -> Optional[str]:
        return normalize_optional_id(v, "account_id")

    @model_validator(mode='after')
    def amount_covers_installments(self) -> 'InstallmentRequest':
        """Каждый платёж должен быть не меньше одной копейки."""
        if abs(self.amount) < Decimal('0.01') * self.installment_total:
            raise ValueError(
                f'Сумма {self.amount} слишком мала для {self.installment_total} платежей'
            )
        return self


class InstallmentResult(BaseModel):
    """
    Результат создания платежей рассрочки.

    Attributes:
        success_count: Сколько платежей удалось сохранить
        total: Сколько платежей запрошено
        transactions: Сохранённые платежи в порядке возрастания номера
    """
    success_count: int
    total: int
    transactions: List[Transaction] = Field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return self.success_count == self.total

    @property
    def message(self) -> str:
        """Сообщение для пользователя: 'k из N платежей добавлено'."""
        return f"{self.success_count} из {self.total} платежей добавлено"


# =============================================================================
# Производные модели (не сохраняются)
# =============================================================================

class BalanceSummary(BaseModel):
    """
    Сводка баланса по загруженным транзакциям.

    Attributes:
        total_balance: Сумма всех транзакций со знаком
        income: Сумма доходов
        expenses: Сумма расходов (по модулю)
        pending_expenses: Расходы, ожидающие оплаты (по модулю)
        overdue_expenses: Просроченные расходы (по модулю)
    """
    total_balance: Decimal = Decimal('0.00')
    income: Decimal = Decimal('0.00')
    expenses: Decimal = Decimal('0.00')
    pending_expenses: Decimal = Decimal('0.00')
    overdue_expenses: Decimal = Decimal('0.00')


class ReportGroup(BaseModel):
    """Группа отчёта: ключ, сумма со знаком и количество транзакций."""
    key: str
    total_amount: Decimal
    count: int


class ReportResult(BaseModel):
    """
    Результат построения отчёта.

    Attributes:
        type: Фильтр по типу
        start_date: Начало периода (включительно)
        end_date: Конец периода (включительно)
        group_by: Измерение группировки
        groups: Группы с суммами
        transactions: Исходные транзакции, попавшие в отчёт
    """
    type: ReportType
    start_date: date_type
    end_date: date_type
    group_by: ReportGroupBy
    groups: List[ReportGroup] = Field(default_factory=list)
    transactions: List[Transaction] = Field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        return sum((g.total_amount for g in self.groups), Decimal('0.00'))


class BudgetSummary(BaseModel):
    """
    Исполнение бюджета категории за месяц.

    Attributes:
        category: Категория
        allocated: Запланированная сумма
        spent: Потрачено (по модулю)
        remaining: Остаток (может быть отрицательным)
        percentage: Процент исполнения (не более 100)
    """
    category: str
    allocated: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: int


class ForecastPoint(BaseModel):
    """Точка прогноза баланса на конкретный день."""
    date: date_type
    balance: Decimal


class BudgetTotals(BaseModel):
    """Итог по всем бюджетам месяца (процент не ограничивается 100)."""
    allocated: Decimal = Decimal('0.00')
    spent: Decimal = Decimal('0.00')
    remaining: Decimal = Decimal('0.00')
    percentage: int = 0
