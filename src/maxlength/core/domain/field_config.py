"""
FieldConfig — Конфигурация числового поля

Immutable Pydantic модели, построенные из атрибутов поля
(data-max-length, data-disable-*, data-highlight-minus, data-horizontal-align,
data-sum / data-product / data-difference / data-quotient / data-percent,
data-ceil / data-floor).

Атрибут считается включённым, если он присутствует (значение может быть None).
"""

from enum import Enum
from typing import Any, Final, Mapping

from pydantic import BaseModel, Field, field_validator, model_validator

from maxlength.core.domain.limit_spec import LimitSpec, resolve_limit_spec


# =============================================================================
# ATTRIBUTE NAMES
# =============================================================================

ATTR_MAX_LENGTH: Final[str] = "data-max-length"
ATTR_DISABLE_INIT_REFRESH: Final[str] = "data-disable-init-refresh"
ATTR_DISABLE_AUTOFILL: Final[str] = "data-disable-autofill"
ATTR_DISABLE_AUTO_COMMA: Final[str] = "data-disable-auto-comma"
ATTR_DISABLE_SMART_MINUS: Final[str] = "data-disable-smart-minus"
ATTR_HIGHLIGHT_MINUS: Final[str] = "data-highlight-minus"
ATTR_HORIZONTAL_ALIGN: Final[str] = "data-horizontal-align"
ATTR_CEIL: Final[str] = "data-ceil"
ATTR_FLOOR: Final[str] = "data-floor"
ATTR_NAME: Final[str] = "name"


# =============================================================================
# ENUMS
# =============================================================================


class DerivedOperation(str, Enum):
    """Операция вычисляемого поля"""

    SUM = "sum"
    PRODUCT = "product"
    DIFFERENCE = "difference"
    QUOTIENT = "quotient"
    PERCENT = "percent"

    @property
    def attribute(self) -> str:
        return f"data-{self.value}"

    @property
    def requires_pair(self) -> bool:
        """difference / quotient / percent работают ровно с двумя селекторами."""
        return self in (DerivedOperation.DIFFERENCE, DerivedOperation.QUOTIENT, DerivedOperation.PERCENT)


class RoundingMode(str, Enum):
    """Режим округления результата вычисляемого поля"""

    ROUND = "round"
    FLOOR = "floor"
    CEIL = "ceil"


class HorizontalAlign(str, Enum):
    """Выравнивание текста поля"""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    INHERIT = "inherit"


# =============================================================================
# DERIVED FIELD BINDING
# =============================================================================


class DerivedFieldBinding(BaseModel):
    """
    Привязка вычисляемого поля к полям-источникам.

    Кардинальность первого селектора (ровно один элемент) проверяется
    DerivedFieldEvaluator при подключении, так как требует поиска элементов.
    """

    target_field_id: str = Field(..., min_length=1, description="Поле, получающее результат")
    operation: DerivedOperation = Field(..., description="Арифметическая операция")
    source_selectors: tuple[str, ...] = Field(..., min_length=1, description="Селекторы источников")
    rounding_mode: RoundingMode = Field(RoundingMode.ROUND, description="Режим округления")

    model_config = {"frozen": True}

    @field_validator("source_selectors")
    @classmethod
    def strip_selectors(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(selector.strip() for selector in v)

    @classmethod
    def from_descriptor(
        cls,
        target_field_id: str,
        operation: DerivedOperation,
        descriptor: str,
        rounding_mode: RoundingMode = RoundingMode.ROUND,
    ) -> "DerivedFieldBinding":
        """
        Построение привязки из значения атрибута.

        sum / product: весь дескриптор — один селектор (может содержать запятые).
        difference / quotient / percent: селекторы разделены запятой.
        """
        if operation.requires_pair:
            selectors = tuple(descriptor.split(","))
        else:
            selectors = (descriptor,)
        return cls(
            target_field_id=target_field_id,
            operation=operation,
            source_selectors=selectors,
            rounding_mode=rounding_mode,
        )


# =============================================================================
# FIELD CONFIG
# =============================================================================


class FieldConfig(BaseModel):
    """
    Полная конфигурация поля.

    Immutable модель (frozen=True).
    """

    field_id: str = Field(..., min_length=1, description="Стабильный идентификатор поля")
    name: str | None = Field(None, description="Имя группы (атрибут name)")
    is_number_field: bool = Field(True, description="Есть ли атрибут data-max-length")
    max_length: str | None = Field(None, description="Исходный дескриптор data-max-length")

    autofill: bool = Field(True, description="Дополнять дробную часть нулями при blur")
    auto_comma: bool = Field(True, description="Группировка разрядов при blur")
    smart_minus: bool = Field(True, description="Клавиша минус переключает знак всего значения")
    init_refresh: bool = Field(True, description="Settle при инициализации")

    highlight_minus: bool = Field(False, description="Подсветка отрицательных значений")
    highlight_color: str | None = Field(None, description="Сырой цвет подсветки")
    horizontal_align: str | None = Field(None, description="Сырое значение выравнивания")

    derived: tuple[DerivedFieldBinding, ...] = Field(default=(), description="Вычисляемые привязки")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_derived_targets(self) -> "FieldConfig":
        """Все привязки должны указывать на это же поле."""
        for binding in self.derived:
            if binding.target_field_id != self.field_id:
                raise ValueError(
                    f"derived binding target {binding.target_field_id!r} != field_id {self.field_id!r}"
                )
        return self

    @property
    def limit_spec(self) -> LimitSpec:
        return resolve_limit_spec(self.max_length)

    @classmethod
    def from_attributes(cls, field_id: str, attributes: Mapping[str, Any]) -> "FieldConfig":
        """
        Построение конфигурации из атрибутов поля.

        Args:
            field_id: Идентификатор поля
            attributes: Атрибуты; присутствие ключа = флаг включён

        Returns:
            FieldConfig
        """
        if ATTR_CEIL in attributes:
            rounding_mode = RoundingMode.CEIL
        elif ATTR_FLOOR in attributes:
            rounding_mode = RoundingMode.FLOOR
        else:
            rounding_mode = RoundingMode.ROUND

        derived = tuple(
            DerivedFieldBinding.from_descriptor(
                field_id, operation, attributes[operation.attribute] or "", rounding_mode
            )
            for operation in DerivedOperation
            if operation.attribute in attributes
        )

        return cls(
            field_id=field_id,
            name=attributes.get(ATTR_NAME),
            is_number_field=ATTR_MAX_LENGTH in attributes,
            max_length=attributes.get(ATTR_MAX_LENGTH),
            autofill=ATTR_DISABLE_AUTOFILL not in attributes,
            auto_comma=ATTR_DISABLE_AUTO_COMMA not in attributes,
            smart_minus=ATTR_DISABLE_SMART_MINUS not in attributes,
            init_refresh=ATTR_DISABLE_INIT_REFRESH not in attributes,
            highlight_minus=ATTR_HIGHLIGHT_MINUS in attributes,
            highlight_color=attributes.get(ATTR_HIGHLIGHT_MINUS),
            horizontal_align=attributes.get(ATTR_HORIZONTAL_ALIGN),
            derived=derived,
        )
