"""
Presentation Formatter — Каноническое отображение числовых значений

Все функции работают с текстом в формате NumberFormat и являются
тождественными на нечисловом вводе:
- drain_integral: убрать ведущие нули целой части (минимум одна цифра)
- drain_fractional: убрать хвостовые нули дроби (и разделитель, если дробь пуста)
- fill_fractional: дополнить дробь нулями ровно до n знаков
- dress_number / undress_number: расставить / снять группировку по 3 разряда

Жизненный цикл поля:
- focus: drain_fractional + undress (текст для редактирования)
- blur / init / после вычисления: settle = drain_integral + drain_fractional
  + fill_fractional + dress, и маркер знака (цвет)

ИНВАРИАНТЫ:
1. settle(settle(x)) == settle(x)
2. undress(dress(x)) == undress(x) для любого числового x
"""

import re
from dataclasses import dataclass
from typing import Final

from maxlength.core.domain.field_config import FieldConfig, HorizontalAlign
from maxlength.core.domain.limit_spec import LimitSpec
from maxlength.core.domain.number_format import MINUS, ZERO, NumberFormat
from maxlength.core.math.decimal_arithmetic import DecimalArithmetic

# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_HIGHLIGHT_COLOR: Final[str] = "#FF0000"
DEFAULT_HORIZONTAL_ALIGN: Final[HorizontalAlign] = HorizontalAlign.RIGHT

_HEX_COLOR_PATTERN: Final[re.Pattern[str]] = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")

# Цифра, за которой следует кратное трём число цифр до конца группы
_GROUPING_PATTERN: Final[re.Pattern[str]] = re.compile(r"([0-9])(?=([0-9]{3})+(?![0-9]))")


# =============================================================================
# STYLE
# =============================================================================


@dataclass(frozen=True)
class FieldStyle:
    """Стиль, который хост применяет к полю."""

    text_align: str
    # Цвет маркера отрицательного значения; None ⇒ маркер снят
    color: str | None


def resolve_alignment(raw: str | None, default: HorizontalAlign = DEFAULT_HORIZONTAL_ALIGN) -> HorizontalAlign:
    """Выравнивание из атрибута; неизвестное значение ⇒ default."""
    try:
        return HorizontalAlign(raw)
    except ValueError:
        return default


def resolve_highlight_color(raw: str | None, default: str = DEFAULT_HIGHLIGHT_COLOR) -> str:
    """
    Цвет маркера: 3/6-значный hex с "#" или без, иначе default.

    Examples:
        >>> resolve_highlight_color("0f0")
        '#0f0'
        >>> resolve_highlight_color(None)
        '#FF0000'
    """
    if not raw:
        return default
    color = raw if raw.startswith("#") else "#" + raw
    return color if _HEX_COLOR_PATTERN.match(color) else default


# =============================================================================
# FORMATTER
# =============================================================================


class PresentationFormatter:
    """Форматирование отображаемого текста числовых полей."""

    def __init__(
        self,
        number_format: NumberFormat,
        highlight_color: str = DEFAULT_HIGHLIGHT_COLOR,
        horizontal_align: HorizontalAlign = DEFAULT_HORIZONTAL_ALIGN,
    ):
        """
        Args:
            number_format: формат разделителей
            highlight_color: цвет маркера по умолчанию
            horizontal_align: выравнивание по умолчанию
        """
        self.number_format = number_format
        self.highlight_color = highlight_color
        self.horizontal_align = horizontal_align
        # Без разрешения ссылок: форматтер проверяет только литералы
        self._arithmetic = DecimalArithmetic(number_format)

    def is_number(self, value: str | None) -> bool:
        return self._arithmetic.mix_to_number(value) is not None

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    def drain_integral(self, value: str) -> str:
        """
        Examples (ISO):
            "007.50" → "7.50", "-.5" → "-0.5", "000" → "0", "0 012" → "12"
        """
        if not self.is_number(value):
            return value
        value = value.strip()
        has_minus = MINUS in value
        body = value.replace(MINUS, "", 1).lstrip(ZERO + self.number_format.grouping)
        if not body or body.startswith(self.number_format.decimal):
            body = ZERO + body
        return (MINUS if has_minus else "") + body

    def drain_fractional(self, value: str) -> str:
        """
        Examples (ISO):
            "7.500" → "7.5", "7.000" → "7", "7" → "7"
        """
        if not self.is_number(value):
            return value
        integral, _, fractional = value.strip().partition(self.number_format.decimal)
        fractional = fractional.rstrip(ZERO)
        return integral + (self.number_format.decimal + fractional if fractional else "")

    def fill_fractional(self, value: str, fractional_digits: int | None) -> str:
        """
        Examples (ISO):
            ("7.5", 3) → "7.500", ("7", 2) → "7.00", ("7.5", None) → "7.5"
        """
        if not fractional_digits or not self.is_number(value):
            return value
        integral, _, fractional = value.strip().partition(self.number_format.decimal)
        return integral + self.number_format.decimal + fractional.ljust(fractional_digits, ZERO)

    def dress_number(self, value: str) -> str:
        """
        Examples (EN):
            "1234567.891" → "1,234,567.891", "-1234" → "-1,234"
        """
        if not self.is_number(value):
            return value
        value = self.undress_number(value)
        integral, separator, fractional = value.partition(self.number_format.decimal)
        integral = _GROUPING_PATTERN.sub(r"\1" + self.number_format.grouping, integral)
        return integral + separator + fractional

    def undress_number(self, value: str) -> str:
        """
        Examples (ES):
            "1.234.567,89" → "1234567,89"
        """
        if not self.is_number(value):
            return value
        return value.strip().replace(self.number_format.grouping, "")

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def editing_text(self, value: str, config: FieldConfig) -> str:
        """Текст для редактирования (focus): без хвостовых нулей и группировки."""
        if config.autofill:
            value = self.drain_fractional(value)
        if config.auto_comma:
            value = self.undress_number(value)
        return value

    def settle(self, value: str, config: FieldConfig, spec: LimitSpec) -> str:
        """Каноническое отображение (blur / init / после вычисления)."""
        value = self.drain_integral(value)
        if config.autofill:
            value = self.drain_fractional(value)
            value = self.fill_fractional(value, spec.fractional_digits)
        if config.auto_comma:
            value = self.dress_number(value)
        return value

    def style(self, value: str, config: FieldConfig) -> FieldStyle:
        """Стиль поля: выравнивание и маркер отрицательного значения."""
        color = None
        if config.highlight_minus and MINUS in value:
            color = resolve_highlight_color(config.highlight_color, self.highlight_color)
        return FieldStyle(
            text_align=resolve_alignment(config.horizontal_align, self.horizontal_align).value,
            color=color,
        )
