"""
NumberFormat — Соглашения о разделителях

Поддерживаются ровно три стандарта:
- ISO: десятичная точка, группировка пробелом ("1 234.56")
- EN: десятичная точка, группировка запятой ("1,234.56")
- ES: десятичная запятая, группировка точкой ("1.234,56")

Стандарт выбирается внешним сигналом локали и может быть переопределён
во время работы (см. NumberFieldContext.set_number_format_standard).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final

from maxlength.core.exceptions import UnknownNumberFormatError

# Каноническая десятичная точка (внутреннее представление чисел)
CANONICAL_DECIMAL: Final[str] = "."

MINUS: Final[str] = "-"
ZERO: Final[str] = "0"
DIGITS: Final[str] = "0123456789"

# Коды клавиш десятичного разделителя
DOT_KEY_CODES: Final[tuple[int, ...]] = (110, 190)
COMMA_KEY_CODES: Final[tuple[int, ...]] = (188,)


class NumberFormatStandard(str, Enum):
    """Стандарт формата чисел"""

    ISO = "ISO"
    EN = "EN"
    ES = "ES"


@dataclass(frozen=True)
class NumberFormat:
    """Разделители и клавиша разделителя для одного стандарта."""

    standard: NumberFormatStandard
    decimal: str
    grouping: str
    separator_key_codes: tuple[int, ...]

    def to_canonical(self, text: str) -> str:
        """Перевод десятичного разделителя в каноническую точку."""
        if self.decimal == CANONICAL_DECIMAL:
            return text
        return text.replace(self.decimal, CANONICAL_DECIMAL)

    def from_canonical(self, text: str) -> str:
        """Перевод канонической точки в разделитель стандарта."""
        if self.decimal == CANONICAL_DECIMAL:
            return text
        return text.replace(CANONICAL_DECIMAL, self.decimal)


NUMBER_FORMATS: Final[dict[NumberFormatStandard, NumberFormat]] = {
    NumberFormatStandard.ISO: NumberFormat(NumberFormatStandard.ISO, ".", " ", DOT_KEY_CODES),
    NumberFormatStandard.EN: NumberFormat(NumberFormatStandard.EN, ".", ",", DOT_KEY_CODES),
    NumberFormatStandard.ES: NumberFormat(NumberFormatStandard.ES, ",", ".", COMMA_KEY_CODES),
}


def get_number_format(standard: "NumberFormatStandard | str") -> NumberFormat:
    """
    Поиск формата по стандарту (регистр не важен).

    Raises:
        UnknownNumberFormatError: Если стандарт не ISO/EN/ES
    """
    try:
        key = NumberFormatStandard(str(getattr(standard, "value", standard)).upper())
    except ValueError:
        raise UnknownNumberFormatError(str(standard)) from None
    return NUMBER_FORMATS[key]
