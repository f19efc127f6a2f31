"""Разбор редактируемого текста на знак и цифровые группы."""

from dataclasses import dataclass

from maxlength.core.domain.limit_spec import LimitSpec
from maxlength.core.domain.number_format import DIGITS, MINUS, NumberFormat


@dataclass(frozen=True)
class DigitRuns:
    """Знак, целая и дробная группы редактируемого значения."""

    has_minus: bool
    integral: str
    fractional: str | None  # None ⇒ разделителя нет
    separator_index: int  # позиция разделителя в исходном тексте, -1 если нет

    @property
    def has_separator(self) -> bool:
        return self.fractional is not None

    @property
    def digit_count(self) -> int:
        return len(self.integral) + len(self.fractional or "")


def split_runs(text: str, number_format: NumberFormat) -> DigitRuns:
    """
    Разбор текста вида [-]INTEGRAL[SEP FRACTIONAL].

    Examples:
        >>> split_runs("-12.34", NUMBER_FORMATS[NumberFormatStandard.ISO])
        DigitRuns(has_minus=True, integral='12', fractional='34', separator_index=3)
    """
    has_minus = text.startswith(MINUS)
    body = text[1:] if has_minus else text
    separator_index = text.find(number_format.decimal)
    if separator_index == -1:
        return DigitRuns(has_minus, body, None, -1)
    integral, _, fractional = body.partition(number_format.decimal)
    return DigitRuns(has_minus, integral, fractional, separator_index)


def check_well_formed(text: str, spec: LimitSpec, number_format: NumberFormat) -> tuple[bool, str]:
    """
    Проверка синтаксиса и бюджета редактируемого значения.

    Допустимо: цифры, не более одного разделителя (если дробь разрешена),
    не более одного знака и только в позиции 0 (если знак разрешён),
    группы не длиннее бюджета.

    Returns:
        (is_valid, error_message)
    """
    for index, char in enumerate(text):
        if char in DIGITS:
            continue
        if char == MINUS:
            if not spec.allow_minus:
                return False, "minus_not_allowed"
            if index != 0:
                return False, f"minus_at_position_{index}"
            continue
        if char == number_format.decimal:
            if not spec.allows_fraction:
                return False, "separator_not_allowed"
            continue
        return False, f"invalid_character: {char!r}"

    if text.count(number_format.decimal) > 1:
        return False, "duplicate_separator"

    runs = split_runs(text, number_format)
    if len(runs.integral) > spec.integral_digits:
        return False, f"integral_overflow: {len(runs.integral)} > {spec.integral_digits}"
    if runs.fractional and len(runs.fractional) > (spec.fractional_digits or 0):
        return False, f"fractional_overflow: {len(runs.fractional)} > {spec.fractional_digits}"
    return True, ""
