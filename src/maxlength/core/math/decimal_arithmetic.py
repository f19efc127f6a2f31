"""
Decimal Arithmetic — Точная арифметика над текстовыми десятичными числами

Модуль обеспечивает арифметику без дрейфа двоичной плавающей точки:
- Каждый операнд раскладывается на целую мантиссу и число десятичных знаков
- Операция выполняется над целыми мантиссами (Python int, без ограничений)
- Результат масштабируется обратно

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Операнды никогда не складываются/сравниваются как float
2. Нечисловой операнд никогда не поднимает исключение
   (sum/product пропускают его, product_notice_null подставляет 0)
3. Деление на ноль → 0 (результат идёт в живой UI)
4. sum("0.1", "0.2") == Decimal("0.3") точно

ФОРМУЛЫ:
    sum:      p = max(p_a, p_b);  (m_a·10^(p-p_a) + m_b·10^(p-p_b)) / 10^p
    product:  (m_a · m_b) / 10^(p_a + p_b)
    quotient: (m_a / m_b) / 10^(p_a - p_b)
    round:    R(value · 10^places) / 10^places
"""

import decimal
import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Final, Union

from maxlength.core.domain.field_config import RoundingMode
from maxlength.core.domain.number_format import CANONICAL_DECIMAL, NumberFormat

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# Значащие цифры частного (единственная операция с неточным результатом)
QUOTIENT_PRECISION: Final[int] = 34

# Глубина разрешения ссылок на элементы в mix_to_number
REFERENCE_RESOLUTION_DEPTH: Final[int] = 1

_QUOTIENT_CONTEXT: Final[decimal.Context] = decimal.Context(
    prec=QUOTIENT_PRECISION, rounding=decimal.ROUND_HALF_EVEN
)

_NUMBER_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)$")

ZERO: Final[Decimal] = Decimal(0)
ONE: Final[Decimal] = Decimal(1)

Operand = Union[Decimal, int, float, str, None]

# Чтение текущего значения элемента по ссылке (селектору)
ReferenceReader = Callable[[str], "str | None"]


# =============================================================================
# RESOLUTION RESULT
# =============================================================================


@dataclass(frozen=True)
class Resolved:
    """Операнд успешно разобран."""

    value: Decimal


@dataclass(frozen=True)
class Unresolved:
    """Операнд не является числом (и не ссылается на число)."""

    source: object
    reason: str


Resolution = Union[Resolved, Unresolved]


# =============================================================================
# SCALE-THEN-OPERATE PRIMITIVES
# =============================================================================


def decimal_places(value: Decimal) -> int:
    """
    Число десятичных знаков после точки.

    Examples:
        >>> decimal_places(Decimal("12.340"))
        3
        >>> decimal_places(Decimal("1E+2"))
        0
    """
    exponent = value.as_tuple().exponent
    if not isinstance(exponent, int):
        raise ValueError(f"non-finite Decimal: {value}")
    return max(0, -exponent)


def to_scaled(value: Decimal, places: int) -> int:
    """
    Целая мантисса value · 10^places (places >= decimal_places(value)).

    Examples:
        >>> to_scaled(Decimal("-1.25"), 3)
        -1250
    """
    sign, digits, exponent = value.as_tuple()
    if not isinstance(exponent, int):
        raise ValueError(f"non-finite Decimal: {value}")
    shift = exponent + places
    if shift < 0:
        raise ValueError(f"places {places} < decimal places of {value}")
    mantissa = int("".join(map(str, digits)) or "0") * 10**shift
    return -mantissa if sign else mantissa


def from_scaled(mantissa: int, places: int) -> Decimal:
    """
    Точное построение Decimal из мантиссы и числа знаков (без контекста).

    Examples:
        >>> from_scaled(-1250, 3)
        Decimal('-1.250')
    """
    digits = tuple(int(d) for d in str(abs(mantissa)))
    return Decimal((1 if mantissa < 0 else 0, digits, -places))


def core_sum(addend1: Decimal, addend2: Decimal) -> Decimal:
    """Точная сумма двух чисел."""
    places = max(decimal_places(addend1), decimal_places(addend2))
    return from_scaled(to_scaled(addend1, places) + to_scaled(addend2, places), places)


def core_product(factor1: Decimal, factor2: Decimal) -> Decimal:
    """Точное произведение двух чисел."""
    places1 = decimal_places(factor1)
    places2 = decimal_places(factor2)
    mantissa = to_scaled(factor1, places1) * to_scaled(factor2, places2)
    return from_scaled(mantissa, places1 + places2)


def core_quotient(dividend: Decimal, divisor: Decimal) -> Decimal:
    """
    Частное двух чисел (divisor != 0).

    Мантиссы делятся в контексте QUOTIENT_PRECISION, затем результат
    сдвигается на (places_dividend - places_divisor) знаков.
    """
    places1 = decimal_places(dividend)
    places2 = decimal_places(divisor)
    ratio = _QUOTIENT_CONTEXT.divide(
        Decimal(to_scaled(dividend, places1)), Decimal(to_scaled(divisor, places2))
    )
    return ratio.scaleb(places2 - places1, context=_QUOTIENT_CONTEXT)


def core_rounding(value: Decimal, places: int, mode: RoundingMode) -> Decimal:
    """
    Округление до places знаков над целой мантиссой.

    ROUND: половина от нуля (2.5 → 3, -2.5 → -3)
    FLOOR: к минус бесконечности
    CEIL: к плюс бесконечности

    Examples:
        >>> core_rounding(Decimal("1.005"), 2, RoundingMode.ROUND)
        Decimal('1.01')
        >>> core_rounding(Decimal("-1.001"), 2, RoundingMode.FLOOR)
        Decimal('-1.01')
    """
    value_places = decimal_places(value)
    if value_places <= places:
        return value

    mantissa = to_scaled(value, value_places)
    divisor = 10 ** (value_places - places)

    if mode == RoundingMode.FLOOR:
        rounded = mantissa // divisor
    elif mode == RoundingMode.CEIL:
        rounded = -((-mantissa) // divisor)
    else:
        quotient, remainder = divmod(abs(mantissa), divisor)
        if 2 * remainder >= divisor:
            quotient += 1
        rounded = -quotient if mantissa < 0 else quotient

    return from_scaled(rounded, places)


def to_plain_string(value: Decimal) -> str:
    """
    Каноническая строка без экспоненты и хвостовых нулей.

    Examples:
        >>> to_plain_string(Decimal("12.750"))
        '12.75'
        >>> to_plain_string(Decimal("1E+2"))
        '100'
        >>> to_plain_string(Decimal("-0.00"))
        '0'
    """
    if value == 0:
        return "0"
    text = format(value, "f")
    if CANONICAL_DECIMAL in text:
        text = text.rstrip("0").rstrip(CANONICAL_DECIMAL)
    return text


# =============================================================================
# ARITHMETIC ENGINE
# =============================================================================


class DecimalArithmetic:
    """
    Арифметический движок, привязанный к формату чисел.

    Принимает смешанные операнды (Decimal, int, float, строки в формате
    NumberFormat, ссылки на элементы) и выполняет точные операции.
    """

    def __init__(
        self,
        number_format: NumberFormat,
        reference_reader: ReferenceReader | None = None,
    ):
        """
        Args:
            number_format: формат разделителей для разбора строк
            reference_reader: чтение значения элемента по ссылке (опционально)
        """
        self.number_format = number_format
        self.reference_reader = reference_reader

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def resolve(self, source: object, depth: int = REFERENCE_RESOLUTION_DEPTH) -> Resolution:
        """
        Разбор операнда с ограниченным разрешением ссылок.

        Args:
            source: операнд
            depth: сколько раз ещё можно разрешить строку как ссылку на элемент

        Returns:
            Resolved(value) или Unresolved(source, reason)
        """
        if source is None:
            return Unresolved(source, "absent")
        if isinstance(source, bool):
            return Unresolved(source, "boolean")
        if isinstance(source, Decimal):
            if not source.is_finite():
                return Unresolved(source, "non_finite")
            return Resolved(source)
        if isinstance(source, int):
            return Resolved(Decimal(source))
        if isinstance(source, float):
            if source != source or source in (float("inf"), float("-inf")):
                return Unresolved(source, "non_finite")
            return Resolved(Decimal(repr(source)))
        if not isinstance(source, str):
            return Unresolved(source, f"unsupported_type:{type(source).__name__}")

        literal = self._normalize_literal(source)
        if not literal:
            return Unresolved(source, "blank")
        if _NUMBER_PATTERN.match(literal):
            return Resolved(Decimal(literal))

        if depth <= 0 or self.reference_reader is None:
            return Unresolved(source, "not_a_number")

        referenced = self.reference_reader(source.strip())
        if referenced is None:
            logger.debug("Operand %r is neither a number nor an element reference", source)
            return Unresolved(source, "unresolved_reference")
        return self.resolve(referenced, depth - 1)

    def mix_to_number(self, source: object) -> Decimal | None:
        """
        Разбор операнда в Decimal.

        Returns:
            Decimal или None, если числа получить не удалось (никогда не поднимает)
        """
        resolution = self.resolve(source)
        if isinstance(resolution, Resolved):
            return resolution.value
        return None

    def are_same_number(self, source1: object, source2: object) -> bool:
        """Числовое равенство двух операндов (два None тоже равны)."""
        return self.mix_to_number(source1) == self.mix_to_number(source2)

    def _normalize_literal(self, source: str) -> str:
        """Обрезка, удаление группировки, перевод разделителя в точку."""
        literal = source.strip().replace(self.number_format.grouping, "")
        return self.number_format.to_canonical(literal)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def sum(self, *addends: Operand) -> Decimal:
        """Сумма; нечисловые операнды пропускаются."""
        result = ZERO
        for addend in addends:
            value = self.mix_to_number(addend)
            if value is not None:
                result = core_sum(result, value)
        return result

    def blend_sum(self, *addends: "Operand | bool") -> Decimal:
        """
        Сумма со знаковыми переключателями.

        Булевый операнд задаёт знак всех последующих операндов:
        blend_sum(10, False, 3, 2) == 10 - 3 - 2.
        """
        result = ZERO
        positive = True
        for addend in addends:
            if isinstance(addend, bool):
                positive = addend
                continue
            value = self.mix_to_number(addend)
            if value is not None:
                result = core_sum(result, value if positive else -value)
        return result

    def product(self, *factors: Operand) -> Decimal | None:
        """
        Произведение с политикой skip-null.

        Returns:
            Произведение числовых операндов или None, если таких нет
        """
        result: Decimal | None = None
        for factor in factors:
            value = self.mix_to_number(factor)
            if value is not None:
                result = core_product(ONE if result is None else result, value)
        return result

    def product_notice_null(self, *factors: Operand) -> Decimal:
        """Произведение с политикой notice-null: нечисловой операнд даёт 0."""
        result = ONE
        for factor in factors:
            value = self.mix_to_number(factor)
            result = core_product(result, ZERO if value is None else value)
        return result

    def quotient(self, dividend: Operand, divisor: Operand) -> Decimal:
        """Частное; деление на ноль или нечисловой операнд → 0."""
        dividend_value = self.mix_to_number(dividend)
        divisor_value = self.mix_to_number(divisor)
        if dividend_value is None or divisor_value is None or divisor_value == 0:
            return ZERO
        return core_quotient(dividend_value, divisor_value)

    def round(self, source: Operand, places: int | None = 0) -> Decimal:
        return self._rounding(source, places, RoundingMode.ROUND)

    def floor(self, source: Operand, places: int | None = 0) -> Decimal:
        return self._rounding(source, places, RoundingMode.FLOOR)

    def ceil(self, source: Operand, places: int | None = 0) -> Decimal:
        return self._rounding(source, places, RoundingMode.CEIL)

    def apply_rounding(self, source: Operand, places: int | None, mode: RoundingMode) -> Decimal:
        """Округление в заданном режиме (places=None ⇒ 0)."""
        return self._rounding(source, places, mode)

    def _rounding(self, source: Operand, places: int | None, mode: RoundingMode) -> Decimal:
        value = self.mix_to_number(source)
        if value is None:
            return ZERO
        return core_rounding(value, places or 0, mode)
