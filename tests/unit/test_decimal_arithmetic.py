"""
Тесты для модуля Decimal Arithmetic

Проверяет:
1. Точность суммы/произведения/частного (без дрейфа float)
2. Политики skip-null и notice-null
3. Округление round/floor/ceil (половина — от нуля)
4. mix_to_number: разбор литералов всех форматов и разрешение ссылок (глубина 1)
5. Примитивы масштабирования
"""

from decimal import Decimal

import pytest

from maxlength.core.domain.field_config import RoundingMode
from maxlength.core.domain.number_format import NumberFormatStandard, get_number_format
from maxlength.core.math.decimal_arithmetic import (
    DecimalArithmetic,
    Resolved,
    Unresolved,
    core_rounding,
    core_sum,
    decimal_places,
    from_scaled,
    to_plain_string,
    to_scaled,
)

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def arithmetic():
    """Движок в формате ISO без разрешения ссылок."""
    return DecimalArithmetic(get_number_format(NumberFormatStandard.ISO))


def make_arithmetic(standard: str = "ISO", references: dict[str, str] | None = None) -> DecimalArithmetic:
    """Движок с таблицей ссылок селектор → значение."""
    references = references or {}
    return DecimalArithmetic(get_number_format(standard), references.get)


# =============================================================================
# ТЕСТЫ ПРИМИТИВОВ
# =============================================================================


class TestPrimitives:
    """Тесты масштабирования"""

    def test_decimal_places(self) -> None:
        assert decimal_places(Decimal("1.250")) == 3
        assert decimal_places(Decimal("12")) == 0
        assert decimal_places(Decimal("1E+2")) == 0

    def test_to_scaled(self) -> None:
        assert to_scaled(Decimal("-1.25"), 3) == -1250
        assert to_scaled(Decimal("1E+2"), 0) == 100

    @pytest.mark.parametrize("value", [Decimal("NaN"), Decimal("Infinity"), Decimal("-Infinity")])
    def test_non_finite_rejected(self, value) -> None:
        with pytest.raises(ValueError):
            decimal_places(value)
        with pytest.raises(ValueError):
            to_scaled(value, 2)

    def test_to_scaled_rejects_lossy_places(self) -> None:
        """Нельзя масштабировать к меньшему числу знаков"""
        with pytest.raises(ValueError):
            to_scaled(Decimal("1.25"), 1)

    def test_from_scaled_is_exact(self) -> None:
        assert from_scaled(-1250, 3) == Decimal("-1.25")
        assert str(from_scaled(1250, 3)) == "1.250"

    def test_core_sum_mixed_exponents(self) -> None:
        assert core_sum(Decimal("1E+2"), Decimal("0.5")) == Decimal("100.5")

    @pytest.mark.parametrize(
        "value, expected",
        [
            (Decimal("12.750"), "12.75"),
            (Decimal("1E+2"), "100"),
            (Decimal("-0.00"), "0"),
            (Decimal("-3.10"), "-3.1"),
            (Decimal("7"), "7"),
        ],
    )
    def test_to_plain_string(self, value, expected) -> None:
        assert to_plain_string(value) == expected


# =============================================================================
# ТЕСТЫ СУММЫ
# =============================================================================


class TestSum:
    """Тесты для sum / blend_sum"""

    def test_no_binary_drift(self, arithmetic) -> None:
        """0.1 + 0.2 == 0.3 точно"""
        result = arithmetic.sum("0.1", "0.2")
        assert result == Decimal("0.3")
        assert to_plain_string(result) == "0.3"

    def test_float_operands_are_exact(self, arithmetic) -> None:
        """float разбирается по repr, а не по двоичному значению"""
        assert arithmetic.sum(*([0.1] * 10)) == Decimal("1")

    @pytest.mark.parametrize(
        "a, b",
        [
            ("123456789.123456", "0.000001"),
            ("99999999999999.9", "0.1"),
            ("-0.7", "0.07"),
            ("1.005", "2.995"),
        ],
    )
    def test_exact_for_fifteen_significant_digits(self, arithmetic, a, b) -> None:
        assert arithmetic.sum(a, b) == Decimal(a) + Decimal(b)

    def test_unparsable_operands_skipped(self, arithmetic) -> None:
        assert arithmetic.sum("1.5", "abc", None, "2") == Decimal("3.5")

    def test_empty_sum_is_zero(self, arithmetic) -> None:
        assert arithmetic.sum() == 0

    def test_blend_sum_polarity_toggle(self, arithmetic) -> None:
        """Булевый операнд меняет знак всех последующих"""
        assert arithmetic.blend_sum(10, False, 3, 2) == 5
        assert arithmetic.blend_sum(10, False, 3, True, 2) == 9
        assert arithmetic.blend_sum("0.3", False, "0.1") == Decimal("0.2")


# =============================================================================
# ТЕСТЫ ПРОИЗВЕДЕНИЯ И ЧАСТНОГО
# =============================================================================


class TestProduct:
    """Тесты для product / product_notice_null"""

    def test_exact_product(self, arithmetic) -> None:
        assert arithmetic.product("1.1", "1.1") == Decimal("1.21")
        assert arithmetic.product("0.1", "3") == Decimal("0.3")

    def test_skip_null(self, arithmetic) -> None:
        """skip-null: нечисловой операнд игнорируется"""
        assert arithmetic.product("2", "abc", "3") == 6

    def test_skip_null_without_numbers_is_none(self, arithmetic) -> None:
        assert arithmetic.product("abc", None) is None
        assert arithmetic.product() is None

    def test_notice_null(self, arithmetic) -> None:
        """notice-null: нечисловой операнд обнуляет произведение"""
        assert arithmetic.product_notice_null("2", "abc") == 0
        assert arithmetic.product_notice_null("2", "3") == 6

    def test_notice_null_empty_is_one(self, arithmetic) -> None:
        assert arithmetic.product_notice_null() == 1


class TestQuotient:
    """Тесты для quotient"""

    def test_exact_quotient(self, arithmetic) -> None:
        assert arithmetic.quotient("10", "4") == Decimal("2.5")
        assert arithmetic.quotient("0.3", "0.1") == 3
        assert arithmetic.quotient("1.5", "0.05") == 30

    def test_inexact_quotient_precision(self, arithmetic) -> None:
        """Неточное частное: 34 значащие цифры"""
        assert str(arithmetic.quotient("1", "3")) == "0." + "3" * 34

    def test_division_by_zero_is_zero(self, arithmetic) -> None:
        assert arithmetic.quotient("1", "0") == 0
        assert arithmetic.quotient("1", "0.00") == 0

    def test_unparsable_side_is_zero(self, arithmetic) -> None:
        assert arithmetic.quotient(None, "2") == 0
        assert arithmetic.quotient("2", "abc") == 0


# =============================================================================
# ТЕСТЫ ОКРУГЛЕНИЯ
# =============================================================================


class TestRounding:
    """Тесты для round / floor / ceil"""

    def test_round_half_away_from_zero(self, arithmetic) -> None:
        assert arithmetic.round("2.5") == 3
        assert arithmetic.round("-2.5") == -3
        assert arithmetic.round("1.005", 2) == Decimal("1.01")
        assert arithmetic.round("1.004", 2) == Decimal("1.00")

    def test_floor(self, arithmetic) -> None:
        assert arithmetic.floor("1.999", 2) == Decimal("1.99")
        assert arithmetic.floor("-1.001", 2) == Decimal("-1.01")

    def test_ceil(self, arithmetic) -> None:
        assert arithmetic.ceil("1.001", 2) == Decimal("1.01")
        assert arithmetic.ceil("-1.009", 2) == Decimal("-1.00")

    def test_places_none_means_integer(self, arithmetic) -> None:
        assert arithmetic.round("1.6", None) == 2

    def test_value_with_fewer_places_unchanged(self, arithmetic) -> None:
        assert arithmetic.round("1.5", 3) == Decimal("1.5")

    def test_unparsable_rounds_to_zero(self, arithmetic) -> None:
        assert arithmetic.round("abc", 2) == 0

    def test_apply_rounding_dispatch(self, arithmetic) -> None:
        assert arithmetic.apply_rounding("1.25", 1, RoundingMode.FLOOR) == Decimal("1.2")
        assert arithmetic.apply_rounding("1.21", 1, RoundingMode.CEIL) == Decimal("1.3")
        assert core_rounding(Decimal("1.25"), 1, RoundingMode.ROUND) == Decimal("1.3")


# =============================================================================
# ТЕСТЫ РАЗБОРА ОПЕРАНДОВ
# =============================================================================


class TestMixToNumber:
    """Тесты для mix_to_number / resolve"""

    @pytest.mark.parametrize(
        "standard, literal",
        [
            ("ISO", " 1 234.5 "),
            ("EN", "1,234.5"),
            ("ES", "1.234,5"),
        ],
    )
    def test_grouped_literals(self, standard, literal) -> None:
        assert make_arithmetic(standard).mix_to_number(literal) == Decimal("1234.5")

    @pytest.mark.parametrize("source", ["abc", "", "  ", "1-2", "--1", True, float("nan"), Decimal("Infinity")])
    def test_non_numbers_are_absent(self, arithmetic, source) -> None:
        assert arithmetic.mix_to_number(source) is None

    @pytest.mark.parametrize("source", ["٣", "١٢.٥", "१२"])
    def test_only_ascii_digits(self, arithmetic, source) -> None:
        """Цифры других письменностей не считаются числом"""
        assert arithmetic.mix_to_number(source) is None

    def test_numeric_passthrough(self, arithmetic) -> None:
        assert arithmetic.mix_to_number(7) == 7
        assert arithmetic.mix_to_number(Decimal("1.5")) == Decimal("1.5")
        assert arithmetic.mix_to_number("-.5") == Decimal("-0.5")

    def test_reference_resolved_once(self) -> None:
        """Строка-ссылка разрешается чтением элемента"""
        arithmetic = make_arithmetic(references={"#a": "12.5"})
        assert arithmetic.mix_to_number("#a") == Decimal("12.5")

    def test_reference_depth_bounded(self) -> None:
        """Ссылка на ссылку не разрешается (глубина 1)"""
        arithmetic = make_arithmetic(references={"#a": "#b", "#b": "3"})
        resolution = arithmetic.resolve("#a")
        assert isinstance(resolution, Unresolved)
        assert resolution.reason == "not_a_number"

    def test_unresolved_reference(self) -> None:
        resolution = make_arithmetic().resolve("#missing")
        assert isinstance(resolution, Unresolved)
        assert resolution.reason == "unresolved_reference"

    def test_resolved_tag(self, arithmetic) -> None:
        assert arithmetic.resolve("2.50") == Resolved(Decimal("2.50"))

    def test_are_same_number(self, arithmetic) -> None:
        assert arithmetic.are_same_number("1.50", "1.5")
        assert arithmetic.are_same_number("1 000", 1000)
        assert not arithmetic.are_same_number("1", "abc")
        assert arithmetic.are_same_number(None, "abc")
