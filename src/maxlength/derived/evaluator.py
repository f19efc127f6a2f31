"""
Derived-Field Evaluator — пересчёт вычисляемых полей

Поток обработки изменения источника:
1. handle_change(*element_ids): изменённый элемент расширяется до своей группы name
   (каждая затронутая привязка пересчитывается один раз)
2. Для каждой привязки, чьи селекторы находят изменённый элемент, evaluate()
3. evaluate: операция → округление до дробного бюджета цели →
   усечение старших целых разрядов → settle → запись → синтетическое
   изменение цели (цепочки вычисляемых полей)

ОПЕРАЦИИ:
    sum:        selector_sum(src)
    product:    selector_product_notice_null(src)
    difference: value(src0) - selector_sum(src1)
    quotient:   value(src0) / selector_product_notice_null(src1)
    percent:    value(src0) * 100 / selector_product_notice_null(src1)

Граф вычисляемых полей должен быть ацикличным: повторный вход в цель,
которая уже вычисляется, поднимает DerivedFieldCycleError.
"""

import logging
from decimal import Decimal
from typing import Final

from maxlength.core.domain.field_config import DerivedFieldBinding, DerivedOperation
from maxlength.core.domain.limit_spec import LimitSpec
from maxlength.core.exceptions import DerivedFieldConfigError, DerivedFieldCycleError
from maxlength.core.math.decimal_arithmetic import Resolved, core_sum, to_plain_string
from maxlength.runtime.context import NumberFieldContext

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

PAIR_SELECTOR_COUNT: Final[int] = 2
PERCENT_MULTIPLIER: Final[int] = 100


# =============================================================================
# INTEGRAL CAP
# =============================================================================


def truncate_integral(value: Decimal, integral_digits: int) -> Decimal:
    """
    Усечение старших разрядов целой части до бюджета (знак сохраняется).

    Examples:
        >>> truncate_integral(Decimal("12345.6"), 3)
        Decimal('345.6')
    """
    magnitude = abs(value)
    integral = int(magnitude)
    if len(str(integral)) <= integral_digits:
        return value
    fractional = core_sum(magnitude, Decimal(-integral))
    capped = core_sum(Decimal(integral % 10**integral_digits), fractional)
    return -capped if value.is_signed() else capped


# =============================================================================
# EVALUATOR
# =============================================================================


class DerivedFieldEvaluator:
    """Вычисление значений полей с атрибутами data-sum / data-product / ..."""

    def __init__(self, context: NumberFieldContext):
        self.context = context
        self._bindings: dict[tuple[str, DerivedOperation], DerivedFieldBinding] = {}
        # Цели, вычисляемые в данный момент (окно синтетического изменения)
        self._stack: list[str] = []

    @property
    def bindings(self) -> list[DerivedFieldBinding]:
        return list(self._bindings.values())

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    def check(self, binding: DerivedFieldBinding) -> None:
        """
        Проверка кардинальности селекторов без подключения.

        Raises:
            DerivedFieldConfigError: для difference / quotient / percent число
                селекторов не равно 2 или первый находит не ровно один элемент
        """
        if binding.operation.requires_pair:
            received = len(binding.source_selectors)
            if received != PAIR_SELECTOR_COUNT:
                raise DerivedFieldConfigError(
                    binding.target_field_id,
                    expected=PAIR_SELECTOR_COUNT,
                    received=received,
                    detail=f"invalid number of selectors for {binding.operation.value}",
                )
            matched = len(self.context.binding.select(binding.source_selectors[0]))
            if matched != 1:
                raise DerivedFieldConfigError(
                    binding.target_field_id,
                    expected=1,
                    received=matched,
                    detail="there should be only 1 minuend/dividend",
                )

    def bind(self, binding: DerivedFieldBinding) -> None:
        """
        Подключение привязки (после check).

        Raises:
            DerivedFieldConfigError: см. check
        """
        self.check(binding)
        self._bindings[(binding.target_field_id, binding.operation)] = binding
        logger.info(
            "Derived field %s bound: %s(%s)",
            binding.target_field_id,
            binding.operation.value,
            ", ".join(binding.source_selectors),
        )

    def unbind(self, target_field_id: str) -> None:
        for key in [key for key in self._bindings if key[0] == target_field_id]:
            del self._bindings[key]

    # -------------------------------------------------------------------------
    # Change handling
    # -------------------------------------------------------------------------

    def handle_change(self, *element_ids: str) -> list[str]:
        """
        Пересчёт всех целей, зависящих от изменённых элементов.

        Returns:
            Идентификаторы пересчитанных целей (в порядке пересчёта)
        """
        changed: list[str] = []
        for element_id in element_ids:
            name = self.context.binding.get_name(element_id)
            group = self.context.binding.select(f'[name="{name}"]') if name else []
            for member in group or [element_id]:
                if member not in changed:
                    changed.append(member)

        # Каждая привязка пересчитывается один раз за изменение
        affected: list[DerivedFieldBinding] = []
        for binding in self._bindings.values():
            if binding in affected:
                continue
            for selector in binding.source_selectors:
                matched = self.context.binding.select(selector)
                if any(element_id in matched for element_id in changed):
                    affected.append(binding)
                    break

        for binding in affected:
            self.evaluate(binding)
        return [binding.target_field_id for binding in affected]

    def evaluate(self, binding: DerivedFieldBinding) -> str:
        """
        Вычисление, ограничение и запись значения цели.

        Returns:
            Записанный (settled) текст цели

        Raises:
            DerivedFieldCycleError: цель уже вычисляется выше по цепочке
        """
        target = binding.target_field_id
        if target in self._stack:
            raise DerivedFieldCycleError(self._stack[self._stack.index(target):] + [target])

        self._stack.append(target)
        try:
            spec = self.context.registry.limit_spec(target)
            value = self.cap(self.compute(binding), spec, binding)
            text = self.context.number_format.from_canonical(to_plain_string(value))
            settled = self.context.settle_field(target, text)
            self.context.binding.set_value(target, settled)
            config = self.context.registry.config_or_default(target)
            self.context.binding.apply_style(target, self.context.formatter.style(settled, config))
            logger.debug("Derived field %s = %r", target, settled)
            self.handle_change(target)
        finally:
            self._stack.pop()
        return settled

    def cap(self, value: Decimal, spec: LimitSpec, binding: DerivedFieldBinding) -> Decimal:
        """Округление до дробного бюджета цели и усечение целой части."""
        rounded = self.context.arithmetic.apply_rounding(value, spec.fractional_digits, binding.rounding_mode)
        return truncate_integral(rounded, spec.integral_digits)

    def compute(self, binding: DerivedFieldBinding) -> Decimal:
        """Сырой результат операции привязки (до округления)."""
        arithmetic = self.context.arithmetic
        selectors = binding.source_selectors
        operation = binding.operation

        if operation is DerivedOperation.SUM:
            return self.selector_sum(selectors[0])
        if operation is DerivedOperation.PRODUCT:
            return self.selector_product_notice_null(selectors[0])

        first = self.value_of(selectors[0])
        if operation is DerivedOperation.DIFFERENCE:
            return arithmetic.blend_sum(first, False, self.selector_sum(selectors[1]))
        divisor = self.selector_product_notice_null(selectors[1])
        if operation is DerivedOperation.QUOTIENT:
            return arithmetic.quotient(first, divisor)
        return arithmetic.quotient(arithmetic.product_notice_null(first, PERCENT_MULTIPLIER), divisor)

    # -------------------------------------------------------------------------
    # Selector helpers
    # -------------------------------------------------------------------------

    def value_of(self, selector: str) -> Decimal | None:
        """Числовое значение первого элемента по селектору."""
        resolution = self.context.arithmetic.resolve(self.context.read_reference(selector), depth=0)
        return resolution.value if isinstance(resolution, Resolved) else None

    def selector_values(self, selector: str) -> list[Decimal | None]:
        """Числовые значения всех элементов по селектору, в порядке документа."""
        values: list[Decimal | None] = []
        for element_id in self.context.binding.select(selector):
            resolution = self.context.arithmetic.resolve(self.context.binding.get_value(element_id), depth=0)
            values.append(resolution.value if isinstance(resolution, Resolved) else None)
        return values

    def selector_sum(self, selector: str) -> Decimal:
        return self.context.arithmetic.sum(*self.selector_values(selector))

    def selector_product(self, selector: str) -> Decimal | None:
        return self.context.arithmetic.product(*self.selector_values(selector))

    def selector_product_notice_null(self, selector: str) -> Decimal:
        """Произведение; пустой элемент обнуляет результат, отсутствие элементов даёт 1."""
        return self.context.arithmetic.product_notice_null(*self.selector_values(selector))
