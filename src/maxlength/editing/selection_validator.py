"""Selection-Replace Validator: удаление/замена выделенного фрагмента.

Используется Backspace/Delete на выделении и вырезанием (Ctrl+X).
Если выделение захватывает десятичный разделитель, целая и дробная группы
сливаются; слияние не должно превышать бюджет целой части.
"""

from dataclasses import dataclass

from maxlength.core.domain.edit_state import EditState
from maxlength.core.domain.limit_spec import LimitSpec
from maxlength.core.domain.number_format import DIGITS, NumberFormat


@dataclass(frozen=True)
class SelectionCheckResult:
    """Результат проверки удаления выделения."""

    allowed: bool
    block_reason: str
    remaining_digits: int
    details: str


class SelectionReplaceValidator:
    """Проверка удаления выделенного фрагмента."""

    def __init__(self, number_format: NumberFormat):
        self.number_format = number_format

    def evaluate(self, state: EditState, spec: LimitSpec) -> SelectionCheckResult:
        """
        Args:
            state: текущее состояние поля с выделением
            spec: бюджет разрядов поля

        Returns:
            SelectionCheckResult с решением
        """
        if not state.has_selection:
            return SelectionCheckResult(True, "", self._count_digits(state.text), "empty selection")

        remaining = state.without_selection().text
        remaining_digits = self._count_digits(remaining)

        if self.number_format.decimal not in state.selected_text:
            return SelectionCheckResult(True, "", remaining_digits, "separator untouched")

        if remaining_digits > spec.integral_digits:
            return SelectionCheckResult(
                allowed=False,
                block_reason=f"merge_overflow: {remaining_digits} > {spec.integral_digits}",
                remaining_digits=remaining_digits,
                details=(
                    f"Removing {state.selected_text!r} merges {remaining_digits} digits "
                    f"into an integral run of at most {spec.integral_digits}"
                ),
            )

        return SelectionCheckResult(
            allowed=True,
            block_reason="",
            remaining_digits=remaining_digits,
            details=f"Merged integral run of {remaining_digits} digits fits",
        )

    @staticmethod
    def _count_digits(text: str) -> int:
        return sum(1 for char in text if char in DIGITS)
