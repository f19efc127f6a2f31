"""Keystroke Validator: допуск нажатия клавиши в числовом поле

Решение принимается синхронно (accept/reject), чтобы хост успел подавить
нативное действие. Корректирующая перезапись (если нужна) возвращается в
решении и выполняется отложенно, после применения нативного действия.

Ветки по классу клавиши:
- MINUS: smart-режим переключает знак всего значения; иначе знак только в позиции 0
- SEPARATOR: не более одного разделителя, обе группы в бюджете, "0." в начале
- DIGIT: группа под курсором не должна быть заполнена
- NAVIGATION: пропуск, кроме Backspace/Delete у разделителя или на выделении
- Ctrl+V: пропуск + отложенная проверка результата с откатом
- Ctrl+X: Selection-Replace Validator
- прочие Ctrl-комбинации: пропуск
"""

import logging
from dataclasses import dataclass

from maxlength.core.domain.edit_state import EditState
from maxlength.core.domain.limit_spec import LimitSpec
from maxlength.core.domain.number_format import MINUS, ZERO, NumberFormat
from maxlength.editing.keys import KeyClass, KeyCode, classify_key
from maxlength.editing.rewrites import ReplaceContent, Rewrite, RollbackIfInvalid
from maxlength.editing.runs import split_runs
from maxlength.editing.selection_validator import SelectionReplaceValidator

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class KeystrokeDecision:
    """Решение по нажатию клавиши."""

    accepted: bool
    block_reason: str
    key_class: KeyClass

    # Отложенная перезапись (выполняется даже при accepted=False)
    rewrite: Rewrite | None

    # Детали
    details: str


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class KeystrokeValidatorConfig:
    """Конфигурация Keystroke Validator."""

    # Smart-minus для полей без явной настройки
    smart_minus_default: bool = True


# =============================================================================
# VALIDATOR
# =============================================================================


class KeystrokeValidator:
    """Проверка нажатий клавиш против бюджета разрядов поля."""

    def __init__(self, number_format: NumberFormat, config: KeystrokeValidatorConfig | None = None):
        """
        Args:
            number_format: формат разделителей
            config: конфигурация (опционально, используется default)
        """
        self.number_format = number_format
        self.config = config or KeystrokeValidatorConfig()
        self.selection_validator = SelectionReplaceValidator(number_format)

    def evaluate(
        self,
        state: EditState,
        key_code: int,
        spec: LimitSpec,
        ctrl: bool = False,
        smart_minus: bool | None = None,
    ) -> KeystrokeDecision:
        """
        Оценка нажатия клавиши.

        Args:
            state: текст и выделение поля до нажатия
            key_code: код клавиши
            spec: бюджет разрядов поля
            ctrl: зажат ли Ctrl
            smart_minus: smart-режим минуса (None ⇒ из конфигурации)

        Returns:
            KeystrokeDecision с решением и отложенной перезаписью
        """
        if ctrl:
            decision = self._evaluate_combination(state, key_code, spec)
        else:
            key_class = classify_key(key_code, self.number_format)
            if key_class == KeyClass.MINUS:
                if smart_minus is None:
                    smart_minus = self.config.smart_minus_default
                decision = self._evaluate_minus(state, spec, smart_minus)
            elif key_class == KeyClass.SEPARATOR:
                decision = self._evaluate_separator(state, spec)
            elif key_class == KeyClass.DIGIT:
                decision = self._evaluate_digit(state, spec)
            elif key_class == KeyClass.NAVIGATION:
                decision = self._evaluate_navigation(state, key_code, spec)
            else:
                decision = self._reject(KeyClass.NONE, "key_not_allowed", f"key code {key_code}")

        if not decision.accepted:
            logger.debug("Keystroke %s rejected on %r: %s", key_code, state.text, decision.block_reason)
        return decision

    # -------------------------------------------------------------------------
    # Combinations
    # -------------------------------------------------------------------------

    def _evaluate_combination(self, state: EditState, key_code: int, spec: LimitSpec) -> KeystrokeDecision:
        if key_code == KeyCode.V:
            return KeystrokeDecision(
                accepted=True,
                block_reason="",
                key_class=KeyClass.COMBINATION,
                rewrite=RollbackIfInvalid(state, spec, self.number_format),
                details="paste proceeds, result checked after commit",
            )
        if key_code == KeyCode.X:
            return self._evaluate_selection(state, spec, KeyClass.COMBINATION)
        return self._accept(KeyClass.COMBINATION, "modifier combination")

    # -------------------------------------------------------------------------
    # MINUS
    # -------------------------------------------------------------------------

    def _evaluate_minus(self, state: EditState, spec: LimitSpec, smart_minus: bool) -> KeystrokeDecision:
        if not spec.allow_minus:
            return self._reject(KeyClass.MINUS, "minus_not_allowed", "field does not allow a sign")

        if smart_minus:
            cursor = state.cursor
            if state.has_minus:
                new_text = state.text[1:]
                new_cursor = 0 if cursor == 0 else cursor - 1
            else:
                new_text = MINUS + state.text
                new_cursor = cursor + 1
            return KeystrokeDecision(
                accepted=False,
                block_reason="smart_minus_toggle",
                key_class=KeyClass.MINUS,
                rewrite=ReplaceContent(new_text, new_cursor, "smart_minus_toggle"),
                details=f"{state.text!r} -> {new_text!r}",
            )

        if state.whole_selected:
            return self._accept(KeyClass.MINUS, "whole field replaced by sign")
        if state.has_minus:
            return self._reject(KeyClass.MINUS, "minus_exists", "value already has a sign")
        if state.cursor != 0:
            return self._reject(KeyClass.MINUS, "minus_not_at_start", f"cursor at {state.cursor}")
        return self._accept(KeyClass.MINUS, "sign inserted at position 0")

    # -------------------------------------------------------------------------
    # SEPARATOR
    # -------------------------------------------------------------------------

    def _evaluate_separator(self, state: EditState, spec: LimitSpec) -> KeystrokeDecision:
        decimal = self.number_format.decimal

        if not spec.allows_fraction:
            return self._reject(KeyClass.SEPARATOR, "fraction_not_allowed", "no fractional digits configured")

        if state.whole_selected:
            return KeystrokeDecision(
                accepted=False,
                block_reason="separator_replaces_all",
                key_class=KeyClass.SEPARATOR,
                rewrite=ReplaceContent(ZERO + decimal, 2, "separator_replaces_all"),
                details="whole field replaced by leading zero and separator",
            )

        if decimal in state.text:
            return self._reject(KeyClass.SEPARATOR, "separator_exists", "value already has a separator")

        cursor = state.cursor
        if state.has_minus and cursor == 0:
            return self._reject(KeyClass.SEPARATOR, "before_minus", "cursor before the sign")
        if state.text == MINUS:
            return self._reject(KeyClass.SEPARATOR, "after_lone_minus", "value is a lone sign")

        left, right = state.text[:cursor], state.text[cursor:]
        left_digits = left[1:] if state.has_minus else left
        fits = spec.fits(left_digits, right)

        integral_start = 1 if state.has_minus else 0
        if cursor == integral_start:
            if not fits:
                return self._reject(
                    KeyClass.SEPARATOR,
                    "separator_overflow",
                    f"{len(right)} fractional digits > {spec.fractional_digits}",
                )
            return KeystrokeDecision(
                accepted=False,
                block_reason="separator_leading_zero",
                key_class=KeyClass.SEPARATOR,
                rewrite=ReplaceContent(left + ZERO + decimal + right, len(left) + 2, "separator_leading_zero"),
                details="leading zero inserted before separator",
            )

        if not fits:
            return self._reject(
                KeyClass.SEPARATOR,
                "separator_overflow",
                f"runs {len(left_digits)}/{len(right)} exceed "
                f"{spec.integral_digits}/{spec.fractional_digits}",
            )
        return self._accept(KeyClass.SEPARATOR, f"split into {len(left_digits)}/{len(right)} digits")

    # -------------------------------------------------------------------------
    # DIGIT
    # -------------------------------------------------------------------------

    def _evaluate_digit(self, state: EditState, spec: LimitSpec) -> KeystrokeDecision:
        if state.whole_selected:
            return self._accept(KeyClass.DIGIT, "whole field replaced by digit")

        cursor = state.cursor
        if state.has_minus and cursor == 0:
            return self._reject(KeyClass.DIGIT, "before_minus", "cursor before the sign")

        runs = split_runs(state.text, self.number_format)
        integral_full = len(runs.integral) >= spec.integral_digits

        if not runs.has_separator:
            if integral_full:
                return self._reject(
                    KeyClass.DIGIT, "integral_full", f"{len(runs.integral)} >= {spec.integral_digits}"
                )
            return self._accept(KeyClass.DIGIT, "integral digit")

        if cursor <= runs.separator_index:
            if integral_full:
                return self._reject(
                    KeyClass.DIGIT, "integral_full", f"{len(runs.integral)} >= {spec.integral_digits}"
                )
            return self._accept(KeyClass.DIGIT, "integral digit")

        fractional_budget = spec.fractional_digits or 0
        if len(runs.fractional or "") >= fractional_budget:
            return self._reject(
                KeyClass.DIGIT, "fractional_full", f"{len(runs.fractional or '')} >= {fractional_budget}"
            )
        return self._accept(KeyClass.DIGIT, "fractional digit")

    # -------------------------------------------------------------------------
    # NAVIGATION
    # -------------------------------------------------------------------------

    def _evaluate_navigation(self, state: EditState, key_code: int, spec: LimitSpec) -> KeystrokeDecision:
        if state.whole_selected:
            return self._accept(KeyClass.NAVIGATION, "whole field selected")

        if key_code not in (KeyCode.BACKSPACE, KeyCode.DEL):
            return self._accept(KeyClass.NAVIGATION, "navigation")

        if state.has_selection:
            return self._evaluate_selection(state, spec)

        runs = split_runs(state.text, self.number_format)
        if not runs.has_separator or runs.digit_count <= spec.integral_digits:
            return self._accept(KeyClass.NAVIGATION, "deletion")

        # Backspace стирает символ слева от курсора, Delete справа
        removes_separator = (
            key_code == KeyCode.BACKSPACE and state.cursor == runs.separator_index + 1
        ) or (key_code == KeyCode.DEL and state.cursor == runs.separator_index)
        if removes_separator:
            return self._reject(
                KeyClass.NAVIGATION,
                "merge_overflow",
                f"{runs.digit_count} merged digits > {spec.integral_digits}",
            )
        return self._accept(KeyClass.NAVIGATION, "deletion")

    def _evaluate_selection(
        self, state: EditState, spec: LimitSpec, key_class: KeyClass = KeyClass.NAVIGATION
    ) -> KeystrokeDecision:
        result = self.selection_validator.evaluate(state, spec)
        return KeystrokeDecision(
            accepted=result.allowed,
            block_reason=result.block_reason,
            key_class=key_class,
            rewrite=None,
            details=result.details,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _accept(key_class: KeyClass, details: str) -> KeystrokeDecision:
        return KeystrokeDecision(True, "", key_class, None, details)

    @staticmethod
    def _reject(key_class: KeyClass, reason: str, details: str) -> KeystrokeDecision:
        return KeystrokeDecision(False, reason, key_class, None, details)
