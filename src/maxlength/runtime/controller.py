"""
Number Field Controller — точки входа событий хоста

Хост привязывает события элементов и вызывает обработчики:
- on_keydown: синхронное решение accept/reject (хост подавляет нативное
  действие при reject) + отложенная перезапись
- on_drag_start / on_composition_start / on_composition_end
- on_focus / on_blur: переход между текстом для редактирования и settled
- on_change: пересчёт вычисляемых полей
- flush: выполнение отложенных задач (после нативного действия)

Переинициализация: init_refresh() и set_number_format_standard().
"""

import logging
from typing import Any, Mapping

from maxlength.core.contracts.validators import validate_field_attributes
from maxlength.core.domain.edit_state import EditState
from maxlength.core.domain.field_config import FieldConfig
from maxlength.core.domain.number_format import NumberFormatStandard
from maxlength.derived.evaluator import DerivedFieldEvaluator
from maxlength.editing.keys import KeyClass
from maxlength.editing.keystroke_validator import KeystrokeDecision
from maxlength.editing.rewrites import Rewrite
from maxlength.presentation.formatter import FieldStyle
from maxlength.runtime.binding import ElementBinding
from maxlength.runtime.context import NumberFieldContext
from maxlength.runtime.settings import MaxLengthSettings

logger = logging.getLogger(__name__)


class NumberFieldController:
    """Обработчики событий числовых полей поверх NumberFieldContext."""

    def __init__(self, context: NumberFieldContext):
        self.context = context
        self.evaluator = DerivedFieldEvaluator(context)
        # Значение поля на момент начала IME-композиции
        self._compositions: dict[str, str] = {}

    @classmethod
    def from_binding(
        cls, binding: ElementBinding, settings: MaxLengthSettings | None = None
    ) -> "NumberFieldController":
        return cls(NumberFieldContext(binding, settings=settings))

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(
        self,
        attributes: Mapping[str, Any],
        field_id: str | None = None,
        refresh: bool = False,
    ) -> FieldConfig:
        """
        Регистрация поля по его атрибутам.

        Args:
            attributes: атрибуты поля (data-max-length, data-sum, ...)
            field_id: идентификатор элемента (None ⇒ сгенерировать)
            refresh: выполнить settle сразу (если не отключено атрибутом)

        Returns:
            FieldConfig

        Raises:
            jsonschema.ValidationError: атрибуты нарушают контракт
            DerivedFieldConfigError: неверная кардинальность селекторов
        """
        validate_field_attributes(attributes)
        registry = self.context.registry
        if field_id is None:
            field_id = registry.generate_id()

        config = FieldConfig.from_attributes(field_id, attributes)
        # Ни реестр, ни привязки не меняются, если конфигурация отклонена
        for binding in config.derived:
            self.evaluator.check(binding)
        registry.register(config)

        self.evaluator.unbind(field_id)
        for binding in config.derived:
            self.evaluator.bind(binding)

        if refresh and config.init_refresh:
            self._write_settled(config)
        else:
            value = self.context.binding.get_value(field_id) or ""
            self.context.binding.apply_style(field_id, self.context.formatter.style(value, config))

        logger.info("Field %s registered (max_length=%r)", field_id, config.max_length)
        return config

    # -------------------------------------------------------------------------
    # Editing events
    # -------------------------------------------------------------------------

    def on_keydown(self, field_id: str, key_code: int, ctrl: bool = False) -> KeystrokeDecision:
        """
        Решение по нажатию клавиши.

        Raises:
            UnknownFieldError: поле не зарегистрировано
        """
        config = self.context.registry.config(field_id)
        if not config.is_number_field:
            return KeystrokeDecision(
                accepted=True,
                block_reason="",
                key_class=KeyClass.NONE,
                rewrite=None,
                details="not a number field",
            )

        decision = self.context.keystroke_validator.evaluate(
            self._state(field_id),
            key_code,
            self.context.registry.limit_spec(field_id),
            ctrl=ctrl,
            smart_minus=config.smart_minus,
        )
        if decision.rewrite is not None:
            rewrite = decision.rewrite
            logger.debug("Rewrite %s scheduled for %s", rewrite.reason, field_id)
            self.context.queue.schedule(("rewrite", field_id), lambda: self._apply_rewrite(field_id, rewrite))
        return decision

    def on_drag_start(self, field_id: str) -> bool:
        """Перетаскивание выделенного фрагмента запрещено."""
        return not self._state(field_id).has_selection

    def on_composition_start(self, field_id: str) -> None:
        self._compositions[field_id] = self.context.binding.get_value(field_id) or ""

    def on_composition_end(self, field_id: str) -> None:
        """Композиционный ввод отбрасывается: значение восстанавливается как было."""
        previous = self._compositions.pop(field_id, None)
        if previous is None:
            return
        if self.context.binding.get_value(field_id) != previous:
            logger.debug("Composition input discarded on %s", field_id)
            self.context.binding.set_value(field_id, previous)
            self.context.binding.set_selection(field_id, len(previous), len(previous))

    def on_focus(self, field_id: str) -> str:
        """
        Переход к тексту для редактирования.

        Returns:
            Текст, который будет записан отложенной задачей
        """
        config = self.context.registry.config(field_id)
        formatter = self.context.formatter
        value = self.context.binding.get_value(field_id) or ""
        _, end = self.context.binding.get_selection(field_id)

        editing = formatter.editing_text(value, config)
        cursor = min(len(formatter.editing_text(value[:end], config)), len(editing))

        current_style = formatter.style(value, config)
        self.context.binding.apply_style(field_id, FieldStyle(text_align=current_style.text_align, color=None))

        def write() -> None:
            self.context.binding.set_value(field_id, editing)
            self.context.binding.set_selection(field_id, cursor, cursor)

        self.context.queue.schedule(("write", field_id), write)
        return editing

    def on_blur(self, field_id: str) -> str:
        """
        Переход к каноническому отображению.

        Returns:
            Settled текст, который будет записан отложенной задачей
        """
        config = self.context.registry.config(field_id)
        settled = self.context.settle_field(field_id)
        self.context.binding.apply_style(field_id, self.context.formatter.style(settled, config))
        self.context.queue.schedule(("write", field_id), lambda: self.context.binding.set_value(field_id, settled))
        return settled

    def on_change(self, *element_ids: str) -> list[str]:
        """Пересчёт вычисляемых полей, зависящих от изменённых элементов."""
        return self.evaluator.handle_change(*element_ids)

    def flush(self) -> int:
        """Выполнить отложенные задачи."""
        return self.context.queue.run_pending()

    # -------------------------------------------------------------------------
    # Re-initialization
    # -------------------------------------------------------------------------

    def init_refresh(self) -> None:
        """Settle всех полей (кроме data-disable-init-refresh) и переподключение привязок."""
        for config in self.context.registry:
            if config.is_number_field and config.init_refresh:
                self._write_settled(config)
            self.evaluator.unbind(config.field_id)
            for binding in config.derived:
                self.evaluator.bind(binding)

    def set_number_format_standard(self, standard: "NumberFormatStandard | str") -> None:
        """
        Переключение формата чисел: значения переводятся через канонический
        вид, кэш LimitSpec пересобирается, выполняется init_refresh.

        Raises:
            UnknownNumberFormatError: неизвестный стандарт
        """
        binding = self.context.binding
        old_format = self.context.number_format
        old_formatter = self.context.formatter

        # field_id -> (канонический вид, был ли текст с группировкой)
        canonical: dict[str, tuple[str, bool]] = {}
        for field_id in self.context.registry.field_ids():
            value = binding.get_value(field_id)
            if value is not None and old_formatter.is_number(value):
                undressed = old_formatter.undress_number(value)
                canonical[field_id] = (old_format.to_canonical(undressed), undressed != value.strip())

        new_format = self.context.set_number_format(standard)
        new_formatter = self.context.formatter
        for field_id, (value, dressed) in canonical.items():
            converted = new_format.from_canonical(value)
            # Поля без init_refresh не пересобираются: группировка переносится здесь
            binding.set_value(field_id, new_formatter.dress_number(converted) if dressed else converted)
        self.init_refresh()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _state(self, field_id: str) -> EditState:
        text = self.context.binding.get_value(field_id) or ""
        start, end = self.context.binding.get_selection(field_id)
        end = max(0, min(end, len(text)))
        start = max(0, min(start, end))
        return EditState(text, start, end)

    def _apply_rewrite(self, field_id: str, rewrite: Rewrite) -> None:
        updated = rewrite.apply(self._state(field_id))
        if updated is None:
            return
        self.context.binding.set_value(field_id, updated.text)
        self.context.binding.set_selection(field_id, updated.selection_start, updated.selection_end)

    def _write_settled(self, config: FieldConfig) -> None:
        settled = self.context.settle_field(config.field_id)
        self.context.binding.set_value(config.field_id, settled)
        self.context.binding.apply_style(config.field_id, self.context.formatter.style(settled, config))
