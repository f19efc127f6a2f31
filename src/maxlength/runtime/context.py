"""
Number Field Context — явный контекст вместо глобального состояния

Собирает все компоненты, зависящие от формата чисел (арифметика,
форматтер, валидатор нажатий), а также реестр полей и очередь
отложенных задач. Смена формата выполняется одной точкой входа
set_number_format, которая пересобирает компоненты и сбрасывает
кэш LimitSpec.
"""

import logging

from maxlength.core.domain.field_config import HorizontalAlign
from maxlength.core.domain.number_format import NumberFormat, NumberFormatStandard, get_number_format
from maxlength.core.math.decimal_arithmetic import DecimalArithmetic
from maxlength.editing.keystroke_validator import KeystrokeValidator, KeystrokeValidatorConfig
from maxlength.presentation.formatter import PresentationFormatter, resolve_alignment, resolve_highlight_color
from maxlength.runtime.binding import ElementBinding, read_reference
from maxlength.runtime.registry import FieldRegistry
from maxlength.runtime.settings import MaxLengthSettings
from maxlength.runtime.task_queue import DeferredTaskQueue

logger = logging.getLogger(__name__)


class NumberFieldContext:
    """Контекст, передаваемый во все компоненты."""

    def __init__(
        self,
        binding: ElementBinding,
        settings: MaxLengthSettings | None = None,
        validator_config: KeystrokeValidatorConfig | None = None,
    ):
        """
        Args:
            binding: доступ к элементам хоста
            settings: умолчания процесса (по умолчанию из окружения)
            validator_config: настройки валидатора нажатий
        """
        self.binding = binding
        self.settings = settings or MaxLengthSettings()
        self.validator_config = validator_config or KeystrokeValidatorConfig()
        self.registry = FieldRegistry()
        self.queue = DeferredTaskQueue()
        self.highlight_color = resolve_highlight_color(self.settings.highlight_color)
        self.horizontal_align = resolve_alignment(self.settings.horizontal_align, HorizontalAlign.RIGHT)
        self._build(get_number_format(self.settings.number_format))

    @classmethod
    def from_settings(cls, binding: ElementBinding, settings: MaxLengthSettings) -> "NumberFieldContext":
        return cls(binding, settings=settings)

    def _build(self, number_format: NumberFormat) -> None:
        self.number_format = number_format
        self.arithmetic = DecimalArithmetic(number_format, self.read_reference)
        self.formatter = PresentationFormatter(number_format, self.highlight_color, self.horizontal_align)
        self.keystroke_validator = KeystrokeValidator(number_format, self.validator_config)

    def read_reference(self, selector: str) -> str | None:
        value = read_reference(self.binding, selector)
        if value is None:
            logger.warning("Element reference %r matched no element", selector)
        return value

    def set_number_format(self, standard: "NumberFormatStandard | str") -> NumberFormat:
        """
        Переключение формата чисел во время работы.

        Raises:
            UnknownNumberFormatError: неизвестный стандарт
        """
        number_format = get_number_format(standard)
        logger.info(
            "Number format switched %s -> %s", self.number_format.standard.value, number_format.standard.value
        )
        self._build(number_format)
        self.registry.invalidate()
        self.registry.resolve_all()
        return number_format

    def settle_field(self, field_id: str, value: str | None = None) -> str:
        """Каноническое отображение значения поля (по умолчанию текущего)."""
        if value is None:
            value = self.binding.get_value(field_id) or ""
        config = self.registry.config_or_default(field_id)
        return self.formatter.settle(value, config, self.registry.limit_spec(field_id))
