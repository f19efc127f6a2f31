"""
Тесты для runtime-объектов контекста

Проверяет:
1. FieldRegistry: регистрация, ленивый кэш LimitSpec, генерация id
2. DeferredTaskQueue: вытеснение по ключу, выполнение вложенных задач
3. InMemoryDocument: селекторы и нативные правки
4. MaxLengthSettings: умолчания и переменные окружения
5. NumberFieldContext: переключение формата, чтение ссылок
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from maxlength.core.domain.field_config import FieldConfig
from maxlength.core.domain.limit_spec import DEFAULT_LIMIT_SPEC
from maxlength.core.domain.number_format import NumberFormatStandard
from maxlength.core.exceptions import UnknownFieldError
from maxlength.runtime.context import NumberFieldContext
from maxlength.runtime.memory_document import InMemoryDocument
from maxlength.runtime.registry import FieldRegistry
from maxlength.runtime.settings import MaxLengthSettings
from maxlength.runtime.task_queue import DeferredTaskQueue

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def registry():
    return FieldRegistry()


@pytest.fixture
def document():
    doc = InMemoryDocument()
    doc.add_element("a", value="1", name="qty", classes=("item", "first"))
    doc.add_element("b", value="2", name="qty", classes=("item",))
    doc.add_element("c", value="3", name="price")
    return doc


# =============================================================================
# ТЕСТЫ РЕЕСТРА
# =============================================================================


class TestFieldRegistry:
    """Тесты для FieldRegistry"""

    def test_register_and_lookup(self, registry) -> None:
        config = FieldConfig(field_id="f", max_length="5.2")
        registry.register(config)
        assert "f" in registry
        assert len(registry) == 1
        assert registry.config("f") is config
        assert registry.limit_spec("f").integral_digits == 5

    def test_unknown_field(self, registry) -> None:
        with pytest.raises(UnknownFieldError) as exc_info:
            registry.config("missing")
        assert exc_info.value.field_id == "missing"

    def test_unknown_field_defaults(self, registry) -> None:
        assert registry.limit_spec("missing") == DEFAULT_LIMIT_SPEC
        assert registry.config_or_default("missing").field_id == "missing"

    def test_reregister_refreshes_spec(self, registry) -> None:
        registry.register(FieldConfig(field_id="f", max_length="5.2"))
        assert registry.limit_spec("f").fractional_digits == 2
        registry.register(FieldConfig(field_id="f", max_length="5"))
        assert registry.limit_spec("f").fractional_digits is None

    def test_resolve_all(self, registry) -> None:
        registry.register(FieldConfig(field_id="f", max_length="5.2"))
        registry.register(FieldConfig(field_id="g"))
        registry.invalidate()
        specs = registry.resolve_all()
        assert set(specs) == {"f", "g"}
        assert specs["g"] == DEFAULT_LIMIT_SPEC
        assert registry.field_ids() == ["f", "g"]

    def test_generate_id_skips_taken(self, registry) -> None:
        registry.register(FieldConfig(field_id="_max_length_no_0"))
        assert registry.generate_id() == "_max_length_no_1"
        assert registry.generate_id() == "_max_length_no_2"


# =============================================================================
# ТЕСТЫ ОЧЕРЕДИ
# =============================================================================


class TestDeferredTaskQueue:
    """Тесты для DeferredTaskQueue"""

    def test_fifo_order(self) -> None:
        queue = DeferredTaskQueue()
        calls = []
        queue.schedule("a", lambda: calls.append("a"))
        queue.schedule("b", lambda: calls.append("b"))
        assert len(queue) == 2
        assert queue.run_pending() == 2
        assert calls == ["a", "b"]
        assert len(queue) == 0

    def test_same_key_superseded(self) -> None:
        queue = DeferredTaskQueue()
        calls = []
        queue.schedule("k", lambda: calls.append(1))
        queue.schedule("k", lambda: calls.append(2))
        assert queue.pending_keys == ["k"]
        queue.run_pending()
        assert calls == [2]

    def test_tasks_scheduled_while_running(self) -> None:
        queue = DeferredTaskQueue()
        calls = []
        queue.schedule("outer", lambda: queue.schedule("inner", lambda: calls.append("inner")))
        assert queue.run_pending() == 2
        assert calls == ["inner"]

    def test_empty(self) -> None:
        assert DeferredTaskQueue().run_pending() == 0


# =============================================================================
# ТЕСТЫ ДОКУМЕНТА
# =============================================================================


class TestInMemoryDocument:
    """Тесты для InMemoryDocument"""

    @pytest.mark.parametrize(
        "selector, expected",
        [
            ("#a", ["a"]),
            (".item", ["a", "b"]),
            (".first", ["a"]),
            ("[name=qty]", ["a", "b"]),
            ('[name="price"]', ["c"]),
            ("#c, .item", ["a", "b", "c"]),
            (".item, #a", ["a", "b"]),
            ("#missing", []),
            ("div > p", []),
            ("", []),
        ],
    )
    def test_select(self, document, selector, expected) -> None:
        assert document.select(selector) == expected

    def test_values_and_names(self, document) -> None:
        assert document.get_value("a") == "1"
        assert document.get_value("missing") is None
        assert document.get_name("b") == "qty"

    def test_set_value_clamps_selection(self, document) -> None:
        document.set_value("a", "12345")
        document.set_selection("a", 2, 5)
        document.set_value("a", "12")
        assert document.get_selection("a") == (2, 2)

    def test_type_text_replaces_selection(self, document) -> None:
        document.set_value("a", "12345")
        document.set_selection("a", 1, 3)
        document.type_text("a", "9")
        assert document.get_value("a") == "1945"
        assert document.get_selection("a") == (2, 2)

    def test_delete_selection(self, document) -> None:
        document.set_value("a", "12.34")
        document.set_selection("a", 1, 4)
        assert document.delete_selection("a") == "2.3"
        assert document.get_value("a") == "14"


# =============================================================================
# ТЕСТЫ НАСТРОЕК И КОНТЕКСТА
# =============================================================================


class TestSettings:
    """Тесты для MaxLengthSettings"""

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("MAXLENGTH_NUMBER_FORMAT", raising=False)
        settings = MaxLengthSettings()
        assert settings.number_format == "ISO"
        assert settings.highlight_color == "#FF0000"
        assert settings.horizontal_align == "right"

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("MAXLENGTH_NUMBER_FORMAT", "EN")
        monkeypatch.setenv("MAXLENGTH_HORIZONTAL_ALIGN", "left")
        settings = MaxLengthSettings()
        assert settings.number_format == "EN"
        assert settings.horizontal_align == "left"

    def test_invalid_env(self, monkeypatch) -> None:
        monkeypatch.setenv("MAXLENGTH_NUMBER_FORMAT", "FR")
        with pytest.raises(ValidationError):
            MaxLengthSettings()


class TestNumberFieldContext:
    """Тесты для NumberFieldContext"""

    def test_built_from_settings(self, document) -> None:
        context = NumberFieldContext.from_settings(document, MaxLengthSettings(number_format="EN"))
        assert context.number_format.standard == NumberFormatStandard.EN
        assert context.formatter.number_format is context.number_format
        assert context.keystroke_validator.number_format is context.number_format

    def test_set_number_format_rebuilds(self, document) -> None:
        context = NumberFieldContext(document, MaxLengthSettings(number_format="ISO"))
        context.registry.register(FieldConfig(field_id="a", max_length="5.2"))
        arithmetic = context.arithmetic

        context.set_number_format("es")
        assert context.number_format.decimal == ","
        assert context.arithmetic is not arithmetic
        assert context.arithmetic.mix_to_number("1.234,5") == Decimal("1234.5")

    def test_reference_resolution(self, document) -> None:
        context = NumberFieldContext(document, MaxLengthSettings(number_format="ISO"))
        assert context.read_reference(".item") == "1"
        assert context.read_reference("#missing") is None
        assert context.arithmetic.mix_to_number("#c") == 3

    def test_settle_field(self, document) -> None:
        context = NumberFieldContext(document, MaxLengthSettings(number_format="ISO"))
        context.registry.register(FieldConfig(field_id="a", max_length="5.2"))
        assert context.settle_field("a") == "1.00"
        assert context.settle_field("a", "1234") == "1 234.00"
