"""
maxlength — бюджет разрядов числовых полей и точная десятичная арифметика.

Публичный API:
- resolve_limit_spec / LimitSpec: разбор дескриптора "[-]I[.F]"
- DecimalArithmetic: sum / product / quotient / round / floor / ceil без дрейфа float
- KeystrokeValidator / SelectionReplaceValidator: допуск правок
- PresentationFormatter: settle / editing_text
- NumberFieldController: точки входа событий хоста
"""

from maxlength.core.domain import (
    DEFAULT_LIMIT_SPEC,
    EditState,
    FieldConfig,
    LimitSpec,
    NumberFormat,
    NumberFormatStandard,
    get_number_format,
    resolve_limit_spec,
)
from maxlength.core.exceptions import (
    ConfigurationError,
    DerivedFieldConfigError,
    DerivedFieldCycleError,
    MaxLengthError,
    UnknownFieldError,
    UnknownNumberFormatError,
)
from maxlength.core.math import DecimalArithmetic
from maxlength.derived import DerivedFieldEvaluator
from maxlength.editing import KeystrokeDecision, KeystrokeValidator, SelectionReplaceValidator
from maxlength.presentation import PresentationFormatter
from maxlength.runtime import InMemoryDocument, MaxLengthSettings, NumberFieldContext
from maxlength.runtime.controller import NumberFieldController

__version__ = "1.7.7"

__all__ = [
    # Domain
    "DEFAULT_LIMIT_SPEC",
    "EditState",
    "FieldConfig",
    "LimitSpec",
    "NumberFormat",
    "NumberFormatStandard",
    "get_number_format",
    "resolve_limit_spec",
    # Errors
    "MaxLengthError",
    "ConfigurationError",
    "DerivedFieldConfigError",
    "DerivedFieldCycleError",
    "UnknownFieldError",
    "UnknownNumberFormatError",
    # Engines
    "DecimalArithmetic",
    "KeystrokeDecision",
    "KeystrokeValidator",
    "SelectionReplaceValidator",
    "PresentationFormatter",
    "DerivedFieldEvaluator",
    # Runtime
    "InMemoryDocument",
    "MaxLengthSettings",
    "NumberFieldContext",
    "NumberFieldController",
]
