"""
Domain models and value objects.

Contains LimitSpec, NumberFormat, FieldConfig, DerivedFieldBinding, EditState.
"""

from maxlength.core.domain.edit_state import EditState
from maxlength.core.domain.field_config import (
    DerivedFieldBinding,
    DerivedOperation,
    FieldConfig,
    HorizontalAlign,
    RoundingMode,
)
from maxlength.core.domain.limit_spec import (
    DEFAULT_INTEGRAL_DIGITS,
    DEFAULT_LIMIT_SPEC,
    LimitSpec,
    resolve_limit_spec,
)
from maxlength.core.domain.number_format import (
    NUMBER_FORMATS,
    NumberFormat,
    NumberFormatStandard,
    get_number_format,
)

__all__ = [
    # Limit spec
    "DEFAULT_INTEGRAL_DIGITS",
    "DEFAULT_LIMIT_SPEC",
    "LimitSpec",
    "resolve_limit_spec",
    # Number format
    "NUMBER_FORMATS",
    "NumberFormat",
    "NumberFormatStandard",
    "get_number_format",
    # Field config
    "DerivedFieldBinding",
    "DerivedOperation",
    "FieldConfig",
    "HorizontalAlign",
    "RoundingMode",
    # Edit state
    "EditState",
]
