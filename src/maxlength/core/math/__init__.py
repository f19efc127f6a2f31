"""
Core math modules для maxlength

Точная десятичная арифметика через масштабирование к целым.
"""

from maxlength.core.math.decimal_arithmetic import (
    # Constants
    QUOTIENT_PRECISION,
    REFERENCE_RESOLUTION_DEPTH,
    # Resolution
    Resolution,
    Resolved,
    Unresolved,
    # Primitives
    core_product,
    core_quotient,
    core_rounding,
    core_sum,
    decimal_places,
    from_scaled,
    to_plain_string,
    to_scaled,
    # Engine
    DecimalArithmetic,
)

__all__ = [
    # Constants
    "QUOTIENT_PRECISION",
    "REFERENCE_RESOLUTION_DEPTH",
    # Resolution
    "Resolution",
    "Resolved",
    "Unresolved",
    # Primitives
    "core_product",
    "core_quotient",
    "core_rounding",
    "core_sum",
    "decimal_places",
    "from_scaled",
    "to_plain_string",
    "to_scaled",
    # Engine
    "DecimalArithmetic",
]
