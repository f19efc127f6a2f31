"""Derived fields — пересчёт вычисляемых полей (sum / product / difference / quotient / percent)."""

from .evaluator import DerivedFieldEvaluator, truncate_integral

__all__ = [
    "DerivedFieldEvaluator",
    "truncate_integral",
]
