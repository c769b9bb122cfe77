"""
Prefabs Package
===============
Sandboxed formula evaluation used by the derivation engine.
"""

from opdnd.prefabs.formula import (
    FormulaError,
    build_formula_context,
    evaluate,
    evaluate_int,
    validate_formula,
)

__all__ = [
    "FormulaError",
    "build_formula_context",
    "evaluate",
    "evaluate_int",
    "validate_formula",
]
