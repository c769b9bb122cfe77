"""
Formula Evaluation Engine
=========================
Safe evaluation of the derivation formulas.
Uses simpleeval for sandboxed execution.

Supports:
- Arithmetic: +, -, *, /, //, %
- Functions: floor(), ceil(), max(), min(), abs(), round()
- Paths: stats.con, race.base_health (converted to valid identifiers)

Unlike a display helper, derivation must never silently fall back to a default,
so evaluation errors raise ``FormulaError``.
"""

import logging
import math
import re
from typing import Any, Dict, Iterable, Optional

from simpleeval import simple_eval

logger = logging.getLogger(__name__)


class FormulaError(ValueError):
    pass


# =============================================================================
# SAFE FUNCTIONS FOR FORMULAS
# =============================================================================

SAFE_FUNCTIONS = {
    "floor": lambda x: int(math.floor(x)),
    "ceil": lambda x: int(math.ceil(x)),
    "max": max,
    "min": min,
    "abs": abs,
    "round": round,
}

_FORBIDDEN_PATTERNS = (r"__", r"import", r"exec", r"eval", r"open", r"lambda")


# =============================================================================
# CONTEXT
# =============================================================================


def _path_to_identifier(path: str) -> str:
    """
    Convert a dot-path to a valid Python identifier.

    Examples:
        "stats.con" -> "stats_con"
        "race.base_health" -> "race_base_health"
    """
    return path.replace(".", "_").replace("-", "_")


def _prepare_formula(formula: str, context_keys: Iterable[str]) -> str:
    """Replace dotted paths that exist in the context with identifiers."""
    result = formula
    # Longest first to avoid partial replacements
    for key in sorted(context_keys, key=len, reverse=True):
        if "." in key:
            result = re.sub(rf"\b{re.escape(key)}\b", _path_to_identifier(key), result)
    return result


def build_formula_context(values: Dict[str, Any], prefix: str = "") -> Dict[str, float]:
    """
    Flatten nested numeric values into a {dot.path: number} dict.

    Booleans become 0/1, strings and lists are skipped.
    """
    context: Dict[str, float] = {}
    for key, value in values.items():
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            context.update(build_formula_context(value, path))
        elif isinstance(value, bool):
            context[path] = 1.0 if value else 0.0
        elif isinstance(value, (int, float)):
            context[path] = value
    return context


# =============================================================================
# FORMULA EVALUATION
# =============================================================================


def evaluate(formula: str, context: Dict[str, Any]) -> float:
    """
    Evaluate a formula string against a flat context.

    Examples:
        >>> evaluate("floor((score - 10) / 2)", {"score": 18})
        4
        >>> evaluate("stats.con + 5", {"stats.con": 16})
        21
    """
    if not formula or not isinstance(formula, str) or not formula.strip():
        raise FormulaError("Empty formula.")

    prepared = _prepare_formula(formula.strip(), context.keys())
    names = {_path_to_identifier(k): v for k, v in context.items()}

    try:
        result = simple_eval(prepared, names=names, functions=SAFE_FUNCTIONS)
    except Exception as e:
        raise FormulaError(f"Formula evaluation failed for '{formula}': {e}") from e

    if isinstance(result, bool):
        return 1 if result else 0
    if not isinstance(result, (int, float)):
        raise FormulaError(f"Formula '{formula}' produced a non-numeric result: {result!r}")
    return result


def evaluate_int(formula: str, context: Dict[str, Any]) -> int:
    """Evaluate and truncate to int. Formulas are expected to round/floor themselves."""
    return int(evaluate(formula, context))


def validate_formula(formula: str, available_paths: Iterable[str]) -> Optional[str]:
    """
    Check a formula against the paths it may reference.

    Returns:
        Error message if invalid, None if valid
    """
    if not formula or not isinstance(formula, str):
        return "Formula is empty."

    for pattern in _FORBIDDEN_PATTERNS:
        if re.search(pattern, formula, re.IGNORECASE):
            return f"Formula contains forbidden pattern: {pattern}"

    # Dummy context with every path set to 10 catches syntax errors and unknown names
    try:
        evaluate(formula, {path: 10 for path in available_paths})
    except FormulaError as e:
        return str(e)
    return None
