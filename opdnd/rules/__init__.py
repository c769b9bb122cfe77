from opdnd.rules.derivation import (
    CANONICAL_FORMULAS,
    FormulaSet,
    ability_modifier,
    apply_modifiers,
    compute_baseline,
    derive,
)

__all__ = [
    "CANONICAL_FORMULAS",
    "FormulaSet",
    "ability_modifier",
    "apply_modifiers",
    "compute_baseline",
    "derive",
]
