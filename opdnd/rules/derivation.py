"""
Derivation Engine
=================
Pure mapping from (race, base stats, level, flat modifiers) to the derived stat
bundles. No I/O, no mutation: same inputs always give the same outputs.

There is exactly one canonical formula set. Player-facing and DM-facing flows
both go through ``compute_baseline`` so they can never disagree.

Canonical formulas:
    base_health   = round(max(0, race.base_health + max(0, con - 10)) * (1 + 0.2 * (level - 1)))
    base_resource = race.base_resource + 2*max(0, int - 10) + 2*max(0, wis - 10) + 5*level
    base_reflex   = race.base_reflex + floor(dex / 5) + floor(level / 3)
"""

import math
from typing import Dict

from pydantic import BaseModel, ConfigDict

from opdnd.errors import ValidationError
from opdnd.models.character import STAT_KEYS, AbilityScores, DerivedBaseline, DerivedFinal, FlatModifiers
from opdnd.models.reference import Race
from opdnd.prefabs.formula import build_formula_context, evaluate_int, validate_formula

FORMULA_PATHS = (
    ["level"]
    + [f"stats.{k}" for k in STAT_KEYS]
    + ["race.base_health", "race.base_resource", "race.base_reflex"]
)


class FormulaSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_health: str = "round(max(0, race.base_health + max(0, stats.con - 10)) * (1 + 0.2 * (level - 1)))"
    base_resource: str = (
        "race.base_resource + 2 * max(0, stats.int - 10) + 2 * max(0, stats.wis - 10) + 5 * level"
    )
    base_reflex: str = "race.base_reflex + floor(stats.dex / 5) + floor(level / 3)"

    def check(self) -> "FormulaSet":
        for channel, formula in self.model_dump().items():
            problem = validate_formula(formula, FORMULA_PATHS)
            if problem:
                raise ValidationError(f"Formula for {channel} is invalid: {problem}")
        return self


CANONICAL_FORMULAS = FormulaSet().check()


def ability_modifier(score: int) -> int:
    """floor((score - 10) / 2): display value and default melee bonus."""
    return math.floor((score - 10) / 2)


def _context(race: Race, base_stats: AbilityScores, level: int) -> Dict[str, float]:
    return build_formula_context(
        {
            "level": level,
            "stats": base_stats.model_dump(),
            "race": {
                "base_health": race.base_health,
                "base_resource": race.base_resource,
                "base_reflex": race.base_reflex,
            },
        }
    )


def compute_baseline(
    race: Race,
    base_stats: AbilityScores,
    level: int,
    formulas: FormulaSet = CANONICAL_FORMULAS,
) -> DerivedBaseline:
    """
    Baseline derived stats, before DM modifiers.

    Preconditions: ``race`` came from the race table (``ReferenceData.race``
    raises ``UnknownRace`` otherwise), ``level >= 1`` and every stat ``>= 1``.
    """
    if level < 1:
        raise ValidationError(f"Level must be >= 1, got {level}.")

    context = _context(race, base_stats, level)
    return DerivedBaseline(
        base_health=evaluate_int(formulas.base_health, context),
        base_resource=evaluate_int(formulas.base_resource, context),
        base_reflex=evaluate_int(formulas.base_reflex, context),
    )


def apply_modifiers(baseline: DerivedBaseline, modifiers: FlatModifiers) -> DerivedFinal:
    """Add the DM's flat modifiers and clamp (health >= 1, resource >= 0, reflex >= 0)."""
    return DerivedFinal(
        max_health=max(1, baseline.base_health + modifiers.health_mod),
        max_resource=max(0, baseline.base_resource + modifiers.resource_mod),
        reflex=max(0, baseline.base_reflex + modifiers.reflex_mod),
    )


def derive(
    race: Race,
    base_stats: AbilityScores,
    level: int,
    modifiers: FlatModifiers,
    formulas: FormulaSet = CANONICAL_FORMULAS,
):
    """Both bundles in one call: (baseline, final)."""
    baseline = compute_baseline(race, base_stats, level, formulas)
    return baseline, apply_modifiers(baseline, modifiers)
