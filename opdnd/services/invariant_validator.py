"""
Invariant Validator
===================
Checks the rules every stored character must satisfy after any mutation:

1. 0 <= current_health <= max_health, 0 <= current_resource <= max_resource
2. derived_final == clamp(derived_baseline + flat_modifiers), and the baseline
   matches a fresh recomputation
3. skill_points >= 0, level >= 1
4. id uniqueness across the store

Pure Python, no I/O. Returns human-readable problems instead of raising so the
reconciler can decide what to do with them.
"""

import logging
from typing import Iterable, List, Optional

from opdnd.data.reference_data import ReferenceData
from opdnd.errors import UnknownRace
from opdnd.models.character import Character
from opdnd.rules.derivation import CANONICAL_FORMULAS, FormulaSet, apply_modifiers, compute_baseline

logger = logging.getLogger(__name__)


def check_pools(character: Character) -> List[str]:
    problems = []
    final = character.derived_final
    if not 0 <= character.current_health <= final.max_health:
        problems.append(f"current_health {character.current_health} outside [0, {final.max_health}]")
    if not 0 <= character.current_resource <= final.max_resource:
        problems.append(f"current_resource {character.current_resource} outside [0, {final.max_resource}]")
    return problems


def check_derived(
    character: Character,
    reference: ReferenceData,
    formulas: FormulaSet = CANONICAL_FORMULAS,
) -> List[str]:
    try:
        race = reference.race(character.race)
    except UnknownRace as e:
        return [str(e)]

    problems = []
    baseline = compute_baseline(race, character.base_stats, character.level, formulas)
    if baseline != character.derived_baseline:
        problems.append(f"derived_baseline {character.derived_baseline} != recomputed {baseline}")

    final = apply_modifiers(character.derived_baseline, character.flat_modifiers)
    if final != character.derived_final:
        problems.append(f"derived_final {character.derived_final} != baseline + modifiers {final}")
    return problems


def check_counters(character: Character) -> List[str]:
    problems = []
    if character.skill_points < 0:
        problems.append(f"skill_points {character.skill_points} < 0")
    if character.level < 1:
        problems.append(f"level {character.level} < 1")
    return problems


def validate_character(
    character: Character,
    reference: ReferenceData,
    formulas: FormulaSet = CANONICAL_FORMULAS,
    other_ids: Optional[Iterable[str]] = None,
) -> List[str]:
    """
    Run every per-character check.

    Args:
        character: The record to check
        reference: Static tables (for the race lookup)
        formulas: Formula set the baseline must match
        other_ids: Ids of the *other* characters in the store, if uniqueness
            should be checked as well
    """
    problems = check_counters(character) + check_derived(character, reference, formulas) + check_pools(character)
    if other_ids is not None and character.id in set(other_ids):
        problems.append(f"id '{character.id}' already used by another character")
    if problems:
        logger.debug(f"character:{character.id} invariant problems: {problems}")
    return problems
