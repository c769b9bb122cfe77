import pytest

from opdnd.prefabs.formula import FormulaError, build_formula_context, evaluate, evaluate_int, validate_formula


def test_build_context_flattens_nested_numbers():
    context = build_formula_context({"level": 2, "stats": {"con": 14, "name": "x"}, "flag": True})
    assert context == {"level": 2, "stats.con": 14, "flag": 1.0}


def test_dotted_paths_resolve():
    assert evaluate("stats.con + 5", {"stats.con": 16}) == 21


def test_longer_paths_are_not_clobbered_by_shorter_ones():
    context = {"race.base": 1, "race.base_health": 20}
    assert evaluate("race.base_health + race.base", context) == 21


def test_safe_functions():
    assert evaluate("floor((score - 10) / 2)", {"score": 9}) == -1
    assert evaluate("max(0, x - 10)", {"x": 4}) == 0
    assert evaluate_int("round(x * 1.2)", {"x": 20}) == 24


def test_unknown_name_raises():
    with pytest.raises(FormulaError):
        evaluate("missing + 1", {})


def test_empty_formula_raises():
    with pytest.raises(FormulaError):
        evaluate("  ", {})


def test_validate_formula():
    assert validate_formula("level * 2", ["level"]) is None
    assert "forbidden" in validate_formula("__import__('os')", ["level"])
    assert validate_formula("stats.luck", ["level"]) is not None
