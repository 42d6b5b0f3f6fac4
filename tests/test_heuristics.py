"""
Test script for heuristic provider validation

Covers:
1. Preset distance metrics and fallback
2. Custom formula parsing, evaluation and failure recovery
3. Lookup tables and table text parsing

Usage:
    python test_heuristics.py
"""

import math
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.heuristics import (
    ExpressionError,
    compile_expression,
    get_custom,
    get_heuristic,
    get_preset,
    get_table,
    parse_heuristic_table,
    preview_heuristic,
)


def test_presets():
    """Test preset metrics relative to goal (5,5)."""
    print("\n" + "="*60)
    print("TEST: Preset Heuristics")
    print("="*60)

    # Query (2,1): dr=-3, dc=-4
    values = {name: get_preset(name, 5, 5)(2, 1)
              for name in ("manhattan", "euclidean", "chebyshev", "zero", "unknown")}
    print(f"  Values at (2,1): {values}")
    assert values["manhattan"] == 7
    assert values["euclidean"] == pytest.approx(5.0)
    assert values["chebyshev"] == 4
    assert values["zero"] == 0
    assert values["unknown"] == 7

    assert get_preset("manhattan", 5, 5)(5, 5) == 0

    print("  [PASS] Preset heuristic tests")


def test_custom_formula_examples():
    """Test the documented custom formula examples."""
    print("\n" + "="*60)
    print("TEST: Custom Formula")
    print("="*60)

    h = get_custom("x+y", 5, 5)
    print(f"  x+y at (0,0) = {h(0, 0)}")
    assert h(0, 0) == 0
    assert h(2, 3) == 5

    bad = get_custom("x+", 5, 5)
    print(f"  'x+' at (0,0) = {bad(0, 0)}")
    assert bad(0, 0) == 0

    print("  [PASS] Custom formula tests")


def test_custom_formula_variables():
    """x is the column, y the row."""
    h = get_custom("abs(x-goal_x)*10 + abs(y-goal_y)", 4, 9)
    # row 1, col 2 -> x=2, y=1
    assert h(1, 2) == 7 * 10 + 3

    js_style = get_custom("Math.abs(x-goal_x)+Math.abs(y-goal_y)", 5, 5)
    assert js_style(0, 0) == 10
    assert js_style(5, 5) == 0


def test_custom_formula_operators():
    """Operator precedence, associativity and functions."""
    cases = {
        "1+2*3": 7,
        "(1+2)*3": 9,
        "2^3^2": 512,
        "2**3": 8,
        "10-2^2": 6,
        "-2+5": 3,
        "7%4": 3,
        "max(x, y, 3)": 3,
        "min(4, 2.5)": 2.5,
        "hypot(x-goal_x, y-goal_y)": 5,
        "sqrt(16)+floor(2.7)+ceil(0.2)": 7,
        "pi": math.pi,
    }
    for formula, expected in cases.items():
        value = get_custom(formula, 5, 5)(1, 2)
        assert value == pytest.approx(expected), formula


def test_custom_formula_failures_yield_zero():
    """Every failure mode degrades to 0 instead of raising."""
    print("\n" + "="*60)
    print("TEST: Custom Formula Failures")
    print("="*60)

    failing = [
        "x+",                    # parse error
        "",                      # empty
        "x - goal_x",            # negative -> clamped
        "-2^2",                  # negative -> clamped
        "1/0",                   # division by zero
        "sqrt(-1)",              # math domain error
        "log(0)",                # math domain error
        "exp(1000)",             # overflow
        "1e400",                 # infinite literal
        "floor(1e300)*floor(1e300)",  # int too large for a float
        "round(1e200)^2",        # float overflow
        "min()",                 # bad arity
        "__import__('os')",      # not whitelisted
        "x.__class__",           # attribute access
        "open",                  # unknown name
        "goal_x $ 2",            # bad character
        "((((x)",                # unbalanced
        "3 4",                   # trailing token
    ]
    for formula in failing:
        value = get_custom(formula, 5, 5)(0, 0)
        print(f"  {formula!r:22} -> {value}")
        assert value == 0, formula

    print("  [PASS] Custom formula failure tests")


def test_compile_expression_errors():
    """The parser itself raises ExpressionError on bad input."""
    for formula in ("x+", "", "foo(1)", "y ) "):
        with pytest.raises(ExpressionError):
            compile_expression(formula)

    tree = compile_expression("x * 2 + goal_y")
    assert tree.evaluate({"x": 3, "y": 0, "goal_x": 0, "goal_y": 1}) == 7


def test_lookup_table():
    """Table overrides first, Manhattan fallback otherwise."""
    print("\n" + "="*60)
    print("TEST: Lookup Table")
    print("="*60)

    h = get_table({"2,3": 7}, 5, 5)
    print(f"  h(2,3) = {h(2, 3)}, h(0,0) = {h(0, 0)}")
    assert h(2, 3) == 7
    assert h(0, 0) == 10

    # Explicit zero overrides are honoured
    assert get_table({"0,0": 0}, 5, 5)(0, 0) == 0

    print("  [PASS] Lookup table tests")


def test_parse_heuristic_table():
    """Only well-formed row,col=value lines are loaded."""
    text = "2,3=7\nnot a line\n4,5=1.5\n\n  0,0 = 2  \n-1,2=3\n1,1=abc"
    table = parse_heuristic_table(text)
    assert table == {"2,3": 7.0, "4,5": 1.5, "0,0": 2.0}


def test_get_heuristic_dispatch():
    """Mode selection and defaults."""
    assert get_heuristic(5, 5)(0, 0) == 10
    assert get_heuristic(5, 5, mode="preset", preset="chebyshev")(0, 2) == 5
    assert get_heuristic(5, 5, mode="custom", formula="x+y")(1, 1) == 2
    assert get_heuristic(5, 5, mode="table", table={"1,1": 42})(1, 1) == 42
    assert get_heuristic(5, 5, mode="table")(1, 1) == 8
    assert get_heuristic(5, 5, mode="nonsense")(0, 0) == 10


def test_preview_heuristic():
    """Preview evaluates at (0,0) with goal (5,5) by default."""
    assert preview_heuristic("x+y") == 0
    assert preview_heuristic("Math.abs(x-goal_x)+Math.abs(y-goal_y)") == 10
    assert preview_heuristic("x+") == 0
    assert preview_heuristic("x", goal=(0, 0), query=(3, 4)) == 4


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# HEURISTIC VALIDATION TESTS")
    print("#"*60)

    tests = [
        ("Presets", test_presets),
        ("Custom Examples", test_custom_formula_examples),
        ("Custom Variables", test_custom_formula_variables),
        ("Custom Operators", test_custom_formula_operators),
        ("Custom Failures", test_custom_formula_failures_yield_zero),
        ("Compile Errors", test_compile_expression_errors),
        ("Lookup Table", test_lookup_table),
        ("Table Parsing", test_parse_heuristic_table),
        ("Dispatch", test_get_heuristic_dispatch),
        ("Preview", test_preview_heuristic),
    ]

    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except AssertionError as e:
            print(f"  [FAIL] {name}: {e}")
            results.append((name, False))

    print("\n" + "="*60)
    print("SUMMARY")
    print("="*60)

    all_passed = True
    for name, passed in results:
        status = "PASS" if passed else "FAIL"
        print(f"  {name}: [{status}]")
        if not passed:
            all_passed = False

    print()
    if all_passed:
        print("All tests PASSED!")
        return 0
    else:
        print("Some tests FAILED!")
        return 1


if __name__ == "__main__":
    sys.exit(main())
