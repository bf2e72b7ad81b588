import pytest

from astgrader.check_outcome import CheckOutcome
from astgrader.checks import (
    CHECK_CATALOG,
    DefaultArgumentsUsedCheck,
    FunctionArgumentsUsedCheck,
    FunctionDefinedCheck,
    ReturnStatementUsedCheck,
)
from astgrader.syntax_tree import (
    DefaultedParameter,
    FunctionDeclaration,
    FunctionStyle,
    OtherStatement,
    PlainParameter,
    Program,
    ReturnStatement,
    parse_source,
)

ALL_CHECKS = [
    FunctionDefinedCheck,
    FunctionArgumentsUsedCheck,
    DefaultArgumentsUsedCheck,
    ReturnStatementUsedCheck,
]


@pytest.mark.parametrize("check_class", ALL_CHECKS)
def test_reference_submission_passes_every_check(check_class, reference_tree) -> None:
    assert check_class().evaluate(reference_tree) == CheckOutcome.success()


def test_bare_function_only_passes_definition(bare_tree) -> None:
    assert FunctionDefinedCheck().evaluate(bare_tree).passed
    assert FunctionArgumentsUsedCheck().evaluate(bare_tree).feedback == (
        "You must use function arguments inside your function.",
    )
    assert DefaultArgumentsUsedCheck().evaluate(bare_tree).feedback == (
        "You must use default arguments in your function.",
    )
    assert ReturnStatementUsedCheck().evaluate(bare_tree).feedback == (
        "You must use the return statement inside your function.",
    )


def test_empty_program_fails_every_check(empty_tree) -> None:
    outcomes = {cls.name: cls().evaluate(empty_tree) for cls in ALL_CHECKS}
    assert not any(outcome.passed for outcome in outcomes.values())
    assert outcomes["FunctionDefinition"].feedback == ("You must define a function correctly.",)


def test_checks_scan_past_the_first_function() -> None:
    tree = Program((
        FunctionDeclaration("first"),
        FunctionDeclaration(
            "second",
            params=(DefaultedParameter("x"),),
            body=(OtherStatement("VariableDeclaration"), ReturnStatement()),
        ),
    ))
    assert FunctionArgumentsUsedCheck().evaluate(tree).passed
    assert DefaultArgumentsUsedCheck().evaluate(tree).passed
    assert ReturnStatementUsedCheck().evaluate(tree).passed


def test_function_expressions_count_as_definitions() -> None:
    tree = Program((
        FunctionDeclaration("double", params=(PlainParameter("x"),), style=FunctionStyle.ARROW),
    ))
    assert FunctionDefinedCheck().evaluate(tree).passed
    assert FunctionArgumentsUsedCheck().evaluate(tree).passed
    # Expression-bodied arrows have no return statement
    assert not ReturnStatementUsedCheck().evaluate(tree).passed


def test_nested_return_does_not_count() -> None:
    # function f(x) { if (x) { return 1; } }
    tree = Program((
        FunctionDeclaration(
            "f",
            params=(PlainParameter("x"),),
            body=(OtherStatement("IfStatement"),),
        ),
    ))
    outcome = ReturnStatementUsedCheck().evaluate(tree)
    assert not outcome.passed
    assert outcome.feedback == ("You must use the return statement inside your function.",)


def test_nested_return_in_parsed_source_does_not_count() -> None:
    tree = parse_source("function f(x) { if (x) { return 1; } while (x) { return 2; } }")
    assert not ReturnStatementUsedCheck().evaluate(tree).passed
    assert FunctionArgumentsUsedCheck().evaluate(tree).passed


def test_plain_parameters_are_not_defaults() -> None:
    tree = Program((FunctionDeclaration("f", params=(PlainParameter("a"),)),))
    assert not DefaultArgumentsUsedCheck().evaluate(tree).passed


def test_catalog_lists_checks_in_rubric_order() -> None:
    assert list(CHECK_CATALOG) == [
        "FunctionDefinition",
        "FunctionArgumentsUsage",
        "DefaultArgumentsUsage",
        "ReturnStatementUsage",
    ]


def test_outcome_invariants() -> None:
    with pytest.raises(ValueError):
        CheckOutcome(passed=False)
    with pytest.raises(ValueError):
        CheckOutcome(passed=True, feedback=("unexpected",))
    with pytest.raises(ValueError):
        CheckOutcome.failure("")
    with pytest.raises(ValueError):
        CheckOutcome.failure(42)
    assert CheckOutcome.failure("a", "b").feedback == ("a", "b")
