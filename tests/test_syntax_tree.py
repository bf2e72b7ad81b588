import pytest

from astgrader.errors import SubmissionParseError
from astgrader.syntax_tree import (
    DefaultedParameter,
    FunctionDeclaration,
    FunctionStyle,
    OtherDeclaration,
    OtherStatement,
    PlainParameter,
    RestParameter,
    ReturnStatement,
    parse_source,
)


def test_parse_reference_submission(reference_source, reference_tree) -> None:
    assert parse_source(reference_source) == reference_tree


def test_parse_function_without_params_or_return(bare_source) -> None:
    program = parse_source(bare_source)
    assert program.declarations == (
        FunctionDeclaration("f", body=(OtherStatement("ExpressionStatement"),)),
    )


def test_parse_empty_program() -> None:
    program = parse_source("")
    assert program.declarations == ()
    assert list(program.functions()) == []


def test_function_expressions_are_top_level_functions() -> None:
    program = parse_source(
        "const double = function (x) { return x * 2; };\n"
        "const triple = (x) => x * 3;\n"
        "let count = 0;\n"
    )
    functions = list(program.functions())
    assert [fn.name for fn in functions] == ["double", "triple"]
    assert functions[0].style is FunctionStyle.EXPRESSION
    assert functions[0].body == (ReturnStatement(),)
    assert functions[1].style is FunctionStyle.ARROW
    assert functions[1].body == ()
    assert program.declarations[-1] == OtherDeclaration("VariableDeclaration")


def test_parameter_variants() -> None:
    program = parse_source("function f(a, b = 1, {c}, ...rest) {}")
    (function,) = program.functions()
    assert function.params == (
        PlainParameter("a"),
        DefaultedParameter("b"),
        PlainParameter(None),
        RestParameter("rest"),
    )


def test_nested_returns_are_not_direct_statements() -> None:
    program = parse_source("function f(x) { if (x) { return 1; } }")
    (function,) = program.functions()
    assert function.body == (OtherStatement("IfStatement"),)


def test_nested_functions_are_not_top_level() -> None:
    program = parse_source("if (true) { function inner() { return 1; } }")
    assert list(program.functions()) == []
    assert program.declarations == (OtherDeclaration("IfStatement"),)


def test_exported_functions_in_modules() -> None:
    program = parse_source("export function f(a = 1) { return a; }", source_type="module")
    (function,) = program.functions()
    assert function.name == "f"
    assert function.params == (DefaultedParameter("a"),)


def test_parse_error_is_wrapped() -> None:
    with pytest.raises(SubmissionParseError):
        parse_source("function (")


def test_unknown_source_type() -> None:
    with pytest.raises(ValueError):
        parse_source("", source_type="typescript")
