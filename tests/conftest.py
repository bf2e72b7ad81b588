import pytest

from astgrader.syntax_tree import (
    DefaultedParameter,
    FunctionDeclaration,
    OtherDeclaration,
    OtherStatement,
    PlainParameter,
    Program,
    ReturnStatement,
)

REFERENCE_SOURCE = """
function greet(name, age = 25) {
    return `Hello, my name is ${name} and I am ${age} years old.`;
}

console.log(greet('John', 30));

function sum(a, b) {
    return a + b;
}
"""

BARE_SOURCE = """
function f() {
    console.log("hi");
}
"""


@pytest.fixture
def reference_source() -> str:
    return REFERENCE_SOURCE


@pytest.fixture
def bare_source() -> str:
    return BARE_SOURCE


@pytest.fixture
def reference_tree() -> Program:
    return Program((
        FunctionDeclaration(
            "greet",
            params=(PlainParameter("name"), DefaultedParameter("age")),
            body=(ReturnStatement(),),
        ),
        OtherDeclaration("ExpressionStatement"),
        FunctionDeclaration(
            "sum",
            params=(PlainParameter("a"), PlainParameter("b")),
            body=(ReturnStatement(),),
        ),
    ))


@pytest.fixture
def bare_tree() -> Program:
    return Program((
        FunctionDeclaration("f", body=(OtherStatement("ExpressionStatement"),)),
    ))


@pytest.fixture
def empty_tree() -> Program:
    return Program()
