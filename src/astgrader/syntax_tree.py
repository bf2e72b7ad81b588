"""
Typed syntax tree for JavaScript submissions.

The submission is parsed with esprima and converted into a small set of frozen
node types. Only the shape needed for grading is kept: the top-level
declarations of the program, and for each function its parameters and the
statements directly inside its body.
"""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Iterator, List, Optional, Tuple, Union

import esprima

from astgrader.errors import SubmissionParseError

logger = logging.getLogger(__name__)

################################################################################
# Node types

class FunctionStyle(str, Enum):
    """How a top-level function was written"""
    DECLARATION = "declaration"     # function f() {}
    EXPRESSION = "expression"       # const f = function () {}
    ARROW = "arrow"                 # const f = () => {}


@dataclass(frozen=True)
class PlainParameter:
    """Parameter without a default value (`name` is None for patterns)"""
    name: Optional[str] = None


@dataclass(frozen=True)
class DefaultedParameter:
    """Parameter with a default value, e.g. `age = 25`"""
    name: Optional[str] = None


@dataclass(frozen=True)
class RestParameter:
    """Rest parameter, e.g. `...args`"""
    name: Optional[str] = None


Parameter = Union[PlainParameter, DefaultedParameter, RestParameter]


@dataclass(frozen=True)
class ReturnStatement:
    """A `return` statement"""


@dataclass(frozen=True)
class OtherStatement:
    """Any statement the grader does not look inside"""
    kind: str


Statement = Union[ReturnStatement, OtherStatement]


@dataclass(frozen=True)
class FunctionDeclaration:
    """A function bound at the top level of the program.

    Args:
        name (Optional[str]): Name of the function, None for anonymous
            default exports.
        params (Tuple[Parameter, ...]): Parameters in declaration order.
        body (Tuple[Statement, ...]): Statements directly in the function
            body. Empty for arrow functions with an expression body.
        style (FunctionStyle): Declaration style.
    """
    name: Optional[str]
    params: Tuple[Parameter, ...] = ()
    body: Tuple[Statement, ...] = ()
    style: FunctionStyle = FunctionStyle.DECLARATION


@dataclass(frozen=True)
class OtherDeclaration:
    """Any top-level statement that does not bind a function"""
    kind: str


Declaration = Union[FunctionDeclaration, OtherDeclaration]


@dataclass(frozen=True)
class Program:
    """Root of the syntax tree"""
    declarations: Tuple[Declaration, ...] = ()

    def functions(self) -> Iterator[FunctionDeclaration]:
        """Iterate over the top-level function declarations in source order"""
        for declaration in self.declarations:
            if isinstance(declaration, FunctionDeclaration):
                yield declaration

################################################################################
# esprima conversion

_FUNCTION_EXPRESSIONS = {
    "FunctionExpression": FunctionStyle.EXPRESSION,
    "ArrowFunctionExpression": FunctionStyle.ARROW,
}


def _identifier_name(node: Any) -> Optional[str]:
    if node is not None and getattr(node, "type", None) == "Identifier":
        return node.name
    return None


def _convert_param(node: Any) -> Parameter:
    kind = node.type
    if kind == "AssignmentPattern":
        return DefaultedParameter(_identifier_name(node.left))
    if kind == "RestElement":
        return RestParameter(_identifier_name(node.argument))
    return PlainParameter(_identifier_name(node))


def _convert_statement(node: Any) -> Statement:
    if node.type == "ReturnStatement":
        return ReturnStatement()
    return OtherStatement(node.type)


def _convert_function(node: Any, name: Optional[str], style: FunctionStyle) -> FunctionDeclaration:
    body = getattr(node, "body", None)
    statements: Tuple[Statement, ...] = ()
    if body is not None and getattr(body, "type", None) == "BlockStatement":
        statements = tuple(_convert_statement(stmt) for stmt in body.body)
    return FunctionDeclaration(
        name=name,
        params=tuple(_convert_param(param) for param in node.params),
        body=statements,
        style=style,
    )


def _convert_declaration(node: Any) -> List[Declaration]:
    kind = node.type

    if kind == "FunctionDeclaration":
        return [_convert_function(node, _identifier_name(node.id), FunctionStyle.DECLARATION)]

    if kind == "VariableDeclaration":
        functions = []
        for declarator in node.declarations:
            init = declarator.init
            if init is not None and init.type in _FUNCTION_EXPRESSIONS:
                functions.append(
                    _convert_function(
                        init,
                        _identifier_name(declarator.id),
                        _FUNCTION_EXPRESSIONS[init.type],
                    )
                )
        return functions or [OtherDeclaration(kind)]

    if kind in ("ExportNamedDeclaration", "ExportDefaultDeclaration"):
        inner = getattr(node, "declaration", None)
        if inner is None:
            return [OtherDeclaration(kind)]
        if inner.type in _FUNCTION_EXPRESSIONS:
            name = _identifier_name(getattr(inner, "id", None))
            return [_convert_function(inner, name, _FUNCTION_EXPRESSIONS[inner.type])]
        converted = _convert_declaration(inner)
        if any(isinstance(decl, FunctionDeclaration) for decl in converted):
            return converted
        return [OtherDeclaration(kind)]

    return [OtherDeclaration(kind)]


def from_esprima(script: Any) -> Program:
    """Convert an esprima Script or Module node into a Program

    Args:
        script: Root node returned by `esprima.parseScript` or
            `esprima.parseModule`.

    Returns:
        Program: The converted tree.
    """
    declarations: List[Declaration] = []
    for node in script.body:
        declarations.extend(_convert_declaration(node))
    return Program(tuple(declarations))


def parse_source(source: str, source_type: str = "script") -> Program:
    """Parse JavaScript source text into a Program

    Args:
        source (str): Source text of the submission.
        source_type (str, optional): "script" or "module". Defaults to "script".

    Returns:
        Program: The parsed tree.

    Raises:
        SubmissionParseError: If the source cannot be parsed.
        ValueError: If `source_type` is not recognised.
    """
    if source_type == "script":
        parser = esprima.parseScript
    elif source_type == "module":
        parser = esprima.parseModule
    else:
        raise ValueError(f"Unknown source type: {source_type}")

    try:
        script = parser(source)
    except Exception as e:
        raise SubmissionParseError(f"Could not parse submission: {e}") from e

    program = from_esprima(script)
    logger.debug(
        f"Parsed {len(program.declarations)} top-level declarations, "
        f"{sum(1 for _ in program.functions())} functions"
    )
    return program
