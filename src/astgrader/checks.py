"""
Reference checks for the functions assignment.

Every check scans all top-level functions before failing, and only the
top-level ones: functions nested in other functions or blocks are ignored.
"""

from typing import Dict, Type

from astgrader.base_check import BaseCheck, Category
from astgrader.check_outcome import CheckOutcome
from astgrader.syntax_tree import DefaultedParameter, Program, ReturnStatement

class FunctionDefinedCheck(BaseCheck):
    """Passes if the program defines at least one top-level function"""
    name = "FunctionDefinition"
    category = Category.FUNCTIONAL

    def evaluate(self, tree: Program) -> CheckOutcome:
        self.logger.debug("Checking function definition")
        function = next(tree.functions(), None)
        if function is not None:
            self.logger.debug(f"Found function {function.name!r} ({function.style.value})")
            return CheckOutcome.success()
        return CheckOutcome.failure("You must define a function correctly.")

class FunctionArgumentsUsedCheck(BaseCheck):
    """Passes if a top-level function declares at least one parameter"""
    name = "FunctionArgumentsUsage"
    category = Category.FUNCTIONAL

    def evaluate(self, tree: Program) -> CheckOutcome:
        self.logger.debug("Checking function arguments usage")
        if any(function.params for function in tree.functions()):
            return CheckOutcome.success()
        return CheckOutcome.failure("You must use function arguments inside your function.")

class DefaultArgumentsUsedCheck(BaseCheck):
    """Passes if any top-level function has a parameter with a default value"""
    name = "DefaultArgumentsUsage"
    category = Category.FUNCTIONAL

    def evaluate(self, tree: Program) -> CheckOutcome:
        self.logger.debug("Checking default arguments usage")
        for function in tree.functions():
            if any(isinstance(param, DefaultedParameter) for param in function.params):
                return CheckOutcome.success()
        return CheckOutcome.failure("You must use default arguments in your function.")

class ReturnStatementUsedCheck(BaseCheck):
    """Passes if a top-level function body directly contains a return.

    Returns inside nested blocks (if, loops, inner functions) do not count.
    """
    name = "ReturnStatementUsage"
    category = Category.FUNCTIONAL

    def evaluate(self, tree: Program) -> CheckOutcome:
        self.logger.debug("Checking return statement usage")
        for function in tree.functions():
            if any(isinstance(statement, ReturnStatement) for statement in function.body):
                return CheckOutcome.success()
        return CheckOutcome.failure("You must use the return statement inside your function.")

# Checks that can be named in a configuration file, in rubric order
CHECK_CATALOG: Dict[str, Type[BaseCheck]] = {
    check.name: check
    for check in (
        FunctionDefinedCheck,
        FunctionArgumentsUsedCheck,
        DefaultArgumentsUsedCheck,
        ReturnStatementUsedCheck,
    )
}
