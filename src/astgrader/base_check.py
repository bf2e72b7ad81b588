"""
Abstract check class for creating structural grading checks.
"""

from abc import ABC, abstractmethod
from enum import Enum
import logging

from astgrader.check_outcome import CheckOutcome
from astgrader.syntax_tree import Program

class Category(str, Enum):
    """Report category a check belongs to"""
    FUNCTIONAL = "functional"
    BOUNDARY = "boundary"
    EXCEPTION = "exception"

class BaseCheck(ABC):
    """Abstract base class for checks.

    This class defines the interface for creating structural checks.
    Subclasses set `name` and `category` and implement `evaluate`. Checks
    must only inspect the tree: they hold no state between calls and never
    modify the program they are given.
    """
    name: str = ""
    category: Category = Category.FUNCTIONAL

    def __init__(self, logger: logging.Logger = None):
        """Initialize the check.

        Args:
            logger (logging.Logger, optional): Logger instance for logging messages.
        """
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    @abstractmethod
    def evaluate(self, tree: Program) -> CheckOutcome:
        """Evaluate the check against a parsed submission.

        The absence of the construct being looked for is a normal failing
        outcome, not an error.

        Args:
            tree (Program): Parsed submission.

        Returns:
            CheckOutcome: Whether the check passed, with feedback if not.
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, category={self.category.value!r})"
