"""Static grader for JavaScript function assignments"""

__version__ = "0.1.0"

from astgrader.base_check import BaseCheck, Category
from astgrader.check_outcome import CheckOutcome
from astgrader.engine import GradingEngine
from astgrader.registry import CheckRegistry, RubricEntry, default_registry
from astgrader.report import ReportBundle, ResultRecord, Status
