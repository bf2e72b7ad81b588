"""
Grading engine: runs a rubric against a parsed submission.
"""

import logging

from astgrader.check_outcome import CheckOutcome
from astgrader.errors import CheckEvaluationError
from astgrader.registry import CheckRegistry, RubricEntry, check_slug
from astgrader.report import ReportBundle, ResultRecord, Status
from astgrader.syntax_tree import Program

logger = logging.getLogger(__name__)

def result_key(base_id: str, check_name: str) -> str:
    """Derive the stable report key for a check

    `FunctionArgumentsUsage` under base `abc` becomes
    `abc-function-arguments-usage`.
    """
    return f"{base_id}-{check_slug(check_name)}"

class GradingEngine:
    """Runs every check of a registry and collects the results

    Args:
        base_id (str): Assignment-level identifier used to build result keys.
        logger (logging.Logger, optional): Logger instance for logging messages.
    """

    def __init__(self, base_id: str, logger: logging.Logger = None):
        if not base_id:
            raise ValueError("Base identifier is required")
        self._base_id = base_id
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    @property
    def base_id(self) -> str:
        return self._base_id

    def run(self, tree: Program, registry: CheckRegistry, metadata: str = "") -> ReportBundle:
        """Grade a parsed submission

        A check that raises, or returns something other than a CheckOutcome,
        is recorded as a failure and the remaining checks still run.

        Args:
            tree (Program): Parsed submission.
            registry (CheckRegistry): Rubric to grade against.
            metadata (str, optional): Payload attached verbatim to the bundle.

        Returns:
            ReportBundle: One record per registry entry, in registry order.
        """
        results = []
        for entry in registry:
            key = result_key(self._base_id, entry.name)
            record = self._grade(entry, tree)
            if record.passed:
                self.logger.info(f"{record.check_name}: Pass")
            else:
                self.logger.warning(f"{record.check_name}: Fail ({record.feedback})")
            results.append((key, record))

        bundle = ReportBundle(results, metadata=metadata)
        self.logger.info(
            f"Graded {len(bundle)} checks for {self._base_id}: "
            f"score {bundle.total_score}/{bundle.max_score}"
        )
        return bundle

    def _grade(self, entry: RubricEntry, tree: Program) -> ResultRecord:
        self.logger.debug(f"Running check: '{entry.name}'")
        try:
            outcome = entry.check.evaluate(tree)
            if not isinstance(outcome, CheckOutcome):
                raise TypeError(
                    f"Check {entry.name} did not return a CheckOutcome instance"
                )
            return ResultRecord(
                check_name=entry.name,
                category=entry.check.category,
                max_score=entry.max_score,
                earned_score=entry.max_score if outcome.passed else 0,
                status=Status.PASS if outcome.passed else Status.FAIL,
                mandatory=entry.mandatory,
                feedback=", ".join(outcome.feedback),
            )
        except Exception as e:
            error = CheckEvaluationError(entry.name, e)
            self.logger.error(str(error))
            return ResultRecord(
                check_name=entry.name,
                category=entry.check.category,
                max_score=entry.max_score,
                earned_score=0,
                status=Status.FAIL,
                mandatory=entry.mandatory,
                feedback=f"Internal grading error occurred while running check '{entry.name}'.",
            )
