"""
Exceptions raised by the grader.
"""


class GraderError(Exception):
    """Base class for all grader errors"""


class ConfigurationError(GraderError):
    """The rubric or the grader configuration is invalid.

    Raised while the registry or the configuration is being built, before any
    submission is evaluated.
    """


class CheckEvaluationError(GraderError):
    """A check failed unexpectedly while evaluating a submission.

    The engine records these as failed results and never lets them escape.

    Args:
        check_name (str): Name of the check that failed.
        cause (Exception): The original exception.
    """

    def __init__(self, check_name: str, cause: Exception):
        self.check_name = check_name
        self.cause = cause
        super().__init__(
            f"Check '{check_name}' raised {type(cause).__name__}: {cause}"
        )


class ExternalSinkError(GraderError):
    """A sink could not persist or transmit a result"""


class SubmissionParseError(GraderError):
    """The submission could not be read or parsed"""
