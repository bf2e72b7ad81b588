"""
Result records and the report bundle produced by a grading run.
"""

from dataclasses import dataclass
from enum import Enum
import json
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Tuple

from astgrader.base_check import Category

class Status(str, Enum):
    """Graded status of a single check"""
    PASS = "Pass"
    FAIL = "Fail"

@dataclass(frozen=True)
class ResultRecord:
    """Graded outcome of one check

    Args:
        check_name (str): Name of the check.
        category (Category): Report category of the check.
        max_score (float): Score available for the check.
        earned_score (float): Either 0 or `max_score`.
        status (Status): Pass if the full score was earned.
        mandatory (bool): Whether a failure blocks acceptance.
        feedback (str): Feedback messages joined into one string.
    """
    check_name: str
    category: Category
    max_score: float
    earned_score: float
    status: Status
    mandatory: bool
    feedback: str = ""

    def __post_init__(self):
        if self.earned_score not in (0, self.max_score):
            raise ValueError(
                f"Earned score for '{self.check_name}' must be 0 or {self.max_score}, "
                f"got {self.earned_score}"
            )
        if (self.status is Status.PASS) != (self.earned_score == self.max_score):
            raise ValueError(f"Status of '{self.check_name}' does not match its score")
        if (self.status is Status.PASS) != (self.feedback == ""):
            raise ValueError(f"Feedback of '{self.check_name}' does not match its status")

    @property
    def passed(self) -> bool:
        return self.status is Status.PASS

    def to_dict(self) -> dict:
        return {
            "checkName": self.check_name,
            "category": self.category.value,
            "maxScore": self.max_score,
            "earnedScore": self.earned_score,
            "status": self.status.value,
            "mandatory": self.mandatory,
            "feedback": self.feedback,
        }

class ReportBundle:
    """Read-only, ordered collection of results from one grading run

    Args:
        results (Iterable[Tuple[str, ResultRecord]]): Keyed records in
            rubric order.
        metadata (str, optional): Opaque payload passed through to sinks.
    """

    def __init__(self, results: Iterable[Tuple[str, ResultRecord]], metadata: str = ""):
        records: Dict[str, ResultRecord] = {}
        for key, record in results:
            if key in records:
                raise ValueError(f"Duplicate result key: '{key}'")
            records[key] = record
        self._results = MappingProxyType(records)
        self._metadata = metadata

    @property
    def results(self) -> Mapping[str, ResultRecord]:
        """Get the results keyed by their stable key"""
        return self._results

    @property
    def metadata(self) -> str:
        return self._metadata

    def items(self) -> Iterator[Tuple[str, ResultRecord]]:
        """Iterate over (key, record) pairs in insertion order"""
        return iter(self._results.items())

    def __iter__(self) -> Iterator[str]:
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __getitem__(self, key: str) -> ResultRecord:
        return self._results[key]

    def __eq__(self, other) -> bool:
        if not isinstance(other, ReportBundle):
            return NotImplemented
        return list(self.items()) == list(other.items()) and self.metadata == other.metadata

    def __repr__(self) -> str:
        return f"ReportBundle(results={dict(self._results)!r}, metadata={self._metadata!r})"

    @property
    def total_score(self) -> float:
        return sum(record.earned_score for record in self._results.values())

    @property
    def max_score(self) -> float:
        return sum(record.max_score for record in self._results.values())

    @property
    def accepted(self) -> bool:
        """True when no mandatory check failed"""
        return not any(
            record.mandatory and not record.passed for record in self._results.values()
        )

    def to_dict(self) -> dict:
        return {
            "results": {key: record.to_dict() for key, record in self.items()},
            "metadata": self._metadata,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
