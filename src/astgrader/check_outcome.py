from dataclasses import dataclass
from typing import Tuple

@dataclass(frozen=True)
class CheckOutcome:
    """Outcome that checks must return

    A passing outcome carries no feedback and a failing outcome always
    explains itself.

    Args:
        passed (bool): Whether the submission satisfies the check.
        feedback (Tuple[str, ...]): Feedback messages for the learner.
    """
    passed: bool
    feedback: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "feedback", tuple(self.feedback))
        for message in self.feedback:
            if not isinstance(message, str) or not message:
                raise ValueError(f"Feedback messages must be non-empty strings, got {message!r}")
        if self.passed and self.feedback:
            raise ValueError("A passing outcome must not carry feedback")
        if not self.passed and not self.feedback:
            raise ValueError("A failing outcome must carry feedback")

    @classmethod
    def success(cls) -> "CheckOutcome":
        """Create a passing outcome"""
        return cls(passed=True)

    @classmethod
    def failure(cls, *messages: str) -> "CheckOutcome":
        """Create a failing outcome

        Args:
            *messages (str): One or more feedback messages.
        """
        return cls(passed=False, feedback=messages)
