"""
Assessment Errors

Exception hierarchy shared by the flow engine, the scoring engine and the
start-up consistency check.
"""

from typing import List, Optional


class AssessmentError(Exception):
    """Base class for questionnaire errors."""
    pass


class ConfigurationError(AssessmentError):
    """
    The static question/flow/rule tables are inconsistent.

    Fatal and never user-facing: a broken edge target, a rule that points at
    an option index the question does not have, a missing translation for a
    disqualification message, and so on.
    """

    def __init__(self, message: str, problems: Optional[List[str]] = None):
        self.problems = list(problems or [])
        if self.problems:
            message = f"{message}: " + "; ".join(self.problems)
        super().__init__(message)


class InvalidInputError(AssessmentError, ValueError):
    """The caller passed a step id or answer set the engines cannot accept."""
    pass


class UnknownStepError(InvalidInputError):
    """current_step_id is neither START nor a question in the graph."""

    def __init__(self, step_id: str):
        self.step_id = step_id
        super().__init__(f"Unknown step: {step_id!r}")


class InvalidAnswerError(InvalidInputError):
    """An answer entry references an unknown question or an out-of-range option."""

    def __init__(self, question_id: str, value, reason: str):
        self.question_id = question_id
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid answer for {question_id!r} ({value!r}): {reason}")


class MissingAnswerError(InvalidInputError):
    """advance() was called for a question that has no answer yet."""

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"No answer recorded for {question_id!r}")


class DuplicateAnswerError(InvalidInputError):
    """An answer for this question is already recorded; answer sets are append-only."""

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"Answer for {question_id!r} is already recorded")
