"""
Alpha Visa Diagnosis Assessment Module

Eligibility questionnaire for the Spanish international-teleworker visa:
- Branching question flow with early disqualification
- Penalty-based eligibility scoring
- Localized labels (pt, en, es)
"""

from .assessment_engine import ScoreResult, ScoringEngine, build_penalty_rules, get_scoring_engine
from .consistency import check_configuration, find_configuration_problems
from .errors import (
    AssessmentError,
    ConfigurationError,
    DuplicateAnswerError,
    InvalidAnswerError,
    InvalidInputError,
    MissingAnswerError,
    UnknownStepError
)
from .flow import (
    COMPLETED,
    START,
    Completed,
    Disqualified,
    FlowEngine,
    NextQuestion,
    StepResult
)
from .questions import QUESTIONS, QUESTIONS_BY_ID
from .translations import DEFAULT_LOCALE, SUPPORTED_LOCALES

__all__ = [
    'ScoreResult', 'ScoringEngine', 'build_penalty_rules', 'get_scoring_engine',
    'check_configuration', 'find_configuration_problems',
    'AssessmentError', 'ConfigurationError', 'DuplicateAnswerError', 'InvalidAnswerError', 'InvalidInputError',
    'MissingAnswerError', 'UnknownStepError',
    'COMPLETED', 'START', 'Completed', 'Disqualified', 'FlowEngine', 'NextQuestion',
    'StepResult',
    'QUESTIONS', 'QUESTIONS_BY_ID', 'DEFAULT_LOCALE', 'SUPPORTED_LOCALES',
]
