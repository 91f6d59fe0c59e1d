"""
Patterns Module for Alpha Visa Diagnosis

Reusable analytical patterns shared by the scoring engine and the start-up checks.
"""

from .status_classification import (
    StatusClassifier,
    StatusClassification,
    StatusLevel,
    StatusBand,
    find_band_problems,
    SCORE_FLOOR,
    SCORE_CEILING
)

__all__ = [
    'StatusClassifier',
    'StatusClassification',
    'StatusLevel',
    'StatusBand',
    'find_band_problems',
    'SCORE_FLOOR',
    'SCORE_CEILING',
]
