"""
Database Module for Alpha Visa Diagnosis

SQLAlchemy models and database utilities.
"""

from .models import (
    db,
    Diagnosis,
    generate_access_code,
    generate_uuid,
    OUTCOME_IN_PROGRESS,
    OUTCOME_COMPLETED,
    OUTCOME_DISQUALIFIED
)

__all__ = [
    'db',
    'Diagnosis',
    'generate_access_code',
    'generate_uuid',
    'OUTCOME_IN_PROGRESS',
    'OUTCOME_COMPLETED',
    'OUTCOME_DISQUALIFIED',
]
