"""
Database Models for Alpha Visa Diagnosis

SQLAlchemy model for diagnosis sessions: candidate contact data, the
append-only answer set, the flow position and the stored report.
"""

import secrets
import uuid
from datetime import datetime
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import JSON

from src.assessment.errors import DuplicateAnswerError

db = SQLAlchemy()

# Look-alike characters (I, O, 0, 1) are left out
ACCESS_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
ACCESS_CODE_LENGTH = 6

OUTCOME_IN_PROGRESS = 'in_progress'
OUTCOME_COMPLETED = 'completed'
OUTCOME_DISQUALIFIED = 'disqualified'


def generate_uuid():
    return str(uuid.uuid4())


def generate_access_code():
    return ''.join(secrets.choice(ACCESS_CODE_ALPHABET) for _ in range(ACCESS_CODE_LENGTH))


class Diagnosis(db.Model):
    """
    One candidate's walk through the questionnaire.

    Created on START, updated once per answer, and completed with the
    scored report on GENERATE_REPORT.
    """
    __tablename__ = 'alpha_diagnoses'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    session_id = db.Column(db.String(36), unique=True, nullable=False, index=True, default=generate_uuid)
    access_code = db.Column(db.String(ACCESS_CODE_LENGTH), unique=True, nullable=False, index=True)

    # Candidate details
    email = db.Column(db.String(200), nullable=False)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    whatsapp = db.Column(db.String(50))
    passport_country = db.Column(db.String(100))
    language = db.Column(db.String(5), default='pt')

    # Flow state
    current_step_id = db.Column(db.String(20))
    answers = db.Column(JSON, default=dict)
    outcome = db.Column(db.String(20), default=OUTCOME_IN_PROGRESS)
    disqualification_reason = db.Column(db.String(50))

    # Report
    score = db.Column(db.Integer)
    status = db.Column(db.String(50))
    status_key = db.Column(db.String(30))
    status_color = db.Column(db.String(10))
    report = db.Column(JSON)
    ai_analysis = db.Column(db.Text)
    cta_recommended = db.Column(db.String(20))

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    completed_at = db.Column(db.DateTime)

    @property
    def is_finished(self) -> bool:
        """The flow reached completion or a disqualification."""
        return self.outcome in (OUTCOME_COMPLETED, OUTCOME_DISQUALIFIED)

    @property
    def has_report(self) -> bool:
        return self.completed_at is not None

    def record_answer(self, question_id: str, answer_index: int):
        """Append an answer; an answer set is never overwritten."""
        current = dict(self.answers or {})
        if question_id in current:
            raise DuplicateAnswerError(question_id)
        current[question_id] = answer_index
        # Reassign so the JSON column is flagged dirty
        self.answers = current

    def finish(self, outcome: str, reason_code: str = None):
        self.outcome = outcome
        self.disqualification_reason = reason_code
        self.current_step_id = None

    def to_dict(self):
        return {
            'session_id': self.session_id,
            'access_code': self.access_code,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'whatsapp': self.whatsapp,
            'passport_country': self.passport_country,
            'language': self.language,
            'current_step_id': self.current_step_id,
            'answers': dict(self.answers or {}),
            'outcome': self.outcome,
            'disqualification_reason': self.disqualification_reason,
            'score': self.score,
            'status': self.status,
            'status_key': self.status_key,
            'status_color': self.status_color,
            'report': self.report,
            'ai_analysis': self.ai_analysis,
            'cta_recommended': self.cta_recommended,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None
        }
