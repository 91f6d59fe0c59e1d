import pytest

from src.assessment.errors import DuplicateAnswerError
from src.database.models import (
    ACCESS_CODE_ALPHABET,
    OUTCOME_DISQUALIFIED,
    Diagnosis,
    db,
    generate_access_code,
)


def test_access_code_alphabet_excludes_look_alikes():
    for _ in range(50):
        code = generate_access_code()
        assert len(code) == 6
        assert set(code) <= set(ACCESS_CODE_ALPHABET)
        assert not set(code) & set("IO01")


def test_diagnosis_round_trip(app):
    with app.app_context():
        diagnosis = Diagnosis(access_code="ABC234", email="ana@example.com", answers={})
        diagnosis.record_answer("q_V1", 0)
        db.session.add(diagnosis)
        db.session.commit()

        stored = Diagnosis.query.filter_by(access_code="ABC234").first()
        data = stored.to_dict()

        assert len(stored.session_id) == 36
        assert data["answers"] == {"q_V1": 0}
        assert data["outcome"] == "in_progress"
        assert data["completed_at"] is None
        assert not stored.is_finished


def test_answers_are_append_only():
    diagnosis = Diagnosis(access_code="XYZ789", email="a@example.com", answers={"q_V1": 2})

    with pytest.raises(DuplicateAnswerError):
        diagnosis.record_answer("q_V1", 0)

    assert diagnosis.answers == {"q_V1": 2}


def test_finish_clears_current_step():
    diagnosis = Diagnosis(access_code="XYZ789", email="a@example.com", current_step_id="q_V2")

    diagnosis.finish(OUTCOME_DISQUALIFIED, "KO_EU_CITIZEN")

    assert diagnosis.is_finished
    assert diagnosis.current_step_id is None
    assert diagnosis.disqualification_reason == "KO_EU_CITIZEN"
