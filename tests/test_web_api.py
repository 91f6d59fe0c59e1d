import gc

import pytest

from config.settings import TestingConfig
from src.assessment.errors import ConfigurationError, InvalidInputError
from src.database.models import Diagnosis
from web.app import create_app, normalize_answer


def start(client, language="en", email="ana@example.com"):
    return client.post("/api/diagnose", json={
        "action": "START",
        "language": language,
        "userData": {"email": email, "firstName": "Ana", "lastName": "Silva", "passportCountry": "Brazil"},
    })


def respond(client, session_id, answer):
    return client.post("/api/diagnose", json={
        "action": "RESPONSE",
        "sessionId": session_id,
        "responseData": answer,
    })


def generate_report(client, session_id):
    return client.post("/api/diagnose", json={"action": "GENERATE_REPORT", "sessionId": session_id})


def answer_until_finished(client, payload, choices=None):
    choices = choices or {}
    session_id = payload["sessionId"]
    while not payload["finished"]:
        question_id = payload["question"]["id"]
        response = respond(client, session_id, choices.get(question_id, 0))
        assert response.status_code == 200
        payload = response.get_json()
    return payload


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_question_catalog(client):
    payload = client.get("/api/questions?locale=es").get_json()

    assert payload["locale"] == "es"
    assert len(payload["questions"]) == 27
    assert payload["questions"][0]["id"] == "q_V1"
    assert payload["questions"][0]["options"][0] == {"index": 0, "label": "Fundador/Socio de empresa"}


def test_start_requires_email(client):
    response = client.post("/api/diagnose", json={"action": "START", "userData": {}})

    assert response.status_code == 400


def test_start_returns_first_question(client):
    response = start(client)
    payload = response.get_json()

    assert response.status_code == 200
    assert payload["success"] is True
    assert len(payload["accessCode"]) == 6
    assert payload["type"] == "question"
    assert payload["question"]["id"] == "q_V1"
    assert payload["progress"] == {"current": 0, "total": 20}


def test_full_walk_and_report(client):
    first = start(client).get_json()

    final = answer_until_finished(client, first)

    assert final["type"] == "completed"
    assert final["completed"] is True
    assert final["message"] == "✅ Diagnosis completed!"
    assert final["progress"]["current"] == 20

    report = generate_report(client, first["sessionId"]).get_json()

    assert report["score"] == 100
    assert report["statusKey"] == "excellent_profile"
    assert report["status"] == "EXCELLENT PROFILE"
    assert report["statusColor"] == "#00ff88"
    assert report["profile"] == "Founder/Partner"
    assert report["gaps"] == []
    assert report["ctaRecommended"] == "oracle"
    assert report["accessCode"] == first["accessCode"]
    assert report["aiAnalysis"].startswith("Your Founder/Partner profile")

    stored = client.get(f"/api/diagnoses/{first['accessCode'].lower()}")
    assert stored.status_code == 200
    assert stored.get_json()["score"] == 100


def test_report_is_generated_once(client):
    first = start(client).get_json()
    answer_until_finished(client, first, {"q_V19": 1})

    one = generate_report(client, first["sessionId"]).get_json()
    two = generate_report(client, first["sessionId"]).get_json()

    assert one == two
    assert one["score"] == 85


def test_disqualification_ends_session(app, client):
    first = start(client, language="pt").get_json()
    session_id = first["sessionId"]

    respond(client, session_id, 0)
    payload = respond(client, session_id, 1).get_json()

    assert payload["type"] == "disqualified"
    assert payload["finished"] is True
    assert payload["reasonCode"] == "KO_EU_CITIZEN"

    assert respond(client, session_id, 0).status_code == 400

    report = generate_report(client, session_id).get_json()
    assert report["score"] == 0
    assert report["statusKey"] == "not_eligible"
    assert report["outcome"] == "disqualified"
    assert report["reasonCode"] == "KO_EU_CITIZEN"

    with app.app_context():
        diagnosis = Diagnosis.query.filter_by(session_id=session_id).first()
        assert diagnosis.answers == {"q_V1": 0, "q_V2": 1}
        assert diagnosis.language == "pt"


def test_family_question_is_asked(client):
    first = start(client).get_json()
    session_id = first["sessionId"]
    seen = []

    payload = first
    while not payload["finished"]:
        question_id = payload["question"]["id"]
        seen.append(question_id)
        payload = respond(client, session_id, 1 if question_id == "q_V17" else 0).get_json()

    assert "q_V18" in seen


def test_report_requires_finished_session(client):
    first = start(client).get_json()

    assert generate_report(client, first["sessionId"]).status_code == 400


def test_unknown_session(client):
    assert respond(client, "no-such-session", 0).status_code == 404
    assert generate_report(client, "no-such-session").status_code == 404


def test_missing_session_id(client):
    response = client.post("/api/diagnose", json={"action": "RESPONSE", "responseData": 0})

    assert response.status_code == 400


def test_invalid_answer_leaves_session_untouched(app, client):
    first = start(client).get_json()
    session_id = first["sessionId"]

    bad = respond(client, session_id, 9)
    assert bad.status_code == 400
    assert "q_V1" in bad.get_json()["error"]

    good = respond(client, session_id, 0).get_json()
    assert good["question"]["id"] == "q_V2"

    with app.app_context():
        assert Diagnosis.query.filter_by(session_id=session_id).first().answers == {"q_V1": 0}


@pytest.mark.parametrize("raw", [2, "2", {"index": 2}, {"id": "2"}, {"optionIndex": 2}, {"value": 2}])
def test_response_formats_are_normalized(app, client, raw):
    first = start(client).get_json()

    assert respond(client, first["sessionId"], raw).status_code == 200

    with app.app_context():
        assert Diagnosis.query.filter_by(session_id=first["sessionId"]).first().answers == {"q_V1": 2}


@pytest.mark.parametrize("raw", [True, None, "two", 1.5, {"label": "x"}, [0], "²", "¹", "--1", "-", ""])
def test_unreadable_answers_are_rejected(raw):
    with pytest.raises(InvalidInputError):
        normalize_answer(raw)


def test_unknown_action(client):
    assert client.post("/api/diagnose", json={"action": "RESTART"}).status_code == 400


def test_unknown_report(client):
    assert client.get("/api/diagnoses/ZZZZZZ").status_code == 404


def test_unknown_route_is_json(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.get_json() == {"error": "Not found"}


def test_inconsistent_configuration_refuses_to_start():
    class BrokenConfig(TestingConfig):
        HEALTH_INSURANCE_PENALTY = -10

    with pytest.raises(ConfigurationError):
        create_app(BrokenConfig)


def test_signed_numeric_string_reaches_range_check(client):
    first = start(client).get_json()

    assert normalize_answer(" 1 ") == 1
    assert respond(client, first["sessionId"], "-1").status_code == 400


def test_rate_limited_route_survives_garbage_collection(client):
    gc.collect()

    response = start(client)

    assert response.status_code == 200
    assert response.get_json()["question"]["id"] == "q_V1"


def test_diagnose_is_rate_limited(make_app):
    class LimitedConfig(TestingConfig):
        RATELIMIT_ENABLED = True
        RATELIMIT_STORAGE_URI = "memory://"

    client = make_app(LimitedConfig).test_client()
    gc.collect()

    statuses = [start(client).status_code for _ in range(31)]

    assert statuses[:30] == [200] * 30
    assert statuses[30] == 429


def test_configured_default_locale_covers_unsupported_languages(make_app):
    class EnglishConfig(TestingConfig):
        DEFAULT_LOCALE = "en"

    client = make_app(EnglishConfig).test_client()

    payload = start(client, language="fr").get_json()
    assert payload["question"]["text"] == "To take the test, choose your Profile:"
    assert client.get("/api/questions?locale=fr").get_json()["locale"] == "en"
    assert client.get("/api/questions").get_json()["locale"] == "en"


def test_unsupported_default_locale_refuses_to_start():
    class FrenchConfig(TestingConfig):
        DEFAULT_LOCALE = "fr"

    with pytest.raises(ConfigurationError):
        create_app(FrenchConfig)
