import pytest

from src.assessment.assessment_engine import ScoringEngine
from src.assessment.flow import FlowEngine


def walk(flow, choices=None, locale="en"):
    """Answer every question from choices (default 0) until the flow ends."""
    choices = choices or {}
    answers = {}
    path = []
    step = flow.first_step(locale)
    while not step.is_terminal:
        question_id = step.question_id
        path.append(question_id)
        answers[question_id] = choices.get(question_id, 0)
        step = flow.advance(question_id, answers, locale)
    return answers, path, step


@pytest.fixture
def flow():
    return FlowEngine()


@pytest.fixture
def scoring():
    return ScoringEngine()


@pytest.fixture
def walk_flow(flow):
    def _walk(choices=None, locale="en"):
        return walk(flow, choices, locale)
    return _walk


@pytest.fixture
def make_app(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    from src.database.models import db
    from web.app import create_app

    created = []

    def _make(config_class):
        app = create_app(config_class)
        created.append(app)
        return app

    yield _make

    for app in created:
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def app(make_app):
    from config.settings import TestingConfig

    return make_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()
