from types import SimpleNamespace

import anthropic
import pytest

from src.ai_core.claude_client import AnalysisClient, fallback_analysis


class FakeAPIError(anthropic.APIError):
    def __init__(self):
        Exception.__init__(self, "service unavailable")


class FakeMessages:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=self.text)])


@pytest.fixture
def offline_client(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    return AnalysisClient()


def _online_client(messages):
    client = AnalysisClient(api_key="test-key")
    client.client = SimpleNamespace(messages=messages)
    return client


def test_without_key_uses_fallback(offline_client, scoring):
    result = scoring.score({"q_V1": 0, "q_V4": 1}, "en")

    analysis = offline_client.generate_analysis(result)

    assert not offline_client.is_available()
    assert analysis.source == "fallback"
    assert "Founder/Partner" in analysis.text
    assert "75/100" in analysis.text
    assert "Passport with short validity" in analysis.text


@pytest.mark.parametrize("locale,opening", [
    ("pt", "Seu perfil de"),
    ("en", "Your "),
    ("es", "Tu perfil de"),
])
def test_fallback_is_localized(scoring, locale, opening):
    text = fallback_analysis(scoring.score({"q_V1": 1}, locale))

    assert text.startswith(opening)


def test_fallback_without_gaps(scoring):
    text = fallback_analysis(scoring.score({"q_V1": 2}, "en"))

    assert "Your profile is on the right track." in text


def test_claude_response_is_returned(scoring):
    messages = FakeMessages(text="  Tailored analysis.  ")
    client = _online_client(messages)

    analysis = client.generate_analysis(scoring.score({"q_V1": 0, "q_V19": 1}, "es"))

    assert analysis.source == "claude"
    assert analysis.text == "Tailored analysis."
    assert analysis.model == client.model
    prompt = messages.calls[0]["messages"][0]["content"]
    assert "Seguro de salud inadecuado" in prompt
    assert "Spanish" in prompt


def test_api_error_falls_back(scoring):
    client = _online_client(FakeMessages(error=FakeAPIError()))

    analysis = client.generate_analysis(scoring.score({"q_V1": 0}, "pt"))

    assert analysis.source == "fallback"
    assert analysis.text.startswith("Seu perfil de")


def test_empty_response_falls_back(scoring):
    client = _online_client(FakeMessages(text="   "))

    assert client.generate_analysis(scoring.score({}, "en")).source == "fallback"


def test_analysis_to_dict(offline_client, scoring):
    payload = offline_client.generate_analysis(scoring.score({}, "en")).to_dict()

    assert payload["source"] == "fallback"
    assert payload["model"] is None
    assert "generated_at" in payload
