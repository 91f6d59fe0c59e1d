import pytest

from src.assessment.errors import (
    ConfigurationError,
    InvalidAnswerError,
    MissingAnswerError,
    UnknownStepError,
)
from src.assessment.flow import (
    COMPLETED,
    FLOW_EDGES,
    START,
    Completed,
    ConditionalEdge,
    Disqualified,
    FlowEngine,
    NextQuestion,
    Route,
    UnconditionalEdge,
)
from src.assessment.questions import QUESTIONS_BY_ID


FOUNDER_PATH = [
    "q_V1", "q_V2", "q_V3", "q_V4", "q_V5", "q_V6",
    "q_V7_A", "q_V7A_2", "q_V8_A", "q_V9_A",
    "q_V10", "q_V11", "q_V12", "q_V13", "q_V14", "q_V15", "q_V16", "q_V17",
    "q_V19", "q_V20",
]


def test_first_step_is_profile_question(flow):
    step = flow.first_step("en")

    assert isinstance(step, NextQuestion)
    assert step.question_id == "q_V1"
    assert step.text == "To take the test, choose your Profile:"
    assert [o.index for o in step.options] == [0, 1, 2]
    assert step.options[0].label == "Founder/Business Partner"


def test_none_step_id_starts_the_flow(flow):
    assert flow.advance(None, {}, "en") == flow.advance(START, {}, "en")


def test_advance_is_deterministic(flow):
    answers = {"q_V1": 1, "q_V2": 0, "q_V3": 0, "q_V4": 0, "q_V5": 0, "q_V6": 0}
    first = flow.advance("q_V6", answers, "es")
    second = flow.advance("q_V6", answers, "es")

    assert first == second
    assert first.to_dict() == second.to_dict()


@pytest.mark.parametrize("profile,entry", [(0, "q_V7_A"), (1, "q_V7_B"), (2, "q_V7_C")])
def test_profile_selects_track_after_q_v6(flow, profile, entry):
    answers = {"q_V1": profile, "q_V2": 0, "q_V3": 0, "q_V4": 0, "q_V5": 0, "q_V6": 0}

    step = flow.advance("q_V6", answers, "en")

    assert isinstance(step, NextQuestion)
    assert step.question_id == entry


def test_missing_profile_skips_tracks(flow):
    step = flow.advance("q_V6", {"q_V6": 0}, "en")

    assert step.question_id == "q_V10"


@pytest.mark.parametrize("profile,track", [
    (0, ["q_V7_A", "q_V7A_2", "q_V8_A", "q_V9_A"]),
    (1, ["q_V7_B", "q_V8_B", "q_V9_B"]),
    (2, ["q_V7_C", "q_V8_C", "q_V9_C"]),
])
def test_each_track_rejoins_at_q_v10(walk_flow, profile, track):
    _, path, step = walk_flow({"q_V1": profile})

    assert path[6:6 + len(track)] == track
    assert path[6 + len(track)] == "q_V10"
    assert isinstance(step, Completed)


def test_best_answers_founder_path(walk_flow):
    answers, path, step = walk_flow()

    assert path == FOUNDER_PATH
    assert len(answers) == 20
    assert isinstance(step, Completed)
    assert step.message == "✅ Diagnosis completed!"


@pytest.mark.parametrize("question_id,reason", [
    ("q_V2", "KO_EU_CITIZEN"),
    ("q_V3", "KO_MINOR"),
    ("q_V6", "KO_IRREGULAR_STAY"),
    ("q_V11", "KO_SPAIN_COMPANY"),
    ("q_V12", "KO_NEW_COMPANY"),
])
def test_disqualifying_answers_end_the_flow(walk_flow, question_id, reason):
    _, path, step = walk_flow({question_id: 1})

    assert path[-1] == question_id
    assert isinstance(step, Disqualified)
    assert step.reason_code == reason
    assert step.message.startswith("❌")


def test_eu_citizen_is_disqualified_immediately(flow):
    step = flow.advance("q_V2", {"q_V1": 0, "q_V2": 1}, "pt")

    assert isinstance(step, Disqualified)
    assert step.reason_code == "KO_EU_CITIZEN"
    assert "União Europeia" in step.message


def test_criminal_record_issues_do_not_end_the_flow(walk_flow):
    _, _, step = walk_flow({"q_V20": 2})

    assert isinstance(step, Completed)


def test_family_inserts_dependents_question(walk_flow):
    _, with_family, _ = walk_flow({"q_V17": 1})
    _, alone, _ = walk_flow({"q_V17": 0})

    assert "q_V18" in with_family
    assert with_family[with_family.index("q_V17") + 1] == "q_V18"
    assert with_family[with_family.index("q_V18") + 1] == "q_V19"
    assert "q_V18" not in alone
    assert alone[alone.index("q_V17") + 1] == "q_V19"


def test_unknown_step_is_rejected(flow):
    with pytest.raises(UnknownStepError):
        flow.advance("q_V99", {}, "en")


def test_input_errors_are_value_errors(flow):
    with pytest.raises(ValueError):
        flow.advance("NOT_A_STEP", {}, "en")


def test_step_without_answer_is_rejected(flow):
    with pytest.raises(MissingAnswerError):
        flow.advance("q_V2", {"q_V1": 0}, "en")


@pytest.mark.parametrize("answers", [
    {"q_V1": 3},
    {"q_V1": -1},
    {"q_V1": "0"},
    {"q_V1": True},
    {"q_unknown": 0},
])
def test_malformed_answers_are_rejected(flow, answers):
    with pytest.raises(InvalidAnswerError):
        flow.advance("q_V1", answers, "en")


@pytest.mark.parametrize("locale", ["fr", "", None, "xx-YY"])
def test_unsupported_locale_falls_back_to_portuguese(flow, locale):
    step = flow.first_step(locale)

    assert step.text == QUESTIONS_BY_ID["q_V1"].text["pt"]


def test_region_tag_resolves_to_language(flow):
    assert flow.first_step("es-ES").text == QUESTIONS_BY_ID["q_V1"].text["es"]


def test_undefined_target_is_a_configuration_error():
    engine = FlowEngine(edges={START: UnconditionalEdge("q_missing")})

    with pytest.raises(ConfigurationError):
        engine.first_step("en")


def test_completion_target_is_never_guessed():
    # A dangling edge must not read as the end of the questionnaire
    engine = FlowEngine(edges={START: UnconditionalEdge("q_V1"), "q_V1": UnconditionalEdge("q_V2_typo")})

    with pytest.raises(ConfigurationError):
        engine.advance("q_V1", {"q_V1": 0}, "en")


def test_conditional_edge_first_match_wins():
    edge = ConditionalEdge(
        routes=(Route("q_V2", 1, "KO_EU_CITIZEN"), Route("q_V1", 0, "q_V7_A")),
        default="q_V10",
    )

    assert edge.evaluate({"q_V1": 0, "q_V2": 1}) == "KO_EU_CITIZEN"
    assert edge.evaluate({"q_V1": 0, "q_V2": 0}) == "q_V7_A"
    assert edge.evaluate({}) == "q_V10"


def test_edges_are_introspectable():
    edge = FLOW_EDGES["q_V6"]

    assert edge.kind == "conditional"
    assert edge.inspected_questions == ("q_V6", "q_V1")
    assert edge.targets == ("KO_IRREGULAR_STAY", "q_V7_A", "q_V7_B", "q_V7_C", "q_V10")
    assert FLOW_EDGES["q_V20"].targets == (COMPLETED,)


def test_question_step_wire_format(flow):
    step = flow.advance("q_V1", {"q_V1": 0}, "en")

    payload = step.to_dict(flow.progress({"q_V1": 0}))

    assert payload["type"] == "question"
    assert payload["finished"] is False
    assert payload["question"]["id"] == "q_V2"
    assert payload["question"]["options"][1] == {"index": 1, "label": "I have EU/EEA/Swiss citizenship"}
    assert payload["reasonCode"] is None
    assert payload["progress"] == {"current": 1, "total": 20}


def test_disqualified_step_wire_format(flow):
    step = flow.advance("q_V2", {"q_V1": 0, "q_V2": 1}, "en")

    payload = step.to_dict()

    assert payload["type"] == "disqualified"
    assert payload["finished"] is True
    assert payload["question"] is None
    assert payload["reasonCode"] == "KO_EU_CITIZEN"
    assert "progress" not in payload


def test_trajectory_stops_at_first_unanswered_question(flow):
    path, step = flow.trajectory({"q_V1": 2, "q_V2": 0, "q_V3": 0}, "en")

    assert path == ["q_V1", "q_V2", "q_V3"]
    assert step.question_id == "q_V4"


def test_trajectory_reports_terminal_outcome(flow):
    path, step = flow.trajectory({"q_V1": 0, "q_V2": 0, "q_V3": 1}, "en")

    assert path == ["q_V1", "q_V2", "q_V3"]
    assert isinstance(step, Disqualified)
    assert step.reason_code == "KO_MINOR"
