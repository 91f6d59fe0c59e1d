"""
Alpha Visa Diagnosis Flow Engine

Single-step transition function over the question graph:
- Unconditional and conditional edges as explicit, introspectable data
- Three step outcomes (next question, disqualified, completed)
- No state of its own; the caller owns and persists the answer set
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from .errors import ConfigurationError, MissingAnswerError, UnknownStepError
from .questions import PROFILE_QUESTION, PROFILES, QUESTIONS_BY_ID, Question, check_answers
from .translations import DEFAULT_CATALOG, ContentCatalog, resolve_locale

logger = logging.getLogger(__name__)

START = "START"
COMPLETED = "END_OF_QUESTIONNAIRE"
DISQUALIFICATION_PREFIX = "KO_"

# Informational only; undercounts when the family question is inserted
TOTAL_STEPS = 20


def is_disqualification(target: str) -> bool:
    return target.startswith(DISQUALIFICATION_PREFIX)


def is_terminal(target: str) -> bool:
    return target == COMPLETED or is_disqualification(target)


# =============================================================================
# Edges
# =============================================================================

@dataclass(frozen=True)
class Route:
    """Go to target when question_id was answered with answer_index."""
    question_id: str
    answer_index: int
    target: str


@dataclass(frozen=True)
class UnconditionalEdge:
    target: str
    kind: ClassVar[str] = "unconditional"

    @property
    def targets(self) -> Tuple[str, ...]:
        return (self.target,)

    @property
    def inspected_questions(self) -> Tuple[str, ...]:
        return ()

    def evaluate(self, answers: Mapping[str, int]) -> str:
        return self.target


@dataclass(frozen=True)
class ConditionalEdge:
    """
    Ordered routes over the answer set; the first matching route wins,
    otherwise the default target is taken.
    """
    routes: Tuple[Route, ...]
    default: str
    kind: ClassVar[str] = "conditional"

    @property
    def targets(self) -> Tuple[str, ...]:
        seen: List[str] = []
        for target in [r.target for r in self.routes] + [self.default]:
            if target not in seen:
                seen.append(target)
        return tuple(seen)

    @property
    def inspected_questions(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(r.question_id for r in self.routes))

    def evaluate(self, answers: Mapping[str, int]) -> str:
        for route in self.routes:
            if answers.get(route.question_id) == route.answer_index:
                return route.target
        return self.default


Edge = Union[UnconditionalEdge, ConditionalEdge]


def go(target: str) -> UnconditionalEdge:
    return UnconditionalEdge(target)


def knockout(question_id: str, answer_index: int, reason_code: str, otherwise: str) -> ConditionalEdge:
    """Disqualify on one answer of question_id, continue to otherwise for the rest."""
    return ConditionalEdge(routes=(Route(question_id, answer_index, reason_code),), default=otherwise)


def _profile_routes() -> Tuple[Route, ...]:
    return tuple(
        Route(PROFILE_QUESTION, answer, info["entry"])
        for answer, info in sorted(PROFILES.items())
    )


FLOW_EDGES: Mapping[str, Edge] = MappingProxyType({
    START: go("q_V1"),
    "q_V1": go("q_V2"),
    "q_V2": knockout("q_V2", 1, "KO_EU_CITIZEN", "q_V3"),
    "q_V3": knockout("q_V3", 1, "KO_MINOR", "q_V4"),
    "q_V4": go("q_V5"),
    "q_V5": go("q_V6"),
    # Irregular stay ends the flow; otherwise the q_V1 profile picks the track
    "q_V6": ConditionalEdge(
        routes=(Route("q_V6", 1, "KO_IRREGULAR_STAY"),) + _profile_routes(),
        default="q_V10",
    ),
    "q_V7_A": go("q_V7A_2"),
    "q_V7A_2": go("q_V8_A"),
    "q_V8_A": go("q_V9_A"),
    "q_V9_A": go("q_V10"),
    "q_V7_B": go("q_V8_B"),
    "q_V8_B": go("q_V9_B"),
    "q_V9_B": go("q_V10"),
    "q_V7_C": go("q_V8_C"),
    "q_V8_C": go("q_V9_C"),
    "q_V9_C": go("q_V10"),
    "q_V10": go("q_V11"),
    "q_V11": knockout("q_V11", 1, "KO_SPAIN_COMPANY", "q_V12"),
    "q_V12": knockout("q_V12", 1, "KO_NEW_COMPANY", "q_V13"),
    "q_V13": go("q_V14"),
    "q_V14": go("q_V15"),
    "q_V15": go("q_V16"),
    "q_V16": go("q_V17"),
    "q_V17": ConditionalEdge(routes=(Route("q_V17", 1, "q_V18"),), default="q_V19"),
    "q_V18": go("q_V19"),
    "q_V19": go("q_V20"),
    "q_V20": go(COMPLETED),
})


# =============================================================================
# Step results
# =============================================================================

@dataclass(frozen=True)
class Option:
    index: int
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "label": self.label}


class StepResult:
    """Base for the three step outcomes; `kind` is the wire discriminator."""
    kind: ClassVar[str] = ""
    is_terminal: ClassVar[bool] = True

    def _payload(self) -> Dict[str, Any]:
        raise NotImplementedError

    def to_dict(self, progress: Optional[Dict[str, int]] = None) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        payload = {
            "type": self.kind,
            "finished": self.is_terminal,
            "question": None,
            "message": None,
            "reasonCode": None,
        }
        payload.update(self._payload())
        if progress is not None:
            payload["progress"] = dict(progress)
        return payload


@dataclass(frozen=True)
class NextQuestion(StepResult):
    question_id: str
    text: str
    options: Tuple[Option, ...]
    kind: ClassVar[str] = "question"
    is_terminal: ClassVar[bool] = False

    def _payload(self) -> Dict[str, Any]:
        return {
            "question": {
                "id": self.question_id,
                "text": self.text,
                "options": [o.to_dict() for o in self.options],
            },
            "message": self.text,
        }


@dataclass(frozen=True)
class Disqualified(StepResult):
    message: str
    reason_code: str
    kind: ClassVar[str] = "disqualified"

    def _payload(self) -> Dict[str, Any]:
        return {"message": self.message, "reasonCode": self.reason_code}


@dataclass(frozen=True)
class Completed(StepResult):
    message: str
    kind: ClassVar[str] = "completed"

    def _payload(self) -> Dict[str, Any]:
        return {"message": self.message}


# =============================================================================
# Engine
# =============================================================================

class FlowEngine:
    """
    Walks the question graph one answer at a time.

    Example:
        engine = FlowEngine()

        step = engine.advance("START", {}, "en")      # NextQuestion q_V1
        step = engine.advance("q_V1", {"q_V1": 0}, "en")  # NextQuestion q_V2
        step = engine.advance("q_V2", {"q_V1": 0, "q_V2": 1}, "en")
        # Disqualified(reason_code="KO_EU_CITIZEN")
    """

    def __init__(
        self,
        questions: Mapping[str, Question] = QUESTIONS_BY_ID,
        edges: Mapping[str, Edge] = FLOW_EDGES,
        catalog: ContentCatalog = DEFAULT_CATALOG,
        total_steps: int = TOTAL_STEPS
    ):
        self.questions = questions
        self.edges = edges
        self.catalog = catalog
        self.total_steps = total_steps

    def advance(
        self,
        current_step_id: Optional[str],
        answers: Mapping[str, int],
        locale: Optional[str] = None
    ) -> StepResult:
        """
        Resolve the step that follows current_step_id.

        Args:
            current_step_id: START (or None) or a question already answered
            answers: Dict mapping question_id to option index
            locale: Requested language; unsupported values use the default

        Returns:
            NextQuestion, Disqualified or Completed
        """
        step_id = current_step_id or START
        edge = self.edges.get(step_id)
        if edge is None:
            raise UnknownStepError(step_id)

        check_answers(answers, self.questions)
        if step_id != START and step_id not in answers:
            raise MissingAnswerError(step_id)

        target = edge.evaluate(answers)
        if target not in edge.targets:
            raise ConfigurationError(f"Edge from {step_id!r} resolved to undeclared target {target!r}")

        logger.debug(f"{step_id} -> {target}")
        return self._build_step(target, resolve_locale(locale))

    def first_step(self, locale: Optional[str] = None) -> StepResult:
        return self.advance(START, {}, locale)

    def progress(self, answers: Mapping[str, int]) -> Dict[str, int]:
        """Progress counters for the wire format."""
        return {"current": len(answers), "total": self.total_steps}

    def trajectory(
        self,
        answers: Mapping[str, int],
        locale: Optional[str] = None
    ) -> Tuple[List[str], StepResult]:
        """
        Replay the answers from START.

        Returns the answered question ids on the path and the step reached:
        the first unanswered question, or the terminal outcome.
        """
        path: List[str] = []
        step_id = START
        while True:
            step = self.advance(step_id, answers, locale)
            if step.is_terminal or step.question_id not in answers:
                return path, step
            path.append(step.question_id)
            step_id = step.question_id

    def _build_step(self, target: str, locale: str) -> StepResult:
        if target == COMPLETED:
            return Completed(message=self.catalog.completion_message(locale))

        if is_disqualification(target):
            return Disqualified(
                message=self.catalog.disqualification_message(target, locale),
                reason_code=target
            )

        question = self.questions.get(target)
        if question is None:
            raise ConfigurationError(f"Flow edge points to undefined question {target!r}")

        return NextQuestion(
            question_id=question.id,
            text=question.prompt(locale),
            options=tuple(
                Option(index=i, label=label)
                for i, label in enumerate(question.labels(locale))
            )
        )

