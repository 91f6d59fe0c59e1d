"""
Start-up consistency check for the questionnaire tables.

Run once before serving; the questions, flow edges, scoring rules, label
tables and status bands are static, so any problem found here is a
deployment error rather than a user error.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from src.patterns.status_classification import StatusBand, StatusClassifier, StatusLevel, find_band_problems

from .assessment_engine import PENALTY_RULES, STRENGTH_RULES, UNKNOWN_PROFILE, PenaltyRule, StrengthRule
from .errors import ConfigurationError
from .flow import COMPLETED, FLOW_EDGES, START, Edge, is_disqualification
from .questions import PROFILES, QUESTIONS_BY_ID, Question
from .translations import DEFAULT_CATALOG, SUPPORTED_LOCALES, ContentCatalog

logger = logging.getLogger(__name__)


def _question_problems(questions: Mapping[str, Question], locales: Sequence[str]) -> List[str]:
    problems = []
    for question_id, question in questions.items():
        if question.id != question_id:
            problems.append(f"Question registered as {question_id!r} has id {question.id!r}")
        sizes = set()
        for locale in locales:
            if not question.text.get(locale):
                problems.append(f"Question {question_id} has no text for {locale!r}")
            labels = question.options.get(locale)
            if not labels:
                problems.append(f"Question {question_id} has no options for {locale!r}")
                continue
            sizes.add(len(labels))
        if len(sizes) > 1:
            problems.append(f"Question {question_id} has option lists of different sizes {sorted(sizes)}")
    return problems


def _option_problem(
    questions: Mapping[str, Question],
    question_id: str,
    answer_index: int,
    owner: str
) -> Optional[str]:
    question = questions.get(question_id)
    if question is None:
        return f"{owner} references unknown question {question_id!r}"
    if not question.has_option(answer_index):
        return f"{owner} references option {answer_index} of {question_id}, which has {question.option_count}"
    return None


def _successors(edge: Edge, questions: Mapping[str, Question]) -> List[str]:
    return [t for t in edge.targets if t in questions]


def _topological_order(
    edges: Mapping[str, Edge],
    questions: Mapping[str, Question]
) -> Optional[List[str]]:
    """Reverse post-order from START, or None when a cycle is reachable."""
    visiting: Set[str] = set()
    done: Set[str] = set()
    order: List[str] = []

    def visit(node: str) -> bool:
        if node in done:
            return True
        if node in visiting:
            return False
        visiting.add(node)
        edge = edges.get(node)
        if edge is not None:
            for target in _successors(edge, questions):
                if not visit(target):
                    return False
        visiting.discard(node)
        done.add(node)
        order.append(node)
        return True

    if not visit(START):
        return None
    order.reverse()
    return order


def compute_dominators(
    edges: Mapping[str, Edge],
    questions: Mapping[str, Question] = QUESTIONS_BY_ID
) -> Dict[str, Set[str]]:
    """
    Dominator sets of every node reachable from START.

    A node d dominates n when every path from START to n passes through d.
    Raises ConfigurationError when the graph has a cycle.
    """
    order = _topological_order(edges, questions)
    if order is None:
        raise ConfigurationError("Flow graph contains a cycle")

    predecessors: Dict[str, List[str]] = {node: [] for node in order}
    for node in order:
        edge = edges.get(node)
        if edge is None:
            continue
        for target in _successors(edge, questions):
            predecessors[target].append(node)

    dominators: Dict[str, Set[str]] = {}
    for node in order:
        preds = predecessors[node]
        if not preds:
            dominators[node] = {node}
        else:
            common = set.intersection(*(dominators[p] for p in preds))
            dominators[node] = common | {node}
    return dominators


def _flow_problems(
    questions: Mapping[str, Question],
    edges: Mapping[str, Edge],
    catalog: ContentCatalog,
    locales: Sequence[str]
) -> List[str]:
    problems = []

    if START not in edges:
        return ["Flow has no START edge"]

    for source, edge in edges.items():
        if source != START and source not in questions:
            problems.append(f"Edge source {source!r} is not a question")

        for target in edge.targets:
            if target == COMPLETED:
                continue
            if is_disqualification(target):
                for locale in locales:
                    if target not in (catalog.disqualification_messages.get(locale) or {}):
                        problems.append(f"Disqualification {target} has no message for {locale!r}")
                continue
            if target not in questions:
                problems.append(f"Edge {source} -> {target!r} points to an undefined question")
            elif target not in edges:
                problems.append(f"Question {target} has no outgoing edge")

        for route in getattr(edge, "routes", ()):
            problem = _option_problem(questions, route.question_id, route.answer_index, f"Route from {source}")
            if problem:
                problems.append(problem)

    if problems:
        # Graph analysis below assumes every node resolves
        return problems

    try:
        dominators = compute_dominators(edges, questions)
    except ConfigurationError as e:
        return [str(e)]

    for question_id in questions:
        if question_id not in dominators:
            problems.append(f"Question {question_id} is unreachable from {START}")

    for source, edge in edges.items():
        if source not in dominators:
            continue
        for question_id in edge.inspected_questions:
            if question_id != source and question_id not in dominators[source]:
                problems.append(
                    f"Edge from {source} inspects {question_id}, which is not answered on every path"
                )

    return problems


def _rule_problems(
    questions: Mapping[str, Question],
    penalty_rules: Iterable[PenaltyRule],
    strength_rules: Iterable[StrengthRule],
    catalog: ContentCatalog
) -> List[str]:
    problems = []
    default = catalog.default_locale
    gap_labels = catalog.gap_labels.get(default) or {}
    strength_labels = catalog.strength_labels.get(default) or {}

    for rule in penalty_rules:
        problem = _option_problem(questions, rule.question_id, rule.answer_index, f"Penalty rule {rule.gap_key}")
        if problem:
            problems.append(problem)
        if rule.penalty < 0:
            problems.append(f"Penalty rule {rule.gap_key} has negative penalty {rule.penalty}")
        if rule.gap_key not in gap_labels:
            problems.append(f"Gap {rule.gap_key} has no label for {default!r}")

    profile_ids = {info["id"] for info in PROFILES.values()}
    for rule in strength_rules:
        problem = _option_problem(questions, rule.question_id, rule.answer_index, f"Strength rule {rule.key}")
        if problem:
            problems.append(problem)
        if rule.profile is not None and rule.profile not in profile_ids:
            problems.append(f"Strength rule {rule.key} is restricted to unknown profile {rule.profile!r}")
        if rule.key not in strength_labels:
            problems.append(f"Strength {rule.key} has no label for {default!r}")

    return problems


def _label_problems(catalog: ContentCatalog, locales: Sequence[str]) -> List[str]:
    problems = []
    default = catalog.default_locale

    profile_labels = catalog.profile_labels.get(default) or {}
    for key in [info["id"] for info in PROFILES.values()] + [UNKNOWN_PROFILE]:
        if key not in profile_labels:
            problems.append(f"Profile {key} has no label for {default!r}")

    status_labels = catalog.status_labels.get(default) or {}
    for level in StatusLevel:
        if level.value not in status_labels:
            problems.append(f"Status {level.value} has no label for {default!r}")

    for locale in locales:
        if "completed" not in (catalog.completion_messages.get(locale) or {}):
            problems.append(f"No completion message for {locale!r}")

    return problems


def find_configuration_problems(
    questions: Mapping[str, Question] = QUESTIONS_BY_ID,
    edges: Mapping[str, Edge] = FLOW_EDGES,
    penalty_rules: Iterable[PenaltyRule] = PENALTY_RULES,
    strength_rules: Iterable[StrengthRule] = STRENGTH_RULES,
    bands: Sequence[StatusBand] = StatusClassifier.DEFAULT_BANDS,
    catalog: ContentCatalog = DEFAULT_CATALOG,
    locales: Sequence[str] = SUPPORTED_LOCALES
) -> List[str]:
    """Collect every inconsistency across the static tables."""
    problems = []
    problems.extend(_question_problems(questions, locales))
    problems.extend(_flow_problems(questions, edges, catalog, locales))
    problems.extend(_rule_problems(questions, penalty_rules, strength_rules, catalog))
    problems.extend(_label_problems(catalog, locales))
    problems.extend(find_band_problems(bands))
    return problems


def check_configuration(**tables) -> None:
    """
    Raise ConfigurationError listing every problem, or return quietly.

    Accepts the same keyword arguments as find_configuration_problems.
    """
    problems = find_configuration_problems(**tables)
    if problems:
        for problem in problems:
            logger.error(f"Configuration problem: {problem}")
        raise ConfigurationError("Questionnaire configuration is inconsistent", problems)

    logger.info("Questionnaire configuration check passed")
