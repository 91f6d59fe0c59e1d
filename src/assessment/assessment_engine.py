"""
Alpha Visa Diagnosis Scoring Engine

Scores an answer set (complete or partial) and produces:
- Eligibility score (0-100, starts at 100 and only decreases)
- Status tier and display colour
- Gaps in penalty-table order
- Strengths, with the income strength of the candidate's own track
- Profile label
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging

from src.patterns.status_classification import SCORE_CEILING, SCORE_FLOOR, StatusClassifier

from .questions import PROFILE_QUESTION, PROFILES, QUESTIONS_BY_ID, Question, check_answers
from .translations import DEFAULT_CATALOG, ContentCatalog, resolve_locale

logger = logging.getLogger(__name__)

# Any single disqualifying answer saturates the clamp to zero
DISQUALIFYING_PENALTY = 1000
DEFAULT_HEALTH_INSURANCE_PENALTY = 15
UNKNOWN_PROFILE = "unknown"


@dataclass(frozen=True)
class PenaltyRule:
    """Subtract penalty when question_id was answered with answer_index."""
    question_id: str
    answer_index: int
    penalty: int
    gap_key: str

    @property
    def disqualifying(self) -> bool:
        return self.penalty >= DISQUALIFYING_PENALTY

    def matches(self, answers: Mapping[str, int]) -> bool:
        return answers.get(self.question_id) == self.answer_index


@dataclass(frozen=True)
class StrengthRule:
    """Report key when question_id was answered with answer_index.

    Rules with a profile only apply to candidates on that track.
    """
    key: str
    question_id: str
    answer_index: int
    profile: Optional[str] = None

    def matches(self, answers: Mapping[str, int], profile: str) -> bool:
        if self.profile is not None and self.profile != profile:
            return False
        return answers.get(self.question_id) == self.answer_index


def build_penalty_rules(
    health_insurance_penalty: int = DEFAULT_HEALTH_INSURANCE_PENALTY
) -> Tuple[PenaltyRule, ...]:
    """
    Ordered penalty table. Gaps are reported in this order.

    Disqualifying rules come first; q_V20 appears twice because "no
    certificate yet" and "certificate with issues" are separate gaps.
    """
    return (
        PenaltyRule("q_V2", 1, DISQUALIFYING_PENALTY, "eu_citizen"),
        PenaltyRule("q_V3", 1, DISQUALIFYING_PENALTY, "minor"),
        PenaltyRule("q_V6", 1, DISQUALIFYING_PENALTY, "irregular_spain"),
        PenaltyRule("q_V11", 1, DISQUALIFYING_PENALTY, "spain_company"),
        PenaltyRule("q_V12", 1, DISQUALIFYING_PENALTY, "new_company"),
        PenaltyRule("q_V20", 2, DISQUALIFYING_PENALTY, "criminal_record_issues"),
        PenaltyRule("q_V4", 1, 25, "passport_validity"),
        # Founder / partner track
        PenaltyRule("q_V7_A", 1, 20, "no_remote_clause_partner"),
        PenaltyRule("q_V7A_2", 1, 15, "contract_under_3_months"),
        PenaltyRule("q_V8_A", 1, 30, "insufficient_prolabore"),
        PenaltyRule("q_V9_A", 1, 25, "no_bank_statements_prolabore"),
        PenaltyRule("q_V9_A", 2, 30, "insufficient_bank_statements"),
        # Freelancer track
        PenaltyRule("q_V7_B", 1, 20, "no_formal_contracts"),
        PenaltyRule("q_V8_B", 1, 30, "insufficient_income"),
        PenaltyRule("q_V9_B", 1, 25, "no_income_proof"),
        # Employee track
        PenaltyRule("q_V7_C", 1, 20, "no_remote_clause_employee"),
        PenaltyRule("q_V8_C", 1, 30, "insufficient_salary"),
        PenaltyRule("q_V9_C", 1, 25, "no_payslips"),
        PenaltyRule("q_V13", 1, 25, "no_authorization_letter"),
        PenaltyRule("q_V14", 1, 15, "no_qualification_proof"),
        PenaltyRule("q_V15", 1, 10, "no_remote_experience"),
        PenaltyRule("q_V16", 1, 25, "insufficient_financial_resources"),
        PenaltyRule("q_V18", 1, 20, "insufficient_family_resources"),
        PenaltyRule("q_V19", 1, health_insurance_penalty, "inadequate_health_insurance"),
        PenaltyRule("q_V20", 1, 10, "pending_criminal_certificate"),
    )


PENALTY_RULES = build_penalty_rules()

STRENGTH_RULES: Tuple[StrengthRule, ...] = (
    StrengthRule("eligible_citizenship", "q_V2", 0),
    StrengthRule("adult", "q_V3", 0),
    StrengthRule("valid_passport", "q_V4", 0),
    StrengthRule("company_outside_spain", "q_V11", 0),
    StrengthRule("mature_company", "q_V12", 0),
    StrengthRule("qualification_proven", "q_V14", 0),
    StrengthRule("adequate_resources", "q_V16", 0),
    StrengthRule("clean_record", "q_V20", 0),
    StrengthRule("compatible_income_partner", "q_V8_A", 0, profile="founder"),
    StrengthRule("compatible_income_freelancer", "q_V8_B", 0, profile="freelancer"),
    StrengthRule("compatible_income_employee", "q_V8_C", 0, profile="employee"),
)


@dataclass
class ScoreResult:
    """Complete diagnosis score"""
    score: int  # 0-100
    status_key: str
    status: str
    status_color: str
    profile_key: str
    profile: str
    gap_keys: List[str] = field(default_factory=list)
    gaps: List[str] = field(default_factory=list)
    strength_keys: List[str] = field(default_factory=list)
    strengths: List[str] = field(default_factory=list)
    locale: str = DEFAULT_CATALOG.default_locale

    @property
    def disqualified(self) -> bool:
        return self.status_key == "not_eligible"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "score": self.score,
            "status": self.status,
            "statusKey": self.status_key,
            "statusColor": self.status_color,
            "gaps": list(self.gaps),
            "strengths": list(self.strengths),
            "profile": self.profile,
            "profileKey": self.profile_key,
            "locale": self.locale
        }


class ScoringEngine:
    """
    Engine for scoring visa eligibility diagnoses.

    Example:
        engine = ScoringEngine()

        answers = {
            "q_V1": 0,   # Founder / partner
            "q_V2": 0,   # Not an EU citizen
            "q_V4": 1,   # Passport expires within 12 months
        }

        result = engine.score(answers, "en")
        print(f"Score: {result.score}")   # 75
        print(f"Gaps: {result.gaps}")     # ["Passport with short validity ..."]
    """

    def __init__(
        self,
        questions: Mapping[str, Question] = QUESTIONS_BY_ID,
        penalty_rules: Tuple[PenaltyRule, ...] = PENALTY_RULES,
        strength_rules: Tuple[StrengthRule, ...] = STRENGTH_RULES,
        classifier: Optional[StatusClassifier] = None,
        catalog: ContentCatalog = DEFAULT_CATALOG
    ):
        """Initialize the scoring engine"""
        self.questions = questions
        self.penalty_rules = penalty_rules
        self.strength_rules = strength_rules
        self.classifier = classifier or StatusClassifier()
        self.catalog = catalog

    def score(self, answers: Mapping[str, int], locale: Optional[str] = None) -> ScoreResult:
        """
        Score an answer set.

        Args:
            answers: Dict mapping question_id to option index; may be partial
            locale: Requested language; unsupported values use the default

        Returns:
            ScoreResult with translated labels
        """
        check_answers(answers, self.questions)
        locale = resolve_locale(locale)

        profile_key = self.resolve_profile(answers)

        total = SCORE_CEILING
        gap_keys = []
        for rule in self.penalty_rules:
            if rule.matches(answers):
                total -= rule.penalty
                gap_keys.append(rule.gap_key)

        strength_keys = [
            rule.key for rule in self.strength_rules
            if rule.matches(answers, profile_key)
        ]

        score = max(SCORE_FLOOR, min(SCORE_CEILING, total))
        status = self.classifier.classify(score)

        logger.debug(f"Scored {len(answers)} answers: raw={total} score={score} status={status.key}")

        return ScoreResult(
            score=score,
            status_key=status.key,
            status=self.catalog.status(status.key, locale),
            status_color=status.color,
            profile_key=profile_key,
            profile=self.catalog.profile(profile_key, locale),
            gap_keys=gap_keys,
            gaps=[self.catalog.gap(key, locale) for key in gap_keys],
            strength_keys=strength_keys,
            strengths=[self.catalog.strength(key, locale) for key in strength_keys],
            locale=locale
        )

    @staticmethod
    def resolve_profile(answers: Mapping[str, int]) -> str:
        """Track id for the q_V1 answer, or "unknown"."""
        info = PROFILES.get(answers.get(PROFILE_QUESTION))
        return info["id"] if info else UNKNOWN_PROFILE


# Singleton instance
_engine: Optional[ScoringEngine] = None


def get_scoring_engine(health_insurance_penalty: Optional[int] = None) -> ScoringEngine:
    """
    Get or create singleton scoring engine.

    The penalty argument only takes effect on first creation.
    """
    global _engine
    if _engine is None:
        if health_insurance_penalty is None:
            _engine = ScoringEngine()
        else:
            _engine = ScoringEngine(penalty_rules=build_penalty_rules(health_insurance_penalty))
    return _engine
