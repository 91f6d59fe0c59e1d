"""
Demo Data Generator for Alpha Visa Diagnosis

Generates finished diagnoses for demonstrations and testing.
Each scenario walks the real flow engine with a fixed set of answer
choices, so demo sessions always follow the current question graph.
"""

import random
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field

from src.ai_core.claude_client import fallback_analysis
from src.assessment.assessment_engine import ScoreResult, ScoringEngine
from src.assessment.flow import Disqualified, FlowEngine, StepResult

# Answer choices per scenario; unlisted questions take option 0 (the best answer)
DEMO_SCENARIOS = {
    "strong_founder": {
        "description": "Founder with every requirement in place",
        "language": "pt",
        "choices": {"q_V1": 0},
    },
    "freelancer_with_gaps": {
        "description": "Freelancer missing income proof and health insurance",
        "language": "en",
        "choices": {"q_V1": 1, "q_V9_B": 1, "q_V15": 1, "q_V19": 1},
    },
    "employee_with_family": {
        "description": "Employee relocating with family, short on family resources",
        "language": "es",
        "choices": {"q_V1": 2, "q_V17": 1, "q_V18": 1, "q_V20": 1},
    },
    "eu_citizen_knockout": {
        "description": "EU citizen, disqualified at the second question",
        "language": "en",
        "choices": {"q_V1": 0, "q_V2": 1},
    },
}

FIRST_NAMES = ["Ana", "Bruno", "Camila", "Diego", "Elena", "Felipe", "Gabriela", "Hugo"]
LAST_NAMES = ["Silva", "Souza", "Garcia", "Martins", "Lopez", "Costa", "Ribeiro", "Fernandes"]
PASSPORT_COUNTRIES = ["Brazil", "Mexico", "Argentina", "Colombia", "United States", "Chile"]


@dataclass
class GeneratedDiagnosis:
    """Complete generated diagnosis"""
    scenario: str
    user: Dict[str, Any]
    language: str
    answers: Dict[str, int]
    final_step: StepResult
    score: ScoreResult
    analysis: str
    started_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def outcome(self) -> str:
        return "disqualified" if isinstance(self.final_step, Disqualified) else "completed"

    @property
    def reason_code(self) -> Optional[str]:
        return getattr(self.final_step, "reason_code", None)


class DemoDataGenerator:
    """Builds demo diagnoses by walking the flow with scripted answers."""

    def __init__(self, seed: Optional[int] = None,
                 flow: Optional[FlowEngine] = None,
                 scoring: Optional[ScoringEngine] = None):
        self.random = random.Random(seed)
        self.flow = flow or FlowEngine()
        self.scoring = scoring or ScoringEngine()

    def walk(self, choices: Dict[str, int], language: str = "pt"):
        """Answer each question from choices (default 0) until a terminal step."""
        answers: Dict[str, int] = {}
        step = self.flow.first_step(language)
        while not step.is_terminal:
            question_id = step.question_id
            answers[question_id] = choices.get(question_id, 0)
            step = self.flow.advance(question_id, answers, language)
        return answers, step

    def generate_user(self) -> Dict[str, Any]:
        first = self.random.choice(FIRST_NAMES)
        last = self.random.choice(LAST_NAMES)
        return {
            "email": f"{first.lower()}.{last.lower()}{self.random.randint(10, 99)}@example.com",
            "firstName": first,
            "lastName": last,
            "whatsapp": f"+55{self.random.randint(11, 99)}9{self.random.randint(10000000, 99999999)}",
            "passportCountry": self.random.choice(PASSPORT_COUNTRIES),
        }

    def generate_diagnosis(self, scenario: str) -> GeneratedDiagnosis:
        """Generate one finished diagnosis for a named scenario."""
        if scenario not in DEMO_SCENARIOS:
            raise ValueError(f"Unknown demo scenario: {scenario}")

        config = DEMO_SCENARIOS[scenario]
        language = config["language"]
        answers, final_step = self.walk(config["choices"], language)
        score = self.scoring.score(answers, language)

        return GeneratedDiagnosis(
            scenario=scenario,
            user=self.generate_user(),
            language=language,
            answers=answers,
            final_step=final_step,
            score=score,
            analysis=fallback_analysis(score),
            started_at=datetime.utcnow() - timedelta(minutes=self.random.randint(5, 600))
        )

    def generate_demo_set(self, scenarios: Optional[List[str]] = None) -> List[GeneratedDiagnosis]:
        return [self.generate_diagnosis(name) for name in (scenarios or list(DEMO_SCENARIOS))]


def load_demo_data_to_db(db_session, scenarios: Optional[List[str]] = None,
                         seed: Optional[int] = None) -> List[str]:
    """
    Load demo diagnoses into database.

    Returns:
        Access codes of the created diagnoses
    """
    from src.database.models import Diagnosis, generate_access_code

    generator = DemoDataGenerator(seed=seed)
    access_codes = []

    for generated in generator.generate_demo_set(scenarios):
        user = generated.user
        score = generated.score
        diagnosis = Diagnosis(
            access_code=generate_access_code(),
            email=user["email"],
            first_name=user["firstName"],
            last_name=user["lastName"],
            whatsapp=user["whatsapp"],
            passport_country=user["passportCountry"],
            language=generated.language,
            answers=generated.answers,
            score=score.score,
            status=score.status,
            status_key=score.status_key,
            status_color=score.status_color,
            report=score.to_dict(),
            ai_analysis=generated.analysis,
            cta_recommended="oracle",
            created_at=generated.started_at,
            completed_at=datetime.utcnow()
        )
        diagnosis.finish(generated.outcome, generated.reason_code)
        db_session.add(diagnosis)
        access_codes.append(diagnosis.access_code)

    db_session.commit()
    return access_codes


# Quick test function
if __name__ == "__main__":
    generator = DemoDataGenerator(seed=42)
    for generated in generator.generate_demo_set():
        print(f"{generated.scenario}: {generated.outcome} "
              f"score={generated.score.score} status={generated.score.status_key} "
              f"answers={len(generated.answers)}")
