"""
Claude API Client for Alpha Visa Diagnosis

Wrapper for Anthropic's Claude API providing:
- Personalized narrative for a scored diagnosis
- Localized template fallback when the API is unavailable or fails
"""

import os
import logging
from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from datetime import datetime

import anthropic

from src.assessment.assessment_engine import ScoreResult
from src.assessment.translations import DEFAULT_LOCALE, resolve_locale

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {
    "pt": "Brazilian Portuguese",
    "en": "English",
    "es": "Spanish",
}


@dataclass
class AnalysisResult:
    """Narrative generated for one diagnosis"""
    text: str
    source: str  # 'claude' or 'fallback'
    model: Optional[str] = None
    generated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "source": self.source,
            "model": self.model,
            "generated_at": self.generated_at.isoformat()
        }


def _top_gaps(result: ScoreResult, limit: int = 3) -> str:
    return ", ".join(result.gaps[:limit])


def fallback_analysis(result: ScoreResult) -> str:
    """Template narrative in the result's language."""
    locale = resolve_locale(result.locale)
    status = result.status.lower()

    if locale == "en":
        gaps = (f"The main gaps identified need attention: {_top_gaps(result)}."
                if result.gaps else "Your profile is on the right track.")
        return f"""Your {result.profile} profile with a score of {result.score}/100 indicates {status}. {gaps}

Most candidates fail because information is not strategy. Knowing the requirements is different from meeting them in the right order with precise documentation.

Power Oracle gives you a checklist adapted to your profile, ready-to-submit document templates and family planning where it applies, so your diagnosis becomes a plan of action.

Access Power Oracle now and receive your personalized roadmap in minutes."""

    if locale == "es":
        gaps = (f"Los principales gaps identificados necesitan atención: {_top_gaps(result)}."
                if result.gaps else "Tu perfil va por buen camino.")
        return f"""Tu perfil de {result.profile} con puntaje de {result.score}/100 indica {status}. {gaps}

La mayoría de candidatos fracasa porque información no es estrategia. Conocer los requisitos es diferente de cumplirlos en el orden correcto con documentación precisa.

Power Oracle te entrega un checklist adaptado a tu perfil, plantillas de documentos listas para presentar y planificación familiar cuando aplica, para que tu diagnóstico se convierta en un plan de acción.

Accede a Power Oracle ahora y recibe tu roadmap personalizado en minutos."""

    gaps = (f"Os principais gaps identificados precisam de atenção: {_top_gaps(result)}."
            if result.gaps else "Seu perfil está no caminho certo.")
    return f"""Seu perfil de {result.profile} com score de {result.score}/100 indica {status}. {gaps}

A maioria dos candidatos falha porque informação não é estratégia. Saber os requisitos é diferente de cumpri-los na ordem certa com documentação precisa.

O Power Oracle entrega um checklist adaptado ao seu perfil, modelos de documentos prontos para submissão e planejamento familiar quando se aplica, para que seu diagnóstico vire um plano de ação.

Acesse o Power Oracle agora e receba seu roadmap personalizado em minutos."""


class AnalysisClient:
    """
    Claude API client for diagnosis narratives.

    Example:
        client = AnalysisClient()
        analysis = client.generate_analysis(score_result)
        print(analysis.source, analysis.text)
    """

    DEFAULT_MODEL = "claude-sonnet-4-20250514"
    MAX_TOKENS = 1024

    SYSTEM_PROMPT = """You are Alpha AI, a strategy consultant for candidates to the Spanish international-teleworker visa. Your tone is direct, honest and data-driven.

The candidate has just completed the free Alpha self-assessment. Write three short paragraphs followed by a one-line call to action:
1. An honest technical diagnosis naming their profile, score, status and the two or three most critical gaps, using the exact gap names provided.
2. Why information alone is not a strategy, adapted to their score range and profile.
3. How Power Oracle, the paid preparation guide, addresses their specific gaps.

Rules: at most 280 words, address the candidate directly, no emojis, never promise approval, never invent gaps that are not listed."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """Initialize Claude client."""
        self.api_key = api_key or os.environ.get('ANTHROPIC_API_KEY')
        self.model = model or self.DEFAULT_MODEL
        self.client = None

        if self.api_key:
            self.client = anthropic.Anthropic(api_key=self.api_key)
            logger.info(f"Claude client initialized with model {self.model}")
        else:
            logger.warning("No Anthropic API key - using fallback analysis")

    def is_available(self) -> bool:
        """Check if Claude API is available"""
        return self.client is not None

    def build_prompt(self, result: ScoreResult) -> str:
        """Candidate data block sent as the user message."""
        language = LANGUAGE_NAMES.get(resolve_locale(result.locale), LANGUAGE_NAMES[DEFAULT_LOCALE])
        return f"""CANDIDATE DATA:
- Profile: {result.profile}
- Alpha score: {result.score}/100
- Status: {result.status}
- Strengths: {", ".join(result.strengths) or "none identified"}
- Critical gaps: {", ".join(result.gaps) or "none identified"}

Write the analysis in {language}."""

    def generate_analysis(self, result: ScoreResult) -> AnalysisResult:
        """
        Generate the narrative for a scored diagnosis.

        Never raises for API problems; falls back to the localized template.
        """
        if not self.is_available():
            return AnalysisResult(text=fallback_analysis(result), source="fallback")

        logger.info(f"Requesting analysis: score={result.score} status={result.status_key} locale={result.locale}")

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.MAX_TOKENS,
                system=self.SYSTEM_PROMPT,
                messages=[{"role": "user", "content": self.build_prompt(result)}]
            )
        except anthropic.APIError as e:
            logger.error(f"Claude API error: {e}")
            return AnalysisResult(text=fallback_analysis(result), source="fallback")

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        ).strip()

        if not text:
            logger.warning("Claude returned an empty analysis - using fallback")
            return AnalysisResult(text=fallback_analysis(result), source="fallback")

        return AnalysisResult(text=text, source="claude", model=self.model)

