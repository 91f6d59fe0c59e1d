"""
Status Classification Pattern - Alpha Visa Diagnosis

Converts a clamped eligibility score (0-100) into one of five ordered
status bands. Bands are half-open [min, max) except the top band, which
also includes the ceiling.

Use cases:
- Diagnosis status tier and display colour
- Start-up validation of the band table
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
from enum import Enum
import logging

logger = logging.getLogger(__name__)

SCORE_FLOOR = 0
SCORE_CEILING = 100


class StatusLevel(Enum):
    """Diagnosis status tiers, worst first."""
    NOT_ELIGIBLE = "not_eligible"
    NEEDS_PREPARATION = "needs_preparation"
    GOOD_POTENTIAL = "good_potential"
    STRONG_PROFILE = "strong_profile"
    EXCELLENT_PROFILE = "excellent_profile"

    @property
    def color(self) -> str:
        """Display colour for the report."""
        return {
            StatusLevel.NOT_ELIGIBLE: "#cc0000",       # Dark red
            StatusLevel.NEEDS_PREPARATION: "#ff4444",  # Red
            StatusLevel.GOOD_POTENTIAL: "#ffaa00",     # Amber
            StatusLevel.STRONG_PROFILE: "#88ff00",     # Lime
            StatusLevel.EXCELLENT_PROFILE: "#00ff88"   # Green
        }[self]


@dataclass(frozen=True)
class StatusBand:
    """One band of the status table."""
    level: StatusLevel
    min_score: int
    max_score: int


@dataclass
class StatusClassification:
    """Result of classifying a score."""
    score: int
    level: StatusLevel
    band: StatusBand

    @property
    def key(self) -> str:
        return self.level.value

    @property
    def color(self) -> str:
        return self.level.color


def find_band_problems(
    bands: Sequence[StatusBand],
    floor: int = SCORE_FLOOR,
    ceiling: int = SCORE_CEILING
) -> List[str]:
    """
    List every way the band table fails to tile [floor, ceiling].

    Returns an empty list for a valid table.
    """
    if not bands:
        return ["At least one status band must be defined"]

    problems = []
    ordered = sorted(bands, key=lambda b: b.min_score)

    for band in ordered:
        if band.min_score >= band.max_score:
            problems.append(
                f"Band {band.level.value} is empty ({band.min_score} >= {band.max_score})"
            )

    if ordered[0].min_score != floor:
        problems.append(f"Bands start at {ordered[0].min_score}, expected {floor}")
    if ordered[-1].max_score != ceiling:
        problems.append(f"Bands end at {ordered[-1].max_score}, expected {ceiling}")

    for current, next_b in zip(ordered, ordered[1:]):
        if current.max_score < next_b.min_score:
            problems.append(
                f"Gap between {current.level.value} ({current.max_score}) "
                f"and {next_b.level.value} ({next_b.min_score})"
            )
        elif current.max_score > next_b.min_score:
            problems.append(
                f"Overlap between {current.level.value} ({current.max_score}) "
                f"and {next_b.level.value} ({next_b.min_score})"
            )

    levels = [b.level for b in ordered]
    if len(set(levels)) != len(levels):
        problems.append("A status level is assigned to more than one band")

    return problems


class StatusClassifier:
    """
    Classifies eligibility scores into status tiers.

    Example:
    ```python
    classifier = StatusClassifier()
    result = classifier.classify(82)
    print(result.key, result.color)  # "strong_profile" "#88ff00"
    ```
    """

    DEFAULT_BANDS = (
        StatusBand(StatusLevel.NOT_ELIGIBLE, 0, 1),
        StatusBand(StatusLevel.NEEDS_PREPARATION, 1, 50),
        StatusBand(StatusLevel.GOOD_POTENTIAL, 50, 75),
        StatusBand(StatusLevel.STRONG_PROFILE, 75, 90),
        StatusBand(StatusLevel.EXCELLENT_PROFILE, 90, 100),
    )

    def __init__(self, bands: Optional[Sequence[StatusBand]] = None):
        self.bands = sorted(bands if bands is not None else self.DEFAULT_BANDS,
                            key=lambda b: b.min_score)

        problems = find_band_problems(self.bands)
        if problems:
            raise ValueError("Invalid status bands: " + "; ".join(problems))

    @property
    def floor(self) -> int:
        return self.bands[0].min_score

    @property
    def ceiling(self) -> int:
        return self.bands[-1].max_score

    def classify(self, score: int) -> StatusClassification:
        """Classify a score; values outside the table are clamped first."""
        clamped_score = max(self.floor, min(self.ceiling, score))

        for band in self.bands:
            if band.min_score <= clamped_score < band.max_score:
                return StatusClassification(score=clamped_score, level=band.level, band=band)

        # Only the ceiling itself falls through the half-open check
        top = self.bands[-1]
        return StatusClassification(score=clamped_score, level=top.level, band=top)

