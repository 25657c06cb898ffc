"""
quality.py

Completeness scoring shared in concept, not in policy, by both extractors.

A scorer maps "points matched / fields attempted" to a 0-100 score and a
three-level confidence. Court decisions and contracts use separately
configured instances so each keeps its own thresholds.
"""

import logging
import math
from typing import List

from DocExtract import config
from DocExtract.schemas import ConfidenceEnum, ExtractionQuality

logger = logging.getLogger(__name__)

_CONFIDENCE_RANK = {"low": 0, "medium": 1, "high": 2}


class QualityScorer:
    """Score/confidence policy for one extractor."""

    def __init__(self, name: str, high_threshold: int, medium_threshold: int):
        if medium_threshold > high_threshold:
            raise ValueError(
                f"{name}: medium threshold {medium_threshold} "
                f"exceeds high threshold {high_threshold}"
            )
        self.name = name
        self.high_threshold = high_threshold
        self.medium_threshold = medium_threshold

    def score(self, points: int, total: int) -> int:
        """Round-half-up percentage of ``points`` over ``total``, clamped to 0-100."""
        if total <= 0:
            return 0
        raw = math.floor(100 * points / total + 0.5)
        return max(0, min(100, raw))

    def confidence(self, score: int) -> ConfidenceEnum:
        if score >= self.high_threshold:
            return "high"
        if score >= self.medium_threshold:
            return "medium"
        return "low"

    def __repr__(self) -> str:
        return (
            f"QualityScorer({self.name!r}, high={self.high_threshold}, "
            f"medium={self.medium_threshold})"
        )


COURT_SCORER = QualityScorer(
    "court_decision", config.COURT_HIGH_THRESHOLD, config.COURT_MEDIUM_THRESHOLD
)
CONTRACT_SCORER = QualityScorer(
    "contract", config.CONTRACT_HIGH_THRESHOLD, config.CONTRACT_MEDIUM_THRESHOLD
)


def cap_confidence(confidence: ConfidenceEnum, ceiling: ConfidenceEnum) -> ConfidenceEnum:
    """Return the lower of two confidence levels."""
    if _CONFIDENCE_RANK[confidence] > _CONFIDENCE_RANK[ceiling]:
        return ceiling
    return confidence


class QualityReport:
    """
    Per-run accumulator: points are counted, issues only ever appended.

    The score is derived from the points at ``build`` time, never assigned.
    """

    def __init__(self, scorer: QualityScorer, total: int):
        self.scorer = scorer
        self.total = total
        self.points = 0
        self._issues: List[str] = []

    def hit(self, value, weight: int = 1) -> bool:
        """Count ``weight`` points if ``value`` is populated; return whether it was."""
        populated = value is not None and value != [] and value != ""
        if populated:
            self.points += weight
        return populated

    def add_issue(self, issue: str) -> None:
        self._issues.append(issue)

    @property
    def issues(self) -> List[str]:
        return list(self._issues)

    @property
    def score(self) -> int:
        return self.scorer.score(self.points, self.total)

    @property
    def confidence(self) -> ConfidenceEnum:
        return self.scorer.confidence(self.score)

    def build(self) -> ExtractionQuality:
        return ExtractionQuality(score=self.score, issues=self.issues)
