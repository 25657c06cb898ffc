"""
Tests for completeness scoring and confidence mapping.
"""

import pytest

from DocExtract.quality import (
    CONTRACT_SCORER,
    COURT_SCORER,
    QualityReport,
    QualityScorer,
    cap_confidence,
)
from DocExtract.schemas import ExtractionQuality


class TestQualityScorer:
    def test_rounds_half_up(self):
        assert COURT_SCORER.score(3, 15) == 20
        assert COURT_SCORER.score(1, 8) == 13  # 12.5

    def test_clamped_to_100(self):
        assert CONTRACT_SCORER.score(16, 13) == 100

    def test_zero_total(self):
        assert COURT_SCORER.score(5, 0) == 0

    @pytest.mark.parametrize(
        "score,expected",
        [(100, "high"), (75, "high"), (74, "medium"), (50, "medium"), (49, "low"), (0, "low")],
    )
    def test_court_thresholds(self, score, expected):
        assert COURT_SCORER.confidence(score) == expected

    @pytest.mark.parametrize(
        "score,expected",
        [(70, "high"), (69, "medium"), (40, "medium"), (39, "low")],
    )
    def test_contract_thresholds(self, score, expected):
        assert CONTRACT_SCORER.confidence(score) == expected

    def test_inverted_thresholds_rejected(self):
        with pytest.raises(ValueError):
            QualityScorer("broken", high_threshold=40, medium_threshold=70)


class TestCapConfidence:
    def test_caps_high(self):
        assert cap_confidence("high", "medium") == "medium"

    def test_keeps_lower(self):
        assert cap_confidence("low", "medium") == "low"
        assert cap_confidence("medium", "medium") == "medium"


class TestQualityReport:
    def test_hit_counts_populated_values(self):
        report = QualityReport(COURT_SCORER, 15)
        assert report.hit("45/2023") is True
        assert report.hit(False) is True  # explicit "not appealable" is a value
        assert report.hit(None) is False
        assert report.hit([]) is False
        assert report.hit("") is False
        assert report.points == 2

    def test_weighted_hit(self):
        report = QualityReport(CONTRACT_SCORER, 13)
        report.hit("Residential", weight=2)
        assert report.points == 2

    def test_issues_append_only(self):
        report = QualityReport(COURT_SCORER, 15)
        report.add_issue("first")
        issues = report.issues
        issues.append("tampered")
        report.add_issue("second")
        assert report.issues == ["first", "second"]

    def test_build(self):
        report = QualityReport(COURT_SCORER, 15)
        for value in ("a", "b", "c"):
            report.hit(value)
        report.add_issue("Decision date not found")

        quality = report.build()

        assert isinstance(quality, ExtractionQuality)
        assert quality.score == 20
        assert quality.issues == ["Decision date not found"]
        assert report.confidence == "low"
