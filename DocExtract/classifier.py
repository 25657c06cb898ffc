"""
classifier.py

Keyword-priority document classification.

Judiciary markers are tested before contract markers, so a judgment that
mentions a contracting party still classifies as a court decision.
"""

import logging

from DocExtract.normalizer import clean_text
from DocExtract.schemas import DocumentCategoryEnum

logger = logging.getLogger(__name__)

# Ordered: first category with any marker present wins
CATEGORY_MARKERS = (
    ("court_decision", ("المحكمة", "القاضي", "حكم صادر")),
    ("contract", ("عقد", "الفريق", "البند")),
)


def classify(text: str) -> DocumentCategoryEnum:
    """
    Classify acquired text as court_decision, contract, or other.

    Args:
        text: Acquired document text (raw or cleaned).

    Returns:
        The document category; ``other`` when no marker set matches.
    """
    cleaned = clean_text(text)

    for category, markers in CATEGORY_MARKERS:
        for marker in markers:
            if marker in cleaned:
                logger.info("Classified as %s (marker: %s)", category, marker)
                return category

    logger.info("No category markers found; classified as other")
    return "other"
