"""
normalizer.py

Stateless text helpers shared by both extractors.

Handles:
- Arabic-Indic and Eastern Arabic-Indic digit normalization
- Removal of bidirectional/zero-width marks and tatweel
- Whitespace cleanup (line-preserving and fully flattened)
- Number capture from mixed-digit text
- Declarative first-match rule tables (FieldRule / first_match)
"""

import re
from typing import Any, Callable, Iterable, NamedTuple, Optional

# Arabic-Indic (U+0660..0669) and Eastern Arabic-Indic (U+06F0..06F9)
_EASTERN_DIGITS_TO_WESTERN = str.maketrans(
    "\u0660\u0661\u0662\u0663\u0664\u0665\u0666\u0667\u0668\u0669"
    "\u06f0\u06f1\u06f2\u06f3\u06f4\u06f5\u06f6\u06f7\u06f8\u06f9",
    "01234567890123456789",
)

# Zero-width characters, bidi marks/embeddings/isolates, BOM
_CONTROL_MARKS = re.compile(
    "[\u200b-\u200f\u061c\u202a-\u202e\u2066-\u2069\ufeff]"
)
_TATWEEL = "\u0640"


def normalize_digits(text: str) -> str:
    """
    Convert Arabic-Indic and Eastern Arabic-Indic digits to ASCII 0-9.

    Every other character is left untouched, so the function is idempotent.
    """
    if not text:
        return text
    return text.translate(_EASTERN_DIGITS_TO_WESTERN)


def clean_text(text: str) -> str:
    """
    Remove OCR/bidi artifacts while keeping the line structure.

    - Strip directional and zero-width marks
    - Remove tatweel (kashida) elongation
    - Collapse runs of spaces/tabs, trim around line breaks
    - Collapse runs of blank lines into one
    """
    if not text:
        return ""

    text = _CONTROL_MARKS.sub("", text)
    text = text.replace(_TATWEEL, "")
    text = text.replace("\u00a0", " ").replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t\f\v]+", " ", text)
    text = re.sub(r" ?\n ?", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def flatten_whitespace(text: str) -> str:
    """Collapse every whitespace run, line breaks included, into one space."""
    return re.sub(r"\s+", " ", text or "").strip()


def normalize_date(value: str) -> str:
    """Unify date separators to '/' and drop inner spaces."""
    return re.sub(r"[\-.]", "/", re.sub(r"\s+", "", normalize_digits(value)))


def extract_number(pattern: re.Pattern, text: str) -> Optional[str]:
    """
    Capture group 1 of ``pattern`` from the digit-normalized text.

    Falls back to the raw text and normalizes only the captured substring,
    for patterns whose span is broader than the digits themselves.
    """
    match = pattern.search(normalize_digits(text))
    if match:
        return match.group(1).strip()

    match = pattern.search(text)
    if match:
        return normalize_digits(match.group(1).strip())

    return None


# -----------------------------
# First-match rule tables
# -----------------------------
Validator = Callable[[re.Match], Any]


def group_one(match: re.Match) -> Optional[str]:
    """Default validator: the stripped first group, or None if empty."""
    value = (match.group(1) or "").strip()
    return value or None


class FieldRule(NamedTuple):
    """One (pattern, validator) row of an ordered extraction table."""

    pattern: re.Pattern
    validator: Validator = group_one

    def apply(self, text: str) -> Any:
        """Return the first match this rule validates, or None."""
        for match in self.pattern.finditer(text):
            value = self.validator(match)
            if value is not None:
                return value
        return None


def rule(pattern: str, validator: Validator = group_one, flags: int = 0) -> FieldRule:
    """Compile ``pattern`` into a FieldRule."""
    return FieldRule(re.compile(pattern, flags), validator)


def first_match(rules: Iterable[FieldRule], text: str) -> Any:
    """
    Apply rules in order and return the first structurally valid value.

    First match wins; later rules are never consulted once one succeeds.
    """
    if not text:
        return None
    for field_rule in rules:
        value = field_rule.apply(text)
        if value is not None:
            return value
    return None
