"""
court_extractor.py

Field extraction for judicial decisions (family-law court judgments).

Each field is resolved from an ordered table of FieldRule rows
(pattern + validator); the first structurally valid match wins.
Patterns that are sensitive to line structure run on the cleaned text,
patterns whose phrasing may be broken across lines run on a flattened copy.

Scoring:
    15 fields, one point each, scored by the court QualityScorer
    (>= 75 high, >= 50 medium, else low).
"""

import logging
import re
from typing import List, Optional

from DocExtract import config
from DocExtract.normalizer import (
    clean_text,
    first_match,
    flatten_whitespace,
    normalize_date,
    normalize_digits,
    rule,
)
from DocExtract.quality import COURT_SCORER, QualityReport, cap_confidence
from DocExtract.schemas import (
    AttendanceEnum,
    CourtDecisionRecord,
    Defendant,
    Dowry,
    Plaintiff,
)

logger = logging.getLogger(__name__)

OCR_ERROR_MARKER = "[OCR_ERROR:"

_LOCALITY = re.escape(config.LOCALITY_MARKER)
_LIRA = r"ليرة\s+سورية"
_UNPAID = re.compile(r"غير\s+مقبوضة")
_DMY = r"(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4})"
_ANY_ORDER_DATE = r"(\d{1,4}[/\-]\d{1,2}[/\-]\d{1,4})"


# -----------------------------
# Validators
# -----------------------------
def _number_year(match: re.Match) -> Optional[str]:
    """Accept '<n>/<year>' only for n in [1, 9999] and year in [2001, 2099]."""
    number, year = match.group(1), match.group(2)
    if 1 <= int(number) <= 9999 and 2001 <= int(year) <= 2099:
        return f"{number}/{year}"
    return None


def _trim_label(match: re.Match) -> Optional[str]:
    value = match.group(1).strip()
    value = re.sub(r"\s+ا$", "", value)
    value = re.sub(r"[:\s]+$", "", value)
    return value or None


def _flat_group(match: re.Match) -> Optional[str]:
    value = flatten_whitespace(match.group(1)).rstrip(" .")
    return value or None


def _date(match: re.Match) -> Optional[str]:
    return normalize_date(match.group(1))


def _corrupted_date(match: re.Match) -> Optional[str]:
    fragment = match.group(1).strip()
    if re.search(r"[\da-zA-Z]", fragment):
        return f"{OCR_ERROR_MARKER} {fragment}]"
    return None


def _verdict(match: re.Match) -> Optional[str]:
    value = flatten_whitespace(match.group(0))[:200].strip()
    return value or None


def _dowry_status(match: re.Match, unmarked: Optional[str]):
    """
    Paid or unpaid from the captured status phrase (group 2).

    Without a captured phrase the rule's ``unmarked`` status applies;
    ``None`` means the whole text is searched for the unpaid phrase.
    """
    marker = match.group(2) if match.re.groups >= 2 else None
    if marker:
        return "unpaid" if _UNPAID.search(marker) else "paid"
    if unmarked is not None:
        return unmarked
    return "unpaid" if _UNPAID.search(match.string) else "paid"


def _dowry(unmarked: Optional[str] = None):
    """Dowry validator for one rule; see ``_dowry_status`` for ``unmarked``."""

    def validator(match: re.Match) -> Dowry:
        immediate = f"{match.group(1).strip()} {config.LOCAL_CURRENCY_LABEL}"
        deferred = None
        if match.re.groups >= 3 and match.group(3):
            deferred = f"{match.group(3).strip()} {config.LOCAL_CURRENCY_LABEL}"
        return Dowry(
            immediate=immediate,
            deferred=deferred,
            status=_dowry_status(match, unmarked),
        )

    return validator


def _witness_list(match: re.Match) -> Optional[List[str]]:
    witnesses = [w.strip() for w in re.split(r"[،؛,;]", match.group(1))]
    witnesses = [flatten_whitespace(w) for w in witnesses if len(w.strip()) > 2]
    return witnesses or None


# -----------------------------
# Rule tables
# -----------------------------
_ASAS = r"[اأإ]ساس"

CASE_NUMBER_RULES = (
    rule(_ASAS + r"\s*[:\s]*(\d+)\s*(?:لعام|/)\s*(\d+)", _number_year),
    rule(_ASAS + r"\s*رقم\s*[:\s]*(\d+)\s*[/\-]\s*(\d+)", _number_year),
    rule(r"رقم\s*ال[اأ]ساس\s*[:\s]*(\d+)\s*[/\-]\s*(\d+)", _number_year),
    rule(_ASAS + r"\D{0,40}?(\d+)\D{0,40}?(?:لعام|/)\D{0,40}?(\d+)", _number_year),
    rule(_ASAS + r"\D{0,20}(\d{1,4})\D{0,10}(\d{4})", _number_year),
)

DECISION_NUMBER_RULES = (
    rule(r"قرار\s*[:\s]*(\d+)\s*#?\s*لعام\s*[()]*\s*(\d+)", _number_year),
    rule(r"قرار\s*رقم\s*[:\s]*(\d+)\s*(?:لعام|/)\s*(\d+)", _number_year),
    rule(r"قرار\s*[:\s]*(\d+)\s*[/\-]\s*(\d+)", _number_year),
    rule(r"رقم\s*القرار\s*[:\s]*(\d+)\s*[/\-]\s*(\d+)", _number_year),
    rule(r"قرار\D{0,40}?(\d+)\D{0,40}?(?:لعام|/)\D{0,40}?(\d+)", _number_year),
    rule(r"قرار\D{0,20}(\d{1,4})\D{0,10}(\d{4})", _number_year),
)

_JUDGE = "الق\u064e?اضي"
_JUDGE_STOP = r"(?=\s+ا|\s*المساعد|\n|$)"

JUDGE_RULES = (
    rule(_JUDGE + r"\s+السيد\s*[:\s]*([^\n]+?)" + _JUDGE_STOP, _trim_label),
    rule(_JUDGE + r"\s*[:\s]*([^\n]+?)" + _JUDGE_STOP, _trim_label),
    rule(r"برئاسة\s*[:\s]*([^\n]+)", _trim_label),
)

_COURT_STOP = r"(?=\s*(?:ب?" + _LOCALITY + r"|\bفي\b|القاضي)|\n|$)"

COURT_RULES = (
    rule(r"المحكمة\s+الشرعية\s+([^\n]+?)" + _COURT_STOP, _trim_label),
    rule(r"محكمة\s+([^\n]+?الشرعية[^\n]*?)" + _COURT_STOP, _trim_label),
    rule(r"المحكمة\s+([^\n]+?)" + _COURT_STOP, _trim_label),
)

CASE_TYPE_RULES = (
    rule(r"الدعوى\s*:\s*([^\n:]+)", _trim_label),
    rule(r"الدعوى\s*[:\s]*([^\n:]+)", _trim_label),
)

# Run on flattened text
PLAINTIFF_RULES = (
    rule(r"الجهة\s+المدعية\s*[:\s]*([^.]+?)\s*(?:\.|يمثلها)", _flat_group),
)

LAWYER_RULES = (
    rule(r"يمثلها\s+المحامي\s*[:\s]*([^\n.]+)", _flat_group),
)

_DEFENDANT = r"الجهة\s+المدعى\s+عليها?"

DEFENDANT_RULES = (
    rule(_DEFENDANT + r"\s*[:\s]*([^.\n]+?)(?:\s*\.\s*\.|" + _LOCALITY + r"\s*[-\s])", _flat_group),
    rule(_DEFENDANT + r"\s*[:\s]*([^.\n]+?)\s*(?:\.|\n|$)", _flat_group),
)

ADDRESS_RULES = (
    rule(_DEFENDANT + r"\s*[:\s]*[^.]+?\.\s*\.\s*(" + _LOCALITY + r"[^\n]+?)(?:\.|\n|$)", _flat_group),
    rule(_DEFENDANT + r"[^\n]*?\.\s*\.\s*(" + _LOCALITY + r"[^\n]+?)(?:\.|الدعوى)", _flat_group),
    rule(_DEFENDANT + r"[^\n]*?(" + _LOCALITY + r"\s*-\s*[^\n.]+)", _flat_group),
)

# Run on flattened text; progressively looser. Status when no phrase is
# captured: paid, unpaid, paid, then a whole-text search
DOWRY_RULES = (
    rule(
        r"1\s*-\s*تثبيت\s+زواج.*?مهر\s+معجله\s+(.+?)\s*" + _LIRA
        + r"\s+(غير\s+مقبوضة)?\s*ومؤجله\s+(.+?)\s*" + _LIRA + r"\s+باقية",
        _dowry("paid"),
    ),
    rule(
        r"مهر\s+معجله?\s+([^ل]+?)\s*" + _LIRA
        + r"\s+(غير\s+مقبوضة|مقبوضة)?\s*ومؤجله?\s+([^ل]+?)\s*" + _LIRA,
        _dowry("unpaid"),
    ),
    rule(
        r"مهر\s+معجله?\s+([^ل]+?)\s*(?:" + _LIRA + r"|[a-z]{2,6}\s+[a-z]{2})"
        r"\s+(غير\s+مقبوضة|مقبوضة)?\s*ومؤجله?\s+(\S+(?:\s+\S+){0,2}?)\s*"
        r"(?:" + _LIRA + r"|[a-z]{2,6}\s+[a-z]{2})\s*باقية",
        _dowry("paid"),
        re.IGNORECASE,
    ),
    rule(r"مهر\s+معجله?\s+(.{1,80}?)\s*" + _LIRA, _dowry()),
)

MARRIAGE_DATE_RULES = (
    rule(r"حاصلا\s+في\s+.{0,80}?بتاريخ\s+" + _ANY_ORDER_DATE, _date),
    rule(r"زواجهما\s+حاصلا.{0,100}?بتاريخ\s+" + _ANY_ORDER_DATE, _date),
    rule(r"وذلك\s+بتاريخ\s+" + _ANY_ORDER_DATE, _date),
    rule(r"بتاريخ\s+" + _ANY_ORDER_DATE + r"م?\s+في\s+محافظة", _date),
    rule(r"حاصلا\s+في\s+.{0,80}?بتاريخ\s+(\S+(?:\s+\S+){0,3})\s+وتسجيله", _corrupted_date),
)

DECISION_DATE_RULES = (
    rule(r"(?:أفهم|صدر)\s+علنا.{0,150}?" + _DMY + r"\s*م?\s*ميلادي", _date),
    rule(r"(?:أفهم|صدر)\s+علنا.{0,150}?" + _DMY + r".{0,60}?ميلادي", _date),
    rule(r"بتاريخ.{0,150}?" + _DMY + r".{0,60}?ميلادي", _date),
    rule(r"هجري\s+" + _DMY + r".{0,60}?ميلادي", _date),
)

NEXT_SESSION_RULES = (
    rule(r"الجلسة\s+القادمة[:\s]+" + _DMY, _date),
    rule(r"موعد\s+الجلسة[:\s]+" + _DMY, _date),
    rule(r"تأجل\s+(?:إلى|الى)[:\s]+" + _DMY, _date),
)

VERDICT_RULES = (
    rule(r"ثالثا\s*:\s*في\s+المناقشة[\s\S]*?(?=رابعا|$)", _verdict),
    rule(r"قررت\s+المحكمة\s*[:\s]*[^\n]+", _verdict),
    rule(r"حكمت\s+المحكمة\s*[:\s]*[^\n]+", _verdict),
    rule(r"الحكم\s*[:\s]*[^\n]+", _verdict),
)

WITNESS_RULES = (
    rule(r"الشهود[^(]{0,100}\(\s*([^)]+?)\s*\)", _witness_list),
    rule(r"شهود\s+المدعية\s+وهم\s*\(\s*([^)]+?)\s*\)", _witness_list),
    rule(r"الشهود\s*[:\s]*([^.\n]+?)(?:\.|\n|$)", _witness_list),
)

DOCUMENT_TYPES = (
    (re.compile(r"تثبيت\s+زواج"), "Marriage Registration"),
    (re.compile(r"طلاق"), "Divorce"),
    (re.compile(r"حضانة"), "Custody"),
    (re.compile(r"نفقة"), "Alimony"),
    (re.compile(r"رؤية"), "Visitation Rights"),
    (re.compile(r"نسب"), "Paternity"),
    (re.compile(r"ميراث"), "Inheritance"),
    (re.compile(r"وصية"), "Will"),
)

VERDICT_SUMMARIES = {
    "Marriage Registration": (
        re.compile(r"تثبيت\s+زواج"),
        "Marriage registration approved and ordered to be recorded in civil registry",
    ),
    "Divorce": (re.compile(r"إيقاع\s+الطلاق"), "Divorce decree issued"),
    "Custody": (re.compile(r"حضانة"), "Custody decision issued"),
}

# (attribute, issue label) for the fields a reviewer cannot do without
CRITICAL_FIELDS = (
    ("case_number", "Case number"),
    ("decision_number", "Decision number"),
    ("judge", "Judge name"),
    ("plaintiff", "Plaintiff information"),
    ("defendant", "Defendant information"),
    ("decision_date", "Decision date"),
)


# -----------------------------
# Keyword-driven fields
# -----------------------------
def extract_attendance(text: str) -> Optional[AttendanceEnum]:
    """Tri-state attendance from co-occurring presence/absence phrases."""
    if re.search(r"وجاهيا?\s+بحق\s+الجهة\s+المدعية", text):
        if re.search(r"بمثابة\s+الوجاهي\s+بحق\s+الجهة\s+المدعى\s+عليها?", text):
            return "وجاهي للمدعية وبمثابة الوجاهي للمدعى عليه"
        return "حضوري"

    if re.search(r"بمثابة\s+الوجاهي|كالوجاهي", text):
        return "غيابي"

    if "وجاهي" in text:
        return "حضوري"

    if "غياب" in text:
        return "غيابي"

    return None


def extract_appealability(text: str) -> Optional[bool]:
    """
    True/False from an explicit marker, None when the document is silent.

    The negative phrase contains the positive one, so it is tested first.
    """
    if re.search(r"غير\s+قابلا?\s+للطعن", text):
        return False
    if re.search(r"قابلا?\s+للطعن", text):
        return True
    return None


def extract_document_type(text: str) -> Optional[str]:
    for pattern, label in DOCUMENT_TYPES:
        if pattern.search(text):
            return label
    return None


def generate_verdict_summary(document_type: Optional[str], text: str) -> Optional[str]:
    if document_type not in VERDICT_SUMMARIES:
        return None
    pattern, summary = VERDICT_SUMMARIES[document_type]
    return summary if pattern.search(text) else None


def extract_plaintiff(flat: str, text: str) -> Optional[Plaintiff]:
    name = first_match(PLAINTIFF_RULES, flat)
    if not name:
        return None
    return Plaintiff(name=name, lawyer=first_match(LAWYER_RULES, text))


def extract_defendant(text: str) -> Optional[Defendant]:
    name = first_match(DEFENDANT_RULES, text)
    if not name:
        return None
    return Defendant(name=name, address=first_match(ADDRESS_RULES, text))


# -----------------------------
# Public API
# -----------------------------
def extract_court_decision(text: str) -> CourtDecisionRecord:
    """
    Extract a court decision record from acquired document text.

    Args:
        text: Acquired text (digits and whitespace may still be raw).

    Returns:
        CourtDecisionRecord with every field that could be matched,
        a derived quality score, and confidence.
    """
    logger.info("Starting court decision extraction (%d chars)", len(text or ""))

    cleaned = normalize_digits(clean_text(text))
    flat = flatten_whitespace(re.sub(r"[#@]", "", cleaned))

    record = CourtDecisionRecord(raw_text=text or "")
    record.document_type = extract_document_type(cleaned)
    record.court = first_match(COURT_RULES, cleaned)
    record.case_number = first_match(CASE_NUMBER_RULES, flat)
    record.decision_number = first_match(DECISION_NUMBER_RULES, flat)
    record.judge = first_match(JUDGE_RULES, cleaned)
    record.plaintiff = extract_plaintiff(flat, cleaned)
    record.defendant = extract_defendant(cleaned)
    record.case_type = first_match(CASE_TYPE_RULES, cleaned)
    record.dowry = first_match(DOWRY_RULES, flat)
    record.marriage_date = first_match(MARRIAGE_DATE_RULES, flat)
    record.verdict = first_match(VERDICT_RULES, cleaned)
    record.attendance_status = extract_attendance(flat)
    record.appealable = extract_appealability(flat)
    record.decision_date = first_match(DECISION_DATE_RULES, flat)
    record.next_session_date = first_match(NEXT_SESSION_RULES, flat)
    record.witnesses = first_match(WITNESS_RULES, cleaned) or []
    record.verdict_summary = generate_verdict_summary(record.document_type, cleaned)

    if not record.case_number:
        logger.warning("Case number not found. Text sample: %s", cleaned[:200])
    if not record.decision_number:
        logger.warning("Decision number not found. Text sample: %s", cleaned[:200])

    report = QualityReport(COURT_SCORER, config.COURT_TOTAL_FIELDS)
    for field_name in (
        "court", "case_number", "decision_number", "judge", "plaintiff",
        "defendant", "case_type", "dowry", "marriage_date", "verdict",
        "attendance_status", "appealable", "decision_date",
        "next_session_date", "witnesses",
    ):
        value = getattr(record, field_name)
        if report.hit(value):
            logger.debug("Found %s: %s", field_name, value)

    record.confidence = _assess_quality(record, report)
    record.extraction_quality = report.build()

    logger.info(
        "Extraction complete: %d%% (%d/%d fields), confidence=%s",
        report.score, report.points, report.total, record.confidence,
    )
    if report.issues:
        logger.warning("Issues found: %s", ", ".join(report.issues))

    return record


def _assess_quality(record: CourtDecisionRecord, report: QualityReport):
    """Append confidence-level and per-field issues; return the confidence."""
    confidence = report.confidence

    if confidence == "medium":
        report.add_issue("Some fields could not be extracted")
    elif confidence == "low":
        report.add_issue("Many fields could not be extracted")
        report.add_issue("OCR quality may be poor")

    for field_name, label in CRITICAL_FIELDS:
        if getattr(record, field_name) is None:
            report.add_issue(f"{label} not found")

    if record.marriage_date and OCR_ERROR_MARKER in record.marriage_date:
        report.add_issue(
            "Marriage date appears corrupted by OCR - manual verification required"
        )
        confidence = cap_confidence(confidence, "medium")

    if "CamScanner" in record.raw_text:
        report.add_issue("Document appears to be a scan - OCR quality may vary")

    return confidence


def needs_manual_review(record: CourtDecisionRecord) -> bool:
    """True when a person should check the record before it is relied upon."""
    if record.extraction_quality.score < config.MANUAL_REVIEW_THRESHOLD:
        return True

    if any(getattr(record, field_name) is None for field_name, _ in CRITICAL_FIELDS):
        return True

    if record.marriage_date and OCR_ERROR_MARKER in record.marriage_date:
        return True

    return False


def get_extraction_summary(record: CourtDecisionRecord) -> str:
    """One-line summary for completion notifications."""
    parts = []
    if record.case_number:
        parts.append(f"Case {record.case_number}")
    if record.decision_number:
        parts.append(f"Decision {record.decision_number}")
    if record.document_type:
        parts.append(f"Type: {record.document_type}")
    return " | ".join(parts) if parts else "Court decision extracted"
