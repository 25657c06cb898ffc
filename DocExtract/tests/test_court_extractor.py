"""
Tests for court decision field extraction and scoring.
"""

import pytest

from DocExtract.court_extractor import (
    DOWRY_RULES,
    OCR_ERROR_MARKER,
    extract_appealability,
    extract_attendance,
    extract_court_decision,
    get_extraction_summary,
    needs_manual_review,
)
from DocExtract.normalizer import first_match
from DocExtract.schemas import CourtDecisionRecord

MARRIAGE_JUDGMENT = "\n".join([
    "المحكمة الشرعية الأولى بحلب",
    "القاضي السيد أحمد الخطيب",
    "أساس: 123 لعام 2023",
    "قرار: 456 لعام 2023",
    "الجهة المدعية: فاطمة علي يمثلها المحامي خالد حسن",
    "الجهة المدعى عليه: محمود سعيد . . حلب - حي الشعار",
    "الدعوى: تثبيت زواج",
    "حكمت المحكمة بتثبيت زواج المدعية من المدعى عليه",
    "مهر معجله 100000 ليرة سورية غير مقبوضة ومؤجله 500000 ليرة سورية باقية في ذمته",
    "وكان زواجهما حاصلا في حلب بتاريخ 2020/05/10 وتسجيله أصولا",
    "الشهود (سامر يوسف، رامي نادر)",
    "قرارا وجاهيا بحق الجهة المدعية وبمثابة الوجاهي بحق الجهة المدعى عليها قابل للطعن",
    "صدر علنا بتاريخ 15/11/2023 ميلادي",
])

MINIMAL_TEXT = "اساس : 45 لعام 2023 ... قرار: 10 لعام 2023 ... القاضي السيد محمد"


@pytest.fixture
def judgment_record():
    return extract_court_decision(MARRIAGE_JUDGMENT)


class TestCaseAndDecisionNumbers:
    def test_minimal_text(self):
        record = extract_court_decision(MINIMAL_TEXT)
        assert record.case_number == "45/2023"
        assert record.decision_number == "10/2023"
        assert "محمد" in record.judge
        assert record.extraction_quality.score >= 20

    def test_out_of_range_number_rejected(self):
        record = extract_court_decision("اساس : 99999 لعام 2024")
        assert record.case_number is None

    def test_out_of_range_year_rejected(self):
        record = extract_court_decision("اساس : 45 لعام 1999")
        assert record.case_number is None

    def test_arabic_indic_digits(self):
        record = extract_court_decision("أساس : ٤٥ لعام ٢٠٢٣")
        assert record.case_number == "45/2023"

    def test_slash_form(self):
        record = extract_court_decision("رقم الأساس: 77/2022")
        assert record.case_number == "77/2022"

    def test_decision_with_parenthesized_year(self):
        record = extract_court_decision("قرار 12 لعام ( 2021 )")
        assert record.decision_number == "12/2021"

    def test_hash_noise_removed(self):
        record = extract_court_decision("قرار: 10 # لعام 2023")
        assert record.decision_number == "10/2023"


class TestFullJudgment:
    def test_header_fields(self, judgment_record):
        assert "الأولى" in judgment_record.court
        assert "أحمد" in judgment_record.judge
        assert judgment_record.case_number == "123/2023"
        assert judgment_record.decision_number == "456/2023"
        assert judgment_record.case_type == "تثبيت زواج"

    def test_parties(self, judgment_record):
        assert judgment_record.plaintiff.name == "فاطمة علي"
        assert judgment_record.plaintiff.lawyer == "خالد حسن"
        assert judgment_record.defendant.name == "محمود سعيد"
        assert judgment_record.defendant.address == "حلب - حي الشعار"

    def test_dowry(self, judgment_record):
        assert judgment_record.dowry.immediate == "100000 ليرة سورية"
        assert judgment_record.dowry.deferred == "500000 ليرة سورية"
        assert judgment_record.dowry.status == "unpaid"

    def test_dates(self, judgment_record):
        assert judgment_record.marriage_date == "2020/05/10"
        assert judgment_record.decision_date == "15/11/2023"
        assert judgment_record.next_session_date is None

    def test_verdict_and_summary(self, judgment_record):
        assert judgment_record.verdict.startswith("حكمت المحكمة")
        assert len(judgment_record.verdict) <= 200
        assert judgment_record.document_type == "Marriage Registration"
        assert judgment_record.verdict_summary == (
            "Marriage registration approved and ordered to be recorded in civil registry"
        )

    def test_attendance_and_appeal(self, judgment_record):
        assert judgment_record.attendance_status == "وجاهي للمدعية وبمثابة الوجاهي للمدعى عليه"
        assert judgment_record.appealable is True

    def test_witnesses(self, judgment_record):
        assert judgment_record.witnesses == ["سامر يوسف", "رامي نادر"]

    def test_scoring(self, judgment_record):
        assert judgment_record.extraction_quality.score == 93  # 14 of 15
        assert judgment_record.confidence == "high"
        assert judgment_record.extraction_quality.issues == []
        assert needs_manual_review(judgment_record) is False

    def test_raw_text_echoed(self, judgment_record):
        assert judgment_record.raw_text == MARRIAGE_JUDGMENT
        assert judgment_record.document_category == "court_decision"

    def test_camel_case_serialization(self, judgment_record):
        data = judgment_record.model_dump(by_alias=True)
        assert data["caseNumber"] == "123/2023"
        assert data["extractionQuality"]["score"] == 93
        assert "rawText" in data

    def test_deterministic(self, judgment_record):
        again = extract_court_decision(MARRIAGE_JUDGMENT)
        assert again.model_dump(exclude={"extracted_at"}) == judgment_record.model_dump(
            exclude={"extracted_at"}
        )


class TestLowQuality:
    def test_issues_for_sparse_text(self):
        record = extract_court_decision(MINIMAL_TEXT)
        issues = record.extraction_quality.issues

        assert record.confidence == "low"
        assert issues[:2] == ["Many fields could not be extracted", "OCR quality may be poor"]
        assert "Plaintiff information not found" in issues
        assert "Defendant information not found" in issues
        assert "Decision date not found" in issues
        assert "Case number not found" not in issues
        assert needs_manual_review(record) is True

    def test_camscanner_advisory(self):
        record = extract_court_decision(MINIMAL_TEXT + "\nScanned with CamScanner")
        assert "Document appears to be a scan - OCR quality may vary" in (
            record.extraction_quality.issues
        )

    def test_empty_text(self):
        record = extract_court_decision("")
        assert record.extraction_quality.score == 0
        assert record.confidence == "low"
        assert record.witnesses == []


class TestCorruptedMarriageDate:
    @pytest.fixture
    def record(self):
        text = MARRIAGE_JUDGMENT.replace("2020/05/10", "2O2O/O5/1O")
        return extract_court_decision(text)

    def test_marker(self, record):
        assert record.marriage_date == f"{OCR_ERROR_MARKER} 2O2O/O5/1O]"

    def test_confidence_capped(self, record):
        assert record.extraction_quality.score == 93
        assert record.confidence == "medium"
        assert (
            "Marriage date appears corrupted by OCR - manual verification required"
            in record.extraction_quality.issues
        )

    def test_needs_review(self, record):
        assert needs_manual_review(record) is True


class TestKeywordFields:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("صدر الحكم بمثابة الوجاهي", "غيابي"),
            ("صدر الحكم كالوجاهي", "غيابي"),
            ("صدر الحكم وجاهيا", "حضوري"),
            ("صدر الحكم غيابيا", "غيابي"),
            ("وجاهي بحق الجهة المدعية", "حضوري"),
            ("صدر الحكم", None),
        ],
    )
    def test_attendance(self, text, expected):
        assert extract_attendance(text) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("حكما غير قابل للطعن", False),
            ("قرارا مبرما غير قابلا للطعن", False),
            ("حكما قابل للطعن بالاستئناف", True),
            ("صدر الحكم", None),
        ],
    )
    def test_appealability(self, text, expected):
        assert extract_appealability(text) is expected


class TestDowry:
    def test_immediate_only(self):
        dowry = first_match(DOWRY_RULES, "مهر معجله 5000 ليرة سورية")
        assert dowry.immediate == "5000 ليرة سورية"
        assert dowry.deferred is None
        assert dowry.status == "paid"

    def test_verdict_clause_form(self):
        text = (
            "1- تثبيت زواج المدعية على مهر معجله 200 ألف ليرة سورية "
            "ومؤجله مليون ليرة سورية باقية في ذمته"
        )
        dowry = first_match(DOWRY_RULES, text)
        assert dowry.immediate == "200 ألف ليرة سورية"
        assert dowry.deferred == "مليون ليرة سورية"
        assert dowry.status == "paid"

    def test_two_amounts_without_status_phrase_default_unpaid(self):
        dowry = first_match(
            DOWRY_RULES, "مهر معجله 100 ليرة سورية ومؤجله 200 ليرة سورية"
        )
        assert dowry.immediate == "100 ليرة سورية"
        assert dowry.deferred == "200 ليرة سورية"
        assert dowry.status == "unpaid"

    def test_two_amounts_with_paid_phrase(self):
        dowry = first_match(
            DOWRY_RULES, "مهر معجله 100 ليرة سورية مقبوضة ومؤجله 200 ليرة سورية"
        )
        assert dowry.status == "paid"

    def test_written_deferred_amount_defaults_paid(self):
        dowry = first_match(
            DOWRY_RULES, "مهر معجله 100 ليرة سورية ومؤجله الف ليرة سورية باقية"
        )
        assert dowry.deferred == "الف ليرة سورية"
        assert dowry.status == "paid"

    def test_immediate_only_unpaid_phrase_anywhere(self):
        dowry = first_match(DOWRY_RULES, "مهر معجله 5000 ليرة سورية غير مقبوضة")
        assert dowry.deferred is None
        assert dowry.status == "unpaid"


class TestExtractionSummary:
    def test_full_summary(self, judgment_record):
        assert get_extraction_summary(judgment_record) == (
            "Case 123/2023 | Decision 456/2023 | Type: Marriage Registration"
        )

    def test_fallback(self):
        assert get_extraction_summary(CourtDecisionRecord()) == "Court decision extracted"
