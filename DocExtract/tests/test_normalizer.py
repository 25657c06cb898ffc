"""
Tests for the normalizer module: digits, whitespace, dates, rule tables.
"""

import re

from DocExtract.normalizer import (
    FieldRule,
    clean_text,
    extract_number,
    first_match,
    flatten_whitespace,
    group_one,
    normalize_date,
    normalize_digits,
    rule,
)

ARABIC_INDIC = "٠١٢٣٤٥٦٧٨٩"
EASTERN_ARABIC_INDIC = "۰۱۲۳۴۵۶۷۸۹"


class TestNormalizeDigits:
    def test_arabic_indic_digits(self):
        assert normalize_digits(ARABIC_INDIC) == "0123456789"

    def test_eastern_arabic_indic_digits(self):
        assert normalize_digits(EASTERN_ARABIC_INDIC) == "0123456789"

    def test_other_characters_untouched(self):
        text = "أساس رقم ABC xyz :/-"
        assert normalize_digits(text) == text

    def test_mixed_text(self):
        assert normalize_digits("قرار " + ARABIC_INDIC[4] + ARABIC_INDIC[5]) == "قرار 45"

    def test_idempotent(self):
        once = normalize_digits("رقم " + ARABIC_INDIC + " و " + EASTERN_ARABIC_INDIC)
        assert normalize_digits(once) == once

    def test_empty(self):
        assert normalize_digits("") == ""


class TestCleanText:
    def test_removes_bidi_marks(self):
        assert clean_text("\u200fمحكمة\u200e\u202b") == "محكمة"

    def test_removes_tatweel(self):
        assert clean_text("مـحـكـمـة") == "محكمة"

    def test_collapses_horizontal_whitespace(self):
        assert clean_text("الجهة   المدعية\t\t:  فاطمة") == "الجهة المدعية : فاطمة"

    def test_keeps_line_breaks(self):
        assert clean_text("سطر أول  \n  سطر ثان") == "سطر أول\nسطر ثان"

    def test_collapses_blank_lines(self):
        assert clean_text("أ\n\n\n\nب") == "أ\n\nب"

    def test_replaces_nbsp_and_crlf(self):
        assert clean_text("أ\u00a0ب\r\nج") == "أ ب\nج"

    def test_none_and_empty(self):
        assert clean_text(None) == ""
        assert clean_text("") == ""


class TestFlattenWhitespace:
    def test_flattens_lines(self):
        assert flatten_whitespace(" أ \n ب\t\nج ") == "أ ب ج"


class TestNormalizeDate:
    def test_dash_separators(self):
        assert normalize_date("12-05-2023") == "12/05/2023"

    def test_dot_separators(self):
        assert normalize_date("2023.9.13") == "2023/9/13"

    def test_arabic_digits_and_spaces(self):
        value = ARABIC_INDIC[1] + " / " + ARABIC_INDIC[2] + " / " + "2024"
        assert normalize_date(value) == "1/2/2024"


class TestExtractNumber:
    def test_normalized_capture(self):
        pattern = re.compile(r"رقم\s*(\d+)")
        assert extract_number(pattern, "رقم " + ARABIC_INDIC[4] + ARABIC_INDIC[5]) == "45"

    def test_no_match(self):
        assert extract_number(re.compile(r"رقم\s*(\d+)"), "لا يوجد") is None


class TestFieldRules:
    def test_group_one_strips(self):
        match = re.search(r"(\s*نص\s*)", "  نص  ")
        assert group_one(match) == "نص"

    def test_rule_compiles_pattern(self):
        field_rule = rule(r"رقم (\d+)")
        assert isinstance(field_rule, FieldRule)
        assert field_rule.apply("رقم 7") == "7"

    def test_validator_rejection_tries_next_match(self):
        field_rule = rule(r"(\d+)", lambda m: m.group(1) if int(m.group(1)) < 100 else None)
        assert field_rule.apply("500 ثم 42") == "42"

    def test_first_match_wins(self):
        rules = (rule(r"أ(\d)"), rule(r"ب(\d)"))
        assert first_match(rules, "ب2 أ1") == "1"

    def test_later_rule_used_when_earlier_fails(self):
        rules = (rule(r"أ(\d)"), rule(r"ب(\d)"))
        assert first_match(rules, "ب2") == "2"

    def test_no_rule_matches(self):
        assert first_match((rule(r"أ(\d)"),), "لا شيء") is None

    def test_empty_text(self):
        assert first_match((rule(r"(.*)"),), "") is None
