"""
Tests for keyword-priority document classification.
"""

from DocExtract.classifier import classify


class TestClassify:
    def test_court_decision(self):
        assert classify("حكم صادر عن المحكمة الشرعية") == "court_decision"

    def test_judge_marker(self):
        assert classify("القاضي السيد محمد") == "court_decision"

    def test_contract(self):
        assert classify("عقد ايجار سيارة بين الفريق الأول والفريق الثاني") == "contract"

    def test_clause_marker_only(self):
        assert classify("البند الأول: يلتزم الطرفان") == "contract"

    def test_judiciary_markers_take_priority(self):
        text = "المحكمة نظرت في عقد البيع المبرم بين الفريق الأول والفريق الثاني"
        assert classify(text) == "court_decision"

    def test_other(self):
        assert classify("فاتورة كهرباء شهر آذار") == "other"

    def test_empty(self):
        assert classify("") == "other"

    def test_markers_split_by_tatweel(self):
        assert classify("المـحـكـمـة") == "court_decision"
