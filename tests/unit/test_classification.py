"""Tests for grading marker classification."""

import pytest

from dojo.services.classification import ClassificationResult, classify


class TestClassify:
    """Tests for classify()."""

    def test_no_markers_passes_text_through(self):
        raw = "  What is a decorator?  "
        result = classify(raw)

        assert result == ClassificationResult(text=raw, passed=False, failed=False)
        assert not result.graded

    def test_fail_marker_stripped(self):
        result = classify("[FAIL] Wrong, recruit.")

        assert result.failed
        assert not result.passed
        assert result.text == "Wrong, recruit."

    def test_pass_marker_stripped(self):
        result = classify("Correct.   [PASS]\n")

        assert result.passed
        assert not result.failed
        assert result.text == "Correct."

    def test_marker_mid_sentence_collapses_whitespace(self):
        result = classify("Fine [PASS] next question: what is a set?")

        assert result.text == "Fine next question: what is a set?"

    def test_both_markers_checked_independently(self):
        result = classify("[PASS] Right idea. [FAIL] Wrong syntax.")

        assert result.passed
        assert result.failed
        assert "[" not in result.text

    @pytest.mark.parametrize("raw", ["[pass] lower case", "PASS without brackets", "[ FAIL ]"])
    def test_only_exact_markers_count(self, raw):
        result = classify(raw)

        assert not result.graded
        assert result.text == raw

    def test_repeated_marker_counts_once(self):
        result = classify("[FAIL] no [FAIL] still no")

        assert result.failed
        assert result.text == "no still no"
