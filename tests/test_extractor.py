"""Tests for formula extraction from model replies."""

import pytest

from sheetcopilot.engine.extractor import MATCHERS, extract_formula


class TestExtractFormula:
    """Test the reply formats the model is known to use."""

    def test_bare_formula(self):
        assert extract_formula("=SUM(B2:B4)") == "=SUM(B2:B4)"

    def test_labelled_formula(self):
        assert extract_formula("Formula: =AVERAGE(C2:C20)") == "=AVERAGE(C2:C20)"

    def test_labelled_case_insensitive(self):
        assert extract_formula("FORMULA: =MAX(A:A)") == "=MAX(A:A)"

    def test_code_block(self):
        assert extract_formula("```\n=COUNTIF(A:A,\"x\")\n```") == '=COUNTIF(A:A,"x")'

    def test_inline_code(self):
        assert extract_formula("Try `=SUM(B2:B10)` in the cell") == "=SUM(B2:B10)"

    def test_inline_call_after_prose(self):
        assert extract_formula("Use this: =SUM(A2:A10)") == "=SUM(A2:A10)"

    def test_inline_call_stops_at_first_formula(self):
        assert extract_formula("Use =SUM(A1:A3) or =AVERAGE(B1:B3)") == "=SUM(A1:A3)"

    def test_inline_call_trailing_prose_dropped(self):
        assert extract_formula("Try =SUM(B2:B4), which totals the amounts.") == "=SUM(B2:B4)"

    def test_inline_call_keeps_nested_calls(self):
        reply = "Try =SUM(IF(A2:A4>0,A2:A4,0)) here"
        assert extract_formula(reply) == "=SUM(IF(A2:A4>0,A2:A4,0))"

    def test_inline_call_ignores_parentheses_in_strings(self):
        reply = 'Use =COUNTIF(A2:A10,"(blank)") for that'
        assert extract_formula(reply) == '=COUNTIF(A2:A10,"(blank)")'

    def test_unclosed_inline_call(self):
        assert extract_formula("Use =SUM(A2:A10 for the total") is None

    def test_formula_after_explanation_line(self):
        reply = "Here is the total of the Amount column:\n=SUM(B2:B4)"
        assert extract_formula(reply) == "=SUM(B2:B4)"

    def test_first_formula_line_wins(self):
        reply = "=SUM(B2:B4)\n=AVERAGE(B2:B4)"
        assert extract_formula(reply) == "=SUM(B2:B4)"

    def test_surrounding_whitespace_trimmed(self):
        assert extract_formula("   =A1+B1   ") == "=A1+B1"

    @pytest.mark.parametrize(
        "reply",
        [
            "I cannot do that",
            "",
            None,
            "The answer is 42",
            "Use the SUM function on column B",
        ],
    )
    def test_no_formula(self, reply):
        assert extract_formula(reply) is None

    def test_result_always_starts_with_equals(self):
        for reply in ["Formula: =A1", "`=B2`", "x\n=C3", "see =D4(1)"]:
            formula = extract_formula(reply)
            assert formula is not None
            assert formula.startswith("=")


class TestMatchers:
    """Test the individual matchers."""

    def test_matcher_order(self):
        assert [m.name for m in MATCHERS] == [
            "formula_line",
            "after_newline",
            "labelled",
            "code_block",
            "inline_code",
            "inline_call",
        ]

    def test_matcher_without_match_returns_none(self):
        labelled = next(m for m in MATCHERS if m.name == "labelled")
        assert labelled.extract("nothing here") is None

    def test_custom_matcher_list(self):
        inline_only = tuple(m for m in MATCHERS if m.name == "inline_code")
        assert extract_formula("Use this: =SUM(A2:A10)", inline_only) is None
        assert extract_formula("`=SUM(A2:A10)`", inline_only) == "=SUM(A2:A10)"
