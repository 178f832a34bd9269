"""Tests for the category scorer."""

import pytest

from defaultanswer.extraction.signals import ExtractedSignals
from defaultanswer.scoring.calculator import BreakdownItem, CategoryScorer, calculate_score
from defaultanswer.scoring.rubric import (
    FAQ_LABEL,
    H1_QUALITY_LABEL,
    HEADINGS_LABEL,
    Category,
)


def _signals(**overrides) -> ExtractedSignals:
    return ExtractedSignals(
        url="https://acme.com", domain="acme.com", brand_guess="Acme", **overrides
    )


def _points(result, label: str) -> int:
    return next(item.points for item in result.breakdown if item.label == label)


class TestBreakdownItem:
    """Tests for BreakdownItem."""

    def test_points_bounded_by_max(self) -> None:
        with pytest.raises(ValueError):
            BreakdownItem(label="x", points=6, max_points=5, reason="", category="Other")

    def test_ratio(self) -> None:
        item = BreakdownItem(label="x", points=2, max_points=5, reason="", category="Other")
        assert item.ratio == 0.4

    def test_dict_uses_max_key(self) -> None:
        item = BreakdownItem(label="x", points=2, max_points=5, reason="r", category="Other")

        assert item.to_dict()["max"] == 5
        assert BreakdownItem.from_dict(item.to_dict()) == item


class TestEndToEndExample:
    """The Acme Payroll homepage scores category by category."""

    def test_category_totals(self, acme_signals: ExtractedSignals) -> None:
        result = calculate_score(acme_signals)
        totals = result.category_totals()

        assert totals[Category.ENTITY_CLARITY.value] == (20, 25)
        assert totals[Category.STRUCTURAL_COMPREHENSION.value] == (17, 20)
        assert totals[Category.ANSWERABILITY_SIGNALS.value] == (10, 20)
        assert totals[Category.TRUST_LEGITIMACY.value] == (20, 20)
        assert totals[Category.COMMERCIAL_CLARITY.value] == (0, 15)
        assert result.score == 67

    def test_perfect_page(self, brightside_signals: ExtractedSignals) -> None:
        assert calculate_score(brightside_signals).score == 100

    def test_breakdown_order_and_total(self, acme_signals: ExtractedSignals) -> None:
        result = CategoryScorer().score(acme_signals)
        categories = list(dict.fromkeys(item.category for item in result.breakdown))

        assert len(result.breakdown) == 11
        assert categories == [
            "Entity Clarity",
            "Structural Comprehension",
            "Answerability Signals",
            "Trust & Legitimacy",
            "Commercial Clarity",
        ]
        assert result.score == sum(item.points for item in result.breakdown)


class TestEntityClarity:
    """Tests for title and H1 checks."""

    @pytest.mark.parametrize(
        ("h1", "expected"),
        [
            ("Welcome", 2),
            ("Payroll", 4),
            ("Startup payroll", 7),
            ("Payroll for startups", 10),
        ],
    )
    def test_h1_quality(self, h1: str, expected: int) -> None:
        result = calculate_score(_signals(h1s=(h1,)))
        assert _points(result, H1_QUALITY_LABEL) == expected

    def test_title_without_brand(self) -> None:
        result = calculate_score(_signals(title="Payroll software"))
        assert result.breakdown[0].points == 5

    def test_missing_title(self) -> None:
        result = calculate_score(_signals())
        assert result.breakdown[0].reason == "No title tag found"


class TestStructure:
    """Tests for heading checks."""

    def test_mostly_generic_headings(self) -> None:
        result = calculate_score(_signals(h1s=("Welcome",), h2s=("Features", "Learn more")))
        assert _points(result, HEADINGS_LABEL) == 2

    def test_some_generic_headings(self) -> None:
        h2s = ("Features", "Payroll in minutes", "Tax filing built in")
        result = calculate_score(_signals(h1s=("Payroll for startups",), h2s=h2s))
        assert _points(result, HEADINGS_LABEL) == 6

    def test_no_headings(self) -> None:
        result = calculate_score(_signals())
        assert _points(result, HEADINGS_LABEL) == 0


class TestAnswerability:
    """FAQ partial credit never stacks."""

    def test_explicit_faq_wins(self) -> None:
        result = calculate_score(
            _signals(has_faq=True, has_direct_answer_block=True, has_indirect_faq=True)
        )
        assert _points(result, FAQ_LABEL) == 10

    def test_direct_answer_before_indirect(self) -> None:
        result = calculate_score(_signals(has_direct_answer_block=True, has_indirect_faq=True))
        assert _points(result, FAQ_LABEL) == 6

    def test_indirect_only(self) -> None:
        result = calculate_score(_signals(has_indirect_faq=True))
        assert _points(result, FAQ_LABEL) == 4


class TestScoreResult:
    """Tests for ScoreResult rendering."""

    def test_to_dict_categories(self, acme_signals: ExtractedSignals) -> None:
        data = calculate_score(acme_signals).to_dict()

        assert data["score"] == 67
        assert data["categories"]["Trust & Legitimacy"] == {"points": 20, "max": 20}

    def test_show_the_math(self, acme_signals: ExtractedSignals) -> None:
        text = calculate_score(acme_signals).show_the_math()

        assert "Entity Clarity: 20/25" in text
        assert "TOTAL: 67/100" in text
