"""Tests for weakness and fix plan generation."""

from defaultanswer.extraction.signals import ExtractedSignals
from defaultanswer.fixes.generator import (
    ACCESS_FIX_ACTION,
    FixPlanItem,
    Priority,
    dedupe_fix_plan_by_intent,
    generate_fix_plan,
    generate_weaknesses,
    get_fix_action,
    intent_key,
    is_faq_fix,
    sort_by_priority,
)
from defaultanswer.scoring.calculator import BreakdownItem, calculate_score
from defaultanswer.scoring.rubric import FAQ_LABEL, META_LABEL


def _signals(**overrides) -> ExtractedSignals:
    return ExtractedSignals(
        url="https://acme.com", domain="acme.com", brand_guess="Acme", **overrides
    )


class TestGenerateFixPlan:
    """Tests for generate_fix_plan."""

    def test_acme_plan(self, acme_signals: ExtractedSignals) -> None:
        breakdown = calculate_score(acme_signals).breakdown
        plan = generate_fix_plan(breakdown, acme_signals)

        assert [item.priority for item in plan] == [
            Priority.MEDIUM,
            Priority.MEDIUM,
            Priority.MEDIUM,
            Priority.LOW,
        ]
        assert plan[0].action.startswith("Add a meta description")
        assert plan[1].action.startswith("Add H2 sections")
        assert plan[2].action.startswith("Add Schema.org JSON-LD")
        assert plan[3].action.startswith("Add a Pricing section")

    def test_perfect_page_has_no_fixes(self, brightside_signals: ExtractedSignals) -> None:
        breakdown = calculate_score(brightside_signals).breakdown
        assert generate_fix_plan(breakdown, brightside_signals) == []

    def test_capped_at_limit(self) -> None:
        signals = _signals()
        plan = generate_fix_plan(calculate_score(signals).breakdown, signals)

        assert len(plan) == 7
        assert plan == sort_by_priority(plan)

    def test_limit_from_settings(self, monkeypatch) -> None:
        from defaultanswer.config import get_settings

        monkeypatch.setenv("FIX_PLAN_LIMIT", "2")
        get_settings.cache_clear()
        signals = _signals()

        assert len(generate_fix_plan(calculate_score(signals).breakdown, signals)) == 2


class TestGetFixAction:
    """Tests for per-label fix text."""

    def _faq_item(self) -> BreakdownItem:
        return BreakdownItem(
            label=FAQ_LABEL, points=0, max_points=10, reason="", category="Answerability Signals"
        )

    def test_faq_is_high_without_direct_answers(self) -> None:
        fix = get_fix_action(self._faq_item(), _signals())

        assert fix.priority == Priority.HIGH
        assert "'What is Acme?'" in fix.action

    def test_faq_is_medium_with_direct_answers(self) -> None:
        fix = get_fix_action(self._faq_item(), _signals(has_direct_answer_block=True))

        assert fix.priority == Priority.MEDIUM
        assert fix.action.startswith("Convert key answers into a visible FAQ section")

    def test_unknown_label(self) -> None:
        item = BreakdownItem(label="Word count", points=0, max_points=5, reason="", category="X")
        assert get_fix_action(item, _signals()) is None


class TestGenerateWeaknesses:
    """Tests for generate_weaknesses."""

    def test_acme(self, acme_signals: ExtractedSignals) -> None:
        weaknesses = generate_weaknesses(calculate_score(acme_signals).breakdown)

        assert len(weaknesses) == 4
        assert weaknesses[0].startswith("Missing meta description")

    def test_threshold_is_exclusive(self) -> None:
        item = BreakdownItem(label=META_LABEL, points=7, max_points=10, reason="", category="E")
        assert generate_weaknesses([item]) == []


class TestDedupeByIntent:
    """Tests for intent-based de-duplication."""

    def test_intent_keys(self) -> None:
        assert intent_key(ACCESS_FIX_ACTION) == "access"
        assert intent_key("Add an H1 heading") == "h1_add"
        assert intent_key("Rewrite your H1") == "h1_rewrite"
        assert intent_key("Add a Contact page") == "contact"
        assert intent_key("Do  something, else!") == "do something else"

    def test_keeps_first_of_each_intent(self) -> None:
        items = [
            FixPlanItem(Priority.MEDIUM, "Add an FAQ section answering common questions"),
            FixPlanItem(Priority.HIGH, "Convert answers into a visible FAQ section"),
            FixPlanItem(Priority.LOW, "Add a Pricing section"),
        ]
        deduped = dedupe_fix_plan_by_intent(items)

        assert deduped == [items[0], items[2]]

    def test_add_h1_supersedes_rewrite(self) -> None:
        items = [
            FixPlanItem(Priority.HIGH, "Rewrite your H1 to be a clear, complete sentence."),
            FixPlanItem(Priority.HIGH, "Add an H1 heading that clearly states what you do."),
        ]
        assert dedupe_fix_plan_by_intent(items) == [items[1]]

    def test_result_sorted(self) -> None:
        items = [
            FixPlanItem(Priority.LOW, "Add a Pricing section"),
            FixPlanItem(Priority.HIGH, "Update your title tag"),
        ]
        assert [i.priority for i in dedupe_fix_plan_by_intent(items)] == [
            Priority.HIGH,
            Priority.LOW,
        ]

    def test_is_faq_fix(self) -> None:
        assert is_faq_fix(FixPlanItem(Priority.HIGH, "Add an FAQ section"))
        assert not is_faq_fix(FixPlanItem(Priority.HIGH, "Link your FAQ page"))


class TestFixPlanItem:
    """Tests for FixPlanItem."""

    def test_dict(self) -> None:
        item = FixPlanItem(Priority.LOW, "Add a Pricing section")

        assert item.to_dict() == {"priority": "low", "action": "Add a Pricing section"}
        assert FixPlanItem.from_dict(item.to_dict()) == item
