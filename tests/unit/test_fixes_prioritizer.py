"""Tests for dominant fix selection and the lead decision."""

from defaultanswer.extraction.signals import ExtractedSignals
from defaultanswer.fixes.generator import (
    ACCESS_FIX_ACTION,
    BLOCKED_FIX_PLAN,
    FixPlanItem,
    Priority,
    generate_fix_plan,
)
from defaultanswer.fixes.prioritizer import (
    FixDecisionKind,
    biggest_gap_category,
    decide_what_to_fix_first,
    is_blocked_breakdown,
    map_reasoning_signal_to_category,
    select_dominant_fix,
    select_top_fix,
    should_allow_faq_as_top_fix,
    weight_gap_with_negative_reasoning,
)
from defaultanswer.scoring.calculator import BreakdownItem, calculate_score
from defaultanswer.scoring.readiness import ReadinessState
from defaultanswer.scoring.reasoning import Impact, ReasoningBullet, generate_reasoning

FAQ_FIX = FixPlanItem(
    Priority.HIGH, "Add an FAQ section answering: 'What is Acme?', 'Who is it for?'"
)
SCHEMA_FIX = FixPlanItem(Priority.MEDIUM, "Add Schema.org JSON-LD for Organization.")
PRICING_FIX = FixPlanItem(Priority.LOW, "Add a Pricing section or page.")


def _signals(**overrides) -> ExtractedSignals:
    return ExtractedSignals(
        url="https://acme.com", domain="acme.com", brand_guess="Acme", **overrides
    )


def _item(points: int, max_points: int, category: str, reason: str = "") -> BreakdownItem:
    return BreakdownItem(
        label=f"{category} check",
        points=points,
        max_points=max_points,
        reason=reason,
        category=category,
    )


class TestBiggestGapCategory:
    """Tests for biggest_gap_category."""

    def test_lowest_ratio(self) -> None:
        breakdown = [
            _item(20, 25, "Entity Clarity"),
            _item(0, 15, "Commercial Clarity"),
            _item(10, 20, "Answerability Signals"),
        ]
        assert biggest_gap_category(breakdown) == "Commercial Clarity"

    def test_tie_goes_to_first(self) -> None:
        breakdown = [_item(0, 10, "Trust & Legitimacy"), _item(0, 15, "Commercial Clarity")]
        assert biggest_gap_category(breakdown) == "Trust & Legitimacy"

    def test_error_items_ignored(self) -> None:
        assert biggest_gap_category([_item(0, 100, "Error")]) == "Other"

    def test_empty(self) -> None:
        assert biggest_gap_category([]) == "Other"


class TestReasoningWeighting:
    """Tests for reasoning-weighted gap selection."""

    def test_signal_mapping(self) -> None:
        assert map_reasoning_signal_to_category("Structured Data") == "Answerability Signals"
        assert map_reasoning_signal_to_category("Content Structure") == (
            "Structural Comprehension"
        )
        assert map_reasoning_signal_to_category("Trust Signals") == "Trust & Legitimacy"
        assert map_reasoning_signal_to_category("Mood") == "Other"

    def test_gap_confirmed_by_reasoning(self) -> None:
        reasoning = [
            ReasoningBullet("Content Structure", "", Impact.NEGATIVE),
            ReasoningBullet("Commercial Clarity", "", Impact.NEGATIVE),
        ]
        assert weight_gap_with_negative_reasoning("Commercial Clarity", reasoning) == (
            "Commercial Clarity"
        )

    def test_reasoning_overrides_gap(self) -> None:
        reasoning = [
            ReasoningBullet("Entity Clarity", "", Impact.POSITIVE),
            ReasoningBullet("Trust Signals", "", Impact.NEGATIVE),
        ]
        assert weight_gap_with_negative_reasoning("Commercial Clarity", reasoning) == (
            "Trust & Legitimacy"
        )

    def test_no_negative_reasoning_keeps_gap(self) -> None:
        assert weight_gap_with_negative_reasoning("Commercial Clarity", []) == (
            "Commercial Clarity"
        )


class TestSelectDominantFix:
    """Tests for select_dominant_fix."""

    def test_empty_plan(self) -> None:
        assert select_dominant_fix([], [], []) is None

    def test_blocked_admits_only_access_fix(self) -> None:
        breakdown = [
            _item(0, 100, "Error", "Could not fetch or analyze the page (HTTP 403)"),
        ]
        assert is_blocked_breakdown(breakdown)
        assert select_dominant_fix(list(BLOCKED_FIX_PLAN), breakdown, []).action == (
            ACCESS_FIX_ACTION
        )

    def test_blocked_without_access_fix(self) -> None:
        breakdown = [_item(0, 100, "Error", "fetch failed")]
        assert select_dominant_fix([SCHEMA_FIX], breakdown, []) is None

    def test_prefers_target_category_within_level(self) -> None:
        breakdown = [_item(10, 10, "Entity Clarity"), _item(0, 20, "Answerability Signals")]
        plan = [FixPlanItem(Priority.MEDIUM, "Add a meta description."), SCHEMA_FIX]

        assert select_dominant_fix(plan, breakdown, []) == SCHEMA_FIX

    def test_higher_level_wins_over_target(self) -> None:
        breakdown = [_item(10, 10, "Entity Clarity"), _item(0, 15, "Commercial Clarity")]
        plan = [FAQ_FIX, PRICING_FIX]

        assert select_dominant_fix(plan, breakdown, []) == FAQ_FIX

    def test_acme(self, acme_signals: ExtractedSignals) -> None:
        breakdown = calculate_score(acme_signals).breakdown
        plan = generate_fix_plan(breakdown, acme_signals)
        reasoning = generate_reasoning(acme_signals, breakdown)

        dominant = select_dominant_fix(plan, breakdown, reasoning)
        assert dominant.action.startswith("Add a meta description")


class TestSelectTopFix:
    """Tests for FAQ gating in select_top_fix."""

    def test_faq_allowed_below_gate(self) -> None:
        assert should_allow_faq_as_top_fix(60, _signals(has_faq=True))
        assert select_top_fix([FAQ_FIX, SCHEMA_FIX], 60, _signals(has_faq=True)) == FAQ_FIX

    def test_faq_blocked_for_high_scorer_with_faq_signals(self) -> None:
        signals = _signals(has_structured_data=True)
        assert not should_allow_faq_as_top_fix(80, signals)
        assert select_top_fix([FAQ_FIX, SCHEMA_FIX], 80, signals) == SCHEMA_FIX

    def test_faq_allowed_for_high_scorer_missing_everything(self) -> None:
        assert should_allow_faq_as_top_fix(80, _signals())

    def test_how_it_works_heading_blocks_faq(self) -> None:
        assert not should_allow_faq_as_top_fix(80, _signals(h2s=("How it works",)))

    def test_only_faq_fixes_and_disallowed(self) -> None:
        assert select_top_fix([FAQ_FIX], 60, _signals(), disallow_faq=True) is None


class TestDecideWhatToFixFirst:
    """Tests for decide_what_to_fix_first."""

    def test_empty_plan(self) -> None:
        decision = decide_what_to_fix_first(
            [], 100, ReadinessState.STRONG_DEFAULT_CANDIDATE, _signals()
        )
        assert decision.kind == FixDecisionKind.NONE

    def test_unusable_analysis_leads_with_access(self) -> None:
        decision = decide_what_to_fix_first(
            list(BLOCKED_FIX_PLAN), -1, ReadinessState.NOT_A_DEFAULT_CANDIDATE, _signals()
        )

        assert decision.kind == FixDecisionKind.TOP_FIX
        assert decision.fix.action == ACCESS_FIX_ACTION

    def test_unusable_analysis_without_access_fix(self) -> None:
        decision = decide_what_to_fix_first(
            [SCHEMA_FIX], -2, ReadinessState.NOT_A_DEFAULT_CANDIDATE, _signals()
        )
        assert decision.kind == FixDecisionKind.NONE

    def test_strong_site_without_high_fixes(self) -> None:
        decision = decide_what_to_fix_first(
            [SCHEMA_FIX, PRICING_FIX], 85, ReadinessState.STRONG_DEFAULT_CANDIDATE, _signals()
        )

        assert decision.kind == FixDecisionKind.NO_CRITICAL_FIXES
        assert decision.fix is None

    def test_faq_downgraded_to_retrieval_optimization(self) -> None:
        signals = _signals(has_structured_data=True, has_direct_answer_block=True)
        decision = decide_what_to_fix_first(
            [FAQ_FIX, PRICING_FIX], 85, ReadinessState.STRONG_DEFAULT_CANDIDATE, signals
        )

        assert decision.kind == FixDecisionKind.NO_CRITICAL_FIXES
        assert decision.retrieval_optimization is True
        assert decision.downgraded_faq is True

    def test_downgrade_threshold_from_argument(self) -> None:
        signals = _signals(has_structured_data=True, has_direct_answer_block=True)
        decision = decide_what_to_fix_first(
            [FAQ_FIX, PRICING_FIX],
            78,
            ReadinessState.STRONG_DEFAULT_CANDIDATE,
            signals,
            no_critical_score=90,
        )

        assert decision.kind == FixDecisionKind.TOP_FIX
        assert decision.fix == PRICING_FIX

    def test_emerging_site_gets_top_fix(self, acme_signals: ExtractedSignals) -> None:
        breakdown = calculate_score(acme_signals).breakdown
        plan = generate_fix_plan(breakdown, acme_signals)
        decision = decide_what_to_fix_first(
            plan, 67, ReadinessState.EMERGING_OPTION, acme_signals
        )

        assert decision.kind == FixDecisionKind.TOP_FIX
        assert decision.fix.action.startswith("Add a meta description")
        assert decision.to_dict()["fix"]["priority"] == "medium"
