"""Fix prioritization.

Two selectors share the same deduplicated fix plan:

- select_dominant_fix picks the single fix that addresses the biggest
  gap, reweighted by what the negative reasoning complains about.
- decide_what_to_fix_first decides whether a top fix should be shown at
  all, keeping FAQ advice from dominating sites that already answer
  questions well.
"""

from dataclasses import dataclass
from enum import StrEnum

import structlog

from defaultanswer.config import get_settings
from defaultanswer.extraction.patterns import looks_blocked
from defaultanswer.extraction.signals import ExtractedSignals
from defaultanswer.fixes.generator import (
    FixPlanItem,
    Priority,
    dedupe_fix_plan_by_intent,
    is_access_fix,
    is_faq_fix,
    sort_by_priority,
)
from defaultanswer.fixes.mapping import map_fix_to_category
from defaultanswer.scoring.calculator import BreakdownItem
from defaultanswer.scoring.readiness import ReadinessState
from defaultanswer.scoring.reasoning import ReasoningBullet
from defaultanswer.scoring.rubric import Category

logger = structlog.get_logger(__name__)

OTHER_CATEGORY = "Other"
RETRIEVAL_OPTIMIZATION_PREFIX = "[Retrieval Optimization] "
FAQ_GATE_SCORE = 75

# Reasoning signal keywords; "structured data" must win over "structure"
REASONING_SIGNAL_CATEGORIES = (
    ("entity", Category.ENTITY_CLARITY),
    ("structured data", Category.ANSWERABILITY_SIGNALS),
    ("structure", Category.STRUCTURAL_COMPREHENSION),
    ("answer", Category.ANSWERABILITY_SIGNALS),
    ("trust", Category.TRUST_LEGITIMACY),
    ("commercial", Category.COMMERCIAL_CLARITY),
)


def _find_access_fix(fix_plan: list[FixPlanItem]) -> FixPlanItem | None:
    return next((item for item in fix_plan if is_access_fix(item)), None)


def is_blocked_breakdown(breakdown: list[BreakdownItem] | tuple[BreakdownItem, ...]) -> bool:
    """True when an Error item says the page could not be retrieved."""
    return any(
        item.category == Category.ERROR and looks_blocked(item.reason) for item in breakdown
    )


def biggest_gap_category(breakdown: list[BreakdownItem] | tuple[BreakdownItem, ...]) -> str:
    """
    Category with the lowest points/max ratio.

    Error items are ignored. Ties go to the category that appears first
    in the breakdown. Returns "Other" when nothing is scorable.
    """
    totals: dict[str, list[int]] = {}
    for item in breakdown:
        category = item.category or OTHER_CATEGORY
        if category == Category.ERROR:
            continue
        bucket = totals.setdefault(category, [0, 0])
        bucket[0] += item.points
        bucket[1] += item.max_points

    scorable = [(category, pts / max_pts) for category, (pts, max_pts) in totals.items() if max_pts]
    if not scorable:
        return OTHER_CATEGORY
    return min(scorable, key=lambda entry: entry[1])[0]


def map_reasoning_signal_to_category(signal: str) -> str:
    lowered = (signal or "").lower()
    for keyword, category in REASONING_SIGNAL_CATEGORIES:
        if keyword in lowered:
            return category.value
    return OTHER_CATEGORY


def weight_gap_with_negative_reasoning(gap: str, reasoning: list[ReasoningBullet]) -> str:
    """
    Prefer a category the negative reasoning complains about.

    The gap stands if negative reasoning also points at it; otherwise the
    first negatively-referenced category wins.
    """
    if not gap:
        return OTHER_CATEGORY
    negative = list(
        dict.fromkeys(
            map_reasoning_signal_to_category(bullet.signal)
            for bullet in reasoning
            if bullet.is_negative
        )
    )
    if gap in negative:
        return gap
    for category in negative:
        if category != OTHER_CATEGORY:
            return category
    return gap


def select_dominant_fix(
    fix_plan: list[FixPlanItem],
    breakdown: list[BreakdownItem] | tuple[BreakdownItem, ...],
    reasoning: list[ReasoningBullet],
) -> FixPlanItem | None:
    """
    Pick the one fix that matters most.

    A blocked analysis admits only the accessibility fix. Otherwise the
    fix plan is searched high, medium, low; within each level a fix for
    the weighted gap category is preferred over the first fix at that
    level.

    Args:
        fix_plan: Deduplicated fix plan
        breakdown: Scored breakdown items
        reasoning: Reasoning bullets for the same analysis

    Returns:
        The dominant fix, or None
    """
    if not fix_plan:
        return None

    if is_blocked_breakdown(breakdown):
        return _find_access_fix(fix_plan)

    target = weight_gap_with_negative_reasoning(biggest_gap_category(breakdown), reasoning)

    for priority in (Priority.HIGH, Priority.MEDIUM, Priority.LOW):
        level = [item for item in fix_plan if item.priority == priority]
        for item in level:
            category = map_fix_to_category(item.action)
            if category is not None and category.value == target:
                return item
        if level:
            return level[0]

    return fix_plan[0]


class FixDecisionKind(StrEnum):
    NONE = "none"
    TOP_FIX = "top_fix"
    NO_CRITICAL_FIXES = "no_critical_fixes"


@dataclass(frozen=True)
class FixDecision:
    """What the report should lead with."""

    kind: FixDecisionKind
    fix: FixPlanItem | None = None
    retrieval_optimization: bool = False
    downgraded_faq: bool = False

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "fix": self.fix.to_dict() if self.fix else None,
            "retrieval_optimization": self.retrieval_optimization,
            "downgraded_faq": self.downgraded_faq,
        }


def should_allow_faq_as_top_fix(score: int, signals: ExtractedSignals) -> bool:
    """FAQ may lead on high scorers only when FAQ, schema and how-it-works are all missing."""
    if score < FAQ_GATE_SCORE:
        return True
    return (
        not signals.has_faq
        and not signals.has_structured_data
        and not signals.has_how_it_works
    )


def select_top_fix(
    fix_plan: list[FixPlanItem],
    score: int,
    signals: ExtractedSignals,
    disallow_faq: bool = False,
) -> FixPlanItem | None:
    if not fix_plan:
        return None

    ordered = sort_by_priority(fix_plan)
    first = ordered[0]
    if not is_faq_fix(first):
        return first

    if disallow_faq or not should_allow_faq_as_top_fix(score, signals):
        return next((item for item in ordered if not is_faq_fix(item)), None)
    return first


def _should_downgrade_faq(
    score: int, readiness: ReadinessState, signals: ExtractedSignals, threshold: int
) -> bool:
    if readiness != ReadinessState.STRONG_DEFAULT_CANDIDATE or score < threshold:
        return False
    has_trust_or_entity = signals.has_structured_data or (
        signals.has_about and signals.has_contact_signals
    )
    has_faq_signals = signals.has_indirect_faq or signals.has_direct_answer_block
    return has_trust_or_entity and has_faq_signals


def _downgrade_faq(fix_plan: list[FixPlanItem]) -> tuple[list[FixPlanItem], bool]:
    downgraded = False
    adjusted = []
    for item in fix_plan:
        if not is_faq_fix(item):
            adjusted.append(item)
            continue
        downgraded = downgraded or item.priority == Priority.HIGH
        action = item.action
        if "Retrieval Optimization" not in action:
            action = f"{RETRIEVAL_OPTIMIZATION_PREFIX}{action}"
        adjusted.append(FixPlanItem(Priority.MEDIUM, action))
    return adjusted, downgraded


def decide_what_to_fix_first(
    fix_plan: list[FixPlanItem],
    score: int,
    readiness: ReadinessState,
    signals: ExtractedSignals,
    no_critical_score: int | None = None,
) -> FixDecision:
    """
    Decide the report's lead recommendation.

    Args:
        fix_plan: Generated fix plan (deduplicated here)
        score: Total score (negative for unusable snapshots)
        readiness: Readiness state of the same analysis
        signals: Extracted signals
        no_critical_score: Score at which a strong site may show "no critical fixes"
            (defaults to the configured value)

    Returns:
        FixDecision
    """
    if not fix_plan:
        return FixDecision(FixDecisionKind.NONE)

    if no_critical_score is None:
        no_critical_score = get_settings().no_critical_fix_score

    if score < 0:
        access = _find_access_fix(fix_plan)
        if access:
            return FixDecision(FixDecisionKind.TOP_FIX, fix=access)
        return FixDecision(FixDecisionKind.NONE)

    deduped = dedupe_fix_plan_by_intent(fix_plan)
    downgrade = _should_downgrade_faq(score, readiness, signals, no_critical_score)
    adjusted, downgraded_faq = _downgrade_faq(deduped) if downgrade else (deduped, False)

    allow_faq = should_allow_faq_as_top_fix(score, signals)
    has_critical_high = any(
        item.priority == Priority.HIGH and (allow_faq or not is_faq_fix(item)) for item in adjusted
    )

    if downgrade and not has_critical_high:
        decision = FixDecision(
            FixDecisionKind.NO_CRITICAL_FIXES, retrieval_optimization=True, downgraded_faq=True
        )
    elif (
        score >= no_critical_score
        and readiness == ReadinessState.STRONG_DEFAULT_CANDIDATE
        and not has_critical_high
    ):
        decision = FixDecision(
            FixDecisionKind.NO_CRITICAL_FIXES,
            retrieval_optimization=downgrade,
            downgraded_faq=downgraded_faq,
        )
    else:
        top = select_top_fix(adjusted, score, signals, disallow_faq=downgrade)
        if top is None:
            decision = FixDecision(FixDecisionKind.NONE)
        else:
            decision = FixDecision(
                FixDecisionKind.TOP_FIX,
                fix=top,
                retrieval_optimization=downgrade,
                downgraded_faq=downgraded_faq,
            )

    logger.debug(
        "fix_decision_made",
        score=score,
        readiness=readiness.value,
        kind=decision.kind.value,
    )
    return decision
