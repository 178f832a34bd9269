"""Weaknesses and fix plan generation.

Every breakdown item scoring below the fix threshold (70% of its maximum
by default) yields one weakness sentence and one prioritized fix. The fix
plan is sorted high, medium, low and capped; ties keep breakdown order.
"""

import re
from dataclasses import dataclass
from enum import StrEnum

import structlog

from defaultanswer.config import get_settings
from defaultanswer.extraction.signals import ExtractedSignals
from defaultanswer.scoring.calculator import BreakdownItem
from defaultanswer.scoring.rubric import (
    ABOUT_LABEL,
    CONTACT_LABEL,
    FAQ_LABEL,
    H1_PRESENT_LABEL,
    H1_QUALITY_LABEL,
    H2_COUNT_LABEL,
    HEADINGS_LABEL,
    META_LABEL,
    PRICING_LABEL,
    SCHEMA_LABEL,
    TITLE_LABEL,
)

logger = structlog.get_logger(__name__)


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self]


PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


@dataclass(frozen=True)
class FixPlanItem:
    """One prioritized remediation."""

    priority: Priority
    action: str

    def to_dict(self) -> dict:
        return {"priority": self.priority.value, "action": self.action}

    @classmethod
    def from_dict(cls, data: dict) -> "FixPlanItem":
        return cls(priority=Priority(data["priority"]), action=data["action"])


WEAKNESS_MESSAGES = {
    TITLE_LABEL: (
        "AI lacks a clear definition of what your brand is: your title doesn't establish "
        "entity identity."
    ),
    META_LABEL: (
        "Missing meta description means LLMs have less context about your page's purpose."
    ),
    H1_QUALITY_LABEL: (
        "Your main heading doesn't clearly describe what you offer. LLMs need explicit "
        "category signals."
    ),
    H1_PRESENT_LABEL: (
        "No H1 heading found. This is a critical structural signal for LLMs."
    ),
    H2_COUNT_LABEL: (
        "Insufficient heading structure. LLMs rely on headings to understand page organization."
    ),
    HEADINGS_LABEL: (
        "Generic headings like 'Welcome' or 'Home' don't help LLMs understand your content."
    ),
    FAQ_LABEL: (
        "No FAQ section found. LLMs heavily weight Q&A-style content for recommendations."
    ),
    SCHEMA_LABEL: (
        "Missing structured data. Schema.org helps LLMs categorize your entity type."
    ),
    ABOUT_LABEL: (
        "No About page detected. LLMs prefer businesses with verifiable backgrounds."
    ),
    CONTACT_LABEL: (
        "No contact information found. This reduces trust signals for LLM recommendations."
    ),
    PRICING_LABEL: (
        "Pricing not visible. An unclear commercial offering weakens recommendation likelihood."
    ),
}


def _needs_fix(item: BreakdownItem, threshold: float) -> bool:
    return item.max_points > 0 and item.ratio < threshold


def get_weakness_message(item: BreakdownItem) -> str | None:
    return WEAKNESS_MESSAGES.get(item.label)


def get_fix_action(item: BreakdownItem, signals: ExtractedSignals) -> FixPlanItem | None:
    """Remediation for one under-scoring check, or None for unknown labels."""
    brand = signals.brand_guess
    label = item.label

    if label == TITLE_LABEL:
        return FixPlanItem(
            Priority.HIGH,
            f'Update your title tag to include "{brand}" and a clear product category '
            "description.",
        )
    if label == META_LABEL:
        return FixPlanItem(
            Priority.MEDIUM,
            "Add a meta description (150-160 chars) that clearly states what you offer and "
            "who it's for.",
        )
    if label == H1_QUALITY_LABEL:
        return FixPlanItem(
            Priority.HIGH,
            "Rewrite your H1 to be a clear, complete sentence that defines your product "
            "category.",
        )
    if label == H1_PRESENT_LABEL:
        return FixPlanItem(
            Priority.HIGH,
            "Add an H1 heading that clearly states what your product/service is in one "
            "sentence.",
        )
    if label == H2_COUNT_LABEL:
        return FixPlanItem(
            Priority.MEDIUM,
            "Add H2 sections for Features, Benefits, How It Works, and Use Cases.",
        )
    if label == HEADINGS_LABEL:
        return FixPlanItem(
            Priority.MEDIUM,
            "Replace generic headings with specific, descriptive text that explains each "
            "section's content.",
        )
    if label == FAQ_LABEL:
        # Partial answerability already earned: FAQ becomes a refinement
        if signals.has_direct_answer_block:
            return FixPlanItem(
                Priority.MEDIUM,
                "Convert key answers into a visible FAQ section for retrieval alignment "
                f"(e.g., 'What is {brand}?', 'Who is it for?', 'How does it work?').",
            )
        return FixPlanItem(
            Priority.HIGH,
            f"Add an FAQ section answering: 'What is {brand}?', 'Who is it for?', "
            "'How does it work?'",
        )
    if label == SCHEMA_LABEL:
        return FixPlanItem(
            Priority.MEDIUM,
            "Add Schema.org JSON-LD for Organization, Product, or SoftwareApplication as "
            "appropriate.",
        )
    if label == ABOUT_LABEL:
        return FixPlanItem(
            Priority.MEDIUM,
            "Create an About page explaining your company background, team, and mission.",
        )
    if label == CONTACT_LABEL:
        return FixPlanItem(
            Priority.LOW,
            "Add a Contact page or visible email address to establish business legitimacy.",
        )
    if label == PRICING_LABEL:
        return FixPlanItem(
            Priority.LOW,
            "Add a Pricing section or page with clear plan names and what users get.",
        )
    return None


def sort_by_priority(items: list[FixPlanItem]) -> list[FixPlanItem]:
    """Stable sort high, medium, low."""
    return sorted(items, key=lambda item: item.priority.rank)


def generate_weaknesses(breakdown: list[BreakdownItem] | tuple[BreakdownItem, ...]) -> list[str]:
    threshold = get_settings().fix_threshold_ratio
    weaknesses = []
    for item in breakdown:
        if _needs_fix(item, threshold):
            message = get_weakness_message(item)
            if message:
                weaknesses.append(message)
    return weaknesses


def generate_fix_plan(
    breakdown: list[BreakdownItem] | tuple[BreakdownItem, ...],
    signals: ExtractedSignals,
) -> list[FixPlanItem]:
    """
    Build the prioritized fix plan.

    Args:
        breakdown: Scored breakdown items
        signals: Extracted signals (brand and direct-answer flag shape the text)

    Returns:
        Fix items sorted by priority, capped at the configured limit
    """
    settings = get_settings()
    fixes = []
    for item in breakdown:
        if _needs_fix(item, settings.fix_threshold_ratio):
            fix = get_fix_action(item, signals)
            if fix:
                fixes.append(fix)

    plan = sort_by_priority(fixes)[: settings.fix_plan_limit]
    logger.debug("fix_plan_generated", url=signals.url, fixes=len(plan))
    return plan


# Intent keys: fixes that say the same thing in different words collapse
FAQ_ACTION_RE = re.compile(r"faq section", re.IGNORECASE)
ADD_H1_RE = re.compile(r"add an h1\b", re.IGNORECASE)
REWRITE_H1_RE = re.compile(r"rewrite your h1\b", re.IGNORECASE)

INTENT_KEYWORDS = (
    ("access", ("publicly accessible", "blocking automated")),
    ("h1_add", ("add an h1",)),
    ("h1_rewrite", ("rewrite your h1",)),
    ("title", ("title tag",)),
    ("meta", ("meta description",)),
    ("faq", ("faq",)),
    ("schema", ("schema.org",)),
    ("about", ("about page",)),
    ("contact", ("contact page", "email address")),
    ("pricing", ("pricing",)),
    ("h2", ("h2",)),
    ("headings", ("generic headings", "headings")),
)
NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def is_faq_fix(item: FixPlanItem) -> bool:
    return bool(FAQ_ACTION_RE.search(item.action))


def intent_key(action: str) -> str:
    """Stable identifier for what a fix asks for."""
    lowered = action.lower()
    for key, keywords in INTENT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return key
    return NON_ALNUM_RE.sub(" ", lowered).strip()


def dedupe_fix_plan_by_intent(items: list[FixPlanItem]) -> list[FixPlanItem]:
    """
    Collapse fixes with the same intent, keeping the first seen.

    Rewriting an H1 is moot when the plan also says to add one, so the
    rewrite is dropped in that case. The result is re-sorted by priority.
    """
    has_add_h1 = any(ADD_H1_RE.search(item.action) for item in items)

    seen: set[str] = set()
    deduped = []
    for item in items:
        if has_add_h1 and REWRITE_H1_RE.search(item.action):
            continue
        key = intent_key(item.action)
        if key in seen:
            continue
        seen.add(key)
        deduped.append(item)

    return sort_by_priority(deduped)


# Fix plans for analyses that never reached scoring
ACCESS_FIX_ACTION = "Ensure your site is publicly accessible and not blocking automated requests."

BLOCKED_FIX_PLAN = (
    FixPlanItem(Priority.HIGH, ACCESS_FIX_ACTION),
    FixPlanItem(
        Priority.MEDIUM,
        "Allow the homepage HTML to be fetched without authentication, bot challenges, or "
        "rate limits.",
    ),
)

ERROR_FIX_PLAN = (
    FixPlanItem(Priority.HIGH, ACCESS_FIX_ACTION),
    FixPlanItem(
        Priority.MEDIUM,
        "Check that your homepage loads without requiring JavaScript to render core content.",
    ),
)

SNAPSHOT_INCOMPLETE_FIX_PLAN = (
    FixPlanItem(
        Priority.HIGH, "Make core identity + FAQ answers visible in server-rendered HTML."
    ),
    FixPlanItem(Priority.MEDIUM, "Ensure title/meta/H1 exist in initial HTML."),
    FixPlanItem(Priority.LOW, "Add schema JSON-LD to initial HTML."),
)


def is_access_fix(item: FixPlanItem) -> bool:
    return item.action.strip() == ACCESS_FIX_ACTION
