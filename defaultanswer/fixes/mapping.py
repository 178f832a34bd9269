"""Keyword mapping from fix text and check labels to categories and remediation.

One ordered table serves both the fix prioritizer (which category does
this fix address?) and the comparative diff (what should be done about
this gap?). The first rule whose keyword appears in the text wins.
"""

from dataclasses import dataclass

from defaultanswer.scoring.rubric import Category

# Sentinel for "no remediation text available"
NO_ACTION = "—"


@dataclass(frozen=True)
class KeywordRule:
    """Keyword that ties free text to a category and optional remediation."""

    keyword: str
    category: Category
    suggested_action: str | None = None


KEYWORD_RULES = (
    KeywordRule(
        "faq",
        Category.ANSWERABILITY_SIGNALS,
        "Add an FAQ section with 5-7 Q&A blocks on the homepage or a linked /faq page.",
    ),
    KeywordRule(
        "schema",
        Category.ANSWERABILITY_SIGNALS,
        "Add JSON-LD (Organization + Product/SoftwareApplication) and validate with Google "
        "Rich Results.",
    ),
    KeywordRule("title", Category.ENTITY_CLARITY),
    KeywordRule("meta description", Category.ENTITY_CLARITY),
    KeywordRule("h1", Category.ENTITY_CLARITY),
    KeywordRule("h2", Category.STRUCTURAL_COMPREHENSION),
    KeywordRule("headings", Category.STRUCTURAL_COMPREHENSION),
    KeywordRule(
        "contact",
        Category.TRUST_LEGITIMACY,
        "Add a clear Contact page + email/support link in header/footer.",
    ),
    KeywordRule(
        "about",
        Category.TRUST_LEGITIMACY,
        "Add About/Company page link in main nav/footer.",
    ),
    KeywordRule(
        "pricing",
        Category.COMMERCIAL_CLARITY,
        "Add a visible Pricing/Plans section or /pricing page with clear plan text.",
    ),
    KeywordRule("plans", Category.COMMERCIAL_CLARITY),
)


def match_rule(text: str) -> KeywordRule | None:
    lowered = (text or "").lower()
    for rule in KEYWORD_RULES:
        if rule.keyword in lowered:
            return rule
    return None


def map_fix_to_category(action: str) -> Category | None:
    """Category a fix action addresses, or None when no keyword matches."""
    rule = match_rule(action)
    return rule.category if rule else None


def suggested_action_for_label(label: str) -> str:
    """Remediation text for a breakdown label, or NO_ACTION."""
    rule = match_rule(label)
    if rule and rule.suggested_action:
        return rule.suggested_action
    return NO_ACTION


def has_suggested_action(action: str) -> bool:
    return bool(action) and action != NO_ACTION
