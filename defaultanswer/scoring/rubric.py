"""Scoring rubric definitions for recommendation readiness.

Defines the five fixed categories, their point budgets, the individual
checks inside each category, and the stop lists used to judge headings.
The rubric is immutable and built once at import; the scorer receives it
by reference.
"""

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from defaultanswer.exceptions import RubricError


class Category(StrEnum):
    """Scoring categories (plus the synthetic error bucket)."""

    ENTITY_CLARITY = "Entity Clarity"
    STRUCTURAL_COMPREHENSION = "Structural Comprehension"
    ANSWERABILITY_SIGNALS = "Answerability Signals"
    TRUST_LEGITIMACY = "Trust & Legitimacy"
    COMMERCIAL_CLARITY = "Commercial Clarity"
    ERROR = "Error"


# Fixed display and tie-break order
SCORED_CATEGORIES = (
    Category.ENTITY_CLARITY,
    Category.STRUCTURAL_COMPREHENSION,
    Category.ANSWERABILITY_SIGNALS,
    Category.TRUST_LEGITIMACY,
    Category.COMMERCIAL_CLARITY,
)

CATEGORY_BUDGETS = MappingProxyType(
    {
        Category.ENTITY_CLARITY: 25,
        Category.STRUCTURAL_COMPREHENSION: 20,
        Category.ANSWERABILITY_SIGNALS: 20,
        Category.TRUST_LEGITIMACY: 20,
        Category.COMMERCIAL_CLARITY: 15,
    }
)

TOTAL_POINTS = 100

# Check labels (stable identifiers shared by fixes, weaknesses and diffs)
TITLE_LABEL = "Title includes brand/entity"
META_LABEL = "Meta description present"
H1_QUALITY_LABEL = "H1 describes product/category"
H1_PRESENT_LABEL = "H1 heading present"
H2_COUNT_LABEL = "Multiple H2 headings"
HEADINGS_LABEL = "Headings are descriptive"
FAQ_LABEL = "FAQ section present"
SCHEMA_LABEL = "Schema.org markup"
ABOUT_LABEL = "About page linked"
CONTACT_LABEL = "Contact info present"
PRICING_LABEL = "Pricing/plans visible"

# Headings that say nothing about the page
GENERIC_HEADINGS = frozenset(
    [
        "welcome",
        "home",
        "hello",
        "hey",
        "hi",
        "untitled",
        "section",
        "more",
        "learn more",
        "click here",
        "read more",
        "features",
    ]
)

GENERIC_H1 = frozenset(
    [
        "welcome",
        "home",
        "hello",
        "hey",
        "hi",
        "untitled",
        "page",
        "website",
    ]
)


@dataclass(frozen=True)
class CheckSpec:
    """A single scored check."""

    key: str
    label: str
    category: Category
    max_points: int

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "category": self.category.value,
            "max_points": self.max_points,
        }


@dataclass(frozen=True)
class Rubric:
    """Complete scoring rubric."""

    checks: tuple[CheckSpec, ...]
    budgets: MappingProxyType
    generic_headings: frozenset[str]
    generic_h1: frozenset[str]

    def check(self, key: str) -> CheckSpec:
        for spec in self.checks:
            if spec.key == key:
                return spec
        raise KeyError(key)

    def checks_for(self, category: Category) -> tuple[CheckSpec, ...]:
        return tuple(spec for spec in self.checks if spec.category == category)

    def is_generic_heading(self, text: str) -> bool:
        return text.strip().lower() in self.generic_headings

    def is_generic_h1(self, text: str) -> bool:
        return text.strip().lower() in self.generic_h1

    def to_dict(self) -> dict:
        return {
            "checks": [spec.to_dict() for spec in self.checks],
            "budgets": {category.value: points for category, points in self.budgets.items()},
        }


DEFAULT_CHECKS = (
    CheckSpec("title_brand", TITLE_LABEL, Category.ENTITY_CLARITY, 10),
    CheckSpec("meta_description", META_LABEL, Category.ENTITY_CLARITY, 5),
    CheckSpec("h1_quality", H1_QUALITY_LABEL, Category.ENTITY_CLARITY, 10),
    CheckSpec("h1_present", H1_PRESENT_LABEL, Category.STRUCTURAL_COMPREHENSION, 5),
    CheckSpec("h2_count", H2_COUNT_LABEL, Category.STRUCTURAL_COMPREHENSION, 5),
    CheckSpec("headings_descriptive", HEADINGS_LABEL, Category.STRUCTURAL_COMPREHENSION, 10),
    CheckSpec("faq", FAQ_LABEL, Category.ANSWERABILITY_SIGNALS, 10),
    CheckSpec("schema", SCHEMA_LABEL, Category.ANSWERABILITY_SIGNALS, 10),
    CheckSpec("about", ABOUT_LABEL, Category.TRUST_LEGITIMACY, 10),
    CheckSpec("contact", CONTACT_LABEL, Category.TRUST_LEGITIMACY, 10),
    CheckSpec("pricing", PRICING_LABEL, Category.COMMERCIAL_CLARITY, 15),
)


def validate_rubric(rubric: Rubric) -> None:
    """
    Check that per-category maxima match the budgets and total 100.

    Raises:
        RubricError: If any category's checks do not sum to its budget
    """
    for category in SCORED_CATEGORIES:
        budget = rubric.budgets.get(category)
        if budget is None:
            raise RubricError(f"No budget for category {category.value}", category.value)
        allotted = sum(spec.max_points for spec in rubric.checks_for(category))
        if allotted != budget:
            raise RubricError(
                f"{category.value} checks total {allotted} points, budget is {budget}",
                category.value,
            )

    total = sum(rubric.budgets[category] for category in SCORED_CATEGORIES)
    if total != TOTAL_POINTS:
        raise RubricError(f"Category budgets total {total}, expected {TOTAL_POINTS}")


DEFAULT_RUBRIC = Rubric(
    checks=DEFAULT_CHECKS,
    budgets=CATEGORY_BUDGETS,
    generic_headings=GENERIC_HEADINGS,
    generic_h1=GENERIC_H1,
)
validate_rubric(DEFAULT_RUBRIC)


def get_rubric() -> Rubric:
    """Get the active scoring rubric."""
    return DEFAULT_RUBRIC
