"""Category scorer.

Turns ExtractedSignals into scored breakdown items, one per rubric check,
concatenated category by category in the fixed rubric order. The total is
the plain sum of item points.
"""

from dataclasses import dataclass

import structlog

from defaultanswer.extraction.signals import ExtractedSignals
from defaultanswer.scoring.rubric import (
    SCORED_CATEGORIES,
    Category,
    Rubric,
    get_rubric,
)

logger = structlog.get_logger(__name__)

# Answerability partial credit, strongest evidence first
FAQ_DIRECT_ANSWER_POINTS = 6
FAQ_INDIRECT_POINTS = 4

# Heading quality thresholds (share of generic headings)
GENERIC_RATIO_POOR = 0.5
GENERIC_RATIO_MIXED = 0.2


@dataclass(frozen=True)
class BreakdownItem:
    """One scored check."""

    label: str
    points: int
    max_points: int
    reason: str
    category: str

    def __post_init__(self) -> None:
        if not 0 <= self.points <= self.max_points:
            raise ValueError(
                f"{self.label}: points {self.points} outside 0..{self.max_points}"
            )

    @property
    def ratio(self) -> float:
        return self.points / self.max_points if self.max_points else 0.0

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "points": self.points,
            "max": self.max_points,
            "reason": self.reason,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BreakdownItem":
        return cls(
            label=data["label"],
            points=int(data.get("points", 0)),
            max_points=int(data.get("max", data.get("max_points", 0))),
            reason=data.get("reason", ""),
            category=data.get("category") or "Other",
        )


@dataclass(frozen=True)
class ScoreResult:
    """Scored breakdown and its total."""

    score: int
    breakdown: tuple[BreakdownItem, ...]

    def category_totals(self) -> dict[str, tuple[int, int]]:
        """Points earned and available per category, in breakdown order."""
        totals: dict[str, tuple[int, int]] = {}
        for item in self.breakdown:
            points, max_points = totals.get(item.category, (0, 0))
            totals[item.category] = (points + item.points, max_points + item.max_points)
        return totals

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "breakdown": [item.to_dict() for item in self.breakdown],
            "categories": {
                category: {"points": points, "max": max_points}
                for category, (points, max_points) in self.category_totals().items()
            },
        }

    def show_the_math(self) -> str:
        """Generate human-readable calculation breakdown."""
        lines = [
            "=" * 60,
            "RECOMMENDATION READINESS SCORE",
            "=" * 60,
            "",
        ]
        current = None
        for item in self.breakdown:
            if item.category != current:
                current = item.category
                points, max_points = self.category_totals()[current]
                lines.append(f"{current}: {points}/{max_points}")
            lines.append(f"  {item.label}: {item.points}/{item.max_points}")
            lines.append(f"    {item.reason}")
        lines.extend(["", "-" * 60, f"TOTAL: {self.score}/100", "=" * 60])
        return "\n".join(lines)


class CategoryScorer:
    """Scores ExtractedSignals against the rubric."""

    def __init__(self, rubric: Rubric | None = None):
        self.rubric = rubric or get_rubric()
        self._scorers = {
            Category.ENTITY_CLARITY: self._score_entity_clarity,
            Category.STRUCTURAL_COMPREHENSION: self._score_structure,
            Category.ANSWERABILITY_SIGNALS: self._score_answerability,
            Category.TRUST_LEGITIMACY: self._score_trust,
            Category.COMMERCIAL_CLARITY: self._score_commercial,
        }

    def score(self, signals: ExtractedSignals) -> ScoreResult:
        """
        Score all categories.

        Args:
            signals: Extracted page signals

        Returns:
            ScoreResult with breakdown in fixed category order
        """
        breakdown: list[BreakdownItem] = []
        for category in SCORED_CATEGORIES:
            breakdown.extend(self._scorers[category](signals))

        result = ScoreResult(
            score=sum(item.points for item in breakdown),
            breakdown=tuple(breakdown),
        )

        logger.info(
            "score_calculated",
            url=signals.url,
            score=result.score,
            categories={name: points for name, (points, _) in result.category_totals().items()},
        )
        return result

    def _item(self, key: str, points: int, reason: str) -> BreakdownItem:
        spec = self.rubric.check(key)
        return BreakdownItem(
            label=spec.label,
            points=points,
            max_points=spec.max_points,
            reason=reason,
            category=spec.category.value,
        )

    def _score_entity_clarity(self, signals: ExtractedSignals) -> list[BreakdownItem]:
        title = signals.title
        brand = signals.brand_guess
        title_has_brand = bool(title and brand and brand.lower() in title.lower())
        if not title:
            title_item = self._item("title_brand", 0, "No title tag found")
        elif title_has_brand:
            title_item = self._item(
                "title_brand", 10, f'Title "{title[:50]}" includes brand name'
            )
        else:
            title_item = self._item(
                "title_brand", 5, "Title exists but brand name not clearly present"
            )

        meta = signals.meta_description
        if meta:
            meta_item = self._item(
                "meta_description", 5, f"Meta description found ({len(meta)} chars)"
            )
        else:
            meta_item = self._item("meta_description", 0, "No meta description tag found")

        h1_points, h1_reason = self._evaluate_h1(signals.h1s)
        h1_item = self._item("h1_quality", h1_points, h1_reason)

        return [title_item, meta_item, h1_item]

    def _evaluate_h1(self, h1s: tuple[str, ...]) -> tuple[int, str]:
        if not h1s:
            return 0, "No H1 heading found"

        h1 = h1s[0]
        if self.rubric.is_generic_h1(h1):
            return 2, f'H1 "{h1}" is too generic for LLMs to understand'

        word_count = len(h1.split())
        if word_count >= 3:
            return 10, f'H1 "{h1[:50]}" clearly describes the offering'
        elif word_count == 2:
            return 7, f'H1 "{h1}" is brief, consider more descriptive text'
        else:
            return 4, f'H1 "{h1}" is a single word, add context for LLMs'

    def _score_structure(self, signals: ExtractedSignals) -> list[BreakdownItem]:
        h1_count = len(signals.h1s)
        h1_item = self._item(
            "h1_present",
            5 if h1_count else 0,
            f"Found {h1_count} H1 heading(s)" if h1_count else "No H1 heading found on page",
        )

        h2_count = len(signals.h2s)
        if h2_count >= 3:
            h2_item = self._item(
                "h2_count", 5, f"Found {h2_count} H2 headings providing good structure"
            )
        elif h2_count >= 1:
            h2_item = self._item(
                "h2_count", 2, f"Only {h2_count} H2 heading(s) found, recommend 3+"
            )
        else:
            h2_item = self._item("h2_count", 0, "No H2 headings found")

        heading_points, heading_reason = self._evaluate_headings([*signals.h1s, *signals.h2s])
        headings_item = self._item("headings_descriptive", heading_points, heading_reason)

        return [h1_item, h2_item, headings_item]

    def _evaluate_headings(self, headings: list[str]) -> tuple[int, str]:
        if not headings:
            return 0, "No headings found on page"

        generic_count = sum(1 for h in headings if self.rubric.is_generic_heading(h))
        generic_ratio = generic_count / len(headings)

        if generic_ratio > GENERIC_RATIO_POOR:
            return 2, f"{generic_count}/{len(headings)} headings are generic (Welcome, Home, etc.)"
        elif generic_ratio > GENERIC_RATIO_MIXED:
            return 6, "Some headings are generic, use descriptive text"
        return 10, "Headings are descriptive and meaningful"

    def _score_answerability(self, signals: ExtractedSignals) -> list[BreakdownItem]:
        # Strongest available evidence only; partial credits never stack
        if signals.has_faq:
            faq_item = self._item("faq", 10, "FAQ section detected on page")
        elif signals.has_direct_answer_block:
            faq_item = self._item(
                "faq",
                FAQ_DIRECT_ANSWER_POINTS,
                "Direct answer blocks detected (partial credit)",
            )
        elif signals.has_indirect_faq:
            faq_item = self._item("faq", FAQ_INDIRECT_POINTS, "Indirect FAQ presence detected")
        else:
            faq_item = self._item("faq", 0, "No retrievable answer blocks found on homepage")

        if signals.has_structured_data and signals.schema_types:
            types = ", ".join(signals.schema_types[:5])
            schema_item = self._item(
                "schema", 10, f"JSON-LD structured data found (types: {types})"
            )
        elif signals.has_structured_data:
            schema_item = self._item("schema", 10, "JSON-LD structured data found")
        else:
            schema_item = self._item(
                "schema", 0, "No Schema.org JSON-LD found, reduces entity certainty"
            )

        return [faq_item, schema_item]

    def _score_trust(self, signals: ExtractedSignals) -> list[BreakdownItem]:
        about_item = self._item(
            "about",
            10 if signals.has_about else 0,
            "About/Company/Team page link found"
            if signals.has_about
            else "No About page link found, reduces perceived legitimacy",
        )

        if signals.has_contact_signals:
            found = ", ".join(signals.contact_evidence[:3])
            contact_item = self._item("contact", 10, f"Contact signals found ({found})")
        else:
            contact_item = self._item(
                "contact",
                0,
                "No contact signals found, reduces trust and recommendation confidence",
            )

        return [about_item, contact_item]

    def _score_commercial(self, signals: ExtractedSignals) -> list[BreakdownItem]:
        return [
            self._item(
                "pricing",
                15 if signals.has_pricing else 0,
                "Pricing or plans information detected"
                if signals.has_pricing
                else "No pricing information found, unclear what users get",
            )
        ]


def calculate_score(signals: ExtractedSignals, rubric: Rubric | None = None) -> ScoreResult:
    """Convenience function to score extracted signals."""
    scorer = CategoryScorer(rubric)
    return scorer.score(signals)
