"""Comparative diff between two scored analyses.

Works for "your site vs. a competitor" and for "this scan vs. the last
scan" alike: both sides are keyed by (category, label), the key sets are
unioned, and every check gets a signed delta (B minus A).
"""

from dataclasses import dataclass, field
from typing import Protocol

import structlog

from defaultanswer.fixes.mapping import has_suggested_action, suggested_action_for_label
from defaultanswer.scoring.calculator import BreakdownItem

logger = structlog.get_logger(__name__)

BIGGEST_GAPS_LIMIT = 5
QUICK_WINS_LIMIT = 5
UNCATEGORIZED = "Other"


class Scored(Protocol):
    """Anything carrying a total score and a breakdown."""

    score: int
    breakdown: tuple[BreakdownItem, ...]


@dataclass(frozen=True)
class GapItem:
    """Difference on one check between side A and side B."""

    label: str
    category: str
    a_points: int
    b_points: int
    max_points: int
    delta: int
    suggested_action: str

    @property
    def is_quick_win(self) -> bool:
        return self.delta > 0 and has_suggested_action(self.suggested_action)

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "category": self.category,
            "a_points": self.a_points,
            "b_points": self.b_points,
            "max": self.max_points,
            "delta": self.delta,
            "suggested_action": self.suggested_action,
        }


@dataclass(frozen=True)
class CategoryDelta:
    """Points per category on both sides."""

    category: str
    a_points: int
    b_points: int

    @property
    def delta(self) -> int:
        return self.b_points - self.a_points

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "a_points": self.a_points,
            "b_points": self.b_points,
            "delta": self.delta,
        }


@dataclass(frozen=True)
class CompareDiff:
    """Ranked gaps between two analyses."""

    score_delta: int
    category_deltas: tuple[CategoryDelta, ...] = ()
    gaps: tuple[GapItem, ...] = ()
    biggest_gaps: tuple[GapItem, ...] = ()
    quick_wins: tuple[GapItem, ...] = field(default=())

    def to_dict(self) -> dict:
        return {
            "score_delta": self.score_delta,
            "category_deltas": [d.to_dict() for d in self.category_deltas],
            "gaps": [g.to_dict() for g in self.gaps],
            "biggest_gaps": [g.to_dict() for g in self.biggest_gaps],
            "quick_wins": [g.to_dict() for g in self.quick_wins],
        }


Breakdown = tuple[BreakdownItem, ...] | list[BreakdownItem]


def _key(item: BreakdownItem) -> tuple[str, str]:
    return (item.category or UNCATEGORIZED, item.label)


def _by_key(items: Breakdown) -> dict[tuple[str, str], BreakdownItem]:
    return {_key(item): item for item in items}


def _sum_by_category(items: Breakdown) -> dict[str, int]:
    totals: dict[str, int] = {}
    for item in items:
        category = item.category or UNCATEGORIZED
        totals[category] = totals.get(category, 0) + item.points
    return totals


def compute_gap_items(a: Breakdown, b: Breakdown) -> list[GapItem]:
    """
    Per-check gaps sorted by absolute delta, largest first.

    A check present on only one side counts as zero points on the other.
    Ties keep first-seen order (side A's order, then B-only checks).
    """
    map_a = _by_key(a)
    map_b = _by_key(b)
    keys = list(dict.fromkeys([*map_a, *map_b]))

    gaps = []
    for key in keys:
        category, label = key
        a_item = map_a.get(key)
        b_item = map_b.get(key)
        a_points = a_item.points if a_item else 0
        b_points = b_item.points if b_item else 0
        max_points = a_item.max_points if a_item else b_item.max_points
        gaps.append(
            GapItem(
                label=label,
                category=category,
                a_points=a_points,
                b_points=b_points,
                max_points=max_points,
                delta=b_points - a_points,
                suggested_action=suggested_action_for_label(label),
            )
        )

    return sorted(gaps, key=lambda gap: abs(gap.delta), reverse=True)


def compute_category_deltas(a: Breakdown, b: Breakdown) -> list[CategoryDelta]:
    totals_a = _sum_by_category(a)
    totals_b = _sum_by_category(b)
    categories = list(dict.fromkeys([*totals_a, *totals_b]))
    return [
        CategoryDelta(category=c, a_points=totals_a.get(c, 0), b_points=totals_b.get(c, 0))
        for c in categories
    ]


def compute_diff(a: Scored, b: Scored) -> CompareDiff:
    """
    Diff two scored analyses.

    Args:
        a: Baseline side (your site, or the previous scan)
        b: Other side (a competitor, or the current scan)

    Returns:
        CompareDiff with gaps ranked by |delta|
    """
    gaps = compute_gap_items(a.breakdown, b.breakdown)
    quick_wins = [gap for gap in gaps if gap.is_quick_win][:QUICK_WINS_LIMIT]

    diff = CompareDiff(
        score_delta=b.score - a.score,
        category_deltas=tuple(compute_category_deltas(a.breakdown, b.breakdown)),
        gaps=tuple(gaps),
        biggest_gaps=tuple(gaps[:BIGGEST_GAPS_LIMIT]),
        quick_wins=tuple(quick_wins),
    )

    logger.debug(
        "diff_computed",
        score_delta=diff.score_delta,
        gaps=len(gaps),
        quick_wins=len(quick_wins),
    )
    return diff
