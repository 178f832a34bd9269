"""Qualitative reasoning bullets.

Explains, in the voice of an answer engine, how the extracted signals
would be read. Negative bullets feed the readiness gate and the fix
prioritizer.
"""

from dataclasses import dataclass
from enum import StrEnum

from defaultanswer.extraction.signals import ExtractedSignals
from defaultanswer.scoring.calculator import BreakdownItem
from defaultanswer.scoring.rubric import H1_QUALITY_LABEL, HEADINGS_LABEL, TITLE_LABEL

MAX_NEGATIVE_BULLETS = 3
MAX_POSITIVE_BULLETS = 2

SIGNAL_ENTITY = "Entity Clarity"
SIGNAL_STRUCTURE = "Content Structure"
SIGNAL_ANSWERABILITY = "Answerability"
SIGNAL_STRUCTURED_DATA = "Structured Data"
SIGNAL_TRUST = "Trust Signals"
SIGNAL_COMMERCIAL = "Commercial Clarity"


class Impact(StrEnum):
    """Effect of a signal on recommendation confidence."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class ReasoningBullet:
    """One interpreted signal."""

    signal: str
    interpretation: str
    impact: Impact

    @property
    def is_negative(self) -> bool:
        return self.impact == Impact.NEGATIVE

    def to_dict(self) -> dict:
        return {
            "signal": self.signal,
            "interpretation": self.interpretation,
            "impact": self.impact.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReasoningBullet":
        return cls(
            signal=data.get("signal", ""),
            interpretation=data.get("interpretation", ""),
            impact=Impact(data.get("impact", Impact.NEUTRAL.value)),
        )


def _clip(text: str, limit: int) -> str:
    return f"{text[:limit]}..." if len(text) > limit else text


def _points(breakdown: list[BreakdownItem], label: str) -> int | None:
    for item in breakdown:
        if item.label == label:
            return item.points
    return None


def _entity_bullet(
    signals: ExtractedSignals, breakdown: list[BreakdownItem], brand: str
) -> ReasoningBullet | None:
    if signals.title and signals.h1s:
        title_points = _points(breakdown, TITLE_LABEL)
        h1_points = _points(breakdown, H1_QUALITY_LABEL)
        if (title_points or 0) >= 7 and (h1_points or 0) >= 7:
            return ReasoningBullet(
                SIGNAL_ENTITY,
                f'When asked "What is {brand}?", I can confidently extract that the title '
                f'"{_clip(signals.title, 60)}" and main heading "{_clip(signals.h1s[0], 50)}" '
                f"establish {brand} as a clear entity in its category.",
                Impact.POSITIVE,
            )
        if title_points is not None and title_points < 5:
            return ReasoningBullet(
                SIGNAL_ENTITY,
                f"The page title doesn't clearly establish what {brand} is. When users ask "
                f'"What is {brand}?", I would struggle to provide a confident answer because '
                "the core identity signal is weak or generic.",
                Impact.NEGATIVE,
            )
        return None

    missing = []
    if not signals.title:
        missing.append("no title tag")
    if not signals.h1s:
        missing.append("no H1 heading")
    return ReasoningBullet(
        SIGNAL_ENTITY,
        f"{brand} lacks fundamental identity signals: {' and '.join(missing)}. When a user asks "
        f"me to recommend solutions in this category, I cannot confidently identify what "
        f"{brand} even is.",
        Impact.NEGATIVE,
    )


def _structure_bullet(
    signals: ExtractedSignals, breakdown: list[BreakdownItem], brand: str
) -> ReasoningBullet | None:
    h2_count = len(signals.h2s)
    heading_points = _points(breakdown, HEADINGS_LABEL)
    if h2_count >= 3 and heading_points is not None and heading_points >= 7:
        return ReasoningBullet(
            SIGNAL_STRUCTURE,
            f"The page has {h2_count} well-organized sections with descriptive headings. This "
            "structured layout helps me understand the product's features, benefits, and use "
            f"cases, making it easier to cite {brand} when answering relevant queries.",
            Impact.POSITIVE,
        )
    if h2_count < 2:
        plural = "" if h2_count == 1 else "s"
        return ReasoningBullet(
            SIGNAL_STRUCTURE,
            f"With only {h2_count} section heading{plural}, the page lacks the structural depth "
            f"I need to understand {brand}'s full offering. Competitors with better-organized "
            "content will be easier for me to comprehend and recommend.",
            Impact.NEGATIVE,
        )
    return None


def generate_reasoning(
    signals: ExtractedSignals, breakdown: list[BreakdownItem] | tuple[BreakdownItem, ...]
) -> list[ReasoningBullet]:
    """
    Interpret extracted signals as reasoning bullets.

    Returns up to three negative bullets followed by up to two positive
    ones, each group in category order.
    """
    items = list(breakdown)
    brand = signals.brand_guess or "this site"
    bullets: list[ReasoningBullet] = []

    for bullet in (_entity_bullet(signals, items, brand), _structure_bullet(signals, items, brand)):
        if bullet:
            bullets.append(bullet)

    if signals.has_faq:
        question = (
            f"Is {signals.brand_guess} good for X?" if signals.brand_guess else "common questions"
        )
        bullets.append(
            ReasoningBullet(
                SIGNAL_ANSWERABILITY,
                "The FAQ section is particularly valuable. It presents information in a "
                "question-answer format that directly matches how users query me. When someone "
                f'asks "{question}", I can often pull relevant answers from FAQ content.',
                Impact.POSITIVE,
            )
        )
    else:
        bullets.append(
            ReasoningBullet(
                SIGNAL_ANSWERABILITY,
                "Without an FAQ section, the page misses a key opportunity. FAQ-formatted "
                "content is highly aligned with how I process and retrieve information. Adding "
                f"one would significantly improve {brand}'s citation likelihood.",
                Impact.NEGATIVE,
            )
        )

    if signals.has_structured_data:
        bullets.append(
            ReasoningBullet(
                SIGNAL_STRUCTURED_DATA,
                "The presence of Schema.org markup provides machine-readable entity "
                f"information. This structured data helps me categorize {brand} correctly and "
                "understand its relationship to competitors and the broader market.",
                Impact.POSITIVE,
            )
        )

    if signals.has_about and signals.has_contact_signals:
        bullets.append(
            ReasoningBullet(
                SIGNAL_TRUST,
                f"{brand} shows legitimate business indicators: About and Contact pages are "
                "present. When recommending products, I weigh these trust signals because users "
                "expect me to suggest real, reachable businesses.",
                Impact.POSITIVE,
            )
        )
    elif not signals.has_about and not signals.has_contact_signals:
        bullets.append(
            ReasoningBullet(
                SIGNAL_TRUST,
                f"I cannot find About or Contact information for {brand}. This lack of "
                "verifiable business presence makes me hesitant to recommend it over "
                "competitors who clearly establish their legitimacy and reachability.",
                Impact.NEGATIVE,
            )
        )

    if signals.has_pricing:
        bullets.append(
            ReasoningBullet(
                SIGNAL_COMMERCIAL,
                f'Pricing information is visible, which helps me answer "How much does {brand} '
                'cost?" queries. Users often ask me to compare solutions by price, and '
                f"{brand} can be included in those comparisons.",
                Impact.POSITIVE,
            )
        )
    else:
        bullets.append(
            ReasoningBullet(
                SIGNAL_COMMERCIAL,
                "No clear pricing is visible on the homepage. When users ask me to compare "
                f"pricing for solutions like this, I cannot include {brand} in my response "
                "because I don't know its pricing tier.",
                Impact.NEGATIVE,
            )
        )

    negatives = [b for b in bullets if b.impact == Impact.NEGATIVE]
    positives = [b for b in bullets if b.impact == Impact.POSITIVE]
    return negatives[:MAX_NEGATIVE_BULLETS] + positives[:MAX_POSITIVE_BULLETS]


def count_negative(reasoning: list[ReasoningBullet]) -> int:
    return sum(1 for bullet in reasoning if bullet.is_negative)
