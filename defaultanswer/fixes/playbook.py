"""Cold-summary fix playbook.

Turns one cold-summary grading, plus whatever the on-page analysis found,
into a checklist of copy and markup changes. URL-only refusals say
nothing about on-page content, so on-page items are marked not
applicable for them instead of recommended.
"""

from dataclasses import dataclass
from enum import StrEnum

from defaultanswer.extraction.signals import ExtractedSignals
from defaultanswer.observation.cold_summary import ColdSummaryAnalysis
from defaultanswer.observation.prompts import ColdSummaryMode


class PlaybookStatus(StrEnum):
    RECOMMEND = "recommend"
    ALREADY_PRESENT = "already_present"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class ExistingSignals:
    """On-page signals from the report analysis of the same site."""

    has_faq: bool = False
    has_schema: bool = False
    has_pricing: bool = False
    has_about: bool = False
    has_contact: bool = False
    has_entity_clarity: bool = False

    @classmethod
    def from_signals(cls, signals: ExtractedSignals) -> "ExistingSignals":
        return cls(
            has_faq=signals.has_faq,
            has_schema=signals.has_structured_data,
            has_pricing=signals.has_pricing,
            has_about=signals.has_about,
            has_contact=signals.has_contact_signals,
            has_entity_clarity=bool(signals.title and signals.h1s),
        )


@dataclass(frozen=True)
class PlaybookItem:
    id: str
    title: str
    why: str
    example: str
    status: PlaybookStatus
    reason: str | None = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "why": self.why,
            "example": self.example,
            "status": self.status.value,
        }
        if self.reason:
            data["reason"] = self.reason
        return data


def _onpage_status(
    present: bool, untestable: bool, present_reason: str, untestable_reason: str
) -> tuple[PlaybookStatus, str | None]:
    if present:
        return PlaybookStatus.ALREADY_PRESENT, present_reason
    if untestable:
        return PlaybookStatus.NOT_APPLICABLE, untestable_reason
    return PlaybookStatus.RECOMMEND, None


def build_cold_fix_playbook(
    analysis: ColdSummaryAnalysis,
    mode: ColdSummaryMode = ColdSummaryMode.URL_ONLY,
    existing: ExistingSignals | None = None,
) -> list[PlaybookItem]:
    """
    Build the checklist for one cold-summary result.

    Args:
        analysis: Graded cold-summary response
        mode: Prompt variant the run used
        existing: On-page signals from the report analysis, if any

    Returns:
        Playbook items in display order
    """
    existing = existing or ExistingSignals()
    untestable = mode == ColdSummaryMode.URL_ONLY and analysis.is_refusal
    items: list[PlaybookItem] = []

    if untestable:
        items.append(
            PlaybookItem(
                id="mode_note",
                title="Use Snapshot mode for a real test",
                why=(
                    "URL-only cannot fetch page content; this tests brand memory, not on-page "
                    "clarity."
                ),
                example="Switch to Snapshot mode to test whether your visible copy is extractable.",
                status=PlaybookStatus.RECOMMEND,
            )
        )

    if analysis.has_category:
        hero_status = PlaybookStatus.ALREADY_PRESENT
        hero_reason = "Category was detected in the cold summary output."
    else:
        hero_status = PlaybookStatus.RECOMMEND
        hero_reason = (
            "Entity clarity signals exist, but the cold summary did not pick up the category."
            if existing.has_entity_clarity
            else None
        )
    items.append(
        PlaybookItem(
            id="hero_category",
            title="Add a category one-liner in the hero/H1",
            why="Models need an explicit category anchor in the first scan.",
            example='Example: "Acme is a payroll platform for startups."',
            status=hero_status,
            reason=hero_reason,
        )
    )

    items.append(
        PlaybookItem(
            id="for_x",
            title="Add a clear 'for X' line",
            why="Audience clarity boosts cold inference confidence.",
            example='Example: "Built for finance teams at growing SaaS companies."',
            status=(
                PlaybookStatus.ALREADY_PRESENT
                if analysis.has_audience
                else PlaybookStatus.RECOMMEND
            ),
            reason=(
                "Audience was detected in the cold summary output."
                if analysis.has_audience
                else None
            ),
        )
    )

    items.append(
        PlaybookItem(
            id="one_sentence_offer",
            title="State what you offer in one sentence",
            why="Offering ambiguity drives partial or unclear summaries.",
            example='Example: "We provide an invoicing tool that automates billing."',
            status=(
                PlaybookStatus.ALREADY_PRESENT
                if analysis.has_offering
                else PlaybookStatus.RECOMMEND
            ),
            reason=(
                "Offering was detected in the cold summary output."
                if analysis.has_offering
                else None
            ),
        )
    )

    status, reason = _onpage_status(
        existing.has_faq,
        untestable,
        "Detected FAQ signals in the report analysis.",
        "URL-only mode cannot validate FAQ presence.",
    )
    items.append(
        PlaybookItem(
            id="faq_block",
            title="Add an FAQ block (What is X / Who is it for / Pricing)",
            why="Direct Q&A improves cold summaries without browsing.",
            example='Example: "What is Acme? Acme is a payroll platform for startups."',
            status=status,
            reason=reason,
        )
    )

    status, reason = _onpage_status(
        existing.has_schema,
        untestable,
        "Detected Schema.org signals in the report analysis.",
        "URL-only mode cannot validate schema presence.",
    )
    items.append(
        PlaybookItem(
            id="schema_org",
            title="Add Organization + WebSite schema",
            why="Structured data helps models resolve category faster.",
            example="Example: JSON-LD Organization + WebSite on the homepage.",
            status=status,
            reason=reason,
        )
    )

    status, reason = _onpage_status(
        existing.has_pricing,
        untestable,
        "Detected pricing signals in the report analysis.",
        "URL-only mode cannot validate pricing presence.",
    )
    items.append(
        PlaybookItem(
            id="pricing",
            title="Add a simple pricing or plan snapshot",
            why="Commercial clarity reduces vague summaries.",
            example='Example: "Plans start at $49/month" near the hero.',
            status=status,
            reason=reason,
        )
    )

    status, reason = _onpage_status(
        existing.has_about and existing.has_contact,
        untestable,
        "Detected About and Contact signals in the report analysis.",
        "URL-only mode cannot validate trust signals.",
    )
    items.append(
        PlaybookItem(
            id="about_contact",
            title="Add About + Contact links in header/footer",
            why="Trust signals reduce refusal and uncertainty.",
            example='Example: "About" and "Contact" links in the primary nav.',
            status=status,
            reason=reason,
        )
    )

    items.append(
        PlaybookItem(
            id="example_copy",
            title="Remove hedging words in the hero copy",
            why="Hedging reduces confidence and triggers uncertainty.",
            example='Rewrite: "We help teams ship faster" (not "We might help teams...").',
            status=(
                PlaybookStatus.RECOMMEND if analysis.has_hedging else PlaybookStatus.NOT_APPLICABLE
            ),
            reason="Hedging language was detected in the output." if analysis.has_hedging else None,
        )
    )

    return items
