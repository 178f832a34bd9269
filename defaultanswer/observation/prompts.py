"""Cold-summary prompt construction.

The model-invocation collaborator sends these messages; the analyzer in
cold_summary.py parses whatever comes back against the same five-line
template.
"""

from dataclasses import dataclass
from enum import StrEnum

UNKNOWN_VALUE = "Unknown"

COLD_SUMMARY_SYSTEM = "You are an AI assistant. You do not have browsing for this task."

_TEMPLATE_LINES = (
    "Return exactly these 5 lines (no extra text):",
    '1) Category/Type: <... or "Unknown">',
    '2) Who it is for: <... or "Unknown">',
    '3) What problem it solves: <... or "Unknown">',
    '4) What it offers: <... or "Unknown">',
    '5) 1-sentence plain summary: <... or "Unknown">',
    'If you cannot infer confidently, output "Unknown" for those lines and add a 6th line:',
    "6) Why uncertain: <one sentence>",
    "",
)

COLD_SUMMARY_USER_URL_ONLY = "\n".join(
    (
        "You are given ONLY a URL (no page content). Without browsing, infer what the "
        "website likely is.",
        *_TEMPLATE_LINES,
        "URL: {url}",
    )
)

COLD_SUMMARY_USER_SNAPSHOT = "\n".join(
    (
        "You are given ONLY a URL and a small snapshot of on-page text (title, meta "
        "description, H1, visible excerpt). Without browsing, infer what the website "
        "likely is.",
        *_TEMPLATE_LINES,
        "URL: {url}",
        "Title: {title}",
        "Meta description: {meta}",
        "H1: {h1}",
        "Visible text excerpt: {excerpt}",
    )
)


class ColdSummaryMode(StrEnum):
    """What the model is shown."""

    URL_ONLY = "url_only"
    SNAPSHOT = "snapshot"


@dataclass(frozen=True)
class ColdSummarySnapshot:
    """On-page text shown to the model in snapshot mode."""

    title: str | None = None
    meta_description: str | None = None
    h1: str | None = None
    excerpt: str | None = None


@dataclass(frozen=True)
class ColdSummaryMessages:
    system: str
    user: str

    def to_dict(self) -> dict:
        return {"system": self.system, "user": self.user}


def _or_unknown(value: str | None) -> str:
    return (value or "").strip() or UNKNOWN_VALUE


def build_cold_summary_messages(
    url: str,
    mode: ColdSummaryMode = ColdSummaryMode.URL_ONLY,
    snapshot: ColdSummarySnapshot | None = None,
) -> ColdSummaryMessages:
    """
    Build the system and user messages for one cold-summary run.

    Missing snapshot fields render as "Unknown".
    """
    if mode == ColdSummaryMode.SNAPSHOT:
        snapshot = snapshot or ColdSummarySnapshot()
        user = COLD_SUMMARY_USER_SNAPSHOT.format(
            url=url,
            title=_or_unknown(snapshot.title),
            meta=_or_unknown(snapshot.meta_description),
            h1=_or_unknown(snapshot.h1),
            excerpt=_or_unknown(snapshot.excerpt),
        )
    else:
        user = COLD_SUMMARY_USER_URL_ONLY.format(url=url)
    return ColdSummaryMessages(system=COLD_SUMMARY_SYSTEM, user=user)
