"""Freeform cold-summary response analyzer.

Parses a model's answer to the five-line cold-summary template and grades
how clearly the model understood the site without browsing. Parsing never
raises: missing or malformed lines leave their field unknown.
"""

import re
from dataclasses import dataclass, field
from enum import StrEnum

import structlog

from defaultanswer.observation.prompts import ColdSummaryMode

logger = structlog.get_logger(__name__)

HEDGING_RE = re.compile(
    r"\b(appears|seems|might|may|could|possibly|likely|suggests|unclear)\b", re.IGNORECASE
)
REFUSAL_RE = re.compile(
    r"\b(cannot access external websites|can't browse|cannot browse|i do not have access|"
    r"i don't have access|unable to access|cannot open the url|i cannot open|i can't access|"
    r"no browsing)\b",
    re.IGNORECASE,
)
REFUSAL_REASON_RE = re.compile(
    r"\b(cannot access|can't access|cannot browse|can't browse|do not have access|"
    r"don't have access|unable to access|no browsing)\b",
    re.IGNORECASE,
)

# "2) ", "2. ", "- ", "**" and similar list/markdown decoration
LINE_DECORATION_RE = re.compile(r"^(?:[*\-#\s]*)(?:\d+[).]\s*)?[*\s]*")
UNKNOWN_RE = re.compile(r"""^["'“”]*unknown["'“”]*\.?$""", re.IGNORECASE)

REFUSAL_UNKNOWN_THRESHOLD = 4
PARTIAL_UNKNOWN_THRESHOLD = 2


class FailureMode(StrEnum):
    """Closed set of cold-summary outcomes."""

    REFUSAL = "refusal"
    NO_RETRIEVAL_URL_ONLY = "no_retrieval_url_only"
    UNCLEAR = "unclear"
    PARTIAL = "partial"
    CLEAR = "clear"

    @property
    def is_refusal(self) -> bool:
        return self in (FailureMode.REFUSAL, FailureMode.NO_RETRIEVAL_URL_ONLY)


class VerdictLabel(StrEnum):
    CLEARLY = "Clearly"
    PARTIAL = "Partial"
    UNCLEAR = "Unclear"


@dataclass(frozen=True)
class ColdSummarySignals:
    """Raw field values as the model wrote them."""

    category_match: str | None = None
    audience_match: str | None = None
    problem_match: str | None = None
    offering_match: str | None = None
    summary_match: str | None = None
    hedging_matches: tuple[str, ...] = ()
    why_uncertain: str | None = None

    @property
    def fields(self) -> tuple[str | None, ...]:
        """The five template fields, in template order."""
        return (
            self.category_match,
            self.audience_match,
            self.problem_match,
            self.offering_match,
            self.summary_match,
        )

    def to_dict(self) -> dict:
        return {
            "category_match": self.category_match,
            "audience_match": self.audience_match,
            "problem_match": self.problem_match,
            "offering_match": self.offering_match,
            "summary_match": self.summary_match,
            "hedging_matches": list(self.hedging_matches),
            "why_uncertain": self.why_uncertain,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ColdSummarySignals":
        return cls(
            category_match=data.get("category_match"),
            audience_match=data.get("audience_match"),
            problem_match=data.get("problem_match"),
            offering_match=data.get("offering_match"),
            summary_match=data.get("summary_match"),
            hedging_matches=tuple(data.get("hedging_matches") or ()),
            why_uncertain=data.get("why_uncertain"),
        )


@dataclass(frozen=True)
class ColdSummaryAnalysis:
    """Graded reading of one cold-summary response."""

    failure_mode: FailureMode
    verdict_label: VerdictLabel
    has_category: bool
    has_audience: bool
    has_offering: bool
    has_hedging: bool
    refusal_flag: bool
    unknown_count: int
    clarity_score: int
    signals: ColdSummarySignals = field(default_factory=ColdSummarySignals)

    @property
    def is_refusal(self) -> bool:
        return self.failure_mode.is_refusal

    def to_dict(self) -> dict:
        return {
            "failure_mode": self.failure_mode.value,
            "verdict_label": self.verdict_label.value,
            "has_category": self.has_category,
            "has_audience": self.has_audience,
            "has_offering": self.has_offering,
            "has_hedging": self.has_hedging,
            "refusal_flag": self.refusal_flag,
            "unknown_count": self.unknown_count,
            "clarity_score": self.clarity_score,
            "signals": self.signals.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ColdSummaryAnalysis":
        return cls(
            failure_mode=FailureMode(data["failure_mode"]),
            verdict_label=VerdictLabel(data["verdict_label"]),
            has_category=bool(data.get("has_category")),
            has_audience=bool(data.get("has_audience")),
            has_offering=bool(data.get("has_offering")),
            has_hedging=bool(data.get("has_hedging")),
            refusal_flag=bool(data.get("refusal_flag")),
            unknown_count=int(data.get("unknown_count", 0)),
            clarity_score=int(data.get("clarity_score", 1)),
            signals=ColdSummarySignals.from_dict(data.get("signals") or {}),
        )

    def show_the_math(self) -> str:
        """Generate human-readable grading breakdown."""
        s = self.signals
        lines = [
            "=" * 60,
            "COLD SUMMARY CLARITY",
            "=" * 60,
            "",
            f"Category/Type:       {s.category_match or '(missing)'}",
            f"Who it is for:       {s.audience_match or '(missing)'}",
            f"Problem it solves:   {s.problem_match or '(missing)'}",
            f"What it offers:      {s.offering_match or '(missing)'}",
            f"Plain summary:       {s.summary_match or '(missing)'}",
        ]
        if s.why_uncertain:
            lines.append(f"Why uncertain:       {s.why_uncertain}")
        lines.extend(
            [
                "",
                f"Unknown fields:      {self.unknown_count}/5",
                f"Refusal detected:    {'yes' if self.refusal_flag else 'no'}",
                f"Hedging:             {', '.join(s.hedging_matches) or 'none'}",
                "",
                "-" * 60,
                f"FAILURE MODE: {self.failure_mode.value}",
                f"CLARITY: {self.clarity_score}/5 ({self.verdict_label.value})",
                "=" * 60,
            ]
        )
        return "\n".join(lines)


def is_unknown(value: str | None) -> bool:
    """Empty, or literally "Unknown" (quotes and a trailing period tolerated)."""
    if not value or not value.strip():
        return True
    return bool(UNKNOWN_RE.match(value.strip()))


class ColdSummaryParser:
    """Line-prefix parser for the cold-summary template."""

    # Checked in order; the first matching prefix claims the line
    FIELD_PREFIXES = (
        ("category", "category/type"),
        ("audience", "who it is for"),
        ("problem", "what problem it solves"),
        ("offering", "what it offers"),
        ("summary", "1-sentence plain summary"),
        ("why_uncertain", "why uncertain"),
    )

    def parse(self, text: str) -> dict[str, str]:
        """
        Extract template fields from free text.

        Returns:
            Mapping of field name to value for every field found; later
            lines for the same field overwrite earlier ones
        """
        fields: dict[str, str] = {}
        for raw_line in (text or "").splitlines():
            line = raw_line.strip()
            if not line:
                continue
            body = LINE_DECORATION_RE.sub("", line, count=1)
            lowered = body.lower()
            for name, prefix in self.FIELD_PREFIXES:
                if lowered.startswith(prefix):
                    fields[name] = self._take_value(body)
                    break
        return fields

    @staticmethod
    def _take_value(line: str) -> str:
        _, sep, value = line.partition(":")
        if not sep:
            return line.strip()
        return value.strip().strip("*").strip()


def _failure_mode(refusal: bool, unknown_count: int, mode: ColdSummaryMode) -> FailureMode:
    if refusal:
        if mode == ColdSummaryMode.URL_ONLY:
            return FailureMode.NO_RETRIEVAL_URL_ONLY
        return FailureMode.REFUSAL
    if unknown_count >= REFUSAL_UNKNOWN_THRESHOLD:
        return FailureMode.UNCLEAR
    if unknown_count >= PARTIAL_UNKNOWN_THRESHOLD:
        return FailureMode.PARTIAL
    return FailureMode.CLEAR


def clarity_for(failure_mode: FailureMode, unknown_count: int, has_hedging: bool) -> int:
    if failure_mode.is_refusal:
        return 1
    if failure_mode == FailureMode.UNCLEAR:
        return 2
    if failure_mode == FailureMode.PARTIAL:
        return 3
    return 5 if unknown_count == 0 and not has_hedging else 4


def verdict_for(clarity_score: int) -> VerdictLabel:
    if clarity_score >= 4:
        return VerdictLabel.CLEARLY
    if clarity_score >= 3:
        return VerdictLabel.PARTIAL
    return VerdictLabel.UNCLEAR


def analyze_cold_summary(
    text: str, mode: ColdSummaryMode = ColdSummaryMode.URL_ONLY
) -> ColdSummaryAnalysis:
    """
    Grade one cold-summary response.

    Args:
        text: Raw model output
        mode: Prompt variant the run used (URL-only refusals get their own mode)

    Returns:
        ColdSummaryAnalysis
    """
    normalized = (text or "").strip()
    parsed = ColdSummaryParser().parse(normalized)

    signals = ColdSummarySignals(
        category_match=parsed.get("category"),
        audience_match=parsed.get("audience"),
        problem_match=parsed.get("problem"),
        offering_match=parsed.get("offering"),
        summary_match=parsed.get("summary"),
        hedging_matches=tuple(dict.fromkeys(m.group(0) for m in HEDGING_RE.finditer(normalized))),
        why_uncertain=parsed.get("why_uncertain"),
    )

    unknown_count = sum(1 for value in signals.fields if is_unknown(value))
    why = signals.why_uncertain
    refusal_flag = bool(REFUSAL_RE.search(normalized)) or (
        unknown_count >= REFUSAL_UNKNOWN_THRESHOLD
        and bool(why and REFUSAL_REASON_RE.search(why))
    )
    has_hedging = bool(signals.hedging_matches)

    failure_mode = _failure_mode(refusal_flag, unknown_count, mode)
    clarity_score = clarity_for(failure_mode, unknown_count, has_hedging)

    analysis = ColdSummaryAnalysis(
        failure_mode=failure_mode,
        verdict_label=verdict_for(clarity_score),
        has_category=not is_unknown(signals.category_match),
        has_audience=not is_unknown(signals.audience_match),
        has_offering=not is_unknown(signals.offering_match),
        has_hedging=has_hedging,
        refusal_flag=refusal_flag,
        unknown_count=unknown_count,
        clarity_score=clarity_score,
        signals=signals,
    )

    logger.debug(
        "cold_summary_parsed",
        mode=mode.value,
        failure_mode=failure_mode.value,
        unknown_count=unknown_count,
        clarity_score=clarity_score,
    )
    return analysis
