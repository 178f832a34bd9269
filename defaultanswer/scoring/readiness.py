"""Readiness classification.

A flat state machine over (snapshot usability, analysis status, score,
negative reasoning count). Rules are evaluated in order and the first
match wins:

1. No usable snapshot (no analysis, blocked, error, negative score)
2. Snapshot too thin or script-rendered
3. score >= 75 and at most one negative reasoning bullet -> strong
4. score < 50 -> not a candidate
5. otherwise -> emerging
"""

from dataclasses import dataclass
from enum import StrEnum

import structlog

from defaultanswer.config import get_settings

logger = structlog.get_logger(__name__)


class AnalysisStatus(StrEnum):
    """Outcome of acquiring and scoring a snapshot."""

    OK = "ok"
    BLOCKED = "blocked"
    SNAPSHOT_INCOMPLETE = "snapshot_incomplete"
    ERROR = "error"


class ReadinessState(StrEnum):
    """How likely an answer engine is to recommend the site by default."""

    STRONG_DEFAULT_CANDIDATE = "StrongDefaultCandidate"
    EMERGING_OPTION = "EmergingOption"
    NOT_A_DEFAULT_CANDIDATE = "NotADefaultCandidate"

    @property
    def label(self) -> str:
        return READINESS_LABELS[self]


READINESS_LABELS = {
    ReadinessState.STRONG_DEFAULT_CANDIDATE: "Strong Default Candidate",
    ReadinessState.EMERGING_OPTION: "Emerging Option",
    ReadinessState.NOT_A_DEFAULT_CANDIDATE: "Not a Default Candidate",
}

EXPLANATION_PENDING = (
    "Analysis pending. AI confidence cannot be established until I can retrieve your "
    "homepage snapshot."
)
EXPLANATION_INCOMPLETE = (
    "Analysis incomplete: the homepage content appears to require JavaScript or is too "
    "thin to evaluate reliably."
)
EXPLANATION_ERROR = (
    "AI lacks sufficient clarity and trust signals to recommend your brand as a default "
    "option. Analysis could not be completed reliably."
)
EXPLANATION_STRONG = (
    "Your site provides clear signals that allow AI to confidently identify, trust, and "
    "recommend your brand."
)
EXPLANATION_WEAK = (
    "AI lacks sufficient clarity and trust signals to recommend your brand as a default option."
)
EXPLANATION_EMERGING = (
    "AI can understand your brand, but confidence gaps prevent it from consistently "
    "recommending you as the default."
)


@dataclass(frozen=True)
class ReadinessClassification:
    """Readiness verdict with its explanation."""

    state: ReadinessState
    explanation: str

    @property
    def label(self) -> str:
        return self.state.label

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "label": self.label,
            "explanation": self.explanation,
        }


def _blocked_explanation(status_code: int | None) -> str:
    why = f"HTTP {status_code}" if status_code else "fetch blocked"
    return (
        f"I could not retrieve your homepage ({why}). When content is not retrievable, "
        "AI systems avoid recommending it by default."
    )


def classify_readiness(
    score: int,
    negative_reasoning_count: int,
    status: AnalysisStatus = AnalysisStatus.OK,
    has_analysis: bool = True,
    fetch_status_code: int | None = None,
) -> ReadinessClassification:
    """
    Classify recommendation readiness.

    Args:
        score: Total score (negative sentinels for unusable snapshots)
        negative_reasoning_count: Number of negative-impact reasoning bullets
        status: Analysis status from the pipeline
        has_analysis: False when no analysis exists yet
        fetch_status_code: HTTP status of a blocked fetch, for the explanation

    Returns:
        ReadinessClassification
    """
    if negative_reasoning_count < 0:
        raise ValueError("negative_reasoning_count must be non-negative")

    settings = get_settings()
    not_candidate = ReadinessState.NOT_A_DEFAULT_CANDIDATE

    if not has_analysis:
        result = ReadinessClassification(not_candidate, EXPLANATION_PENDING)
    elif status == AnalysisStatus.BLOCKED:
        result = ReadinessClassification(not_candidate, _blocked_explanation(fetch_status_code))
    elif status == AnalysisStatus.SNAPSHOT_INCOMPLETE:
        result = ReadinessClassification(not_candidate, EXPLANATION_INCOMPLETE)
    elif status == AnalysisStatus.ERROR or score < 0:
        result = ReadinessClassification(not_candidate, EXPLANATION_ERROR)
    elif (
        score >= settings.readiness_strong_score
        and negative_reasoning_count <= settings.readiness_max_negative_reasoning
    ):
        result = ReadinessClassification(
            ReadinessState.STRONG_DEFAULT_CANDIDATE, EXPLANATION_STRONG
        )
    elif score < settings.readiness_weak_score:
        result = ReadinessClassification(not_candidate, EXPLANATION_WEAK)
    else:
        result = ReadinessClassification(ReadinessState.EMERGING_OPTION, EXPLANATION_EMERGING)

    logger.debug(
        "readiness_classified",
        score=score,
        negative_reasoning_count=negative_reasoning_count,
        status=status.value,
        state=result.state.value,
    )
    return result
