"""Multi-run cold-summary aggregation.

Repeated, independent runs of the same cold-summary prompt are bucketed
by failure mode, averaged, and labeled for consistency. A representative
run is picked so one typical transcript can be shown without
cherry-picking an outlier.
"""

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

import structlog

from defaultanswer.config import get_settings
from defaultanswer.exceptions import EmptyRunsError
from defaultanswer.observation.cold_summary import ColdSummaryAnalysis, FailureMode

logger = structlog.get_logger(__name__)

MIXED_AGREEMENT_COUNT = 2


def round_half_up(value: float) -> int:
    """Round .5 upward, matching how averages are displayed."""
    return math.floor(value + 0.5)


class ConsistencyLabel(StrEnum):
    STABLE = "Stable"
    MIXED = "Mixed"
    VOLATILE = "Volatile"


@dataclass(frozen=True)
class ColdSummaryRun:
    """One model response and its grading."""

    raw_text: str
    analysis: ColdSummaryAnalysis

    def to_dict(self) -> dict:
        return {"raw_text": self.raw_text, "analysis": self.analysis.to_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> "ColdSummaryRun":
        return cls(
            raw_text=data.get("raw_text", ""),
            analysis=ColdSummaryAnalysis.from_dict(data["analysis"]),
        )


@dataclass(frozen=True)
class VerdictCounts:
    """Runs per bucket; both refusal modes share one bucket."""

    clear: int = 0
    partial: int = 0
    unclear: int = 0
    refusal: int = 0

    @property
    def non_refusal(self) -> int:
        return self.clear + self.partial + self.unclear

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.clear, self.partial, self.unclear, self.refusal)

    def to_dict(self) -> dict:
        return {
            "clear": self.clear,
            "partial": self.partial,
            "unclear": self.unclear,
            "refusal": self.refusal,
        }


@dataclass(frozen=True)
class ColdSummaryAggregate:
    clarity_avg: int
    unknown_avg: int
    refusals_count: int
    verdict_counts: VerdictCounts
    consistency_label: ConsistencyLabel
    note: str

    def to_dict(self) -> dict:
        return {
            "clarity_avg": self.clarity_avg,
            "unknown_avg": self.unknown_avg,
            "refusals_count": self.refusals_count,
            "verdict_counts": self.verdict_counts.to_dict(),
            "consistency_label": self.consistency_label.value,
            "note": self.note,
        }


def count_verdicts(analyses: list[ColdSummaryAnalysis]) -> VerdictCounts:
    buckets = {"clear": 0, "partial": 0, "unclear": 0, "refusal": 0}
    for analysis in analyses:
        if analysis.failure_mode.is_refusal:
            buckets["refusal"] += 1
        elif analysis.failure_mode == FailureMode.CLEAR:
            buckets["clear"] += 1
        elif analysis.failure_mode == FailureMode.PARTIAL:
            buckets["partial"] += 1
        else:
            buckets["unclear"] += 1
    return VerdictCounts(**buckets)


def classify_consistency(counts: VerdictCounts, total: int) -> ConsistencyLabel:
    """
    Stable when every run lands in one bucket. Mixed when the largest
    bucket holds exactly two runs and refusals and non-refusals are not
    both present. Volatile otherwise.
    """
    largest = max(counts.as_tuple())
    if largest == total:
        return ConsistencyLabel.STABLE
    split = counts.refusal > 0 and counts.non_refusal > 0
    if largest == MIXED_AGREEMENT_COUNT and not split:
        return ConsistencyLabel.MIXED
    return ConsistencyLabel.VOLATILE


def _consistency_note(label: ConsistencyLabel, largest: int, total: int) -> str:
    if label == ConsistencyLabel.STABLE:
        return f"{largest}/{total} runs agree. Cold understanding is consistent."
    if label == ConsistencyLabel.MIXED:
        return f"Cold understanding varies across runs ({largest}/{total} agree)."
    return "Cold understanding is volatile (models disagree / refusals present)."


def _analyses(runs: list[ColdSummaryRun] | list[ColdSummaryAnalysis]) -> list[ColdSummaryAnalysis]:
    return [run.analysis if isinstance(run, ColdSummaryRun) else run for run in runs]


def aggregate_cold_summary_runs(
    runs: list[ColdSummaryRun] | list[ColdSummaryAnalysis],
) -> ColdSummaryAggregate:
    """
    Aggregate repeated runs on the same input.

    Args:
        runs: Runs (or bare analyses) in run order

    Returns:
        ColdSummaryAggregate

    Raises:
        EmptyRunsError: If no runs are given
    """
    analyses = _analyses(runs)
    if not analyses:
        raise EmptyRunsError()

    total = len(analyses)
    counts = count_verdicts(analyses)
    label = classify_consistency(counts, total)
    largest = max(counts.as_tuple())

    aggregate = ColdSummaryAggregate(
        clarity_avg=round_half_up(sum(a.clarity_score for a in analyses) / total),
        unknown_avg=round_half_up(sum(a.unknown_count for a in analyses) / total),
        refusals_count=counts.refusal,
        verdict_counts=counts,
        consistency_label=label,
        note=_consistency_note(label, largest, total),
    )

    logger.info(
        "cold_summary_runs_aggregated",
        runs=total,
        clarity_avg=aggregate.clarity_avg,
        consistency=label.value,
    )
    return aggregate


def pick_representative_run(
    runs: list[ColdSummaryRun], aggregate: ColdSummaryAggregate | None = None
) -> ColdSummaryRun | None:
    """
    Run whose clarity is closest to the average.

    Non-refusal runs are preferred when any exist. The target is the
    aggregate's clarity average, or the pool's own rounded mean when no
    aggregate is given. Ties go to the earliest run.
    """
    if not runs:
        return None

    pool = [run for run in runs if not run.analysis.is_refusal] or list(runs)
    if aggregate is not None:
        target = aggregate.clarity_avg
    else:
        target = round_half_up(sum(run.analysis.clarity_score for run in pool) / len(pool))

    return min(pool, key=lambda run: abs(run.analysis.clarity_score - target))


@dataclass(frozen=True)
class ColdSummaryMultiRun:
    """Everything recorded for one multi-run cold-summary test."""

    prompt_version: str
    model: str
    created_at: str
    prompts_used: str
    results: tuple[ColdSummaryRun, ...]
    aggregate: ColdSummaryAggregate
    representative: ColdSummaryRun | None = field(default=None)

    def to_dict(self) -> dict:
        return {
            "prompt_version": self.prompt_version,
            "model": self.model,
            "created_at": self.created_at,
            "prompts_used": self.prompts_used,
            "results": [run.to_dict() for run in self.results],
            "aggregate": self.aggregate.to_dict(),
            "representative": self.representative.to_dict() if self.representative else None,
        }


def build_multi_run(
    runs: list[ColdSummaryRun],
    model: str,
    prompts_used: str,
    prompt_version: str | None = None,
    created_at: datetime | None = None,
) -> ColdSummaryMultiRun:
    """
    Bundle runs with their aggregate and representative run.

    Raises:
        EmptyRunsError: If no runs are given
    """
    aggregate = aggregate_cold_summary_runs(runs)
    timestamp = created_at or datetime.now(UTC)
    return ColdSummaryMultiRun(
        prompt_version=prompt_version or get_settings().cold_summary_prompt_version,
        model=model,
        created_at=timestamp.isoformat(),
        prompts_used=prompts_used,
        results=tuple(runs),
        aggregate=aggregate,
        representative=pick_representative_run(runs, aggregate),
    )
