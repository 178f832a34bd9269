"""Analysis pipeline.

Runs one snapshot (or several pages of one site) through extraction,
scoring, reasoning, fix planning and readiness classification. Page
content never makes the pipeline raise: unusable snapshots become
sentinel analyses with a negative score and a single "Error" item.

Usage:
    snapshot = PageSnapshot(url="https://acme.com", html=html, status_code=200)
    report = run_readiness_check(snapshot)
    print(report.show_the_math())
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

import structlog

from defaultanswer.config import SCORE_SNAPSHOT_INCOMPLETE, SCORE_UNAVAILABLE
from defaultanswer.extraction.merge import merge_page_signals
from defaultanswer.extraction.signals import ExtractedSignals, SignalExtractor
from defaultanswer.extraction.snapshot import SnapshotQuality, classify_snapshot_quality
from defaultanswer.extraction.url import is_valid_url, normalize_url
from defaultanswer.fixes.generator import (
    BLOCKED_FIX_PLAN,
    ERROR_FIX_PLAN,
    SNAPSHOT_INCOMPLETE_FIX_PLAN,
    FixPlanItem,
    dedupe_fix_plan_by_intent,
    generate_fix_plan,
    generate_weaknesses,
)
from defaultanswer.fixes.prioritizer import (
    FixDecision,
    decide_what_to_fix_first,
    select_dominant_fix,
)
from defaultanswer.scoring.calculator import BreakdownItem, CategoryScorer
from defaultanswer.scoring.delta import CompareDiff, compute_diff
from defaultanswer.scoring.readiness import (
    EXPLANATION_INCOMPLETE,
    AnalysisStatus,
    ReadinessClassification,
    classify_readiness,
)
from defaultanswer.scoring.reasoning import ReasoningBullet, count_negative, generate_reasoning
from defaultanswer.scoring.rubric import Category

logger = structlog.get_logger(__name__)

BLOCKED_STATUS_CODES = frozenset({403, 429})
TIMEOUT_ERROR_RE = re.compile(r"abort|timeout|timed out", re.IGNORECASE)
DNS_ERROR_RE = re.compile(r"ENOTFOUND|dns|name or service not known", re.IGNORECASE)

UNAVAILABLE_LABEL = "Analysis unavailable"
INCOMPLETE_LABEL = "Snapshot incomplete"
BLOCKED_WEAKNESS = "Unable to analyze page, fetch was blocked."
ERROR_WEAKNESS = "Unable to analyze page, fetch failed or the site was unavailable."


class FetchErrorType(StrEnum):
    """Why the page-fetch collaborator could not deliver a usable page."""

    BLOCKED = "blocked"
    TIMEOUT = "timeout"
    DNS = "dns"
    INVALID_URL = "invalid_url"
    UNKNOWN = "unknown"


def classify_fetch_status(status_code: int | None) -> FetchErrorType:
    if status_code in BLOCKED_STATUS_CODES:
        return FetchErrorType.BLOCKED
    return FetchErrorType.UNKNOWN


def classify_fetch_error(message: str | None) -> FetchErrorType:
    text = message or ""
    if TIMEOUT_ERROR_RE.search(text):
        return FetchErrorType.TIMEOUT
    if DNS_ERROR_RE.search(text):
        return FetchErrorType.DNS
    return FetchErrorType.UNKNOWN


@dataclass(frozen=True)
class FetchDiagnostics:
    """What the fetch collaborator reported about acquiring the snapshot."""

    status_code: int | None = None
    error_type: FetchErrorType | None = None
    error_message: str | None = None
    byte_count: int | None = None
    fetched_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "status_code": self.status_code,
            "error_type": self.error_type.value if self.error_type else None,
            "error_message": self.error_message,
            "byte_count": self.byte_count,
            "fetched_at": self.fetched_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FetchDiagnostics":
        error_type = data.get("error_type")
        return cls(
            status_code=data.get("status_code"),
            error_type=FetchErrorType(error_type) if error_type else None,
            error_message=data.get("error_message"),
            byte_count=data.get("byte_count"),
            fetched_at=data.get("fetched_at"),
        )


@dataclass(frozen=True)
class PageSnapshot:
    """Markup plus fetch metadata handed over by the page-fetch collaborator."""

    url: str
    html: str = ""
    status_code: int | None = 200
    error: str | None = None
    byte_count: int | None = None
    fetched_at: datetime | None = None

    @property
    def size(self) -> int:
        if self.byte_count is not None:
            return self.byte_count
        return len(self.html.encode("utf-8"))

    @property
    def http_ok(self) -> bool:
        return self.status_code is None or 200 <= self.status_code < 400

    def diagnostics(self, error_type: FetchErrorType | None = None) -> FetchDiagnostics:
        return FetchDiagnostics(
            status_code=self.status_code,
            error_type=error_type,
            error_message=self.error,
            byte_count=self.size,
            fetched_at=self.fetched_at.isoformat() if self.fetched_at else None,
        )


@dataclass(frozen=True)
class AnalysisResult:
    """Everything the report renders for one analysis."""

    score: int
    breakdown: tuple[BreakdownItem, ...]
    weaknesses: tuple[str, ...]
    fix_plan: tuple[FixPlanItem, ...]
    signals: ExtractedSignals
    reasoning: tuple[ReasoningBullet, ...] = ()
    status: AnalysisStatus = AnalysisStatus.OK
    snapshot_quality: SnapshotQuality = SnapshotQuality.OK
    fetch_diagnostics: FetchDiagnostics | None = None

    @property
    def is_usable(self) -> bool:
        return self.status == AnalysisStatus.OK and self.score >= 0

    @property
    def negative_reasoning_count(self) -> int:
        return count_negative(list(self.reasoning))

    def readiness(self) -> ReadinessClassification:
        status_code = self.fetch_diagnostics.status_code if self.fetch_diagnostics else None
        return classify_readiness(
            self.score,
            self.negative_reasoning_count,
            status=self.status,
            fetch_status_code=status_code,
        )

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "status": self.status.value,
            "snapshot_quality": self.snapshot_quality.value,
            "breakdown": [item.to_dict() for item in self.breakdown],
            "weaknesses": list(self.weaknesses),
            "fix_plan": [item.to_dict() for item in self.fix_plan],
            "reasoning": [bullet.to_dict() for bullet in self.reasoning],
            "signals": self.signals.to_dict(),
            "fetch_diagnostics": (
                self.fetch_diagnostics.to_dict() if self.fetch_diagnostics else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisResult":
        diagnostics = data.get("fetch_diagnostics")
        return cls(
            score=int(data["score"]),
            breakdown=tuple(BreakdownItem.from_dict(item) for item in data.get("breakdown", [])),
            weaknesses=tuple(data.get("weaknesses") or ()),
            fix_plan=tuple(FixPlanItem.from_dict(item) for item in data.get("fix_plan", [])),
            signals=ExtractedSignals.from_dict(data["signals"]),
            reasoning=tuple(ReasoningBullet.from_dict(b) for b in data.get("reasoning", [])),
            status=AnalysisStatus(data.get("status", AnalysisStatus.OK.value)),
            snapshot_quality=SnapshotQuality(
                data.get("snapshot_quality", SnapshotQuality.OK.value)
            ),
            fetch_diagnostics=FetchDiagnostics.from_dict(diagnostics) if diagnostics else None,
        )

    def show_the_math(self) -> str:
        """Generate human-readable calculation breakdown."""
        lines = [
            "=" * 60,
            f"RECOMMENDATION READINESS: {self.signals.url}",
            "=" * 60,
            "",
            f"Status: {self.status.value} (snapshot {self.snapshot_quality.value})",
            "",
        ]

        current = None
        for item in self.breakdown:
            if item.category != current:
                current = item.category
                lines.append(f"{current}:")
            lines.append(f"  {item.label}: {item.points}/{item.max_points}")
            lines.append(f"    {item.reason}")

        if self.reasoning:
            lines.extend(["", "Reasoning:"])
            for bullet in self.reasoning:
                lines.append(f"  [{bullet.impact.value}] {bullet.signal}")

        if self.fix_plan:
            lines.extend(["", "Fix plan:"])
            for fix in self.fix_plan:
                lines.append(f"  ({fix.priority.value}) {fix.action}")

        lines.extend(["", "-" * 60, f"SCORE: {self.score}/100", "=" * 60])
        return "\n".join(lines)


def _error_item(label: str, reason: str) -> BreakdownItem:
    return BreakdownItem(
        label=label, points=0, max_points=100, reason=reason, category=Category.ERROR.value
    )


def _unavailable_reason(reason: str) -> str:
    return f"Could not fetch or analyze the page ({reason})"


def build_blocked_analysis(
    url: str, reason: str, diagnostics: FetchDiagnostics | None = None
) -> AnalysisResult:
    """Sentinel analysis for a fetch the site refused."""
    return AnalysisResult(
        score=SCORE_UNAVAILABLE,
        breakdown=(_error_item(UNAVAILABLE_LABEL, _unavailable_reason(reason)),),
        weaknesses=(BLOCKED_WEAKNESS,),
        fix_plan=BLOCKED_FIX_PLAN,
        signals=ExtractedSignals.empty(url),
        status=AnalysisStatus.BLOCKED,
        fetch_diagnostics=diagnostics,
    )


def build_error_analysis(
    url: str, reason: str, diagnostics: FetchDiagnostics | None = None
) -> AnalysisResult:
    """Sentinel analysis for a fetch or analysis failure."""
    blocked = diagnostics is not None and diagnostics.error_type == FetchErrorType.BLOCKED
    return AnalysisResult(
        score=SCORE_UNAVAILABLE,
        breakdown=(_error_item(UNAVAILABLE_LABEL, _unavailable_reason(reason)),),
        weaknesses=(ERROR_WEAKNESS,),
        fix_plan=ERROR_FIX_PLAN,
        signals=ExtractedSignals.empty(url),
        status=AnalysisStatus.BLOCKED if blocked else AnalysisStatus.ERROR,
        fetch_diagnostics=diagnostics,
    )


def build_snapshot_incomplete_analysis(
    signals: ExtractedSignals,
    quality: SnapshotQuality,
    diagnostics: FetchDiagnostics | None = None,
) -> AnalysisResult:
    """Sentinel analysis for a thin or script-rendered snapshot; extracted signals are kept."""
    return AnalysisResult(
        score=SCORE_SNAPSHOT_INCOMPLETE,
        breakdown=(_error_item(INCOMPLETE_LABEL, EXPLANATION_INCOMPLETE),),
        weaknesses=(EXPLANATION_INCOMPLETE,),
        fix_plan=SNAPSHOT_INCOMPLETE_FIX_PLAN,
        signals=signals,
        status=AnalysisStatus.SNAPSHOT_INCOMPLETE,
        snapshot_quality=quality,
        fetch_diagnostics=diagnostics,
    )


def score_signals(
    signals: ExtractedSignals,
    snapshot_quality: SnapshotQuality = SnapshotQuality.OK,
    diagnostics: FetchDiagnostics | None = None,
) -> AnalysisResult:
    """
    Score already-extracted signals.

    Returns an error analysis instead of raising if anything fails.
    """
    try:
        score = CategoryScorer().score(signals)
        breakdown = list(score.breakdown)
        fix_plan = dedupe_fix_plan_by_intent(generate_fix_plan(breakdown, signals))
        return AnalysisResult(
            score=score.score,
            breakdown=score.breakdown,
            weaknesses=tuple(generate_weaknesses(breakdown)),
            fix_plan=tuple(fix_plan),
            signals=signals,
            reasoning=tuple(generate_reasoning(signals, breakdown)),
            snapshot_quality=snapshot_quality,
            fetch_diagnostics=diagnostics,
        )
    except Exception as e:
        logger.warning("analysis_failed", url=signals.url, error=str(e))
        return build_error_analysis(signals.url, str(e), diagnostics)


def analyze_html(html: str, url: str) -> AnalysisResult:
    """
    Score a snapshot that is known to be usable.

    The snapshot quality gate is not applied; use analyze_snapshot for
    raw fetch results.
    """
    signals = SignalExtractor().extract(html, url)
    return score_signals(signals)


def _gate_snapshot(
    snapshot: PageSnapshot,
) -> AnalysisResult | tuple[ExtractedSignals, FetchDiagnostics]:
    url = normalize_url(snapshot.url)

    if not is_valid_url(snapshot.url):
        diagnostics = snapshot.diagnostics(FetchErrorType.INVALID_URL)
        return build_error_analysis(url or snapshot.url, "Invalid URL", diagnostics)

    if snapshot.error:
        error_type = classify_fetch_error(snapshot.error)
        logger.warning("fetch_failed", url=url, error=snapshot.error, error_type=error_type.value)
        return build_error_analysis(url, snapshot.error, snapshot.diagnostics(error_type))

    if not snapshot.http_ok:
        error_type = classify_fetch_status(snapshot.status_code)
        diagnostics = snapshot.diagnostics(error_type)
        reason = f"HTTP {snapshot.status_code}"
        logger.warning("fetch_failed", url=url, status_code=snapshot.status_code)
        if error_type == FetchErrorType.BLOCKED:
            return build_blocked_analysis(url, reason, diagnostics)
        return build_error_analysis(url, reason, diagnostics)

    return SignalExtractor().extract(snapshot.html, url), snapshot.diagnostics()


def analyze_snapshot(snapshot: PageSnapshot) -> AnalysisResult:
    """
    Analyze a raw fetch result.

    Fetch failures and HTTP errors become blocked/error analyses; a thin
    or script-rendered snapshot becomes a snapshot_incomplete analysis.
    Everything else is scored.
    """
    gated = _gate_snapshot(snapshot)
    if isinstance(gated, AnalysisResult):
        return gated

    signals, diagnostics = gated
    quality = classify_snapshot_quality(snapshot.html, snapshot.size)
    if quality != SnapshotQuality.OK:
        logger.info("snapshot_incomplete", url=signals.url, quality=quality.value)
        return build_snapshot_incomplete_analysis(signals, quality, diagnostics)

    result = score_signals(signals, quality, diagnostics)
    logger.info(
        "snapshot_analyzed", url=signals.url, score=result.score, status=result.status.value
    )
    return result


def analyze_site(pages: list[PageSnapshot]) -> AnalysisResult:
    """
    Analyze a homepage together with secondary pages of the same site.

    The homepage goes through the full snapshot gate. Secondary pages that
    failed to fetch are skipped; the rest contribute their signals to the
    merged record that gets scored.

    Raises:
        ValueError: If no pages are given
    """
    if not pages:
        raise ValueError("At least one page (the homepage) is required")

    homepage, *others = pages
    gated = _gate_snapshot(homepage)
    if isinstance(gated, AnalysisResult):
        return gated

    home_signals, diagnostics = gated
    quality = classify_snapshot_quality(homepage.html, homepage.size)
    if quality != SnapshotQuality.OK:
        return build_snapshot_incomplete_analysis(home_signals, quality, diagnostics)

    extractor = SignalExtractor()
    page_signals = [home_signals]
    for page in others:
        if page.error or not page.http_ok or not page.html:
            logger.debug("page_skipped", url=page.url, status_code=page.status_code)
            continue
        page_signals.append(extractor.extract(page.html, normalize_url(page.url)))

    merged = merge_page_signals(page_signals)
    return score_signals(merged, quality, diagnostics)


@dataclass(frozen=True)
class ReadinessReport:
    """Analysis plus the verdicts derived from it."""

    analysis: AnalysisResult
    readiness: ReadinessClassification
    dominant_fix: FixPlanItem | None = None
    decision: FixDecision | None = field(default=None)

    def to_dict(self) -> dict:
        return {
            "analysis": self.analysis.to_dict(),
            "readiness": self.readiness.to_dict(),
            "dominant_fix": self.dominant_fix.to_dict() if self.dominant_fix else None,
            "decision": self.decision.to_dict() if self.decision else None,
        }

    def show_the_math(self) -> str:
        lines = [self.analysis.show_the_math(), ""]
        lines.append(f"READINESS: {self.readiness.label}")
        lines.append(f"  {self.readiness.explanation}")
        if self.dominant_fix:
            lines.append(f"FIX FIRST: {self.dominant_fix.action}")
        return "\n".join(lines)


def build_readiness_report(analysis: AnalysisResult) -> ReadinessReport:
    """Derive readiness, the dominant fix, and the lead decision for an analysis."""
    readiness = analysis.readiness()
    fix_plan = list(analysis.fix_plan)
    report = ReadinessReport(
        analysis=analysis,
        readiness=readiness,
        dominant_fix=select_dominant_fix(
            fix_plan, analysis.breakdown, list(analysis.reasoning)
        ),
        decision=decide_what_to_fix_first(
            fix_plan, analysis.score, readiness.state, analysis.signals
        ),
    )

    logger.info(
        "readiness_report_built",
        url=analysis.signals.url,
        score=analysis.score,
        readiness=readiness.state.value,
    )
    return report


def run_readiness_check(snapshot: PageSnapshot) -> ReadinessReport:
    """Analyze a snapshot and derive its readiness report."""
    return build_readiness_report(analyze_snapshot(snapshot))


def compare_analyses(a: AnalysisResult, b: AnalysisResult) -> CompareDiff:
    """Diff two analyses (your site as A, a competitor or a newer scan as B)."""
    return compute_diff(a, b)
