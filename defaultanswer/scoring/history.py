"""Scan history records and scan-to-scan diffs.

A ScanRecord is the persisted, normalized shape of one analysis. Its hash
covers only the scoring-relevant parts (score, status, breakdown and
presence signals), so two scans of an unchanged page hash identically
even when evidence wording shifts.
"""

import hashlib
import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import structlog

from defaultanswer.extraction.url import extract_domain
from defaultanswer.scoring.calculator import BreakdownItem

logger = structlog.get_logger(__name__)

BREAKDOWN_CHANGES_LIMIT = 5
MAX_CHIPS = 3
SCORE_CHIP_THRESHOLD = 5

TRACKED_SIGNALS = ("has_faq", "has_schema", "has_pricing", "has_about", "has_contact")


@dataclass(frozen=True)
class ScanSignals:
    """Presence flags tracked across scans."""

    has_faq: bool = False
    has_schema: bool = False
    has_pricing: bool = False
    has_about: bool = False
    has_contact: bool = False
    schema_types: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "has_faq": self.has_faq,
            "has_schema": self.has_schema,
            "has_pricing": self.has_pricing,
            "has_about": self.has_about,
            "has_contact": self.has_contact,
            "schema_types": list(self.schema_types),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScanSignals":
        return cls(
            has_faq=bool(data.get("has_faq")),
            has_schema=bool(data.get("has_schema")),
            has_pricing=bool(data.get("has_pricing")),
            has_about=bool(data.get("has_about")),
            has_contact=bool(data.get("has_contact")),
            schema_types=tuple(data.get("schema_types") or ()),
        )


@dataclass(frozen=True)
class ScanEvidence:
    """Content excerpts compared between scans."""

    title_text: str | None = None
    h1_text: str | None = None
    meta_description: str | None = None
    pricing_evidence: str | None = None
    schema_types: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "title_text": self.title_text,
            "h1_text": self.h1_text,
            "meta_description": self.meta_description,
            "pricing_evidence": self.pricing_evidence,
            "schema_types": list(self.schema_types),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScanEvidence":
        return cls(
            title_text=data.get("title_text"),
            h1_text=data.get("h1_text"),
            meta_description=data.get("meta_description"),
            pricing_evidence=data.get("pricing_evidence"),
            schema_types=tuple(data.get("schema_types") or ()),
        )


@dataclass(frozen=True)
class ScanRecord:
    """Persisted shape of one analysis."""

    url: str
    domain: str
    score: int
    readiness: str
    breakdown: tuple[BreakdownItem, ...]
    signals: ScanSignals
    evidence: ScanEvidence
    snapshot_quality: str
    hash: str
    canonical_url: str | None = None
    fetch_status: int | None = None

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "domain": self.domain,
            "canonical_url": self.canonical_url,
            "score": self.score,
            "readiness": self.readiness,
            "breakdown": [item.to_dict() for item in self.breakdown],
            "signals": self.signals.to_dict(),
            "evidence": self.evidence.to_dict(),
            "snapshot_quality": self.snapshot_quality,
            "fetch_status": self.fetch_status,
            "hash": self.hash,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScanRecord":
        return cls(
            url=data["url"],
            domain=data.get("domain") or extract_domain(data["url"]),
            canonical_url=data.get("canonical_url"),
            score=int(data["score"]),
            readiness=data.get("readiness", "ok"),
            breakdown=tuple(BreakdownItem.from_dict(item) for item in data.get("breakdown", [])),
            signals=ScanSignals.from_dict(data.get("signals") or {}),
            evidence=ScanEvidence.from_dict(data.get("evidence") or {}),
            snapshot_quality=data.get("snapshot_quality", "ok"),
            fetch_status=data.get("fetch_status"),
            hash=data.get("hash", ""),
        )


@dataclass(frozen=True)
class BreakdownChange:
    """A check whose points moved between scans."""

    label: str
    category: str
    delta: int
    a_points: int
    b_points: int
    max_points: int

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "category": self.category,
            "delta": self.delta,
            "a_points": self.a_points,
            "b_points": self.b_points,
            "max": self.max_points,
        }


@dataclass(frozen=True)
class SignalChanges:
    gained: tuple[str, ...] = ()
    lost: tuple[str, ...] = ()
    schema_added: tuple[str, ...] = ()
    schema_removed: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "gained": list(self.gained),
            "lost": list(self.lost),
            "schema_added": list(self.schema_added),
            "schema_removed": list(self.schema_removed),
        }


@dataclass(frozen=True)
class ScanDiff:
    """What changed between two scans of the same site."""

    changed: bool
    score_delta: int = 0
    readiness_changed: bool = False
    signal_changes: SignalChanges = field(default_factory=SignalChanges)
    breakdown_changes: tuple[BreakdownChange, ...] = ()
    content_changes: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "changed": self.changed,
            "score_delta": self.score_delta,
            "readiness_changed": self.readiness_changed,
            "signal_changes": self.signal_changes.to_dict(),
            "breakdown_changes": [c.to_dict() for c in self.breakdown_changes],
            "content_changes": list(self.content_changes),
        }


class ChipTone(StrEnum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class DeltaChip:
    label: str
    tone: ChipTone

    def to_dict(self) -> dict:
        return {"label": self.label, "tone": self.tone.value}


@dataclass(frozen=True)
class ScanDelta:
    """Compact "since last scan" summary."""

    score_delta: int
    readiness_changed: bool
    chips: tuple[DeltaChip, ...]
    summary_line: str

    def to_dict(self) -> dict:
        return {
            "score_delta": self.score_delta,
            "readiness_changed": self.readiness_changed,
            "chips": [chip.to_dict() for chip in self.chips],
            "summary_line": self.summary_line,
        }


def compute_scan_hash(payload: dict[str, Any]) -> str:
    """SHA-256 over a canonical JSON rendering of the payload."""
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def _breakdown_key(item: BreakdownItem) -> str:
    return f"{item.category}::{item.label}"


def build_scan_record(url: str, analysis: Any) -> ScanRecord:
    """
    Normalize an AnalysisResult into a ScanRecord.

    Args:
        url: URL the scan was requested for
        analysis: AnalysisResult from the pipeline

    Returns:
        ScanRecord with a content hash
    """
    signals = analysis.signals
    breakdown = tuple(sorted(analysis.breakdown, key=_breakdown_key))
    schema_types = tuple(sorted(signals.schema_types))
    readiness = analysis.status.value

    scan_signals = ScanSignals(
        has_faq=signals.has_faq,
        has_schema=signals.has_structured_data,
        has_pricing=signals.has_pricing,
        has_about=signals.has_about,
        has_contact=signals.has_contact_signals,
        schema_types=schema_types,
    )
    digest = compute_scan_hash(
        {
            "score": analysis.score,
            "readiness": readiness,
            "breakdown": [item.to_dict() for item in breakdown],
            "signals": scan_signals.to_dict(),
        }
    )

    pricing_evidence = signals.evidence.pricing_evidence
    diagnostics = analysis.fetch_diagnostics
    return ScanRecord(
        url=url,
        domain=signals.domain or extract_domain(url),
        canonical_url=signals.canonical_url or None,
        score=analysis.score,
        readiness=readiness,
        breakdown=breakdown,
        signals=scan_signals,
        evidence=ScanEvidence(
            title_text=signals.title,
            h1_text=signals.h1s[0] if signals.h1s else None,
            meta_description=signals.meta_description,
            pricing_evidence=pricing_evidence[0] if pricing_evidence else None,
            schema_types=schema_types,
        ),
        snapshot_quality=analysis.snapshot_quality.value,
        fetch_status=diagnostics.status_code if diagnostics else None,
        hash=digest,
    )


def _breakdown_changes(
    a: tuple[BreakdownItem, ...], b: tuple[BreakdownItem, ...]
) -> list[BreakdownChange]:
    map_a = {_breakdown_key(item): item for item in a}
    map_b = {_breakdown_key(item): item for item in b}

    changes = []
    for key in dict.fromkeys([*map_a, *map_b]):
        a_item = map_a.get(key)
        b_item = map_b.get(key)
        a_points = a_item.points if a_item else 0
        b_points = b_item.points if b_item else 0
        if a_points == b_points:
            continue
        source = a_item or b_item
        changes.append(
            BreakdownChange(
                label=source.label,
                category=source.category,
                delta=b_points - a_points,
                a_points=a_points,
                b_points=b_points,
                max_points=source.max_points,
            )
        )

    changes.sort(key=lambda change: abs(change.delta), reverse=True)
    return changes[:BREAKDOWN_CHANGES_LIMIT]


def diff_scans(prev: ScanRecord | None, curr: ScanRecord) -> ScanDiff:
    """
    Compare a scan with the previous scan of the same site.

    With no previous scan everything counts as changed and all deltas are
    empty.
    """
    if prev is None:
        return ScanDiff(changed=True)

    gained = []
    lost = []
    for name in TRACKED_SIGNALS:
        before = getattr(prev.signals, name)
        after = getattr(curr.signals, name)
        if before != after:
            (gained if after else lost).append(name)

    prev_types = set(prev.signals.schema_types)
    curr_types = set(curr.signals.schema_types)

    content_changes = []
    if (prev.evidence.title_text or "") != (curr.evidence.title_text or ""):
        content_changes.append("Title changed")
    if (prev.evidence.h1_text or "") != (curr.evidence.h1_text or ""):
        content_changes.append("H1 changed")
    if (prev.evidence.meta_description or "") != (curr.evidence.meta_description or ""):
        content_changes.append("Meta description changed")

    diff = ScanDiff(
        changed=prev.hash != curr.hash,
        score_delta=curr.score - prev.score,
        readiness_changed=prev.readiness != curr.readiness,
        signal_changes=SignalChanges(
            gained=tuple(gained),
            lost=tuple(lost),
            schema_added=tuple(t for t in curr.signals.schema_types if t not in prev_types),
            schema_removed=tuple(t for t in prev.signals.schema_types if t not in curr_types),
        ),
        breakdown_changes=tuple(_breakdown_changes(prev.breakdown, curr.breakdown)),
        content_changes=tuple(content_changes),
    )

    logger.debug(
        "scans_diffed",
        domain=curr.domain,
        changed=diff.changed,
        score_delta=diff.score_delta,
    )
    return diff


def _format_delta(value: int) -> str:
    return f"+{value}" if value >= 0 else str(value)


def _toggle_chip(now: bool, on_label: str, off_label: str) -> DeltaChip:
    if now:
        return DeltaChip(on_label, ChipTone.POSITIVE)
    return DeltaChip(off_label, ChipTone.NEGATIVE)


def compute_scan_delta(current: ScanRecord, previous: ScanRecord) -> ScanDelta:
    """Headline chips for the change since the previous scan (at most three)."""
    score_delta = current.score - previous.score
    chips: list[DeltaChip] = []

    toggles = (
        ("has_pricing", "Pricing now visible", "Pricing no longer visible"),
        ("has_schema", "Schema added", "Schema removed"),
        ("has_faq", "FAQ added", "FAQ removed"),
    )
    for name, on_label, off_label in toggles:
        now = getattr(current.signals, name)
        if now != getattr(previous.signals, name) and len(chips) < MAX_CHIPS:
            chips.append(_toggle_chip(now, on_label, off_label))

    if len(chips) < MAX_CHIPS:
        if score_delta >= SCORE_CHIP_THRESHOLD:
            chips.append(DeltaChip("Score improved", ChipTone.POSITIVE))
        elif score_delta <= -SCORE_CHIP_THRESHOLD:
            chips.append(DeltaChip("Score dropped", ChipTone.NEGATIVE))

    return ScanDelta(
        score_delta=score_delta,
        readiness_changed=current.readiness != previous.readiness,
        chips=tuple(chips),
        summary_line=f"Since last scan: Score {_format_delta(score_delta)}",
    )
